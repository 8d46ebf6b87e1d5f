from enum import Enum
from datetime import datetime, date
from sqlalchemy.inspection import inspect

HIDDEN_FIELDS = ("password_hash",)


def to_dict(model_instance, exclude=HIDDEN_FIELDS):
    if model_instance is None:
        return None

    output = {}
    mapper = inspect(model_instance.__class__)

    for column in mapper.columns:
        key = column.key
        if key in exclude:
            continue

        value = getattr(model_instance, key)

        if isinstance(value, Enum):
            output[key] = value.value
        elif isinstance(value, (datetime, date)):
            output[key] = value.isoformat()
        else:
            output[key] = value

    return output
