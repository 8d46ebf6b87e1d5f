import enum
import uuid


def new_uuid():
    return str(uuid.uuid4())


class RoleEnum(enum.Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"


class AttendanceStatus(enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    HOLIDAY = "HOLIDAY"
