from functools import wraps
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask import jsonify
from attendance_app.extensions import db
from attendance_app.models import User


def role_required(*allowed_roles):
    """
    Restrict access to users with specific roles.
    Usage: @role_required("TEACHER")

    The token is verified first, then resolved to a ``User`` that is handed
    to the view as the ``user`` keyword argument.
    """
    allowed_roles = set(role.upper() for role in allowed_roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user_id = get_jwt_identity()
            if not user_id:
                return jsonify({"error": "Missing or invalid JWT token"}), 401

            user = db.session.get(User, user_id)
            if not user:
                return jsonify({"error": "User not found"}), 401

            if user.role.value not in allowed_roles:
                return jsonify({"error": "Access forbidden: insufficient permissions"}), 403

            kwargs["user"] = user
            return fn(*args, **kwargs)
        return wrapper
    return decorator
