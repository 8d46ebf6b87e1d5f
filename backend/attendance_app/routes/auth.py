from flask import Blueprint, request, jsonify
from flask_jwt_extended import create_access_token
from attendance_app.accounts import authenticate
from attendance_app.extensions import limiter
from utils.audit import log_event
from utils.decorators import role_required
from utils.serialization import to_dict

auth_bp = Blueprint('auth', __name__)


def _user_payload(user):
    profile = user.profile
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "name": profile.name if profile else None,
        "details": to_dict(profile),
    }


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip()
    password = data.get('password') or ''
    ip = request.remote_addr

    if not email or not password:
        return jsonify({"error": "Please provide email and password"}), 400

    user = authenticate(email, password)
    if not user:
        log_event("LOGIN_FAILED", ip=ip, description=f"Failed login attempt for {email}")
        return jsonify({"error": "Invalid credentials"}), 400

    payload = _user_payload(user)
    token = create_access_token(
        identity=user.id,
        additional_claims={"role": payload["role"], "name": payload["name"]}
    )

    log_event("LOGIN_SUCCESS", user_id=user.id, ip=ip, description=f"{email} logged in")
    return jsonify({"token": token, "user": payload}), 200


@auth_bp.route('/me', methods=['GET'])
@role_required("TEACHER", "STUDENT")
def get_current_user(user):
    return jsonify(_user_payload(user)), 200
