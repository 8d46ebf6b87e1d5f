from flask import Blueprint, jsonify
from attendance_app import attendance
from utils.decorators import role_required

student_bp = Blueprint('student', __name__)


@student_bp.route('/dashboard', methods=['GET'])
@role_required("STUDENT")
def dashboard(user):
    student = user.student
    if not student:
        return jsonify({"error": "Student profile not found"}), 404

    return jsonify({
        "profile": {
            "name": student.name,
            "id_code": student.student_id_code,
            "class": student.class_name,
            "roll_no": student.roll_no,
        },
        "attendance_summary": attendance.student_summary(student),
    }), 200


@student_bp.route('/calendar', methods=['GET'])
@role_required("STUDENT")
def calendar(user):
    student = user.student
    if not student:
        return jsonify({"error": "Student not found"}), 404

    return jsonify(attendance.attendance_calendar(student)), 200
