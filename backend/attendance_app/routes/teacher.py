from datetime import datetime
from flask import Blueprint, request, jsonify, current_app
from attendance_app import attendance
from attendance_app.accounts import create_student
from attendance_app.models import Student
from utils.audit import log_event
from utils.decorators import role_required

teacher_bp = Blueprint('teacher', __name__)


def _parse_date(value):
    return datetime.strptime(value, '%Y-%m-%d').date()


@teacher_bp.route('/dashboard', methods=['GET'])
@role_required("TEACHER")
def dashboard(user):
    # "today" is the UTC calendar date
    totals = attendance.daily_totals(datetime.utcnow().date())
    return jsonify({
        "total_students": Student.query.count(),
        "present_today": totals["present"],
        "absent_today": totals["absent"],
    }), 200


@teacher_bp.route('/students/create', methods=['POST'])
@role_required("TEACHER")
def create_student_account(user):
    data = request.get_json(silent=True) or {}

    required_text = [
        ("name", "Name is required"),
        ("email", "Email is required"),
        ("password", "Password is required"),
        ("class_name", "Class is required"),
    ]
    for field, message in required_text:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            return jsonify({"error": message}), 400

    roll_value = data.get("roll_no")
    if roll_value is None or (isinstance(roll_value, str) and not roll_value.strip()):
        return jsonify({"error": "Roll number is required"}), 400

    try:
        roll_no = int(data["roll_no"])
    except (TypeError, ValueError):
        return jsonify({"error": "Roll number must be an integer"}), 400

    student = create_student(
        name=data["name"].strip(),
        email=data["email"].strip(),
        password=data["password"],
        class_name=data["class_name"].strip(),
        roll_no=roll_no,
    )

    log_event(
        "STUDENT_CREATED", user_id=user.id, ip=request.remote_addr,
        description=f"{student.student_id_code} in {student.class_name}"
    )
    return jsonify({
        "message": "Student created successfully",
        "studentIdCode": student.student_id_code
    }), 201


@teacher_bp.route('/attendance-sheet', methods=['GET'])
@role_required("TEACHER")
def attendance_sheet(user):
    date_str = request.args.get('date')
    if not date_str:
        return jsonify({"error": "Date required"}), 400

    try:
        day = _parse_date(date_str)
    except ValueError:
        return jsonify({"error": "Invalid date format, use YYYY-MM-DD"}), 400

    rows = attendance.attendance_sheet(day, request.args.get('class_name'))
    return jsonify(rows), 200


@teacher_bp.route('/attendance/bulk', methods=['POST'])
@role_required("TEACHER")
def mark_attendance_bulk(user):
    data = request.get_json(silent=True) or {}
    date_str = data.get('date')
    records = data.get('records')

    if not date_str or not isinstance(records, list):
        return jsonify({"error": "Invalid data"}), 400

    try:
        day = _parse_date(date_str)
    except ValueError:
        return jsonify({"error": "Invalid date format, use YYYY-MM-DD"}), 400

    if not all(isinstance(record, dict) for record in records):
        return jsonify({"error": "Invalid data"}), 400

    try:
        applied = attendance.bulk_upsert(day, records)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    log_event(
        "ATTENDANCE_BULK_SAVED", user_id=user.id, ip=request.remote_addr,
        description=f"{applied} record(s) for {day.isoformat()}"
    )
    return jsonify({"message": "Attendance updated"}), 200


@teacher_bp.route('/low-attendance', methods=['GET'])
@role_required("TEACHER")
def low_attendance(user):
    threshold = request.args.get(
        'threshold', current_app.config["LOW_ATTENDANCE_THRESHOLD"], type=float
    )
    students = attendance.low_attendance_list(
        threshold=threshold,
        exclude_holidays=current_app.config["ATTENDANCE_EXCLUDE_HOLIDAYS"],
    )
    return jsonify(students), 200


@teacher_bp.route('/monthly-report', methods=['GET'])
@role_required("TEACHER")
def monthly_report(user):
    month = request.args.get('month')
    year = request.args.get('year')

    if not month or not year:
        return jsonify({"error": "Month and Year are required"}), 400

    try:
        month = int(month)
        year = int(year)
        attendance.month_bounds(month, year)
    except ValueError:
        return jsonify({"error": "Invalid month or year"}), 400

    report = attendance.monthly_report(
        month, year,
        class_name=request.args.get('class_name'),
        exclude_holidays=current_app.config["ATTENDANCE_EXCLUDE_HOLIDAYS"],
    )
    return jsonify(report), 200
