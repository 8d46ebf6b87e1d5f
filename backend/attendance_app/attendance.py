"""
Attendance statistics derived from the per-date ``attendance`` rows.

Every report the teacher and student dashboards show is computed here so the
route handlers only parse input and shape JSON.
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import and_, case, cast, func, Float
from sqlalchemy.exc import SQLAlchemyError
from attendance_app.extensions import db
from attendance_app.models import AttendanceRecord, AttendanceStatus, Student, User

ALL_CLASSES = "All"
ONE_DECIMAL = Decimal("0.1")

STATUS_COLORS = {
    AttendanceStatus.PRESENT: "green",
    AttendanceStatus.ABSENT: "red",
    AttendanceStatus.HOLIDAY: "grey",
}


def format_percentage(present, total):
    """Return ``present / total`` as a percentage string with one decimal.

    Half-way values round up (1/16 gives ``"6.3"``) and a zero total yields
    ``"0.0"`` rather than raising.
    """
    if not total:
        return "0.0"
    percentage = Decimal(present * 100) / Decimal(total)
    return str(percentage.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def parse_status(value):
    """Map a raw status string (any case) onto ``AttendanceStatus``.

    Raises ValueError for anything that is not PRESENT, ABSENT or HOLIDAY.
    """
    if isinstance(value, AttendanceStatus):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid status: {value!r}")
    try:
        return AttendanceStatus(value.strip().upper())
    except ValueError:
        raise ValueError(f"Invalid status: {value}")


def month_bounds(month, year):
    """First day of the month and first day of the following month."""
    start = date(year, month, 1)
    end = date(year + (month // 12), month % 12 + 1, 1)
    return start, end


def _class_filter(class_name):
    if not class_name or class_name == ALL_CLASSES:
        return None
    return class_name


def _present_days():
    return func.coalesce(
        func.sum(case((AttendanceRecord.status == AttendanceStatus.PRESENT, 1), else_=0)), 0
    )


def _join_condition(exclude_holidays, *extra):
    conditions = [AttendanceRecord.student_id == Student.id, *extra]
    if exclude_holidays:
        conditions.append(AttendanceRecord.status != AttendanceStatus.HOLIDAY)
    return and_(*conditions)


def daily_totals(day):
    counts = dict(
        db.session.query(AttendanceRecord.status, func.count(AttendanceRecord.id))
        .filter(AttendanceRecord.date == day)
        .group_by(AttendanceRecord.status)
        .all()
    )
    # HOLIDAY rows are counted by the query but not reported
    return {
        "present": counts.get(AttendanceStatus.PRESENT, 0),
        "absent": counts.get(AttendanceStatus.ABSENT, 0),
    }


def attendance_sheet(day, class_name=None):
    query = (
        db.session.query(
            Student.id.label("student_id"),
            Student.name,
            Student.student_id_code,
            Student.class_name,
            Student.roll_no,
            AttendanceRecord.status,
        )
        .outerjoin(
            AttendanceRecord,
            and_(AttendanceRecord.student_id == Student.id, AttendanceRecord.date == day),
        )
    )

    class_name = _class_filter(class_name)
    if class_name:
        query = query.filter(Student.class_name == class_name)

    rows = query.order_by(Student.class_name, Student.roll_no.asc()).all()

    return [
        {
            "student_id": row.student_id,
            "name": row.name,
            "student_id_code": row.student_id_code,
            "class_name": row.class_name,
            "roll_no": row.roll_no,
            "status": row.status.value if row.status else None,
        }
        for row in rows
    ]


def bulk_upsert(day, records):
    """Insert or overwrite one status per student for ``day``.

    ``records`` is an iterable of ``{"student_id", "status"}`` mappings.
    Entries without a status are skipped, never deleted. Input is validated
    before the session is touched (ValueError); any storage failure rolls the
    whole batch back and re-raises.
    """
    entries = []
    for record in records:
        status = record.get("status")
        if not status:
            continue
        try:
            student_id = int(record.get("student_id"))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid student_id: {record.get('student_id')!r}")
        entries.append((student_id, parse_status(status)))

    try:
        for student_id, status in entries:
            existing = AttendanceRecord.query.filter_by(student_id=student_id, date=day).first()
            if existing:
                existing.status = status
            else:
                db.session.add(AttendanceRecord(student_id=student_id, date=day, status=status))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    return len(entries)


def low_attendance_list(threshold=75.0, exclude_holidays=False):
    total_days = func.count(AttendanceRecord.id)
    present_days = _present_days()

    rows = (
        db.session.query(
            Student.id.label("student_id"),
            Student.name,
            Student.class_name,
            Student.roll_no,
            User.email,
            total_days.label("total_days"),
            present_days.label("present_days"),
        )
        .outerjoin(User, Student.user_id == User.id)
        .outerjoin(AttendanceRecord, _join_condition(exclude_holidays))
        .group_by(Student.id, Student.name, Student.class_name, Student.roll_no, User.email)
        .having(and_(
            total_days > 0,
            cast(present_days, Float) * 100 / total_days < threshold,
        ))
        .order_by(Student.class_name, Student.roll_no)
        .all()
    )

    return [
        {
            "student_id": row.student_id,
            "name": row.name,
            "class_name": row.class_name,
            "roll_no": row.roll_no,
            "email": row.email,
            "total_days": int(row.total_days),
            "present_days": int(row.present_days),
            "percentage": format_percentage(int(row.present_days), int(row.total_days)),
        }
        for row in rows
    ]


def monthly_report(month, year, class_name=None, exclude_holidays=False):
    start, end = month_bounds(month, year)
    total_days = func.count(AttendanceRecord.id)
    present_days = _present_days()

    query = (
        db.session.query(
            Student.id.label("student_id"),
            Student.name,
            Student.roll_no,
            Student.class_name,
            total_days.label("total_days"),
            present_days.label("present_days"),
        )
        .outerjoin(
            AttendanceRecord,
            _join_condition(
                exclude_holidays,
                AttendanceRecord.date >= start,
                AttendanceRecord.date < end,
            ),
        )
    )

    class_name = _class_filter(class_name)
    if class_name:
        query = query.filter(Student.class_name == class_name)

    rows = (
        query.group_by(Student.id, Student.name, Student.roll_no, Student.class_name)
        .order_by(Student.class_name, Student.roll_no)
        .all()
    )

    report = []
    for row in rows:
        total = int(row.total_days or 0)
        present = int(row.present_days or 0)
        report.append({
            "student_id": row.student_id,
            "name": row.name,
            "roll_no": row.roll_no,
            "class_name": row.class_name,
            "total_days": total,
            "present_days": present,
            "percentage": format_percentage(present, total),
        })
    return report


def student_summary(student):
    counts = dict(
        db.session.query(AttendanceRecord.status, func.count(AttendanceRecord.id))
        .filter(AttendanceRecord.student_id == student.id)
        .group_by(AttendanceRecord.status)
        .all()
    )
    present = counts.get(AttendanceStatus.PRESENT, 0)
    absent = counts.get(AttendanceStatus.ABSENT, 0)
    total = present + absent

    return {
        "percentage": format_percentage(present, total),
        "total_present": present,
        "total_days": total,
    }


def attendance_calendar(student):
    records = (
        AttendanceRecord.query
        .filter_by(student_id=student.id)
        .order_by(AttendanceRecord.date.desc())
        .all()
    )
    return [
        {
            "date": record.date.isoformat(),
            "status": record.status.value,
            "color": STATUS_COLORS[record.status],
        }
        for record in records
    ]
