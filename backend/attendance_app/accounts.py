from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from attendance_app.extensions import db
from attendance_app.errors import ConflictError, DuplicateEmailError, DuplicateRollNumberError
from attendance_app.models import User, Student, Teacher, RoleEnum


def student_code(student_pk, prefix="STD"):
    return f"{prefix}{student_pk:03d}"


def authenticate(email, password):
    user = User.query.filter_by(email=email).first()
    if user and user.check_password(password):
        return user
    return None


def _ensure_email_free(email):
    if User.query.filter_by(email=email).first():
        raise DuplicateEmailError(email)


def create_student(name, email, password, class_name, roll_no):
    """
    Create a STUDENT account and its Student profile in one transaction.

    The human-readable code is built from the student's primary key once the
    row is flushed, so it comes from the database sequence rather than a
    row count.
    """
    try:
        _ensure_email_free(email)

        if Student.query.filter_by(class_name=class_name, roll_no=roll_no).first():
            raise DuplicateRollNumberError(class_name, roll_no)

        user = User(email=email, role=RoleEnum.STUDENT)
        user.set_password(password)
        db.session.add(user)
        db.session.flush()

        student = Student(user_id=user.id, name=name, class_name=class_name, roll_no=roll_no)
        db.session.add(student)
        db.session.flush()

        student.student_id_code = student_code(
            student.id, current_app.config.get("STUDENT_CODE_PREFIX", "STD")
        )
        db.session.commit()
    except (ConflictError, SQLAlchemyError):
        db.session.rollback()
        raise

    return student


def create_teacher(name, email, password, subject=None):
    try:
        _ensure_email_free(email)

        user = User(email=email, role=RoleEnum.TEACHER)
        user.set_password(password)
        db.session.add(user)
        db.session.flush()

        teacher = Teacher(user_id=user.id, name=name, subject=subject)
        db.session.add(teacher)
        db.session.commit()
    except (ConflictError, SQLAlchemyError):
        db.session.rollback()
        raise

    return teacher


def set_password(email, password):
    """Re-hash the password of an existing account. Returns False if no such email."""
    user = User.query.filter_by(email=email).first()
    if not user:
        return False
    user.set_password(password)
    db.session.commit()
    return True
