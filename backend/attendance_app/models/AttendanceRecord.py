from attendance_app.extensions import db
from .base import AttendanceStatus


class AttendanceRecord(db.Model):
    __tablename__ = 'attendance'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    date = db.Column(db.Date, nullable=False)
    status = db.Column(db.Enum(AttendanceStatus, name="attendance_status"), nullable=False)

    student = db.relationship('Student', back_populates='attendance_records')

    # upserts are keyed on this constraint
    __table_args__ = (
        db.UniqueConstraint('student_id', 'date', name='unique_attendance'),
    )
