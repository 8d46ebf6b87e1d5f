from attendance_app.extensions import db


class Student(db.Model):
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    name = db.Column(db.String(255), nullable=False)
    class_name = db.Column(db.String(50), nullable=True, index=True)
    roll_no = db.Column(db.Integer, nullable=True)
    student_id_code = db.Column(db.String(50), unique=True, nullable=True)

    user = db.relationship('User', back_populates='student')
    attendance_records = db.relationship(
        'AttendanceRecord', back_populates='student',
        cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        db.UniqueConstraint('class_name', 'roll_no', name='uq_student_class_roll'),
    )
