from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from attendance_app.extensions import db
from .base import RoleEnum, new_uuid


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(512), nullable=False)
    role = db.Column(db.Enum(RoleEnum, name="user_role"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    student = db.relationship('Student', back_populates='user', uselist=False, passive_deletes=True)
    teacher = db.relationship('Teacher', back_populates='user', uselist=False, passive_deletes=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def profile(self):
        """The Student or Teacher row owned by this account, if any."""
        if self.role == RoleEnum.STUDENT:
            return self.student
        if self.role == RoleEnum.TEACHER:
            return self.teacher
        return None
