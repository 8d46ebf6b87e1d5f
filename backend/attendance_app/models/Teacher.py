from attendance_app.extensions import db


class Teacher(db.Model):
    __tablename__ = 'teachers'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    name = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(100), nullable=True)

    user = db.relationship('User', back_populates='teacher')
