from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from attendance_app.extensions import db

base_bp = Blueprint("base", __name__)

@base_bp.route("/")
def home():
    return jsonify({"message": "School Attendance API running"})

@base_bp.route("/test-db")
def test_db():
    try:
        solution = db.session.execute(text("SELECT 1 + 1")).scalar()
        return jsonify({"message": "Database connected", "solution": solution})
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Database connection check failed")
        return jsonify({"error": "Database connection failed"}), 500
