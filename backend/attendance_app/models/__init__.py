from .User import User
from .Student import Student
from .Teacher import Teacher
from .AttendanceRecord import AttendanceRecord
from .AuditLog import AuditLog
from .base import RoleEnum, AttendanceStatus
