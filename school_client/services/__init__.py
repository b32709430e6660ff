"""Service layer: administrative operations, teacher portal and dashboard."""

from school_client.services import dashboard
from school_client.services.school_service import SchoolService
from school_client.services.teacher_portal import TeacherPortal

__all__ = ["SchoolService", "TeacherPortal", "dashboard"]
