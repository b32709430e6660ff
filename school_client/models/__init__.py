"""Public models for the school client."""

from school_client.models.requests import (
    AssignmentForm,
    ClassForm,
    ExamForm,
    LoginForm,
    PublicResultQuery,
    ResultForm,
    StudentForm,
    SubjectForm,
    TeacherForm,
    validate_form,
)
from school_client.models.responses import UnwrappedResponse, extract_list, with_message
from school_client.models.schemas import (
    ClassReference,
    ClassRoster,
    DashboardCounts,
    TeacherContext,
    TeacherSession,
)

__all__ = [
    "AssignmentForm",
    "ClassForm",
    "ClassReference",
    "ClassRoster",
    "DashboardCounts",
    "ExamForm",
    "LoginForm",
    "PublicResultQuery",
    "ResultForm",
    "StudentForm",
    "SubjectForm",
    "TeacherContext",
    "TeacherForm",
    "TeacherSession",
    "UnwrappedResponse",
    "extract_list",
    "validate_form",
    "with_message",
]
