"""Backend route registry.

One source of truth per backend route. Every entry is a literal path except
``students.list_by_class``, the single route whose path embeds caller data;
it percent-encodes the identifier before interpolation.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

API_PREFIX = "/api/v1"
API_GET_PREFIX = f"{API_PREFIX}/get"
API_POST_PREFIX = f"{API_PREFIX}/post"

# Left unescaped in addition to alphanumerics and -_.~ ; "/" is always escaped
_URI_COMPONENT_SAFE = "!*'()"


def encode_path_value(value: object) -> str:
    """Percent-encode a single path or query value."""
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


@dataclass(frozen=True)
class ClassEndpoints:
    list: str = f"{API_GET_PREFIX}/all-classes"
    create: str = f"{API_POST_PREFIX}/add-class"
    update: str = f"{API_POST_PREFIX}/update-class"


@dataclass(frozen=True)
class SubjectEndpoints:
    list: str = f"{API_GET_PREFIX}/subjects-of-a-class"
    create: str = f"{API_POST_PREFIX}/add-subject"


@dataclass(frozen=True)
class TeacherEndpoints:
    list: str = f"{API_GET_PREFIX}/all-teachers"
    create: str = f"{API_POST_PREFIX}/add-teacher"


@dataclass(frozen=True)
class StudentEndpoints:
    list_all: str = f"{API_GET_PREFIX}/all-students"
    create: str = f"{API_POST_PREFIX}/add-student"

    @staticmethod
    def list_by_class(class_id: object) -> str:
        return f"{API_GET_PREFIX}/all-students-of-a-class?class_id={encode_path_value(class_id)}"


@dataclass(frozen=True)
class ExamEndpoints:
    list: str = f"{API_GET_PREFIX}/exams-of-a-class"
    create: str = f"{API_POST_PREFIX}/add-exam"


@dataclass(frozen=True)
class AssignmentEndpoints:
    create: str = f"{API_POST_PREFIX}/add-teacher-assignment"


@dataclass(frozen=True)
class TeacherPortalEndpoints:
    login: str = f"{API_PREFIX}/mobile/login"
    classes: str = f"{API_GET_PREFIX}/catt"
    subjects: str = f"{API_GET_PREFIX}/soat"
    students: str = f"{API_GET_PREFIX}/students-of-a-class"


@dataclass(frozen=True)
class ResultEndpoints:
    upsert: str = f"{API_POST_PREFIX}/add-result"
    public: str = f"{API_GET_PREFIX}/results-of-a-student"


@dataclass(frozen=True)
class DebugEndpoints:
    data: str = f"{API_GET_PREFIX}/all-management-data"


@dataclass(frozen=True)
class Endpoints:
    """Logical route groups for the school backend."""

    classes: ClassEndpoints = ClassEndpoints()
    subjects: SubjectEndpoints = SubjectEndpoints()
    teachers: TeacherEndpoints = TeacherEndpoints()
    students: StudentEndpoints = StudentEndpoints()
    exams: ExamEndpoints = ExamEndpoints()
    assignments: AssignmentEndpoints = AssignmentEndpoints()
    teacher: TeacherPortalEndpoints = TeacherPortalEndpoints()
    results: ResultEndpoints = ResultEndpoints()
    debug: DebugEndpoints = DebugEndpoints()


endpoints = Endpoints()
