"""In-memory views assembled by the service layer from backend records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TeacherSession:
    """A logged-in teacher."""

    id: str
    name: str | None = None
    email: str | None = None
    record: dict = field(default_factory=dict)  # Full login record
    message: str = ""

    @property
    def greeting(self) -> str:
        if self.message:
            return self.message
        first_name = (self.name or "").split(" ")[0] or "teacher"
        return f"Welcome back, {first_name}!"


@dataclass
class TeacherContext:
    """Classes a teacher is assigned to and the subjects taught in each."""

    classes: list[dict] = field(default_factory=list)  # [{id, name}], unique ids
    subjects_by_class: dict[str, list[dict]] = field(default_factory=dict)

    def subjects_for(self, class_id: str) -> list[dict]:
        return self.subjects_by_class.get(class_id, [])


@dataclass
class ClassRoster:
    """Students and exams of one class."""

    class_id: str
    students: list[dict] = field(default_factory=list)
    exams: list[dict] = field(default_factory=list)

    def find_student_by_roll_number(self, roll_number: str | int) -> dict | None:
        wanted = str(roll_number).strip()
        for student in self.students:
            value = student.get("roll_number")
            if value is not None and str(value).strip() == wanted:
                return student
        return None


@dataclass
class ClassReference(ClassRoster):
    """Roster of a class plus its subjects."""

    subjects: list[dict] = field(default_factory=list)


@dataclass
class DashboardCounts:
    classes: int = 0
    subjects: int = 0
    teachers: int = 0
    students: int = 0
    exams: int = 0
    assignments: int = 0
    results: int = 0
