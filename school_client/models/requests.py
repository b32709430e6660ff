"""Pydantic form models for write operations and lookups.

Each model trims its string inputs and rejects missing values with a message
fit for display. ``to_payload()`` returns the JSON body sent to the backend.
"""

from __future__ import annotations

import math
import re
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from school_client.errors import FormValidationError
from school_client.security import hash_password

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
GLOBAL_SUBJECT_SCOPE = "global"

FormT = TypeVar("FormT", bound="BaseModel")


def _required_text(value: Any, message: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValueError(message)
    return text


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_marks(value: Any) -> int | float:
    """Parse a marks entry; integral values come back as ``int``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("Enter marks obtained")
    if isinstance(value, bool):
        raise ValueError("Marks must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("Marks must be a number") from None
    if not math.isfinite(number):
        raise ValueError("Marks must be a number")
    return int(number) if number.is_integer() else number


class RecordForm(BaseModel):
    """Create form whose record id may be chosen by the caller."""

    id: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id_is_none(cls, value: Any) -> str | None:
        return _optional_text(value)

    def to_payload(self) -> dict:
        payload = self.model_dump()
        if payload.get("id") is None:
            payload.pop("id", None)
        return payload


class ClassForm(RecordForm):
    name: str

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(value, "Class name is required")


class SubjectForm(RecordForm):
    """Subject scoped to a class; no class (or "global") means a global subject."""

    name: str
    class_id: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(value, "Subject name is required")

    @field_validator("class_id", mode="before")
    @classmethod
    def _global_scope_is_none(cls, value: Any) -> str | None:
        text = _optional_text(value)
        return None if text == GLOBAL_SUBJECT_SCOPE else text

    def to_payload(self) -> dict:
        payload = super().to_payload()
        if payload.get("class_id") is None:
            payload.pop("class_id", None)
        return payload


class TeacherForm(RecordForm):
    name: str
    email: str
    password: str = Field(repr=False)

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(value, "Teacher name is required")

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str:
        email = _required_text(value, "Email is required")
        if not EMAIL_PATTERN.match(email):
            raise ValueError("Provide a valid email address")
        return email.lower()

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, value: Any) -> str:
        if not value:
            raise ValueError("Password is required")
        if len(str(value)) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        return str(value)

    def to_payload(self) -> dict:
        payload = {
            "name": self.name,
            "email": self.email,
            "password_hash": hash_password(self.password),
        }
        if self.id:
            payload["id"] = self.id
        return payload


class StudentForm(RecordForm):
    name: str
    roll_number: str
    class_id: str

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(value, "Student name is required")

    @field_validator("roll_number", mode="before")
    @classmethod
    def _check_roll_number(cls, value: Any) -> str:
        return _required_text(value, "Roll number is required")

    @field_validator("class_id", mode="before")
    @classmethod
    def _check_class(cls, value: Any) -> str:
        return _required_text(value, "Class is required")


class ExamForm(RecordForm):
    """Exam of a class. A blank date is sent as an explicit ``null``."""

    name: str
    class_id: str
    exam_date: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return _required_text(value, "Exam name is required")

    @field_validator("class_id", mode="before")
    @classmethod
    def _check_class(cls, value: Any) -> str:
        return _required_text(value, "Class is required")

    @field_validator("exam_date", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> str | None:
        if isinstance(value, date):
            return value.isoformat()
        return _optional_text(value)


class AssignmentForm(RecordForm):
    teacher_id: str
    class_id: str
    subject_id: str

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _check_teacher(cls, value: Any) -> str:
        return _required_text(value, "Teacher is required")

    @field_validator("class_id", mode="before")
    @classmethod
    def _check_class(cls, value: Any) -> str:
        return _required_text(value, "Class is required")

    @field_validator("subject_id", mode="before")
    @classmethod
    def _check_subject(cls, value: Any) -> str:
        return _required_text(value, "Subject is required")


class ResultForm(BaseModel):
    """Marks of one student for one subject of one exam (insert or update)."""

    student_id: str
    exam_id: str
    subject_id: str
    marks: int | float
    grade: str | None = None
    comments: str | None = None
    teacher_id: str | None = None

    @field_validator("student_id", mode="before")
    @classmethod
    def _check_student(cls, value: Any) -> str:
        return _required_text(value, "Student is required")

    @field_validator("exam_id", mode="before")
    @classmethod
    def _check_exam(cls, value: Any) -> str:
        return _required_text(value, "Exam is required")

    @field_validator("subject_id", mode="before")
    @classmethod
    def _check_subject(cls, value: Any) -> str:
        return _required_text(value, "Subject is required")

    @field_validator("marks", mode="before")
    @classmethod
    def _check_marks(cls, value: Any) -> int | float:
        return parse_marks(value)

    @field_validator("grade", "comments", "teacher_id", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> str | None:
        return _optional_text(value)

    def to_payload(self) -> dict:
        payload = self.model_dump()
        if payload.get("teacher_id") is None:
            payload.pop("teacher_id", None)
        return payload


class LoginForm(BaseModel):
    email: str
    password: str = Field(repr=False)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str:
        return _required_text(value, "Email is required").lower()

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, value: Any) -> str:
        if not value:
            raise ValueError("Password is required")
        return str(value)

    def to_payload(self) -> dict:
        return {"email": self.email, "password": hash_password(self.password)}


class PublicResultQuery(BaseModel):
    class_id: str
    exam_id: str
    roll_number: str

    @field_validator("class_id", mode="before")
    @classmethod
    def _check_class(cls, value: Any) -> str:
        return _required_text(value, "Class is required")

    @field_validator("exam_id", mode="before")
    @classmethod
    def _check_exam(cls, value: Any) -> str:
        return _required_text(value, "Exam is required")

    @field_validator("roll_number", mode="before")
    @classmethod
    def _check_roll_number(cls, value: Any) -> str:
        return _required_text(value, "Roll number is required")

    def to_query(self) -> dict:
        return self.model_dump()


def _error_text(error: dict) -> str:
    cause = (error.get("ctx") or {}).get("error")
    return str(cause) if cause is not None else error["msg"]


def validate_form(form_cls: type[FormT], **fields: Any) -> FormT:
    """Build ``form_cls`` from ``fields`` or raise ``FormValidationError``.

    The error message is the first failing field's message; all field errors
    are attached.
    """
    try:
        return form_cls(**fields)
    except ValidationError as exc:
        field_errors = [
            {
                "field": " -> ".join(str(loc) for loc in err["loc"]),
                "message": _error_text(err),
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        raise FormValidationError(field_errors[0]["message"], fields=field_errors) from exc
