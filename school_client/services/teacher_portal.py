"""Teacher self-service: login, assigned classes, and result submission."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from school_client.errors import AuthenticationError, FormValidationError, LookupFailedError
from school_client.integration.api_client import ApiClient
from school_client.integration.endpoints import Endpoints, endpoints
from school_client.models.requests import LoginForm, ResultForm, parse_marks, validate_form
from school_client.models.responses import UnwrappedResponse, extract_list, with_message
from school_client.models.schemas import ClassRoster, TeacherContext, TeacherSession

logger = logging.getLogger(__name__)


class TeacherPortal:
    """Operations available to a logged-in teacher.

    The portal keeps no session state; callers hold the ``TeacherSession``
    returned by ``login`` and pass it back in.
    """

    def __init__(self, api_client: ApiClient, routes: Endpoints = endpoints) -> None:
        self._api = api_client
        self._routes = routes

    async def login(self, email: str, password: str) -> TeacherSession:
        """Authenticate with a hashed password.

        Raises
        ------
        FormValidationError
            If email or password is blank.
        AuthenticationError
            If the backend answers without a teacher record.
        ApiRequestError
            If the backend rejects the login.
        """
        form = validate_form(LoginForm, email=email, password=password)
        response = with_message(
            await self._api.post(self._routes.teacher.login, body=form.to_payload())
        )

        record = response.data
        if isinstance(record, list):
            record = record[0] if record else None
        if not isinstance(record, dict) or not record.get("id"):
            logger.warning("Login returned no teacher record")
            raise AuthenticationError()

        logger.info("Teacher %s logged in", record["id"])
        return TeacherSession(
            id=record["id"],
            name=record.get("name"),
            email=record.get("email"),
            record=record,
            message=str(response.message or ""),
        )

    async def load_context(self, teacher_id: str) -> TeacherContext:
        """Fetch the teacher's classes and subjects concurrently."""
        if not teacher_id:
            return TeacherContext()

        class_payload, subject_payload = await asyncio.gather(
            self._api.get(self._routes.teacher.classes, query={"teacher_id": teacher_id}),
            self._api.get(self._routes.teacher.subjects, query={"teacher_id": teacher_id}),
        )

        classes: list[dict] = []
        seen: set = set()
        for entry in extract_list(class_payload):
            class_id = entry.get("id") if isinstance(entry, dict) else None
            if not class_id or class_id in seen:
                continue
            seen.add(class_id)
            classes.append({"id": class_id, "name": entry.get("name")})

        # Entries look like {"class": {"id": ...}, "subjects": [...]}
        subjects_by_class: dict[str, list[dict]] = {}
        for entry in extract_list(subject_payload):
            if not isinstance(entry, dict):
                continue
            class_id = (entry.get("class") or {}).get("id")
            if not class_id:
                continue
            subjects_by_class[class_id] = [
                {"id": subject.get("id"), "name": subject.get("name")}
                for subject in entry.get("subjects") or []
            ]

        return TeacherContext(classes=classes, subjects_by_class=subjects_by_class)

    async def load_class_roster(self, class_id: str) -> ClassRoster:
        """Students (teacher view) and exams of a class, fetched concurrently."""
        if not class_id:
            return ClassRoster(class_id="")

        students_payload, exams_payload = await asyncio.gather(
            self._api.get(self._routes.teacher.students, query={"class_id": class_id}),
            self._api.get(self._routes.exams.list, query={"class_id": class_id}),
        )
        return ClassRoster(
            class_id=class_id,
            students=extract_list(students_payload),
            exams=extract_list(exams_payload),
        )

    async def submit_result(
        self,
        session: TeacherSession | None,
        class_id: str,
        exam_id: str,
        subject_id: str,
        roll_number: str | int,
        marks: Any,
        comments: str | None = None,
    ) -> UnwrappedResponse:
        """Record marks for the student holding ``roll_number`` in the class.

        Raises
        ------
        FormValidationError
            If not logged in, or a required field is blank or invalid.
        LookupFailedError
            If no student of the class holds the roll number.
        ApiRequestError
            If the backend rejects the result.
        """
        if session is None or not session.id:
            raise FormValidationError("Login first to submit results.")
        if not class_id or not exam_id or not subject_id:
            raise FormValidationError("Class, exam, and subject are required.")
        roll_number = str(roll_number if roll_number is not None else "").strip()
        if not roll_number:
            raise FormValidationError("Student roll number is required.")
        try:
            parse_marks(marks)
        except ValueError as exc:
            raise FormValidationError(str(exc)) from exc

        roster = await self.load_class_roster(class_id)
        student = roster.find_student_by_roll_number(roll_number)
        if student is None:
            raise LookupFailedError(
                f'No student found with roll number "{roll_number}" in this class.'
            )

        form = validate_form(
            ResultForm,
            student_id=student.get("id"),
            exam_id=exam_id,
            subject_id=subject_id,
            marks=marks,
            comments=comments,
            teacher_id=session.id,
        )
        response = with_message(
            await self._api.post(self._routes.results.upsert, body=form.to_payload())
        )
        logger.info(
            "Teacher %s saved result for student %s exam %s",
            session.id,
            student.get("id"),
            exam_id,
        )
        return response
