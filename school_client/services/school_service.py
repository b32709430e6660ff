"""Administrative operations over the school backend.

Create operations validate their input with the form models and raise
``FormValidationError`` before any request is made. Backend failures
propagate as ``ApiRequestError``; nothing is retried or swallowed here.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from school_client.integration.api_client import ApiClient
from school_client.integration.endpoints import Endpoints, endpoints
from school_client.models.requests import (
    GLOBAL_SUBJECT_SCOPE,
    AssignmentForm,
    ClassForm,
    ExamForm,
    PublicResultQuery,
    ResultForm,
    StudentForm,
    SubjectForm,
    TeacherForm,
    validate_form,
)
from school_client.models.responses import UnwrappedResponse, extract_list, with_message
from school_client.models.schemas import ClassReference

logger = logging.getLogger(__name__)


class SchoolService:
    """Classes, subjects, teachers, students, exams, assignments and results.

    Parameters
    ----------
    api_client:
        Access layer used for every backend call.
    routes:
        Route registry (defaults to the module-level registry).
    """

    def __init__(self, api_client: ApiClient, routes: Endpoints = endpoints) -> None:
        self._api = api_client
        self._routes = routes

    # ------------------------------------------------------------------
    # Classes
    # ------------------------------------------------------------------

    async def list_classes(self) -> list[dict]:
        return extract_list(await self._api.get(self._routes.classes.list))

    async def create_class(self, name: str, id: str | None = None) -> UnwrappedResponse:
        form = validate_form(ClassForm, name=name, id=id)
        return await self._create(self._routes.classes.create, form.to_payload(), "class")

    # ------------------------------------------------------------------
    # Subjects
    # ------------------------------------------------------------------

    async def list_subjects(self, class_id: str | None) -> list[dict]:
        """Subjects of a class; no request is made for a blank or global scope."""
        if not class_id or class_id == GLOBAL_SUBJECT_SCOPE:
            return []
        payload = await self._api.get(
            self._routes.subjects.list, query={"class_id": class_id}
        )
        return extract_list(payload)

    async def create_subject(
        self, name: str, class_id: str | None = None, id: str | None = None
    ) -> UnwrappedResponse:
        form = validate_form(SubjectForm, name=name, class_id=class_id, id=id)
        return await self._create(self._routes.subjects.create, form.to_payload(), "subject")

    @staticmethod
    def subjects_for_class(subjects: list[dict], class_id: str | None) -> list[dict]:
        """Subjects offered to a class, global subjects included."""
        if not class_id:
            return []
        return [
            subject
            for subject in subjects
            if not subject.get("class_id") or subject.get("class_id") == class_id
        ]

    # ------------------------------------------------------------------
    # Teachers
    # ------------------------------------------------------------------

    async def list_teachers(self) -> list[dict]:
        return extract_list(await self._api.get(self._routes.teachers.list))

    async def create_teacher(
        self, name: str, email: str, password: str, id: str | None = None
    ) -> UnwrappedResponse:
        form = validate_form(TeacherForm, name=name, email=email, password=password, id=id)
        return await self._create(self._routes.teachers.create, form.to_payload(), "teacher")

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    async def list_students(self, class_id: str | None) -> list[dict]:
        if not class_id:
            return []
        return extract_list(
            await self._api.get(self._routes.students.list_by_class(class_id))
        )

    async def create_student(
        self, name: str, roll_number: str, class_id: str, id: str | None = None
    ) -> UnwrappedResponse:
        form = validate_form(
            StudentForm, name=name, roll_number=roll_number, class_id=class_id, id=id
        )
        return await self._create(self._routes.students.create, form.to_payload(), "student")

    # ------------------------------------------------------------------
    # Exams
    # ------------------------------------------------------------------

    async def list_exams(self, class_id: str | None) -> list[dict]:
        if not class_id:
            return []
        payload = await self._api.get(self._routes.exams.list, query={"class_id": class_id})
        return extract_list(payload)

    async def create_exam(
        self,
        name: str,
        class_id: str,
        exam_date: Any = None,
        id: str | None = None,
    ) -> UnwrappedResponse:
        form = validate_form(ExamForm, name=name, class_id=class_id, exam_date=exam_date, id=id)
        return await self._create(self._routes.exams.create, form.to_payload(), "exam")

    # ------------------------------------------------------------------
    # Assignments and results
    # ------------------------------------------------------------------

    async def create_assignment(
        self,
        teacher_id: str,
        class_id: str,
        subject_id: str,
        id: str | None = None,
    ) -> UnwrappedResponse:
        form = validate_form(
            AssignmentForm,
            teacher_id=teacher_id,
            class_id=class_id,
            subject_id=subject_id,
            id=id,
        )
        return await self._create(
            self._routes.assignments.create, form.to_payload(), "teacher assignment"
        )

    async def upsert_result(
        self,
        student_id: str,
        exam_id: str,
        subject_id: str,
        marks: Any,
        grade: str | None = None,
        comments: str | None = None,
        teacher_id: str | None = None,
    ) -> UnwrappedResponse:
        form = validate_form(
            ResultForm,
            student_id=student_id,
            exam_id=exam_id,
            subject_id=subject_id,
            marks=marks,
            grade=grade,
            comments=comments,
            teacher_id=teacher_id,
        )
        return await self._create(self._routes.results.upsert, form.to_payload(), "result")

    async def lookup_public_result(
        self, class_id: str, exam_id: str, roll_number: str
    ) -> Any:
        """Results of one student for one exam, as published to the public."""
        lookup = validate_form(
            PublicResultQuery, class_id=class_id, exam_id=exam_id, roll_number=roll_number
        )
        payload = await self._api.get(self._routes.results.public, query=lookup.to_query())
        return with_message(payload).data

    # ------------------------------------------------------------------
    # Aggregate data
    # ------------------------------------------------------------------

    async def management_data(self) -> dict:
        """Every collection the backend holds, keyed by collection name."""
        data = with_message(await self._api.get(self._routes.debug.data)).data
        return data if isinstance(data, dict) else {}

    async def results_for_exam(self, class_id: str, exam_id: str) -> list[dict]:
        """Recorded results of an exam for the students of a class, newest first.

        Each result is labelled with ``subject_name`` and ``student_name``.
        """
        if not class_id or not exam_id:
            return []

        data = await self.management_data()
        students = data.get("students") or []
        class_student_ids = {
            student.get("id") for student in students if student.get("class_id") == class_id
        }
        subject_names = {s.get("id"): s.get("name") for s in data.get("subjects") or []}
        student_names = {s.get("id"): s.get("name") for s in students}

        labelled = [
            {
                **result,
                "subject_name": subject_names.get(result.get("subject_id")) or "Unknown subject",
                "student_name": student_names.get(result.get("student_id")) or "Unknown student",
            }
            for result in data.get("results") or []
            if result.get("exam_id") == exam_id
            and result.get("student_id") in class_student_ids
        ]
        return sorted(labelled, key=lambda r: r.get("updated_at") or "", reverse=True)

    async def load_class_reference(self, class_id: str) -> ClassReference:
        """Subjects, students and exams of a class, fetched concurrently."""
        subjects, students, exams = await asyncio.gather(
            self.list_subjects(class_id),
            self.list_students(class_id),
            self.list_exams(class_id),
        )
        return ClassReference(
            class_id=class_id, students=students, exams=exams, subjects=subjects
        )

    async def _create(self, path: str, payload: dict, label: str) -> UnwrappedResponse:
        response = with_message(await self._api.post(path, body=payload))
        logger.info("Saved %s: %s", label, response.message or "ok")
        return response
