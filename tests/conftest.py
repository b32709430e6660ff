"""Shared test fixtures and the in-memory fake backend for the school client test suite."""

from __future__ import annotations

import copy
import os
from typing import Callable

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from school_client.config.settings import ClientSettings
from school_client.integration.api_client import ApiClient
from school_client.security import hash_password
from school_client.services.school_service import SchoolService
from school_client.services.teacher_portal import TeacherPortal

BASE_URL = "http://school.test"


# ---------------------------------------------------------------------------
# Ensure required env vars are set for ClientSettings in tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set minimal env vars so ClientSettings can be instantiated in tests."""
    if "SCHOOL_API_BASE_URL" not in os.environ:
        monkeypatch.setenv("SCHOOL_API_BASE_URL", BASE_URL)


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(base_url=BASE_URL, timeout_seconds=5, log_json=False)


# ---------------------------------------------------------------------------
# Mock transport clients
# ---------------------------------------------------------------------------

@pytest.fixture
def make_client() -> Callable[..., ApiClient]:
    """Build an ApiClient whose requests are answered by ``handler``."""

    def _make(handler: Callable, **kwargs: object) -> ApiClient:
        return ApiClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)

    return _make


# ---------------------------------------------------------------------------
# In-memory fake backend
# ---------------------------------------------------------------------------

TEACHER_PASSWORD = "chalkboard"

SEED_DATA: dict = {
    "classes": [
        {"id": "c1", "name": "Grade 6"},
        {"id": "class 1", "name": "Grade 7"},
    ],
    "subjects": [
        {"id": "s1", "name": "Mathematics", "class_id": "c1"},
        {"id": "s2", "name": "Science", "class_id": "c1"},
        {"id": "s3", "name": "Assembly", "class_id": None},
    ],
    "teachers": [
        {
            "id": "t1",
            "name": "Amina Yusuf",
            "email": "amina@school.edu",
            "password_hash": hash_password(TEACHER_PASSWORD),
        },
    ],
    "students": [
        {"id": "st1", "name": "Bola", "roll_number": "1", "class_id": "c1"},
        {"id": "st2", "name": "Chidi", "roll_number": "2", "class_id": "c1"},
        {"id": "st3", "name": "Dayo", "roll_number": "1", "class_id": "class 1"},
    ],
    "exams": [
        {"id": "e1", "name": "Midterm", "class_id": "c1", "exam_date": "2030-03-01"},
    ],
    "teacher_assignments": [
        {"id": "a1", "teacher_id": "t1", "class_id": "c1", "subject_id": "s1"},
        {"id": "a2", "teacher_id": "t1", "class_id": "c1", "subject_id": "s2"},
    ],
    "results": [
        {
            "id": "r1",
            "student_id": "st1",
            "exam_id": "e1",
            "subject_id": "s1",
            "marks": 71,
            "grade": "B",
            "updated_at": "2030-03-02T10:00:00Z",
        },
    ],
}


def _ok(data: object = None, message: str | None = None) -> JSONResponse:
    content: dict = {"success": True, "data": data}
    if message:
        content["message"] = message
    return JSONResponse(content)


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=status_code)


def create_fake_backend(store: dict) -> FastAPI:
    """A minimal backend speaking the { success, data, message } envelope."""
    app = FastAPI()

    def _insert(collection: str, record: dict, prefix: str) -> dict:
        record = dict(record)
        record.setdefault("id", f"{prefix}{len(store[collection]) + 1}")
        store[collection].append(record)
        return record

    @app.get("/api/v1/get/all-classes")
    async def all_classes() -> JSONResponse:
        return _ok(store["classes"])

    @app.post("/api/v1/post/add-class")
    async def add_class(request: Request) -> JSONResponse:
        body = await request.json()
        if any(c["id"] == body.get("id") for c in store["classes"]):
            return _fail(409, "Class id already exists")
        return _ok(_insert("classes", body, "c"), "Class created")

    @app.get("/api/v1/get/subjects-of-a-class")
    async def subjects_of_class(class_id: str) -> JSONResponse:
        return _ok([s for s in store["subjects"] if s.get("class_id") == class_id])

    @app.post("/api/v1/post/add-subject")
    async def add_subject(request: Request) -> JSONResponse:
        return _ok(_insert("subjects", await request.json(), "s"), "Subject created")

    @app.get("/api/v1/get/all-teachers")
    async def all_teachers() -> JSONResponse:
        return _ok(store["teachers"])

    @app.post("/api/v1/post/add-teacher")
    async def add_teacher(request: Request) -> JSONResponse:
        body = await request.json()
        if "password" in body:
            return _fail(400, "Plaintext passwords are not accepted")
        return _ok(_insert("teachers", body, "t"), "Teacher created")

    @app.get("/api/v1/get/all-students-of-a-class")
    async def students_of_class_admin(class_id: str) -> JSONResponse:
        return _ok([s for s in store["students"] if s["class_id"] == class_id])

    @app.post("/api/v1/post/add-student")
    async def add_student(request: Request) -> JSONResponse:
        body = await request.json()
        if any(
            s["class_id"] == body["class_id"] and s["roll_number"] == body["roll_number"]
            for s in store["students"]
        ):
            return _fail(400, "roll_number must be unique")
        return _ok(_insert("students", body, "st"), "Student created")

    @app.get("/api/v1/get/exams-of-a-class")
    async def exams_of_class(class_id: str) -> JSONResponse:
        return _ok([e for e in store["exams"] if e["class_id"] == class_id])

    @app.post("/api/v1/post/add-exam")
    async def add_exam(request: Request) -> JSONResponse:
        return _ok(_insert("exams", await request.json(), "e"), "Exam created")

    @app.post("/api/v1/post/add-teacher-assignment")
    async def add_assignment(request: Request) -> JSONResponse:
        body = await request.json()
        return _ok(_insert("teacher_assignments", body, "a"), "Assignment created")

    @app.post("/api/v1/mobile/login")
    async def login(request: Request) -> JSONResponse:
        body = await request.json()
        for teacher in store["teachers"]:
            if (
                teacher["email"] == body.get("email")
                and teacher.get("password_hash") == body.get("password")
            ):
                public = {k: v for k, v in teacher.items() if k != "password_hash"}
                return _ok([public], "Login successful")
        return _fail(401, "Invalid email or password")

    @app.get("/api/v1/get/catt")
    async def classes_of_teacher(teacher_id: str) -> list[dict]:
        # One row per assignment, so classes repeat
        classes = {c["id"]: c for c in store["classes"]}
        return [
            classes[a["class_id"]]
            for a in store["teacher_assignments"]
            if a["teacher_id"] == teacher_id and a["class_id"] in classes
        ]

    @app.get("/api/v1/get/soat")
    async def subjects_of_teacher(teacher_id: str) -> JSONResponse:
        subjects = {s["id"]: s for s in store["subjects"]}
        grouped: dict[str, dict] = {}
        for a in store["teacher_assignments"]:
            if a["teacher_id"] != teacher_id:
                continue
            entry = grouped.setdefault(
                a["class_id"], {"class": {"id": a["class_id"]}, "subjects": []}
            )
            entry["subjects"].append(subjects[a["subject_id"]])
        return _ok(list(grouped.values()))

    @app.get("/api/v1/get/students-of-a-class")
    async def students_of_class(class_id: str) -> list[dict]:
        return [s for s in store["students"] if s["class_id"] == class_id]

    @app.post("/api/v1/post/add-result")
    async def add_result(request: Request) -> JSONResponse:
        body = await request.json()
        key = (body["student_id"], body["exam_id"], body["subject_id"])
        for existing in store["results"]:
            if (existing["student_id"], existing["exam_id"], existing["subject_id"]) == key:
                existing.update(body)
                return _ok(existing, "Result updated")
        return _ok(_insert("results", body, "r"), "Result saved")

    @app.get("/api/v1/get/results-of-a-student")
    async def results_of_student(
        class_id: str, exam_id: str, roll_number: str
    ) -> JSONResponse:
        student = next(
            (
                s
                for s in store["students"]
                if s["class_id"] == class_id and s["roll_number"] == roll_number
            ),
            None,
        )
        if student is None:
            return JSONResponse({"success": False, "message": "No results found"})
        results = [
            r
            for r in store["results"]
            if r["student_id"] == student["id"] and r["exam_id"] == exam_id
        ]
        return _ok({"student": student, "results": results})

    @app.get("/api/v1/get/all-management-data")
    async def management_data() -> JSONResponse:
        return _ok(store)

    return app


@pytest.fixture
def backend_store() -> dict:
    return copy.deepcopy(SEED_DATA)


@pytest.fixture
def backend_client(backend_store: dict) -> ApiClient:
    """ApiClient wired to the in-memory FastAPI backend."""
    app = create_fake_backend(backend_store)
    return ApiClient(BASE_URL, transport=httpx.ASGITransport(app=app))


@pytest.fixture
def school_service(backend_client: ApiClient) -> SchoolService:
    return SchoolService(backend_client)


@pytest.fixture
def teacher_portal(backend_client: ApiClient) -> TeacherPortal:
    return TeacherPortal(backend_client)

