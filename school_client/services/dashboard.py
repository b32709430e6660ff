"""Aggregations over the all-management-data payload.

Pure functions: they take the ``data`` dict returned by
``SchoolService.management_data()`` and never touch the network.
"""

from __future__ import annotations

import re
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from school_client.models.schemas import DashboardCounts

_DIGITS = re.compile(r"(\d+)")


def _index(records: list[dict] | None) -> dict[Any, dict]:
    return {record.get("id"): record for record in records or []}


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO date or datetime; naive values are taken as UTC."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def summarize_counts(data: dict | None) -> DashboardCounts:
    """Number of records in each collection."""
    if not data:
        return DashboardCounts()
    return DashboardCounts(
        classes=len(data.get("classes") or []),
        subjects=len(data.get("subjects") or []),
        teachers=len(data.get("teachers") or []),
        students=len(data.get("students") or []),
        exams=len(data.get("exams") or []),
        assignments=len(data.get("teacher_assignments") or []),
        results=len(data.get("results") or []),
    )


def upcoming_exams(
    data: dict | None, now: datetime | None = None, limit: int = 5
) -> list[dict]:
    """Dated exams on or after ``now``, soonest first, with ``class_name``."""
    if not data:
        return []
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    classes = _index(data.get("classes"))

    dated = []
    for exam in data.get("exams") or []:
        when = _parse_timestamp(exam.get("exam_date"))
        if when is not None and when >= now:
            dated.append((when, exam))
    dated.sort(key=lambda pair: pair[0])

    return [
        {
            **exam,
            "class_name": (classes.get(exam.get("class_id")) or {}).get("name")
            or "Unknown class",
        }
        for _, exam in dated[:limit]
    ]


def recent_results(data: dict | None, limit: int = 6) -> list[dict]:
    """Most recently updated results, labelled with student, subject, exam and class."""
    if not data:
        return []
    classes = _index(data.get("classes"))
    subjects = _index(data.get("subjects"))
    students = _index(data.get("students"))
    exams = _index(data.get("exams"))

    records = []
    for result in data.get("results") or []:
        exam = exams.get(result.get("exam_id"))
        class_name = (classes.get(exam.get("class_id")) or {}).get("name") if exam else None
        records.append(
            {
                "id": result.get("id"),
                "subject": (subjects.get(result.get("subject_id")) or {}).get("name")
                or "Unknown subject",
                "student": (students.get(result.get("student_id")) or {}).get("name")
                or "Unknown student",
                "marks": result.get("marks"),
                "grade": result.get("grade"),
                "updated_at": result.get("updated_at") or result.get("created_at"),
                "exam_name": (exam or {}).get("name") or "Exam",
                "class_name": class_name or "Class",
            }
        )

    epoch = datetime.fromtimestamp(0, timezone.utc)
    records.sort(
        key=lambda record: _parse_timestamp(record["updated_at"]) or epoch,
        reverse=True,
    )
    return records[:limit]


def teacher_loads(data: dict | None, limit: int = 5) -> list[dict]:
    """Teachers with the most subject assignments, busiest first."""
    if not data:
        return []
    teachers = _index(data.get("teachers"))
    counts = Counter(
        entry.get("teacher_id")
        for entry in data.get("teacher_assignments") or []
        if entry.get("teacher_id")
    )
    return [
        {
            "teacher_id": teacher_id,
            "count": count,
            "teacher_name": (teachers.get(teacher_id) or {}).get("name")
            or "Unknown teacher",
        }
        for teacher_id, count in counts.most_common(limit)
    ]


# ---------------------------------------------------------------------------
# Ordering helpers
# ---------------------------------------------------------------------------


def sort_by_name(records: list[dict]) -> list[dict]:
    return sorted(records, key=lambda record: str(record.get("name") or "").casefold())


def _natural_key(value: str) -> list:
    # Alternates text and digit runs so "10" sorts after "9"
    return [
        int(part) if part.isdigit() else part.casefold()
        for part in _DIGITS.split(value)
    ]


def sort_students_by_roll_number(students: list[dict]) -> list[dict]:
    return sorted(
        students, key=lambda student: _natural_key(str(student.get("roll_number") or ""))
    )


def sort_exams_by_date(exams: list[dict], now: datetime | None = None) -> list[dict]:
    """Exams by date; undated exams are ordered as if held ``now``."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return sorted(exams, key=lambda exam: _parse_timestamp(exam.get("exam_date")) or now)
