"""Shared fixtures: an in-memory activity store that filters records the same
way the SQL store does."""

import asyncio
from datetime import datetime, timezone

import pytest

from faculty_perf.core.errors import DataAccessError
from faculty_perf.schemas.performance import FacultyProfile, FeedbackRecord


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class FakeStore:
    def __init__(self, profiles=(), enrollments=(), activities=(), metrics=(), fail_on=None):
        self.profiles = list(profiles)
        self.enrollments = list(enrollments)
        self.activities = list(activities)
        self.metrics = list(metrics)
        self.fail_on = fail_on
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, name):
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.fail_on == name:
                raise DataAccessError(f"{name} unavailable")
        finally:
            self.in_flight -= 1

    async def count_completed_enrollments(self, faculty_id, start, end):
        await self._enter("enrollments")
        return sum(
            1 for e in self.enrollments
            if e["user_id"] == faculty_id and e["status"] == "completed"
            and start <= e["enrolled_at"] <= end
        )

    async def count_completed_activities(self, faculty_id, start, end, types):
        await self._enter("activities")
        return sum(
            1 for a in self.activities
            if a["user_id"] == faculty_id and a["status"] == "completed"
            and a["activity_type"] in types and start <= a["created_at"] <= end
        )

    async def get_feedback_records(self, faculty_id, years):
        await self._enter("feedback")
        return [
            FeedbackRecord(teaching_score=m.get("teaching_score"))
            for m in self.metrics
            if m["user_id"] == faculty_id and m["year"] in years
        ]

    async def list_faculty(self, department=None):
        await self._enter("profiles")
        return [
            p for p in self.profiles
            if p.role == "faculty" and (not department or p.department == department)
        ]

    async def get_faculty(self, faculty_id):
        await self._enter("profiles")
        return next((p for p in self.profiles if p.user_id == faculty_id), None)


def make_faculty(user_id, department="Physics", name=None, role="faculty"):
    return FacultyProfile(
        user_id=user_id,
        full_name=name or user_id.title(),
        department=department,
        role=role,
    )


def seed_faculty(store, user_id, trainings=0, feedback=(), publications=0, when=None, year=2024):
    """Add ``trainings`` completed workshops, one metric per feedback score and
    ``publications`` completed publications for ``user_id``."""
    when = when or utc(2024, 10, 1)
    for _ in range(trainings):
        store.activities.append(
            {"user_id": user_id, "status": "completed", "activity_type": "workshop", "created_at": when}
        )
    for score in feedback:
        store.metrics.append({"user_id": user_id, "year": year, "teaching_score": score})
    for _ in range(publications):
        store.activities.append(
            {"user_id": user_id, "status": "completed", "activity_type": "publication", "created_at": when}
        )


@pytest.fixture
def store():
    return FakeStore()
