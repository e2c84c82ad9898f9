"""Tests for the SQL-backed activity store, against a throwaway SQLite file."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from conftest import utc
from faculty_perf.core.errors import DataAccessError
from faculty_perf.database import Base
from faculty_perf.models.activity import Activity
from faculty_perf.models.enrollment import CourseEnrollment
from faculty_perf.models.performance import PerformanceMetric
from faculty_perf.models.profile import Profile
from faculty_perf.schemas.performance import Badge
from faculty_perf.services.activity_store import SqlActivityStore
from faculty_perf.services.performance import (
    PUBLICATION_ACTIVITY_TYPES,
    TRAINING_ACTIVITY_TYPES,
    Period,
    compute_score,
)

START = utc(2024, 7, 1)
END = utc(2025, 6, 30, 23, 59, 59)
PERIOD = Period(start=START, end=END, years=(2024, 2025))


def seed_rows():
    return [
        Profile(user_id="ada", email="ada@uni.edu", full_name="Ada Lovelace", department="Maths"),
        Profile(user_id="grace", email="grace@uni.edu", full_name="Grace Hopper", department="Computing"),
        Profile(user_id="root", email="root@uni.edu", full_name="Admin", role="admin"),

        CourseEnrollment(user_id="ada", course_id="c1", status="completed", enrolled_at=utc(2024, 8, 1)),
        CourseEnrollment(user_id="ada", course_id="c2", status="completed", enrolled_at=utc(2024, 9, 1)),
        CourseEnrollment(user_id="ada", course_id="c3", status="enrolled", enrolled_at=utc(2024, 9, 1)),
        CourseEnrollment(user_id="ada", course_id="c4", status="completed", enrolled_at=utc(2023, 9, 1)),
        CourseEnrollment(user_id="grace", course_id="c1", status="completed", enrolled_at=utc(2024, 8, 1)),

        Activity(user_id="ada", title="ML workshop", activity_type="workshop", status="completed",
                 created_at=utc(2024, 10, 1)),
        Activity(user_id="ada", title="Ed seminar", activity_type="seminar", status="completed",
                 created_at=utc(2025, 2, 1)),
        Activity(user_id="ada", title="Conference", activity_type="conference", status="planned",
                 created_at=utc(2025, 2, 1)),
        Activity(user_id="ada", title="Paper", activity_type="publication", status="completed",
                 created_at=utc(2025, 3, 1)),
        Activity(user_id="ada", title="Grant", activity_type="research", status="completed",
                 created_at=utc(2025, 4, 1)),
        Activity(user_id="ada", title="Old paper", activity_type="publication", status="completed",
                 created_at=utc(2024, 1, 1)),
        Activity(user_id="ada", title="Committee", activity_type="service", status="completed",
                 created_at=utc(2024, 11, 1)),

        PerformanceMetric(user_id="ada", month="September", year=2024, teaching_score=80),
        PerformanceMetric(user_id="ada", month="March", year=2025, teaching_score=None),
        PerformanceMetric(user_id="ada", month="March", year=2023, teaching_score=10),
    ]


def run_with_store(tmp_path, check):
    """Create and seed a database file, then await ``check(store)``."""
    async def main():
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'faculty.db'}")
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
            async with session_factory() as session:
                session.add_all(seed_rows())
                await session.commit()
            return await check(SqlActivityStore(session_factory, timeout=5))
        finally:
            await engine.dispose()

    return asyncio.run(main())


class TestCounts:

    def test_completed_enrollments_in_range(self, tmp_path):
        count = run_with_store(tmp_path, lambda s: s.count_completed_enrollments("ada", START, END))
        assert count == 2

    def test_training_activities(self, tmp_path):
        count = run_with_store(
            tmp_path, lambda s: s.count_completed_activities("ada", START, END, TRAINING_ACTIVITY_TYPES)
        )
        assert count == 2

    def test_publication_activities(self, tmp_path):
        count = run_with_store(
            tmp_path, lambda s: s.count_completed_activities("ada", START, END, PUBLICATION_ACTIVITY_TYPES)
        )
        assert count == 2

    def test_no_types_counts_nothing(self, tmp_path):
        count = run_with_store(tmp_path, lambda s: s.count_completed_activities("ada", START, END, set()))
        assert count == 0

    def test_feedback_records_by_year(self, tmp_path):
        records = run_with_store(tmp_path, lambda s: s.get_feedback_records("ada", {2024, 2025}))
        assert sorted(r.teaching_score or 0 for r in records) == [0, 80]


class TestRoster:

    def test_lists_faculty_only(self, tmp_path):
        roster = run_with_store(tmp_path, lambda s: s.list_faculty())
        assert [p.user_id for p in roster] == ["ada", "grace"]

    def test_filters_by_department(self, tmp_path):
        roster = run_with_store(tmp_path, lambda s: s.list_faculty("Computing"))
        assert [p.full_name for p in roster] == ["Grace Hopper"]

    def test_get_faculty(self, tmp_path):
        profile = run_with_store(tmp_path, lambda s: s.get_faculty("ada"))
        assert profile.department == "Maths"

    def test_get_unknown_faculty(self, tmp_path):
        assert run_with_store(tmp_path, lambda s: s.get_faculty("nobody")) is None


class TestScoring:

    def test_compute_score_from_database(self, tmp_path):
        result = run_with_store(tmp_path, lambda s: compute_score(s, "ada", PERIOD))

        # 2 enrollments + workshop + seminar
        assert result.trainings_count == 4
        assert result.training_score == 40
        # (80 + missing) / 2
        assert result.avg_feedback == 40
        assert result.publications_count == 2
        assert result.publication_score == 40
        # 40*0.3 + 40*0.4 + 40*0.3
        assert result.composite_score == 40
        assert result.badge == Badge.NEEDS_IMPROVEMENT


class FailingSession:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, query):
        raise OperationalError("SELECT", {}, Exception("connection refused"))


class SlowSession(FailingSession):
    async def execute(self, query):
        await asyncio.sleep(1)


class TestFailures:

    def test_sql_errors_become_data_access_errors(self):
        store = SqlActivityStore(FailingSession, timeout=1)
        with pytest.raises(DataAccessError) as info:
            asyncio.run(store.count_completed_enrollments("ada", START, END))
        assert isinstance(info.value.__cause__, OperationalError)

    def test_timeouts_become_data_access_errors(self):
        store = SqlActivityStore(SlowSession, timeout=0.01)
        with pytest.raises(DataAccessError):
            asyncio.run(store.get_feedback_records("ada", {2024}))

    def test_engine_does_not_swallow_store_errors(self):
        store = SqlActivityStore(FailingSession, timeout=1)
        with pytest.raises(DataAccessError):
            asyncio.run(compute_score(store, "ada", PERIOD))
