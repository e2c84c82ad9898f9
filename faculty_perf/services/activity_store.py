"""Read access to faculty activity data.

The scoring code only depends on the ``ActivityStore`` protocol; roster
consumers (action items, peer comparison, department summary) additionally
need ``RosterStore``. ``SqlActivityStore`` implements both on top of the
SQLAlchemy models.
"""
import asyncio
import logging
from datetime import datetime
from typing import AbstractSet, Callable, List, Optional, Protocol, TypeVar

from sqlalchemy import Result, select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from faculty_perf.config import settings
from faculty_perf.core.errors import DataAccessError
from faculty_perf.database import AsyncSessionLocal
from faculty_perf.models.activity import Activity
from faculty_perf.models.enrollment import CourseEnrollment
from faculty_perf.models.performance import PerformanceMetric
from faculty_perf.models.profile import Profile
from faculty_perf.schemas.performance import FacultyProfile, FeedbackRecord

logger = logging.getLogger(__name__)

COMPLETED = "completed"

T = TypeVar("T")


class ActivityStore(Protocol):
    async def count_completed_enrollments(self, faculty_id: str, start: datetime, end: datetime) -> int:
        ...

    async def count_completed_activities(
        self, faculty_id: str, start: datetime, end: datetime, types: AbstractSet[str]
    ) -> int:
        ...

    async def get_feedback_records(self, faculty_id: str, years: AbstractSet[int]) -> List[FeedbackRecord]:
        ...


class RosterStore(Protocol):
    async def list_faculty(self, department: Optional[str] = None) -> List[FacultyProfile]:
        ...

    async def get_faculty(self, faculty_id: str) -> Optional[FacultyProfile]:
        ...


class SqlActivityStore:
    """ActivityStore and RosterStore backed by the relational database.

    Every query runs in its own session so the scoring engine can issue them
    concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker, timeout: Optional[float] = None):
        self._session_factory = session_factory
        self._timeout = timeout or settings.STORE_QUERY_TIMEOUT

    async def _run(self, what: str, query, extract: Callable[[Result], T]) -> T:
        async def execute():
            async with self._session_factory() as session:  # type: AsyncSession
                return extract(await session.execute(query))

        try:
            return await asyncio.wait_for(execute(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error("Activity store timed out after %.1fs: %s", self._timeout, what)
            raise DataAccessError(f"Timed out reading {what}") from e
        except SQLAlchemyError as e:
            logger.error("Activity store query failed: %s: %s", what, e)
            raise DataAccessError(f"Could not read {what}") from e

    async def count_completed_enrollments(self, faculty_id: str, start: datetime, end: datetime) -> int:
        count = await self._run(
            "course enrollments",
            select(func.count(CourseEnrollment.id))
            .where(CourseEnrollment.user_id == faculty_id)
            .where(CourseEnrollment.status == COMPLETED)
            .where(CourseEnrollment.enrolled_at >= start)
            .where(CourseEnrollment.enrolled_at <= end),
            Result.scalar_one,
        )
        return count or 0

    async def count_completed_activities(
        self, faculty_id: str, start: datetime, end: datetime, types: AbstractSet[str]
    ) -> int:
        if not types:
            return 0
        count = await self._run(
            "activities",
            select(func.count(Activity.id))
            .where(Activity.user_id == faculty_id)
            .where(Activity.status == COMPLETED)
            .where(Activity.activity_type.in_(sorted(types)))
            .where(Activity.created_at >= start)
            .where(Activity.created_at <= end),
            Result.scalar_one,
        )
        return count or 0

    async def get_feedback_records(self, faculty_id: str, years: AbstractSet[int]) -> List[FeedbackRecord]:
        if not years:
            return []
        scores = await self._run(
            "performance metrics",
            select(PerformanceMetric.teaching_score)
            .where(PerformanceMetric.user_id == faculty_id)
            .where(PerformanceMetric.year.in_(sorted(years))),
            lambda result: result.scalars().all(),
        )
        return [FeedbackRecord(teaching_score=score) for score in scores]

    async def list_faculty(self, department: Optional[str] = None) -> List[FacultyProfile]:
        query = select(Profile).where(Profile.role == "faculty").order_by(Profile.full_name)
        if department:
            query = query.where(Profile.department == department)
        return await self._run(
            "profiles",
            query,
            lambda result: [FacultyProfile.model_validate(p) for p in result.scalars().all()],
        )

    async def get_faculty(self, faculty_id: str) -> Optional[FacultyProfile]:
        def extract(result):
            profile = result.scalar_one_or_none()
            return FacultyProfile.model_validate(profile) if profile else None

        return await self._run("profile", select(Profile).where(Profile.user_id == faculty_id), extract)


def get_activity_store() -> SqlActivityStore:
    return SqlActivityStore(AsyncSessionLocal)
