"""Composite faculty performance score.

A faculty member's score over a period is built from three sub-scores, each
normalised to 0–100:

* training:    completed course enrollments plus completed workshop, seminar,
               conference and training activities, 10 of them = 100
* feedback:    average ``teaching_score`` of the performance metrics recorded
               in the period's calendar year(s), already on a 0–100 scale
* publication: completed publication and research activities, 5 of them = 100

The composite is the 30/40/30 weighted sum, and the badge is derived from the
composite. Every stage is rounded half-up on its own before being fed to the
next one.
"""
import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Sequence, Tuple

from faculty_perf.config import settings
from faculty_perf.core.errors import InvalidInput
from faculty_perf.schemas.performance import Badge, FeedbackRecord, PerformanceScoreResult
from faculty_perf.services.activity_store import ActivityStore

logger = logging.getLogger(__name__)

TRAINING_TARGET = 10       # completed trainings for a training score of 100
PUBLICATION_TARGET = 5     # completed publications for a publication score of 100

WEIGHTS = {
    "training": 0.3,
    "feedback": 0.4,
    "publication": 0.3,
}
assert math.isclose(sum(WEIGHTS.values()), 1.0)

EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60

TRAINING_ACTIVITY_TYPES = frozenset({"workshop", "seminar", "conference", "training"})
PUBLICATION_ACTIVITY_TYPES = frozenset({"publication", "research"})


@dataclass(frozen=True)
class Period:
    """Inclusive ``[start, end]`` range plus the calendar year(s) it spans."""
    start: datetime
    end: datetime
    years: Tuple[int, ...]

    @classmethod
    def calendar_year(cls, year: int) -> "Period":
        return cls(
            start=datetime(year, 1, 1, tzinfo=timezone.utc),
            end=datetime(year, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc),
            years=(year,),
        )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_count(count: Optional[int], target: int) -> int:
    """Map a raw count onto 0–100, saturating once ``count`` reaches ``target``."""
    count = max(count or 0, 0)
    return min(round_half_up(count / target * 100), 100)


def average_feedback(records: Sequence[FeedbackRecord]) -> int:
    """Rounded mean teaching score; missing scores count as 0, no records gives 0."""
    if not records:
        return 0
    total = sum(r.teaching_score or 0 for r in records)
    return round_half_up(total / len(records))


def composite_score(training_score: int, feedback_score: int, publication_score: int) -> int:
    return round_half_up(
        training_score * WEIGHTS["training"]
        + feedback_score * WEIGHTS["feedback"]
        + publication_score * WEIGHTS["publication"]
    )


def classify_badge(score: int) -> Badge:
    if score >= EXCELLENT_THRESHOLD:
        return Badge.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return Badge.GOOD
    return Badge.NEEDS_IMPROVEMENT


def build_result(
    trainings_count: int,
    feedback: Sequence[FeedbackRecord],
    publications_count: int,
) -> PerformanceScoreResult:
    """Score already-fetched inputs. No I/O."""
    trainings_count = max(trainings_count or 0, 0)
    publications_count = max(publications_count or 0, 0)

    training = normalize_count(trainings_count, TRAINING_TARGET)
    avg = average_feedback(feedback)
    feedback_score = min(max(avg, 0), 100)
    publication = normalize_count(publications_count, PUBLICATION_TARGET)
    composite = composite_score(training, feedback_score, publication)

    return PerformanceScoreResult(
        training_score=training,
        feedback_score=feedback_score,
        publication_score=publication,
        composite_score=composite,
        badge=classify_badge(composite),
        trainings_count=trainings_count,
        publications_count=publications_count,
        avg_feedback=avg,
        feedback_count=len(feedback),
    )


def validate_period(period: Period) -> None:
    if period is None or period.start is None or period.end is None:
        raise InvalidInput("Period must have a start and an end")
    if period.end < period.start:
        raise InvalidInput(f"Period ends ({period.end.isoformat()}) before it starts ({period.start.isoformat()})")
    years = period.years
    if not years or len(years) > 2 or not all(isinstance(y, int) and not isinstance(y, bool) for y in years):
        raise InvalidInput(f"Period must cover one or two calendar years, got {years!r}")


async def compute_score(store: ActivityStore, faculty_id: Optional[str], period: Period) -> PerformanceScoreResult:
    """Compute the performance score of ``faculty_id`` over ``period``.

    Without a faculty id there is nothing to score: a zeroed result is
    returned and the store is not queried. Store errors propagate unchanged.
    """
    validate_period(period)
    if not faculty_id:
        return PerformanceScoreResult()

    enrollments, training_activities, feedback, publications = await asyncio.gather(
        store.count_completed_enrollments(faculty_id, period.start, period.end),
        store.count_completed_activities(faculty_id, period.start, period.end, TRAINING_ACTIVITY_TYPES),
        store.get_feedback_records(faculty_id, set(period.years)),
        store.count_completed_activities(faculty_id, period.start, period.end, PUBLICATION_ACTIVITY_TYPES),
    )

    result = build_result((enrollments or 0) + (training_activities or 0), feedback or [], publications)
    logger.debug(
        "Scored faculty %s for %s..%s: composite=%d badge=%s",
        faculty_id, period.start.date(), period.end.date(), result.composite_score, result.badge.value,
    )
    return result


async def compute_roster_scores(
    store: ActivityStore,
    faculty_ids: Iterable[str],
    period: Period,
    concurrency: Optional[int] = None,
) -> Dict[str, PerformanceScoreResult]:
    """Score many faculty members, at most ``concurrency`` at a time.

    The returned mapping keeps the order of ``faculty_ids``.
    """
    validate_period(period)
    limit = concurrency or settings.ROSTER_CONCURRENCY
    if limit < 1:
        raise InvalidInput("Roster concurrency must be at least 1")
    semaphore = asyncio.Semaphore(limit)
    ids = list(dict.fromkeys(faculty_ids))

    async def score_one(faculty_id: str) -> PerformanceScoreResult:
        async with semaphore:
            return await compute_score(store, faculty_id, period)

    results = await asyncio.gather(*(score_one(fid) for fid in ids))
    logger.info("Scored roster of %d faculty", len(ids))
    return dict(zip(ids, results))
