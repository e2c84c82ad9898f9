import logging
from typing import Dict, Iterable, List, Tuple

from faculty_perf.schemas.performance import (
    Badge, DepartmentStats, DepartmentSummaryResponse, FacultyProfile, PerformanceScoreResult,
)
from faculty_perf.services.performance import Period, compute_roster_scores, round_half_up

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


def badge_counts(results: Iterable[PerformanceScoreResult]) -> Dict[Badge, int]:
    counts = {badge: 0 for badge in Badge}
    for r in results:
        counts[r.badge] += 1
    return counts


def average_composite(results: List[PerformanceScoreResult]) -> int:
    if not results:
        return 0
    return round_half_up(sum(r.composite_score for r in results) / len(results))


def summarize(scored: List[Tuple[FacultyProfile, PerformanceScoreResult]]) -> DepartmentSummaryResponse:
    by_department: Dict[str, List[PerformanceScoreResult]] = {}
    for profile, result in scored:
        by_department.setdefault(profile.department or UNASSIGNED, []).append(result)

    departments = [
        DepartmentStats(
            department=name,
            faculty_count=len(results),
            avg_composite=average_composite(results),
            badges=badge_counts(results),
        )
        for name, results in by_department.items()
    ]
    departments.sort(key=lambda d: (-d.avg_composite, d.department))

    everyone = [result for _, result in scored]
    return DepartmentSummaryResponse(
        total_faculty=len(everyone),
        avg_composite=average_composite(everyone),
        badges=badge_counts(everyone),
        departments=departments,
    )


async def summarize_departments(store, period: Period) -> DepartmentSummaryResponse:
    roster = await store.list_faculty()
    scores = await compute_roster_scores(store, [p.user_id for p in roster], period)
    summary = summarize([(p, scores[p.user_id]) for p in roster])
    logger.info("Summarised %d departments", len(summary.departments))
    return summary
