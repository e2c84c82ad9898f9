import logging
from typing import List

from faculty_perf.core.errors import InvalidInput
from faculty_perf.schemas.performance import CategoryComparison, PeerComparisonResponse, PerformanceScoreResult
from faculty_perf.services.performance import Period, compute_roster_scores, round_half_up

logger = logging.getLogger(__name__)

CATEGORIES = (
    ("Training", "training_score"),
    ("Feedback", "feedback_score"),
    ("Publication", "publication_score"),
    ("Overall", "composite_score"),
)

# (minimum difference from the peer average, label), checked top-down
PERCENTILE_BANDS = (
    (15, "Top 10%"),
    (10, "Top 25%"),
    (5, "Top 40%"),
    (0, "Top 50%"),
    (-5, "Top 60%"),
    (-10, "Top 75%"),
)


def percentile_label(difference: int) -> str:
    """Rough standing among peers from the distance to their average."""
    for minimum, label in PERCENTILE_BANDS:
        if difference >= minimum:
            return label
    return "Below Average"


def peer_average(results: List[PerformanceScoreResult], field: str) -> int:
    if not results:
        return 0
    return round_half_up(sum(getattr(r, field) for r in results) / len(results))


def build_comparison(
    mine: PerformanceScoreResult,
    peers: List[PerformanceScoreResult],
    department: str,
) -> PeerComparisonResponse:
    categories = []
    for name, field in CATEGORIES:
        yours = getattr(mine, field)
        average = peer_average(peers, field)
        categories.append(CategoryComparison(
            category=name,
            your_score=yours,
            peer_average=average,
            difference=yours - average,
        ))

    return PeerComparisonResponse(
        department=department,
        total_faculty=len(peers),
        categories=categories,
        percentile=percentile_label(categories[-1].difference),
    )


async def compare_with_peers(store, faculty_id: str, period: Period) -> PeerComparisonResponse:
    """Compare one faculty member's scores with the averages of their department.

    Faculty without a department are compared against all faculty. The
    averages include the faculty member being compared.
    """
    profile = await store.get_faculty(faculty_id)
    if profile is None:
        raise InvalidInput(f"Unknown faculty member {faculty_id!r}")

    roster = await store.list_faculty(profile.department or None)
    peer_ids = [p.user_id for p in roster]
    if faculty_id not in peer_ids:
        peer_ids.append(faculty_id)

    scores = await compute_roster_scores(store, peer_ids, period)
    logger.debug("Compared faculty %s with %d peers", faculty_id, len(peer_ids))
    return build_comparison(
        scores[faculty_id],
        list(scores.values()),
        profile.department or "All Faculty",
    )
