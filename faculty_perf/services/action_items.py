"""Flag faculty members who need an administrator's attention."""
import logging
from typing import List, Optional

from faculty_perf.schemas.performance import ActionItem, FacultyProfile, PerformanceScoreResult
from faculty_perf.services.performance import Period, compute_roster_scores

logger = logging.getLogger(__name__)

LOW_SCORE_THRESHOLD = 60
LOW_SCORE_HIGH_PRIORITY = 40
LOW_FEEDBACK_THRESHOLD = 30
LOW_FEEDBACK_HIGH_PRIORITY = 20


def detect_action_items(profile: FacultyProfile, result: PerformanceScoreResult) -> List[ActionItem]:
    items = []

    def flag(type_: str, priority: str, detail: str):
        items.append(ActionItem(
            user_id=profile.user_id,
            name=profile.full_name,
            avatar_url=profile.avatar_url,
            department=profile.department,
            type=type_,
            priority=priority,
            detail=detail,
        ))

    composite = result.composite_score
    if composite < LOW_SCORE_THRESHOLD:
        flag("low_score", "High" if composite < LOW_SCORE_HIGH_PRIORITY else "Medium",
             f"Composite score: {composite}/100")

    if result.trainings_count == 0:
        flag("missing_certificate", "Medium", "No completed trainings or certifications")

    # Only faculty who actually received feedback can have a low rating
    avg = result.avg_feedback
    if result.feedback_count > 0 and avg < LOW_FEEDBACK_THRESHOLD:
        flag("low_feedback", "High" if avg < LOW_FEEDBACK_HIGH_PRIORITY else "Medium",
             f"Avg feedback: {avg}/100")

    return items


def sort_by_priority(items: List[ActionItem]) -> List[ActionItem]:
    """High priority first; otherwise the roster order is kept."""
    return sorted(items, key=lambda item: item.priority != "High")


async def scan_action_items(
    store,
    period: Period,
    department: Optional[str] = None,
    concurrency: Optional[int] = None,
) -> List[ActionItem]:
    roster = await store.list_faculty(department)
    scores = await compute_roster_scores(store, [p.user_id for p in roster], period, concurrency)

    items = []
    for profile in roster:
        items.extend(detect_action_items(profile, scores[profile.user_id]))

    logger.info("Found %d action items across %d faculty", len(items), len(roster))
    return sort_by_priority(items)
