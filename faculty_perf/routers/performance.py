import logging
from typing import Awaitable, Optional, TypeVar
from fastapi import APIRouter, Depends, HTTPException, Query
from faculty_perf.core.auth import get_current_user, get_current_admin
from faculty_perf.core.errors import DataAccessError, InvalidInput
from faculty_perf.schemas.performance import PeerComparisonResponse, PerformanceScoreResult
from faculty_perf.services.academic_year import current_academic_year, resolve_academic_year
from faculty_perf.services.activity_store import SqlActivityStore, get_activity_store
from faculty_perf.services.peer_comparison import compare_with_peers
from faculty_perf.services.performance import Period, compute_score

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/performance", tags=["performance"])

T = TypeVar("T")

DATA_UNAVAILABLE = "Performance data is temporarily unavailable. Please try again."


def resolve_period(academic_year: Optional[str]) -> Period:
    try:
        return resolve_academic_year(academic_year or current_academic_year())
    except InvalidInput as e:
        raise HTTPException(400, str(e))


async def run_scoring(work: Awaitable[T]) -> T:
    """Await a scoring call, turning scoring errors into HTTP errors."""
    try:
        return await work
    except InvalidInput as e:
        raise HTTPException(400, str(e))
    except DataAccessError as e:
        # Details stay in the log; callers only learn the data is unavailable
        logger.warning("Scoring failed, activity store unavailable: %s", e)
        raise HTTPException(503, DATA_UNAVAILABLE)


@router.get("/my", response_model=PerformanceScoreResult)
async def get_my_performance(
    academic_year: Optional[str] = Query(None, description="e.g. 2024-25; defaults to the current academic year"),
    store: SqlActivityStore = Depends(get_activity_store),
    current_user = Depends(get_current_user)
):
    period = resolve_period(academic_year)
    return await run_scoring(compute_score(store, current_user.user_id, period))


@router.get("/peers", response_model=PeerComparisonResponse)
async def get_peer_comparison(
    academic_year: Optional[str] = Query(None),
    store: SqlActivityStore = Depends(get_activity_store),
    current_user = Depends(get_current_user)
):
    year = academic_year or current_academic_year()
    comparison = await run_scoring(compare_with_peers(store, current_user.user_id, resolve_period(year)))
    return comparison.model_copy(update={"academic_year": year})


@router.get("/{faculty_id}", response_model=PerformanceScoreResult)
async def get_faculty_performance(
    faculty_id: str,
    academic_year: Optional[str] = Query(None),
    store: SqlActivityStore = Depends(get_activity_store),
    admin = Depends(get_current_admin)
):
    period = resolve_period(academic_year)
    profile = await run_scoring(store.get_faculty(faculty_id))
    if profile is None:
        raise HTTPException(404, "Faculty member not found")
    return await run_scoring(compute_score(store, faculty_id, period))
