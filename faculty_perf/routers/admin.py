from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from faculty_perf.core.auth import get_current_admin
from faculty_perf.schemas.performance import ActionItem, DepartmentSummaryResponse
from faculty_perf.services.academic_year import current_academic_year
from faculty_perf.services.action_items import scan_action_items
from faculty_perf.services.activity_store import SqlActivityStore, get_activity_store
from faculty_perf.services.department_summary import summarize_departments
from faculty_perf.routers.performance import resolve_period, run_scoring


router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/action-items", response_model=List[ActionItem])
async def get_action_items(
    academic_year: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    store: SqlActivityStore = Depends(get_activity_store),
    admin = Depends(get_current_admin)
):
    period = resolve_period(academic_year)
    return await run_scoring(scan_action_items(store, period, department))


@router.get("/departments", response_model=DepartmentSummaryResponse)
async def get_department_summary(
    academic_year: Optional[str] = Query(None),
    store: SqlActivityStore = Depends(get_activity_store),
    admin = Depends(get_current_admin)
):
    year = academic_year or current_academic_year()
    summary = await run_scoring(summarize_departments(store, resolve_period(year)))
    return summary.model_copy(update={"academic_year": year})
