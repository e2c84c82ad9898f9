"""Academic-year labels ("2024-25") and the periods they stand for."""
import re
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from faculty_perf.config import settings
from faculty_perf.core.errors import InvalidInput
from faculty_perf.services.performance import Period

LABEL_RE = re.compile(r"^(\d{4})-(\d{2})$")


def academic_year_label(start_year: int) -> str:
    return f"{start_year}-{str(start_year + 1)[-2:]}"


def parse_academic_year(label: str) -> int:
    """Return the calendar year an academic-year label starts in."""
    match = LABEL_RE.match((label or "").strip())
    if not match:
        raise InvalidInput(f"Academic year must look like '2024-25', got {label!r}")
    start_year = int(match.group(1))
    if match.group(2) != str(start_year + 1)[-2:]:
        raise InvalidInput(f"Academic year {label!r} does not span two consecutive years")
    return start_year


def resolve_academic_year(label: str, start_month: Optional[int] = None) -> Period:
    start_month = start_month or settings.ACADEMIC_YEAR_START_MONTH
    start_year = parse_academic_year(label)
    start = datetime(start_year, start_month, 1, tzinfo=timezone.utc)
    end = datetime(start_year + 1, start_month, 1, tzinfo=timezone.utc) - timedelta(microseconds=1)
    # a January start never reaches into the second calendar year
    years = (start_year,) if end.year == start_year else (start_year, start_year + 1)
    return Period(start=start, end=end, years=years)


def current_academic_year(today: Optional[date] = None, start_month: Optional[int] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    start_month = start_month or settings.ACADEMIC_YEAR_START_MONTH
    start_year = today.year if today.month >= start_month else today.year - 1
    return academic_year_label(start_year)


def recent_academic_years(count: int = 4, today: Optional[date] = None, start_month: Optional[int] = None) -> List[str]:
    """Most recent academic years, newest first."""
    newest = parse_academic_year(current_academic_year(today, start_month))
    return [academic_year_label(newest - i) for i in range(count)]
