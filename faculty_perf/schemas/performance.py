from enum import Enum
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class Badge(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_IMPROVEMENT = "NeedsImprovement"

    @property
    def label(self) -> str:
        return "Needs Improvement" if self is Badge.NEEDS_IMPROVEMENT else self.value


class PerformanceScoreResult(BaseModel):
    training_score: int = 0      # 0–100
    feedback_score: int = 0      # 0–100
    publication_score: int = 0   # 0–100
    composite_score: int = 0     # 0–100
    badge: Badge = Badge.NEEDS_IMPROVEMENT

    # raw inputs, for display
    trainings_count: int = 0
    publications_count: int = 0
    avg_feedback: int = 0
    feedback_count: int = 0

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }


class FeedbackRecord(BaseModel):
    teaching_score: Optional[float] = None

    model_config = {"from_attributes": True}


class FacultyProfile(BaseModel):
    user_id: str
    full_name: str
    department: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str = "faculty"

    model_config = {"from_attributes": True}


class ActionItem(BaseModel):
    user_id: str
    name: str
    avatar_url: Optional[str] = None
    department: Optional[str] = None
    type: Literal["low_score", "missing_certificate", "low_feedback"]
    priority: Literal["High", "Medium"]
    detail: str

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class CategoryComparison(BaseModel):
    category: str
    your_score: int
    peer_average: int
    difference: int

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class PeerComparisonResponse(BaseModel):
    academic_year: Optional[str] = None
    department: str
    total_faculty: int
    categories: List[CategoryComparison]
    percentile: str

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class DepartmentStats(BaseModel):
    department: str
    faculty_count: int
    avg_composite: int
    badges: Dict[Badge, int]

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class DepartmentSummaryResponse(BaseModel):
    academic_year: Optional[str] = None
    total_faculty: int
    avg_composite: int
    badges: Dict[Badge, int]
    departments: List[DepartmentStats]

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class AcademicYearsResponse(BaseModel):
    current: str
    years: List[str]
