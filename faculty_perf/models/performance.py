# faculty_perf/models/performance.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, func
from faculty_perf.database import Base

class PerformanceMetric(Base):
    __tablename__ = "performance_metrics"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=False, index=True)
    month = Column(String, nullable=False)
    year = Column(Integer, nullable=False)

    # 0–100, any of them may be missing for a period
    teaching_score = Column(Integer, nullable=True)
    research_score = Column(Integer, nullable=True)
    service_score = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "month", "year", name="uq_metric_user_month_year"),
    )
