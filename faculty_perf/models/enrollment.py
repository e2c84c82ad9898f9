from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from faculty_perf.database import Base

class CourseEnrollment(Base):
    __tablename__ = "course_enrollments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=False, index=True)
    course_id = Column(String(36), nullable=False)
    status = Column(String, nullable=False, default="enrolled")  # enrolled, in_progress, completed
    progress_percentage = Column(Integer, nullable=True)  # 0–100
    enrolled_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
