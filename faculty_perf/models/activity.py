from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from faculty_perf.database import Base

class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    activity_type = Column(String, nullable=True)  # workshop, seminar, conference, training, publication, research, ...
    status = Column(String, nullable=True)  # planned, in_progress, completed
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
