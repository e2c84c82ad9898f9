from sqlalchemy import Column, String, DateTime, func
from faculty_perf.database import Base

class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(String(36), primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True)
    full_name = Column(String, nullable=False)
    department = Column(String, nullable=True)
    designation = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(String, nullable=False, default="faculty")  # faculty, admin
    created_at = Column(DateTime(timezone=True), server_default=func.now())
