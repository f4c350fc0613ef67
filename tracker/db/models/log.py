from sqlalchemy import Column, Integer, Date, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tracker.db.base_class import Base

class DailyLog(Base):
    __tablename__ = "daily_logs"

    id = Column(Integer, primary_key=True, index=True)
    # One row per calendar day; the unique index guards concurrent creation
    date = Column(Date, unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    assignments = relationship("Assignment", back_populates="daily_log")
