import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from tracker.db.base_class import Base

class ProgressStatus(str, enum.Enum):
    PENDING = "PENDING"
    DONE = "DONE"

class Assignment(Base):
    __tablename__ = "assignments"
    __table_args__ = (
        UniqueConstraint("daily_log_id", "bucket_id", name="uq_assignment_log_bucket"),
    )

    id = Column(Integer, primary_key=True, index=True)
    daily_log_id = Column(Integer, ForeignKey("daily_logs.id"), nullable=False)
    bucket_id = Column(Integer, ForeignKey("buckets.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # null = unassigned

    daily_log = relationship("DailyLog", back_populates="assignments")
    bucket = relationship("Bucket")
    user = relationship("User", foreign_keys=[user_id])
    task_progress = relationship("TaskProgress", back_populates="assignment", cascade="all, delete-orphan")

class TaskProgress(Base):
    __tablename__ = "task_progress"
    __table_args__ = (
        UniqueConstraint("assignment_id", "task_definition_id", name="uq_progress_assignment_task"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False)
    task_definition_id = Column(Integer, ForeignKey("task_definitions.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ProgressStatus.PENDING.value)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    supported_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    assignment = relationship("Assignment", back_populates="task_progress")
    task_definition = relationship("TaskDefinition")
    supported_by = relationship("User", foreign_keys=[supported_by_user_id])

    @property
    def is_done(self):
        return self.status == ProgressStatus.DONE.value
