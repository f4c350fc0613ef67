from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from tracker.db.base_class import Base

class Bucket(Base):
    __tablename__ = "buckets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text)
    icon = Column(String(50))
    color = Column(String(20), default="blue")
    order = Column(Integer, nullable=False, default=0)

    tasks = relationship("TaskDefinition", back_populates="bucket", order_by="TaskDefinition.order")

class TaskDefinition(Base):
    __tablename__ = "task_definitions"

    id = Column(Integer, primary_key=True, index=True)
    bucket_id = Column(Integer, ForeignKey("buckets.id"), nullable=False, index=True)
    content = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False, default=0)

    bucket = relationship("Bucket", back_populates="tasks")
