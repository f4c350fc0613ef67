"""Edit-mode operations on the bucket catalog and its checklist items."""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from tracker.core.errors import NotFound, ValidationError
from tracker.core.permissions import require_user
from tracker.db.models.assignment import TaskProgress
from tracker.db.models.bucket import Bucket, TaskDefinition
from tracker.db.models.user import User

logger = logging.getLogger(__name__)


def _clean_text(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value


def _get_bucket(db: Session, bucket_id: int) -> Bucket:
    bucket = db.query(Bucket).filter(Bucket.id == bucket_id).first()
    if not bucket:
        raise NotFound("Bucket not found")
    return bucket


def _get_task(db: Session, task_id: int) -> TaskDefinition:
    task = db.query(TaskDefinition).filter(TaskDefinition.id == task_id).first()
    if not task:
        raise NotFound("Task not found")
    return task


def update_bucket(db: Session, actor: Optional[User], bucket_id: int, title: str) -> Bucket:
    require_user(actor)
    title = _clean_text(title, "Title")
    bucket = _get_bucket(db, bucket_id)
    bucket.title = title
    db.commit()
    logger.info("Bucket %s renamed", bucket_id)
    return bucket


def create_task_definition(db: Session, actor: Optional[User], bucket_id: int, content: str) -> TaskDefinition:
    require_user(actor)
    content = _clean_text(content, "Task")
    _get_bucket(db, bucket_id)

    # New tasks go to the end of the bucket's checklist
    max_order = db.query(func.max(TaskDefinition.order))\
        .filter(TaskDefinition.bucket_id == bucket_id)\
        .scalar()
    task = TaskDefinition(bucket_id=bucket_id, content=content, order=(max_order or 0) + 1)
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Task %s added to bucket %s", task.id, bucket_id)
    return task


def update_task_definition(db: Session, actor: Optional[User], task_id: int, content: str) -> TaskDefinition:
    require_user(actor)
    content = _clean_text(content, "Task")
    task = _get_task(db, task_id)
    task.content = content
    db.commit()
    logger.info("Task %s updated", task_id)
    return task


def delete_task_definition(db: Session, actor: Optional[User], task_id: int) -> None:
    require_user(actor)
    task = _get_task(db, task_id)

    # Progress rows reference the task; remove them in the same transaction
    removed = db.query(TaskProgress)\
        .filter(TaskProgress.task_definition_id == task_id)\
        .delete(synchronize_session=False)
    db.delete(task)
    db.commit()
    logger.info("Task %s deleted with %s progress rows", task_id, removed)
