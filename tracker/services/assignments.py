import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracker.core.errors import Conflict, NotFound, ValidationError
from tracker.core.permissions import require_user
from tracker.db.models.assignment import Assignment, ProgressStatus, TaskProgress
from tracker.db.models.bucket import Bucket, TaskDefinition
from tracker.db.models.user import User
from tracker.services.daily_state import get_or_create_daily_log

logger = logging.getLogger(__name__)


def _user_exists(db: Session, user_id: int) -> bool:
    return db.query(User.id).filter(User.id == user_id).first() is not None


def assign_bucket(
    db: Session,
    actor: Optional[User],
    bucket_id: int,
    user_id: Optional[int],
    day: Union[str, date],
) -> Assignment:
    """
    Sets (or clears, with ``user_id=None``) who owns ``bucket_id`` on ``day``.

    There is at most one assignment per bucket per day, so repeated calls
    update the same row.
    """
    require_user(actor)

    bucket = db.query(Bucket).filter(Bucket.id == bucket_id).first()
    if not bucket:
        raise NotFound("Bucket not found")

    daily_log = get_or_create_daily_log(db, day)

    assignment = db.query(Assignment)\
        .filter(Assignment.daily_log_id == daily_log.id, Assignment.bucket_id == bucket_id)\
        .first()
    if assignment is None:
        assignment = Assignment(daily_log_id=daily_log.id, bucket_id=bucket_id, user_id=user_id)
        db.add(assignment)
    else:
        assignment.user_id = user_id

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if user_id is not None and not _user_exists(db, user_id):
            raise ValidationError("That team member does not exist")
        raise Conflict("The bucket was assigned by someone else, please refresh")

    db.refresh(assignment)
    logger.info("Bucket %s on %s assigned to user %s", bucket_id, daily_log.date, user_id)
    return assignment


def resolve_supporter(assignment: Assignment, acting_user_id: Optional[int]) -> Optional[int]:
    """Someone other than the assignee checking a task off is recorded as a supporter."""
    if acting_user_id is None or assignment.user_id == acting_user_id:
        return None
    return acting_user_id


def toggle_task(
    db: Session,
    actor: Optional[User],
    assignment_id: int,
    task_definition_id: int,
    done: bool,
    supporter_id: Optional[int] = None,
) -> TaskProgress:
    require_user(actor)

    assignment = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not assignment:
        raise NotFound("Assignment not found")

    task = db.query(TaskDefinition).filter(TaskDefinition.id == task_definition_id).first()
    if not task:
        raise NotFound("Task not found")

    if task.bucket_id != assignment.bucket_id:
        raise ValidationError("That task does not belong to this bucket")

    progress = db.query(TaskProgress)\
        .filter(TaskProgress.assignment_id == assignment_id, TaskProgress.task_definition_id == task_definition_id)\
        .first()
    if progress is None:
        progress = TaskProgress(assignment_id=assignment_id, task_definition_id=task_definition_id)
        db.add(progress)

    progress.status = ProgressStatus.DONE.value if done else ProgressStatus.PENDING.value
    progress.completed_at = datetime.now(timezone.utc) if done else None
    progress.supported_by_user_id = supporter_id or None

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if supporter_id and not _user_exists(db, supporter_id):
            raise ValidationError("That team member does not exist")
        raise Conflict("The task was updated by someone else, please refresh")

    db.refresh(progress)
    logger.info(
        "Task %s on assignment %s marked %s (supporter %s)",
        task_definition_id, assignment_id, progress.status, progress.supported_by_user_id
    )
    return progress
