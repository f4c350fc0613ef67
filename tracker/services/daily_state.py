"""
Daily dashboard read path.

Builds everything the dashboard renders for one calendar day: the day's log
(created lazily), the bucket catalog with its tasks, the day's assignments,
the team roster and the tasks that were left undone the day before.
"""
import logging
import re
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Optional, Set, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from tracker.core.errors import Conflict, ValidationError
from tracker.core.permissions import require_user
from tracker.db.models.assignment import Assignment, TaskProgress
from tracker.db.models.bucket import Bucket, TaskDefinition
from tracker.db.models.log import DailyLog
from tracker.db.models.user import User

logger = logging.getLogger(__name__)

DAY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_day(value: Union[str, date, None]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError("A date is required")
    if not isinstance(value, str) or not DAY_PATTERN.fullmatch(value):
        raise ValidationError("Dates must look like YYYY-MM-DD")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Dates must look like YYYY-MM-DD")


def find_daily_log(db: Session, day: date) -> Optional[DailyLog]:
    return db.query(DailyLog).filter(DailyLog.date == day).first()


def insert_daily_log(db: Session, day: date) -> DailyLog:
    """
    Inserts the log for ``day``. When another request created it first the
    unique constraint on ``date`` rejects the insert and the winner's row is
    returned instead.
    """
    daily_log = DailyLog(date=day)
    db.add(daily_log)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Daily log for %s created concurrently, re-reading it", day)
        daily_log = find_daily_log(db, day)
        if daily_log is None:
            raise Conflict("Could not create the daily log, please retry")
        return daily_log

    db.refresh(daily_log)
    logger.info("Created daily log %s for %s", daily_log.id, day)
    return daily_log


def get_or_create_daily_log(db: Session, day: Union[str, date]) -> DailyLog:
    day = parse_day(day)
    daily_log = find_daily_log(db, day)
    if daily_log is not None:
        return daily_log
    return insert_daily_log(db, day)


def compute_missed_task_ids(db: Session, day: date) -> Set[int]:
    """
    Task ids left undone on ``day``.

    Only buckets that had an assignee count. A task is missed when its
    assignment has no progress row for it or the row is not DONE. A day
    without a log has nothing missed.
    """
    daily_log = find_daily_log(db, day)
    if daily_log is None:
        return set()

    assignments = db.query(Assignment)\
        .options(selectinload(Assignment.task_progress))\
        .filter(Assignment.daily_log_id == daily_log.id)\
        .filter(Assignment.user_id.isnot(None))\
        .all()
    if not assignments:
        return set()

    # One query for every assigned bucket's tasks, grouped in memory
    bucket_ids = {a.bucket_id for a in assignments}
    tasks = db.query(TaskDefinition).filter(TaskDefinition.bucket_id.in_(bucket_ids)).all()

    tasks_by_bucket = defaultdict(list)
    for task in tasks:
        tasks_by_bucket[task.bucket_id].append(task)

    missed = set()
    for assignment in assignments:
        done_ids = {p.task_definition_id for p in assignment.task_progress if p.is_done}
        for task in tasks_by_bucket.get(assignment.bucket_id, []):
            if task.id not in done_ids:
                missed.add(task.id)
    return missed


def get_daily_state(db: Session, actor: Optional[User], day: Union[str, date]) -> dict:
    actor = require_user(actor)
    day = parse_day(day)

    daily_log = get_or_create_daily_log(db, day)

    buckets = db.query(Bucket)\
        .options(selectinload(Bucket.tasks))\
        .order_by(Bucket.order.asc(), Bucket.id.asc())\
        .all()

    assignments = db.query(Assignment)\
        .options(
            joinedload(Assignment.user),
            selectinload(Assignment.task_progress).joinedload(TaskProgress.supported_by),
        )\
        .filter(Assignment.daily_log_id == daily_log.id)\
        .all()

    users = db.query(User).order_by(User.name.asc()).all()

    missed_task_ids = compute_missed_task_ids(db, day - timedelta(days=1))

    return {
        "daily_log": daily_log,
        "buckets": buckets,
        "assignments": assignments,
        "users": users,
        "missed_task_ids": missed_task_ids,
        "current_user_role": actor.role,
    }


def _serialize_user(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email, "role": user.role}


def serialize_daily_state(state: dict) -> dict:
    daily_log = state["daily_log"]
    return {
        "daily_log": {
            "id": daily_log.id,
            "date": daily_log.date.isoformat(),
            "created_at": daily_log.created_at.isoformat() if daily_log.created_at else None,
        },
        "buckets": [
            {
                "id": b.id,
                "title": b.title,
                "description": b.description,
                "icon": b.icon,
                "color": b.color,
                "order": b.order,
                "tasks": [
                    {"id": t.id, "content": t.content, "order": t.order, "bucket_id": t.bucket_id}
                    for t in b.tasks
                ],
            }
            for b in state["buckets"]
        ],
        "assignments": [
            {
                "id": a.id,
                "bucket_id": a.bucket_id,
                "user_id": a.user_id,
                "user": _serialize_user(a.user),
                "task_progress": [
                    {
                        "id": p.id,
                        "task_definition_id": p.task_definition_id,
                        "status": p.status,
                        "completed_at": p.completed_at.isoformat() if p.completed_at else None,
                        "supported_by_user_id": p.supported_by_user_id,
                    }
                    for p in a.task_progress
                ],
            }
            for a in state["assignments"]
        ],
        "users": [_serialize_user(u) for u in state["users"]],
        "missed_task_ids": sorted(state["missed_task_ids"]),
        "current_user_role": state["current_user_role"],
    }
