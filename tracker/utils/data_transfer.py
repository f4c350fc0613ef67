"""
JSON export and import of the whole tracker database.

Password hashes are never exported. Imported users all receive the same
temporary password, which the operator hands out separately.
"""
import logging
import re
from datetime import date, datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracker.core.errors import ValidationError
from tracker.core.security import get_password_hash
from tracker.db.models.assignment import Assignment, TaskProgress
from tracker.db.models.bucket import Bucket, TaskDefinition
from tracker.db.models.log import DailyLog
from tracker.db.models.user import User

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


def _iso(value):
    return value.isoformat() if value else None


def _parse_datetime(value):
    if not value:
        return None
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return datetime.fromisoformat(value)


def export_data(db: Session) -> dict:
    return {
        "users": [
            {"id": u.id, "name": u.name, "email": u.email, "role": u.role, "created_at": _iso(u.created_at)}
            for u in db.query(User).order_by(User.id).all()
        ],
        "buckets": [
            {"id": b.id, "title": b.title, "description": b.description, "icon": b.icon,
             "color": b.color, "order": b.order}
            for b in db.query(Bucket).order_by(Bucket.id).all()
        ],
        "task_definitions": [
            {"id": t.id, "content": t.content, "bucket_id": t.bucket_id, "order": t.order}
            for t in db.query(TaskDefinition).order_by(TaskDefinition.id).all()
        ],
        "daily_logs": [
            {"id": d.id, "date": d.date.isoformat(), "created_at": _iso(d.created_at)}
            for d in db.query(DailyLog).order_by(DailyLog.id).all()
        ],
        "assignments": [
            {"id": a.id, "daily_log_id": a.daily_log_id, "bucket_id": a.bucket_id, "user_id": a.user_id}
            for a in db.query(Assignment).order_by(Assignment.id).all()
        ],
        "task_progress": [
            {"id": p.id, "assignment_id": p.assignment_id, "task_definition_id": p.task_definition_id,
             "status": p.status, "completed_at": _iso(p.completed_at),
             "supported_by_user_id": p.supported_by_user_id}
            for p in db.query(TaskProgress).order_by(TaskProgress.id).all()
        ],
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "version": EXPORT_VERSION,
    }


def _placeholder_email(name: str) -> str:
    local_part = re.sub(r"\s+", "", name.lower())
    return f"{local_part}@example.com"


def _with_created_at(row: dict, fields: dict) -> dict:
    # Leave created_at unset when absent so the server default applies
    created_at = _parse_datetime(row.get("created_at"))
    if created_at is not None:
        fields["created_at"] = created_at
    return fields


def import_data(db: Session, data: dict, default_password: str) -> dict:
    """
    Loads an export into an empty database, keeping the original ids so every
    relation survives. Returns the number of rows imported per table.
    """
    if db.query(User).count() or db.query(Bucket).count():
        raise ValidationError("Import needs an empty database")
    if not default_password:
        raise ValidationError("A temporary password is required")

    hashed_password = get_password_hash(default_password)
    try:
        _load_rows(db, data, hashed_password)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("The export references missing rows or repeats an email")
    except (KeyError, TypeError, ValueError):
        db.rollback()
        raise ValidationError("The export file is malformed")

    counts = {key: len(data.get(key, [])) for key in
              ("users", "buckets", "task_definitions", "daily_logs", "assignments", "task_progress")}
    logger.info("Imported %s", counts)
    return counts


def _load_rows(db: Session, data: dict, hashed_password: str) -> None:
    for u in data.get("users", []):
        db.add(User(**_with_created_at(u, {
            "id": u["id"],
            "name": u["name"],
            "email": (u.get("email") or _placeholder_email(u["name"])).lower(),
            "hashed_password": hashed_password,
            "role": u.get("role") or "MEMBER",
        })))
    for b in data.get("buckets", []):
        db.add(Bucket(**{k: b.get(k) for k in ("id", "title", "description", "icon", "color", "order")}))
    db.flush()

    for d in data.get("daily_logs", []):
        db.add(DailyLog(**_with_created_at(d, {
            "id": d["id"],
            "date": date.fromisoformat(d["date"]),
        })))
    for t in data.get("task_definitions", []):
        db.add(TaskDefinition(id=t["id"], content=t["content"], bucket_id=t["bucket_id"], order=t["order"]))
    db.flush()

    for a in data.get("assignments", []):
        db.add(Assignment(id=a["id"], daily_log_id=a["daily_log_id"], bucket_id=a["bucket_id"], user_id=a.get("user_id")))
    db.flush()

    for p in data.get("task_progress", []):
        db.add(TaskProgress(
            id=p["id"],
            assignment_id=p["assignment_id"],
            task_definition_id=p["task_definition_id"],
            status=p["status"],
            completed_at=_parse_datetime(p.get("completed_at")),
            supported_by_user_id=p.get("supported_by_user_id"),
        ))
    db.flush()
