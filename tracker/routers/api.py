from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Form
from sqlalchemy.orm import Session

from tracker.core.errors import ValidationError
from tracker.core.permissions import require_user
from tracker.db.models.assignment import Assignment
from tracker.db.models.user import User
from tracker.routers import deps
from tracker.services import assignments as assignment_service
from tracker.services import catalog
from tracker.services.daily_state import get_daily_state, serialize_daily_state

router = APIRouter(
    prefix="/api",
    tags=["api"],
)

def optional_id(value: Optional[str]) -> Optional[int]:
    """Form ids arrive as strings; an empty string means "nobody"."""
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError("Invalid id")

@router.get("/daily-state")
async def daily_state(
    date: Optional[str] = None,
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    day = date or _today()
    state = get_daily_state(db, user, day)
    return serialize_daily_state(state)

@router.post("/buckets/{bucket_id}/assign")
async def assign_bucket(
    bucket_id: int,
    user_id: str = Form(""),
    date: str = Form(...),
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    assignment = assignment_service.assign_bucket(db, user, bucket_id, optional_id(user_id), date)
    return {"ok": True, "assignment_id": assignment.id, "user_id": assignment.user_id}

@router.post("/assignments/{assignment_id}/tasks/{task_id}/toggle")
async def toggle_task(
    assignment_id: int,
    task_id: int,
    done: bool = Form(...),
    supporter_id: Optional[str] = Form(None),
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    actor = require_user(user)
    supporter = optional_id(supporter_id)
    if supporter_id is None:
        # Nothing explicit sent: whoever clicks is a supporter unless they own the bucket
        assignment = db.query(Assignment).filter(Assignment.id == assignment_id).first()
        if assignment is not None:
            supporter = assignment_service.resolve_supporter(assignment, actor.id)

    progress = assignment_service.toggle_task(db, actor, assignment_id, task_id, done, supporter)
    return {
        "ok": True,
        "status": progress.status,
        "supported_by_user_id": progress.supported_by_user_id,
    }

@router.post("/buckets/{bucket_id}")
async def update_bucket(
    bucket_id: int,
    title: str = Form(...),
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    catalog.update_bucket(db, user, bucket_id, title)
    return {"ok": True}

@router.post("/buckets/{bucket_id}/tasks")
async def create_task(
    bucket_id: int,
    content: str = Form(...),
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    task = catalog.create_task_definition(db, user, bucket_id, content)
    return {"ok": True, "id": task.id, "order": task.order}

@router.post("/tasks/{task_id}")
async def update_task(
    task_id: int,
    content: str = Form(...),
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    catalog.update_task_definition(db, user, task_id, content)
    return {"ok": True}

@router.post("/tasks/{task_id}/delete")
async def delete_task(
    task_id: int,
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    catalog.delete_task_definition(db, user, task_id)
    return {"ok": True}

def _today() -> str:
    return date.today().isoformat()
