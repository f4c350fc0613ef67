from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tracker.core.templates import templates
from tracker.db.models.user import User
from tracker.routers import deps
from tracker.services.daily_state import get_daily_state, parse_day

router = APIRouter(tags=["dashboard"])

def build_bucket_cards(state: dict) -> list:
    """Pairs every bucket with its assignment and per-task progress for rendering."""
    assignments_by_bucket = {a.bucket_id: a for a in state["assignments"]}
    cards = []
    for bucket in state["buckets"]:
        assignment = assignments_by_bucket.get(bucket.id)
        progress_by_task = {}
        if assignment is not None:
            progress_by_task = {p.task_definition_id: p for p in assignment.task_progress}

        tasks = []
        for task in bucket.tasks:
            progress = progress_by_task.get(task.id)
            tasks.append({
                "task": task,
                "done": progress is not None and progress.is_done,
                "progress": progress,
                "missed": task.id in state["missed_task_ids"],
            })

        done_count = sum(1 for t in tasks if t["done"])
        cards.append({
            "bucket": bucket,
            "assignment": assignment,
            "assignee": assignment.user if assignment is not None else None,
            "tasks": tasks,
            "done_count": done_count,
            "total": len(tasks),
        })
    return cards

@router.get("/")
async def dashboard(
    request: Request,
    date: Optional[str] = None,
    edit: bool = False,
    as_user: Optional[int] = None,
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    today = _today()
    day = parse_day(date or today.isoformat())
    state = get_daily_state(db, user, day)
    cards = build_bucket_cards(state)

    # "View as" only changes whose perspective the page renders from
    users_by_id = {u.id: u for u in state["users"]}
    viewer = users_by_id.get(as_user, user)

    unassigned = [c for c in cards if c["assignee"] is None]

    return templates.TemplateResponse(request, "dashboard.html", {
        "user": user,
        "viewer": viewer,
        "day": day,
        "is_today": day == today,
        "cards": cards,
        "users": state["users"],
        "unassigned": unassigned,
        "edit_mode": edit and user.is_admin,
        "current_user_role": state["current_user_role"],
    })

def _today() -> date:
    return date.today()
