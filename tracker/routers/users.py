from typing import Optional

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from tracker.db.models.user import User
from tracker.routers import deps
from tracker.services import users as user_service

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
)

@router.post("")
async def create_user(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: Optional[str] = Form(None),
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    new_user = user_service.create_user(db, user, name, email, password, role)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"ok": True, "id": new_user.id, "role": new_user.role},
    )

@router.post("/{id}")
async def update_user(
    id: int,
    name: str = Form(...),
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    user_service.update_user(db, user, id, name)
    return {"ok": True}

@router.post("/{id}/delete")
async def delete_user(
    id: int,
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_current_user)
):
    user_service.delete_user(db, user, id)
    return {"ok": True}
