from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from tracker.db.session import SessionLocal
from tracker.core.security import decode_access_token
from tracker.db.models.user import User

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

async def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """
    Resolves the signed-in user from the ``access_token`` cookie.

    Returns None instead of raising so the service layer decides how to treat
    anonymous callers.
    """
    token = request.cookies.get("access_token")
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    user_id = payload.get("sub")
    if user_id is None:
        return None

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None

    return db.query(User).filter(User.id == user_id).first()
