import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracker.core.errors import Conflict, NotFound, ValidationError
from tracker.core.permissions import require_admin, require_user
from tracker.core.security import get_password_hash, verify_password
from tracker.db.models.assignment import Assignment, TaskProgress
from tracker.db.models.user import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    email = (email or "").strip().lower()
    if not email or not password:
        return None
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def create_user(
    db: Session,
    actor: Optional[User],
    name: str,
    email: str,
    password: str,
    role: Optional[str] = None,
) -> User:
    """
    Adds a team member. Only administrators may do this.

    The password is stored as a bcrypt hash; ``role`` defaults to MEMBER.
    """
    require_admin(actor)

    name = (name or "").strip()
    email = (email or "").strip().lower()
    if not name or not email:
        raise ValidationError("Name and email are required")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    role = (role or UserRole.MEMBER.value).upper()
    if role not in {r.value for r in UserRole}:
        raise ValidationError("Unknown role")

    if db.query(User).filter(User.email == email).first():
        raise Conflict("A user with that email already exists")

    new_user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("A user with that email already exists")

    db.refresh(new_user)
    logger.info("User %s created with role %s by user %s", new_user.id, role, actor.id)
    return new_user


def update_user(db: Session, actor: Optional[User], user_id: int, name: str) -> User:
    require_user(actor)
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")

    user.name = name
    db.commit()
    logger.info("User %s renamed", user_id)
    return user


def delete_user(db: Session, actor: Optional[User], user_id: int) -> None:
    """
    Removes a team member while keeping history: their assignments become
    unassigned and tasks they supported lose the supporter reference.
    """
    actor = require_user(actor)
    if actor.id == user_id:
        raise ValidationError("You cannot delete your own account")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")

    unassigned = db.query(Assignment)\
        .filter(Assignment.user_id == user_id)\
        .update({Assignment.user_id: None}, synchronize_session=False)
    unsupported = db.query(TaskProgress)\
        .filter(TaskProgress.supported_by_user_id == user_id)\
        .update({TaskProgress.supported_by_user_id: None}, synchronize_session=False)

    db.delete(user)
    db.commit()
    logger.info(
        "User %s deleted (%s assignments cleared, %s supported tasks cleared)",
        user_id, unassigned, unsupported
    )
