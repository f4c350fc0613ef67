from typing import Optional

from tracker.core.errors import Forbidden, Unauthorized
from tracker.db.models.user import User, UserRole


def require_user(actor: Optional[User]) -> User:
    if actor is None:
        raise Unauthorized()
    return actor


def require_admin(actor: Optional[User]) -> User:
    actor = require_user(actor)
    if actor.role != UserRole.ADMIN.value:
        raise Forbidden("Only administrators can do that")
    return actor
