"""Default catalog and team used to bootstrap a fresh database."""
import logging

from sqlalchemy.orm import Session

from tracker.core.security import get_password_hash
from tracker.db.models.bucket import Bucket, TaskDefinition
from tracker.db.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_BUCKETS = [
    {"title": "Inbound Support", "description": "Handling tickets.", "icon": "Headphones", "color": "blue"},
    {"title": "Proactive Outreach", "description": "Reaching out to customers.", "icon": "Megaphone", "color": "green"},
    {"title": "Onboarding", "description": "Helping new customers.", "icon": "UserPlus", "color": "purple"},
    {"title": "Technical Operations", "description": "Bug replication.", "icon": "Wrench", "color": "orange"},
    {"title": "Content & Knowledge", "description": "Updating FAQ.", "icon": "BookOpen", "color": "pink"},
    {"title": "Team Sync", "description": "Meetings, huddles.", "icon": "Users", "color": "teal"},
    {"title": "Learning & Dev", "description": "Training, courses.", "icon": "GraduationCap", "color": "yellow"},
]

DEFAULT_TASKS = [
    "Review and clear inbox",
    "Update ticket statuses",
    "Escalate critical issues",
]


def seed_catalog(db: Session) -> int:
    """Creates the default buckets and their checklists. Returns how many buckets were added."""
    if db.query(Bucket).count() > 0:
        logger.info("Buckets already present, skipping catalog seed")
        return 0

    for position, spec in enumerate(DEFAULT_BUCKETS, start=1):
        bucket = Bucket(order=position, **spec)
        db.add(bucket)
        db.flush()
        for task_position, content in enumerate(DEFAULT_TASKS, start=1):
            db.add(TaskDefinition(bucket_id=bucket.id, content=content, order=task_position))

    db.commit()
    logger.info("Seeded %s buckets", len(DEFAULT_BUCKETS))
    return len(DEFAULT_BUCKETS)


def ensure_user(db: Session, name: str, email: str, password: str, role: str = UserRole.MEMBER.value) -> User:
    """Returns the user with ``email``, creating it when missing."""
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user

    user = User(name=name, email=email, hashed_password=get_password_hash(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created %s user %s", role, user.id)
    return user
