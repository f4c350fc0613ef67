# tests/conftest.py

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tracker.core.security import get_password_hash
from tracker.db.base import Base
from tracker.db.models.bucket import Bucket, TaskDefinition
from tracker.db.models.user import User, UserRole
from tracker.db.session import enable_sqlite_foreign_keys

TEST_PASSWORD = "password123"


@pytest.fixture()
def engine():
    """
    In-memory SQLite shared by every session of one test, with foreign keys
    enforced like the application engine.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine) -> Session:
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture(scope="session")
def password_hash() -> str:
    # bcrypt is slow on purpose; hash once per run
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture()
def make_user(db: Session, password_hash: str):
    def _make_user(name: str, role: str = UserRole.MEMBER.value) -> User:
        user = User(
            name=name,
            email=f"{name.lower()}@example.com",
            hashed_password=password_hash,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def admin(make_user) -> User:
    return make_user("Admin", role=UserRole.ADMIN.value)


@pytest.fixture()
def member(make_user) -> User:
    return make_user("Alice")


@pytest.fixture()
def make_bucket(db: Session):
    def _make_bucket(title: str, order: int, tasks=("First", "Second")) -> Bucket:
        bucket = Bucket(title=title, order=order, color="blue")
        db.add(bucket)
        db.flush()
        for position, content in enumerate(tasks, start=1):
            db.add(TaskDefinition(bucket_id=bucket.id, content=content, order=position))
        db.commit()
        db.refresh(bucket)
        return bucket

    return _make_bucket
