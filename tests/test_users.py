# tests/test_users.py

from __future__ import annotations

import pytest

from tracker.core.errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError
from tracker.core.security import verify_password
from tracker.db.models.assignment import Assignment, TaskProgress
from tracker.db.models.user import User
from tracker.services.assignments import assign_bucket, toggle_task
from tracker.services.users import authenticate, create_user, delete_user, update_user

from .conftest import TEST_PASSWORD

DAY = "2024-03-05"


def test_admin_creates_member_with_hashed_password(db, admin) -> None:
    user = create_user(db, admin, "Bob", "Bob@Example.com", "s3cret-pass")

    assert user.role == "MEMBER"
    assert user.email == "bob@example.com"
    assert user.hashed_password != "s3cret-pass"
    assert verify_password("s3cret-pass", user.hashed_password)


def test_admin_can_create_admins(db, admin) -> None:
    user = create_user(db, admin, "Carol", "carol@example.com", "s3cret-pass", role="admin")
    assert user.role == "ADMIN"


def test_member_cannot_create_users(db, member) -> None:
    with pytest.raises(Forbidden):
        create_user(db, member, "Bob", "bob@example.com", "s3cret-pass")
    assert db.query(User).filter(User.email == "bob@example.com").first() is None


def test_anonymous_cannot_create_users(db) -> None:
    with pytest.raises(Unauthorized):
        create_user(db, None, "Bob", "bob@example.com", "s3cret-pass")


@pytest.mark.parametrize(
    "name,email,password,role",
    [
        ("", "bob@example.com", "s3cret-pass", None),
        ("Bob", "", "s3cret-pass", None),
        ("Bob", "bob@example.com", "short", None),
        ("Bob", "bob@example.com", "s3cret-pass", "OWNER"),
    ],
)
def test_create_user_validation(db, admin, name, email, password, role) -> None:
    with pytest.raises(ValidationError):
        create_user(db, admin, name, email, password, role)


def test_duplicate_email_is_a_conflict(db, admin, member) -> None:
    with pytest.raises(Conflict):
        create_user(db, admin, "Other Alice", member.email, "s3cret-pass")


def test_update_user_name(db, admin, member) -> None:
    update_user(db, admin, member.id, "Alicia")
    db.expire_all()
    assert db.query(User).filter(User.id == member.id).one().name == "Alicia"

    with pytest.raises(NotFound):
        update_user(db, admin, 404, "Ghost")


def test_delete_user_keeps_history(db, admin, member, make_user, make_bucket) -> None:
    bob = make_user("Bob")
    inbound = make_bucket("Inbound", order=1)
    outreach = make_bucket("Outreach", order=2)

    alice_assignment = assign_bucket(db, admin, inbound.id, member.id, DAY)
    bob_assignment = assign_bucket(db, admin, outreach.id, bob.id, DAY)
    # Alice helped Bob with one of his tasks
    toggle_task(db, member, bob_assignment.id, outreach.tasks[0].id, True, supporter_id=member.id)
    alice_assignment_id = alice_assignment.id
    member_id = member.id

    delete_user(db, admin, member_id)

    db.expire_all()
    assert db.query(User).filter(User.id == member_id).first() is None
    assert db.query(Assignment).filter(Assignment.id == alice_assignment_id).one().user_id is None
    progress = db.query(TaskProgress).one()
    assert progress.supported_by_user_id is None
    assert progress.status == "DONE"
    assert db.query(Assignment).filter(Assignment.id == bob_assignment.id).one().user_id == bob.id


def test_cannot_delete_yourself(db, admin) -> None:
    with pytest.raises(ValidationError):
        delete_user(db, admin, admin.id)


def test_delete_missing_user(db, admin) -> None:
    with pytest.raises(NotFound):
        delete_user(db, admin, 404)


def test_authenticate(db, member) -> None:
    assert authenticate(db, "ALICE@example.com", TEST_PASSWORD).id == member.id
    assert authenticate(db, member.email, "wrong-password") is None
    assert authenticate(db, "nobody@example.com", TEST_PASSWORD) is None
    assert authenticate(db, "", "") is None
