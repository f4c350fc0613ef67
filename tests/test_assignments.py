# tests/test_assignments.py

from __future__ import annotations

import pytest

from tracker.core.errors import NotFound, Unauthorized, ValidationError
from tracker.db.models.assignment import Assignment, TaskProgress
from tracker.services.assignments import assign_bucket, resolve_supporter, toggle_task

DAY = "2024-03-05"


def test_assign_then_unassign(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)

    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)
    assert assignment.user_id == member.id

    cleared = assign_bucket(db, member, bucket.id, None, DAY)
    assert cleared.id == assignment.id
    assert cleared.user_id is None


def test_repeated_assignment_never_duplicates(db, member, make_user, make_bucket) -> None:
    bob = make_user("Bob")
    bucket = make_bucket("Inbound", order=1)

    for user_id in (member.id, member.id, bob.id, None, bob.id):
        assign_bucket(db, member, bucket.id, user_id, DAY)

    rows = db.query(Assignment).filter(Assignment.bucket_id == bucket.id).all()
    assert len(rows) == 1
    assert rows[0].user_id == bob.id


def test_same_bucket_on_different_days_gets_separate_rows(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)

    first = assign_bucket(db, member, bucket.id, member.id, "2024-03-04")
    second = assign_bucket(db, member, bucket.id, member.id, "2024-03-05")

    assert first.id != second.id
    assert first.daily_log_id != second.daily_log_id


def test_assigning_unknown_user_fails_and_keeps_prior_state(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)
    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)

    with pytest.raises(ValidationError):
        assign_bucket(db, member, bucket.id, 9999, DAY)

    db.expire_all()
    assert db.query(Assignment).filter(Assignment.id == assignment.id).one().user_id == member.id


def test_assigning_unknown_bucket_is_not_found(db, member) -> None:
    with pytest.raises(NotFound):
        assign_bucket(db, member, 404, member.id, DAY)


def test_assignment_requires_a_session(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)
    with pytest.raises(Unauthorized):
        assign_bucket(db, None, bucket.id, member.id, DAY)


def test_toggle_converges_to_one_row(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)
    task = bucket.tasks[0]
    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)

    toggle_task(db, member, assignment.id, task.id, True)
    toggle_task(db, member, assignment.id, task.id, False)
    toggle_task(db, member, assignment.id, task.id, True)
    progress = toggle_task(db, member, assignment.id, task.id, False)

    rows = db.query(TaskProgress).filter(TaskProgress.assignment_id == assignment.id).all()
    assert len(rows) == 1
    assert rows[0].id == progress.id
    assert rows[0].status == "PENDING"
    assert rows[0].completed_at is None


def test_done_records_completion_time(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)
    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)

    progress = toggle_task(db, member, assignment.id, bucket.tasks[0].id, True)

    assert progress.status == "DONE"
    assert progress.completed_at is not None


def test_supporter_is_recorded_without_changing_assignee(db, member, make_user, make_bucket) -> None:
    bob = make_user("Bob")
    bucket = make_bucket("Inbound", order=1)
    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)

    progress = toggle_task(db, bob, assignment.id, bucket.tasks[0].id, True, supporter_id=bob.id)

    assert progress.supported_by_user_id == bob.id
    db.refresh(assignment)
    assert assignment.user_id == member.id


def test_resolve_supporter(db, member, make_user, make_bucket) -> None:
    bob = make_user("Bob")
    bucket = make_bucket("Inbound", order=1)
    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)

    assert resolve_supporter(assignment, member.id) is None
    assert resolve_supporter(assignment, bob.id) == bob.id
    assert resolve_supporter(assignment, None) is None


def test_progress_allowed_on_unassigned_bucket(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)
    assignment = assign_bucket(db, member, bucket.id, None, DAY)

    progress = toggle_task(db, member, assignment.id, bucket.tasks[0].id, True)

    assert progress.status == "DONE"
    assert assignment.user_id is None


def test_toggle_rejects_task_from_another_bucket(db, member, make_bucket) -> None:
    inbound = make_bucket("Inbound", order=1)
    outreach = make_bucket("Outreach", order=2)
    assignment = assign_bucket(db, member, inbound.id, member.id, DAY)

    with pytest.raises(ValidationError):
        toggle_task(db, member, assignment.id, outreach.tasks[0].id, True)
    assert db.query(TaskProgress).count() == 0


def test_toggle_unknown_references(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)
    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)

    with pytest.raises(NotFound):
        toggle_task(db, member, 404, bucket.tasks[0].id, True)
    with pytest.raises(NotFound):
        toggle_task(db, member, assignment.id, 404, True)


def test_toggle_with_unknown_supporter_fails(db, member, make_bucket) -> None:
    bucket = make_bucket("Inbound", order=1)
    assignment = assign_bucket(db, member, bucket.id, member.id, DAY)

    with pytest.raises(ValidationError):
        toggle_task(db, member, assignment.id, bucket.tasks[0].id, True, supporter_id=9999)
    assert db.query(TaskProgress).count() == 0
