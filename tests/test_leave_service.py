"""Tests for leave days."""

from datetime import date
from uuid import uuid4

from study_tracker.services.leave import LeaveService
from tests.conftest import InMemoryLeaveRepository


def test_put_upserts_by_date() -> None:
    repository = InMemoryLeaveRepository()
    service = LeaveService(repository)
    user_id = uuid4()
    day = date(2024, 1, 1)

    service.put(user_id, day, "dentist")
    updated = service.put(user_id, day, "  flu  ")

    assert updated.reason == "flu"
    assert len(repository.leaves) == 1
    assert service.get(user_id, day) == updated
    assert service.is_on_leave(user_id, day)


def test_blank_reason_is_stored_as_none() -> None:
    service = LeaveService(InMemoryLeaveRepository())

    leave = service.put(uuid4(), date(2024, 1, 1), "   ")

    assert leave.reason is None


def test_delete_removes_leave() -> None:
    service = LeaveService(InMemoryLeaveRepository())
    user_id = uuid4()
    day = date(2024, 1, 1)
    service.put(user_id, day)

    service.delete(user_id, day)

    assert service.get(user_id, day) is None
    assert not service.is_on_leave(user_id, day)
