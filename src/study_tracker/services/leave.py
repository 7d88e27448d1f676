"""Leave day service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from study_tracker.domain.leave import LeaveDay


class LeaveRepository(Protocol):
    """Persistence interface for leave days."""

    def get_leave(self, user_id: UUID, day: date) -> LeaveDay | None:
        """Return the leave day for a date, if present."""

    def upsert_leave(self, user_id: UUID, day: date, reason: str | None) -> LeaveDay:
        """Create or update the leave day for a date."""

    def delete_leave(self, user_id: UUID, day: date) -> None:
        """Delete the leave day for a date."""


@dataclass
class LeaveService:
    """Service for per-date leave markers."""

    repository: LeaveRepository

    def get(self, user_id: UUID, day: date) -> LeaveDay | None:
        return self.repository.get_leave(user_id, day)

    def put(self, user_id: UUID, day: date, reason: str | None = None) -> LeaveDay:
        """Mark a date as leave, replacing any previous reason."""
        cleaned = reason.strip() if reason else None
        return self.repository.upsert_leave(user_id, day, cleaned or None)

    def delete(self, user_id: UUID, day: date) -> None:
        self.repository.delete_leave(user_id, day)

    def is_on_leave(self, user_id: UUID, day: date) -> bool:
        """Return True when a leave day exists for the date."""
        return self.repository.get_leave(user_id, day) is not None
