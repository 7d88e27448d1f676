"""Domain models for share snapshots."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from study_tracker.domain.sessions import SessionsPayload


@dataclass(frozen=True)
class ShareSnapshot:
    """Point-in-time copy of a sessions map reachable by an opaque code."""

    code: str
    payload: SessionsPayload
    created_at: datetime
    active: bool = True
    owner_id: UUID | None = None


@dataclass(frozen=True)
class DaySummary:
    """Totals for one shared day."""

    day: str
    morning_seconds: int
    afternoon_seconds: int

    @property
    def total_seconds(self) -> int:
        return self.morning_seconds + self.afternoon_seconds


@dataclass(frozen=True)
class HistorySummary:
    """Overall statistics for a shared history."""

    days: list[DaySummary]
    total_seconds: int
    average_seconds: int

    @property
    def study_days(self) -> int:
        return len(self.days)
