"""Share snapshot service."""

import copy
import logging
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from study_tracker.domain.errors import NotFound
from study_tracker.domain.sessions import Period, SessionsPayload
from study_tracker.domain.shares import DaySummary, HistorySummary, ShareSnapshot
from study_tracker.services.clock import Clock

_BASE36 = string.digits + string.ascii_lowercase
_CODE_PART_LENGTH = 13

_logger = logging.getLogger(__name__)


class ShareRepository(Protocol):
    """Persistence interface for share snapshots."""

    def insert(self, snapshot: ShareSnapshot) -> None:
        """Store a new snapshot."""

    def get(self, code: str) -> ShareSnapshot | None:
        """Return a snapshot by code regardless of its active flag."""

    def deactivate(self, code: str) -> bool:
        """Mark a snapshot inactive; return False when the code is unknown."""


def generate_share_code() -> str:
    """Return two independent random base-36 strings joined together."""
    return _random_base36(_CODE_PART_LENGTH) + _random_base36(_CODE_PART_LENGTH)


def _random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


@dataclass
class ShareService:
    """Creates, reads and revokes point-in-time history snapshots."""

    repository: ShareRepository
    clock: Clock
    code_factory: Callable[[], str] = generate_share_code

    def create(self, sessions: SessionsPayload, owner_id: UUID | None = None) -> str:
        """Store a frozen copy of the sessions map and return its code."""
        code = self.code_factory()
        self.repository.insert(
            ShareSnapshot(
                code=code,
                payload=copy.deepcopy(sessions),
                created_at=self.clock.now(),
                active=True,
                owner_id=owner_id,
            )
        )
        _logger.info("Created share snapshot with %s days", len(sessions))
        return code

    def read(self, code: str) -> SessionsPayload:
        """Return the snapshot payload for an active code."""
        snapshot = self.repository.get(code)
        if snapshot is None or not snapshot.active:
            raise NotFound("Share link not found")
        return copy.deepcopy(snapshot.payload)

    def owner_of(self, code: str) -> UUID | None:
        """Return the owner of a snapshot, or None when unknown or unowned."""
        snapshot = self.repository.get(code)
        return snapshot.owner_id if snapshot else None

    def deactivate(self, code: str) -> bool:
        """Permanently deactivate a snapshot."""
        found = self.repository.deactivate(code)
        if found:
            _logger.info("Deactivated share snapshot")
        return found


def summarize(sessions: SessionsPayload) -> HistorySummary:
    """Compute per-day and overall totals for a sessions map."""
    days = [
        DaySummary(
            day=day,
            morning_seconds=_period_seconds(sessions[day], Period.MORNING),
            afternoon_seconds=_period_seconds(sessions[day], Period.AFTERNOON),
        )
        for day in sorted(sessions)
    ]
    total = sum(entry.total_seconds for entry in days)
    average = total // len(days) if days else 0
    return HistorySummary(days=days, total_seconds=total, average_seconds=average)


def _period_seconds(record: dict[str, list[dict[str, object]]], period: Period) -> int:
    total = 0
    for session in record.get(period.value, []):
        duration = session.get("duration", 0)
        if isinstance(duration, int | float):
            total += int(duration)
    return total
