"""Session aggregation over the session store."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol
from uuid import UUID

from study_tracker.domain.sessions import DayRecord, DayTotals, Period, StudySession

_logger = logging.getLogger(__name__)

MAX_CACHED_DAYS = 62


class SessionRepository(Protocol):
    """Persistence interface for completed study sessions."""

    def append(
        self, user_id: UUID, day: date, period: Period, session: StudySession
    ) -> None:
        """Durably append a single session."""

    def list_day(self, user_id: UUID, day: date) -> DayRecord:
        """Return the sessions for a date, empty when none exist."""

    def list_history(self, user_id: UUID) -> dict[date, DayRecord]:
        """Return every recorded day for a user."""

    def clear(self, user_id: UUID, day: date) -> None:
        """Delete all sessions for a date in one operation."""


@dataclass
class SessionAggregator:
    """Keeps a user's day records and derived totals in step with the store.

    At most max_cached_days records are kept; the least recently used day is
    evicted first and reloaded from the store on its next read.
    """

    repository: SessionRepository
    user_id: UUID
    max_cached_days: int = MAX_CACHED_DAYS
    _days: dict[date, DayRecord] = field(default_factory=dict)

    def get_day(self, day: date, refresh: bool = False) -> DayRecord:
        """Return the day record, loading it from the store when not cached."""
        record = None if refresh else self._days.get(day)
        if record is None:
            record = self.repository.list_day(self.user_id, day)
        self._remember(day, record)
        return record

    def totals(self, day: date) -> DayTotals:
        return self.get_day(day).totals()

    def record_session(
        self, day: date, period: Period, session: StudySession
    ) -> DayTotals:
        """Persist a completed session and return the updated totals."""
        current = self.get_day(day)
        self.repository.append(self.user_id, day, period, session)
        updated = current.with_session(period, session)
        self._remember(day, updated)
        _logger.info(
            "Recorded %s session for %s: %ss", period.value, day, session.duration
        )
        return updated.totals()

    def clear_day(self, day: date) -> None:
        """Remove both periods' sessions for a date."""
        self.repository.clear(self.user_id, day)
        self._remember(day, DayRecord())

    def history(self) -> dict[date, DayRecord]:
        """Return the user's full history and refresh the cache from it."""
        days = self.repository.list_history(self.user_id)
        for day in sorted(days):
            self._remember(day, days[day])
        return days

    def _remember(self, day: date, record: DayRecord) -> None:
        self._days.pop(day, None)
        self._days[day] = record
        while len(self._days) > self.max_cached_days:
            del self._days[next(iter(self._days))]
