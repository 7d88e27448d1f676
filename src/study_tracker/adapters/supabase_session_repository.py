"""Supabase-backed study session repository."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from study_tracker.adapters.supabase_errors import execute
from study_tracker.domain.errors import StoreUnavailable
from study_tracker.domain.sessions import DayRecord, Period, StudySession
from study_tracker.services.sessions import SessionRepository

_COLUMNS = "date, period, start_time, end_time, duration"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for study sessions, one row per session."""

    client: Client

    def append(
        self, user_id: UUID, day: date, period: Period, session: StudySession
    ) -> None:
        """Insert a single session row."""
        response = execute(
            self.client.table("study_sessions").insert(
                {
                    "user_id": str(user_id),
                    "date": day.isoformat(),
                    "period": period.value,
                    "start_time": session.start.isoformat(),
                    "end_time": session.end.isoformat(),
                    "duration": session.duration,
                }
            ),
            "append study session",
        )
        if not response.data:
            raise StoreUnavailable("Failed to create study session")

    def list_day(self, user_id: UUID, day: date) -> DayRecord:
        """Return sessions for a date ordered by start time."""
        response = execute(
            self.client.table("study_sessions")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .order("start_time", desc=False),
            "list study sessions",
        )
        return _group_rows(response.data or []).get(day, DayRecord())

    def list_history(self, user_id: UUID) -> dict[date, DayRecord]:
        """Return every session for a user grouped by date."""
        response = execute(
            self.client.table("study_sessions")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("start_time", desc=False),
            "list study history",
        )
        return _group_rows(response.data or [])

    def clear(self, user_id: UUID, day: date) -> None:
        """Delete all session rows for a date with a single statement."""
        execute(
            self.client.table("study_sessions")
            .delete()
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat()),
            "clear study sessions",
        )


def _group_rows(rows: list[dict[str, object]]) -> dict[date, DayRecord]:
    days: dict[date, DayRecord] = {}
    for row in rows:
        day = date.fromisoformat(str(row["date"]))
        session = StudySession(
            start=datetime.fromisoformat(str(row["start_time"])),
            end=datetime.fromisoformat(str(row["end_time"])),
            duration=int(row.get("duration") or 0),
        )
        record = days.get(day, DayRecord())
        days[day] = record.with_session(Period(row["period"]), session)
    return days
