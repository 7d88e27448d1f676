"""Supabase-backed leave day repository."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from study_tracker.adapters.supabase_errors import execute
from study_tracker.domain.errors import StoreUnavailable
from study_tracker.domain.leave import LeaveDay
from study_tracker.services.leave import LeaveRepository


@dataclass
class SupabaseLeaveRepository(LeaveRepository):
    """Supabase implementation for leave days."""

    client: Client

    def get_leave(self, user_id: UUID, day: date) -> LeaveDay | None:
        """Return the leave day row for a date, if present."""
        response = execute(
            self.client.table("leave_days")
            .select("date, reason")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1),
            "read leave day",
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def upsert_leave(self, user_id: UUID, day: date, reason: str | None) -> LeaveDay:
        """Insert or update the leave day keyed by user and date."""
        response = execute(
            self.client.table("leave_days").upsert(
                {"user_id": str(user_id), "date": day.isoformat(), "reason": reason},
                on_conflict="user_id,date",
            ),
            "save leave day",
        )
        if not response.data:
            raise StoreUnavailable("Failed to save leave day")
        return _parse_row(response.data[0])

    def delete_leave(self, user_id: UUID, day: date) -> None:
        """Delete the leave day row for a date."""
        execute(
            self.client.table("leave_days")
            .delete()
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat()),
            "delete leave day",
        )


def _parse_row(row: dict[str, object]) -> LeaveDay:
    reason = row.get("reason")
    return LeaveDay(
        day=date.fromisoformat(str(row["date"])),
        reason=str(reason) if reason else None,
    )
