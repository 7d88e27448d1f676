"""Supabase-backed share snapshot repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from study_tracker.adapters.supabase_errors import execute
from study_tracker.domain.errors import StoreUnavailable
from study_tracker.domain.shares import ShareSnapshot
from study_tracker.services.shares import ShareRepository


@dataclass
class SupabaseShareRepository(ShareRepository):
    """Supabase implementation for the shared_sessions table."""

    client: Client

    def insert(self, snapshot: ShareSnapshot) -> None:
        """Insert a snapshot row."""
        response = execute(
            self.client.table("shared_sessions").insert(
                {
                    "share_code": snapshot.code,
                    "sessions_data": snapshot.payload,
                    "created_at": snapshot.created_at.isoformat(),
                    "is_active": snapshot.active,
                    "owner_id": str(snapshot.owner_id) if snapshot.owner_id else None,
                }
            ),
            "create share snapshot",
        )
        if not response.data:
            raise StoreUnavailable("Failed to create share snapshot")

    def get(self, code: str) -> ShareSnapshot | None:
        """Return a snapshot by share code."""
        response = execute(
            self.client.table("shared_sessions")
            .select("share_code, sessions_data, created_at, is_active, owner_id")
            .eq("share_code", code)
            .limit(1),
            "read share snapshot",
        )
        if not response.data:
            return None
        row = response.data[0]
        return ShareSnapshot(
            code=row["share_code"],
            payload=row["sessions_data"],
            created_at=datetime.fromisoformat(row["created_at"]),
            active=bool(row["is_active"]),
            owner_id=UUID(row["owner_id"]) if row.get("owner_id") else None,
        )

    def deactivate(self, code: str) -> bool:
        """Clear the active flag with a single update."""
        response = execute(
            self.client.table("shared_sessions")
            .update({"is_active": False})
            .eq("share_code", code),
            "deactivate share snapshot",
        )
        return bool(response.data)
