"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from study_tracker.adapters.supabase_errors import execute
from study_tracker.domain.errors import StoreUnavailable
from study_tracker.domain.models import UserRecord
from study_tracker.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for an e-mail address, if present."""
        response = execute(
            self.client.table("users").select("id, email").eq("email", email).limit(1),
            "read user",
        )
        if response.data:
            row = response.data[0]
            return UserRecord(id=UUID(row["id"]), email=row["email"])
        return None

    def create_user(self, email: str) -> UserRecord:
        """Create a new user row and return it."""
        response = execute(
            self.client.table("users").insert({"email": email}), "create user"
        )
        if not response.data:
            raise StoreUnavailable("Failed to create user in Supabase")
        row = response.data[0]
        return UserRecord(id=UUID(row["id"]), email=row["email"])

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last_active_at timestamp for a user."""
        execute(
            self.client.table("users")
            .update({"last_active_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(user_id)),
            "touch user",
        )
