"""User-related business logic."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from study_tracker.domain.models import UserRecord


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for an e-mail address, if present."""

    def create_user(self, email: str) -> UserRecord:
        """Create and return a new user record."""

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last active timestamp for the user."""


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository

    def ensure_user(self, email: str) -> UserRecord:
        """Ensure a user exists for the e-mail address and return it."""
        normalized = email.strip().lower()
        existing = self.repository.get_by_email(normalized)
        if existing:
            self.repository.touch_last_active(existing.id)
            return existing

        return self.repository.create_user(normalized)
