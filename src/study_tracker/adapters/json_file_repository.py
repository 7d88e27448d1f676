"""JSON file backends for local development."""

import json
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path
from uuid import UUID, uuid4

from study_tracker.domain.errors import StoreUnavailable
from study_tracker.domain.leave import LeaveDay
from study_tracker.domain.models import UserRecord
from study_tracker.domain.sessions import DayRecord, Period, StudySession
from study_tracker.domain.shares import ShareSnapshot
from study_tracker.services.leave import LeaveRepository
from study_tracker.services.sessions import SessionRepository
from study_tracker.services.shares import ShareRepository
from study_tracker.services.users import UserRepository


@dataclass
class JsonDocument:
    """A single JSON object on disk with serialized read-modify-write access."""

    path: Path
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def read(self) -> dict:
        with self._lock:
            return self._load()

    @contextmanager
    def update(self) -> Iterator[dict]:
        """Yield the document for mutation and write it back on success."""
        with self._lock:
            document = self._load()
            yield document
            self._dump(document)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailable(f"Failed to read {self.path.name}") from exc

    def _dump(self, document: dict) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            tmp_path.replace(self.path)
        except OSError as exc:
            raise StoreUnavailable(f"Failed to write {self.path.name}") from exc


@dataclass
class JsonFileSessionRepository(SessionRepository):
    """Sessions stored as {user_id: {date: {period: [session, ...]}}}."""

    document: JsonDocument

    def append(
        self, user_id: UUID, day: date, period: Period, session: StudySession
    ) -> None:
        """Append a session under the user's date and period."""
        with self.document.update() as data:
            days = data.setdefault(str(user_id), {})
            record = days.setdefault(
                day.isoformat(), {entry.value: [] for entry in Period}
            )
            record.setdefault(period.value, []).append(session.to_payload())

    def list_day(self, user_id: UUID, day: date) -> DayRecord:
        """Return sessions for a date."""
        days = self.document.read().get(str(user_id), {})
        return DayRecord.from_payload(days.get(day.isoformat(), {}))

    def list_history(self, user_id: UUID) -> dict[date, DayRecord]:
        """Return every stored day for a user."""
        days = self.document.read().get(str(user_id), {})
        return {
            date.fromisoformat(key): DayRecord.from_payload(value)
            for key, value in days.items()
        }

    def clear(self, user_id: UUID, day: date) -> None:
        """Drop the whole date entry in one write."""
        with self.document.update() as data:
            data.get(str(user_id), {}).pop(day.isoformat(), None)


@dataclass
class JsonFileLeaveRepository(LeaveRepository):
    """Leave days stored as {user_id: {date: reason}}."""

    document: JsonDocument

    def get_leave(self, user_id: UUID, day: date) -> LeaveDay | None:
        """Return the leave day for a date, if present."""
        days = self.document.read().get(str(user_id), {})
        if day.isoformat() not in days:
            return None
        return LeaveDay(day=day, reason=days[day.isoformat()])

    def upsert_leave(self, user_id: UUID, day: date, reason: str | None) -> LeaveDay:
        """Create or replace the leave day for a date."""
        with self.document.update() as data:
            data.setdefault(str(user_id), {})[day.isoformat()] = reason
        return LeaveDay(day=day, reason=reason)

    def delete_leave(self, user_id: UUID, day: date) -> None:
        """Delete the leave day for a date."""
        with self.document.update() as data:
            data.get(str(user_id), {}).pop(day.isoformat(), None)


@dataclass
class JsonFileShareRepository(ShareRepository):
    """Share snapshots stored as {code: record}."""

    document: JsonDocument

    def insert(self, snapshot: ShareSnapshot) -> None:
        """Store a snapshot record."""
        with self.document.update() as data:
            data[snapshot.code] = {
                "sessions_data": snapshot.payload,
                "created_at": snapshot.created_at.isoformat(),
                "is_active": snapshot.active,
                "owner_id": str(snapshot.owner_id) if snapshot.owner_id else None,
            }

    def get(self, code: str) -> ShareSnapshot | None:
        """Return a snapshot by code."""
        row = self.document.read().get(code)
        if row is None:
            return None
        return ShareSnapshot(
            code=code,
            payload=row["sessions_data"],
            created_at=datetime.fromisoformat(row["created_at"]),
            active=bool(row["is_active"]),
            owner_id=UUID(row["owner_id"]) if row.get("owner_id") else None,
        )

    def deactivate(self, code: str) -> bool:
        """Clear the active flag if the code exists."""
        with self.document.update() as data:
            row = data.get(code)
            if row is None:
                return False
            row["is_active"] = False
        return True


@dataclass
class JsonFileUserRepository(UserRepository):
    """Users stored as {email: {id, last_active_at}}."""

    document: JsonDocument

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for an e-mail address, if present."""
        row = self.document.read().get(email)
        if row is None:
            return None
        return UserRecord(id=UUID(row["id"]), email=email)

    def create_user(self, email: str) -> UserRecord:
        """Create a user with a fresh id."""
        user = UserRecord(id=uuid4(), email=email)
        with self.document.update() as data:
            data[email] = {"id": str(user.id), "last_active_at": None}
        return user

    def touch_last_active(self, user_id: UUID) -> None:
        """Update last_active_at for the user with the given id."""
        with self.document.update() as data:
            for row in data.values():
                if row.get("id") == str(user_id):
                    row["last_active_at"] = datetime.now(tz=UTC).isoformat()
