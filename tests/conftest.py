"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest

from study_tracker.adapters.google_identity_client import IdentityClient
from study_tracker.config import Settings
from study_tracker.containers import AppContainer
from study_tracker.domain.errors import StoreUnavailable
from study_tracker.domain.leave import LeaveDay
from study_tracker.domain.models import UserRecord
from study_tracker.domain.sessions import DayRecord, Period, StudySession
from study_tracker.domain.shares import ShareSnapshot
from study_tracker.services.clock import Clock
from study_tracker.services.leave import LeaveRepository, LeaveService
from study_tracker.services.sessions import SessionRepository
from study_tracker.services.shares import ShareRepository, ShareService
from study_tracker.services.timer import TimerRegistry
from study_tracker.services.users import UserRepository, UserService

TAIPEI = ZoneInfo("Asia/Taipei")
TOKEN = "valid-token"
EMAIL = "student@example.com"


@dataclass
class FakeClock(Clock):
    """Manually driven clock."""

    current: datetime = field(
        default_factory=lambda: datetime(2024, 1, 1, 9, 0, 0, tzinfo=TAIPEI)
    )

    def now(self) -> datetime:
        return self.current

    def set(self, hour: int, minute: int = 0, second: int = 0) -> None:
        self.current = self.current.replace(hour=hour, minute=minute, second=second)

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    touched: list[UUID] = field(default_factory=list)

    def get_by_email(self, email: str) -> UserRecord | None:
        return self.users.get(email)

    def create_user(self, email: str) -> UserRecord:
        user = UserRecord(id=uuid4(), email=email)
        self.users[email] = user
        return user

    def touch_last_active(self, user_id: UUID) -> None:
        self.touched.append(user_id)


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    days: dict[tuple[UUID, date], DayRecord] = field(default_factory=dict)
    appends: list[tuple[date, Period, StudySession]] = field(default_factory=list)
    reads: int = 0
    fail_writes: bool = False
    fail_reads: bool = False

    def append(
        self, user_id: UUID, day: date, period: Period, session: StudySession
    ) -> None:
        if self.fail_writes:
            raise StoreUnavailable("store down")
        record = self.days.get((user_id, day), DayRecord())
        self.days[(user_id, day)] = record.with_session(period, session)
        self.appends.append((day, period, session))

    def list_day(self, user_id: UUID, day: date) -> DayRecord:
        if self.fail_reads:
            raise StoreUnavailable("store down")
        self.reads += 1
        return self.days.get((user_id, day), DayRecord())

    def list_history(self, user_id: UUID) -> dict[date, DayRecord]:
        return {
            day: record
            for (owner, day), record in self.days.items()
            if owner == user_id
        }

    def clear(self, user_id: UUID, day: date) -> None:
        if self.fail_writes:
            raise StoreUnavailable("store down")
        self.days.pop((user_id, day), None)


@dataclass
class InMemoryLeaveRepository(LeaveRepository):
    """In-memory leave repository for tests."""

    leaves: dict[tuple[UUID, date], LeaveDay] = field(default_factory=dict)

    def get_leave(self, user_id: UUID, day: date) -> LeaveDay | None:
        return self.leaves.get((user_id, day))

    def upsert_leave(self, user_id: UUID, day: date, reason: str | None) -> LeaveDay:
        leave = LeaveDay(day=day, reason=reason)
        self.leaves[(user_id, day)] = leave
        return leave

    def delete_leave(self, user_id: UUID, day: date) -> None:
        self.leaves.pop((user_id, day), None)


@dataclass
class InMemoryShareRepository(ShareRepository):
    """In-memory share repository for tests."""

    snapshots: dict[str, ShareSnapshot] = field(default_factory=dict)

    def insert(self, snapshot: ShareSnapshot) -> None:
        self.snapshots[snapshot.code] = snapshot

    def get(self, code: str) -> ShareSnapshot | None:
        return self.snapshots.get(code)

    def deactivate(self, code: str) -> bool:
        snapshot = self.snapshots.get(code)
        if snapshot is None:
            return False
        self.snapshots[code] = ShareSnapshot(
            code=snapshot.code,
            payload=snapshot.payload,
            created_at=snapshot.created_at,
            active=False,
            owner_id=snapshot.owner_id,
        )
        return True


@dataclass
class FakeIdentityClient(IdentityClient):
    """Identity client backed by a token table."""

    tokens: dict[str, str] = field(default_factory=lambda: {TOKEN: EMAIL})

    async def resolve_email(self, access_token: str) -> str | None:
        return self.tokens.get(access_token)


def auth_headers(token: str = TOKEN) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(storage_backend="file", data_dir=str(tmp_path))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def leave_repository() -> InMemoryLeaveRepository:
    return InMemoryLeaveRepository()


@pytest.fixture
def share_repository() -> InMemoryShareRepository:
    return InMemoryShareRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def container(
    settings: Settings,
    clock: FakeClock,
    session_repository: InMemorySessionRepository,
    leave_repository: InMemoryLeaveRepository,
    share_repository: InMemoryShareRepository,
    user_repository: InMemoryUserRepository,
) -> AppContainer:
    leave_service = LeaveService(leave_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        clock=clock,
        identity_client=FakeIdentityClient(),
        user_service=UserService(user_repository),
        leave_service=leave_service,
        share_service=ShareService(share_repository, clock),
        timer_registry=TimerRegistry(
            clock=clock,
            session_repository=session_repository,
            leave_service=leave_service,
        ),
        close_resources=close_resources,
    )
