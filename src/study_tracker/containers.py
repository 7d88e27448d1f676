"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from study_tracker.adapters.google_identity_client import (
    HttpxIdentityClient,
    IdentityClient,
)
from study_tracker.adapters.json_file_repository import (
    JsonDocument,
    JsonFileLeaveRepository,
    JsonFileSessionRepository,
    JsonFileShareRepository,
    JsonFileUserRepository,
)
from study_tracker.adapters.supabase_leave_repository import SupabaseLeaveRepository
from study_tracker.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from study_tracker.adapters.supabase_share_repository import SupabaseShareRepository
from study_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from study_tracker.config import Settings
from study_tracker.services.clock import Clock, SystemClock
from study_tracker.services.leave import LeaveRepository, LeaveService
from study_tracker.services.sessions import SessionRepository
from study_tracker.services.shares import ShareRepository, ShareService
from study_tracker.services.timer import TimerRegistry
from study_tracker.services.users import UserRepository, UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    identity_client: IdentityClient
    user_service: UserService
    leave_service: LeaveService
    share_service: ShareService
    timer_registry: TimerRegistry
    close_resources: Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class _Repositories:
    users: UserRepository
    sessions: SessionRepository
    leave: LeaveRepository
    shares: ShareRepository


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    repositories = _build_repositories(resolved_settings)
    clock = SystemClock(resolved_settings.timezone)
    leave_service = LeaveService(repositories.leave)
    identity_client = HttpxIdentityClient.create(
        resolved_settings.identity_userinfo_url
    )

    async def close_resources() -> None:
        await identity_client.close()

    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        identity_client=identity_client,
        user_service=UserService(repositories.users),
        leave_service=leave_service,
        share_service=ShareService(repositories.shares, clock),
        timer_registry=TimerRegistry(
            clock=clock,
            session_repository=repositories.sessions,
            leave_service=leave_service,
            windows=resolved_settings.period_windows(),
            tick_interval_seconds=resolved_settings.tick_interval_seconds,
        ),
        close_resources=close_resources,
    )


def _build_repositories(settings: Settings) -> _Repositories:
    if settings.storage_backend == "file":
        data_dir = Path(settings.data_dir)
        return _Repositories(
            users=JsonFileUserRepository(JsonDocument(data_dir / "users.json")),
            sessions=JsonFileSessionRepository(
                JsonDocument(data_dir / "study_sessions.json")
            ),
            leave=JsonFileLeaveRepository(JsonDocument(data_dir / "leave_days.json")),
            shares=JsonFileShareRepository(
                JsonDocument(data_dir / "shared_sessions.json")
            ),
        )
    if settings.storage_backend != "supabase":
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError("Supabase backend requires supabase_url and service key")
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return _Repositories(
        users=SupabaseUserRepository(client),
        sessions=SupabaseSessionRepository(client),
        leave=SupabaseLeaveRepository(client),
        shares=SupabaseShareRepository(client),
    )
