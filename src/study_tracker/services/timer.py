"""Per-period study timers."""

import asyncio
import logging
import math
import threading
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from study_tracker.domain.errors import (
    LeaveDayActive,
    TimerAlreadyRunning,
    TimeWindowViolation,
)
from study_tracker.domain.sessions import Period, StudySession
from study_tracker.services.clock import Clock
from study_tracker.services.leave import LeaveService
from study_tracker.services.sessions import SessionAggregator, SessionRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeWindow:
    """Half-open range of wall-clock hours, [start_hour, end_hour)."""

    start_hour: int
    end_hour: int

    def contains(self, moment: datetime) -> bool:
        return self.start_hour <= moment.hour < self.end_hour

    def label(self) -> str:
        return f"{self.start_hour}:00-{self.end_hour}:00"


DEFAULT_WINDOWS: dict[Period, TimeWindow] = {
    Period.MORNING: TimeWindow(8, 12),
    Period.AFTERNOON: TimeWindow(13, 19),
}


@dataclass(frozen=True)
class Idle:
    """Timer is not counting."""


@dataclass(frozen=True)
class Running:
    """Timer is counting since started_at on top of base_elapsed seconds."""

    started_at: datetime
    base_elapsed: int


TimerState = Idle | Running
IDLE = Idle()


@dataclass(frozen=True)
class TimerStatus:
    """Snapshot of a period timer for display."""

    period: Period
    running: bool
    started_at: datetime | None
    elapsed: int

    def to_payload(self) -> dict[str, object]:
        return {
            "period": self.period.value,
            "running": self.running,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "elapsed": self.elapsed,
        }


@dataclass
class PeriodTimer:
    """Idle/Running state machine for a single period."""

    period: Period
    window: TimeWindow
    state: TimerState = IDLE

    @property
    def is_running(self) -> bool:
        return isinstance(self.state, Running)

    def start(
        self,
        now: datetime,
        base_elapsed: Callable[[date], int] | None = None,
        on_leave: Callable[[date], bool] | None = None,
    ) -> Running:
        """Move from Idle to Running, validating the window then the leave day.

        base_elapsed is only consulted once every precondition has passed.
        """
        if isinstance(self.state, Running):
            raise TimerAlreadyRunning(f"{self.period.value} timer is already running")
        if not self.window.contains(now):
            raise TimeWindowViolation(
                f"{self.period.value} timer can only run during {self.window.label()}"
            )
        if on_leave is not None and on_leave(now.date()):
            raise LeaveDayActive(f"{now.date().isoformat()} is marked as a leave day")
        base = base_elapsed(now.date()) if base_elapsed is not None else 0
        self.state = Running(started_at=now, base_elapsed=base)
        return self.state

    def elapsed(self, now: datetime, idle_total: int = 0) -> int:
        """Return live elapsed seconds, or idle_total when not running."""
        if isinstance(self.state, Running):
            counted = math.floor((now - self.state.started_at).total_seconds())
            return self.state.base_elapsed + max(counted, 0)
        return idle_total

    def stop(
        self, now: datetime, commit: Callable[[StudySession], object]
    ) -> StudySession | None:
        """Commit the running interval and return to Idle.

        Stopping an idle timer does nothing. When commit raises, the timer keeps
        running so the stop can be retried.
        """
        if not isinstance(self.state, Running):
            return None
        session = StudySession.between(self.state.started_at, now)
        commit(session)
        self.state = IDLE
        return session


@dataclass
class StudyTimer:
    """Morning and afternoon timers for one user."""

    user_id: UUID
    clock: Clock
    aggregator: SessionAggregator
    leave_service: LeaveService
    windows: Mapping[Period, TimeWindow] = field(
        default_factory=lambda: dict(DEFAULT_WINDOWS)
    )
    tick_interval_seconds: float = 1.0
    _timers: dict[Period, PeriodTimer] = field(init=False)

    def __post_init__(self) -> None:
        self._timers = {
            period: PeriodTimer(period=period, window=self.windows[period])
            for period in Period
        }

    def timer(self, period: Period) -> PeriodTimer:
        return self._timers[period]

    def start(self, period: Period) -> TimerStatus:
        """Start the period timer at the current time."""
        now = self.clock.now()
        self._timers[period].start(
            now,
            base_elapsed=lambda day: self.aggregator.get_day(day).period_total(period),
            on_leave=lambda day: self.leave_service.is_on_leave(self.user_id, day),
        )
        _logger.info("Started %s timer for user %s", period.value, self.user_id)
        return self.status(period)

    def stop(self, period: Period) -> StudySession | None:
        """Stop the period timer and record the completed session."""
        timer = self._timers[period]
        state = timer.state
        if not isinstance(state, Running):
            return None
        day = state.started_at.date()
        session = timer.stop(
            self.clock.now(),
            commit=lambda completed: self.aggregator.record_session(
                day, period, completed
            ),
        )
        _logger.info("Stopped %s timer for user %s", period.value, self.user_id)
        return session

    def elapsed(self, period: Period) -> int:
        now = self.clock.now()
        timer = self._timers[period]
        if timer.is_running:
            return timer.elapsed(now)
        return self.aggregator.get_day(now.date()).period_total(period)

    def status(self, period: Period) -> TimerStatus:
        timer = self._timers[period]
        state = timer.state
        return TimerStatus(
            period=period,
            running=timer.is_running,
            started_at=state.started_at if isinstance(state, Running) else None,
            elapsed=self.elapsed(period),
        )

    async def ticks(
        self,
        period: Period,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> AsyncIterator[int]:
        """Yield elapsed seconds at the tick interval while the period runs."""
        timer = self._timers[period]
        while timer.is_running:
            yield self.elapsed(period)
            await sleep(self.tick_interval_seconds)


@dataclass
class TimerRegistry:
    """In-process timers keyed by user.

    Entries live for the lifetime of the process since a running timer exists
    only here; each holds two small timers and a bounded day cache.
    """

    clock: Clock
    session_repository: SessionRepository
    leave_service: LeaveService
    windows: Mapping[Period, TimeWindow] = field(
        default_factory=lambda: dict(DEFAULT_WINDOWS)
    )
    tick_interval_seconds: float = 1.0
    _timers: dict[UUID, StudyTimer] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def for_user(self, user_id: UUID) -> StudyTimer:
        """Return the user's timers, creating them on first use."""
        with self._lock:
            timer = self._timers.get(user_id)
            if timer is None:
                timer = StudyTimer(
                    user_id=user_id,
                    clock=self.clock,
                    aggregator=SessionAggregator(self.session_repository, user_id),
                    leave_service=self.leave_service,
                    windows=self.windows,
                    tick_interval_seconds=self.tick_interval_seconds,
                )
                self._timers[user_id] = timer
            return timer
