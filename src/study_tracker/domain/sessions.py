"""Domain models for study sessions."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum

SessionsPayload = dict[str, dict[str, list[dict[str, object]]]]


class Period(str, Enum):
    """Fixed daily study periods."""

    MORNING = "morning"
    AFTERNOON = "afternoon"


@dataclass(frozen=True)
class StudySession:
    """One completed start/stop interval."""

    start: datetime
    end: datetime
    duration: int

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "StudySession":
        """Build a session from timestamps, clamping skewed clocks to zero."""
        seconds = math.floor((end - start).total_seconds())
        return cls(start=start, end=end, duration=max(seconds, 0))

    def to_payload(self) -> dict[str, object]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration": self.duration,
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, object]) -> "StudySession":
        return cls(
            start=datetime.fromisoformat(str(data["start"])),
            end=datetime.fromisoformat(str(data["end"])),
            duration=int(data.get("duration") or 0),
        )


@dataclass(frozen=True)
class DayTotals:
    """Derived per-period and per-day totals in seconds."""

    morning: int
    afternoon: int

    @property
    def day(self) -> int:
        return self.morning + self.afternoon

    def to_payload(self) -> dict[str, int]:
        return {"morning": self.morning, "afternoon": self.afternoon, "day": self.day}


@dataclass(frozen=True)
class DayRecord:
    """Sessions for one date, split by period in append order."""

    morning: tuple[StudySession, ...] = ()
    afternoon: tuple[StudySession, ...] = ()

    def sessions(self, period: Period) -> tuple[StudySession, ...]:
        if period is Period.MORNING:
            return self.morning
        return self.afternoon

    def with_session(self, period: Period, session: StudySession) -> "DayRecord":
        """Return a new record with the session appended to the period."""
        return replace(self, **{period.value: (*self.sessions(period), session)})

    def period_total(self, period: Period) -> int:
        return sum(session.duration for session in self.sessions(period))

    def totals(self) -> DayTotals:
        return DayTotals(
            morning=self.period_total(Period.MORNING),
            afternoon=self.period_total(Period.AFTERNOON),
        )

    def is_empty(self) -> bool:
        return not self.morning and not self.afternoon

    def to_payload(self) -> dict[str, list[dict[str, object]]]:
        return {
            period.value: [session.to_payload() for session in self.sessions(period)]
            for period in Period
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, list]) -> "DayRecord":
        return cls(
            **{
                period.value: tuple(
                    StudySession.from_payload(item)
                    for item in data.get(period.value, [])
                )
                for period in Period
            }
        )


def sessions_map_payload(days: Mapping[date, DayRecord]) -> SessionsPayload:
    """Serialize a per-date history into its JSON shape, oldest date first."""
    return {day.isoformat(): days[day].to_payload() for day in sorted(days)}
