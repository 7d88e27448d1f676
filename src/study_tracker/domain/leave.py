"""Domain models for leave days."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LeaveDay:
    """A per-date marker that blocks timer starts."""

    day: date
    reason: str | None = None

    def to_payload(self) -> dict[str, object]:
        return {"date": self.day.isoformat(), "reason": self.reason}
