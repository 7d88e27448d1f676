"""Pydantic models for API request bodies."""

from datetime import date

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from study_tracker.domain.sessions import Period, SessionsPayload


class SessionCreate(BaseModel):
    """A completed session submitted by a client."""

    date: date
    period: Period
    start: AwareDatetime
    end: AwareDatetime

    @model_validator(mode="after")
    def check_start_on_date(self) -> "SessionCreate":
        if self.start.date() != self.date:
            raise ValueError("start must fall on the session date")
        return self


class LeaveDayRequest(BaseModel):
    """Leave day upsert payload."""

    date: date
    reason: str | None = None


class SharedSession(BaseModel):
    """Session entry inside a shared sessions map."""

    start: str | None = None
    end: str | None = None
    duration: int = Field(ge=0)


class SharedDay(BaseModel):
    """Day entry inside a shared sessions map."""

    morning: list[SharedSession] = Field(default_factory=list)
    afternoon: list[SharedSession] = Field(default_factory=list)


class ShareCreate(BaseModel):
    """Share request; without sessions the stored history is shared."""

    sessions: dict[date, SharedDay] | None = None

    def sessions_payload(self) -> SessionsPayload | None:
        if self.sessions is None:
            return None
        return {
            day.isoformat(): record.model_dump(exclude_none=True)
            for day, record in sorted(self.sessions.items())
        }
