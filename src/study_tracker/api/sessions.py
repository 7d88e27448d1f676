"""Study session and timer endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from study_tracker.api.auth import require_user
from study_tracker.api.models import SessionCreate  # noqa: TC001
from study_tracker.domain.models import UserRecord  # noqa: TC001
from study_tracker.domain.sessions import (
    DayRecord,
    DayTotals,
    Period,
    StudySession,
    sessions_map_payload,
)
from study_tracker.formatting import format_clock, format_date_zh, format_duration_zh

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from study_tracker.containers import AppContainer
    from study_tracker.services.timer import StudyTimer

router = APIRouter(prefix="/api", tags=["sessions"])


def _timer_for(request: Request, user: UserRecord) -> StudyTimer:
    container: AppContainer = request.app.state.container
    return container.timer_registry.for_user(user.id)


@router.get("/study-sessions")
async def get_day(
    request: Request,
    day: date = Query(alias="date"),
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return a day's sessions with derived totals."""
    aggregator = _timer_for(request, user).aggregator
    record = aggregator.get_day(day, refresh=True)
    return {"success": True, "data": _day_payload(day, record)}


@router.post("/study-sessions")
async def create_session(
    payload: SessionCreate,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Record a completed session submitted by the client."""
    aggregator = _timer_for(request, user).aggregator
    session = StudySession.between(payload.start, payload.end)
    totals = aggregator.record_session(payload.date, payload.period, session)
    return {
        "success": True,
        "data": {"session": session.to_payload(), "totals": _totals_payload(totals)},
    }


@router.delete("/study-sessions")
async def clear_day(
    request: Request,
    day: date = Query(alias="date"),
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Delete every session recorded for a date."""
    _timer_for(request, user).aggregator.clear_day(day)
    return {"success": True}


@router.get("/study-sessions/history")
async def get_history(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return the full sessions map for the user."""
    history = _timer_for(request, user).aggregator.history()
    return {"success": True, "data": sessions_map_payload(history)}


@router.get("/timer")
async def timer_status(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return the state of both period timers."""
    timer = _timer_for(request, user)
    today = timer.clock.now().date()
    return {
        "success": True,
        "data": {
            "date": today.isoformat(),
            "dateLabel": format_date_zh(today),
            "periods": [_status_payload(timer, period) for period in Period],
            "totals": _totals_payload(timer.aggregator.totals(today)),
        },
    }


@router.post("/timer/{period}/start")
async def start_timer(
    period: Period, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Start the timer for a period."""
    timer = _timer_for(request, user)
    timer.start(period)
    return {"success": True, "data": _status_payload(timer, period)}


@router.post("/timer/{period}/stop")
async def stop_timer(
    period: Period, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Stop the timer for a period; stopping an idle timer changes nothing."""
    timer = _timer_for(request, user)
    session = timer.stop(period)
    day = session.start.date() if session else timer.clock.now().date()
    return {
        "success": True,
        "data": {
            "session": session.to_payload() if session else None,
            "totals": _totals_payload(timer.aggregator.totals(day)),
        },
    }


@router.get("/timer/{period}/ticks")
async def timer_ticks(
    period: Period, request: Request, user: UserRecord = Depends(require_user)
) -> StreamingResponse:
    """Stream elapsed seconds as server-sent events while the timer runs."""
    timer = _timer_for(request, user)

    async def events() -> AsyncIterator[str]:
        async for elapsed in timer.ticks(period):
            yield f"data: {elapsed}\n\n"

    return StreamingResponse(events(), media_type="text/event-stream")


def _status_payload(timer: StudyTimer, period: Period) -> dict[str, object]:
    status = timer.status(period)
    payload = status.to_payload()
    payload["clock"] = format_clock(status.elapsed)
    payload["window"] = timer.timer(period).window.label()
    return payload


def _totals_payload(totals: DayTotals) -> dict[str, object]:
    payload: dict[str, object] = dict(totals.to_payload())
    payload["formatted"] = {
        "morning": format_duration_zh(totals.morning),
        "afternoon": format_duration_zh(totals.afternoon),
        "day": format_duration_zh(totals.day),
    }
    return payload


def _day_payload(day: date, record: DayRecord) -> dict[str, object]:
    return {
        "date": day.isoformat(),
        "dateLabel": format_date_zh(day),
        **record.to_payload(),
        "totals": _totals_payload(record.totals()),
    }
