"""Share snapshot endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status

from study_tracker.api.auth import require_user
from study_tracker.api.models import ShareCreate  # noqa: TC001
from study_tracker.domain.errors import NotFound
from study_tracker.domain.models import UserRecord  # noqa: TC001
from study_tracker.domain.sessions import sessions_map_payload
from study_tracker.formatting import format_duration_zh
from study_tracker.services.shares import summarize

if TYPE_CHECKING:
    from study_tracker.containers import AppContainer
    from study_tracker.domain.sessions import SessionsPayload

router = APIRouter(prefix="/api/share", tags=["share"])


@router.post("")
async def create_share(
    request: Request,
    payload: ShareCreate | None = None,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Snapshot a sessions map, or the stored history, under a new code."""
    container: AppContainer = request.app.state.container
    sessions = payload.sessions_payload() if payload else None
    if sessions is None:
        aggregator = container.timer_registry.for_user(user.id).aggregator
        history = aggregator.history()
        sessions = sessions_map_payload(
            {day: record for day, record in history.items() if not record.is_empty()}
        )
    if not sessions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No sessions data provided",
        )
    code = container.share_service.create(sessions, owner_id=user.id)
    return {"success": True, "data": {"shareCode": code}}


@router.get("/{share_code}")
async def read_share(share_code: str, request: Request) -> dict[str, object]:
    """Return an active snapshot with summary statistics."""
    container: AppContainer = request.app.state.container
    sessions = container.share_service.read(share_code)
    return {
        "success": True,
        "data": {
            "shareCode": share_code,
            "sessions": sessions,
            "summary": _summary_payload(sessions),
        },
    }


@router.delete("/{share_code}")
async def deactivate_share(
    share_code: str, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Permanently deactivate one of the user's snapshots."""
    container: AppContainer = request.app.state.container
    owner_id = container.share_service.owner_of(share_code)
    if owner_id is not None and owner_id != user.id:
        raise NotFound("Share link not found")
    if not container.share_service.deactivate(share_code):
        raise NotFound("Share link not found")
    return {"success": True}


def _summary_payload(sessions: SessionsPayload) -> dict[str, object]:
    summary = summarize(sessions)
    return {
        "studyDays": summary.study_days,
        "totalSeconds": summary.total_seconds,
        "averageSeconds": summary.average_seconds,
        "total": format_duration_zh(summary.total_seconds),
        "average": format_duration_zh(summary.average_seconds),
        "days": [
            {
                "date": entry.day,
                "morningSeconds": entry.morning_seconds,
                "afternoonSeconds": entry.afternoon_seconds,
                "totalSeconds": entry.total_seconds,
                "total": format_duration_zh(entry.total_seconds),
            }
            for entry in summary.days
        ],
    }
