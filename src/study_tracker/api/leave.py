"""Leave day endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request

from study_tracker.api.auth import require_user
from study_tracker.api.models import LeaveDayRequest  # noqa: TC001
from study_tracker.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from study_tracker.containers import AppContainer

router = APIRouter(prefix="/api/leave-days", tags=["leave"])


@router.get("")
async def get_leave_day(
    request: Request,
    day: date = Query(alias="date"),
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return the leave day for a date, or null."""
    container: AppContainer = request.app.state.container
    leave = container.leave_service.get(user.id, day)
    return {"success": True, "data": leave.to_payload() if leave else None}


@router.post("")
async def put_leave_day(
    payload: LeaveDayRequest,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Create or update the leave day for a date."""
    container: AppContainer = request.app.state.container
    leave = container.leave_service.put(user.id, payload.date, payload.reason)
    return {"success": True, "data": leave.to_payload()}


@router.delete("")
async def delete_leave_day(
    request: Request,
    day: date = Query(alias="date"),
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Delete the leave day for a date."""
    container: AppContainer = request.app.state.container
    container.leave_service.delete(user.id, day)
    return {"success": True}
