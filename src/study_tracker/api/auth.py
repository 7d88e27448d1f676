"""Bearer token authentication for user-scoped endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from study_tracker.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from study_tracker.containers import AppContainer

_BEARER_PREFIX = "bearer "


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> UserRecord:
    """Resolve the bearer token to a user or reject the request with 401."""
    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    container: AppContainer = request.app.state.container
    email = await container.identity_client.resolve_email(token)
    if email is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return container.user_service.ensure_user(email)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None
