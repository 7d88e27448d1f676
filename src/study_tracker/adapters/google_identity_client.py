"""OpenID Connect userinfo client for resolving bearer tokens."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from study_tracker.domain.errors import StoreUnavailable


class IdentityClient(Protocol):
    """Interface for resolving access tokens to user e-mail addresses."""

    async def resolve_email(self, access_token: str) -> str | None:
        """Return the e-mail for a valid token, or None when it is rejected."""


@dataclass
class HttpxIdentityClient(IdentityClient):
    """Identity client that calls an OpenID Connect userinfo endpoint."""

    userinfo_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, userinfo_url: str) -> "HttpxIdentityClient":
        """Create an identity client with a managed httpx session."""
        return cls(userinfo_url=userinfo_url, http_client=httpx.AsyncClient())

    async def resolve_email(self, access_token: str) -> str | None:
        """Look up the token's owner; rejected tokens resolve to None."""
        try:
            response = await self.http_client.get(
                self.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=10,
            )
            if response.status_code in {401, 403}:
                return None
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StoreUnavailable("Identity provider unavailable") from exc
        payload = response.json()
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            return None
        return email

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
