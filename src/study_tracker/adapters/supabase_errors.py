"""Error translation for Supabase queries."""

from typing import Any

import httpx
from supabase import PostgrestAPIError

from study_tracker.domain.errors import StoreUnavailable


def execute(query: Any, action: str) -> Any:
    """Run a Supabase query, raising StoreUnavailable on API or transport errors."""
    try:
        return query.execute()
    except (PostgrestAPIError, httpx.HTTPError) as exc:
        raise StoreUnavailable(f"Failed to {action}") from exc
