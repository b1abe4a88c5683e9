"""Shared helpers for Supabase-backed repositories."""

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError

from food_diary.domain.errors import TransportError

logger = logging.getLogger(__name__)


def execute(query: Any, action: str) -> Any:
    """Run a PostgREST query, surfacing failures as TransportError."""
    try:
        return query.execute()
    except (APIError, httpx.HTTPError) as exc:
        logger.exception("Supabase request failed", extra={"action": action})
        raise TransportError(f"Failed to {action}: {exc}") from exc
