"""Supabase client initialization."""

import asyncio
from functools import lru_cache
from typing import Any

from supabase import Client, create_client

from agent_hub.core.config import get_settings


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Get Supabase client instance (cached singleton).

    Returns:
        Supabase client configured with service role key

    Raises:
        Exception: If client initialization fails
    """
    try:
        settings = get_settings()
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        return client
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e


async def run_query(query: Any) -> Any:
    """Execute a Supabase query builder on a worker thread."""
    return await asyncio.to_thread(query.execute)
