"""
Supabase client factory for database operations.
"""

import os
import logging
from supabase import create_client, Client

logger = logging.getLogger(__name__)


def get_supabase_url() -> str:
    """Get the Supabase URL from environment variables."""
    url = os.environ.get("SUPABASE_URL")
    if not url:
        raise ValueError("SUPABASE_URL environment variable not set")
    return url


def get_supabase_service_key() -> str:
    """Get the Supabase service key from environment variables."""
    key = os.environ.get("SUPABASE_SERVICE_KEY")
    if not key:
        raise ValueError("SUPABASE_SERVICE_KEY environment variable not set")
    return key


def create_supabase_client() -> Client:
    """
    Create a Supabase client using the service role key.

    Called once per process when the application context is built; the
    client keeps its own HTTP connection pool.

    Returns:
        Supabase Client instance
    """
    client = create_client(get_supabase_url(), get_supabase_service_key())
    logger.info("Supabase client initialized")
    return client


class SupabaseRepository:
    """
    Base class for Supabase-backed repositories.
    Every query is scoped by workspace_id.
    """

    table_name: str = ""
    columns: str = "*"

    def __init__(self, client: Client):
        self.client = client

    def table(self):
        """Get the table reference for queries."""
        return self.client.table(self.table_name)

    def _count(self, **filters) -> int:
        query = self.table().select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.execute()
        return int(result.count or 0)


def pick_fields(fields: dict, allowed) -> dict:
    """Keep only the allowed keys that are present in ``fields``."""
    return {key: fields[key] for key in allowed if key in fields}
