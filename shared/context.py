"""
Application context: repositories and the workspace authority, built once
per process and passed to route registration.
"""

import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from comments.repository import InMemoryCommentRepository, SupabaseCommentRepository
from texts.repository import InMemoryTextRepository, SupabaseTextRepository
from workspaces.repository import (
    InMemoryWorkspaceMemberRepository, SupabaseWorkspaceMemberRepository
)
from .memory_store import InMemoryStore
from .permissions import (
    WorkspaceAuthority, get_workspace_token_secret, get_workspace_token_ttl
)
from .supabase_client import create_supabase_client

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    texts: Any
    comments: Any
    members: Any
    authority: WorkspaceAuthority
    store: Optional[InMemoryStore] = None


def get_storage_backend() -> str:
    """Get the storage backend name ("supabase" or "memory")."""
    return os.environ.get("STORAGE_BACKEND", "supabase").lower()


def get_seed_members() -> list:
    """Memberships for the in-memory backend, from MEMORY_WORKSPACE_MEMBERS."""
    raw = os.environ.get("MEMORY_WORKSPACE_MEMBERS")
    if not raw:
        return []
    members = json.loads(raw)
    if not isinstance(members, list):
        raise ValueError("MEMORY_WORKSPACE_MEMBERS must be a JSON list")
    return members


def build_memory_context(secret: str, ttl_seconds: int, store: Optional[InMemoryStore] = None) -> AppContext:
    """Context backed by an in-process store."""
    store = store or InMemoryStore()
    members = InMemoryWorkspaceMemberRepository(store.workspace_members)
    return AppContext(
        texts=InMemoryTextRepository(store.texts),
        comments=InMemoryCommentRepository(store.comments),
        members=members,
        authority=WorkspaceAuthority(members, secret, ttl_seconds),
        store=store,
    )


def build_supabase_context(secret: str, ttl_seconds: int) -> AppContext:
    """Context backed by Supabase tables."""
    client = create_supabase_client()
    members = SupabaseWorkspaceMemberRepository(client)
    return AppContext(
        texts=SupabaseTextRepository(client),
        comments=SupabaseCommentRepository(client),
        members=members,
        authority=WorkspaceAuthority(members, secret, ttl_seconds),
    )


def build_context() -> AppContext:
    """
    Build the application context from environment variables.

    Raises:
        ValueError: If the backend is unknown or configuration is missing
    """
    backend = get_storage_backend()
    secret = get_workspace_token_secret()
    ttl_seconds = get_workspace_token_ttl()

    if backend == "memory":
        context = build_memory_context(secret, ttl_seconds)
        for member in get_seed_members():
            context.members.add(member["workspace_id"], member["user_id"], member["role"])
        logger.info(f"Using in-memory storage with {len(context.store.workspace_members)} memberships")
        return context

    if backend == "supabase":
        return build_supabase_context(secret, ttl_seconds)

    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")
