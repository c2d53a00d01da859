"""Tests for workspace roles and the workspace token authority."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from shared.errors import ForbiddenError, InvalidWorkspaceError
from shared.permissions import WorkspaceAuthority, WorkspaceRole, role_satisfies

from tests.conftest import WORKSPACE_SECRET


def test_roles_are_ordered() -> None:
    assert WorkspaceRole.VIEWER < WorkspaceRole.EDITOR < WorkspaceRole.ADMIN


@pytest.mark.parametrize(
    "role, minimum, expected",
    [
        (WorkspaceRole.ADMIN, WorkspaceRole.EDITOR, True),
        (WorkspaceRole.EDITOR, WorkspaceRole.EDITOR, True),
        (WorkspaceRole.VIEWER, WorkspaceRole.EDITOR, False),
        (None, WorkspaceRole.VIEWER, False),
    ],
)
def test_role_satisfies(role, minimum, expected) -> None:
    assert role_satisfies(role, minimum) is expected


def test_parse_role_names() -> None:
    assert WorkspaceRole.parse("Editor") is WorkspaceRole.EDITOR
    assert WorkspaceRole.parse(" admin ") is WorkspaceRole.ADMIN
    assert WorkspaceRole.parse("owner") is None
    assert WorkspaceRole.parse(3) is None
    assert WorkspaceRole.ADMIN.label == "admin"


@pytest.mark.asyncio
async def test_verify_returns_workspace_and_refreshed_tokens(context, workspace_token) -> None:
    access = await context.authority.verify(
        workspace_token("alice", "ws-a"), "alice", WorkspaceRole.EDITOR
    )

    assert access.workspace_id == "ws-a"
    assert access.role is WorkspaceRole.ADMIN
    assert set(access.workspace_tokens) == {"ws-a", "ws-b"}
    assert access.workspace_tokens["ws-a"]["role"] == "admin"
    assert access.workspace_tokens["ws-b"]["role"] == "editor"

    refreshed = jwt.decode(
        access.workspace_tokens["ws-b"]["token"], WORKSPACE_SECRET, algorithms=["HS256"]
    )
    assert refreshed["sub"] == "alice"
    assert refreshed["workspace_id"] == "ws-b"


@pytest.mark.asyncio
async def test_role_below_minimum_is_forbidden(context, workspace_token) -> None:
    with pytest.raises(ForbiddenError):
        await context.authority.verify(workspace_token("bob", "ws-a"), "bob", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_viewer_passes_viewer_minimum(context, workspace_token) -> None:
    access = await context.authority.verify(workspace_token("bob", "ws-a"), "bob", WorkspaceRole.VIEWER)
    assert access.role is WorkspaceRole.VIEWER


@pytest.mark.asyncio
async def test_non_member_is_forbidden(context, workspace_token) -> None:
    token = workspace_token("carol", "ws-a", role="admin")
    with pytest.raises(ForbiddenError):
        await context.authority.verify(token, "carol", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_downgraded_membership_wins_over_token_claim(context, workspace_token) -> None:
    token = workspace_token("dave", "ws-a", role="admin")
    context.members.add("ws-a", "dave", "viewer")

    with pytest.raises(ForbiddenError):
        await context.authority.verify(token, "dave", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_token_claim_caps_a_higher_membership(context, workspace_token) -> None:
    token = workspace_token("alice", "ws-a", role="viewer")
    with pytest.raises(ForbiddenError):
        await context.authority.verify(token, "alice", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_token_of_another_user_is_invalid(context, workspace_token) -> None:
    with pytest.raises(InvalidWorkspaceError):
        await context.authority.verify(workspace_token("dave", "ws-a"), "alice", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_expired_token_is_invalid(context) -> None:
    authority = WorkspaceAuthority(context.members, WORKSPACE_SECRET, ttl_seconds=-60)
    token = authority.issue_token("alice", "ws-a", WorkspaceRole.ADMIN)

    with pytest.raises(InvalidWorkspaceError, match="expired"):
        await context.authority.verify(token, "alice", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_is_invalid(context) -> None:
    authority = WorkspaceAuthority(context.members, "other-secret-" + "y" * 64)
    token = authority.issue_token("alice", "ws-a", WorkspaceRole.ADMIN)

    with pytest.raises(InvalidWorkspaceError):
        await context.authority.verify(token, "alice", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_identity_token_is_not_a_workspace_token(context) -> None:
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "alice", "workspace_id": "ws-a", "role": "admin", "exp": now + timedelta(minutes=5)},
        WORKSPACE_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidWorkspaceError):
        await context.authority.verify(token, "alice", WorkspaceRole.EDITOR)


@pytest.mark.asyncio
async def test_refresh_skips_unknown_roles(context) -> None:
    context.members.add("ws-c", "alice", "owner")

    tokens = await context.authority.refresh_tokens("alice")

    assert set(tokens) == {"ws-a", "ws-b"}


@pytest.mark.asyncio
async def test_refresh_for_user_without_memberships(context) -> None:
    assert await context.authority.refresh_tokens("nobody") == {}
