"""
Workspace roles and workspace token verification.
"""

import os
import logging
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Dict, NamedTuple, Optional

import jwt

from .errors import ForbiddenError, InvalidWorkspaceError

logger = logging.getLogger(__name__)

WORKSPACE_TOKEN_TYPE = "workspace"
DEFAULT_TOKEN_TTL_SECONDS = 3600


class WorkspaceRole(IntEnum):
    """Workspace roles, ordered from least to most privileged."""

    VIEWER = 10
    EDITOR = 20
    ADMIN = 30

    @classmethod
    def parse(cls, value) -> Optional["WorkspaceRole"]:
        """Resolve a role name (case-insensitive); unknown names give None."""
        if isinstance(value, WorkspaceRole):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls[value.strip().upper()]
        except KeyError:
            return None

    @property
    def label(self) -> str:
        return self.name.lower()


def role_satisfies(role: Optional[WorkspaceRole], minimum: WorkspaceRole) -> bool:
    """Check whether ``role`` grants at least ``minimum``."""
    if role is None:
        return False
    return role >= minimum


class WorkspaceAccess(NamedTuple):
    """Outcome of a successful workspace authorization."""
    workspace_id: str
    role: WorkspaceRole
    workspace_tokens: Dict[str, Dict[str, str]]


def get_workspace_token_secret() -> str:
    """Get the signing secret for workspace tokens."""
    secret = os.environ.get("WORKSPACE_TOKEN_SECRET")
    if not secret:
        raise ValueError("WORKSPACE_TOKEN_SECRET environment variable not set")
    return secret


def get_workspace_token_ttl() -> int:
    """Get the workspace token lifetime in seconds."""
    return int(os.environ.get("WORKSPACE_TOKEN_TTL_SECONDS", DEFAULT_TOKEN_TTL_SECONDS))


class WorkspaceAuthority:
    """
    Issues and verifies workspace tokens.

    Tokens are signed JWTs scoped to one workspace and one user. The
    membership repository is the source of truth for which workspaces a
    user currently belongs to, so a revoked or downgraded membership takes
    effect even while an older token is still unexpired.
    """

    def __init__(self, members, secret: str, ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS):
        self.members = members
        self.secret = secret
        self.ttl_seconds = ttl_seconds

    def issue_token(self, user_id: str, workspace_id: str, role: WorkspaceRole) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user_id,
            "workspace_id": workspace_id,
            "role": role.label,
            "typ": WORKSPACE_TOKEN_TYPE,
            "iat": now,
            "exp": now + timedelta(seconds=self.ttl_seconds),
        }
        return jwt.encode(claims, self.secret, algorithm="HS256")

    def decode_token(self, workspace_token: str, user_id: str) -> dict:
        """
        Verify signature, expiry and subject of a workspace token.

        Raises:
            InvalidWorkspaceError: If the token cannot be trusted
        """
        try:
            claims = jwt.decode(
                workspace_token,
                self.secret,
                algorithms=["HS256"],
                options={"require": ["sub", "exp", "workspace_id", "role"]}
            )
        except jwt.ExpiredSignatureError:
            raise InvalidWorkspaceError("Workspace token expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid workspace token: {str(e)}")
            raise InvalidWorkspaceError("Invalid workspace token")

        if claims.get("typ") != WORKSPACE_TOKEN_TYPE:
            raise InvalidWorkspaceError("Invalid workspace token")
        if claims["sub"] != user_id:
            logger.warning(f"Workspace token subject mismatch for user {user_id}")
            raise InvalidWorkspaceError("Workspace token was issued to another user")
        if not claims["workspace_id"]:
            raise InvalidWorkspaceError("Workspace token has no workspace")

        return claims

    async def refresh_tokens(self, user_id: str) -> Dict[str, Dict[str, str]]:
        """Issue fresh tokens for every workspace the user belongs to."""
        tokens = {}
        for membership in await self.members.list_for_user(user_id):
            role = WorkspaceRole.parse(membership["role"])
            if role is None:
                continue
            workspace_id = membership["workspace_id"]
            tokens[workspace_id] = {
                "role": role.label,
                "token": self.issue_token(user_id, workspace_id, role),
            }
        return tokens

    async def verify(
        self,
        workspace_token: str,
        user_id: str,
        minimum_role: WorkspaceRole
    ) -> WorkspaceAccess:
        """
        Authorize a caller for a workspace operation.

        Args:
            workspace_token: Token presented by the caller
            user_id: The authenticated user's ID
            minimum_role: Least privileged role allowed to proceed

        Returns:
            WorkspaceAccess with the resolved workspace and refreshed tokens

        Raises:
            InvalidWorkspaceError: If the token is malformed, expired or foreign
            ForbiddenError: If the caller is not a member or lacks the role
        """
        claims = self.decode_token(workspace_token, user_id)
        workspace_id = claims["workspace_id"]

        membership = await self.members.get(workspace_id, user_id)
        if membership is None:
            logger.warning(f"User {user_id} is not a member of workspace {workspace_id}")
            raise ForbiddenError("You don't have access to this workspace")

        token_role = WorkspaceRole.parse(claims["role"])
        member_role = WorkspaceRole.parse(membership["role"])
        if token_role is None or member_role is None:
            raise ForbiddenError("Unknown workspace role")

        role = min(token_role, member_role)
        if not role_satisfies(role, minimum_role):
            logger.warning(
                f"User {user_id} has role {role.label} in workspace {workspace_id}, "
                f"{minimum_role.label} required"
            )
            raise ForbiddenError(f"{minimum_role.label.capitalize()} role required")

        return WorkspaceAccess(
            workspace_id=workspace_id,
            role=role,
            workspace_tokens=await self.refresh_tokens(user_id),
        )
