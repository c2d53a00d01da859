# Shared utilities for Textboard Backend
from .errors import (
    CallableError, UnauthenticatedError, InvalidInputError, ForbiddenError,
    InvalidWorkspaceError, NotFoundError, InternalError
)
from .auth import get_user_from_authorization
from .permissions import WorkspaceRole, WorkspaceAuthority, WorkspaceAccess, role_satisfies
from .responses import success_envelope, error_envelope, envelope_response
from .validation import validate_required_fields

__all__ = [
    "CallableError",
    "UnauthenticatedError",
    "InvalidInputError",
    "ForbiddenError",
    "InvalidWorkspaceError",
    "NotFoundError",
    "InternalError",
    "get_user_from_authorization",
    "WorkspaceRole",
    "WorkspaceAuthority",
    "WorkspaceAccess",
    "role_satisfies",
    "success_envelope",
    "error_envelope",
    "envelope_response",
    "validate_required_fields",
]
