"""
Error taxonomy for callable handlers.

Each error carries a machine-readable code that ends up in the
``error.code`` field of the response envelope.
"""


class CallableError(Exception):
    """Base class for errors that are returned to the caller as-is."""

    code = "INTERNAL"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class UnauthenticatedError(CallableError):
    """Raised when the caller identity is missing or invalid."""
    code = "UNAUTHENTICATED"


class InvalidInputError(CallableError):
    """Raised when a required field is missing or out of bounds."""
    code = "INVALID_INPUT"


class ForbiddenError(CallableError):
    """Raised when the caller's workspace role is insufficient."""
    code = "FORBIDDEN"


class InvalidWorkspaceError(CallableError):
    """Raised when a workspace token cannot be verified."""
    code = "INVALID_WORKSPACE"


class NotFoundError(CallableError):
    """Raised when an id-scoped target does not exist in the workspace."""
    code = "NOT_FOUND"


class InternalError(CallableError):
    """Stands in for an unexpected failure; the cause stays in the logs."""
    code = "INTERNAL"
