"""
Callable handler pipeline.

A callable is invoked by name with a JSON payload and always answers with a
response envelope. Every invocation runs the same sequence, stopping at the
first failure:

    1. authenticate the caller from the identity token
    2. check required payload fields
    3. authorize the workspace token against the operation's minimum role
    4. run the operation handler (business rules, then repository)
    5. wrap the payload with refreshed workspace tokens
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import azure.functions as func

from .auth import get_user_from_authorization
from .errors import CallableError, InternalError, InvalidInputError
from .permissions import WorkspaceAuthority, WorkspaceRole
from .responses import (
    envelope_from_error, envelope_response, success_envelope
)
from .validation import validate_required_fields

logger = logging.getLogger(__name__)

WORKSPACE_TOKEN_FIELD = "workspaceToken"


@dataclass(frozen=True)
class CallerContext:
    """Who is calling, and for which workspace."""
    user_id: str
    email: Optional[str] = None
    workspace_id: Optional[str] = None
    role: Optional[WorkspaceRole] = None


@dataclass
class CallableRequest:
    """Transport-independent view of an invocation."""
    authorization: Optional[str]
    data: Dict[str, Any] = field(default_factory=dict)
    body_error: Optional[str] = None

    @classmethod
    def from_http(cls, req: func.HttpRequest) -> "CallableRequest":
        """
        Build a request from an HTTP trigger.

        A body that is not a JSON object is recorded in ``body_error`` and
        reported once the caller is authenticated.
        """
        authorization = req.headers.get("Authorization")
        if not req.get_body():
            return cls(authorization=authorization)
        try:
            body = req.get_json()
        except ValueError:
            return cls(authorization=authorization, body_error="Invalid JSON body")
        if not isinstance(body, dict):
            return cls(authorization=authorization, body_error="Request body must be a JSON object")
        return cls(authorization=authorization, data=body)


Handler = Callable[[CallerContext, Dict[str, Any]], Awaitable[Dict[str, Any]]]


@dataclass(frozen=True)
class CallableOperation:
    """
    A named operation.

    ``minimum_role`` set to None marks an identity-only operation that
    needs no workspace token.
    """
    name: str
    handler: Handler
    required_fields: Tuple[str, ...] = ()
    minimum_role: Optional[WorkspaceRole] = WorkspaceRole.EDITOR

    @property
    def all_required_fields(self) -> Tuple[str, ...]:
        if self.minimum_role is None:
            return self.required_fields
        return (WORKSPACE_TOKEN_FIELD,) + self.required_fields


async def invoke_callable(
    operation: CallableOperation,
    request: CallableRequest,
    authority: WorkspaceAuthority
) -> Dict[str, Any]:
    """
    Run an operation through the pipeline.

    Never raises: failures come back as error envelopes, and unexpected
    exceptions are logged and reported as INTERNAL.
    """
    try:
        user = get_user_from_authorization(request.authorization)
        user_id = user["id"]

        if request.body_error:
            raise InvalidInputError(request.body_error)

        validate_required_fields(request.data, operation.all_required_fields)

        if operation.minimum_role is None:
            caller = CallerContext(user_id=user_id, email=user.get("email"))
            workspace_tokens = await authority.refresh_tokens(user_id)
        else:
            access = await authority.verify(
                request.data[WORKSPACE_TOKEN_FIELD],
                user_id,
                operation.minimum_role
            )
            caller = CallerContext(
                user_id=user_id,
                email=user.get("email"),
                workspace_id=access.workspace_id,
                role=access.role
            )
            workspace_tokens = access.workspace_tokens

        payload = await operation.handler(caller, request.data)
        return success_envelope(payload, workspace_tokens)

    except CallableError as e:
        logger.info(f"{operation.name} rejected: {e.code} {e.message}")
        return envelope_from_error(e)
    except Exception:
        logger.exception(f"Error in {operation.name}")
        return envelope_from_error(InternalError("An internal error occurred"))


async def handle_http_callable(
    req: func.HttpRequest,
    operation: CallableOperation,
    authority: WorkspaceAuthority
) -> func.HttpResponse:
    """Adapter between an HTTP trigger and ``invoke_callable``."""
    request = CallableRequest.from_http(req)
    envelope = await invoke_callable(operation, request, authority)
    return envelope_response(envelope)


def register_callable(
    app: func.FunctionApp,
    operation: CallableOperation,
    authority: WorkspaceAuthority
) -> None:
    """Expose an operation as ``POST /api/<operation name>``."""

    @app.function_name(name=operation.name)
    @app.route(
        route=operation.name,
        methods=["POST"],
        auth_level=func.AuthLevel.ANONYMOUS
    )
    async def callable_endpoint(req: func.HttpRequest) -> func.HttpResponse:
        return await handle_http_callable(req, operation, authority)
