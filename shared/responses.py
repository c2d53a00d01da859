"""
Response envelope builders and their HTTP rendering.

Every callable returns either
``{"success": true, <payload>, "workspace_tokens": {...}}`` or
``{"success": false, "error": {"code": ..., "message": ...}}``.
"""

import json
from typing import Any, Dict, Optional
import azure.functions as func

from .errors import CallableError

STATUS_BY_CODE = {
    "INVALID_INPUT": 400,
    "UNAUTHENTICATED": 401,
    "FORBIDDEN": 403,
    "INVALID_WORKSPACE": 403,
    "NOT_FOUND": 404,
    "INTERNAL": 500,
}


def json_serialize(obj: Any) -> str:
    """
    Serialize object to JSON, handling datetime and UUID types.
    """
    import datetime
    import uuid

    def default_serializer(o):
        if isinstance(o, (datetime.datetime, datetime.date)):
            return o.isoformat()
        if isinstance(o, uuid.UUID):
            return str(o)
        raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")

    return json.dumps(obj, default=default_serializer)


def success_envelope(
    payload: Optional[Dict[str, Any]],
    workspace_tokens: Dict[str, Dict[str, str]]
) -> Dict[str, Any]:
    """
    Wrap a handler payload in the success envelope.

    Args:
        payload: Handler result, e.g. {"text": {...}}
        workspace_tokens: Refreshed workspace token map for the caller

    Returns:
        Envelope dict
    """
    return {
        "success": True,
        **(payload or {}),
        "workspace_tokens": workspace_tokens,
    }


def error_envelope(code: str, message: str) -> Dict[str, Any]:
    """Build the error envelope for a code and a human-readable message."""
    return {
        "success": False,
        "error": {"code": code, "message": message},
    }


def envelope_from_error(error: CallableError) -> Dict[str, Any]:
    return error_envelope(error.code, error.message)


def status_for_envelope(envelope: Dict[str, Any]) -> int:
    """HTTP status mirroring the envelope outcome."""
    if envelope.get("success"):
        return 200
    return STATUS_BY_CODE.get(envelope["error"]["code"], 500)


def envelope_response(
    envelope: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None
) -> func.HttpResponse:
    """
    Render an envelope as a JSON HTTP response.

    Args:
        envelope: Success or error envelope
        headers: Optional additional headers

    Returns:
        Azure Functions HttpResponse
    """
    response_headers = {
        "Content-Type": "application/json",
        **(headers or {})
    }

    return func.HttpResponse(
        json_serialize(envelope),
        status_code=status_for_envelope(envelope),
        mimetype="application/json",
        headers=response_headers
    )
