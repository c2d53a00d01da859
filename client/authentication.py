"""
Client side of the callable protocol: identity token, cached workspace
tokens, and the secured call helper every service goes through.
"""

import os
import logging
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60


def get_functions_base_url() -> str:
    """Get the base URL of the callable functions."""
    return os.environ.get("FUNCTIONS_BASE_URL", "http://localhost:7071/api").rstrip('/')


class CallableClientError(Exception):
    """Raised when a callable answers with an error envelope."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class WorkspaceTokenStore:
    """Workspace tokens known to this client, keyed by workspace id."""

    def __init__(self, tokens: Optional[Dict[str, Dict[str, str]]] = None):
        self._tokens: Dict[str, Dict[str, str]] = dict(tokens or {})

    def store(self, tokens: Dict[str, Dict[str, str]]) -> None:
        """Replace the cached map with the one the server just returned."""
        self._tokens = dict(tokens)

    def get(self, workspace_id: str) -> Optional[str]:
        entry = self._tokens.get(workspace_id)
        return entry["token"] if entry else None

    def role(self, workspace_id: str) -> Optional[str]:
        entry = self._tokens.get(workspace_id)
        return entry["role"] if entry else None

    def all(self) -> Dict[str, Dict[str, str]]:
        return dict(self._tokens)


class SecuredFunctionClient:
    """
    Calls backend callables by name.

    Args:
        id_token_provider: Returns the current identity (Supabase) JWT
        token_store: Cache of workspace tokens, refreshed on every success
        base_url: Functions base URL, defaults to FUNCTIONS_BASE_URL
        session: Optional requests session
    """

    def __init__(
        self,
        id_token_provider: Callable[[], str],
        token_store: Optional[WorkspaceTokenStore] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS
    ):
        self.id_token_provider = id_token_provider
        self.token_store = token_store or WorkspaceTokenStore()
        self.base_url = (base_url or get_functions_base_url()).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, function_name: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.post(
            f"{self.base_url}/{function_name}",
            json=data,
            headers={"Authorization": f"Bearer {self.id_token_provider()}"},
            timeout=self.timeout
        )

        try:
            envelope = response.json()
        except ValueError:
            logger.error(f"{function_name} returned a non-JSON response ({response.status_code})")
            raise CallableClientError("INTERNAL", "Invalid response from server")

        if not envelope.get("success"):
            error = envelope.get("error") or {}
            raise CallableClientError(
                error.get("code", "INTERNAL"),
                error.get("message", "Request failed")
            )

        if "workspace_tokens" in envelope:
            self.token_store.store(envelope["workspace_tokens"])
        return envelope

    def load_workspace_tokens(self) -> Dict[str, Dict[str, str]]:
        """Fetch the caller's workspace tokens and cache them."""
        self._post("getWorkspaceTokens", {})
        return self.token_store.all()

    def call(
        self,
        function_name: str,
        workspace_id: str,
        data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Invoke a workspace callable.

        Returns:
            The success envelope

        Raises:
            CallableClientError: If no token is cached for the workspace or
                the callable returned an error
        """
        workspace_token = self.token_store.get(workspace_id)
        if not workspace_token:
            raise CallableClientError("INVALID_WORKSPACE", f"No token for workspace {workspace_id}")

        return self._post(function_name, {**(data or {}), "workspaceToken": workspace_token})
