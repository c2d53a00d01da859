"""Pytest fixtures for Textboard backend tests."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from comments.service import CommentService
from shared.callable import CallableRequest, invoke_callable
from shared.context import build_memory_context
from shared.permissions import WorkspaceRole
from texts.service import TextService
from workspaces.service import WorkspaceService

IDENTITY_SECRET = "identity-secret-for-tests-" + "0123456789abcdef" * 3
WORKSPACE_SECRET = "workspace-secret-for-tests-" + "0123456789abcdef" * 3


def make_identity_token(
    user_id: str,
    email: str = None,
    expires_in: int = 3600,
    audience: str = "authenticated",
    secret: str = IDENTITY_SECRET,
    algorithm: str = "HS256",
) -> str:
    """Mint a Supabase-style access token."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "email": email or f"{user_id}@example.com",
        "aud": audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def bearer(user_id: str, **kwargs) -> str:
    return f"Bearer {make_identity_token(user_id, **kwargs)}"


# --- Fake Supabase client ---


class FakeQuery:
    """Records query-builder calls; ``execute`` returns the next queued response."""

    def __init__(self, client: "FakeSupabaseClient", table_name: str) -> None:
        self.client = client
        self.table_name = table_name
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        self.client.executed.append(self)
        if self.client.responses:
            data, count = self.client.responses.pop(0)
        else:
            data, count = [], None
        return SimpleNamespace(data=data, count=count)

    def call_names(self):
        return [name for name, _, _ in self.calls]

    def filters(self):
        return {args[0]: args[1] for name, args, _ in self.calls if name == "eq"}


class FakeSupabaseClient:
    def __init__(self) -> None:
        self.responses = []
        self.executed = []

    def respond(self, data=None, count=None) -> None:
        self.responses.append((data if data is not None else [], count))

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    @property
    def last(self) -> FakeQuery:
        return self.executed[-1]


# --- Fixtures ---


@pytest.fixture(autouse=True)
def auth_env(monkeypatch):
    """Secrets for identity and workspace tokens."""
    monkeypatch.setenv("SUPABASE_JWT_SECRET", IDENTITY_SECRET)
    monkeypatch.setenv("WORKSPACE_TOKEN_SECRET", WORKSPACE_SECRET)


@pytest.fixture
def context():
    """
    In-memory context with two workspaces:

    ws-a: alice (admin), dave (editor), bob (viewer)
    ws-b: alice (editor), carol (editor)
    """
    ctx = build_memory_context(WORKSPACE_SECRET, 3600)
    ctx.members.add("ws-a", "alice", "admin")
    ctx.members.add("ws-a", "dave", "editor")
    ctx.members.add("ws-a", "bob", "viewer")
    ctx.members.add("ws-b", "alice", "editor")
    ctx.members.add("ws-b", "carol", "editor")
    return ctx


@pytest.fixture
def operations(context):
    services = [
        TextService(context.texts),
        CommentService(context.comments),
        WorkspaceService(),
    ]
    return {op.name: op for service in services for op in service.operations()}


@pytest.fixture
def workspace_token(context):
    """Issue a workspace token, defaulting the role to the current membership."""

    def _issue(user_id: str, workspace_id: str, role: str = None) -> str:
        if role is None:
            member = next(
                (m for m in context.store.workspace_members
                 if m["workspace_id"] == workspace_id and m["user_id"] == user_id),
                None,
            )
            role = member["role"] if member else "admin"
        return context.authority.issue_token(user_id, workspace_id, WorkspaceRole.parse(role))

    return _issue


@pytest.fixture
def call(context, operations, workspace_token):
    """Invoke a callable by name as ``user_id`` in ``workspace_id``."""

    async def _call(name, data=None, user_id="alice", workspace_id="ws-a", authorization=None):
        payload = dict(data or {})
        if workspace_id is not None and "workspaceToken" not in payload:
            payload["workspaceToken"] = workspace_token(user_id, workspace_id)
        request = CallableRequest(
            authorization=authorization if authorization is not None else bearer(user_id),
            data=payload,
        )
        return await invoke_callable(operations[name], request, context.authority)

    return _call


@pytest.fixture
def fake_supabase():
    return FakeSupabaseClient()


class PipelineResponse:
    def __init__(self, envelope, status_code):
        self._envelope = envelope
        self.status_code = status_code

    def json(self):
        return self._envelope


class PipelineSession:
    """Stands in for ``requests.Session`` and runs callables in-process."""

    def __init__(self, context, operations) -> None:
        self.context = context
        self.operations = operations
        self.posted = []

    def post(self, url, json=None, headers=None, timeout=None):
        import asyncio

        from shared.responses import status_for_envelope

        name = url.rsplit("/", 1)[-1]
        self.posted.append((name, dict(json or {})))
        request = CallableRequest(authorization=(headers or {}).get("Authorization"), data=json or {})
        envelope = asyncio.run(invoke_callable(self.operations[name], request, self.context.authority))
        return PipelineResponse(envelope, status_for_envelope(envelope))


@pytest.fixture
def pipeline_session(context, operations):
    return PipelineSession(context, operations)
