# Client-side services and cached hooks for Textboard callables
from .authentication import CallableClientError, SecuredFunctionClient, WorkspaceTokenStore
from .services import TextClient, CommentClient
from .hooks import QueryCache, TextsHook, CommentsHook

__all__ = [
    "CallableClientError",
    "SecuredFunctionClient",
    "WorkspaceTokenStore",
    "TextClient",
    "CommentClient",
    "QueryCache",
    "TextsHook",
    "CommentsHook",
]
