"""
Cached queries and mutations over the client services.

Queries are cached under hierarchical keys. A mutation that succeeds marks
the affected keys stale; the next read refetches. Failures are recorded on
the hook instead of being raised.
"""

import logging
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from .authentication import CallableClientError
from .services import CommentClient, TextClient

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]


def texts_key(workspace_id: str) -> QueryKey:
    return ("texts", workspace_id)


def comments_key(workspace_id: str, text_id: Optional[str] = None) -> QueryKey:
    if text_id:
        return ("comments", workspace_id, text_id)
    return ("comments", workspace_id)


class QueryCache:
    """Query results by key, with staleness tracking."""

    def __init__(self):
        self._data: Dict[QueryKey, Any] = {}
        self._stale: set = set()

    def get(self, key: QueryKey, fetch: Callable[[], Any]) -> Any:
        """Return cached data, fetching when missing or stale."""
        if key not in self._data or key in self._stale:
            self._data[key] = fetch()
            self._stale.discard(key)
        return self._data[key]

    def peek(self, key: QueryKey) -> Any:
        return self._data.get(key)

    def is_stale(self, key: QueryKey) -> bool:
        return key in self._stale or key not in self._data

    def invalidate(self, prefix: QueryKey) -> None:
        """Mark every key starting with ``prefix`` stale."""
        for key in self._data:
            if key[:len(prefix)] == prefix:
                self._stale.add(key)


class _Hook:
    """
    Query and mutation state shared by the hooks.

    Fetches are synchronous, so ``is_loading`` is only True while a stale
    key is being fetched and can only be observed from inside that fetch.
    Outside a query it is always False.
    """

    def __init__(self, cache: QueryCache):
        self.cache = cache
        self.error: Optional[CallableClientError] = None
        self.is_loading = False
        self.pending: Optional[str] = None

    def _query(self, key: QueryKey, fetch: Callable[[], Any], default: Any) -> Any:
        self.is_loading = self.cache.is_stale(key)
        try:
            data = self.cache.get(key, fetch)
            self.error = None
            return data
        except CallableClientError as e:
            logger.warning(f"Query {key} failed: {e.code} {e.message}")
            self.error = e
            previous = self.cache.peek(key)
            return previous if previous is not None else default
        finally:
            self.is_loading = False

    def _mutate(self, name: str, action: Callable[[], Any], invalidate: List[QueryKey]) -> Any:
        self.pending = name
        try:
            result = action()
        except CallableClientError as e:
            logger.warning(f"{name} failed: {e.code} {e.message}")
            self.error = e
            return None
        finally:
            self.pending = None

        self.error = None
        for key in invalidate:
            self.cache.invalidate(key)
        return result

    @property
    def is_mutating(self) -> bool:
        return self.pending is not None


class TextsHook(_Hook):
    """Texts of one workspace."""

    def __init__(self, client: TextClient, workspace_id: str, cache: QueryCache):
        super().__init__(cache)
        self.client = client
        self.workspace_id = workspace_id

    @property
    def key(self) -> QueryKey:
        return texts_key(self.workspace_id)

    @property
    def texts(self) -> List[Dict]:
        return self._query(self.key, lambda: self.client.get_texts(self.workspace_id), [])

    def create_text(self, content: str, title: Optional[str] = None) -> Optional[Dict]:
        return self._mutate(
            "createText",
            lambda: self.client.create_text(self.workspace_id, content, title),
            [self.key]
        )

    def update_text(self, text_id: str, **fields) -> Optional[Dict]:
        return self._mutate(
            "updateText",
            lambda: self.client.update_text(self.workspace_id, text_id, **fields),
            [self.key]
        )

    def delete_text(self, text_id: str) -> Optional[bool]:
        # Comments keyed under the deleted text stay cached; the UI shows them as orphans
        return self._mutate(
            "deleteText",
            lambda: self.client.delete_text(self.workspace_id, text_id),
            [self.key]
        )

    def refresh(self) -> None:
        self.cache.invalidate(self.key)


class CommentsHook(_Hook):
    """Comments of one workspace, or of one text when ``text_id`` is set."""

    def __init__(
        self,
        client: CommentClient,
        workspace_id: str,
        cache: QueryCache,
        text_id: Optional[str] = None
    ):
        super().__init__(cache)
        self.client = client
        self.workspace_id = workspace_id
        self.text_id = text_id

    @property
    def key(self) -> QueryKey:
        return comments_key(self.workspace_id, self.text_id)

    @property
    def comments(self) -> List[Dict]:
        return self._query(
            self.key,
            lambda: self.client.get_comments(self.workspace_id, self.text_id),
            []
        )

    def _affected_keys(self) -> List[QueryKey]:
        # The workspace prefix also covers every per-text list
        return [comments_key(self.workspace_id)]

    def create_comment(self, content: str, author: str, text_id: Optional[str] = None) -> Optional[Dict]:
        target = text_id or self.text_id
        if not target:
            raise ValueError("text_id is required to create a comment")
        return self._mutate(
            "createComment",
            lambda: self.client.create_comment(self.workspace_id, target, content, author),
            self._affected_keys()
        )

    def delete_comment(self, comment_id: str) -> Optional[bool]:
        return self._mutate(
            "deleteComment",
            lambda: self.client.delete_comment(self.workspace_id, comment_id),
            self._affected_keys()
        )

    def refresh(self) -> None:
        self.cache.invalidate(self.key)
