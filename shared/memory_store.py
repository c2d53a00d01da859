"""
In-process row store backing the in-memory repositories.

Used for local demo mode and tests. One store is constructed per process
and handed to the repositories; nothing here is module-level state.
"""

import uuid
import itertools
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryTable:
    """A list of dict rows with generated ids and timestamps."""

    def __init__(self):
        self._rows: Dict[str, dict] = {}
        self._sequence: Dict[str, int] = {}
        self._counter = itertools.count()

    def insert(self, values: dict) -> dict:
        now = utc_now()
        row = {
            "id": str(uuid.uuid4()),
            **values,
            "created_at": now,
            "updated_at": now,
        }
        self._rows[row["id"]] = row
        self._sequence[row["id"]] = next(self._counter)
        return dict(row)

    def find(self, predicate: Callable[[dict], bool]) -> List[dict]:
        """Matching rows, most recently created first."""
        rows = [row for row in self._rows.values() if predicate(row)]
        rows.sort(key=lambda row: self._sequence[row["id"]], reverse=True)
        return [dict(row) for row in rows]

    def get(self, row_id: str, predicate: Callable[[dict], bool]) -> Optional[dict]:
        row = self._rows.get(row_id)
        if row is None or not predicate(row):
            return None
        return dict(row)

    def update(self, row_id: str, predicate: Callable[[dict], bool], values: dict) -> Optional[dict]:
        row = self._rows.get(row_id)
        if row is None or not predicate(row):
            return None
        row.update(values)
        row["updated_at"] = utc_now()
        return dict(row)

    def delete(self, row_id: str, predicate: Callable[[dict], bool]) -> bool:
        row = self._rows.get(row_id)
        if row is None or not predicate(row):
            return False
        del self._rows[row_id]
        del self._sequence[row_id]
        return True

    def clear(self) -> None:
        self._rows.clear()
        self._sequence.clear()


class InMemoryStore:
    """Holds one table per entity."""

    def __init__(self):
        self.texts = InMemoryTable()
        self.comments = InMemoryTable()
        self.workspace_members: List[dict] = []

    def clear(self) -> None:
        self.texts.clear()
        self.comments.clear()
        self.workspace_members.clear()
