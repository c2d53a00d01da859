"""
Data access for texts.
"""

from typing import Dict, List, Optional

from shared.memory_store import InMemoryTable, utc_now
from shared.supabase_client import SupabaseRepository, pick_fields

TEXT_COLUMNS = "id, workspace_id, title, content, created_by, created_at, updated_at"
CREATE_FIELDS = ("title", "content", "created_by")
UPDATE_FIELDS = ("title", "content")


class SupabaseTextRepository(SupabaseRepository):
    """Texts stored in the ``texts`` table."""

    table_name = "texts"
    columns = TEXT_COLUMNS

    async def list(self, workspace_id: str) -> List[Dict]:
        result = self.table() \
            .select(self.columns) \
            .eq("workspace_id", workspace_id) \
            .order("created_at", desc=True) \
            .execute()

        return result.data

    async def get_by_id(self, text_id: str, workspace_id: str) -> Optional[Dict]:
        result = self.table() \
            .select(self.columns) \
            .eq("id", text_id) \
            .eq("workspace_id", workspace_id) \
            .execute()

        return result.data[0] if result.data else None

    async def create(self, workspace_id: str, fields: Dict) -> Dict:
        """
        Insert a text; id and timestamps are assigned by the database.

        Args:
            workspace_id: Owning workspace
            fields: title, content and created_by

        Returns:
            The persisted text
        """
        text_data = {"workspace_id": workspace_id, **pick_fields(fields, CREATE_FIELDS)}

        result = self.table() \
            .insert(text_data) \
            .execute()

        if result.data:
            return result.data[0]

        raise Exception("Failed to create text")

    async def update(self, text_id: str, workspace_id: str, fields: Dict) -> Optional[Dict]:
        """
        Update the provided fields and refresh updated_at.

        With no updatable fields this is a plain read of the current state.
        """
        update_data = pick_fields(fields, UPDATE_FIELDS)
        if not update_data:
            return await self.get_by_id(text_id, workspace_id)

        update_data["updated_at"] = utc_now()

        result = self.table() \
            .update(update_data) \
            .eq("id", text_id) \
            .eq("workspace_id", workspace_id) \
            .execute()

        return result.data[0] if result.data else None

    async def delete(self, text_id: str, workspace_id: str) -> bool:
        result = self.table() \
            .delete() \
            .eq("id", text_id) \
            .eq("workspace_id", workspace_id) \
            .execute()

        return bool(result.data)

    async def count(self, workspace_id: str) -> int:
        return self._count(workspace_id=workspace_id)


class InMemoryTextRepository:
    """Texts kept in an in-process table."""

    def __init__(self, table: InMemoryTable):
        self.table = table

    @staticmethod
    def _in_workspace(workspace_id: str):
        return lambda row: row["workspace_id"] == workspace_id

    async def list(self, workspace_id: str) -> List[Dict]:
        return self.table.find(self._in_workspace(workspace_id))

    async def get_by_id(self, text_id: str, workspace_id: str) -> Optional[Dict]:
        return self.table.get(text_id, self._in_workspace(workspace_id))

    async def create(self, workspace_id: str, fields: Dict) -> Dict:
        values = {"title": None, **pick_fields(fields, CREATE_FIELDS)}
        return self.table.insert({"workspace_id": workspace_id, **values})

    async def update(self, text_id: str, workspace_id: str, fields: Dict) -> Optional[Dict]:
        update_data = pick_fields(fields, UPDATE_FIELDS)
        if not update_data:
            return await self.get_by_id(text_id, workspace_id)
        return self.table.update(text_id, self._in_workspace(workspace_id), update_data)

    async def delete(self, text_id: str, workspace_id: str) -> bool:
        return self.table.delete(text_id, self._in_workspace(workspace_id))

    async def count(self, workspace_id: str) -> int:
        return len(self.table.find(self._in_workspace(workspace_id)))
