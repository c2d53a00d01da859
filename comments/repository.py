"""
Data access for comments.

Comments reference a text by id only; removing the text leaves its
comments in place.
"""

from typing import Dict, List, Optional

from shared.memory_store import InMemoryTable, utc_now
from shared.supabase_client import SupabaseRepository, pick_fields

COMMENT_COLUMNS = (
    "id, workspace_id, text_id, content, author, created_by, created_at, updated_at"
)
CREATE_FIELDS = ("text_id", "content", "author", "created_by")
UPDATE_FIELDS = ("content", "author")


class SupabaseCommentRepository(SupabaseRepository):
    """Comments stored in the ``comments`` table."""

    table_name = "comments"
    columns = COMMENT_COLUMNS

    async def list(self, workspace_id: str, text_id: Optional[str] = None) -> List[Dict]:
        """
        List comments of a workspace, newest first.

        Args:
            workspace_id: Owning workspace
            text_id: When given, only comments on this text

        Returns:
            List of comment records
        """
        query = self.table() \
            .select(self.columns) \
            .eq("workspace_id", workspace_id)

        if text_id:
            query = query.eq("text_id", text_id)

        result = query.order("created_at", desc=True).execute()
        return result.data

    async def get_by_id(self, comment_id: str, workspace_id: str) -> Optional[Dict]:
        result = self.table() \
            .select(self.columns) \
            .eq("id", comment_id) \
            .eq("workspace_id", workspace_id) \
            .execute()

        return result.data[0] if result.data else None

    async def create(self, workspace_id: str, fields: Dict) -> Dict:
        comment_data = {"workspace_id": workspace_id, **pick_fields(fields, CREATE_FIELDS)}

        result = self.table() \
            .insert(comment_data) \
            .execute()

        if result.data:
            return result.data[0]

        raise Exception("Failed to create comment")

    async def update(self, comment_id: str, workspace_id: str, fields: Dict) -> Optional[Dict]:
        update_data = pick_fields(fields, UPDATE_FIELDS)
        if not update_data:
            return await self.get_by_id(comment_id, workspace_id)

        update_data["updated_at"] = utc_now()

        result = self.table() \
            .update(update_data) \
            .eq("id", comment_id) \
            .eq("workspace_id", workspace_id) \
            .execute()

        return result.data[0] if result.data else None

    async def delete(self, comment_id: str, workspace_id: str) -> bool:
        result = self.table() \
            .delete() \
            .eq("id", comment_id) \
            .eq("workspace_id", workspace_id) \
            .execute()

        return bool(result.data)

    async def count(self, workspace_id: str) -> int:
        return self._count(workspace_id=workspace_id)

    async def count_by_text(self, workspace_id: str, text_id: str) -> int:
        return self._count(workspace_id=workspace_id, text_id=text_id)


class InMemoryCommentRepository:
    """Comments kept in an in-process table."""

    def __init__(self, table: InMemoryTable):
        self.table = table

    @staticmethod
    def _matches(workspace_id: str, text_id: Optional[str] = None):
        def predicate(row):
            if row["workspace_id"] != workspace_id:
                return False
            return text_id is None or row["text_id"] == text_id
        return predicate

    async def list(self, workspace_id: str, text_id: Optional[str] = None) -> List[Dict]:
        return self.table.find(self._matches(workspace_id, text_id or None))

    async def get_by_id(self, comment_id: str, workspace_id: str) -> Optional[Dict]:
        return self.table.get(comment_id, self._matches(workspace_id))

    async def create(self, workspace_id: str, fields: Dict) -> Dict:
        return self.table.insert({"workspace_id": workspace_id, **pick_fields(fields, CREATE_FIELDS)})

    async def update(self, comment_id: str, workspace_id: str, fields: Dict) -> Optional[Dict]:
        update_data = pick_fields(fields, UPDATE_FIELDS)
        if not update_data:
            return await self.get_by_id(comment_id, workspace_id)
        return self.table.update(comment_id, self._matches(workspace_id), update_data)

    async def delete(self, comment_id: str, workspace_id: str) -> bool:
        return self.table.delete(comment_id, self._matches(workspace_id))

    async def count(self, workspace_id: str) -> int:
        return len(self.table.find(self._matches(workspace_id)))

    async def count_by_text(self, workspace_id: str, text_id: str) -> int:
        return len(self.table.find(self._matches(workspace_id, text_id)))
