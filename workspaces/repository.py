"""
Workspace membership lookups used by the workspace token authority.
"""

from typing import Dict, List, Optional

from shared.supabase_client import SupabaseRepository

MEMBER_COLUMNS = "workspace_id, user_id, role"


class SupabaseWorkspaceMemberRepository(SupabaseRepository):
    """Memberships stored in the ``workspace_members`` table."""

    table_name = "workspace_members"
    columns = MEMBER_COLUMNS

    async def list_for_user(self, user_id: str) -> List[Dict]:
        result = self.table() \
            .select(self.columns) \
            .eq("user_id", user_id) \
            .execute()

        return result.data

    async def get(self, workspace_id: str, user_id: str) -> Optional[Dict]:
        result = self.table() \
            .select(self.columns) \
            .eq("workspace_id", workspace_id) \
            .eq("user_id", user_id) \
            .execute()

        return result.data[0] if result.data else None


class InMemoryWorkspaceMemberRepository:
    """Memberships kept in an in-process list."""

    def __init__(self, members: List[Dict]):
        self.members = members

    def add(self, workspace_id: str, user_id: str, role: str) -> Dict:
        """Add or replace a membership."""
        self.remove(workspace_id, user_id)
        member = {"workspace_id": workspace_id, "user_id": user_id, "role": role}
        self.members.append(member)
        return dict(member)

    def remove(self, workspace_id: str, user_id: str) -> None:
        self.members[:] = [
            m for m in self.members
            if not (m["workspace_id"] == workspace_id and m["user_id"] == user_id)
        ]

    async def list_for_user(self, user_id: str) -> List[Dict]:
        return [dict(m) for m in self.members if m["user_id"] == user_id]

    async def get(self, workspace_id: str, user_id: str) -> Optional[Dict]:
        for m in self.members:
            if m["workspace_id"] == workspace_id and m["user_id"] == user_id:
                return dict(m)
        return None
