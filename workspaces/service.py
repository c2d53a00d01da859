"""
Workspace token bootstrap operation.
"""

from typing import Any, Dict, List

from shared.callable import CallableOperation, CallerContext


class WorkspaceService:
    """Identity-only callables; the pipeline attaches the token map."""

    def operations(self) -> List[CallableOperation]:
        return [
            CallableOperation("getWorkspaceTokens", self.get_workspace_tokens, minimum_role=None),
        ]

    async def get_workspace_tokens(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        return {}
