"""
Business logic for comment operations.
"""

import logging
from typing import Any, Dict, List

from shared.callable import CallableOperation, CallerContext
from shared.errors import InvalidInputError, NotFoundError
from shared.validation import check_max_length, optional_string, require_string

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 500
MAX_AUTHOR_LENGTH = 100


class CommentService:
    """Callable handlers for comment operations."""

    def __init__(self, repository):
        self.repository = repository

    def operations(self) -> List[CallableOperation]:
        return [
            CallableOperation(
                "createComment",
                self.create_comment,
                ("text_id", "content", "author")
            ),
            CallableOperation("getComments", self.get_comments),
            CallableOperation("deleteComment", self.delete_comment, ("commentId",)),
        ]

    async def create_comment(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        """
        Add a comment to a text.

        Length limits apply to the submitted values; stored values are
        trimmed. The referenced text is not required to exist.

        Args:
            caller: Authorized caller
            data: Payload with ``text_id``, ``content`` and ``author``

        Returns:
            {"comment": created comment}

        Raises:
            InvalidInputError: If a field is not a string or too long
        """
        for name in ("text_id", "content", "author"):
            if not isinstance(data[name], str):
                raise InvalidInputError(f"{name} must be a string")

        check_max_length(
            data["content"], MAX_CONTENT_LENGTH,
            f"Comment cannot exceed {MAX_CONTENT_LENGTH} characters"
        )
        check_max_length(
            data["author"], MAX_AUTHOR_LENGTH,
            f"Author name cannot exceed {MAX_AUTHOR_LENGTH} characters"
        )

        comment_data = {
            "text_id": data["text_id"].strip(),
            "content": data["content"].strip(),
            "author": data["author"].strip(),
            "created_by": caller.user_id,
        }

        comment = await self.repository.create(caller.workspace_id, comment_data)

        logger.info(f"Comment {comment['id']} created in workspace {caller.workspace_id} by {caller.user_id}")
        return {"comment": comment}

    async def get_comments(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        """List the workspace's comments, optionally only those on ``text_id``."""
        text_id = optional_string(data, "text_id")
        comments = await self.repository.list(caller.workspace_id, text_id)
        return {"comments": comments}

    async def delete_comment(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        comment_id = require_string(data, "commentId")
        deleted = await self.repository.delete(comment_id, caller.workspace_id)
        if not deleted:
            raise NotFoundError("Comment not found")

        logger.info(f"Comment {comment_id} deleted in workspace {caller.workspace_id} by {caller.user_id}")
        return {"deleted": True}
