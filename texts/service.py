"""
Business logic for text operations.
"""

import logging
from typing import Any, Dict, List

from shared.callable import CallableOperation, CallerContext
from shared.errors import InvalidInputError, NotFoundError
from shared.validation import optional_string, require_string

logger = logging.getLogger(__name__)


class TextService:
    """Callable handlers for text CRUD operations."""

    def __init__(self, repository):
        self.repository = repository

    def operations(self) -> List[CallableOperation]:
        return [
            CallableOperation("createText", self.create_text, ("content",)),
            CallableOperation("getTexts", self.get_texts),
            CallableOperation("getText", self.get_text, ("textId",)),
            CallableOperation("updateText", self.update_text, ("textId",)),
            CallableOperation("deleteText", self.delete_text, ("textId",)),
        ]

    async def create_text(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        """
        Create a text in the caller's workspace.

        Args:
            caller: Authorized caller; its workspace owns the new text
            data: Payload with ``content`` and optional ``title``

        Returns:
            {"text": created text}
        """
        text_data = {
            "title": optional_string(data, "title"),
            "content": require_string(data, "content"),
            "created_by": caller.user_id,
        }

        text = await self.repository.create(caller.workspace_id, text_data)

        logger.info(f"Text {text['id']} created in workspace {caller.workspace_id} by {caller.user_id}")
        return {"text": text}

    async def get_texts(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        texts = await self.repository.list(caller.workspace_id)
        return {"texts": texts}

    async def get_text(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        text_id = require_string(data, "textId")
        text = await self.repository.get_by_id(text_id, caller.workspace_id)
        if text is None:
            raise NotFoundError("Text not found")
        return {"text": text}

    async def update_text(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        """
        Update content and/or title of a text.

        Sending neither field returns the text unchanged.

        Raises:
            InvalidInputError: If textId is not a string or content is given but empty
            NotFoundError: If the text is not in the caller's workspace
        """
        text_id = require_string(data, "textId")
        update_data = {}
        if "content" in data:
            if data["content"] is None:
                raise InvalidInputError("content cannot be empty")
            update_data["content"] = require_string(data, "content")
        if "title" in data:
            update_data["title"] = optional_string(data, "title")

        text = await self.repository.update(text_id, caller.workspace_id, update_data)
        if text is None:
            raise NotFoundError("Text not found")

        if update_data:
            logger.info(f"Text {text['id']} updated in workspace {caller.workspace_id} by {caller.user_id}")
        return {"text": text}

    async def delete_text(self, caller: CallerContext, data: Dict[str, Any]) -> Dict:
        # Comments on the text are left in place
        text_id = require_string(data, "textId")
        deleted = await self.repository.delete(text_id, caller.workspace_id)
        if not deleted:
            raise NotFoundError("Text not found")

        logger.info(f"Text {text_id} deleted in workspace {caller.workspace_id} by {caller.user_id}")
        return {"deleted": True}
