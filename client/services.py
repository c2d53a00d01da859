"""
Thin wrappers invoking text and comment callables.
"""

from typing import Dict, List, Optional

from .authentication import SecuredFunctionClient


class TextClient:
    """Client-side access to text callables."""

    def __init__(self, functions: SecuredFunctionClient):
        self.functions = functions

    def create_text(self, workspace_id: str, content: str, title: Optional[str] = None) -> Dict:
        response = self.functions.call(
            "createText", workspace_id, {"content": content, "title": title}
        )
        return response["text"]

    def get_texts(self, workspace_id: str) -> List[Dict]:
        return self.functions.call("getTexts", workspace_id)["texts"]

    def get_text(self, workspace_id: str, text_id: str) -> Dict:
        return self.functions.call("getText", workspace_id, {"textId": text_id})["text"]

    def update_text(self, workspace_id: str, text_id: str, **fields) -> Dict:
        """Update ``content`` and/or ``title``; other keys are ignored."""
        data = {key: fields[key] for key in ("content", "title") if key in fields}
        response = self.functions.call("updateText", workspace_id, {"textId": text_id, **data})
        return response["text"]

    def delete_text(self, workspace_id: str, text_id: str) -> bool:
        return self.functions.call("deleteText", workspace_id, {"textId": text_id})["deleted"]


class CommentClient:
    """Client-side access to comment callables."""

    def __init__(self, functions: SecuredFunctionClient):
        self.functions = functions

    def create_comment(self, workspace_id: str, text_id: str, content: str, author: str) -> Dict:
        response = self.functions.call(
            "createComment",
            workspace_id,
            {"text_id": text_id, "content": content, "author": author}
        )
        return response["comment"]

    def get_comments(self, workspace_id: str, text_id: Optional[str] = None) -> List[Dict]:
        data = {"text_id": text_id} if text_id else None
        return self.functions.call("getComments", workspace_id, data)["comments"]

    def delete_comment(self, workspace_id: str, comment_id: str) -> bool:
        return self.functions.call("deleteComment", workspace_id, {"commentId": comment_id})["deleted"]
