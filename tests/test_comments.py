"""Tests for comment callables."""

import pytest


def error_code(envelope):
    assert envelope["success"] is False
    return envelope["error"]["code"]


def comment(text_id="t1", content="Nice", author="Alice"):
    return {"text_id": text_id, "content": content, "author": author}


@pytest.mark.asyncio
async def test_text_then_comment_scenario(call) -> None:
    text = (await call("createText", {"content": "Hello"}))["text"]

    created = await call("createComment", comment(text_id=text["id"]))
    envelope = await call("getComments", {"text_id": text["id"]})

    assert created["success"] is True
    assert created["comment"]["workspace_id"] == "ws-a"
    assert len(envelope["comments"]) == 1
    assert envelope["comments"][0]["author"] == "Alice"
    assert envelope["comments"][0]["created_by"] == "alice"


@pytest.mark.asyncio
async def test_comment_fields_are_trimmed(call) -> None:
    envelope = await call("createComment", comment(text_id=" t1 ", content=" Nice ", author=" Al "))

    assert envelope["comment"]["text_id"] == "t1"
    assert envelope["comment"]["content"] == "Nice"
    assert envelope["comment"]["author"] == "Al"


@pytest.mark.asyncio
async def test_content_length_boundary(call) -> None:
    accepted = await call("createComment", comment(content="x" * 500))
    rejected = await call("createComment", comment(content="x" * 501))

    assert accepted["success"] is True
    assert error_code(rejected) == "INVALID_INPUT"
    assert "500" in rejected["error"]["message"]


@pytest.mark.asyncio
async def test_author_length_boundary(call) -> None:
    accepted = await call("createComment", comment(author="a" * 100))
    rejected = await call("createComment", comment(author="a" * 101))

    assert accepted["success"] is True
    assert error_code(rejected) == "INVALID_INPUT"
    assert "100" in rejected["error"]["message"]


@pytest.mark.asyncio
async def test_missing_fields_are_all_reported(call) -> None:
    envelope = await call("createComment", {"content": "Nice"})

    assert error_code(envelope) == "INVALID_INPUT"
    assert envelope["error"]["message"] == "Missing required fields: text_id, author"


@pytest.mark.asyncio
async def test_non_string_content_is_rejected(call) -> None:
    assert error_code(await call("createComment", comment(content=["x"]))) == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_comment_on_missing_text_is_allowed(call) -> None:
    envelope = await call("createComment", comment(text_id="does-not-exist"))

    assert envelope["success"] is True


@pytest.mark.asyncio
async def test_get_comments_all_and_filtered(call) -> None:
    await call("createComment", comment(text_id="t1", content="one"))
    await call("createComment", comment(text_id="t2", content="two"))
    await call("createComment", comment(text_id="t1", content="elsewhere"), user_id="carol", workspace_id="ws-b")

    everything = (await call("getComments"))["comments"]
    only_t1 = (await call("getComments", {"text_id": "t1"}))["comments"]

    assert [c["content"] for c in everything] == ["two", "one"]
    assert [c["content"] for c in only_t1] == ["one"]


@pytest.mark.asyncio
async def test_viewer_cannot_read_comments(call) -> None:
    assert error_code(await call("getComments", user_id="bob")) == "FORBIDDEN"


@pytest.mark.asyncio
async def test_delete_comment(call) -> None:
    created = (await call("createComment", comment()))["comment"]

    envelope = await call("deleteComment", {"commentId": created["id"]})

    assert envelope["deleted"] is True
    assert error_code(await call("deleteComment", {"commentId": created["id"]})) == "NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_comment_across_workspaces_is_not_found(call) -> None:
    created = (await call("createComment", comment()))["comment"]

    envelope = await call("deleteComment", {"commentId": created["id"]}, user_id="carol", workspace_id="ws-b")

    assert error_code(envelope) == "NOT_FOUND"
    assert len((await call("getComments"))["comments"]) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("comment_id", [["x"], {"a": 1}, 42])
async def test_non_string_comment_id_is_invalid_input(call, comment_id) -> None:
    envelope = await call("deleteComment", {"commentId": comment_id})

    assert error_code(envelope) == "INVALID_INPUT"
    assert envelope["error"]["message"] == "commentId must be a string"
