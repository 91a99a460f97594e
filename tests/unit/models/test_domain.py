"""
Tests for domain models: ToolDefinition, ToolResult and BulkResult.
"""

import pytest
from pydantic import ValidationError

from trello_mcp.models.domain import (
    BulkItemError,
    BulkResult,
    TextContent,
    ToolCategory,
    ToolDefinition,
    ToolResult,
)


class TestToolCategory:

    def test_nine_categories(self):
        assert {c.value for c in ToolCategory} == {
            "boards", "lists", "cards", "labels", "dates",
            "checklists", "members", "attachments", "bulk",
        }

    def test_string_compatible(self):
        assert ToolCategory("cards") is ToolCategory.CARDS


class TestToolDefinition:

    def test_is_frozen(self):
        definition = ToolDefinition(
            name="list_boards",
            category=ToolCategory.BOARDS,
            parameters={"type": "object", "properties": {}, "required": []},
        )
        with pytest.raises(ValidationError):
            definition.name = "other"

    def test_requires_parameters(self):
        with pytest.raises(ValidationError):
            ToolDefinition(name="x", category=ToolCategory.BOARDS)


class TestToolResult:

    def test_success_envelope(self):
        result = ToolResult.success("done")
        assert result.is_error is False
        assert result.content == [TextContent(text="done")]
        assert result.content[0].type == "text"

    def test_error_envelope(self):
        result = ToolResult.error("Error: boom")
        assert result.is_error is True
        assert result.text == "Error: boom"

    def test_text_joins_blocks(self):
        result = ToolResult(content=[TextContent(text="a"), TextContent(text="b")])
        assert result.text == "a\nb"

    def test_empty_result(self):
        assert ToolResult().text == ""


class TestBulkResult:

    def test_failed_ids_in_order(self):
        result = BulkResult(
            total=3,
            success=1,
            failed=2,
            errors=[
                BulkItemError(item_id="c2", error="not found"),
                BulkItemError(item_id="c3", error="forbidden"),
            ],
        )
        assert result.failed_ids == ["c2", "c3"]

    def test_defaults(self):
        result = BulkResult()
        assert (result.total, result.success, result.failed) == (0, 0, 0)
        assert result.errors == []
