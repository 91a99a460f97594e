"""
Tests for the built-in Trello tools.

Each tool is exercised through the registry with a mocked TrelloClient,
so validation, the operation and the renderer run together.
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from trello_mcp.models.domain import BulkItemError, BulkResult, ToolCategory
from trello_mcp.models.trello import (
    Attachment,
    Board,
    Card,
    CheckItem,
    Checklist,
    ChecklistProgress,
    Comment,
    Label,
    Member,
    TrelloList,
)
from trello_mcp.tools.builtin import ALL_TOOLS


BOARD_ID = "b" * 24
LIST_ID = "l" * 24
CARD_ID = "c" * 24
CARD_ID_2 = "d" * 24
LABEL_ID = "a" * 24
MEMBER_ID = "m" * 24
OTHER_MEMBER_ID = "o" * 24
CHECKLIST_ID = "k" * 24
ITEM_ID = "i" * 24
ATTACHMENT_ID = "t" * 24


def make_card(**overrides) -> Card:
    data = {"id": CARD_ID, "name": "Write docs", "id_list": LIST_ID, "url": "https://trello.com/c/abc"}
    data.update(overrides)
    return Card(**data)


# =============================================================================
# Catalogue
# =============================================================================


class TestCatalogue:
    """Tests for the registered tool set."""

    def test_all_tools_registered(self, trello_registry) -> None:
        assert trello_registry.get_tool_count() == len(ALL_TOOLS) == 46

    def test_tool_names_unique(self) -> None:
        names = [spec.config.name for spec in ALL_TOOLS]
        assert len(names) == len(set(names))

    def test_every_category_populated(self, trello_registry) -> None:
        for category in ToolCategory:
            assert trello_registry.get_tools_by_category(category), category

    @pytest.mark.parametrize(
        "name",
        ["move_card", "search_cards", "duplicate_card", "get_card_comments", "bulk_move_cards"],
    )
    def test_expected_tools_present(self, trello_registry, name: str) -> None:
        assert trello_registry.has(name)

    def test_every_tool_has_object_schema(self, trello_registry) -> None:
        for definition in trello_registry.get_tool_definitions():
            assert definition.parameters["type"] == "object"
            assert definition.description


# =============================================================================
# Boards and Lists
# =============================================================================


class TestBoardTools:
    """Board tools."""

    @pytest.mark.asyncio
    async def test_list_boards_json(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.get_boards.return_value = [
            Board(id=BOARD_ID, name="Roadmap", desc="Q1", url="https://trello.com/b/x")
        ]

        result = await trello_registry.execute("list_boards", {})

        assert json.loads(result.text) == [
            {
                "id": BOARD_ID,
                "name": "Roadmap",
                "url": "https://trello.com/b/x",
                "description": "Q1",
                "closed": False,
            }
        ]

    @pytest.mark.asyncio
    async def test_create_board_requires_name(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute("create_board", {"name": ""})

        assert result.is_error
        mock_trello_client.create_board.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_board_mentions_reopen(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.close_board.return_value = Board(id=BOARD_ID, name="Roadmap", closed=True)

        result = await trello_registry.execute("close_board", {"boardId": BOARD_ID})

        assert not result.is_error
        assert "reopen_board" in result.text
        assert "closed (archived)" in result.text

    @pytest.mark.asyncio
    async def test_delete_board_warns_and_names_alternative(
        self, trello_registry, mock_trello_client
    ) -> None:
        mock_trello_client.delete_board.return_value = None

        result = await trello_registry.execute("delete_board", {"boardId": BOARD_ID})

        mock_trello_client.delete_board.assert_awaited_once_with(BOARD_ID)
        assert "IRREVERSIBLE" in result.text
        assert "close_board" in result.text

    @pytest.mark.asyncio
    async def test_create_list(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.create_list.return_value = TrelloList(
            id=LIST_ID, name="Doing", id_board=BOARD_ID, pos=16384
        )

        result = await trello_registry.execute("create_list", {"boardId": BOARD_ID, "name": "Doing"})

        mock_trello_client.create_list.assert_awaited_once_with(BOARD_ID, "Doing")
        assert f"ID: {LIST_ID}" in result.text


# =============================================================================
# Cards
# =============================================================================


class TestCardTools:
    """Card tools."""

    @pytest.mark.asyncio
    async def test_move_card_defaults_to_top(self, trello_registry, mock_trello_client) -> None:
        card_id, list_id = "x" * 24, "y" * 24
        mock_trello_client.move_card.return_value = make_card(id=card_id, id_list=list_id)

        result = await trello_registry.execute(
            "move_card", {"cardId": card_id, "targetListId": list_id}
        )

        assert not result.is_error
        mock_trello_client.move_card.assert_awaited_once_with(card_id, list_id, "top")
        assert card_id in result.text
        assert list_id in result.text
        assert "Position: top" in result.text

    @pytest.mark.asyncio
    async def test_move_card_numeric_position(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.move_card.return_value = make_card()

        await trello_registry.execute(
            "move_card", {"cardId": CARD_ID, "targetListId": LIST_ID, "position": "2048.5"}
        )

        mock_trello_client.move_card.assert_awaited_once_with(CARD_ID, LIST_ID, 2048.5)

    @pytest.mark.asyncio
    async def test_move_card_bad_position(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute(
            "move_card", {"cardId": CARD_ID, "targetListId": LIST_ID, "position": "middle"}
        )

        assert result.is_error
        assert "position" in result.text
        mock_trello_client.move_card.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_defaults(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.search_cards.return_value = [make_card()]

        result = await trello_registry.execute("search_cards", {"query": "docs"})

        mock_trello_client.search_cards.assert_awaited_once_with(
            "docs", board_ids=None, limit=25, partial=False
        )
        assert json.loads(result.text)[0]["id"] == CARD_ID

    @pytest.mark.asyncio
    async def test_search_with_options(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.search_cards.return_value = []

        result = await trello_registry.execute(
            "search_cards",
            {"query": "docs", "boardIds": [BOARD_ID], "limit": 5, "partial": True},
        )

        mock_trello_client.search_cards.assert_awaited_once_with(
            "docs", board_ids=[BOARD_ID], limit=5, partial=True
        )
        assert result.text == "No cards found for: docs"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit,expected", [(0, 25), (-3, 25), (0.5, 25), (7.9, 7)])
    async def test_search_limit_below_one_uses_default(
        self, trello_registry, mock_trello_client, limit, expected
    ) -> None:
        mock_trello_client.search_cards.return_value = []

        await trello_registry.execute("search_cards", {"query": "docs", "limit": limit})

        assert mock_trello_client.search_cards.await_args.kwargs["limit"] == expected

    @pytest.mark.asyncio
    async def test_search_rejects_string_limit(self, trello_registry) -> None:
        result = await trello_registry.execute("search_cards", {"query": "docs", "limit": "5"})
        assert result.is_error

    @pytest.mark.asyncio
    async def test_update_description_allows_text(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.update_card.return_value = make_card(desc="New")

        result = await trello_registry.execute(
            "update_card_description", {"cardId": CARD_ID, "description": "New"}
        )

        mock_trello_client.update_card.assert_awaited_once_with(CARD_ID, {"desc": "New"})
        assert "Description: New" in result.text

    @pytest.mark.asyncio
    async def test_archive_card_mentions_unarchive(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.archive_card.return_value = make_card(closed=True)

        result = await trello_registry.execute("archive_card", {"cardId": CARD_ID})

        assert "unarchive_card" in result.text

    @pytest.mark.asyncio
    async def test_delete_card_warns(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute("delete_card", {"cardId": CARD_ID})

        assert "IRREVERSIBLE" in result.text
        assert "archive_card" in result.text

    @pytest.mark.asyncio
    async def test_add_comment_requires_text(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute("add_card_comment", {"cardId": CARD_ID, "text": ""})

        assert result.text == "Validation error: Parameter 'text' is required."

    @pytest.mark.asyncio
    async def test_get_card_comments(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.get_comments.return_value = [
            Comment(
                id="1",
                data={"text": "Looks good"},
                member_creator=Member(id=MEMBER_ID, full_name="Ada Lovelace"),
            )
        ]

        result = await trello_registry.execute("get_card_comments", {"cardId": CARD_ID})

        [comment] = json.loads(result.text)
        assert comment["text"] == "Looks good"
        assert comment["author"] == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_duplicate_card_keep_defaults(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.duplicate_card.return_value = make_card(id=CARD_ID_2)

        result = await trello_registry.execute(
            "duplicate_card",
            {"cardId": CARD_ID, "targetListId": LIST_ID, "keepLabels": False},
        )

        mock_trello_client.duplicate_card.assert_awaited_once_with(
            CARD_ID,
            LIST_ID,
            keep_from_source=["attachments", "checklists", "members", "due"],
            name=None,
            desc=None,
            position="top",
        )
        assert f"New card ID: {CARD_ID_2}" in result.text

    @pytest.mark.asyncio
    async def test_card_details_renders_checklist_progress(
        self, trello_registry, mock_trello_client
    ) -> None:
        mock_trello_client.get_card_details.return_value = make_card(
            desc="Body",
            labels=[Label(id=LABEL_ID, name="Urgent", color="red")],
            members=[Member(id=MEMBER_ID, full_name="Ada Lovelace")],
            checklists=[
                Checklist(
                    id=CHECKLIST_ID,
                    name="Steps",
                    check_items=[
                        CheckItem(id="1", name="a", state="complete"),
                        CheckItem(id="2", name="b"),
                    ],
                )
            ],
            attachments=[Attachment(id=ATTACHMENT_ID, name="mockup.pdf")],
        )

        result = await trello_registry.execute("get_card_details", {"cardId": CARD_ID})

        assert "Labels: Urgent" in result.text
        assert "Members: Ada Lovelace" in result.text
        assert "Checklists (1/2, 50%)" in result.text
        assert "Attachments (1)" in result.text


# =============================================================================
# Dates
# =============================================================================


class TestDateTools:
    """Due date tools."""

    @pytest.mark.asyncio
    async def test_set_due_date_pattern(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute(
            "set_card_due_date", {"cardId": CARD_ID, "dueDate": "2025-12-31"}
        )

        assert result.is_error
        assert "dueDate" in result.text
        mock_trello_client.set_card_due_date.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_set_due_date(self, trello_registry, mock_trello_client) -> None:
        due = "2025-12-31T17:00:00.000Z"
        mock_trello_client.set_card_due_date.return_value = make_card(due=due)

        result = await trello_registry.execute("set_card_due_date", {"cardId": CARD_ID, "dueDate": due})

        mock_trello_client.set_card_due_date.assert_awaited_once_with(CARD_ID, due)
        assert "2025-12-31 17:00 UTC" in result.text

    @pytest.mark.asyncio
    async def test_mark_complete_defaults_to_true(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.mark_due_date_complete.return_value = make_card(due_complete=True)

        result = await trello_registry.execute("mark_due_date_complete", {"cardId": CARD_ID})

        mock_trello_client.mark_due_date_complete.assert_awaited_once_with(CARD_ID, True)
        assert "marked complete" in result.text

    @pytest.mark.asyncio
    async def test_mark_incomplete(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.mark_due_date_complete.return_value = make_card()

        await trello_registry.execute(
            "mark_due_date_complete", {"cardId": CARD_ID, "complete": False}
        )

        mock_trello_client.mark_due_date_complete.assert_awaited_once_with(CARD_ID, False)

    @pytest.mark.asyncio
    async def test_list_cards_by_due_date_empty(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.get_cards_by_due_date.return_value = []

        result = await trello_registry.execute("list_cards_by_due_date", {"boardId": BOARD_ID})

        assert result.text == "No cards with a due date on this board."


# =============================================================================
# Members
# =============================================================================


class TestMemberTools:
    """Member tools."""

    @pytest.mark.asyncio
    async def test_add_member_matches_submitted_id(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.get_card.return_value = make_card()
        mock_trello_client.add_member_to_card.return_value = [
            Member(id=OTHER_MEMBER_ID, full_name="Existing Person", username="existing"),
            Member(id=MEMBER_ID, full_name="Ada Lovelace", username="ada"),
        ]

        result = await trello_registry.execute(
            "add_member_to_card", {"cardId": CARD_ID, "memberId": MEMBER_ID}
        )

        assert "Member: Ada Lovelace (@ada)" in result.text
        assert "Existing Person" not in result.text

    @pytest.mark.asyncio
    async def test_add_member_falls_back_to_id(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.get_card.return_value = make_card()
        mock_trello_client.add_member_to_card.return_value = []

        result = await trello_registry.execute(
            "add_member_to_card", {"cardId": CARD_ID, "memberId": MEMBER_ID}
        )

        assert f"Member: {MEMBER_ID}" in result.text

    @pytest.mark.asyncio
    async def test_member_cards_board_filter_optional(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.get_member_cards.return_value = []

        result = await trello_registry.execute("get_member_cards", {"memberId": MEMBER_ID})

        mock_trello_client.get_member_cards.assert_awaited_once_with(MEMBER_ID, None)
        assert result.text == "No cards assigned to this member."

    @pytest.mark.asyncio
    async def test_member_cards_board_id_validated(self, trello_registry) -> None:
        result = await trello_registry.execute(
            "get_member_cards", {"memberId": MEMBER_ID, "boardId": "short"}
        )
        assert result.is_error


# =============================================================================
# Labels, Checklists, Attachments
# =============================================================================


class TestLabelTools:

    @pytest.mark.asyncio
    async def test_create_label_requires_color(self, trello_registry) -> None:
        result = await trello_registry.execute("create_label", {"boardId": BOARD_ID, "name": "Bug"})
        assert result.text == "Validation error: Parameter 'color' is required."

    @pytest.mark.asyncio
    async def test_add_label_to_card(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute(
            "add_label_to_card", {"cardId": CARD_ID, "labelId": LABEL_ID}
        )
        mock_trello_client.add_label_to_card.assert_awaited_once_with(CARD_ID, LABEL_ID)
        assert LABEL_ID in result.text


class TestChecklistTools:

    @pytest.mark.asyncio
    async def test_check_item_state_enum(self, trello_registry) -> None:
        result = await trello_registry.execute(
            "check_checklist_item", {"cardId": CARD_ID, "checkItemId": ITEM_ID, "state": "done"}
        )
        assert result.is_error
        assert "complete, incomplete" in result.text

    @pytest.mark.asyncio
    async def test_progress_rendering(self, trello_registry, mock_trello_client) -> None:
        checklists = [
            Checklist(
                id="1",
                name="Build",
                check_items=[
                    CheckItem(id=str(i), name=str(i), state="complete" if i < 2 else "incomplete")
                    for i in range(4)
                ],
            ),
            Checklist(id="2", name="Empty"),
        ]
        mock_trello_client.get_checklist_progress.return_value = ChecklistProgress.from_checklists(checklists)

        result = await trello_registry.execute("get_checklist_progress", {"cardId": CARD_ID})

        assert "Checklist progress: 2/4 (50%)" in result.text
        assert "- Build: 2/4 (50%)" in result.text
        assert "- Empty: 0/0 (0%)" in result.text

    @pytest.mark.asyncio
    async def test_delete_checklist_warns(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute("delete_checklist", {"checklistId": CHECKLIST_ID})
        assert "IRREVERSIBLE" in result.text


class TestAttachmentTools:

    @pytest.mark.asyncio
    async def test_url_must_be_http(self, trello_registry) -> None:
        result = await trello_registry.execute(
            "add_attachment_url", {"cardId": CARD_ID, "url": "file:///etc/passwd"}
        )
        assert result.is_error

    @pytest.mark.asyncio
    async def test_set_cover_without_attachment_removes_cover(
        self, trello_registry, mock_trello_client
    ) -> None:
        mock_trello_client.set_card_cover.return_value = make_card()

        result = await trello_registry.execute("set_card_cover", {"cardId": CARD_ID})

        mock_trello_client.set_card_cover.assert_awaited_once_with(CARD_ID, None)
        assert "Card cover removed" in result.text


# =============================================================================
# Bulk
# =============================================================================


class TestBulkTools:
    """Bulk tools delegate to the client's batch executor."""

    @pytest.mark.asyncio
    async def test_bulk_archive_reports_failures(self, trello_registry, mock_trello_client) -> None:
        mock_trello_client.execute_bulk.return_value = BulkResult(
            total=2,
            success=1,
            failed=1,
            errors=[BulkItemError(item_id=CARD_ID_2, error="Trello resource not found")],
        )

        result = await trello_registry.execute(
            "bulk_archive_cards", {"cardIds": [CARD_ID, CARD_ID_2]}
        )

        item_ids, operation = mock_trello_client.execute_bulk.await_args.args
        assert item_ids == [CARD_ID, CARD_ID_2]
        assert operation is mock_trello_client.archive_card
        assert "Succeeded: 1" in result.text
        assert "Failed: 1" in result.text
        assert f"- {CARD_ID_2}: Trello resource not found" in result.text

    @pytest.mark.asyncio
    async def test_bulk_requires_non_empty_ids(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute("bulk_archive_cards", {"cardIds": []})

        assert result.is_error
        mock_trello_client.execute_bulk.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bulk_rejects_non_string_ids(self, trello_registry, mock_trello_client) -> None:
        result = await trello_registry.execute(
            "bulk_archive_cards", {"cardIds": [CARD_ID, 5, CARD_ID_2]}
        )

        assert result.is_error
        assert result.text.startswith("Validation error: Parameter 'cardIds'")
        mock_trello_client.execute_bulk.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bulk_move_defaults_to_top(self, trello_registry, mock_trello_client) -> None:
        async def run_operation(item_ids, operation):
            for item_id in item_ids:
                await operation(item_id)
            return BulkResult(total=len(item_ids), success=len(item_ids))

        mock_trello_client.execute_bulk.side_effect = run_operation

        result = await trello_registry.execute(
            "bulk_move_cards", {"cardIds": [CARD_ID], "targetListId": LIST_ID}
        )

        mock_trello_client.move_card.assert_awaited_once_with(CARD_ID, LIST_ID, "top")
        assert "Position: top" in result.text

    @pytest.mark.asyncio
    async def test_bulk_assign_member(self, trello_registry, mock_trello_client) -> None:
        async def run_operation(item_ids, operation):
            for item_id in item_ids:
                await operation(item_id)
            return BulkResult(total=len(item_ids), success=len(item_ids))

        mock_trello_client.execute_bulk.side_effect = run_operation

        await trello_registry.execute(
            "bulk_assign_member", {"cardIds": [CARD_ID, CARD_ID_2], "memberId": MEMBER_ID}
        )

        assert mock_trello_client.add_member_to_card.await_count == 2


# =============================================================================
# Datetime sanity for rendered dates
# =============================================================================


def test_card_due_parsed_as_aware_datetime() -> None:
    card = Card(id="c", name="n", due="2025-11-15T12:00:00.000Z")
    assert card.due == datetime(2025, 11, 15, 12, 0, tzinfo=timezone.utc)
