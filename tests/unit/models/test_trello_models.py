"""
Tests for the Trello resource models and checklist progress.
"""

from datetime import datetime, timezone

from trello_mcp.models.trello import (
    Board,
    Card,
    CheckItem,
    Checklist,
    ChecklistProgress,
    Comment,
    Member,
)


def make_checklist(checklist_id: str, name: str, total: int, checked: int) -> Checklist:
    items = [
        CheckItem(id=f"{checklist_id}-{i}", name=f"item {i}", state="complete" if i < checked else "incomplete")
        for i in range(total)
    ]
    return Checklist(id=checklist_id, name=name, check_items=items)


# =============================================================================
# Wire Format
# =============================================================================


class TestWireFormat:
    """camelCase on the wire, snake_case in Python."""

    def test_parses_camel_case_payload(self):
        card = Card.model_validate(
            {
                "id": "c1",
                "name": "Fix login",
                "idList": "l1",
                "idBoard": "b1",
                "shortUrl": "https://trello.com/c/abc",
                "due": "2025-12-31T17:00:00.000Z",
                "dueComplete": True,
                "idMembers": ["m1"],
                "labels": [{"id": "a1", "name": "Bug", "color": "red"}],
                "badges": {"comments": 2},
            }
        )

        assert card.id_list == "l1"
        assert card.id_board == "b1"
        assert card.short_url == "https://trello.com/c/abc"
        assert card.due == datetime(2025, 12, 31, 17, 0, tzinfo=timezone.utc)
        assert card.due_complete is True
        assert card.id_members == ["m1"]
        assert card.labels[0].color == "red"

    def test_unknown_fields_are_kept(self):
        card = Card.model_validate({"id": "c1", "name": "n", "badges": {"comments": 2}})
        assert card.to_json_dict()["badges"] == {"comments": 2}

    def test_to_json_dict_uses_aliases_and_drops_none(self):
        data = Card(id="c1", name="n", id_list="l1").to_json_dict()
        assert data["idList"] == "l1"
        assert "due" not in data
        assert "idBoard" not in data

    def test_board_defaults(self):
        board = Board(id="b1", name="Roadmap")
        assert board.desc == ""
        assert board.closed is False


class TestMemberAndComment:

    def test_display_name_fallbacks(self):
        assert Member(id="m1", full_name="Ada", username="ada").display_name == "Ada"
        assert Member(id="m1", username="ada").display_name == "ada"
        assert Member(id="m1").display_name == "m1"

    def test_comment_text(self):
        comment = Comment.model_validate(
            {
                "id": "a1",
                "date": "2025-01-02T03:04:05.000Z",
                "data": {"text": "Ship it"},
                "memberCreator": {"id": "m1", "fullName": "Ada"},
            }
        )
        assert comment.text == "Ship it"
        assert comment.member_creator.display_name == "Ada"

    def test_comment_without_text(self):
        assert Comment(id="a1").text == ""


# =============================================================================
# Checklist Progress
# =============================================================================


class TestChecklistProgress:
    """Percentages round half up; empty checklists count as 0% and incomplete."""

    def test_overall_and_per_checklist(self):
        progress = ChecklistProgress.from_checklists(
            [make_checklist("k1", "Build", 4, 2), make_checklist("k2", "Empty", 0, 0)]
        )

        build, empty = progress.checklists
        assert (build.total, build.checked, build.percentage, build.complete) == (4, 2, 50, False)
        assert (empty.total, empty.checked, empty.percentage, empty.complete) == (0, 0, 0, False)
        assert (progress.overall.total, progress.overall.checked) == (4, 2)
        assert progress.overall.percentage == 50

    def test_complete_checklist(self):
        progress = ChecklistProgress.from_checklists([make_checklist("k1", "Done", 3, 3)])
        assert progress.checklists[0].complete is True
        assert progress.overall.percentage == 100

    def test_rounds_half_up(self):
        # 1/8 = 12.5% and 5/8 = 62.5%
        assert ChecklistProgress.from_checklists([make_checklist("k", "x", 8, 1)]).overall.percentage == 13
        assert ChecklistProgress.from_checklists([make_checklist("k", "x", 8, 5)]).overall.percentage == 63

    def test_one_third(self):
        progress = ChecklistProgress.from_checklists([make_checklist("k", "x", 3, 1)])
        assert progress.overall.percentage == 33

    def test_no_checklists(self):
        progress = ChecklistProgress.from_checklists([])
        assert progress.checklists == []
        assert progress.overall.percentage == 0

    def test_check_item_state(self):
        assert CheckItem(id="i", name="x", state="complete").is_complete is True
        assert CheckItem(id="i", name="x").is_complete is False
