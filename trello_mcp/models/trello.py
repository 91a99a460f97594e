"""
Trello Resource Models

Pydantic models for the Trello REST API resources returned by TrelloClient.
Field names are snake_case in Python and camelCase on the wire; unknown fields
are kept so that JSON listings do not lose information.

Pattern: Pydantic response models at the client boundary
"""

import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class TrelloModel(BaseModel):
    """Base model for Trello resources (camelCase aliases, extra fields kept)."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "allow",
    }

    def to_json_dict(self) -> dict[str, Any]:
        """Dump in Trello's wire format, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Boards and Lists
# =============================================================================


class Board(TrelloModel):
    id: str
    name: str
    desc: str = ""
    closed: bool = False
    url: Optional[str] = None
    short_url: Optional[str] = None


class TrelloList(TrelloModel):
    id: str
    name: str
    closed: bool = False
    id_board: Optional[str] = None
    pos: Optional[float] = None


# =============================================================================
# Labels and Members
# =============================================================================


class Label(TrelloModel):
    id: str
    name: str = ""
    color: Optional[str] = None
    id_board: Optional[str] = None


class Member(TrelloModel):
    id: str
    full_name: Optional[str] = None
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Full name, falling back to username then id."""
        return self.full_name or self.username or self.id


# =============================================================================
# Checklists
# =============================================================================


class CheckItem(TrelloModel):
    id: str
    name: str
    state: str = "incomplete"
    id_checklist: Optional[str] = None
    pos: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.state == "complete"


class Checklist(TrelloModel):
    id: str
    name: str
    id_card: Optional[str] = None
    check_items: list[CheckItem] = Field(default_factory=list)


def _percentage(checked: int, total: int) -> int:
    """Completion percentage rounded half up; 0 for an empty checklist."""
    if total == 0:
        return 0
    return int(math.floor(checked * 100 / total + 0.5))


class ChecklistProgressItem(BaseModel):
    id: str
    name: str
    total: int
    checked: int
    percentage: int
    complete: bool


class OverallProgress(BaseModel):
    total: int
    checked: int
    percentage: int


class ChecklistProgress(BaseModel):
    """
    Completion ratio of every checklist on a card plus the overall ratio.

    Example:
        >>> progress = ChecklistProgress.from_checklists(card.checklists)
        >>> progress.overall.percentage
        50
    """

    checklists: list[ChecklistProgressItem] = Field(default_factory=list)
    overall: OverallProgress

    @classmethod
    def from_checklists(cls, checklists: list[Checklist]) -> "ChecklistProgress":
        items: list[ChecklistProgressItem] = []
        total_all = 0
        checked_all = 0
        for checklist in checklists:
            total = len(checklist.check_items)
            checked = sum(1 for item in checklist.check_items if item.is_complete)
            total_all += total
            checked_all += checked
            items.append(
                ChecklistProgressItem(
                    id=checklist.id,
                    name=checklist.name,
                    total=total,
                    checked=checked,
                    percentage=_percentage(checked, total),
                    complete=total > 0 and checked == total,
                )
            )
        return cls(
            checklists=items,
            overall=OverallProgress(
                total=total_all,
                checked=checked_all,
                percentage=_percentage(checked_all, total_all),
            ),
        )


# =============================================================================
# Attachments and Comments
# =============================================================================


class Attachment(TrelloModel):
    id: str
    name: Optional[str] = None
    url: Optional[str] = None
    mime_type: Optional[str] = None
    is_upload: Optional[bool] = None
    date: Optional[datetime] = None


class Comment(TrelloModel):
    """A commentCard action on a card."""

    id: str
    date: Optional[datetime] = None
    data: dict[str, Any] = Field(default_factory=dict)
    member_creator: Optional[Member] = None

    @property
    def text(self) -> str:
        return self.data.get("text", "")


# =============================================================================
# Cards
# =============================================================================


class Card(TrelloModel):
    id: str
    name: str
    desc: str = ""
    closed: bool = False
    id_list: Optional[str] = None
    id_board: Optional[str] = None
    url: Optional[str] = None
    short_url: Optional[str] = None
    due: Optional[datetime] = None
    due_complete: bool = False
    pos: Optional[float] = None
    labels: list[Label] = Field(default_factory=list)
    id_members: list[str] = Field(default_factory=list)
    members: list[Member] = Field(default_factory=list)
    checklists: list[Checklist] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
