"""
Member Tools - board members and card assignment.
"""

from typing import Any, Optional

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import Card, Member
from trello_mcp.tools.builtin.common import card_summary
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec, format_json
from trello_mcp.tools.validation import id_rule


GET_BOARD_MEMBERS_CONFIG = ToolConfig(
    name="get_board_members",
    category=ToolCategory.MEMBERS,
    description="List the members of a board.",
    validation=(id_rule("boardId", description="Board ID"),),
)

ADD_MEMBER_TO_CARD_CONFIG = ToolConfig(
    name="add_member_to_card",
    category=ToolCategory.MEMBERS,
    description="Assign a board member to a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("memberId", description="Member ID"),
    ),
)

REMOVE_MEMBER_FROM_CARD_CONFIG = ToolConfig(
    name="remove_member_from_card",
    category=ToolCategory.MEMBERS,
    description="Unassign a member from a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("memberId", description="Member ID"),
    ),
)

GET_MEMBER_CARDS_CONFIG = ToolConfig(
    name="get_member_cards",
    category=ToolCategory.MEMBERS,
    description="List the open cards assigned to a member, optionally on one board.",
    validation=(
        id_rule("memberId", description="Member ID"),
        id_rule("boardId", required=False, description="Restrict to this board"),
    ),
)


async def get_board_members(client: TrelloClient, args: ToolArgs) -> list[Member]:
    return await client.get_board_members(args["boardId"])


def render_board_members(members: list[Member], args: ToolArgs) -> str:
    if not members:
        return "No members found on this board."
    return format_json(
        [
            {"id": m.id, "fullName": m.full_name, "username": m.username}
            for m in members
        ]
    )


def find_member(members: list[Member], member_id: str) -> Optional[Member]:
    """The member with the given id; the API does not order the list."""
    return next((m for m in members if m.id == member_id), None)


async def add_member_to_card(client: TrelloClient, args: ToolArgs) -> tuple[Card, Optional[Member]]:
    card = await client.get_card(args["cardId"])
    members = await client.add_member_to_card(args["cardId"], args["memberId"])
    return card, find_member(members, args["memberId"])


def render_member_added(result: tuple[Card, Optional[Member]], args: ToolArgs) -> str:
    card, member = result
    if member is not None:
        who = f"{member.display_name} (@{member.username})" if member.username else member.display_name
    else:
        who = args["memberId"]
    return (
        "Member assigned to card.\n\n"
        f"Card: {card.name}\n"
        f"Card ID: {card.id}\n"
        f"Member: {who}\n"
        f"URL: {card.url}"
    )


async def remove_member_from_card(client: TrelloClient, args: ToolArgs) -> None:
    await client.remove_member_from_card(args["cardId"], args["memberId"])


def render_member_removed(result: Any, args: ToolArgs) -> str:
    return (
        "Member removed from card.\n\n"
        f"Card ID: {args['cardId']}\n"
        f"Member ID: {args['memberId']}"
    )


async def get_member_cards(client: TrelloClient, args: ToolArgs) -> list[Card]:
    return await client.get_member_cards(args["memberId"], args.get("boardId"))


def render_member_cards(cards: list[Card], args: ToolArgs) -> str:
    if not cards:
        if args.get("boardId"):
            return "No cards assigned to this member on this board."
        return "No cards assigned to this member."
    return format_json([card_summary(card) for card in cards])


TOOLS: list[ToolSpec] = [
    ToolSpec(GET_BOARD_MEMBERS_CONFIG, get_board_members, render_board_members),
    ToolSpec(ADD_MEMBER_TO_CARD_CONFIG, add_member_to_card, render_member_added),
    ToolSpec(REMOVE_MEMBER_FROM_CARD_CONFIG, remove_member_from_card, render_member_removed),
    ToolSpec(GET_MEMBER_CARDS_CONFIG, get_member_cards, render_member_cards),
]
