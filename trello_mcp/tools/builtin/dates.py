"""
Due Date Tools

Due dates are ISO 8601 UTC timestamps (2025-12-31T17:00:00.000Z).
list_cards_by_due_date returns only cards that have a due date, earliest
first.
"""

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import Card
from trello_mcp.tools.builtin.common import format_due
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec, format_json
from trello_mcp.tools.validation import ISO_DATETIME_PATTERN, ValidationRule, id_rule


SET_CARD_DUE_DATE_CONFIG = ToolConfig(
    name="set_card_due_date",
    category=ToolCategory.DATES,
    description="Set the due date of a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        ValidationRule(
            param="dueDate", required=True, type="string", pattern=ISO_DATETIME_PATTERN,
            description="Due date, ISO 8601 UTC (e.g. 2025-12-31T17:00:00.000Z)",
        ),
    ),
)

REMOVE_CARD_DUE_DATE_CONFIG = ToolConfig(
    name="remove_card_due_date",
    category=ToolCategory.DATES,
    description="Remove the due date of a card.",
    validation=(id_rule("cardId", description="Card ID"),),
)

MARK_DUE_DATE_COMPLETE_CONFIG = ToolConfig(
    name="mark_due_date_complete",
    category=ToolCategory.DATES,
    description="Mark the due date of a card as complete (or incomplete).",
    validation=(
        id_rule("cardId", description="Card ID"),
        ValidationRule(
            param="complete", type="boolean",
            description="Completion state (default true)",
        ),
    ),
)

LIST_CARDS_BY_DUE_DATE_CONFIG = ToolConfig(
    name="list_cards_by_due_date",
    category=ToolCategory.DATES,
    description="List the cards of a board that have a due date, earliest first.",
    validation=(id_rule("boardId", description="Board ID"),),
)


async def set_card_due_date(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.set_card_due_date(args["cardId"], args["dueDate"])


def render_due_date_set(card: Card, args: ToolArgs) -> str:
    return (
        "Due date set.\n\n"
        f"Card: {card.name}\n"
        f"Card ID: {card.id}\n"
        f"Due: {format_due(card.due)}"
    )


async def remove_card_due_date(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.remove_card_due_date(args["cardId"])


def render_due_date_removed(card: Card, args: ToolArgs) -> str:
    return f"Due date removed.\n\nCard: {card.name}\nCard ID: {card.id}"


async def mark_due_date_complete(client: TrelloClient, args: ToolArgs) -> Card:
    complete = args.get("complete")
    return await client.mark_due_date_complete(
        args["cardId"], True if complete is None else complete
    )


def render_due_date_marked(card: Card, args: ToolArgs) -> str:
    state = "complete" if card.due_complete else "incomplete"
    return (
        f"Due date marked {state}.\n\n"
        f"Card: {card.name}\n"
        f"Card ID: {card.id}\n"
        f"Due: {format_due(card.due)}"
    )


async def list_cards_by_due_date(client: TrelloClient, args: ToolArgs) -> list[Card]:
    return await client.get_cards_by_due_date(args["boardId"])


def render_cards_by_due_date(cards: list[Card], args: ToolArgs) -> str:
    if not cards:
        return "No cards with a due date on this board."
    return format_json(
        [
            {
                "id": card.id,
                "name": card.name,
                "due": card.due.isoformat() if card.due else None,
                "dueComplete": card.due_complete,
                "listId": card.id_list,
                "url": card.short_url or card.url,
            }
            for card in cards
        ]
    )


TOOLS: list[ToolSpec] = [
    ToolSpec(SET_CARD_DUE_DATE_CONFIG, set_card_due_date, render_due_date_set),
    ToolSpec(REMOVE_CARD_DUE_DATE_CONFIG, remove_card_due_date, render_due_date_removed),
    ToolSpec(MARK_DUE_DATE_COMPLETE_CONFIG, mark_due_date_complete, render_due_date_marked),
    ToolSpec(LIST_CARDS_BY_DUE_DATE_CONFIG, list_cards_by_due_date, render_cards_by_due_date),
]
