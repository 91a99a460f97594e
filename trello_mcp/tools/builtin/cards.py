"""
Card Tools

Listing, creation, details, comments, moves, search, renames, archival,
deletion and duplication of cards.

Moves default to the top of the target list. Archival is reversible with
unarchive_card; deletion is not.
"""

from typing import Any

from trello_mcp.clients.trello import DEFAULT_SEARCH_LIMIT, TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import Card, ChecklistProgress, Comment
from trello_mcp.tools.builtin.common import (
    card_summary,
    format_due,
    label_names,
    parse_position,
)
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec, format_json
from trello_mcp.tools.validation import ValidationRule, id_rule, position_rule


# =============================================================================
# Tool Configs
# =============================================================================

LIST_CARDS_CONFIG = ToolConfig(
    name="list_cards",
    category=ToolCategory.CARDS,
    description="List all cards of a list.",
    validation=(id_rule("listId", description="List ID"),),
)

CREATE_CARD_CONFIG = ToolConfig(
    name="create_card",
    category=ToolCategory.CARDS,
    description="Create a new card in a list.",
    validation=(
        id_rule("listId", description="List ID"),
        ValidationRule(
            param="name", required=True, type="string", min_length=1,
            description="Card name",
        ),
        ValidationRule(param="desc", type="string", description="Card description"),
    ),
)

GET_CARD_DETAILS_CONFIG = ToolConfig(
    name="get_card_details",
    category=ToolCategory.CARDS,
    description=(
        "Get full card details: description, due date, labels, members, "
        "checklists and attachments."
    ),
    validation=(id_rule("cardId", description="Card ID"),),
)

ADD_CARD_COMMENT_CONFIG = ToolConfig(
    name="add_card_comment",
    category=ToolCategory.CARDS,
    description="Add a comment to a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        ValidationRule(
            param="text", required=True, type="string", min_length=1,
            description="Comment text",
        ),
    ),
)

GET_CARD_COMMENTS_CONFIG = ToolConfig(
    name="get_card_comments",
    category=ToolCategory.CARDS,
    description="List the comments of a card, newest first.",
    validation=(id_rule("cardId", description="Card ID"),),
)

MOVE_CARD_CONFIG = ToolConfig(
    name="move_card",
    category=ToolCategory.CARDS,
    description='Move a card to another list (position defaults to "top").',
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("targetListId", description="Target list ID"),
        position_rule(),
    ),
)

SEARCH_CARDS_CONFIG = ToolConfig(
    name="search_cards",
    category=ToolCategory.CARDS,
    description="Search cards by text, optionally restricted to some boards.",
    validation=(
        ValidationRule(
            param="query", required=True, type="string", min_length=1,
            description="Search text",
        ),
        ValidationRule(
            param="boardIds", type="array", item_type="string",
            description="Board IDs to search in",
        ),
        ValidationRule(
            param="limit", type="number",
            description=f"Maximum number of cards (default {DEFAULT_SEARCH_LIMIT})",
        ),
        ValidationRule(param="partial", type="boolean", description="Match partial words"),
    ),
)

UPDATE_CARD_NAME_CONFIG = ToolConfig(
    name="update_card_name",
    category=ToolCategory.CARDS,
    description="Rename a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        ValidationRule(
            param="name", required=True, type="string", min_length=1,
            description="New card name",
        ),
    ),
)

UPDATE_CARD_DESCRIPTION_CONFIG = ToolConfig(
    name="update_card_description",
    category=ToolCategory.CARDS,
    description="Replace the description of a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        ValidationRule(
            param="description", required=True, type="string",
            description="New description",
        ),
    ),
)

ARCHIVE_CARD_CONFIG = ToolConfig(
    name="archive_card",
    category=ToolCategory.CARDS,
    description="Archive a card. It can be restored with unarchive_card.",
    validation=(id_rule("cardId", description="Card ID"),),
)

UNARCHIVE_CARD_CONFIG = ToolConfig(
    name="unarchive_card",
    category=ToolCategory.CARDS,
    description="Restore an archived card.",
    validation=(id_rule("cardId", description="Card ID"),),
)

DELETE_CARD_CONFIG = ToolConfig(
    name="delete_card",
    category=ToolCategory.CARDS,
    description=(
        "Permanently delete a card. IRREVERSIBLE: prefer archive_card "
        "to keep it recoverable."
    ),
    validation=(id_rule("cardId", description="Card ID"),),
)

DUPLICATE_CARD_CONFIG = ToolConfig(
    name="duplicate_card",
    category=ToolCategory.CARDS,
    description="Copy a card into a list, choosing which parts of the source to keep.",
    validation=(
        id_rule("cardId", description="Source card ID"),
        id_rule("targetListId", description="Destination list ID"),
        ValidationRule(param="newName", type="string", min_length=1, description="Name of the copy"),
        ValidationRule(param="newDesc", type="string", description="Description of the copy"),
        ValidationRule(param="keepAttachments", type="boolean", description="Copy attachments (default true)"),
        ValidationRule(param="keepChecklists", type="boolean", description="Copy checklists (default true)"),
        ValidationRule(param="keepComments", type="boolean", description="Copy comments (default false)"),
        ValidationRule(param="keepLabels", type="boolean", description="Copy labels (default true)"),
        ValidationRule(param="keepMembers", type="boolean", description="Copy members (default true)"),
        ValidationRule(param="keepDue", type="boolean", description="Copy the due date (default true)"),
        position_rule(),
    ),
)

# Argument flag -> Trello keepFromSource value, with its default
KEEP_FLAGS: tuple[tuple[str, str, bool], ...] = (
    ("keepAttachments", "attachments", True),
    ("keepChecklists", "checklists", True),
    ("keepComments", "comments", False),
    ("keepLabels", "labels", True),
    ("keepMembers", "members", True),
    ("keepDue", "due", True),
)


# =============================================================================
# Listing and Details
# =============================================================================


async def list_cards(client: TrelloClient, args: ToolArgs) -> list[Card]:
    return await client.get_cards(args["listId"])


def render_cards(cards: list[Card], args: ToolArgs) -> str:
    return format_json([card_summary(card) for card in cards])


async def create_card(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.create_card(args["listId"], args["name"], args.get("desc"))


def render_created_card(card: Card, args: ToolArgs) -> str:
    return (
        "Card created.\n\n"
        f"ID: {card.id}\n"
        f"Name: {card.name}\n"
        f"List ID: {card.id_list}\n"
        f"URL: {card.url}"
    )


async def get_card_details(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.get_card_details(args["cardId"])


def render_card_details(card: Card, args: ToolArgs) -> str:
    lines = [
        f"Card: {card.name}",
        "",
        f"ID: {card.id}",
        f"URL: {card.url or card.short_url}",
        f"List ID: {card.id_list}",
        f"Status: {'archived' if card.closed else 'open'}",
        f"Due: {format_due(card.due)}" + (" (complete)" if card.due and card.due_complete else ""),
        f"Labels: {label_names(card.labels) or 'none'}",
        "Members: "
        + (", ".join(m.display_name for m in card.members) if card.members else "none"),
        "",
        "Description:",
        card.desc or "(none)",
    ]

    if card.checklists:
        progress = ChecklistProgress.from_checklists(card.checklists)
        lines.append("")
        lines.append(
            f"Checklists ({progress.overall.checked}/{progress.overall.total}, "
            f"{progress.overall.percentage}%):"
        )
        for item in progress.checklists:
            lines.append(f"- {item.name}: {item.checked}/{item.total} ({item.percentage}%)")

    if card.attachments:
        lines.append("")
        lines.append(f"Attachments ({len(card.attachments)}):")
        lines.extend(f"- {a.name or a.url} ({a.id})" for a in card.attachments)

    return "\n".join(lines)


# =============================================================================
# Comments
# =============================================================================


async def add_card_comment(client: TrelloClient, args: ToolArgs) -> Comment:
    return await client.add_comment(args["cardId"], args["text"])


def render_added_comment(comment: Comment, args: ToolArgs) -> str:
    return (
        "Comment added.\n\n"
        f"Card ID: {args['cardId']}\n"
        f"Comment ID: {comment.id}\n"
        f"Text: {comment.text or args['text']}"
    )


async def get_card_comments(client: TrelloClient, args: ToolArgs) -> list[Comment]:
    return await client.get_comments(args["cardId"])


def render_comments(comments: list[Comment], args: ToolArgs) -> str:
    return format_json(
        [
            {
                "id": comment.id,
                "date": comment.date.isoformat() if comment.date else None,
                "author": comment.member_creator.display_name if comment.member_creator else None,
                "text": comment.text,
            }
            for comment in comments
        ]
    )


# =============================================================================
# Moves and Search
# =============================================================================


async def move_card(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.move_card(
        args["cardId"], args["targetListId"], parse_position(args.get("position"))
    )


def render_moved_card(card: Card, args: ToolArgs) -> str:
    return (
        "Card moved.\n\n"
        f"Card ID: {args['cardId']}\n"
        f"Name: {card.name}\n"
        f"Target list ID: {args['targetListId']}\n"
        f"Position: {args.get('position') or 'top'}"
    )


async def search_cards(client: TrelloClient, args: ToolArgs) -> list[Card]:
    # 0, negative and sub-1 limits fall back to the default
    limit = args.get("limit")
    return await client.search_cards(
        args["query"],
        board_ids=args.get("boardIds"),
        limit=int(limit) if limit and limit >= 1 else DEFAULT_SEARCH_LIMIT,
        partial=bool(args.get("partial", False)),
    )


def render_search_results(cards: list[Card], args: ToolArgs) -> str:
    if not cards:
        return f"No cards found for: {args['query']}"
    return format_json([card_summary(card) for card in cards])


# =============================================================================
# Updates
# =============================================================================


async def update_card_name(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.update_card_name(args["cardId"], args["name"])


def render_renamed_card(card: Card, args: ToolArgs) -> str:
    return f"Card renamed.\n\nID: {card.id}\nName: {card.name}"


async def update_card_description(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.update_card(args["cardId"], {"desc": args["description"]})


def render_updated_description(card: Card, args: ToolArgs) -> str:
    return (
        "Card description updated.\n\n"
        f"ID: {card.id}\n"
        f"Name: {card.name}\n"
        f"Description: {card.desc or '(none)'}"
    )


# =============================================================================
# Archival and Deletion
# =============================================================================


async def archive_card(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.archive_card(args["cardId"])


def render_archived_card(card: Card, args: ToolArgs) -> str:
    return (
        "Card archived.\n\n"
        f"ID: {card.id}\n"
        f"Name: {card.name}\n\n"
        "Note: the card can be restored with unarchive_card."
    )


async def unarchive_card(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.unarchive_card(args["cardId"])


def render_unarchived_card(card: Card, args: ToolArgs) -> str:
    return (
        "Card restored.\n\n"
        f"ID: {card.id}\n"
        f"Name: {card.name}\n"
        f"List ID: {card.id_list}"
    )


async def delete_card(client: TrelloClient, args: ToolArgs) -> None:
    await client.delete_card(args["cardId"])


def render_deleted_card(result: Any, args: ToolArgs) -> str:
    return (
        "Card permanently deleted.\n\n"
        f"ID: {args['cardId']}\n\n"
        "WARNING: this action is IRREVERSIBLE. The card cannot be recovered.\n"
        "Use archive_card to remove cards while keeping them recoverable."
    )


# =============================================================================
# Duplication
# =============================================================================


async def duplicate_card(client: TrelloClient, args: ToolArgs) -> Card:
    keep = [value for flag, value, default in KEEP_FLAGS if args.get(flag, default)]
    return await client.duplicate_card(
        args["cardId"],
        args["targetListId"],
        keep_from_source=keep,
        name=args.get("newName"),
        desc=args.get("newDesc"),
        position=parse_position(args.get("position")),
    )


def render_duplicated_card(card: Card, args: ToolArgs) -> str:
    return (
        "Card duplicated.\n\n"
        f"Source card ID: {args['cardId']}\n"
        f"New card ID: {card.id}\n"
        f"Name: {card.name}\n"
        f"Target list ID: {args['targetListId']}\n"
        f"URL: {card.url}"
    )


TOOLS: list[ToolSpec] = [
    ToolSpec(LIST_CARDS_CONFIG, list_cards, render_cards),
    ToolSpec(CREATE_CARD_CONFIG, create_card, render_created_card),
    ToolSpec(GET_CARD_DETAILS_CONFIG, get_card_details, render_card_details),
    ToolSpec(ADD_CARD_COMMENT_CONFIG, add_card_comment, render_added_comment),
    ToolSpec(GET_CARD_COMMENTS_CONFIG, get_card_comments, render_comments),
    ToolSpec(MOVE_CARD_CONFIG, move_card, render_moved_card),
    ToolSpec(SEARCH_CARDS_CONFIG, search_cards, render_search_results),
    ToolSpec(UPDATE_CARD_NAME_CONFIG, update_card_name, render_renamed_card),
    ToolSpec(UPDATE_CARD_DESCRIPTION_CONFIG, update_card_description, render_updated_description),
    ToolSpec(ARCHIVE_CARD_CONFIG, archive_card, render_archived_card),
    ToolSpec(UNARCHIVE_CARD_CONFIG, unarchive_card, render_unarchived_card),
    ToolSpec(DELETE_CARD_CONFIG, delete_card, render_deleted_card),
    ToolSpec(DUPLICATE_CARD_CONFIG, duplicate_card, render_duplicated_card),
]
