"""
Bulk Tools

Apply one card operation to many cards through the client's rate-limited
batch executor. A failing card never stops the others; the result lists
every failure with its card id.
"""

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import BulkResult, ToolCategory
from trello_mcp.tools.builtin.common import DEFAULT_POSITION, bulk_summary, parse_position
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec
from trello_mcp.tools.validation import ValidationRule, id_rule, position_rule


def card_ids_rule() -> ValidationRule:
    return ValidationRule(
        param="cardIds", required=True, type="array", item_type="string", min_length=1,
        description="Card IDs",
    )


BULK_ARCHIVE_CARDS_CONFIG = ToolConfig(
    name="bulk_archive_cards",
    category=ToolCategory.BULK,
    description="Archive many cards at once.",
    validation=(card_ids_rule(),),
)

BULK_MOVE_CARDS_CONFIG = ToolConfig(
    name="bulk_move_cards",
    category=ToolCategory.BULK,
    description='Move many cards to one list (position defaults to "top").',
    validation=(
        card_ids_rule(),
        id_rule("targetListId", description="Target list ID"),
        position_rule(),
    ),
)

BULK_ADD_LABEL_CONFIG = ToolConfig(
    name="bulk_add_label",
    category=ToolCategory.BULK,
    description="Add one label to many cards.",
    validation=(
        card_ids_rule(),
        id_rule("labelId", description="Label ID"),
    ),
)

BULK_ASSIGN_MEMBER_CONFIG = ToolConfig(
    name="bulk_assign_member",
    category=ToolCategory.BULK,
    description="Assign one member to many cards.",
    validation=(
        card_ids_rule(),
        id_rule("memberId", description="Member ID"),
    ),
)


async def bulk_archive_cards(client: TrelloClient, args: ToolArgs) -> BulkResult:
    return await client.execute_bulk(list(args["cardIds"]), client.archive_card)


def render_bulk_archive(result: BulkResult, args: ToolArgs) -> str:
    return (
        bulk_summary("Bulk archive finished.", result)
        + "\n\nArchived cards can be restored with unarchive_card."
    )


async def bulk_move_cards(client: TrelloClient, args: ToolArgs) -> BulkResult:
    list_id = args["targetListId"]
    position = parse_position(args.get("position"))

    async def move(card_id: str) -> None:
        await client.move_card(card_id, list_id, position)

    return await client.execute_bulk(list(args["cardIds"]), move)


def render_bulk_move(result: BulkResult, args: ToolArgs) -> str:
    return bulk_summary(
        "Bulk move finished.",
        result,
        (
            f"Target list ID: {args['targetListId']}",
            f"Position: {args.get('position') or DEFAULT_POSITION}",
        ),
    )


async def bulk_add_label(client: TrelloClient, args: ToolArgs) -> BulkResult:
    label_id = args["labelId"]

    async def add_label(card_id: str) -> None:
        await client.add_label_to_card(card_id, label_id)

    return await client.execute_bulk(list(args["cardIds"]), add_label)


def render_bulk_label(result: BulkResult, args: ToolArgs) -> str:
    return bulk_summary(
        "Bulk label finished.", result, (f"Label ID: {args['labelId']}",)
    )


async def bulk_assign_member(client: TrelloClient, args: ToolArgs) -> BulkResult:
    member_id = args["memberId"]

    async def assign(card_id: str) -> None:
        await client.add_member_to_card(card_id, member_id)

    return await client.execute_bulk(list(args["cardIds"]), assign)


def render_bulk_assign(result: BulkResult, args: ToolArgs) -> str:
    return bulk_summary(
        "Bulk assignment finished.", result, (f"Member ID: {args['memberId']}",)
    )


TOOLS: list[ToolSpec] = [
    ToolSpec(BULK_ARCHIVE_CARDS_CONFIG, bulk_archive_cards, render_bulk_archive),
    ToolSpec(BULK_MOVE_CARDS_CONFIG, bulk_move_cards, render_bulk_move),
    ToolSpec(BULK_ADD_LABEL_CONFIG, bulk_add_label, render_bulk_label),
    ToolSpec(BULK_ASSIGN_MEMBER_CONFIG, bulk_assign_member, render_bulk_assign),
]
