"""
Checklist Tools

Checklists, their items, and completion progress. Progress percentages
are rounded half up; an empty checklist counts as 0% and never completes.
"""

from typing import Any

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import CheckItem, Checklist, ChecklistProgress
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec
from trello_mcp.tools.validation import ValidationRule, id_rule


ADD_CHECKLIST_TO_CARD_CONFIG = ToolConfig(
    name="add_checklist_to_card",
    category=ToolCategory.CHECKLISTS,
    description="Add a checklist to a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        ValidationRule(
            param="name", required=True, type="string", min_length=1,
            description="Checklist name",
        ),
        ValidationRule(param="pos", type="string", enum=("top", "bottom"), description="Position"),
    ),
)

ADD_CHECKLIST_ITEM_CONFIG = ToolConfig(
    name="add_checklist_item",
    category=ToolCategory.CHECKLISTS,
    description="Add an item to a checklist.",
    validation=(
        id_rule("checklistId", description="Checklist ID"),
        ValidationRule(
            param="name", required=True, type="string", min_length=1,
            description="Item text",
        ),
        ValidationRule(param="pos", type="string", enum=("top", "bottom"), description="Position"),
        ValidationRule(param="checked", type="boolean", description="Create the item already checked"),
    ),
)

CHECK_CHECKLIST_ITEM_CONFIG = ToolConfig(
    name="check_checklist_item",
    category=ToolCategory.CHECKLISTS,
    description="Mark a checklist item complete or incomplete.",
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("checkItemId", description="Checklist item ID"),
        ValidationRule(
            param="state", required=True, type="string", enum=("complete", "incomplete"),
            description="New item state",
        ),
    ),
)

GET_CHECKLIST_PROGRESS_CONFIG = ToolConfig(
    name="get_checklist_progress",
    category=ToolCategory.CHECKLISTS,
    description="Report completion of every checklist on a card and overall.",
    validation=(id_rule("cardId", description="Card ID"),),
)

DELETE_CHECKLIST_CONFIG = ToolConfig(
    name="delete_checklist",
    category=ToolCategory.CHECKLISTS,
    description="Permanently delete a checklist and its items. IRREVERSIBLE.",
    validation=(id_rule("checklistId", description="Checklist ID"),),
)


async def add_checklist_to_card(client: TrelloClient, args: ToolArgs) -> Checklist:
    return await client.add_checklist(args["cardId"], args["name"], args.get("pos"))


def render_added_checklist(checklist: Checklist, args: ToolArgs) -> str:
    return (
        "Checklist added.\n\n"
        f"ID: {checklist.id}\n"
        f"Name: {checklist.name}\n"
        f"Card ID: {args['cardId']}"
    )


async def add_checklist_item(client: TrelloClient, args: ToolArgs) -> CheckItem:
    return await client.add_checklist_item(
        args["checklistId"],
        args["name"],
        pos=args.get("pos"),
        checked=bool(args.get("checked", False)),
    )


def render_added_item(item: CheckItem, args: ToolArgs) -> str:
    return (
        "Checklist item added.\n\n"
        f"ID: {item.id}\n"
        f"Name: {item.name}\n"
        f"State: {item.state}\n"
        f"Checklist ID: {args['checklistId']}"
    )


async def check_checklist_item(client: TrelloClient, args: ToolArgs) -> CheckItem:
    return await client.update_checklist_item(
        args["cardId"], args["checkItemId"], args["state"]
    )


def render_checked_item(item: CheckItem, args: ToolArgs) -> str:
    return (
        f"Checklist item marked {item.state}.\n\n"
        f"ID: {item.id}\n"
        f"Name: {item.name}"
    )


async def get_checklist_progress(client: TrelloClient, args: ToolArgs) -> ChecklistProgress:
    return await client.get_checklist_progress(args["cardId"])


def render_progress(progress: ChecklistProgress, args: ToolArgs) -> str:
    if not progress.checklists:
        return "No checklists on this card."
    overall = progress.overall
    lines = [
        f"Checklist progress: {overall.checked}/{overall.total} ({overall.percentage}%)",
        "",
    ]
    for item in progress.checklists:
        marker = " [done]" if item.complete else ""
        lines.append(
            f"- {item.name}: {item.checked}/{item.total} ({item.percentage}%){marker}"
        )
    return "\n".join(lines)


async def delete_checklist(client: TrelloClient, args: ToolArgs) -> None:
    await client.delete_checklist(args["checklistId"])


def render_deleted_checklist(result: Any, args: ToolArgs) -> str:
    return (
        "Checklist permanently deleted.\n\n"
        f"ID: {args['checklistId']}\n\n"
        "WARNING: this action is IRREVERSIBLE. The checklist and its items "
        "cannot be recovered."
    )


TOOLS: list[ToolSpec] = [
    ToolSpec(ADD_CHECKLIST_TO_CARD_CONFIG, add_checklist_to_card, render_added_checklist),
    ToolSpec(ADD_CHECKLIST_ITEM_CONFIG, add_checklist_item, render_added_item),
    ToolSpec(CHECK_CHECKLIST_ITEM_CONFIG, check_checklist_item, render_checked_item),
    ToolSpec(GET_CHECKLIST_PROGRESS_CONFIG, get_checklist_progress, render_progress),
    ToolSpec(DELETE_CHECKLIST_CONFIG, delete_checklist, render_deleted_checklist),
]
