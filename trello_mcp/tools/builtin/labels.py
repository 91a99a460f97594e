"""
Label Tools - board labels and their assignment to cards.
"""

from typing import Any

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import Label
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec, format_json
from trello_mcp.tools.validation import ValidationRule, id_rule


LIST_LABELS_CONFIG = ToolConfig(
    name="list_labels",
    category=ToolCategory.LABELS,
    description="List the labels defined on a board.",
    validation=(id_rule("boardId", description="Board ID"),),
)

CREATE_LABEL_CONFIG = ToolConfig(
    name="create_label",
    category=ToolCategory.LABELS,
    description="Create a label on a board.",
    validation=(
        id_rule("boardId", description="Board ID"),
        ValidationRule(param="name", required=True, type="string", description="Label name"),
        ValidationRule(
            param="color", required=True, type="string",
            description="Label color (green, yellow, orange, red, purple, blue, sky, lime, pink, black)",
        ),
    ),
)

UPDATE_LABEL_CONFIG = ToolConfig(
    name="update_label",
    category=ToolCategory.LABELS,
    description="Rename or recolor a label.",
    validation=(
        id_rule("labelId", description="Label ID"),
        ValidationRule(param="name", type="string", description="New label name"),
        ValidationRule(param="color", type="string", description="New label color"),
    ),
)

ADD_LABEL_TO_CARD_CONFIG = ToolConfig(
    name="add_label_to_card",
    category=ToolCategory.LABELS,
    description="Attach an existing board label to a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("labelId", description="Label ID"),
    ),
)

REMOVE_LABEL_FROM_CARD_CONFIG = ToolConfig(
    name="remove_label_from_card",
    category=ToolCategory.LABELS,
    description="Detach a label from a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("labelId", description="Label ID"),
    ),
)


async def list_labels(client: TrelloClient, args: ToolArgs) -> list[Label]:
    return await client.get_labels(args["boardId"])


def render_labels(labels: list[Label], args: ToolArgs) -> str:
    if not labels:
        return "No labels found on this board."
    return format_json(
        [{"id": label.id, "name": label.name, "color": label.color} for label in labels]
    )


async def create_label(client: TrelloClient, args: ToolArgs) -> Label:
    return await client.create_label(args["boardId"], args["name"], args["color"])


def render_created_label(label: Label, args: ToolArgs) -> str:
    return (
        "Label created.\n\n"
        f"ID: {label.id}\n"
        f"Name: {label.name}\n"
        f"Color: {label.color}"
    )


async def update_label(client: TrelloClient, args: ToolArgs) -> Label:
    return await client.update_label(args["labelId"], args.get("name"), args.get("color"))


def render_updated_label(label: Label, args: ToolArgs) -> str:
    return (
        "Label updated.\n\n"
        f"ID: {label.id}\n"
        f"Name: {label.name}\n"
        f"Color: {label.color}"
    )


async def add_label_to_card(client: TrelloClient, args: ToolArgs) -> None:
    await client.add_label_to_card(args["cardId"], args["labelId"])


def render_label_added(result: Any, args: ToolArgs) -> str:
    return f"Label added to card.\n\nCard ID: {args['cardId']}\nLabel ID: {args['labelId']}"


async def remove_label_from_card(client: TrelloClient, args: ToolArgs) -> None:
    await client.remove_label_from_card(args["cardId"], args["labelId"])


def render_label_removed(result: Any, args: ToolArgs) -> str:
    return f"Label removed from card.\n\nCard ID: {args['cardId']}\nLabel ID: {args['labelId']}"


TOOLS: list[ToolSpec] = [
    ToolSpec(LIST_LABELS_CONFIG, list_labels, render_labels),
    ToolSpec(CREATE_LABEL_CONFIG, create_label, render_created_label),
    ToolSpec(UPDATE_LABEL_CONFIG, update_label, render_updated_label),
    ToolSpec(ADD_LABEL_TO_CARD_CONFIG, add_label_to_card, render_label_added),
    ToolSpec(REMOVE_LABEL_FROM_CARD_CONFIG, remove_label_from_card, render_label_removed),
]
