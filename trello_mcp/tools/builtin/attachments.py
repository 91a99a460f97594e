"""
Attachment Tools - URL attachments and card covers.
"""

from typing import Any

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import Attachment, Card
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec, format_json
from trello_mcp.tools.validation import URL_PATTERN, ValidationRule, id_rule


ADD_ATTACHMENT_URL_CONFIG = ToolConfig(
    name="add_attachment_url",
    category=ToolCategory.ATTACHMENTS,
    description="Attach a URL to a card.",
    validation=(
        id_rule("cardId", description="Card ID"),
        ValidationRule(
            param="url", required=True, type="string", pattern=URL_PATTERN,
            description="http(s) URL to attach",
        ),
        ValidationRule(param="name", type="string", description="Attachment name"),
        ValidationRule(param="setCover", type="boolean", description="Use as card cover"),
    ),
)

LIST_ATTACHMENTS_CONFIG = ToolConfig(
    name="list_attachments",
    category=ToolCategory.ATTACHMENTS,
    description="List the attachments of a card.",
    validation=(id_rule("cardId", description="Card ID"),),
)

DELETE_ATTACHMENT_CONFIG = ToolConfig(
    name="delete_attachment",
    category=ToolCategory.ATTACHMENTS,
    description="Permanently delete an attachment from a card. IRREVERSIBLE.",
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("attachmentId", description="Attachment ID"),
    ),
)

SET_CARD_COVER_CONFIG = ToolConfig(
    name="set_card_cover",
    category=ToolCategory.ATTACHMENTS,
    description="Use an attachment as the card cover, or remove the cover when omitted.",
    validation=(
        id_rule("cardId", description="Card ID"),
        id_rule("attachmentId", required=False, description="Attachment ID (omit to remove)"),
    ),
)


async def add_attachment_url(client: TrelloClient, args: ToolArgs) -> Attachment:
    return await client.add_attachment_url(
        args["cardId"],
        args["url"],
        name=args.get("name"),
        set_cover=bool(args.get("setCover", False)),
    )


def render_added_attachment(attachment: Attachment, args: ToolArgs) -> str:
    text = (
        "Attachment added.\n\n"
        f"ID: {attachment.id}\n"
        f"Name: {attachment.name or '(none)'}\n"
        f"URL: {attachment.url or args['url']}"
    )
    if args.get("setCover"):
        text += "\nSet as card cover."
    return text


async def list_attachments(client: TrelloClient, args: ToolArgs) -> list[Attachment]:
    return await client.get_attachments(args["cardId"])


def render_attachments(attachments: list[Attachment], args: ToolArgs) -> str:
    if not attachments:
        return "No attachments on this card."
    return format_json(
        [
            {
                "id": a.id,
                "name": a.name,
                "url": a.url,
                "mimeType": a.mime_type,
                "date": a.date.isoformat() if a.date else None,
            }
            for a in attachments
        ]
    )


async def delete_attachment(client: TrelloClient, args: ToolArgs) -> None:
    await client.delete_attachment(args["cardId"], args["attachmentId"])


def render_deleted_attachment(result: Any, args: ToolArgs) -> str:
    return (
        "Attachment permanently deleted.\n\n"
        f"Card ID: {args['cardId']}\n"
        f"Attachment ID: {args['attachmentId']}\n\n"
        "WARNING: this action is IRREVERSIBLE."
    )


async def set_card_cover(client: TrelloClient, args: ToolArgs) -> Card:
    return await client.set_card_cover(args["cardId"], args.get("attachmentId") or None)


def render_card_cover(card: Card, args: ToolArgs) -> str:
    if args.get("attachmentId"):
        return (
            "Card cover set.\n\n"
            f"Card: {card.name}\n"
            f"Attachment ID: {args['attachmentId']}"
        )
    return f"Card cover removed.\n\nCard: {card.name}"


TOOLS: list[ToolSpec] = [
    ToolSpec(ADD_ATTACHMENT_URL_CONFIG, add_attachment_url, render_added_attachment),
    ToolSpec(LIST_ATTACHMENTS_CONFIG, list_attachments, render_attachments),
    ToolSpec(DELETE_ATTACHMENT_CONFIG, delete_attachment, render_deleted_attachment),
    ToolSpec(SET_CARD_COVER_CONFIG, set_card_cover, render_card_cover),
]
