"""
Shared helpers for the built-in Trello tools: positions, dates and the
compact projections used in JSON listings.
"""

from datetime import datetime
from typing import Any, Optional

from trello_mcp.clients.trello import Position
from trello_mcp.models.domain import BulkResult
from trello_mcp.models.trello import Card, Label

DEFAULT_POSITION: str = "top"


def parse_position(value: Optional[str], default: str = DEFAULT_POSITION) -> Position:
    """Map "top"/"bottom" through and numeric rank strings to floats."""
    if value is None or value == "":
        return default
    if value in ("top", "bottom"):
        return value
    return float(value)


def format_due(due: Optional[datetime]) -> str:
    if due is None:
        return "none"
    return due.strftime("%Y-%m-%d %H:%M UTC")


def label_names(labels: list[Label]) -> str:
    return ", ".join(label.name or label.color or label.id for label in labels)


def card_summary(card: Card) -> dict[str, Any]:
    """Compact card projection for listings."""
    summary: dict[str, Any] = {
        "id": card.id,
        "name": card.name,
        "description": card.desc,
        "listId": card.id_list,
        "url": card.url or card.short_url,
        "closed": card.closed,
    }
    if card.due is not None:
        summary["due"] = card.due.isoformat()
        summary["dueComplete"] = card.due_complete
    if card.labels:
        summary["labels"] = [label.name or label.color for label in card.labels]
    return summary


def bulk_summary(title: str, result: BulkResult, extra_lines: tuple[str, ...] = ()) -> str:
    """Text report of a bulk operation including every failed item."""
    lines = [title, "", f"Total: {result.total}"]
    lines.extend(extra_lines)
    lines.append(f"Succeeded: {result.success}")
    lines.append(f"Failed: {result.failed}")
    if result.errors:
        lines.append("")
        lines.append("Errors:")
        lines.extend(f"- {e.item_id}: {e.error}" for e in result.errors)
    return "\n".join(lines)
