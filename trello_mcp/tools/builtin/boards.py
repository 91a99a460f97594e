"""
Board Tools

list_boards, create_board, close_board, reopen_board and delete_board.
Closing and reopening are idempotent state setters; deletion is
irreversible and says so in its result.
"""

from typing import Any

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import Board
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec, format_json
from trello_mcp.tools.validation import ValidationRule, id_rule


# =============================================================================
# Tool Configs
# =============================================================================

LIST_BOARDS_CONFIG = ToolConfig(
    name="list_boards",
    category=ToolCategory.BOARDS,
    description="List all Trello boards of the authenticated member.",
)

CREATE_BOARD_CONFIG = ToolConfig(
    name="create_board",
    category=ToolCategory.BOARDS,
    description="Create a new Trello board (without default lists).",
    validation=(
        ValidationRule(
            param="name", required=True, type="string", min_length=1,
            description="Board name",
        ),
        ValidationRule(param="desc", type="string", description="Board description"),
    ),
)

CLOSE_BOARD_CONFIG = ToolConfig(
    name="close_board",
    category=ToolCategory.BOARDS,
    description="Close (archive) a board. It can be reopened with reopen_board.",
    validation=(id_rule("boardId", description="Board ID"),),
)

REOPEN_BOARD_CONFIG = ToolConfig(
    name="reopen_board",
    category=ToolCategory.BOARDS,
    description="Reopen a closed board.",
    validation=(id_rule("boardId", description="Board ID"),),
)

DELETE_BOARD_CONFIG = ToolConfig(
    name="delete_board",
    category=ToolCategory.BOARDS,
    description=(
        "Permanently delete a board. IRREVERSIBLE: prefer close_board "
        "to archive it instead."
    ),
    validation=(id_rule("boardId", description="Board ID"),),
)


# =============================================================================
# Operations and Renderers
# =============================================================================


async def list_boards(client: TrelloClient, args: ToolArgs) -> list[Board]:
    return await client.get_boards()


def render_boards(boards: list[Board], args: ToolArgs) -> str:
    return format_json(
        [
            {
                "id": board.id,
                "name": board.name,
                "url": board.url,
                "description": board.desc,
                "closed": board.closed,
            }
            for board in boards
        ]
    )


async def create_board(client: TrelloClient, args: ToolArgs) -> Board:
    return await client.create_board(args["name"], args.get("desc"))


def render_created_board(board: Board, args: ToolArgs) -> str:
    return (
        "Board created.\n\n"
        f"ID: {board.id}\n"
        f"Name: {board.name}\n"
        f"URL: {board.url}\n"
        f"Description: {board.desc or '(none)'}"
    )


async def close_board(client: TrelloClient, args: ToolArgs) -> Board:
    return await client.close_board(args["boardId"])


def render_closed_board(board: Board, args: ToolArgs) -> str:
    status = "closed (archived)" if board.closed else "open"
    return (
        "Board closed.\n\n"
        f"ID: {board.id}\n"
        f"Name: {board.name}\n"
        f"Status: {status}\n\n"
        "Note: the board can be restored with reopen_board."
    )


async def reopen_board(client: TrelloClient, args: ToolArgs) -> Board:
    return await client.reopen_board(args["boardId"])


def render_reopened_board(board: Board, args: ToolArgs) -> str:
    status = "closed" if board.closed else "open (active)"
    return (
        "Board reopened.\n\n"
        f"ID: {board.id}\n"
        f"Name: {board.name}\n"
        f"Status: {status}\n"
        f"URL: {board.url}"
    )


async def delete_board(client: TrelloClient, args: ToolArgs) -> None:
    await client.delete_board(args["boardId"])


def render_deleted_board(result: Any, args: ToolArgs) -> str:
    return (
        "Board permanently deleted.\n\n"
        f"ID: {args['boardId']}\n\n"
        "WARNING: this action is IRREVERSIBLE. The board cannot be recovered.\n"
        "Use close_board to archive boards instead of deleting them."
    )


TOOLS: list[ToolSpec] = [
    ToolSpec(LIST_BOARDS_CONFIG, list_boards, render_boards),
    ToolSpec(CREATE_BOARD_CONFIG, create_board, render_created_board),
    ToolSpec(CLOSE_BOARD_CONFIG, close_board, render_closed_board),
    ToolSpec(REOPEN_BOARD_CONFIG, reopen_board, render_reopened_board),
    ToolSpec(DELETE_BOARD_CONFIG, delete_board, render_deleted_board),
]
