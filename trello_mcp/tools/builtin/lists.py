"""
List Tools - list_lists and create_list.
"""

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.models.domain import ToolCategory
from trello_mcp.models.trello import TrelloList
from trello_mcp.tools.handler import ToolArgs, ToolConfig, ToolSpec, format_json
from trello_mcp.tools.validation import ValidationRule, id_rule


LIST_LISTS_CONFIG = ToolConfig(
    name="list_lists",
    category=ToolCategory.LISTS,
    description="List all lists (columns) of a board.",
    validation=(id_rule("boardId", description="Board ID"),),
)

CREATE_LIST_CONFIG = ToolConfig(
    name="create_list",
    category=ToolCategory.LISTS,
    description="Create a new list on a board.",
    validation=(
        id_rule("boardId", description="Board ID"),
        ValidationRule(
            param="name", required=True, type="string", min_length=1,
            description="List name",
        ),
    ),
)


async def list_lists(client: TrelloClient, args: ToolArgs) -> list[TrelloList]:
    return await client.get_lists(args["boardId"])


def render_lists(lists: list[TrelloList], args: ToolArgs) -> str:
    return format_json(
        [
            {
                "id": item.id,
                "name": item.name,
                "boardId": item.id_board,
                "position": item.pos,
                "closed": item.closed,
            }
            for item in lists
        ]
    )


async def create_list(client: TrelloClient, args: ToolArgs) -> TrelloList:
    return await client.create_list(args["boardId"], args["name"])


def render_created_list(item: TrelloList, args: ToolArgs) -> str:
    return (
        "List created.\n\n"
        f"ID: {item.id}\n"
        f"Name: {item.name}\n"
        f"Board ID: {item.id_board}\n"
        f"Position: {item.pos}"
    )


TOOLS: list[ToolSpec] = [
    ToolSpec(LIST_LISTS_CONFIG, list_lists, render_lists),
    ToolSpec(CREATE_LIST_CONFIG, create_list, render_created_list),
]
