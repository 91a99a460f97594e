"""
Tool Handler - Generic Handler Record

A ToolHandler is data, not a subclass: its ToolConfig (name, category,
description, validation rules), an operation callable that talks to the
shared TrelloClient, and a renderer that turns the operation's return value
into the success text.

execute() never raises for validation or Trello API failures; both become
error envelopes. Any other exception propagates to the registry, which is
the second containment layer.

Pattern: Command object holding a function pointer plus its contract
Anti-Pattern §3.1 Avoided: No bare except clauses
"""

import json
from typing import Any, Awaitable, Callable, NamedTuple, Optional, Sequence

import structlog
from pydantic import BaseModel, Field, model_validator

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.core.exceptions import ToolValidationError, TrelloAPIError
from trello_mcp.models.domain import ToolCategory, ToolResult
from trello_mcp.models.trello import TrelloModel
from trello_mcp.observability.logging import get_logger
from trello_mcp.tools.validation import ValidationRule, validate


ToolArgs = dict[str, Any]
Operation = Callable[[TrelloClient, ToolArgs], Awaitable[Any]]
Renderer = Callable[[Any, ToolArgs], str]


# =============================================================================
# ToolConfig
# =============================================================================


class ToolConfig(BaseModel):
    """
    Immutable description of one tool.

    Attributes:
        name: Unique tool name.
        category: Functional category.
        description: Human-readable description.
        validation: Ordered validation rules (at most one per parameter).
    """

    name: str
    category: ToolCategory
    description: str
    validation: tuple[ValidationRule, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_unique_params(self) -> "ToolConfig":
        seen: set[str] = set()
        for rule in self.validation:
            if rule.param in seen:
                raise ValueError(f"Duplicate validation rule for '{rule.param}' in {self.name}")
            seen.add(rule.param)
        return self


# =============================================================================
# ToolSpec
# =============================================================================


class ToolSpec(NamedTuple):
    """Everything needed to build one handler except the shared client."""

    config: ToolConfig
    operation: Operation
    render: Optional[Renderer] = None


# =============================================================================
# JSON Formatting
# =============================================================================


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, TrelloModel):
        return value.to_json_dict()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def format_json(value: Any) -> str:
    """Pretty-print models or plain data as 2-space indented JSON."""
    return json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False, default=str)


def render_json(result: Any, args: ToolArgs) -> str:
    """Default renderer: the operation's return value as JSON."""
    return format_json(result)


# =============================================================================
# ToolHandler
# =============================================================================


class ToolHandler:
    """
    Executes one tool: validate, call Trello, render.

    Example:
        >>> handler = ToolHandler(
        ...     config=ToolConfig(
        ...         name="close_board",
        ...         category=ToolCategory.BOARDS,
        ...         description="Close a board",
        ...         validation=(id_rule("boardId"),),
        ...     ),
        ...     client=client,
        ...     operation=lambda c, a: c.close_board(a["boardId"]),
        ...     render=lambda board, a: f"Board closed: {board.name}",
        ... )
        >>> result = await handler.execute({"boardId": "b" * 24})
    """

    def __init__(
        self,
        config: ToolConfig,
        client: TrelloClient,
        operation: Operation,
        render: Optional[Renderer] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        self.config = config
        self.client = client
        self._operation = operation
        self._render = render or render_json
        self._logger = logger or get_logger(__name__)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def rules(self) -> Sequence[ValidationRule]:
        return self.config.validation

    def get_config(self) -> ToolConfig:
        return self.config

    async def execute(self, args: Optional[ToolArgs] = None) -> ToolResult:
        """
        Run the tool.

        Args:
            args: Tool arguments (None is treated as empty)

        Returns:
            Success envelope, or an error envelope for validation and
            Trello API failures
        """
        args = dict(args or {})

        try:
            validate(self.config.validation, args)
        except ToolValidationError as e:
            self._logger.info(
                "tool_validation_failed", tool=self.name, param=e.param, error=e.message
            )
            return ToolResult.error(f"Validation error: {e.message}")

        try:
            result = await self._operation(self.client, args)
        except TrelloAPIError as e:
            self._logger.warning(
                "tool_trello_error",
                tool=self.name,
                error_code=e.error_code,
                status=e.status_code,
                error=e.message,
            )
            return ToolResult.error(f"Error: {e.message}")

        self._logger.debug("tool_succeeded", tool=self.name)
        return ToolResult.success(self._render(result, args))
