"""
Tool Registry - Name-Keyed Handler Collection

This module implements the registry that maps tool names to handlers,
derives the advertised tool schemas from each handler's validation rules,
and dispatches calls with error containment.

Pattern: Service Registry (microservices pattern applied to tool management)
Pattern: Singleton for global registry access

Dispatch semantics:
- Unknown tool name: ToolNotFoundError is raised (the only thrown fault).
- Known tool: the handler's envelope is returned; any exception escaping
  the handler is wrapped into an error envelope.
- Re-registering a name overwrites the previous handler and logs a warning.
"""

from typing import Any, Optional

import structlog

from trello_mcp.core.exceptions import ToolNotFoundError
from trello_mcp.models.domain import ToolCategory, ToolDefinition, ToolResult
from trello_mcp.observability.logging import get_logger
from trello_mcp.tools.handler import ToolHandler
from trello_mcp.tools.validation import ValidationRule


# =============================================================================
# Schema Derivation
# =============================================================================


def rule_to_property(rule: ValidationRule) -> dict[str, Any]:
    """
    Build the JSON Schema property advertised for one rule.

    Args:
        rule: Validation rule of one parameter

    Returns:
        JSON Schema property dict
    """
    prop: dict[str, Any] = {"type": rule.type or "string"}

    description = rule.description or f"Parameter {rule.param}"
    if rule.exact_length is not None:
        description = f"{description} ({rule.exact_length} characters)"
    prop["description"] = description

    if rule.type == "array":
        prop["items"] = {"type": rule.item_type or "string"}
        if rule.min_length is not None:
            prop["minItems"] = rule.min_length
    elif rule.exact_length is not None:
        prop["minLength"] = rule.exact_length
        prop["maxLength"] = rule.exact_length
    elif rule.min_length is not None:
        prop["minLength"] = rule.min_length

    if rule.pattern is not None:
        prop["pattern"] = f"^(?:{rule.pattern.pattern})$"
    if rule.enum is not None:
        prop["enum"] = list(rule.enum)

    return prop


def build_input_schema(rules: tuple[ValidationRule, ...]) -> dict[str, Any]:
    """JSON Schema object for a tool's arguments."""
    return {
        "type": "object",
        "properties": {rule.param: rule_to_property(rule) for rule in rules},
        "required": [rule.param for rule in rules if rule.required],
    }


# =============================================================================
# ToolRegistry Class
# =============================================================================


class ToolRegistry:
    """
    Registry of tool handlers.

    Created once at start-up and populated by register_trello_tools();
    read-only afterwards except in tests.

    Attributes:
        _handlers: Dictionary mapping tool names to ToolHandler instances.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register("move_card", handler)
        >>> result = await registry.execute("move_card", {"cardId": ..., "targetListId": ...})
    """

    def __init__(self, logger: Optional[structlog.BoundLogger] = None) -> None:
        """Initialize an empty registry."""
        self._handlers: dict[str, ToolHandler] = {}
        self._logger = logger or get_logger(__name__)

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, name: str, handler: ToolHandler) -> None:
        """
        Register a handler under a name.

        If a handler with the same name exists, it is overwritten and a
        warning is logged.

        Args:
            name: The tool name.
            handler: The handler to register.
        """
        if name in self._handlers:
            self._logger.warning("tool_overwritten", tool=name)
        self._handlers[name] = handler
        self._logger.debug("tool_registered", tool=name, category=handler.config.category)

    def clear(self) -> None:
        """Remove every handler (testing utility)."""
        self._handlers.clear()

    # =========================================================================
    # Lookup
    # =========================================================================

    def get(self, name: str) -> ToolHandler:
        """
        Get a handler by name.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        if name not in self._handlers:
            raise ToolNotFoundError(name)
        return self._handlers[name]

    def has(self, name: str) -> bool:
        return name in self._handlers

    def get_tool_names(self) -> list[str]:
        return list(self._handlers)

    def get_tool_count(self) -> int:
        return len(self._handlers)

    def get_tools_by_category(self, category: ToolCategory | str) -> list[ToolHandler]:
        """Handlers whose config belongs to the given category."""
        wanted = ToolCategory(category)
        return [h for h in self._handlers.values() if h.config.category == wanted]

    # =========================================================================
    # Discovery
    # =========================================================================

    def get_tool_definitions(self) -> list[ToolDefinition]:
        """
        Build tool definitions from the live validation rules.

        Computed on every call so that schemas always reflect the
        registered handlers.

        Returns:
            One ToolDefinition per registered tool, in registration order.
        """
        definitions = []
        for name, handler in self._handlers.items():
            config = handler.get_config()
            definitions.append(
                ToolDefinition(
                    name=name,
                    description=config.description,
                    category=config.category,
                    parameters=build_input_schema(config.validation),
                )
            )
        return definitions

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def execute(self, name: str, args: Optional[dict[str, Any]] = None) -> ToolResult:
        """
        Dispatch a tool call.

        Args:
            name: Tool name.
            args: Tool arguments.

        Returns:
            The handler's envelope; unexpected handler exceptions are
            wrapped into an error envelope.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        handler = self.get(name)
        self._logger.info("tool_call", tool=name)
        try:
            return await handler.execute(args or {})
        except Exception as e:
            self._logger.exception("tool_unexpected_error", tool=name)
            return ToolResult.error(f"Error: {e}")
