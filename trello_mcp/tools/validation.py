"""
Validation Engine - Declarative Parameter Rules

Each tool declares an ordered list of ValidationRule. validate() walks the
rules in declaration order and raises ToolValidationError for the first
violated rule; later rules are not evaluated.

Per rule:
1. Required and the value is missing, None or "" -> reject.
2. Optional and the value is missing or None -> skip the remaining checks.
3. Type, array element type, exact length, minimum length, pattern and
   enum checks, in order.

No coercion is performed: "5" is not a number and 1 is not a boolean.

Pattern: Declarative validation rules as data (no per-tool code)
"""

import re
from typing import Any, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, field_validator

from trello_mcp.core.exceptions import ToolValidationError


ParamType = Literal["string", "number", "boolean", "array"]
ItemType = Literal["string", "number", "boolean"]

ID_LENGTH: int = 24
"""Length of Trello object identifiers."""

ISO_DATETIME_PATTERN: str = r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{3})?Z"
URL_PATTERN: str = r"https?://.+"
POSITION_PATTERN: str = r"top|bottom|\d+(\.\d+)?"


# =============================================================================
# ValidationRule
# =============================================================================


class ValidationRule(BaseModel):
    """
    One declarative constraint on one parameter.

    Attributes:
        param: Parameter name in the argument mapping.
        required: Reject missing, None and "" values.
        type: Expected JSON type (string, number, boolean, array).
        item_type: Expected type of every element of an array.
        exact_length: Exact length of a string or array.
        min_length: Minimum length of a string or array.
        pattern: Regular expression the whole string must match.
        enum: Allowed values.
        description: Human text advertised in the tool schema.

    Example:
        >>> ValidationRule(param="boardId", required=True, exact_length=24)
        >>> ValidationRule(param="position", enum=("top", "bottom"))
    """

    param: str
    required: bool = False
    type: Optional[ParamType] = None
    item_type: Optional[ItemType] = None
    exact_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: Optional[re.Pattern[str]] = None
    enum: Optional[tuple[str, ...]] = None
    description: Optional[str] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("pattern", mode="before")
    @classmethod
    def compile_pattern(cls, v: Any) -> Any:
        """Accept pattern source strings."""
        if isinstance(v, str):
            return re.compile(v)
        return v

    @field_validator("enum", mode="before")
    @classmethod
    def freeze_enum(cls, v: Any) -> Any:
        if isinstance(v, (list, set)):
            return tuple(v)
        return v


# =============================================================================
# Rule Shortcuts
# =============================================================================


def id_rule(param: str, required: bool = True, description: Optional[str] = None) -> ValidationRule:
    """Rule for a 24-character Trello identifier."""
    return ValidationRule(
        param=param,
        required=required,
        type="string",
        exact_length=ID_LENGTH,
        description=description,
    )


def position_rule(param: str = "position", description: Optional[str] = None) -> ValidationRule:
    """Optional card position: "top", "bottom" or a numeric rank as a string."""
    return ValidationRule(
        param=param,
        type="string",
        pattern=POSITION_PATTERN,
        description=description or 'Position: "top", "bottom" or a numeric rank',
    )


# =============================================================================
# validate()
# =============================================================================


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _matches_type(value: Any, expected: str) -> bool:
    if expected == "array":
        return isinstance(value, (list, tuple))
    if expected == "string":
        return isinstance(value, str)
    if expected == "boolean":
        return isinstance(value, bool)
    # bool is an int subclass but never a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check(rule: ValidationRule, value: Any) -> Optional[str]:
    """Return the rejection message for one present value, or None."""
    name = rule.param

    if rule.type is not None and not _matches_type(value, rule.type):
        return f"Parameter '{name}' must be of type {rule.type}."

    if rule.item_type is not None and isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            if not _matches_type(item, rule.item_type):
                return (
                    f"Parameter '{name}' must contain only {rule.item_type} values "
                    f"(item {index} is not)."
                )

    if rule.exact_length is not None or rule.min_length is not None:
        if not hasattr(value, "__len__"):
            return f"Parameter '{name}' must have a length."
        length = len(value)
        if rule.exact_length is not None and length != rule.exact_length:
            return (
                f"Parameter '{name}' must be exactly {rule.exact_length} "
                f"characters long (got {length})."
            )
        if rule.min_length is not None and length < rule.min_length:
            return f"Parameter '{name}' must be at least {rule.min_length} characters long."

    if rule.pattern is not None:
        if not isinstance(value, str) or rule.pattern.fullmatch(value) is None:
            return f"Parameter '{name}' has an invalid format."

    if rule.enum is not None and value not in rule.enum:
        allowed = ", ".join(rule.enum)
        return f"Parameter '{name}' must be one of: {allowed}."

    return None


def validate(rules: Sequence[ValidationRule], args: Mapping[str, Any]) -> None:
    """
    Check arguments against rules, failing on the first violation.

    Args:
        rules: Rules in declaration order
        args: Argument mapping of the tool call

    Raises:
        ToolValidationError: For the first violated rule (carries ``param``)
    """
    for rule in rules:
        value = args.get(rule.param)

        if _is_missing(value):
            if rule.required:
                raise ToolValidationError(
                    f"Parameter '{rule.param}' is required.", param=rule.param
                )
            if value is None:
                continue

        message = _check(rule, value)
        if message is not None:
            raise ToolValidationError(message, param=rule.param)
