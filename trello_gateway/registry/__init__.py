"""Registry module - Trello tool catalog, validation and dispatch."""

from .exceptions import ToolNotFoundError, ToolValidationError
from .schemas import ToolDefinition, ToolResult, TextContent, json_result, text_result, error_result
from .service import ToolRegistry
from .tools import TOOLS, create_registry
from .validation import StrictModel, validate_arguments


__all__ = [
    # Exceptions
    "ToolNotFoundError",
    "ToolValidationError",
    # Schemas
    "ToolDefinition",
    "ToolResult",
    "TextContent",
    "json_result",
    "text_result",
    "error_result",
    # Registry
    "ToolRegistry",
    "TOOLS",
    "create_registry",
    # Validation
    "StrictModel",
    "validate_arguments",
]
