"""Exceptions raised while resolving and validating tool calls."""

from typing import Any

from trello_gateway.auth.exceptions import MCPGatewayError


class ToolNotFoundError(MCPGatewayError):
    """Raised when a call names a tool that is not registered.

    Attributes:
        tool_name: Name of the tool that was not found.
    """

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Unknown tool: {tool_name}",
            code="TOOL_NOT_FOUND"
        )
        self.tool_name = tool_name


class ToolValidationError(MCPGatewayError):
    """Raised when tool arguments violate the tool's input schema.

    Attributes:
        tool_name: Name of the tool being called.
        errors: Every violated constraint, as ``{"loc", "message"}`` mappings.
    """

    def __init__(self, tool_name: str, errors: list[dict[str, Any]]):
        details = "; ".join(f"{err['loc']}: {err['message']}" for err in errors)
        super().__init__(
            message=f"Invalid arguments for tool {tool_name}: {details}",
            code="INVALID_ARGUMENTS"
        )
        self.tool_name = tool_name
        self.errors = errors
