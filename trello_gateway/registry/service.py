"""Tool registry: ordered tool definitions and validated dispatch."""

from typing import Any, Iterable, Iterator

from .exceptions import ToolNotFoundError
from .schemas import ToolDefinition, ToolResult
from .validation import validate_arguments


class ToolRegistry:
    """Ordered collection of tool definitions keyed by unique name."""

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        """Add a tool to the registry.

        Args:
            tool: Definition to add.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            raise ValueError(f"duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def describe(self) -> list[dict[str, Any]]:
        """Return the catalog in MCP ``tools/list`` shape, in registration order."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_schema(),
            }
            for tool in self
        ]

    async def call(self, name: str, arguments: Any, client: Any) -> ToolResult:
        """Validate arguments and run the named tool.

        Validation happens before the handler runs, so a rejected call never
        reaches ``client``.

        Args:
            name: Tool name.
            arguments: Raw argument mapping from the caller.
            client: Invocation client handed to the handler.

        Returns:
            The handler's result envelope.

        Raises:
            ToolNotFoundError: If the tool is not registered.
            ToolValidationError: If the arguments are invalid.
            RemoteServiceError: If the Trello call fails.
        """
        tool = self.get(name)
        validated = validate_arguments(tool.name, tool.input_model, arguments)
        return await tool.handler(client, validated)
