"""Tool definition and result schemas shared by the registry and transports."""

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal

from pydantic import BaseModel, Field

from .validation import StrictModel


class TextContent(BaseModel):
    """Text content block in a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result envelope returned by every tool handler.

    Attributes:
        content: Exactly one text block in practice.
        isError: True when the call reached Trello and failed.
    """

    content: list[TextContent] = Field(default_factory=list)
    isError: bool = False


ToolHandler = Callable[[Any, Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolDefinition:
    """A named tool: its input model and the handler that runs it.

    The handler receives the invocation client and the validated input model
    instance, and never touches the raw arguments.
    """

    name: str
    description: str
    input_model: type[StrictModel]
    handler: ToolHandler

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema()


def json_result(payload: Any) -> ToolResult:
    """Wrap a Trello payload as compact JSON text."""
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return ToolResult(content=[TextContent(text=text)])


def text_result(message: str) -> ToolResult:
    """Wrap a fixed confirmation message."""
    return ToolResult(content=[TextContent(text=message)])


def error_result(message: str) -> ToolResult:
    return ToolResult(content=[TextContent(text=message)], isError=True)
