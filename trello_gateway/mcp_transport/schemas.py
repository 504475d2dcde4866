"""Pydantic schemas for MCP protocol messages."""

import json
from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field


class MCPInitializeParams(BaseModel):
    """Parameters for initialize request."""

    protocolVersion: str = Field(description="MCP protocol version")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    clientInfo: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")


class MCPToolCallParams(BaseModel):
    """Parameters for tools/call."""

    name: str
    arguments: dict[str, Any] | None = None

    model_config = ConfigDict(extra="allow")


class MCPJSONRPCRequest(BaseModel):
    """Generic JSON-RPC 2.0 request or notification."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None


class MCPErrorDetail(BaseModel):
    """Error details in JSON-RPC format."""

    code: int
    message: str
    data: Any | None = None


class MCPJSONRPCResponse(BaseModel):
    """Generic JSON-RPC 2.0 response."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    result: Any | None = None
    error: MCPErrorDetail | None = None

    @classmethod
    def success(cls, id: str | int | None, result: Any) -> "MCPJSONRPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def error_response(
        cls,
        id: str | int | None,
        code: int,
        message: str,
        data: Any | None = None,
    ) -> "MCPJSONRPCResponse":
        return cls(id=id, error=MCPErrorDetail(code=code, message=message, data=data))

    def to_payload(self) -> dict[str, Any]:
        """Return the wire form, carrying exactly one of ``result`` or ``error``."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        return payload


def encode_message(payload: Any) -> str:
    """Serialize a JSON-RPC payload the same way on every transport."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


# Standard JSON-RPC error codes
class MCPErrorCodes:
    """Standard MCP/JSON-RPC error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
