"""MCP transport module - JSON-RPC dispatch over SSE and single-shot HTTP."""

from .schemas import MCPJSONRPCRequest, MCPJSONRPCResponse, MCPErrorCodes, encode_message
from .service import DispatchContext, dispatch_message
from .session import SSESession, SessionManager


__all__ = [
    "MCPJSONRPCRequest",
    "MCPJSONRPCResponse",
    "MCPErrorCodes",
    "encode_message",
    "DispatchContext",
    "dispatch_message",
    "SSESession",
    "SessionManager",
]
