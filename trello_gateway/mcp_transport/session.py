"""Long-lived sessions backing the SSE transport."""

import asyncio
import uuid
from typing import Any

import structlog

from .schemas import MCPJSONRPCResponse
from .service import DispatchContext, dispatch_message


logger = structlog.get_logger("mcp.sse")


class SSESession:
    """One SSE connection and its dispatch loop.

    Inbound messages are taken from the queue in arrival order and each is
    handled in its own task, so a slow Trello call does not hold up the
    messages behind it. Responses are pushed to ``outbound`` as they finish.
    """

    def __init__(self, context: DispatchContext, session_id: str | None = None) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.context = context
        self.inbound: asyncio.Queue[Any] = asyncio.Queue()
        self.outbound: asyncio.Queue[MCPJSONRPCResponse] = asyncio.Queue()
        self._tasks: set[asyncio.Task] = set()
        self._reader: asyncio.Task | None = None

    @property
    def closed(self) -> bool:
        return self._reader is not None and self._reader.done()

    def start(self) -> None:
        if self._reader is None:
            self._reader = asyncio.create_task(self._read_loop())

    async def submit(self, message: Any) -> None:
        """Queue a decoded JSON-RPC message for this session."""
        await self.inbound.put(message)

    async def _read_loop(self) -> None:
        while True:
            message = await self.inbound.get()
            task = asyncio.create_task(self._handle(message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _handle(self, message: Any) -> None:
        response = await dispatch_message(message, self.context)
        if response is not None:
            await self.outbound.put(response)

    def close(self) -> None:
        """Cancel the dispatch loop and any in-flight calls."""
        if self._reader is not None:
            self._reader.cancel()
        for task in list(self._tasks):
            task.cancel()


class SessionManager:
    """Table of open SSE sessions keyed by session ID."""

    def __init__(self) -> None:
        self._sessions: dict[str, SSESession] = {}

    def create(self, context: DispatchContext) -> SSESession:
        session = SSESession(context)
        session.start()
        self._sessions[session.id] = session
        logger.info("sse_session_opened", session_id=session.id)
        return session

    def get(self, session_id: str) -> SSESession | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        session.close()
        logger.info("sse_session_closed", session_id=session_id)

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
