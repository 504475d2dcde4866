"""Route tests for the single-shot /mcp endpoint and the SSE endpoints."""

import asyncio
import json

import httpx
import pytest

from trello_gateway.dependencies import get_trello_client
from trello_gateway.gateway.exceptions import RemoteInvocationError
from trello_gateway.mcp_transport.schemas import encode_message
from trello_gateway.mcp_transport.service import DispatchContext
from trello_gateway.mcp_transport.session import SSESession
from trello_gateway.registry import create_registry

from conftest import AUTH_HEADERS, BOARD_ID, FakeTrelloClient


class RecordingSession:
    """Stands in for an open SSE session and records submitted messages."""

    def __init__(self, session_id: str) -> None:
        self.id = session_id
        self.submitted: list = []

    async def submit(self, message) -> None:
        self.submitted.append(message)

    def close(self) -> None:
        pass


def _tools_call(request_id, tool_name="getBoard", arguments=None):
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": tool_name, "arguments": arguments or {"boardId": BOARD_ID}},
    }


class TestSingleShotTransport:
    """POST /mcp."""

    def test_single_request(self, client, fake_trello):
        response = client.post("/mcp", json=_tools_call(1), headers=AUTH_HEADERS)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["id"] == 1
        assert body["result"]["isError"] is False
        assert fake_trello.calls == [("GET", f"/boards/{BOARD_ID}", None)]

    def test_tools_list(self, client):
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": "list", "method": "tools/list"}, headers=AUTH_HEADERS
        )
        assert len(response.json()["result"]["tools"]) == 28

    def test_batch_keeps_order_and_drops_notifications(self, client):
        batch = [
            {"jsonrpc": "2.0", "id": 1, "method": "ping"},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            _tools_call(2),
        ]

        response = client.post("/mcp", json=batch, headers=AUTH_HEADERS)

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [1, 2]

    def test_notification_only_is_accepted(self, client):
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"}, headers=AUTH_HEADERS
        )
        assert response.status_code == 202
        assert response.content == b""

    def test_tool_call_notification_is_executed(self, client, fake_trello):
        message = _tools_call(None)
        del message["id"]

        response = client.post("/mcp", json=message, headers=AUTH_HEADERS)

        assert response.status_code == 202
        assert fake_trello.calls == [("GET", f"/boards/{BOARD_ID}", None)]

    def test_notification_only_batch_is_accepted(self, client):
        response = client.post(
            "/mcp", json=[{"jsonrpc": "2.0", "method": "notifications/initialized"}], headers=AUTH_HEADERS
        )
        assert response.status_code == 202

    def test_parse_error(self, client):
        response = client.post(
            "/mcp",
            content=b"{not json",
            headers={**AUTH_HEADERS, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}

    def test_empty_batch(self, client):
        response = client.post("/mcp", json=[], headers=AUTH_HEADERS)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == -32600

    def test_get_not_allowed(self, client):
        response = client.get("/mcp", headers=AUTH_HEADERS)
        assert response.status_code == 405
        assert response.headers["allow"] == "POST"
        assert response.json()["error"]["code"] == -32000

    def test_delete_not_allowed(self, client):
        response = client.delete("/mcp", headers=AUTH_HEADERS)
        assert response.status_code == 405

    def test_remote_failure_surface(self, client, fake_trello):
        fake_trello.error = RemoteInvocationError(status_code=403)

        response = client.post("/mcp", json=_tools_call(9), headers=AUTH_HEADERS)

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["isError"] is True
        assert result["content"][0]["text"] == "Trello API request failed with status 403"


class TestSSEMessageEndpoint:
    """POST /sse/message."""

    def test_missing_session_id(self, client):
        response = client.post("/sse/message", json={"jsonrpc": "2.0", "id": 1, "method": "ping"}, headers=AUTH_HEADERS)
        assert response.status_code == 400

    def test_unknown_session(self, client):
        response = client.post(
            "/sse/message?sessionId=missing",
            json={"jsonrpc": "2.0", "id": 1, "method": "ping"},
            headers=AUTH_HEADERS,
        )
        assert response.status_code == 404

    def test_message_accepted_and_queued(self, app, client):
        session = RecordingSession("abc123")
        app.state.sessions._sessions[session.id] = session
        message = {"jsonrpc": "2.0", "id": 1, "method": "ping"}

        response = client.post(f"/sse/message?sessionId={session.id}", json=message, headers=AUTH_HEADERS)

        assert response.status_code == 202
        assert response.text == "Accepted"
        assert session.submitted == [message]

    def test_batch_is_queued_in_order(self, app, client):
        session = RecordingSession("batch1")
        app.state.sessions._sessions[session.id] = session
        batch = [
            {"jsonrpc": "2.0", "id": 1, "method": "ping"},
            {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
        ]

        client.post(f"/sse/message?sessionId={session.id}", json=batch, headers=AUTH_HEADERS)

        assert session.submitted == batch

    def test_invalid_json(self, app, client):
        session = RecordingSession("badjson")
        app.state.sessions._sessions[session.id] = session

        response = client.post(
            f"/sse/message?sessionId={session.id}",
            content=b"{oops",
            headers={**AUTH_HEADERS, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert session.submitted == []


def test_transports_produce_identical_bytes(app, client):
    """The same request yields byte-identical envelopes on both transports."""
    remote_payload = {"id": BOARD_ID, "name": "Tâches", "closed": False}
    message = _tools_call(42)

    async def via_session() -> str:
        context = DispatchContext(registry=create_registry(), client=FakeTrelloClient(response=remote_payload))
        session = SSESession(context)
        session.start()
        try:
            await session.submit(message)
            response = await asyncio.wait_for(session.outbound.get(), timeout=5)
        finally:
            session.close()
        return encode_message(response.to_payload())

    sse_data = asyncio.run(via_session())

    app.dependency_overrides[get_trello_client] = lambda: FakeTrelloClient(response=remote_payload)
    http_body = client.post("/mcp", json=message, headers=AUTH_HEADERS).content

    assert http_body == sse_data.encode("utf-8")
    assert json.loads(sse_data)["result"]["isError"] is False


class StreamingRequest:
    """Drives one GET through the ASGI app and hands out body chunks as they arrive."""

    def __init__(self, app, path: str, headers: dict[str, str]) -> None:
        self.app = app
        self.scope = {
            "type": "http",
            "asgi": {"version": "3.0", "spec_version": "2.3"},
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": b"",
            "headers": [(b"host", b"testserver")]
            + [(name.lower().encode(), value.encode()) for name, value in headers.items()],
            "client": ("testclient", 50000),
            "server": ("testserver", 80),
        }
        self.status: int | None = None
        self.headers: dict[str, str] = {}
        self._chunks: asyncio.Queue[str] = asyncio.Queue()
        self._started = asyncio.Event()
        self._disconnected = asyncio.Event()
        self._request_sent = False
        self._task: asyncio.Task | None = None

    async def _receive(self):
        if not self._request_sent:
            self._request_sent = True
            return {"type": "http.request", "body": b"", "more_body": False}
        await self._disconnected.wait()
        return {"type": "http.disconnect"}

    async def _send(self, message) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = {name.decode(): value.decode() for name, value in message["headers"]}
            self._started.set()
        elif message["type"] == "http.response.body" and message.get("body"):
            await self._chunks.put(message["body"].decode())

    async def __aenter__(self) -> "StreamingRequest":
        self._task = asyncio.create_task(self.app(self.scope, self._receive, self._send))
        await asyncio.wait_for(self._started.wait(), timeout=5)
        return self

    async def __aexit__(self, *exc_info) -> None:
        self._disconnected.set()
        await asyncio.wait_for(self._task, timeout=5)

    async def next_event(self, prefix: str) -> str:
        """Return the next chunk starting with ``prefix``, skipping keep-alives."""
        while True:
            chunk = await asyncio.wait_for(self._chunks.get(), timeout=5)
            if chunk.startswith(prefix):
                return chunk


@pytest.mark.asyncio
async def test_sse_round_trip_through_app(app, fake_trello):
    sessions = app.state.sessions
    transport = httpx.ASGITransport(app=app)

    async with StreamingRequest(app, "/sse", AUTH_HEADERS) as stream:
        assert stream.status == 200
        assert stream.headers["content-type"].startswith("text/event-stream")

        endpoint = await stream.next_event("event: endpoint")
        endpoint_url = endpoint.split("data: ", 1)[1].strip()
        assert endpoint_url.startswith("/sse/message?sessionId=")
        session_id = endpoint_url.split("sessionId=", 1)[1]
        assert session_id in sessions

        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
            accepted = await http_client.post(endpoint_url, json=_tools_call(11), headers=AUTH_HEADERS)
        assert accepted.status_code == 202

        event = await stream.next_event("event: message")
        payload = json.loads(event.split("data: ", 1)[1])
        assert payload["id"] == 11
        assert payload["result"]["isError"] is False
        assert fake_trello.calls == [("GET", f"/boards/{BOARD_ID}", None)]

    assert session_id not in sessions
    assert len(sessions) == 0


@pytest.mark.asyncio
async def test_sse_stream_requires_secret(app):
    async with StreamingRequest(app, "/sse", {}) as stream:
        assert stream.status == 401
    assert len(app.state.sessions) == 0
