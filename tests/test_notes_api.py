"""릴리즈 노트 SSE 엔드포인트 테스트"""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from app.api.v1.notes import format_sse, format_sse_error
from app.core.exceptions import LLMError, PullRequestDiffNotFoundError
from app.main import app


def _data_frames(body: str) -> list[str]:
    return [frame.removeprefix("data: ") for frame in body.split("\n\n") if frame]


def _fake_events(events: list[str], error: Exception | None = None):
    calls = []

    async def _generate(pr_number: int):
        calls.append(pr_number)
        for event in events:
            yield event
        if error:
            raise error

    return _generate, calls


class TestSseFormatting:
    """SSE 프레임 포맷 테스트"""

    def test_format_sse(self):
        assert format_sse('{"a":1}') == 'data: {"a":1}\n\n'

    def test_format_sse_error(self):
        frame = format_sse_error("PR에 diff가 없습니다")

        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        assert json.loads(frame.removeprefix("data: ")) == {"error": "PR에 diff가 없습니다"}


class TestStreamNotesEndpoint:
    """GET /api/v1/notes/stream 엔드포인트 테스트"""

    @pytest.mark.asyncio
    async def test_streams_events(self, async_client):
        """이벤트 하나당 data 프레임 하나"""
        events = [
            '{"type":"developer","text":"Raised timeout."}',
            '{"type":"marketing","text":"Fewer errors."}',
            '{"ok": true}',
        ]
        generate, calls = _fake_events(events)

        with patch("app.api.v1.notes.generate_note_events", generate):
            response = await async_client.get("/api/v1/notes/stream", params={"prId": "42"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache, no-transform"
        assert _data_frames(response.text) == events
        assert calls == [42]

    @pytest.mark.asyncio
    async def test_not_found_becomes_error_event(self, async_client):
        """diff 없음은 에러 이벤트 하나로 종료"""
        generate, _ = _fake_events([], error=PullRequestDiffNotFoundError(detail="PR 42 has no diff"))

        with patch("app.api.v1.notes.generate_note_events", generate):
            response = await async_client.get("/api/v1/notes/stream?prId=42")

        frames = _data_frames(response.text)
        assert response.status_code == 200
        assert len(frames) == 1
        assert json.loads(frames[0]) == {"error": "PR에 diff가 없습니다"}

    @pytest.mark.asyncio
    async def test_upstream_error_after_events(self, async_client):
        """스트리밍 도중 실패하면 이미 보낸 이벤트 뒤에 에러 이벤트 하나"""
        generate, _ = _fake_events(['{"type":"developer","text":"x"}'], error=LLMError(detail="reset"))

        with patch("app.api.v1.notes.generate_note_events", generate):
            response = await async_client.get("/api/v1/notes/stream?prId=42")

        frames = _data_frames(response.text)
        assert frames[0] == '{"type":"developer","text":"x"}'
        assert json.loads(frames[1]) == {"error": "LLM 호출에 실패했습니다"}
        assert len(frames) == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_error_event(self, async_client):
        """예상하지 못한 예외도 에러 이벤트로 변환"""
        generate, _ = _fake_events([], error=RuntimeError("boom"))

        with patch("app.api.v1.notes.generate_note_events", generate):
            response = await async_client.get("/api/v1/notes/stream?prId=42")

        assert [json.loads(f) for f in _data_frames(response.text)] == [{"error": "boom"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        ["", "?prId=", "?prId=abc", "?prId=-1", "?prId=%C2%B2"],
        ids=["missing", "empty", "text", "negative", "superscript"],
    )
    async def test_invalid_pr_id(self, async_client, query):
        """prId가 없거나 숫자가 아니면 스트림 없이 400"""
        generate, calls = _fake_events([])

        with patch("app.api.v1.notes.generate_note_events", generate):
            response = await async_client.get(f"/api/v1/notes/stream{query}")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_INPUT"
        assert calls == []


class TestClientDisconnect:
    """SSE 도중 클라이언트 연결 종료 테스트"""

    @pytest.mark.asyncio
    async def test_disconnect_closes_llm_stream(self, sample_pull_request):
        """첫 프레임 이후 연결이 끊기면 LLM 스트림이 닫힘"""
        first_frame_sent = asyncio.Event()
        llm_stream_closed = asyncio.Event()
        request_sent = False
        sent_bodies = []

        async def stream(diff_text, pr_id=None):
            try:
                yield '{"type":"developer","text":"Raised timeout."}\n'
                await asyncio.Event().wait()
            finally:
                llm_stream_closed.set()

        async def receive():
            nonlocal request_sent
            if not request_sent:
                request_sent = True
                return {"type": "http.request", "body": b"", "more_body": False}
            await first_frame_sent.wait()
            return {"type": "http.disconnect"}

        async def send(message):
            if message["type"] == "http.response.body" and message.get("body"):
                sent_bodies.append(message["body"])
                first_frame_sent.set()

        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": "/api/v1/notes/stream",
            "raw_path": b"/api/v1/notes/stream",
            "query_string": b"prId=42",
            "root_path": "",
            "headers": [(b"host", b"testserver")],
            "client": ("127.0.0.1", 50000),
            "server": ("testserver", 80),
        }

        with (
            patch(
                "app.domain.notes.service.get_pull_request",
                new_callable=AsyncMock,
                return_value=sample_pull_request,
            ),
            patch("app.domain.notes.service.stream_release_notes", stream),
        ):
            await asyncio.wait_for(app(scope, receive, send), timeout=5)
            await asyncio.wait_for(llm_stream_closed.wait(), timeout=5)

        assert sent_bodies[0] == b'data: {"type":"developer","text":"Raised timeout."}\n\n'
        assert llm_stream_closed.is_set()
