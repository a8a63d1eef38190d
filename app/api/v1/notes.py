import asyncio
import json
from collections.abc import AsyncIterator

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from app.api.v1.pulls import parse_pr_number
from app.core.exceptions import CustomException
from app.core.logging import get_logger
from app.domain.notes.service import generate_note_events

router = APIRouter(prefix="/notes", tags=["notes"])
logger = get_logger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

UNKNOWN_ERROR_MESSAGE = "알 수 없는 서버 오류가 발생했습니다"


def format_sse(data: str) -> str:
    """SSE data 프레임 생성"""
    return f"data: {data}\n\n"


def format_sse_error(message: str) -> str:
    """스트림을 종료하는 에러 프레임 생성"""
    return format_sse(json.dumps({"error": message}, ensure_ascii=False))


async def _note_event_stream(pr_number: int) -> AsyncIterator[str]:
    """노트 이벤트를 SSE 프레임으로 변환, 첫 예외에서 에러 프레임 하나를 보내고 종료

    클라이언트가 연결을 끊으면 Starlette가 이 제너레이터를 취소하고,
    취소는 LLM 스트림까지 전파되어 업스트림 생성도 중단된다.
    """
    try:
        async for event in generate_note_events(pr_number):
            yield format_sse(event)
    except asyncio.CancelledError:
        logger.info("클라이언트 연결 종료로 노트 생성 중단 pr=%d", pr_number)
        raise
    except CustomException as e:
        logger.warning(
            "노트 생성 실패 pr=%d error_code=%s detail=%s", pr_number, e.error_code, e.detail
        )
        yield format_sse_error(e.message)
    except Exception as e:
        logger.exception("노트 생성 중 예기치 못한 오류 pr=%d error=%s", pr_number, type(e).__name__)
        yield format_sse_error(str(e) or UNKNOWN_ERROR_MESSAGE)


@router.get("/stream")
async def stream_notes(pr_id: str | None = Query(default=None, alias="prId")) -> StreamingResponse:
    pr_number = parse_pr_number(pr_id)
    return StreamingResponse(
        _note_event_stream(pr_number),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
