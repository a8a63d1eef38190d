"""
LLM 토큰 스트림을 줄 단위 이벤트로 재구성하는 모듈

LLM은 임의의 크기로 잘린 텍스트 조각을 보내므로, 버퍼에 모았다가
개행이 도착한 줄만 SSE 이벤트 하나로 내보낸다.
"""

import json
from collections.abc import AsyncIterable, AsyncIterator

from pydantic import ValidationError

from app.domain.notes.schemas import Note


class NoteStreamReframer:
    """토큰 조각을 받아 완성된 줄을 이벤트로 반환하는 버퍼

    요청 하나당 인스턴스 하나를 사용한다.
    """

    def __init__(self):
        self._buffer = ""

    def feed(self, fragment: str) -> list[str]:
        """조각을 버퍼에 추가하고 완성된 줄 목록 반환"""
        self._buffer += fragment
        *lines, self._buffer = self._buffer.split("\n")
        return [line.strip() for line in lines if line.strip()]

    def flush(self) -> list[str]:
        """스트림 종료 시 버퍼에 남은 마지막 줄 반환"""
        remainder = self._buffer.strip()
        self._buffer = ""
        return [remainder] if remainder else []


async def reframe(fragments: AsyncIterable[str]) -> AsyncIterator[str]:
    """비동기 토큰 스트림을 줄 단위 이벤트 스트림으로 변환

    업스트림 예외는 재시도 없이 그대로 전파된다.
    """
    reframer = NoteStreamReframer()
    async for fragment in fragments:
        for event in reframer.feed(fragment):
            yield event
    for event in reframer.flush():
        yield event


def parse_note(event: str) -> Note | None:
    """이벤트 한 줄을 Note로 파싱, 형식이 맞지 않으면 None"""
    try:
        return Note.model_validate(json.loads(event))
    except (json.JSONDecodeError, ValidationError):
        return None
