import os
from collections.abc import AsyncIterator

from langchain_core.messages import HumanMessage, SystemMessage
from langfuse.langchain import CallbackHandler

from app.core.config import settings
from app.core.exceptions import LLMError
from app.core.logging import get_logger
from app.domain.notes.prompts import RELEASE_NOTES_SYSTEM
from app.infra.llm.factory import get_notes_client

logger = get_logger(__name__)

if settings.langfuse_public_key:
    os.environ["LANGFUSE_PUBLIC_KEY"] = settings.langfuse_public_key
if settings.langfuse_secret_key:
    os.environ["LANGFUSE_SECRET_KEY"] = settings.langfuse_secret_key
if settings.langfuse_base_url:
    os.environ["LANGFUSE_HOST"] = settings.langfuse_base_url


def get_langfuse_handler() -> CallbackHandler | None:
    """Langfuse 콜백 핸들러 반환"""
    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        return None

    return CallbackHandler()


async def stream_release_notes(
    diff_text: str,
    pr_id: str | None = None,
) -> AsyncIterator[str]:
    """diff를 LLM에 전달하고 생성되는 텍스트 조각을 순서대로 반환

    Args:
        diff_text: 잘린 PR diff
        pr_id: PR 번호, Langfuse 세션 식별용

    Yields:
        LLM이 생성한 텍스트 조각

    Raises:
        LLMError: 클라이언트 초기화 또는 스트리밍 도중 실패한 경우
    """
    try:
        client = get_notes_client()
    except ValueError as e:
        raise LLMError(detail=str(e)) from e

    langfuse_handler = get_langfuse_handler()
    config = {
        "callbacks": [langfuse_handler] if langfuse_handler else [],
        "metadata": {
            "langfuse_session_id": pr_id,
            "langfuse_tags": ["release-notes", "generate"],
        },
    }
    messages = [
        SystemMessage(content=RELEASE_NOTES_SYSTEM),
        HumanMessage(content=diff_text),
    ]

    logger.debug(
        "릴리즈 노트 생성 요청 pr_id=%s model=%s diff_length=%d",
        pr_id,
        client.get_model_name(),
        len(diff_text),
    )

    fragments = 0
    try:
        async for text in client.astream_text(messages, config=config):
            fragments += 1
            yield text
    except Exception as e:
        logger.error("LLM 스트리밍 실패 pr_id=%s error=%s", pr_id, type(e).__name__)
        raise LLMError(detail=f"{type(e).__name__}: {e}") from e

    logger.debug("릴리즈 노트 생성 완료 pr_id=%s fragments=%d", pr_id, fragments)
