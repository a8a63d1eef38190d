from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage


class BaseLLMClient(ABC):
    """LLM 클라이언트 추상 클래스"""

    @abstractmethod
    def get_chat_model(self) -> BaseChatModel:
        """LangChain 호환 채팅 모델 반환"""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """사용 중인 모델 이름 반환"""
        pass

    async def astream_text(
        self, messages: list[BaseMessage], config: dict | None = None
    ) -> AsyncIterator[str]:
        """채팅 모델 스트리밍 응답에서 텍스트 조각만 추출, 빈 조각은 건너뜀"""
        async for chunk in self.get_chat_model().astream(messages, config=config):
            text = _chunk_text(chunk.content)
            if text:
                yield text


def _chunk_text(content: str | list) -> str:
    """메시지 청크 content를 문자열로 변환

    Gemini 등 일부 모델은 content를 파트 리스트로 반환한다.
    """
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)
