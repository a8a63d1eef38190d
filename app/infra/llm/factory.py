from app.core.config import settings
from app.core.logging import get_logger
from app.infra.llm.base import BaseLLMClient
from app.infra.llm.gemini_client import GeminiClient
from app.infra.llm.openai_client import OpenAIClient
from app.infra.llm.vllm_client import VLLMClient

logger = get_logger(__name__)

PROVIDERS: dict[str, type[BaseLLMClient]] = {
    "openai": OpenAIClient,
    "vllm": VLLMClient,
    "gemini": GeminiClient,
}

_notes_client: BaseLLMClient | None = None


def get_notes_client() -> BaseLLMClient:
    """릴리즈 노트 생성용 LLM 클라이언트 반환

    최초 호출 시 LLM_PROVIDER 설정에 따라 생성하고 이후 재사용한다.
    """
    global _notes_client

    if _notes_client is not None:
        return _notes_client

    provider = settings.llm_provider.lower()
    client_class = PROVIDERS.get(provider)
    if client_class is None:
        raise ValueError(f"지원하지 않는 LLM 프로바이더: {provider}")

    _notes_client = client_class()
    logger.info(
        "LLM 클라이언트 초기화 provider=%s model=%s",
        provider,
        _notes_client.get_model_name(),
    )
    return _notes_client


def reset_clients() -> None:
    """클라이언트 캐시 초기화 - 테스트용"""
    global _notes_client
    _notes_client = None
