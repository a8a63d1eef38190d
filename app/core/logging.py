"""
structlog 기반 로깅 설정

- LOG_FORMAT=console: 컬러 콘솔 출력, json: 한 줄 JSON 출력
  (미설정 시 프로덕션은 json, 그 외는 console)
- 컨텍스트 자동 주입: request_id, pr_id
- 프로덕션에서는 GitHub/OpenAI 토큰과 MongoDB 비밀번호를 마스킹
"""

import logging
import re
import sys

import structlog

from app.core.config import settings
from app.core.context import get_pr_id, get_request_id

SENSITIVE_PATTERNS = [
    (re.compile(r"(Bearer\s+)[^\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"\b(ghp|gho|ghs|github_pat)_[A-Za-z0-9_]+"), r"\1_***"),
    (re.compile(r"\bsk-[A-Za-z0-9_-]{8,}"), "sk-***"),
    (re.compile(r"(mongodb(?:\+srv)?://[^:/\s]+:)[^@\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(api[_-]?key=)[^&\s]+", re.IGNORECASE), r"\1***"),
]

NOISY_LOGGERS = (
    "httpcore",
    "httpx",
    "openai",
    "langchain",
    "langfuse",
    "google_genai",
    "pymongo",
    "anyio",
)


def _mask_sensitive_data(value: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def add_context_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """request_id와 pr_id를 로그에 자동 주입"""
    request_id = get_request_id()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    pr_id = get_pr_id()
    if pr_id:
        event_dict.setdefault("pr_id", pr_id)

    return event_dict


def mask_sensitive_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """프로덕션에서 문자열 값의 민감 정보 마스킹"""
    if not settings.is_production:
        return event_dict

    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _mask_sensitive_data(value)

    return event_dict


def _use_json_renderer() -> bool:
    log_format = settings.log_format.lower()
    if log_format:
        return log_format == "json"
    return settings.is_production


def setup_logging(level: str | None = None) -> None:
    """structlog와 표준 logging을 같은 포맷으로 설정"""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    json_output = _use_json_renderer()

    shared_processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_processor,
        mask_sensitive_processor,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # uvicorn 로그도 root 핸들러로 출력
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).handlers.clear()

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
