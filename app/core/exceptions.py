from enum import Enum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    INVALID_INPUT = "INVALID_INPUT"
    MISSING_FIELDS = "MISSING_FIELDS"

    GITHUB_API_ERROR = "GITHUB_API_ERROR"
    LLM_ERROR = "LLM_ERROR"

    NOT_FOUND = "NOT_FOUND"
    PR_NOT_FOUND = "PR_NOT_FOUND"
    PR_DIFF_NOT_FOUND = "PR_DIFF_NOT_FOUND"
    HISTORY_NOT_FOUND = "HISTORY_NOT_FOUND"

    DB_ERROR = "DB_ERROR"


class CustomException(Exception):
    def __init__(
        self,
        status_code: int,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.INVALID_INPUT,
            message="입력값이 올바르지 않습니다",
            detail=detail,
        )


class MissingFieldsError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.MISSING_FIELDS,
            message="필수 항목이 누락되었습니다",
            detail=detail,
        )


class GitHubAPIError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.GITHUB_API_ERROR,
            message="GitHub API 호출에 실패했습니다",
            detail=detail,
        )


class LLMError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.LLM_ERROR,
            message="LLM 호출에 실패했습니다",
            detail=detail,
        )


class NotFoundError(CustomException):
    def __init__(
        self,
        message: str = "요청한 리소스를 찾을 수 없습니다",
        error_code: ErrorCode | str = ErrorCode.NOT_FOUND,
        detail: str | None = None,
    ):
        super().__init__(
            status_code=404,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class PullRequestNotFoundError(NotFoundError):
    def __init__(self, detail: str | None = None):
        super().__init__(
            message="PR을 찾을 수 없습니다",
            error_code=ErrorCode.PR_NOT_FOUND,
            detail=detail,
        )


class PullRequestDiffNotFoundError(NotFoundError):
    def __init__(self, detail: str | None = None):
        super().__init__(
            message="PR에 diff가 없습니다",
            error_code=ErrorCode.PR_DIFF_NOT_FOUND,
            detail=detail,
        )


class HistoryNotFoundError(NotFoundError):
    def __init__(self, detail: str | None = None):
        super().__init__(
            message="히스토리를 찾을 수 없습니다",
            error_code=ErrorCode.HISTORY_NOT_FOUND,
            detail=detail,
        )


class PersistenceError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=500,
            error_code=ErrorCode.DB_ERROR,
            message="데이터베이스 처리에 실패했습니다",
            detail=detail,
        )


def _error_content(error_code: str, message: str, detail: str | None) -> dict:
    content = {"error_code": error_code, "message": message}
    if detail and not settings.is_production:
        content["detail"] = detail
    return content


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """FastAPI 검증 오류를 '위치: 메시지' 목록 문자열로 변환"""
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error.get("loc", ()) if loc not in ("query", "path", "body"))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def register_exception_handlers(app):
    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_content(exc.error_code, exc.message, exc.detail),
        )

    # 쿼리/경로/바디 검증 실패도 INVALID_INPUT 400으로 통일
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=_error_content(
                ErrorCode.INVALID_INPUT,
                "입력값이 올바르지 않습니다",
                _describe_validation_errors(exc),
            ),
        )
