import asyncio

import httpx

from app.core.config import settings
from app.core.exceptions import GitHubAPIError, PullRequestNotFoundError
from app.core.logging import get_logger
from app.domain.notes.schemas import PullRequestDiff, PullRequestPage

logger = get_logger(__name__)

GITHUB_API_BASE = "https://api.github.com"

JSON_MEDIA_TYPE = "application/vnd.github.v3+json"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"

_client = httpx.AsyncClient(timeout=settings.github_timeout)
_request_semaphore = asyncio.Semaphore(settings.github_max_concurrent_requests)


def _get_headers(token: str | None = None, accept: str = JSON_MEDIA_TYPE) -> dict[str, str]:
    """GitHub API 요청 헤더 생성

    Args:
        token: GitHub 토큰
        accept: 응답 미디어 타입, diff 원문이 필요하면 DIFF_MEDIA_TYPE

    Returns:
        HTTP 헤더 딕셔너리
    """
    headers = {"Accept": accept}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _pulls_url(pull_number: int | None = None) -> str:
    url = f"{GITHUB_API_BASE}/repos/{settings.github_owner}/{settings.github_repo}/pulls"
    if pull_number is not None:
        url += f"/{pull_number}"
    return url


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


async def _get(url: str, accept: str = JSON_MEDIA_TYPE, params: dict | None = None) -> httpx.Response:
    """GitHub GET 요청, 실패를 도메인 예외로 변환

    Raises:
        PullRequestNotFoundError: 404 응답
        GitHubAPIError: 그 밖의 HTTP 오류 또는 네트워크 오류
    """
    try:
        response = await _client.get(
            url, headers=_get_headers(settings.github_token, accept), params=params
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        if status_code == 404:
            raise PullRequestNotFoundError(detail=url) from e
        logger.warning("GitHub 응답 오류 url=%s status_code=%d", url, status_code)
        raise GitHubAPIError(detail=f"{status_code} {url}") from e
    except httpx.RequestError as e:
        logger.warning("GitHub 요청 실패 url=%s error=%s", url, type(e).__name__)
        raise GitHubAPIError(detail=f"{type(e).__name__}: {url}") from e

    return response


async def get_pull_diff(pull_number: int) -> str:
    """PR의 unified diff 원문 조회

    Args:
        pull_number: PR 번호

    Returns:
        diff 텍스트, 변경이 없으면 빈 문자열
    """
    response = await _get(_pulls_url(pull_number), accept=DIFF_MEDIA_TYPE)
    return response.text


async def get_pull_request(pull_number: int) -> PullRequestDiff:
    """PR 메타데이터와 diff 조회

    Args:
        pull_number: PR 번호

    Returns:
        PR 제목, URL, diff를 담은 PullRequestDiff

    Raises:
        PullRequestNotFoundError: PR이 없는 경우
        GitHubAPIError: GitHub API 호출 실패 시
    """
    response = await _get(_pulls_url(pull_number))
    data = response.json()

    diff = await get_pull_diff(pull_number)

    logger.info(
        "PR 조회 완료 repo=%s/%s pr=%d diff_length=%d",
        settings.github_owner,
        settings.github_repo,
        pull_number,
        len(diff),
    )
    return PullRequestDiff(
        id=str(pull_number),
        description=data["title"],
        url=data["html_url"],
        diff=diff,
    )


async def get_merged_pulls(page: int = 1, per_page: int | None = None) -> PullRequestPage:
    """Merged PR 목록 한 페이지와 각 PR의 diff 조회

    closed PR 목록에서 merge되지 않은 PR은 제외하므로 한 페이지의
    결과가 per_page보다 적을 수 있다.

    Args:
        page: 1부터 시작하는 페이지 번호
        per_page: 페이지 크기, 최대 100

    Returns:
        PullRequestPage, 다음 페이지가 없으면 next_page는 None
    """
    per_page = min(per_page or settings.pulls_per_page, 100)
    params = {
        "state": "closed",
        "sort": "updated",
        "direction": "desc",
        "page": page,
        "per_page": per_page,
    }

    response = await _get(_pulls_url(), params=params)
    merged = [pr for pr in response.json() if pr.get("merged_at") is not None]

    async def fetch_diff_with_limit(pull_number: int) -> str:
        async with _request_semaphore:
            return await get_pull_diff(pull_number)

    diffs = await asyncio.gather(*(fetch_diff_with_limit(pr["number"]) for pr in merged))

    items = [
        PullRequestDiff(
            id=str(pr["number"]),
            description=pr["title"],
            url=pr["html_url"],
            diff=diff,
        )
        for pr, diff in zip(merged, diffs, strict=True)
    ]

    next_page = page + 1 if "next" in response.links else None

    logger.info(
        "Merged PR 목록 조회 완료 repo=%s/%s page=%d count=%d",
        settings.github_owner,
        settings.github_repo,
        page,
        len(items),
    )
    return PullRequestPage(
        diffs=items,
        next_page=next_page,
        current_page=page,
        per_page=per_page,
    )
