from collections.abc import AsyncIterator
from contextlib import aclosing

from app.core.config import settings
from app.core.exceptions import PullRequestDiffNotFoundError
from app.core.logging import get_logger
from app.domain.notes.diff import count_hunks, truncate_diff
from app.domain.notes.stream import parse_note, reframe
from app.infra.github.client import get_pull_request
from app.infra.llm.client import stream_release_notes

logger = get_logger(__name__)


async def generate_note_events(pr_number: int) -> AsyncIterator[str]:
    """PR diff로 릴리즈 노트를 생성하고 줄 단위 이벤트를 순서대로 반환.

    Args:
        pr_number: PR 번호

    Yields:
        LLM 출력 한 줄, 보통 developer/marketing 노트 JSON과 선택적인 검증 줄

    Raises:
        PullRequestNotFoundError: PR이 없는 경우
        PullRequestDiffNotFoundError: PR에 diff가 없는 경우
        GitHubAPIError: GitHub 호출 실패 시
        LLMError: LLM 호출 실패 시
    """
    pr = await get_pull_request(pr_number)
    if not pr.diff:
        raise PullRequestDiffNotFoundError(detail=f"PR {pr_number} has no diff")

    context = truncate_diff(pr.diff, settings.diff_max_hunks)
    logger.info(
        "diff 준비 완료 pr=%d hunks=%d truncated=%s",
        pr_number,
        count_hunks(pr.diff),
        len(context) < len(pr.diff),
    )

    received: set[str] = set()
    async with (
        aclosing(stream_release_notes(context, pr_id=pr.id)) as fragments,
        aclosing(reframe(fragments)) as events,
    ):
        async for event in events:
            note = parse_note(event)
            if note is not None:
                received.add(note.type)
            yield event

    if received != {"developer", "marketing"}:
        logger.warning("노트 일부 누락 pr=%d received=%s", pr_number, sorted(received))
    else:
        logger.info("노트 생성 완료 pr=%d", pr_number)
