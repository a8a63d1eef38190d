from fastapi import APIRouter, Query

from app.api.v1.schemas import PullRequestResponse
from app.core.exceptions import ValidationError
from app.domain.notes.schemas import PullRequestPage
from app.infra.github.client import get_merged_pulls, get_pull_request

router = APIRouter(prefix="/pulls", tags=["pulls"])


def parse_pr_number(pr_id: str | None) -> int:
    """PR 번호 문자열 검증 후 정수로 변환"""
    if not pr_id:
        raise ValidationError(detail="Missing prId")
    if not (pr_id.isascii() and pr_id.isdigit()):
        raise ValidationError(detail=f"Invalid PR ID: {pr_id}")
    return int(pr_id)


@router.get("", response_model=PullRequestPage)
async def list_merged_pulls(
    page: int = Query(default=1, ge=1),
    per_page: int | None = Query(default=None, ge=1, le=100),
) -> PullRequestPage:
    return await get_merged_pulls(page=page, per_page=per_page)


@router.get("/{pr_id}", response_model=PullRequestResponse)
async def get_pull(pr_id: str) -> PullRequestResponse:
    pr = await get_pull_request(parse_pr_number(pr_id))
    return PullRequestResponse(diffs=[pr])
