"""PR API 스키마."""

from pydantic import BaseModel

from app.domain.notes.schemas import PullRequestDiff


class PullRequestResponse(BaseModel):
    """단일 PR 조회 응답."""

    diffs: list[PullRequestDiff]
