from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class PullRequestDiff(BaseModel):
    """PR 메타데이터와 diff 원문"""

    id: str
    description: str
    url: str
    diff: str


class PullRequestPage(BaseModel):
    """Merged PR 목록 한 페이지"""

    diffs: list[PullRequestDiff]
    next_page: int | None = Field(default=None, alias="nextPage")
    current_page: int = Field(alias="currentPage")
    per_page: int = Field(alias="perPage")

    class Config:
        populate_by_name = True


class Note(BaseModel):
    """LLM이 생성한 릴리즈 노트 한 줄"""

    type: Literal["developer", "marketing"]
    text: str


class HistoryRecord(BaseModel):
    """저장된 릴리즈 노트 히스토리"""

    id: str = Field(alias="_id")
    pr_id: str = Field(alias="prId")
    pr_description: str = Field(alias="prDescription")
    dev_note: str = Field(alias="devNote")
    mkt_note: str = Field(alias="mktNote")
    created_at: datetime = Field(alias="createdAt")

    class Config:
        populate_by_name = True
