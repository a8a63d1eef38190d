from app.api.v1.schemas.history import (
    HistoryCreateRequest,
    HistoryCreateResponse,
    HistoryDeleteResponse,
)
from app.api.v1.schemas.pulls import PullRequestResponse

__all__ = [
    "HistoryCreateRequest",
    "HistoryCreateResponse",
    "HistoryDeleteResponse",
    "PullRequestResponse",
]
