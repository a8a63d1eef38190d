"""테스트 공통 fixture"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from unittest.mock import MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.api.v1.history import get_history_repository  # noqa: E402
from app.domain.notes.schemas import PullRequestDiff  # noqa: E402
from app.infra.db.history_repository import HistoryRepository  # noqa: E402
from app.main import app  # noqa: E402

SAMPLE_DIFF = (
    "diff --git a/src/client.ts b/src/client.ts\n"
    "--- a/src/client.ts\n"
    "+++ b/src/client.ts\n"
    "@@ -1,2 +1,2 @@\n"
    "-const timeout = 10;\n"
    "+const timeout = 30;\n"
    "@@ -10,1 +10,2 @@\n"
    " export default client;\n"
    "+export { timeout };\n"
)


class FakeCursor:
    """AsyncCursor 대역"""

    def __init__(self, docs: list[dict]):
        self._docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    async def to_list(self, length: int | None = None) -> list[dict]:
        return list(self._docs if length is None else self._docs[:length])


class FakeCollection:
    """히스토리 컬렉션 인메모리 대역"""

    def __init__(self):
        self.docs: list[dict] = []

    def find(self, filter: dict | None = None) -> FakeCursor:
        return FakeCursor([dict(d) for d in self.docs])

    async def insert_one(self, doc: dict):
        doc = dict(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return MagicMock(inserted_id=doc["_id"])

    async def delete_one(self, filter: dict):
        for idx, doc in enumerate(self.docs):
            if doc["_id"] == filter["_id"]:
                del self.docs[idx]
                return MagicMock(deleted_count=1)
        return MagicMock(deleted_count=0)


@pytest.fixture
def async_client():
    """비동기 HTTP 클라이언트"""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def fake_collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def history_repository(fake_collection) -> HistoryRepository:
    return HistoryRepository(fake_collection)


@pytest.fixture
def override_history_repository(history_repository):
    """히스토리 API가 인메모리 컬렉션을 사용하도록 의존성 교체"""
    app.dependency_overrides[get_history_repository] = lambda: history_repository
    yield history_repository
    app.dependency_overrides.pop(get_history_repository, None)


@pytest.fixture
def sample_diff() -> str:
    return SAMPLE_DIFF


@pytest.fixture
def sample_pull_request() -> PullRequestDiff:
    """테스트용 PR"""
    return PullRequestDiff(
        id="42",
        description="Increase default timeout",
        url="https://github.com/openai/openai-node/pull/42",
        diff=SAMPLE_DIFF,
    )


@pytest.fixture
def mock_github_response():
    """GitHub API 응답 mock 생성"""

    def _create(json_data=None, text: str = "", links: dict | None = None):
        mock = MagicMock()
        mock.json.return_value = json_data
        mock.text = text
        mock.links = links or {}
        mock.raise_for_status = MagicMock()
        return mock

    return _create


@pytest.fixture
def create_http_error():
    """HTTPStatusError 생성 helper"""

    def _create(status_code: int, message: str = "Error"):
        return httpx.HTTPStatusError(
            message,
            request=httpx.Request("GET", "https://api.github.com"),
            response=httpx.Response(status_code),
        )

    return _create
