"""
MongoDB 연결 관리 모듈

프로세스당 AsyncMongoClient 하나를 최초 사용 시점에 생성하고 이후 재사용한다.
종료는 앱 lifespan에서 close()로 처리한다.
"""

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class MongoConnection:
    """지연 초기화되는 프로세스 단위 MongoDB 연결"""

    def __init__(self, uri: str | None = None):
        self._uri = uri
        self._client: AsyncMongoClient | None = None

    @property
    def client(self) -> AsyncMongoClient:
        if self._client is None:
            uri = self._uri or settings.mongodb_uri
            if not uri:
                raise ValueError("MONGODB_URI가 설정되지 않았습니다")
            self._client = AsyncMongoClient(uri)
            logger.info("MongoDB 클라이언트 초기화")
        return self._client

    def get_collection(self, name: str) -> AsyncCollection:
        """URI의 기본 데이터베이스, 없으면 MONGODB_DATABASE의 컬렉션 반환"""
        db = self.client.get_default_database(default=settings.mongodb_database)
        return db[name]

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("MongoDB 클라이언트 종료")


mongo = MongoConnection()
