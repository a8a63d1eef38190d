from datetime import datetime, timezone

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from app.core.exceptions import PersistenceError
from app.core.logging import get_logger
from app.domain.notes.schemas import HistoryRecord

logger = get_logger(__name__)


class HistoryRepository:
    """릴리즈 노트 히스토리 컬렉션 접근 객체"""

    def __init__(self, collection: AsyncCollection):
        self._collection = collection

    async def list_records(self) -> list[HistoryRecord]:
        """생성 시각 내림차순으로 전체 히스토리 조회"""
        try:
            cursor = self._collection.find().sort("createdAt", -1)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise PersistenceError(detail=f"히스토리 조회 실패: {type(e).__name__}") from e

        return [_to_record(doc) for doc in docs]

    async def insert_record(
        self,
        pr_id: str,
        pr_description: str,
        dev_note: str,
        mkt_note: str,
    ) -> str:
        """히스토리 저장 후 생성된 id 반환"""
        doc = {
            "prId": pr_id,
            "prDescription": pr_description,
            "devNote": dev_note,
            "mktNote": mkt_note,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = await self._collection.insert_one(doc)
        except PyMongoError as e:
            raise PersistenceError(detail=f"히스토리 저장 실패: {type(e).__name__}") from e

        inserted_id = str(result.inserted_id)
        logger.info("히스토리 저장 완료 id=%s pr_id=%s", inserted_id, pr_id)
        return inserted_id

    async def delete_record(self, record_id: str) -> bool:
        """id로 히스토리 삭제, 삭제된 문서가 없으면 False

        ObjectId 형식이 아닌 id는 존재하지 않는 것으로 취급한다.
        """
        if not ObjectId.is_valid(record_id):
            return False

        try:
            result = await self._collection.delete_one({"_id": ObjectId(record_id)})
        except PyMongoError as e:
            raise PersistenceError(detail=f"히스토리 삭제 실패: {type(e).__name__}") from e

        deleted = result.deleted_count == 1
        logger.info("히스토리 삭제 id=%s deleted=%s", record_id, deleted)
        return deleted


def _to_record(doc: dict) -> HistoryRecord:
    return HistoryRecord(
        id=str(doc["_id"]),
        pr_id=str(doc["prId"]),
        pr_description=doc["prDescription"],
        dev_note=doc["devNote"],
        mkt_note=doc["mktNote"],
        created_at=doc["createdAt"],
    )
