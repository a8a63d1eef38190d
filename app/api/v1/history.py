from fastapi import APIRouter, Depends

from app.api.v1.schemas import (
    HistoryCreateRequest,
    HistoryCreateResponse,
    HistoryDeleteResponse,
)
from app.core.config import settings
from app.core.exceptions import HistoryNotFoundError, MissingFieldsError, PersistenceError
from app.domain.notes.schemas import HistoryRecord
from app.infra.db.history_repository import HistoryRepository
from app.infra.db.mongo import mongo

router = APIRouter(prefix="/history", tags=["history"])


def get_history_repository() -> HistoryRepository:
    """공유 MongoDB 연결 기반 히스토리 저장소"""
    try:
        collection = mongo.get_collection(settings.history_collection)
    except ValueError as e:
        raise PersistenceError(detail=str(e)) from e
    return HistoryRepository(collection)


@router.get("", response_model=list[HistoryRecord])
async def list_history(
    repository: HistoryRepository = Depends(get_history_repository),
) -> list[HistoryRecord]:
    return await repository.list_records()


@router.post("", response_model=HistoryCreateResponse)
async def create_history(
    request: HistoryCreateRequest,
    repository: HistoryRepository = Depends(get_history_repository),
) -> HistoryCreateResponse:
    missing = request.missing_fields()
    if missing:
        raise MissingFieldsError(detail=", ".join(missing))

    inserted_id = await repository.insert_record(
        pr_id=request.pr_id,
        pr_description=request.pr_description,
        dev_note=request.dev_note,
        mkt_note=request.mkt_note,
    )
    return HistoryCreateResponse(inserted_id=inserted_id)


@router.delete("/{record_id}", response_model=HistoryDeleteResponse)
async def delete_history(
    record_id: str,
    repository: HistoryRepository = Depends(get_history_repository),
) -> HistoryDeleteResponse:
    if not await repository.delete_record(record_id):
        raise HistoryNotFoundError(detail=record_id)
    return HistoryDeleteResponse(success=True)
