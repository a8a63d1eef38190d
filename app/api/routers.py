from fastapi import APIRouter

from app.api.v1.history import router as history_router
from app.api.v1.notes import router as notes_router
from app.api.v1.pulls import router as pulls_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(pulls_router)
api_router.include_router(notes_router)
api_router.include_router(history_router)
