from fastapi import APIRouter

from .endpoints.chat import router as chat_router
from .endpoints.health import router as health_router
from .endpoints.media import router as media_router
from .endpoints.recommend import router as recommend_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Moodwatch API is running"}


api_router.include_router(health_router)
api_router.include_router(recommend_router)
api_router.include_router(media_router)
api_router.include_router(chat_router)
