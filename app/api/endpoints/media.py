from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.dependencies import get_jikan_service, get_tmdb_service
from app.services.jikan.service import JikanService
from app.services.tmdb.service import TMDBService

router = APIRouter(prefix="/api", tags=["media"])


@router.get("/media/{type}/{id}")
async def get_media_details(
    type: str,
    id: str,
    tmdb: TMDBService = Depends(get_tmdb_service),
    jikan: JikanService = Depends(get_jikan_service),
):
    """Details for the media modal: genres, trailer, director, cast and watch providers."""
    try:
        media_id = int(id)
    except ValueError:
        return JSONResponse({"error": "Invalid ID"}, status_code=400)

    fetchers = {
        "movie": tmdb.get_movie_details,
        "tv": tmdb.get_tv_details,
        "anime": jikan.get_anime_details,
    }
    fetch = fetchers.get(type)
    if fetch is None:
        return JSONResponse({"error": "Invalid type"}, status_code=400)

    try:
        details = await fetch(media_id)
    except Exception as e:
        logger.exception(f"Failed to fetch details for {type}/{media_id}: {e}")
        return JSONResponse({"error": str(e) or "Failed to fetch"}, status_code=500)
    return details.model_dump(mode="json")
