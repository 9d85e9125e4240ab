from collections.abc import Sequence
from typing import Any

import httpx
from loguru import logger

from app.core.config import Settings
from app.core.constants import PLACEHOLDER_POSTER
from app.models.recommendation import Genre, MediaDetails, UnifiedRecommendation
from app.services.jikan.client import JikanClient
from app.services.moods import get_genres_for_mood
from app.utils import parse_year


class JikanService:
    """
    Anime catalog provider backed by Jikan. Results are normalized into
    UnifiedRecommendation with ``type="anime"`` and MAL ids.
    """

    def __init__(
        self,
        base_url: str = "https://api.jikan.moe/v4",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = JikanClient(base_url=base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "JikanService":
        return cls(base_url=settings.JIKAN_API_URL, timeout=settings.PROVIDER_TIMEOUT_SECONDS)

    async def close(self):
        await self.client.close()

    @staticmethod
    def format_anime(item: dict[str, Any]) -> UnifiedRecommendation:
        year = item.get("year")
        if year is None:
            year = parse_year((item.get("aired") or {}).get("from"))
        poster = ((item.get("images") or {}).get("jpg") or {}).get("image_url")
        return UnifiedRecommendation(
            id=item["mal_id"],
            title=item.get("title") or "",
            posterUrl=poster or PLACEHOLDER_POSTER,
            rating=item.get("score") or 0,
            year=year,
            type="anime",
            overview=item.get("synopsis") or "",
        )

    async def get_anime_by_genres(self, genre_ids: Sequence[int], page: int = 1) -> list[UnifiedRecommendation]:
        """Anime matching the given MAL genre ids."""
        if not genre_ids:
            return []
        params = {
            "genres": ",".join(str(gid) for gid in genre_ids),
            "page": page,
            "limit": 20,
        }
        data = await self.client.get("/anime", params=params)
        return [self.format_anime(item) for item in data.get("data") or []]

    async def get_anime_by_mood(self, mood_id: str, page: int = 1) -> list[UnifiedRecommendation]:
        mapping = get_genres_for_mood(mood_id)
        if mapping is None:
            return []
        return await self.get_anime_by_genres(mapping.jikan, page=page)

    async def get_top_anime_page(self, page: int = 1, limit: int = 25) -> list[UnifiedRecommendation]:
        """Top anime by page, used for the trending feed."""
        data = await self.client.get("/top/anime", params={"page": page, "limit": limit})
        return [self.format_anime(item) for item in data.get("data") or []]

    async def get_anime_details(self, mal_id: int) -> MediaDetails:
        """
        Anime details for the media modal.
        Jikan has no director, cast or watch-provider data, so those stay empty.
        """
        payload = await self.client.get(f"/anime/{mal_id}/full")
        data = payload.get("data") or {}
        logger.debug(f"Fetched Jikan details for anime/{mal_id}")
        return MediaDetails(
            id=data.get("mal_id", mal_id),
            title=data.get("title") or "",
            overview=data.get("synopsis") or "",
            genres=[Genre(id=g["mal_id"], name=g["name"]) for g in data.get("genres") or []],
            trailerKey=(data.get("trailer") or {}).get("youtube_id"),
        )
