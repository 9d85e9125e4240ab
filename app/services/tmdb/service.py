import asyncio
from collections.abc import Sequence
from typing import Any

import httpx
from loguru import logger

from app.core.config import Settings
from app.core.constants import DETAILS_CAST_LIMIT, PLACEHOLDER_POSTER
from app.models.recommendation import (
    CastMember,
    Genre,
    MediaDetails,
    UnifiedRecommendation,
    WatchProvider,
    WatchProviders,
)
from app.services.moods import get_genres_for_mood
from app.services.tmdb.client import TMDBClient
from app.utils import parse_year


class TMDBService:
    """
    Movie and TV catalog provider backed by The Movie Database (TMDB) API.
    Every result is normalized into UnifiedRecommendation / MediaDetails.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.themoviedb.org/3",
        image_base_url: str = "https://image.tmdb.org/t/p",
        language: str = "en-US",
        region: str = "US",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = TMDBClient(
            api_key=api_key, base_url=base_url, language=language, timeout=timeout, transport=transport
        )
        self.image_base_url = image_base_url.rstrip("/")
        self.region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> "TMDBService":
        return cls(
            api_key=settings.TMDB_API_KEY,
            base_url=settings.TMDB_API_URL,
            image_base_url=settings.TMDB_IMAGE_URL,
            language=settings.TMDB_LANGUAGE,
            region=settings.WATCH_PROVIDER_REGION,
            timeout=settings.PROVIDER_TIMEOUT_SECONDS,
        )

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()

    def get_poster_url(self, path: str | None, size: str = "w342") -> str:
        if not path:
            return PLACEHOLDER_POSTER
        return f"{self.image_base_url}/{size}{path}"

    def format_movie(self, item: dict[str, Any]) -> UnifiedRecommendation:
        return UnifiedRecommendation(
            id=item["id"],
            title=item.get("title") or "",
            posterUrl=self.get_poster_url(item.get("poster_path")),
            rating=item.get("vote_average") or 0,
            year=parse_year(item.get("release_date")),
            type="movie",
            overview=item.get("overview") or "",
        )

    def format_tv(self, item: dict[str, Any]) -> UnifiedRecommendation:
        return UnifiedRecommendation(
            id=item["id"],
            title=item.get("name") or "",
            posterUrl=self.get_poster_url(item.get("poster_path")),
            rating=item.get("vote_average") or 0,
            year=parse_year(item.get("first_air_date")),
            type="tv",
            overview=item.get("overview") or "",
        )

    async def _discover(self, media_type: str, genre_ids: Sequence[int], page: int = 1) -> list[dict]:
        if not genre_ids:
            return []
        params = {
            "sort_by": "popularity.desc",
            "include_adult": "false",
            "page": page,
            # pipe means OR, which broadens results
            "with_genres": "|".join(str(gid) for gid in genre_ids),
        }
        data = await self.client.get(f"/discover/{media_type}", params=params)
        return data.get("results") or []

    async def discover_movies(self, genre_ids: Sequence[int], page: int = 1) -> list[UnifiedRecommendation]:
        """Popular movies matching any of the given genres."""
        results = await self._discover("movie", genre_ids, page)
        return [self.format_movie(item) for item in results]

    async def discover_tv(self, genre_ids: Sequence[int], page: int = 1) -> list[UnifiedRecommendation]:
        """Popular TV shows matching any of the given genres."""
        results = await self._discover("tv", genre_ids, page)
        return [self.format_tv(item) for item in results]

    async def discover_by_mood(self, mood_id: str, page: int = 1) -> list[UnifiedRecommendation]:
        """Movies followed by TV shows for a mood; empty for an unknown mood."""
        mapping = get_genres_for_mood(mood_id)
        if mapping is None:
            return []
        movies, tv = await asyncio.gather(
            self.discover_movies(mapping.tmdb_movie, page=page),
            self.discover_tv(mapping.tmdb_tv, page=page),
        )
        return [*movies, *tv]

    async def get_trending_movies(self, page: int = 1) -> list[UnifiedRecommendation]:
        data = await self.client.get("/trending/movie/day", params={"page": page})
        return [self.format_movie(item) for item in data.get("results") or []]

    async def get_trending_tv(self, page: int = 1) -> list[UnifiedRecommendation]:
        data = await self.client.get("/trending/tv/day", params={"page": page})
        return [self.format_tv(item) for item in data.get("results") or []]

    async def get_movie_details(self, movie_id: int) -> MediaDetails:
        return await self._get_details("movie", movie_id)

    async def get_tv_details(self, tv_id: int) -> MediaDetails:
        return await self._get_details("tv", tv_id)

    async def _get_details(self, media_type: str, tmdb_id: int) -> MediaDetails:
        base = f"/{media_type}/{tmdb_id}"
        details, videos, credits, providers = await asyncio.gather(
            self.client.get(base),
            self.client.get(f"{base}/videos"),
            self.client.get(f"{base}/credits"),
            self.client.get(f"{base}/watch/providers"),
        )

        title = details.get("title") if media_type == "movie" else details.get("name")
        crew = credits.get("crew") or []
        director = _find_crew(crew, "Director")
        if director is None and media_type == "tv":
            # series rarely credit a director, show-runners are listed as EPs
            director = _find_crew(crew, "Executive Producer")

        cast = [
            CastMember(name=member["name"], character=member.get("character") or None)
            for member in (credits.get("cast") or [])[:DETAILS_CAST_LIMIT]
        ]
        logger.debug(f"Fetched TMDB details for {media_type}/{tmdb_id}")

        return MediaDetails(
            id=tmdb_id,
            title=title or "",
            overview=details.get("overview") or "",
            genres=[Genre(id=g["id"], name=g["name"]) for g in details.get("genres") or []],
            trailerKey=_find_trailer_key(videos.get("results") or []),
            director=director,
            cast=cast,
            watchProviders=self._format_watch_providers(providers),
        )

    def _format_watch_providers(self, data: dict[str, Any]) -> WatchProviders:
        regional = (data.get("results") or {}).get(self.region) or {}

        def _bucket(key: str) -> list[WatchProvider]:
            return [
                WatchProvider(id=p["provider_id"], name=p["provider_name"], logoPath=p.get("logo_path") or "")
                for p in regional.get(key) or []
            ]

        return WatchProviders(flatrate=_bucket("flatrate"), rent=_bucket("rent"))


def _find_crew(crew: list[dict], job: str) -> str | None:
    for member in crew:
        if member.get("job") == job:
            return member.get("name")
    return None


def _find_trailer_key(videos: list[dict]) -> str | None:
    for video in videos:
        if video.get("site") == "YouTube" and video.get("type") in ("Trailer", "Teaser"):
            return video.get("key")
    return None
