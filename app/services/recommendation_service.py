import asyncio
from collections.abc import Awaitable

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from app.models.recommendation import UnifiedRecommendation
from app.services.jikan.service import JikanService
from app.services.moods import get_genres_for_mood
from app.services.tmdb.service import TMDBService
from app.utils import interleave


class AggregateResult(BaseModel):
    """Either the merged items, or an empty list with the reason it failed."""

    items: list[UnifiedRecommendation] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


async def _skip_on_http_status(
    source: str, call: Awaitable[list[UnifiedRecommendation]]
) -> list[UnifiedRecommendation]:
    try:
        return await call
    except httpx.HTTPStatusError as e:
        logger.warning(f"{source} unavailable (HTTP {e.response.status_code}), leaving it out of the page")
        return []


class RecommendationAggregator:
    """
    Fans out to the movie/TV and anime catalog providers and merges their results.

    Mood calls are joined "all or first failure": when any provider call fails
    the whole aggregation is reported as empty with the failure reason attached.
    The trending feed only skips a provider that answered with an error status.
    Ratings stay on each provider's native scale; nothing is de-duplicated or
    re-ranked.
    """

    def __init__(self, tmdb: TMDBService, jikan: JikanService, page_size: int = 12):
        self.tmdb = tmdb
        self.jikan = jikan
        self.page_size = page_size

    async def recommend_by_mood(self, mood_id: str, page: int = 1) -> AggregateResult:
        mapping = get_genres_for_mood(mood_id)
        if mapping is None:
            logger.info(f"Unknown mood '{mood_id}', returning no recommendations")
            return AggregateResult()

        try:
            tmdb_items, anime_items = await asyncio.gather(
                self.tmdb.discover_by_mood(mood_id, page=page),
                self.jikan.get_anime_by_genres(mapping.jikan, page=page),
            )
        except Exception as e:
            logger.error(f"Mood recommendations failed for '{mood_id}': {_describe(e)}")
            return AggregateResult(error=_describe(e))

        logger.info(
            f"Mood '{mood_id}' page {page}: tmdb={len(tmdb_items)} anime={len(anime_items)} "
            f"total={len(tmdb_items) + len(anime_items)}"
        )
        return AggregateResult(items=[*tmdb_items, *anime_items])

    async def trending_page(self, page: int = 1) -> AggregateResult:
        """
        One page of the trending feed: trending movies, trending TV and top anime
        for the same provider page, interleaved and cut to the page size.
        An empty page means there is nothing more to load.

        A provider that answers with an HTTP error status (rate limited, down for
        maintenance) is left out of the page. Configuration and network errors
        still fail the whole page.
        """
        page = max(1, page)
        try:
            movies, tv, anime = await asyncio.gather(
                _skip_on_http_status("TMDB trending movies", self.tmdb.get_trending_movies(page)),
                _skip_on_http_status("TMDB trending TV", self.tmdb.get_trending_tv(page)),
                _skip_on_http_status("Jikan top anime", self.jikan.get_top_anime_page(page)),
            )
        except Exception as e:
            logger.warning(f"Trending page {page} failed: {_describe(e)}")
            return AggregateResult(error=_describe(e))

        return AggregateResult(items=interleave(movies, tv, anime)[: self.page_size])
