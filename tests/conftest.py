"""Pytest configuration and shared fakes."""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Make ``app`` importable when running tests without an editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.models.recommendation import MediaDetails, UnifiedRecommendation  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def make_item(item_id: int, media_type: str = "movie", title: str | None = None) -> UnifiedRecommendation:
    return UnifiedRecommendation(
        id=item_id,
        title=title or f"{media_type} {item_id}",
        posterUrl=f"https://img.example/{item_id}.jpg",
        rating=7.5,
        year=2020,
        type=media_type,
        overview="",
    )


class FakeTMDB:
    """Records calls instead of talking to TMDB."""

    def __init__(self, fail_with: Exception | None = None, per_page: int = 20, pages: int = 3):
        self.calls: list[tuple] = []
        self.fail_with = fail_with
        self.per_page = per_page
        self.pages = pages
        self.closed = False

    def _page(self, media_type: str, page: int, offset: int) -> list[UnifiedRecommendation]:
        if page > self.pages:
            return []
        start = offset + (page - 1) * self.per_page
        return [make_item(start + i, media_type) for i in range(self.per_page)]

    async def discover_by_mood(self, mood_id: str, page: int = 1):
        self.calls.append(("discover_by_mood", mood_id, page))
        if self.fail_with:
            raise self.fail_with
        return [make_item(1, "movie"), make_item(2, "tv")]

    async def get_trending_movies(self, page: int = 1):
        self.calls.append(("trending_movies", page))
        if self.fail_with:
            raise self.fail_with
        return self._page("movie", page, 1000)

    async def get_trending_tv(self, page: int = 1):
        self.calls.append(("trending_tv", page))
        return self._page("tv", page, 2000)

    async def get_movie_details(self, movie_id: int):
        self.calls.append(("movie_details", movie_id))
        if self.fail_with:
            raise self.fail_with
        return MediaDetails(id=movie_id, title="Inception", director="Christopher Nolan")

    async def get_tv_details(self, tv_id: int):
        self.calls.append(("tv_details", tv_id))
        return MediaDetails(id=tv_id, title="Dark")

    async def close(self):
        self.closed = True


class FakeJikan:
    def __init__(self, fail_with: Exception | None = None, per_page: int = 25, pages: int = 3):
        self.calls: list[tuple] = []
        self.fail_with = fail_with
        self.per_page = per_page
        self.pages = pages
        self.closed = False

    async def get_anime_by_genres(self, genre_ids, page: int = 1):
        self.calls.append(("anime_by_genres", tuple(genre_ids), page))
        if self.fail_with:
            raise self.fail_with
        return [make_item(3, "anime")]

    async def get_top_anime_page(self, page: int = 1, limit: int = 25):
        self.calls.append(("top_anime", page))
        if self.fail_with:
            raise self.fail_with
        if page > self.pages:
            return []
        start = 3000 + (page - 1) * self.per_page
        return [make_item(start + i, "anime") for i in range(self.per_page)]

    async def get_anime_details(self, mal_id: int):
        self.calls.append(("anime_details", mal_id))
        return MediaDetails(id=mal_id, title="Frieren", trailerKey="abc123")

    async def close(self):
        self.closed = True


class FakeGenaiModels:
    """Stands in for ``genai.Client().aio.models``."""

    def __init__(
        self,
        chunks: list[str | None],
        start_error: Exception | None = None,
        mid_error: Exception | None = None,
    ):
        self.chunks = chunks
        self.start_error = start_error
        self.mid_error = mid_error
        self.calls: list[dict] = []

    async def generate_content_stream(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.start_error:
            raise self.start_error

        async def _chunks():
            for text in self.chunks:
                yield SimpleNamespace(text=text)
            if self.mid_error:
                raise self.mid_error

        return _chunks()


def fake_genai_client(models: FakeGenaiModels) -> SimpleNamespace:
    return SimpleNamespace(aio=SimpleNamespace(models=models))
