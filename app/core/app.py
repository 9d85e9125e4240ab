from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.api.main import api_router
from app.services.gemini import GeminiService
from app.services.jikan.service import JikanService
from app.services.recommendation_service import RecommendationAggregator
from app.services.tmdb.service import TMDBService

from .config import Settings, settings
from .version import __version__


def create_app(
    config: Settings = settings,
    tmdb: TMDBService | None = None,
    jikan: JikanService | None = None,
    gemini: GeminiService | None = None,
) -> FastAPI:
    """Build the API with its providers wired from ``config`` unless given explicitly."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifespan events (startup/shutdown).
        """
        if not config.TMDB_API_KEY:
            logger.warning("TMDB_API_KEY not set. Movie and TV features will fail until it is configured.")
        if not config.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY not set. Chat will be unavailable.")
        yield
        for service in (app.state.tmdb, app.state.jikan):
            try:
                await service.close()
            except Exception as exc:
                logger.warning(f"Failed to close {type(service).__name__} HTTP client: {exc}")

    app = FastAPI(
        title=config.APP_NAME,
        description="Mood and chat based movie, TV and anime recommendations",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if config.APP_ENV != "development" else "/docs",
        redoc_url=None if config.APP_ENV != "development" else "/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.tmdb = tmdb or TMDBService.from_settings(config)
    app.state.jikan = jikan or JikanService.from_settings(config)
    app.state.gemini = gemini or GeminiService.from_settings(config)
    app.state.aggregator = RecommendationAggregator(
        app.state.tmdb, app.state.jikan, page_size=config.TRENDING_PAGE_SIZE
    )

    app.include_router(api_router)
    return app


app = create_app()
