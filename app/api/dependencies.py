from fastapi import Request

from app.services.gemini import GeminiService
from app.services.jikan.service import JikanService
from app.services.recommendation_service import RecommendationAggregator
from app.services.tmdb.service import TMDBService


def get_tmdb_service(request: Request) -> TMDBService:
    return request.app.state.tmdb


def get_jikan_service(request: Request) -> JikanService:
    return request.app.state.jikan


def get_gemini_service(request: Request) -> GeminiService:
    return request.app.state.gemini


def get_aggregator(request: Request) -> RecommendationAggregator:
    return request.app.state.aggregator
