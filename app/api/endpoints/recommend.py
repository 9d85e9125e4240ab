from typing import Any

from fastapi import APIRouter, Depends
from loguru import logger

from app.api.dependencies import get_aggregator
from app.models.recommendation import RecommendationResponse, UnifiedRecommendation
from app.services.moods import describe_moods
from app.services.recommendation_service import RecommendationAggregator

router = APIRouter(prefix="/api", tags=["recommendations"])


def _parse_page(raw: str | None) -> int:
    try:
        return max(1, int(raw or 1))
    except ValueError:
        return 1


def _items_payload(items: list[UnifiedRecommendation], error: str | None = None) -> dict[str, Any]:
    response = RecommendationResponse(items=items, error=error)
    # "error" is left out when there is none, item fields are always present
    return response.model_dump(mode="json", exclude={"error"} if error is None else None)


@router.get("/moods")
async def list_moods() -> list[dict]:
    return describe_moods()


@router.get("/recommend")
async def recommend(
    mood: str | None = None,
    page: str | None = None,
    aggregator: RecommendationAggregator = Depends(get_aggregator),
) -> dict[str, Any]:
    """Movies, TV and anime for a mood. A missing mood is not an error."""
    if not mood:
        logger.debug("No mood parameter, returning empty recommendations")
        return _items_payload([])

    result = await aggregator.recommend_by_mood(mood, page=_parse_page(page))
    return _items_payload(result.items, result.error)


@router.get("/trending")
async def trending(page: str | None = None, aggregator: RecommendationAggregator = Depends(get_aggregator)):
    """
    One page of the trending feed for infinite scroll.

    Provider failures are logged and answered with an empty page, without an
    error field; clients treat an empty page as the end of the feed.
    """
    result = await aggregator.trending_page(_parse_page(page))
    return _items_payload(result.items)
