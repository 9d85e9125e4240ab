from typing import Literal

from pydantic import BaseModel, Field

from app.core.constants import PLACEHOLDER_POSTER

MediaType = Literal["movie", "tv", "anime"]


class UnifiedRecommendation(BaseModel):
    """Common card shape every catalog provider normalizes into.

    ``(type, id)`` is the uniqueness key; ids are only unique per provider.
    """

    id: int
    title: str = ""
    posterUrl: str = PLACEHOLDER_POSTER
    rating: float = 0  # provider-native scale, 0 means unrated
    year: int | None = None
    type: MediaType
    overview: str = ""


class RecommendationResponse(BaseModel):
    items: list[UnifiedRecommendation] = Field(default_factory=list)
    error: str | None = None


class Genre(BaseModel):
    id: int
    name: str


class CastMember(BaseModel):
    name: str
    character: str | None = None


class WatchProvider(BaseModel):
    id: int
    name: str
    logoPath: str = ""


class WatchProviders(BaseModel):
    """Streaming availability split into subscription and rental buckets."""

    flatrate: list[WatchProvider] = Field(default_factory=list)
    rent: list[WatchProvider] = Field(default_factory=list)


class MediaDetails(BaseModel):
    """Detail view of a single title, as shown in the media modal."""

    id: int
    title: str = ""
    overview: str = ""
    genres: list[Genre] = Field(default_factory=list)
    trailerKey: str | None = None
    director: str | None = None
    cast: list[CastMember] = Field(default_factory=list)
    watchProviders: WatchProviders = Field(default_factory=WatchProviders)
