"""
Mood vocabulary and the mood -> genre lookup used for "Pick by Mood".

TMDB genre ids come from /genre/movie/list and /genre/tv/list (see
``app.services.tmdb.genre``); Jikan ids are MyAnimeList genre ids
(see ``app.services.jikan.genre``).
"""

from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from app.services.jikan.genre import anime_genres
from app.services.tmdb.genre import movie_genres, series_genres


class MoodGenreMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    tmdb_movie: tuple[int, ...]
    tmdb_tv: tuple[int, ...]
    jikan: tuple[int, ...]


class Mood(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    icon: str


MOODS: tuple[Mood, ...] = (
    Mood(id="rainy", label="Rainy day", icon="🌧️"),
    Mood(id="cry", label="Need a good cry", icon="😢"),
    Mood(id="hype", label="Hype me up", icon="🔥"),
    Mood(id="date", label="Date night", icon="💕"),
    Mood(id="sleepless", label="Can't sleep", icon="🌙"),
    Mood(id="adventure", label="Feel like an adventure", icon="🗺️"),
    Mood(id="funny", label="Something funny", icon="😂"),
    Mood(id="mindblowing", label="Mind-blowing", icon="🤯"),
)


MOOD_GENRE_MAP: MappingProxyType[str, MoodGenreMapping] = MappingProxyType(
    {
        "rainy": MoodGenreMapping(
            tmdb_movie=(18, 10749),  # Drama, Romance
            tmdb_tv=(18, 10749),
            jikan=(8, 22, 36),  # Drama, Romance, Slice of Life
        ),
        "cry": MoodGenreMapping(
            tmdb_movie=(18, 10749),
            tmdb_tv=(18, 10749),
            jikan=(8, 22),
        ),
        "hype": MoodGenreMapping(
            tmdb_movie=(28, 12),  # Action, Adventure
            tmdb_tv=(10759, 35),  # Action & Adventure, Comedy
            jikan=(1, 2, 30),  # Action, Adventure, Sports
        ),
        "date": MoodGenreMapping(
            tmdb_movie=(10749, 35),  # Romance, Comedy
            tmdb_tv=(10749, 35),
            jikan=(22, 4),
        ),
        "sleepless": MoodGenreMapping(
            tmdb_movie=(27, 53, 9648),  # Horror, Thriller, Mystery
            tmdb_tv=(9648, 10765),  # Mystery, Sci-Fi & Fantasy
            jikan=(14, 7),  # Horror, Mystery
        ),
        "adventure": MoodGenreMapping(
            tmdb_movie=(12, 14, 28),  # Adventure, Fantasy, Action
            tmdb_tv=(10759, 10765),
            jikan=(2, 10, 1),  # Adventure, Fantasy, Action
        ),
        "funny": MoodGenreMapping(
            tmdb_movie=(35,),
            tmdb_tv=(35,),
            jikan=(4,),
        ),
        "mindblowing": MoodGenreMapping(
            tmdb_movie=(878, 9648),  # Sci-Fi, Mystery
            tmdb_tv=(10765, 9648),
            jikan=(24, 7, 40),  # Sci-Fi, Mystery, Psychological
        ),
    }
)


def get_genres_for_mood(mood_id: str) -> MoodGenreMapping | None:
    """Return the genre mapping for a mood, or None for an unknown mood."""
    return MOOD_GENRE_MAP.get(mood_id)


def describe_moods() -> list[dict]:
    """Mood list with labels, icons, and genre ids and names per provider."""
    described = []
    for mood in MOODS:
        mapping = MOOD_GENRE_MAP[mood.id]
        described.append(
            {
                **mood.model_dump(),
                "genreIds": {
                    "movie": list(mapping.tmdb_movie),
                    "tv": list(mapping.tmdb_tv),
                    "anime": list(mapping.jikan),
                },
                "genres": {
                    "movie": [movie_genres.get(gid, str(gid)) for gid in mapping.tmdb_movie],
                    "tv": [series_genres.get(gid, str(gid)) for gid in mapping.tmdb_tv],
                    "anime": [anime_genres.get(gid, str(gid)) for gid in mapping.jikan],
                },
            }
        )
    return described
