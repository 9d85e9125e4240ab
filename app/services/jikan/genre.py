"""MyAnimeList genre ids as used by the Jikan ``genres`` filter."""

anime_genres = {
    1: "Action",
    2: "Adventure",
    4: "Comedy",
    7: "Mystery",
    8: "Drama",
    10: "Fantasy",
    14: "Horror",
    22: "Romance",
    24: "Sci-Fi",
    30: "Sports",
    36: "Slice of Life",
    37: "Supernatural",
    40: "Psychological",
    41: "Suspense",
}
