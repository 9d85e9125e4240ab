import httpx

from app.core.base_client import BaseClient
from app.core.version import __version__


class JikanClient(BaseClient):
    """
    Client for the Jikan (unofficial MyAnimeList) API. No credentials required.
    """

    def __init__(
        self,
        base_url: str = "https://api.jikan.moe/v4",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "User-Agent": f"Moodwatch/{__version__}",
            "Accept": "application/json",
        }
        super().__init__(base_url=base_url, timeout=timeout, headers=headers, transport=transport)
