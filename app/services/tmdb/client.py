from typing import Any

import httpx

from app.core.base_client import BaseClient
from app.core.config import MissingAPIKeyError
from app.core.version import __version__


class TMDBClient(BaseClient):
    """
    Client for interacting with the TMDB API.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "User-Agent": f"Moodwatch/{__version__}",
            "Accept": "application/json",
        }
        super().__init__(base_url=base_url, timeout=timeout, headers=headers, transport=transport)
        self.api_key = api_key
        self.language = language

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        """Override request to always include API key and language."""
        if not self.api_key:
            raise MissingAPIKeyError("TMDB_API_KEY")
        params = kwargs.get("params", {})
        if params is None:
            params = {}
        params["api_key"] = self.api_key
        params["language"] = self.language
        kwargs["params"] = params
        return await super()._request(method, url, **kwargs)
