"""Unipile API client for LinkedIn profile lookups."""

from collections.abc import Sequence

import httpx

from privatedata.config import Settings
from privatedata.exceptions import RateLimitError, UnipileAPIError

UNIPILE_API_PATH = "/api/v1"


class UnipileClient:
    """Async client for the Unipile users API."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        """API root built from the configured DSN."""
        dsn = self.settings.unipile_dsn.rstrip("/")
        if "://" not in dsn:
            dsn = f"https://{dsn}"
        return f"{dsn}{UNIPILE_API_PATH}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "X-API-KEY": self.settings.unipile_api_key,
                    "Accept": "application/json",
                },
                timeout=30.0,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def get_profile(
        self,
        identifier: str,
        sections: Sequence[str] = ("experience",),
    ) -> dict:
        """
        Fetch a user profile by public identifier.

        Args:
            identifier: LinkedIn public identifier (the part after /in/)
            sections: LinkedIn profile sections to include, e.g. "experience"

        Returns:
            Raw profile dict as returned by Unipile
        """
        client = await self._get_client()
        params: list[tuple[str, str]] = [("account_id", self.settings.unipile_account_id)]
        params.extend(("linkedin_sections", section) for section in sections)

        try:
            response = await client.get(f"/users/{identifier}", params=params)
        except httpx.HTTPError as e:
            raise UnipileAPIError(0, f"Request failed: {e}", identifier) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                int(retry_after) if retry_after and retry_after.isdigit() else None,
                identifier,
            )
        if response.status_code >= 400:
            raise UnipileAPIError(response.status_code, response.text, identifier)

        data = response.json()
        if not isinstance(data, dict):
            raise UnipileAPIError(response.status_code, "Unexpected response body", identifier)
        return data
