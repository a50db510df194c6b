"""
Remote data gateway for the trading agent API.

One GET per resource against the configured base URL. Every failure mode
(network error, timeout, non-2xx status, unparseable body) collapses to None
so a single broken endpoint never takes the rest of the dashboard down.
"""

from typing import Any, Optional, Union

import httpx
from loguru import logger

from src.core.models import Resource


class DataGateway:
    """
    Async HTTP client for the agent's read-only resources.

    Usage:
        async with DataGateway("http://agent:8000/api") as gateway:
            portfolio = await gateway.fetch_resource(Resource.PORTFOLIO)
            if portfolio is None:
                ...  # agent unreachable, use defaults
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize gateway.

        Args:
            base_url: Agent API base URL, resource paths are appended to it
            timeout: Per-request timeout in seconds
            client: Pre-built client (tests inject one with a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._request_count = 0

    @property
    def request_count(self) -> int:
        """Number of requests issued so far."""
        return self._request_count

    def url_for(self, endpoint: Union[Resource, str]) -> str:
        path = endpoint.value if isinstance(endpoint, Resource) else endpoint
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    async def fetch_resource(self, endpoint: Union[Resource, str]) -> Optional[Any]:
        """
        Fetch one resource.

        Args:
            endpoint: Resource or relative path (e.g. "/portfolio")

        Returns:
            Parsed JSON payload, or None if the resource is unavailable
        """
        url = self.url_for(endpoint)
        self._request_count += 1

        try:
            response = await self._client.get(url, timeout=self.timeout)
        except httpx.TimeoutException:
            logger.warning(f"[GATEWAY] Timeout fetching {url}")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"[GATEWAY] Error fetching {url}: {e}")
            return None

        if not response.is_success:
            logger.warning(f"[GATEWAY] {url} returned HTTP {response.status_code}")
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"[GATEWAY] Malformed JSON from {url}: {e}")
            return None

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "DataGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
