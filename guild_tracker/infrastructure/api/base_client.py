"""
Base API Client

Shared httpx plumbing for remote roster sources.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

import httpx

from ...core.exceptions import RemoteFetchError, RemoteTimeoutError

logger = logging.getLogger(__name__)


class BaseAPIClient(ABC):
    """
    JSON-over-HTTP client with a hard per-call deadline.

    Calls are not retried. Every failure is raised as RemoteFetchError,
    except a missed deadline, which is raised as RemoteTimeoutError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            base_url: API root, every endpoint is relative to it
            timeout: Deadline for one call in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    @property
    def is_open(self) -> bool:
        return self._http is not None

    async def initialize(self) -> None:
        if self.is_open:
            return

        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.default_headers(),
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport
        )
        logger.info(f"Opened HTTP client for {self.base_url}")

    async def close(self) -> None:
        if not self.is_open:
            return

        await self._http.aclose()
        self._http = None
        logger.info(f"Closed HTTP client for {self.base_url}")

    @abstractmethod
    def default_headers(self) -> Dict[str, str]:
        """Headers sent with every request."""

    async def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """One request under the deadline; non-2xx answers raise."""
        await self.initialize()
        logger.debug(f"{method} {self.base_url}{endpoint}")

        try:
            response = await asyncio.wait_for(
                self._http.request(method, endpoint, **kwargs),
                timeout=self.timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RemoteTimeoutError(
                endpoint=endpoint,
                timeout=self.timeout,
                original_exception=e
            ) from e
        except httpx.HTTPError as e:
            raise RemoteFetchError(
                f"{method} {endpoint} failed: {e}",
                endpoint=endpoint,
                original_exception=e
            ) from e

        if not response.is_success:
            raise RemoteFetchError(
                f"API returned {response.status_code}",
                status_code=response.status_code,
                endpoint=endpoint
            )

        return response

    async def get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._send("GET", endpoint, params=params)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError(
                f"{endpoint} did not return JSON",
                status_code=response.status_code,
                endpoint=endpoint,
                original_exception=e
            ) from e
