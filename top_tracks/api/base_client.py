"""
Base API client providing common functionality for Spotify clients.
Includes async HTTP session handling, retry logic, and error handling.
"""

import asyncio
import logging
from typing import Dict, Any, Optional
import aiohttp
import backoff

logger = logging.getLogger(__name__)

class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

class RateLimitError(APIError):
    """Exception raised when rate limit is exceeded."""
    pass

class AuthenticationError(APIError):
    """Exception raised when authentication fails."""
    pass

class BaseAPIClient:
    """Base class owning the HTTP session and the request/response plumbing."""

    def __init__(self, base_url: str, timeout: int = 30):
        self.base_url = base_url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self):
        """Ensure HTTP session is created."""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def _get_auth_headers(self) -> Dict[str, str]:
        """Get authentication headers. Override in subclasses."""
        return {}

    def _build_url(self, endpoint: str) -> str:
        # Paging links returned by the API are already absolute
        if endpoint.startswith("http://") or endpoint.startswith("https://"):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """Make HTTP request with retry logic."""
        try:
            return await self._send(method, endpoint, params=params, data=data, headers=headers)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"HTTP request failed: {method} {endpoint} - {e}")
            raise APIError(f"Request failed: {e}") from e

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientError, asyncio.TimeoutError, RateLimitError),
        max_tries=3,
        max_time=60
    )
    async def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        await self._ensure_session()

        url = self._build_url(endpoint)

        # Prepare headers
        request_headers = await self._get_auth_headers()
        if headers:
            request_headers.update(headers)

        async with self.session.request(
            method, url, params=params, json=data, headers=request_headers
        ) as response:

            if response.status == 429:
                retry_after = int(response.headers.get('Retry-After', 1))
                logger.warning(f"Rate limited, waiting {retry_after} seconds")
                await asyncio.sleep(retry_after)
                raise RateLimitError(f"Rate limit exceeded, retry after {retry_after}s", status=429)

            if response.status == 401:
                raise AuthenticationError(f"Authentication failed: {method} {url}", status=401)

            if response.status >= 400:
                body = await response.text()
                logger.error(f"HTTP request failed: {method} {url} - {response.status} {body}")
                raise APIError(f"{method} {url} returned {response.status}: {body}", status=response.status)

            if response.status == 204 or response.content_length == 0:
                return {}
            return await response.json()
