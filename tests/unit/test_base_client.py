#!/usr/bin/env python3
"""
Unit tests for the base API client's response handling and retries.
"""

import asyncio
import json
import pytest
import aiohttp
from unittest.mock import MagicMock, patch
from top_tracks.api.base_client import APIError, AuthenticationError, BaseAPIClient, RateLimitError

class FakeResponse:
    """Minimal stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, status=200, body=None, headers=None):
        self.status = status
        self.headers = headers or {}
        self._text = json.dumps(body) if isinstance(body, (dict, list)) else (body or "")
        self.content_length = len(self._text)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def text(self):
        return self._text

    async def json(self):
        return json.loads(self._text)

class TestBaseAPIClient:
    """Unit tests for BaseAPIClient._make_request."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = BaseAPIClient("https://api.example.com/v1")
        self.client.session = MagicMock()
        self.client.session.closed = False
        self.sleeps = []

    def respond_with(self, *responses):
        self.client.session.request = MagicMock(side_effect=list(responses))
        return self.client.session.request

    def fast_sleep(self):
        real_sleep = asyncio.sleep

        async def _sleep(delay, *args, **kwargs):
            self.sleeps.append(delay)
            await real_sleep(0)

        return patch("asyncio.sleep", new=_sleep)

    @pytest.mark.asyncio
    async def test_json_body_is_returned(self):
        """Test a successful request."""
        request = self.respond_with(FakeResponse(200, {"id": "test_user"}))

        result = await self.client._make_request("GET", "/me", params={"limit": 50})

        assert result == {"id": "test_user"}
        method, url = request.call_args.args
        assert (method, url) == ("GET", "https://api.example.com/v1/me")
        assert request.call_args.kwargs["params"] == {"limit": 50}

    @pytest.mark.asyncio
    async def test_absolute_url_is_used_as_is(self):
        """Test that paging links are requested unchanged."""
        request = self.respond_with(FakeResponse(200, {"items": []}))
        next_link = "https://api.example.com/v1/me/playlists?offset=50&limit=50"

        await self.client._make_request("GET", next_link)

        assert request.call_args.args[1] == next_link

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [FakeResponse(204), FakeResponse(200, "")])
    async def test_empty_response(self, response):
        """Test that no content yields an empty dict."""
        self.respond_with(response)

        assert await self.client._make_request("DELETE", "/playlists/pl/tracks") == {}

    @pytest.mark.asyncio
    async def test_rate_limit_waits_and_retries(self):
        """Test that a 429 sleeps for Retry-After and repeats the request."""
        request = self.respond_with(
            FakeResponse(429, headers={"Retry-After": "2"}),
            FakeResponse(200, {"snapshot_id": "abc"})
        )

        with self.fast_sleep():
            result = await self.client._make_request("POST", "/playlists/pl/tracks", data={"uris": []})

        assert result == {"snapshot_id": "abc"}
        assert request.call_count == 2
        assert 2 in self.sleeps

    @pytest.mark.asyncio
    async def test_rate_limit_gives_up_after_three_tries(self):
        """Test that persistent rate limiting surfaces as RateLimitError."""
        request = self.respond_with(*[FakeResponse(429, headers={"Retry-After": "1"}) for _ in range(3)])

        with self.fast_sleep():
            with pytest.raises(RateLimitError) as exc_info:
                await self.client._make_request("GET", "/me/top/tracks")

        assert exc_info.value.status == 429
        assert request.call_count == 3

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        """Test that a 401 raises AuthenticationError without retrying."""
        request = self.respond_with(FakeResponse(401, {"error": "invalid token"}))

        with pytest.raises(AuthenticationError) as exc_info:
            await self.client._make_request("GET", "/me")

        assert exc_info.value.status == 401
        assert request.call_count == 1

    @pytest.mark.asyncio
    async def test_error_status_carries_body(self):
        """Test that other error statuses raise APIError with status and body."""
        request = self.respond_with(FakeResponse(500, "upstream exploded"))

        with pytest.raises(APIError) as exc_info:
            await self.client._make_request("GET", "/me/playlists")

        assert exc_info.value.status == 500
        assert "upstream exploded" in str(exc_info.value)
        assert not isinstance(exc_info.value, (AuthenticationError, RateLimitError))
        assert request.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self):
        """Test that a dropped connection is retried."""
        request = self.respond_with(
            aiohttp.ClientConnectionError("connection reset"),
            FakeResponse(200, {"id": "test_user"})
        )

        with self.fast_sleep():
            result = await self.client._make_request("GET", "/me")

        assert result == {"id": "test_user"}
        assert request.call_count == 2

    @pytest.mark.asyncio
    async def test_transport_error_becomes_api_error(self):
        """Test that repeated transport failures are wrapped in APIError."""
        request = self.respond_with(*[aiohttp.ClientConnectionError("connection refused") for _ in range(3)])

        with self.fast_sleep():
            with pytest.raises(APIError, match="Request failed"):
                await self.client._make_request("GET", "/me")

        assert request.call_count == 3
