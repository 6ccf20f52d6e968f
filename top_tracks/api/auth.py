"""
Spotify OAuth 2.0 Authorization Code flow.
Builds the authorization URL and exchanges/refreshes tokens against the accounts service.
"""

import base64
import logging
import urllib.parse
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional

import aiohttp

from top_tracks.api.base_client import AuthenticationError

logger = logging.getLogger(__name__)

ACCOUNTS_URL = "https://accounts.spotify.com"

@dataclass
class Token:
    """OAuth token pair returned by the accounts service."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    token_type: str = "Bearer"

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and datetime.now() >= self.expires_at

    @classmethod
    def from_response(cls, token_data: Dict[str, Any], refresh_token: Optional[str] = None) -> 'Token':
        # Refresh responses may omit the refresh token, keep the previous one then
        expires_in = token_data.get("expires_in", 3600)
        return cls(
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token", refresh_token),
            expires_at=datetime.now() + timedelta(seconds=expires_in - 60),
            token_type=token_data.get("token_type", "Bearer")
        )

class SpotifyAuth:
    """Authorization Code flow for a single user."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: List[str],
        accounts_url: str = ACCOUNTS_URL
    ):
        """
        Initialize the authenticator.

        Args:
            client_id: Spotify application client ID
            client_secret: Spotify application client secret
            redirect_uri: Redirect URI registered for the application
            scopes: Spotify scopes to request
            accounts_url: Base URL of the accounts service
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes
        self.accounts_url = accounts_url.rstrip("/")

    @property
    def token_url(self) -> str:
        return f"{self.accounts_url}/api/token"

    def authorization_url(self, state: str) -> str:
        """
        Get the authorization URL for the user to grant permissions.

        Args:
            state: Opaque value echoed back on the redirect, checked against CSRF

        Returns:
            Authorization URL for the user to visit
        """
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(self.scopes),
            "state": state
        }
        return f"{self.accounts_url}/authorize?" + urllib.parse.urlencode(params)

    def _get_client_headers(self) -> Dict[str, str]:
        credentials = f"{self.client_id}:{self.client_secret}"
        encoded_credentials = base64.b64encode(credentials.encode()).decode()
        return {
            "Authorization": f"Basic {encoded_credentials}",
            "Content-Type": "application/x-www-form-urlencoded"
        }

    async def _request_token(self, session: aiohttp.ClientSession, data: Dict[str, str]) -> Dict[str, Any]:
        async with session.post(self.token_url, headers=self._get_client_headers(), data=data) as response:
            response.raise_for_status()
            return await response.json()

    async def exchange_code(self, session: aiohttp.ClientSession, code: str) -> Token:
        """
        Exchange an authorization code for a token.

        Args:
            session: HTTP session used for the token request
            code: Authorization code from the redirect

        Returns:
            User access token
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri
        }
        try:
            token_data = await self._request_token(session, data)
            return Token.from_response(token_data)
        except (aiohttp.ClientError, KeyError) as e:
            logger.error(f"Spotify user authentication failed: {e}")
            raise AuthenticationError(f"Failed to authenticate user with Spotify: {e}") from e

    async def refresh(self, session: aiohttp.ClientSession, token: Token) -> Token:
        """Refresh the user access token using its refresh token."""
        if not token.refresh_token:
            raise AuthenticationError("No refresh token available")

        data = {
            "grant_type": "refresh_token",
            "refresh_token": token.refresh_token
        }
        try:
            token_data = await self._request_token(session, data)
            return Token.from_response(token_data, refresh_token=token.refresh_token)
        except (aiohttp.ClientError, KeyError) as e:
            logger.error(f"Spotify token refresh failed: {e}")
            raise AuthenticationError(f"Failed to refresh Spotify token: {e}") from e

