"""API clients for the Spotify Web API and accounts service."""

from .base_client import BaseAPIClient, APIError, AuthenticationError, RateLimitError
from .auth import SpotifyAuth, Token
from .spotify_client import SpotifyClient

__all__ = [
    'BaseAPIClient',
    'APIError',
    'AuthenticationError',
    'RateLimitError',
    'SpotifyAuth',
    'Token',
    'SpotifyClient'
]
