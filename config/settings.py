"""
Application settings and configuration management.
Handles environment variables, Spotify API configuration, and application defaults.
"""

import os
from typing import List, Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()

@dataclass
class APIConfig:
    """Configuration for the Spotify Web API."""
    base_url: str = "https://api.spotify.com/v1"
    accounts_url: str = "https://accounts.spotify.com"
    timeout: int = 30
    page_size: int = 50

@dataclass
class CallbackConfig:
    """Configuration for the local OAuth redirect listener."""
    host: str = "localhost"
    port: int = 8080
    path: str = "/callback"

    @property
    def redirect_uri(self) -> str:
        # Must match the redirect URI registered in the Spotify developer portal
        return f"http://{self.host}:{self.port}{self.path}"

@dataclass
class RetryConfig:
    """Exponential backoff applied to adding tracks to a playlist."""
    factor: float = 0.5
    max_value: Optional[float] = 60.0
    max_time: Optional[float] = None  # None retries until success

@dataclass
class PlaylistDefaults:
    """Attributes used when the automated playlists have to be created."""
    description: str = "automated from top_tracks_cli"
    public: bool = False
    collaborative: bool = False

class Settings:
    """Main application settings."""

    SCOPES: List[str] = [
        "user-read-private",
        "user-top-read",
        "playlist-modify-private",
        "playlist-read-private",
    ]

    def __init__(self):
        # Spotify API Configuration
        self.spotify = APIConfig()
        self.SPOTIFY_CLIENT_ID = os.getenv("spotify_clientID")
        self.SPOTIFY_CLIENT_SECRET = os.getenv("spotify_secret")
        self.SPOTIFY_STATE = os.getenv("spotify_state")

        self.callback = CallbackConfig()
        self.retry = RetryConfig()
        self.playlist = PlaylistDefaults()

        # Logging Configuration
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def redirect_uri(self) -> str:
        return self.callback.redirect_uri

    def validate(self) -> bool:
        """Validate that required configuration is present."""
        required_vars = []

        if not self.SPOTIFY_CLIENT_ID:
            required_vars.append("spotify_clientID")
        if not self.SPOTIFY_CLIENT_SECRET:
            required_vars.append("spotify_secret")
        if not self.SPOTIFY_STATE:
            required_vars.append("spotify_state")

        if required_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(required_vars)}")

        return True
