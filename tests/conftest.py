"""
Pytest configuration and shared fixtures for the top tracks playlist tests.
"""

import pytest
from unittest.mock import AsyncMock

from config.settings import Settings
from top_tracks.api.spotify_client import SpotifyClient
from top_tracks.models.playlist import TimeRange
from top_tracks.models.spotify import Artist, SimplePlaylist, Track, User

@pytest.fixture
def test_settings(monkeypatch):
    """Settings with fake credentials and no real waiting between retries."""
    monkeypatch.setenv("spotify_clientID", "test_client_id")
    monkeypatch.setenv("spotify_secret", "test_client_secret")
    monkeypatch.setenv("spotify_state", "test_state")
    settings = Settings()
    settings.retry.factor = 0
    return settings

@pytest.fixture
def sample_user():
    """Sample Spotify user."""
    return User(id="test_user", display_name="Test User")

@pytest.fixture
def make_track():
    """Factory for sample tracks."""
    def _make_track(track_id: str, name: str = None) -> Track:
        return Track(
            id=track_id,
            name=name or f"Song {track_id}",
            artists=[Artist(id=f"artist_{track_id}", name="Test Artist")],
            uri=f"spotify:track:{track_id}"
        )
    return _make_track

@pytest.fixture
def automated_playlists(sample_user):
    """The three automated playlists as listed by the API."""
    return [
        SimplePlaylist(id=f"pl_{time_range.value}", name=time_range.playlist_name,
                       description="automated from top_tracks_cli", public=False, owner=sample_user)
        for time_range in TimeRange
    ]

@pytest.fixture
def mock_spotify_client():
    """Mock Spotify API client."""
    client = AsyncMock(spec=SpotifyClient)
    client.current_users_playlists.return_value = []
    client.add_tracks_to_playlist.return_value = "snapshot"
    client.remove_tracks_from_playlist.return_value = "snapshot"
    return client
