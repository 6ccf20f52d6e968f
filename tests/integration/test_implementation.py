#!/usr/bin/env python3
"""
Integration tests to verify configuration loading and wiring.
Runs without API credentials or network access.
"""

import pytest
from config.settings import Settings
from top_tracks.api.auth import SpotifyAuth
from top_tracks.services.playlist_service import TopTracksPlaylistService

class TestImplementation:
    """Integration tests for settings and service wiring."""

    def test_settings_loading(self, test_settings):
        """Test that settings load from the environment."""
        assert test_settings.SPOTIFY_CLIENT_ID == "test_client_id"
        assert test_settings.SPOTIFY_CLIENT_SECRET == "test_client_secret"
        assert test_settings.SPOTIFY_STATE == "test_state"
        assert test_settings.validate()

    def test_settings_defaults(self, test_settings):
        """Test fixed configuration values."""
        assert test_settings.redirect_uri == "http://localhost:8080/callback"
        assert test_settings.spotify.page_size == 50
        assert test_settings.playlist.description == "automated from top_tracks_cli"
        assert test_settings.playlist.public is False
        assert test_settings.retry.max_time is None
        assert set(Settings.SCOPES) == {
            "user-read-private",
            "user-top-read",
            "playlist-modify-private",
            "playlist-read-private",
        }

    def test_validate_lists_missing_variables(self, monkeypatch):
        """Test validation of missing credentials."""
        monkeypatch.setenv("spotify_clientID", "test_client_id")
        monkeypatch.delenv("spotify_secret", raising=False)
        monkeypatch.delenv("spotify_state", raising=False)

        with pytest.raises(ValueError) as exc_info:
            Settings().validate()

        assert "spotify_secret" in str(exc_info.value)
        assert "spotify_state" in str(exc_info.value)
        assert "spotify_clientID" not in str(exc_info.value)

    def test_auth_from_settings(self, test_settings):
        """Test that settings produce a consistent authorization URL."""
        auth = SpotifyAuth(
            client_id=test_settings.SPOTIFY_CLIENT_ID,
            client_secret=test_settings.SPOTIFY_CLIENT_SECRET,
            redirect_uri=test_settings.redirect_uri,
            scopes=test_settings.SCOPES
        )
        url = auth.authorization_url(test_settings.SPOTIFY_STATE)

        assert "state=test_state" in url
        assert "user-top-read" in url

    def test_service_construction(self, mock_spotify_client, test_settings):
        """Test creating the playlist service."""
        service = TopTracksPlaylistService(mock_spotify_client, test_settings)
        assert service.client is mock_spotify_client
        assert service.settings is test_settings
