"""
Spotify Web API client implementation.
Provides the user-scoped calls needed to read top tracks and manage playlists.
"""

import logging
from typing import Dict, Any, List, Optional

from top_tracks.api.auth import SpotifyAuth, Token
from top_tracks.api.base_client import BaseAPIClient, AuthenticationError
from top_tracks.models.playlist import TimeRange
from top_tracks.models.spotify import PlaylistItem, SimplePlaylist, Track, User

logger = logging.getLogger(__name__)

# Maximum number of tracks accepted by a single add/remove request
MAX_TRACKS_PER_REQUEST = 100

def track_uri(track_id: str) -> str:
    """Convert a Spotify track ID to its URI form."""
    if track_id.startswith("spotify:"):
        return track_id
    return f"spotify:track:{track_id}"

class SpotifyClient(BaseAPIClient):
    """Spotify Web API client authenticated as a single user."""

    def __init__(
        self,
        auth: SpotifyAuth,
        token: Token,
        base_url: str = "https://api.spotify.com/v1",
        timeout: int = 30
    ):
        """
        Initialize Spotify client.

        Args:
            auth: Authenticator used to refresh the token when it expires
            token: User access token obtained through the OAuth flow
            base_url: Base URL of the Web API
            timeout: Total timeout in seconds for a single request
        """
        super().__init__(base_url=base_url, timeout=timeout)
        self.auth = auth
        self.token = token

    async def _get_auth_headers(self) -> Dict[str, str]:
        """Get bearer headers, refreshing the token if necessary."""
        if self.token is None:
            raise AuthenticationError("User not authenticated")

        if self.token.expired and self.token.refresh_token:
            await self._ensure_session()
            logger.info("Access token expired, refreshing")
            self.token = await self.auth.refresh(self.session, self.token)

        return {"Authorization": f"Bearer {self.token.access_token}"}

    async def _get_all_pages(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Follow 'next' links of a paging object and concatenate the items."""
        items = []
        next_url: Optional[str] = endpoint
        while next_url:
            page = await self._make_request("GET", next_url, params=params)
            items.extend(page.get("items", []))
            next_url = page.get("next")
            # The next link already carries limit/offset
            params = None
        return items

    async def current_user(self) -> User:
        """Get the profile of the authenticated user."""
        result = await self._make_request("GET", "me")
        return User.model_validate(result)

    async def current_users_playlists(self, limit: int = 50) -> List[SimplePlaylist]:
        """
        Get the playlists owned or followed by the current user.

        Args:
            limit: Page size (1-50)

        Returns:
            All of the user's playlists, in the order the API lists them
        """
        items = await self._get_all_pages("me/playlists", params={"limit": min(limit, 50)})
        return [SimplePlaylist.model_validate(item) for item in items if item]

    async def create_playlist_for_user(
        self,
        user_id: str,
        name: str,
        description: str = "",
        public: bool = False,
        collaborative: bool = False
    ) -> SimplePlaylist:
        """
        Create a new playlist on a user's account.

        Args:
            user_id: Owner of the new playlist
            name: Playlist name
            description: Playlist description
            public: Whether playlist should be public
            collaborative: Whether other users may modify the playlist

        Returns:
            The created playlist
        """
        data = {
            "name": name,
            "description": description,
            "public": public,
            "collaborative": collaborative
        }
        result = await self._make_request("POST", f"users/{user_id}/playlists", data=data)
        return SimplePlaylist.model_validate(result)

    async def current_users_top_tracks(self, time_range: TimeRange, limit: int = 50) -> List[Track]:
        """Get the current user's top tracks over a time range."""
        params = {"time_range": TimeRange(time_range).value, "limit": min(limit, 50)}
        result = await self._make_request("GET", "me/top/tracks", params=params)
        return [Track.model_validate(item) for item in result.get("items", [])]

    async def add_tracks_to_playlist(self, playlist_id: str, *track_ids: str) -> Optional[str]:
        """
        Add tracks to the end of a playlist.

        Returns:
            Snapshot ID of the modified playlist
        """
        data = {"uris": [track_uri(track_id) for track_id in track_ids]}
        result = await self._make_request("POST", f"playlists/{playlist_id}/tracks", data=data)
        return result.get("snapshot_id")

    async def get_playlist_items(self, playlist_id: str, limit: int = 100) -> List[PlaylistItem]:
        """Get every item of a playlist."""
        items = await self._get_all_pages(f"playlists/{playlist_id}/tracks", params={"limit": min(limit, 100)})
        return [PlaylistItem.model_validate(item) for item in items]

    async def remove_tracks_from_playlist(self, playlist_id: str, *track_ids: str) -> Optional[str]:
        """
        Remove all occurrences of the given tracks from a playlist.

        Returns:
            Snapshot ID after the last removal, None when nothing was removed
        """
        snapshot_id = None
        uris = [track_uri(track_id) for track_id in track_ids]
        for i in range(0, len(uris), MAX_TRACKS_PER_REQUEST):
            batch = uris[i:i + MAX_TRACKS_PER_REQUEST]
            data = {"tracks": [{"uri": uri} for uri in batch]}
            result = await self._make_request("DELETE", f"playlists/{playlist_id}/tracks", data=data)
            snapshot_id = result.get("snapshot_id", snapshot_id)
        return snapshot_id
