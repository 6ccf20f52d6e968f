"""
Top tracks playlist service.
Finds or creates the automated "Favorite * Term Tracks" playlists, fills them with
the user's top tracks and purges them.
"""

import asyncio
import logging
from typing import Dict, List

import backoff

from config.settings import Settings
from top_tracks.api.base_client import APIError
from top_tracks.api.spotify_client import SpotifyClient
from top_tracks.models.playlist import PlaylistConfig, TimeRange
from top_tracks.models.spotify import SimplePlaylist, Track, User
from top_tracks.utils.matchers import is_automated_playlist, time_range_for_name

logger = logging.getLogger(__name__)

def _log_retry(details):
    logger.warning(
        f"Adding track failed, retrying in {details['wait']:.1f}s "
        f"(attempt {details['tries']}): {details.get('exception')}"
    )

class TopTracksPlaylistService:
    """Service keeping the automated playlists in sync with the user's top tracks."""

    def __init__(self, client: SpotifyClient, settings: Settings):
        """
        Initialize the playlist service.

        Args:
            client: Spotify client authenticated as the playlists' owner
            settings: Application settings (page size, retry and playlist defaults)
        """
        self.client = client
        self.settings = settings

    async def get_current_playlists(self) -> List[SimplePlaylist]:
        """Get all playlists of the current user."""
        return await self.client.current_users_playlists(limit=self.settings.spotify.page_size)

    async def get_automated_playlists(self, user: User, playlists: List[SimplePlaylist]) -> List[SimplePlaylist]:
        """
        Pick the automated playlists out of the user's playlists, creating any that are missing.

        Args:
            user: Owner used when a playlist has to be created
            playlists: The user's current playlists

        Returns:
            One playlist per time range
        """
        found = [playlist for playlist in playlists if is_automated_playlist(playlist.name)]
        found_names = {playlist.name for playlist in found}

        defaults = self.settings.playlist
        for time_range in TimeRange:
            name = time_range.playlist_name
            if name in found_names:
                continue
            logger.info(f"Creating missing playlist '{name}' for user {user.id}")
            try:
                created = await self.client.create_playlist_for_user(
                    user.id, name, defaults.description, defaults.public, defaults.collaborative
                )
            except APIError as e:
                raise APIError(f"unable to create playlist '{name}' for user {user.id}: {e}", status=e.status) from e
            found.append(created)
            found_names.add(name)

        return found

    def build_playlist_configs(self, user: User, playlists: List[SimplePlaylist]) -> Dict[TimeRange, PlaylistConfig]:
        """Map each time range to the config of its automated playlist."""
        configs = {}
        for playlist in playlists:
            time_range = time_range_for_name(playlist.name)
            if time_range is not None:
                configs[time_range] = PlaylistConfig.from_playlist(playlist, time_range, user)
        return configs

    async def get_top_tracks(self, config: PlaylistConfig) -> List[Track]:
        """Get the user's top tracks for the config's time range."""
        try:
            return await self.client.current_users_top_tracks(
                config.time_range, limit=self.settings.spotify.page_size
            )
        except APIError as e:
            raise APIError(f"unable to retrieve users top tracks: {e}", status=e.status) from e

    async def fill_playlist(self, playlist_id: str, tracks: List[Track]) -> int:
        """
        Add tracks to a playlist one request per track, in order.

        Each request is retried with exponential backoff until it succeeds, unless
        a maximum retry time is configured.

        Returns:
            Number of tracks added
        """
        retry = self.settings.retry
        add_track = backoff.on_exception(
            backoff.expo,
            APIError,
            max_tries=None,
            max_time=retry.max_time,
            on_backoff=_log_retry,
            factor=retry.factor,
            max_value=retry.max_value
        )(self.client.add_tracks_to_playlist)

        added = 0
        for track in tracks:
            if not track.id:
                logger.warning(f"Skipping track without an id: {track.display_name}")
                continue
            await add_track(playlist_id, track.id)
            added += 1
        return added

    async def get_top_tracks_and_fill(self, config: PlaylistConfig) -> int:
        """Fetch the top tracks for one time range and append them to its playlist."""
        if not config.is_populated:
            raise ValueError(f"Playlist config for '{config.name or config.time_range}' is not populated")

        tracks = await self.get_top_tracks(config)
        logger.info(f"Filling '{config.name}' with {len(tracks)} {config.time_range.value} tracks")
        added = await self.fill_playlist(config.id, tracks)
        print(f"📀 Added {added} tracks to '{config.name}'")
        return added

    async def fill_all(self, user: User) -> Dict[TimeRange, int]:
        """
        Fill every automated playlist concurrently.

        The first failing pipeline cancels the others, which are awaited before
        the error propagates.

        Returns:
            Number of tracks added per time range
        """
        playlists = await self.get_current_playlists()
        automated = await self.get_automated_playlists(user, playlists)
        configs = self.build_playlist_configs(user, automated)

        time_ranges = list(TimeRange)
        tasks = [
            asyncio.ensure_future(
                self.get_top_tracks_and_fill(configs.get(time_range, PlaylistConfig(time_range=time_range)))
            )
            for time_range in time_ranges
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return dict(zip(time_ranges, results))

    async def purge_tracks(self, playlist: SimplePlaylist) -> List[str]:
        """
        Remove every track currently in a playlist.

        Returns:
            IDs of the removed tracks
        """
        items = await self.client.get_playlist_items(playlist.id)
        track_ids = [item.track.id for item in items if item.track and item.track.id]
        if not track_ids:
            logger.info(f"Playlist '{playlist.name}' is already empty")
            return []

        await self.client.remove_tracks_from_playlist(playlist.id, *track_ids)
        return track_ids

    async def purge_all(self, user: User) -> List[str]:
        """
        Purge every automated playlist.

        A failure on one playlist does not stop the others from being purged.

        Returns:
            Names of the playlists that could not be purged
        """
        playlists = await self.get_current_playlists()
        automated = await self.get_automated_playlists(user, playlists)

        failed = []
        for playlist in automated:
            print(f"purging tracks on playlist {playlist.name}")
            try:
                removed = await self.purge_tracks(playlist)
            except APIError as e:
                logger.error(f"purging '{playlist.name}' failed: {e}")
                failed.append(playlist.name)
                continue
            logger.info(f"Removed {len(removed)} tracks from '{playlist.name}'")
        return failed

    async def list_all(self) -> List[str]:
        """Get one display line per playlist of the current user."""
        playlists = await self.get_current_playlists()
        return [f"name: {playlist.name}\tid: {playlist.id}" for playlist in playlists]
