#!/usr/bin/env python3
"""
Top Tracks Playlist CLI
Keeps three playlists of the user's recent top tracks in sync.

Usage:
    python main.py playlist --fill       # Fills up the 'Favorite * Term Tracks' playlists
    python main.py playlist --purge_fav  # Purges songs from the 'Favorite * Term Tracks' playlists
    python main.py playlist --list_all   # Lists all the user's playlists
"""

import sys
import time
import asyncio
import logging
import argparse

from config.settings import Settings
from top_tracks.api.base_client import APIError
from top_tracks.services.callback_server import authenticate
from top_tracks.services.playlist_service import TopTracksPlaylistService

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(description='Generate playlists of your recent Spotify top tracks')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    playlist_parser = subparsers.add_parser(
        'playlist', help='Manage the automated top tracks playlists', allow_abbrev=False
    )
    playlist_parser.add_argument('--list_all', action='store_true', help='list all playlists for current user')
    playlist_parser.add_argument('--purge_fav', action='store_true', help='purge all tracks in "Favorite short/med/long Term Tracks"')
    playlist_parser.add_argument('--fill', action='store_true', help='fill playlists with favorite tracks')

    return parser

def format_elapsed(seconds: float) -> str:
    """Format elapsed wall time truncated to milliseconds, e.g. 42ms, 3.5s, 1m15s."""
    millis = int(seconds * 1000)
    if millis == 0:
        return "0s"
    if millis < 1000:
        return f"{millis}ms"

    hours, millis = divmod(millis, 3600000)
    minutes, millis = divmod(millis, 60000)
    secs, millis = divmod(millis, 1000)
    fraction = f"{millis:03d}".rstrip("0")
    text = f"{secs}.{fraction}s" if fraction else f"{secs}s"

    if hours:
        return f"{hours}h{minutes}m{text}"
    if minutes:
        return f"{minutes}m{text}"
    return text

async def run_playlist_command(args, settings: Settings) -> int:
    """Authenticate, then run the selected playlist operations in order."""
    client = await authenticate(settings)

    async with client:
        user = await client.current_user()
        print(f"You are logged in as: {user.id}")

        service = TopTracksPlaylistService(client, settings)

        if args.list_all:
            print(f"Printing all current playlists for user: {user.id}")
            for line in await service.list_all():
                print(line)

        if args.purge_fav:
            print("Purging tracks from the automated playlists")
            failed = await service.purge_all(user)
            for name in failed:
                print(f"❌ purging tracks on playlist {name} failed")

        if args.fill:
            added = await service.fill_all(user)
            total = sum(added.values())
            print(f"🎵 Added {total} tracks across {len(added)} playlists")

    return 0

def main(argv=None) -> int:
    """Main entry point with command line argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != 'playlist':
        parser.print_help()
        return 2

    settings = Settings()
    logging.basicConfig(level=settings.log_level, format=settings.log_format)

    try:
        settings.validate()
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    start = time.monotonic()
    try:
        exit_code = asyncio.run(run_playlist_command(args, settings))
    except (APIError, ValueError) as e:
        logger.error(f"{e}")
        print(f"❌ {e}")
        return 1

    print(f"Done! Completed in {format_elapsed(time.monotonic() - start)}")
    return exit_code

if __name__ == "__main__":
    sys.exit(main())
