"""
Playlist name matching for the automated "Favorite * Term Tracks" playlists.
"""

import re
from typing import Dict, Optional

from top_tracks.models.playlist import TimeRange

SHORT_TERM_RE = re.compile(r"^Favorite Short Term Tracks$")
MEDIUM_TERM_RE = re.compile(r"^Favorite Medium Term Tracks$")
LONG_TERM_RE = re.compile(r"^Favorite Long Term Tracks$")
FAVORITE_PLAYLIST_RE = re.compile(r"^Favorite (Short|Medium|Long) Term Tracks$")

TIME_RANGE_PATTERNS: Dict[TimeRange, re.Pattern] = {
    TimeRange.SHORT_TERM: SHORT_TERM_RE,
    TimeRange.MEDIUM_TERM: MEDIUM_TERM_RE,
    TimeRange.LONG_TERM: LONG_TERM_RE,
}

def is_automated_playlist(name: Optional[str]) -> bool:
    """Check whether a playlist name is one of the three automated playlists."""
    if not name:
        return False
    return FAVORITE_PLAYLIST_RE.fullmatch(name) is not None

def time_range_for_name(name: Optional[str]) -> Optional[TimeRange]:
    """Get the time range an automated playlist is filled from, None for other playlists."""
    if not name:
        return None
    for time_range, pattern in TIME_RANGE_PATTERNS.items():
        if pattern.fullmatch(name):
            return time_range
    return None
