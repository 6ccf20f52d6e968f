"""Utility modules for the top tracks playlist CLI."""

from .matchers import (
    FAVORITE_PLAYLIST_RE,
    SHORT_TERM_RE,
    MEDIUM_TERM_RE,
    LONG_TERM_RE,
    is_automated_playlist,
    time_range_for_name
)

__all__ = [
    'FAVORITE_PLAYLIST_RE',
    'SHORT_TERM_RE',
    'MEDIUM_TERM_RE',
    'LONG_TERM_RE',
    'is_automated_playlist',
    'time_range_for_name'
]
