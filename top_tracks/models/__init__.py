"""Data models for the top tracks playlist CLI."""

from .spotify import User, Artist, Track, SimplePlaylist, PlaylistItem
from .playlist import PlaylistConfig, TimeRange

__all__ = [
    'User',
    'Artist',
    'Track',
    'SimplePlaylist',
    'PlaylistItem',
    'PlaylistConfig',
    'TimeRange'
]
