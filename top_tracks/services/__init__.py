"""Core services for authentication and playlist synchronization."""

from .callback_server import CallbackServer, authenticate, open_browser
from .playlist_service import TopTracksPlaylistService

__all__ = [
    'CallbackServer',
    'authenticate',
    'open_browser',
    'TopTracksPlaylistService'
]
