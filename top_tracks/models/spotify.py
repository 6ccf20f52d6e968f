"""
Pydantic models mirroring the Spotify Web API JSON objects used by the CLI.
Unknown fields in API responses are ignored.
"""

from typing import List, Optional
from pydantic import BaseModel

class User(BaseModel):
    """Public or private user object returned by /me."""
    id: str
    display_name: Optional[str] = None

class Artist(BaseModel):
    """Simplified artist object."""
    id: Optional[str] = None
    name: str = ""

class Track(BaseModel):
    """Full track object. Local files have no id."""
    id: Optional[str] = None
    name: str = ""
    artists: List[Artist] = []
    uri: Optional[str] = None

    @property
    def artist(self) -> str:
        """Primary artist name."""
        return self.artists[0].name if self.artists else ""

    @property
    def display_name(self) -> str:
        return f"{self.name} - {self.artist}"

class TracksRef(BaseModel):
    """Reference to a playlist's tracks collection."""
    href: Optional[str] = None
    total: int = 0

class SimplePlaylist(BaseModel):
    """Simplified playlist object as listed under /me/playlists."""
    id: str
    name: str
    description: Optional[str] = ""
    public: Optional[bool] = None
    collaborative: bool = False
    owner: Optional[User] = None
    tracks: Optional[TracksRef] = None

    @property
    def tracks_total(self) -> int:
        return self.tracks.total if self.tracks else 0

class PlaylistItem(BaseModel):
    """Playlist track object. The track is null when it is no longer available."""
    added_at: Optional[str] = None
    track: Optional[Track] = None
