"""
Playlist configuration model binding an automated playlist to a top-tracks time range.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .spotify import SimplePlaylist, User

class TimeRange(str, Enum):
    """Time windows over which Spotify computes a user's top tracks."""
    SHORT_TERM = "short_term"    # ~4 weeks
    MEDIUM_TERM = "medium_term"  # ~6 months
    LONG_TERM = "long_term"      # ~1 year

    @property
    def playlist_name(self) -> str:
        """Name of the automated playlist filled from this time range."""
        label = self.value.split("_")[0].title()
        return f"Favorite {label} Term Tracks"

@dataclass
class PlaylistConfig:
    """Everything needed to fill one automated playlist."""
    name: str = ""
    public: bool = False
    description: str = ""
    collaborative: bool = False
    time_range: Optional[TimeRange] = None
    user: Optional[User] = None
    id: Optional[str] = None

    @property
    def is_populated(self) -> bool:
        return bool(self.id and self.time_range and self.user)

    @classmethod
    def from_playlist(cls, playlist: SimplePlaylist, time_range: TimeRange, user: User) -> 'PlaylistConfig':
        """Create a config from a playlist returned by the API."""
        return cls(
            name=playlist.name,
            public=bool(playlist.public),
            description=playlist.description or "",
            collaborative=playlist.collaborative,
            time_range=time_range,
            user=user,
            id=playlist.id
        )
