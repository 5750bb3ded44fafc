"""
Catalog record models.

Records are immutable value objects: the gateway builds them once and the
compositor only reads them.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..utils.string_utils import format_duration, extract_year


@dataclass(frozen=True)
class Credential:
    """Access token issued by the token exchange."""
    access_token: str
    expires_at: float  # epoch seconds

    def is_valid(self, now: float, skew: float) -> bool:
        """Whether the token may still be handed out at ``now``."""
        return bool(self.access_token) and now < self.expires_at - skew


@dataclass(frozen=True)
class TrackRecord:
    """A track on an album, in album order."""
    name: str
    duration_ms: int
    track_number: int
    preview_url: Optional[str] = None

    def __post_init__(self):
        if self.duration_ms < 0:
            raise ValueError(f"duration_ms must be non-negative, got {self.duration_ms}")
        if self.track_number < 1:
            raise ValueError(f"track_number must be positive, got {self.track_number}")

    @property
    def duration_display(self) -> str:
        return format_duration(self.duration_ms)


@dataclass(frozen=True)
class AlbumRecord:
    """Album metadata used to render a card."""
    title: str
    artist_names: Tuple[str, ...]
    release_date: str
    canonical_url: str
    tracks: Tuple[TrackRecord, ...] = ()
    cover_image_url: Optional[str] = None
    album_id: str = ""

    @property
    def release_year(self) -> Optional[int]:
        return extract_year(self.release_date)

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    @property
    def artist_display(self) -> str:
        return ", ".join(self.artist_names)


@dataclass(frozen=True)
class ArtistTrack:
    """One of an artist's top tracks."""
    name: str
    duration_ms: int
    album_name: str
    preview_url: Optional[str] = None

    @property
    def duration_display(self) -> str:
        return format_duration(self.duration_ms)


@dataclass(frozen=True)
class ArtistAlbum:
    """Album or single from an artist's discography."""
    name: str
    release_date: str
    total_tracks: int
    image_url: Optional[str] = None


@dataclass(frozen=True)
class RelatedArtist:
    """Artist the catalog considers similar."""
    name: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class ArtistRecord:
    """Artist profile with optional enrichment."""
    name: str
    canonical_url: str
    image_url: Optional[str] = None
    artist_id: str = ""
    top_tracks: Tuple[ArtistTrack, ...] = ()
    top_albums: Tuple[ArtistAlbum, ...] = ()
    related_artists: Tuple[RelatedArtist, ...] = ()


@dataclass(frozen=True)
class SearchResult:
    """Entry of a combined album/artist search."""
    result_type: str  # "album" or "artist"
    item_id: str
    name: str
    artist: Optional[str] = None
    image_url: Optional[str] = None
