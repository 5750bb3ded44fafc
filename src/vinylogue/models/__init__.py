"""
Data models for Vinylogue.
"""

from .records import (
    Credential,
    TrackRecord,
    AlbumRecord,
    ArtistTrack,
    ArtistAlbum,
    RelatedArtist,
    ArtistRecord,
    SearchResult,
)

__all__ = [
    'Credential',
    'TrackRecord',
    'AlbumRecord',
    'ArtistTrack',
    'ArtistAlbum',
    'RelatedArtist',
    'ArtistRecord',
    'SearchResult',
]
