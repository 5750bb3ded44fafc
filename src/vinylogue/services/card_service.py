"""
Card service: resolves an album and renders its card.
"""

import logging
from typing import List, Optional

from ..clients.spotify import SpotifyGateway
from ..models.records import AlbumRecord, ArtistRecord, SearchResult
from .card_renderer import CardRenderer

logger = logging.getLogger(__name__)


class CardService:
    """
    Sequences the gateway and the renderer.

    Errors from either side propagate unchanged; retries belong to the
    gateway.
    """

    def __init__(self, gateway: Optional[SpotifyGateway] = None, renderer: Optional[CardRenderer] = None):
        self.gateway = gateway or SpotifyGateway()
        self.renderer = renderer or CardRenderer()

    def generate_album_card(self, artist: str, album: str) -> bytes:
        """Return PNG bytes of the card for the best match of artist/album."""
        record = self.gateway.resolve_album(artist, album)
        return self.render_album(record)

    def render_album(self, record: AlbumRecord) -> bytes:
        image = self.renderer.render(record)
        logger.info(f"Rendered card for {record.title!r} ({len(image)} bytes)")
        return image

    def describe_artist(self, artist: str) -> ArtistRecord:
        return self.gateway.resolve_artist(artist)

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        return self.gateway.search(query, limit)
