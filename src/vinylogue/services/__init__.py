"""
Service layer: card layout, rendering and orchestration.
"""

from .card_layout import CardLayout, TextItem, TrackRow, build_card_layout
from .card_renderer import CardRenderer, PillowTextMeasurer, load_fonts
from .card_service import CardService
from .cover_art_fetcher import CoverArtFetcher

__all__ = [
    'CardLayout',
    'TextItem',
    'TrackRow',
    'build_card_layout',
    'CardRenderer',
    'PillowTextMeasurer',
    'load_fonts',
    'CardService',
    'CoverArtFetcher',
]
