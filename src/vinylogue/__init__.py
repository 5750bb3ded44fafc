"""
Vinylogue - search Spotify and render shareable album cards.
"""

from .core.config import PROJECT_VERSION as __version__
from .clients.spotify import SpotifyGateway
from .clients.token_manager import TokenManager
from .services.card_renderer import CardRenderer
from .services.card_service import CardService

__all__ = [
    '__version__',
    'SpotifyGateway',
    'TokenManager',
    'CardRenderer',
    'CardService',
]
