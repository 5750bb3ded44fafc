"""
Client modules for external APIs.
"""

from .spotify import SpotifyGateway
from .token_manager import TokenManager

__all__ = [
    'SpotifyGateway',
    'TokenManager'
]
