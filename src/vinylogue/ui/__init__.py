"""
User interface modules for Vinylogue.
"""

from .cli import VinylogueCLI

__all__ = [
    'VinylogueCLI',
]
