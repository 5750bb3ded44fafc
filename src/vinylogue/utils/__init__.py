"""
Utility modules for Vinylogue.
"""

from .string_utils import sanitize_query, format_duration, extract_year
from .text_layout import TextMeasurer, truncate_text, wrap_text, ELLIPSIS

__all__ = [
    'sanitize_query',
    'format_duration',
    'extract_year',
    'TextMeasurer',
    'truncate_text',
    'wrap_text',
    'ELLIPSIS',
]
