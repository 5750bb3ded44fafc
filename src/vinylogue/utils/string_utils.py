"""
String utility functions for query sanitization and display formatting.
"""

import unicodedata
from typing import Optional


def _is_query_char(char: str) -> bool:
    """Letters, digits and whitespace survive sanitization."""
    if char.isspace():
        return True
    return unicodedata.category(char)[0] in ("L", "N")


def sanitize_query(s: Optional[str]) -> str:
    """
    Strip a free-text search query down to letters, digits and single spaces.

    Args:
        s: Raw user input

    Returns:
        Sanitized query, possibly empty
    """
    if not s:
        return ""
    kept = "".join(char for char in s if _is_query_char(char))
    return " ".join(kept.split())


def format_duration(duration_ms: int) -> str:
    """Format milliseconds as M:SS (minutes unpadded, seconds floored)."""
    minutes = duration_ms // 60000
    seconds = (duration_ms % 60000) // 1000
    return f"{minutes}:{seconds:02d}"


def extract_year(release_date: Optional[str]) -> Optional[int]:
    """Extract the calendar year from a YYYY, YYYY-MM or YYYY-MM-DD string."""
    if not release_date or release_date.strip() == "":
        return None
    year_part = release_date.strip()[:4]
    return int(year_part) if len(year_part) == 4 and year_part.isdigit() else None
