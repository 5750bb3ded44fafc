"""
Configuration for Vinylogue.
Contains all constants, settings, and global parameters.
"""

import os

# Project Information
PROJECT_NAME = "Vinylogue"
PROJECT_VERSION = "1.0.0"
PROJECT_DESCRIPTION = "Album Card Generator - Search Spotify and render shareable album cards"

# Spotify Configuration
SPOTIFY_CONFIG = {
    "BASE_URL": "https://api.spotify.com/v1",
    "AUTH_URL": "https://accounts.spotify.com/api/token",
    "CLIENT_ID": os.getenv("SPOTIFY_CLIENT_ID"),
    "CLIENT_SECRET": os.getenv("SPOTIFY_CLIENT_SECRET"),
    "TIMEOUT": 30,
    "MARKET": "US",
    "SEARCH_LIMIT": 8,
    "TOP_TRACKS_LIMIT": 5,
    "TOP_ALBUMS_LIMIT": 4,
    "RELATED_ARTISTS_LIMIT": 4,
}

# Credential lifecycle
TOKEN_CONFIG = {
    "SKEW_SECONDS": 10,  # Never hand out a token this close to expiry
    "MAX_RETRIES": 3,
    "RETRY_DELAY": 1.0,  # Linear backoff: attempt * RETRY_DELAY
}

# Card layout. These numbers are part of the image contract: documents that
# embed a card rely on the exact 1200x630 geometry.
CARD_CONFIG = {
    "WIDTH": 1200,
    "HEIGHT": 630,
    "PADDING": 40,
    "ART_SIZE": 250,
    "PANEL_RADIUS": 20,
    "ART_RADIUS": 12,
    "SHADOW_BLUR": 30,
    "SHADOW_OFFSET_Y": 15,
    "TITLE_LINE_HEIGHT": 56,
    "ARTIST_GAP": 40,
    "SECTION_GAP": 56,
    "TRACK_ROW_HEIGHT": 44,
    "TRACK_BASELINE": 24,
    "TRACK_NAME_OFFSET": 48,
    "DURATION_COLUMN": 160,
    "MAX_TRACKS": 4,
    "LOGO_SIZE": 24,
    "PLAY_LABEL": "Play on Spotify",
    "WATERMARK": "Generated by Vinylogue",
    "ELLIPSIS": "…",
    "FONT_PATH": os.getenv("VINYLOGUE_FONT_PATH"),
    "BOLD_FONT_PATH": os.getenv("VINYLOGUE_BOLD_FONT_PATH"),
    "FONT_SIZES": {
        "title": 48,
        "artist": 32,
        "release": 24,
        "track_number": 20,
        "track_name": 24,
        "duration": 20,
        "play_label": 20,
        "watermark": 18,
    },
}

# RGBA colors used on the card
COLORS = {
    "CARD": (39, 39, 42, 242),
    "PRIMARY": (34, 197, 94, 255),
    "TEXT": (255, 255, 255, 255),
    "TEXT_SECONDARY": (161, 161, 170, 255),
    "TEXT_TERTIARY": (113, 113, 122, 255),
    "SHADOW": (0, 0, 0, 102),
    "LOGO_MARK": (0, 0, 0, 255),
}

# Artwork fetching
ARTWORK_CONFIG = {
    "TIMEOUT": 15,
    "USER_AGENT": f"{PROJECT_NAME}/{PROJECT_VERSION}",
}

# Logging Configuration
LOGGING_CONFIG = {
    "LEVEL": os.getenv("VINYLOGUE_LOG_LEVEL", "INFO").upper(),
    "FORMAT": "%(levelname)s - %(name)s - %(message)s",
}

# Error Messages
ERROR_MESSAGES = {
    "INVALID_QUERY": "Search query is empty after removing unsupported characters.",
    "ALBUM_NOT_FOUND": "Album not found: {album} by {artist}",
    "ARTIST_NOT_FOUND": "Artist not found: {artist}",
    "AUTH_FAILED": "Could not obtain a Spotify access token after {attempts} attempts.",
    "UPSTREAM_FAILED": "Spotify API error: {status} on {path}",
    "UNAUTHORIZED_TWICE": "Spotify API rejected a freshly issued token on {path}",
    "MISSING_CREDENTIALS": "Spotify credentials are not configured. Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET.",
    "RENDER_FAILED": "Failed to render album card.",
}
