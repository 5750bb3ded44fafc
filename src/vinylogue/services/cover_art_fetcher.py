"""
Cover art fetching service for retrieving album artwork by URL.
"""

import logging
from io import BytesIO
from typing import Optional

import requests
from PIL import Image

from ..core.config import ARTWORK_CONFIG

logger = logging.getLogger(__name__)


class CoverArtFetcher:
    """Service for fetching album artwork."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[int] = None):
        self.session = session or requests.Session()
        self.timeout = timeout or ARTWORK_CONFIG["TIMEOUT"]

    def fetch_cover_art_from_url(self, url: Optional[str]) -> Optional[bytes]:
        """
        Fetch cover art bytes from a URL.

        Args:
            url: URL to fetch cover art from

        Returns:
            Cover art data as bytes, or None if failed
        """
        if not url:
            return None

        try:
            headers = {
                'User-Agent': ARTWORK_CONFIG["USER_AGENT"]
            }
            response = self.session.get(url, headers=headers, timeout=self.timeout)

            if response.status_code == 200 and response.content:
                logger.debug(f"Fetched cover art from URL ({len(response.content)} bytes)")
                return response.content
            logger.warning(f"Failed to fetch cover art from URL: HTTP {response.status_code}")
        except requests.exceptions.RequestException as e:
            logger.warning(f"Error fetching cover art from URL: {e}")

        return None

    def fetch_image(self, url: Optional[str]) -> Optional[Image.Image]:
        """
        Fetch and decode cover art.

        Returns:
            RGBA image, or None when the art is missing, unreachable or not an image
        """
        data = self.fetch_cover_art_from_url(url)
        if data is None:
            return None

        try:
            image = Image.open(BytesIO(data))
            image.load()
            return image.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.warning(f"Could not decode cover art: {e}")
            return None
