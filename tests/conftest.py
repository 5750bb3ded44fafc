"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
from io import BytesIO
from pathlib import Path
from unittest.mock import Mock

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class FixedWidthMeasurer:
    """Every character is `advance` pixels wide, whatever the font."""

    def __init__(self, advance: float = 10.0):
        self.advance = advance
        self.calls = []

    def measure_width(self, text: str, font: str) -> float:
        self.calls.append((text, font))
        return len(text) * self.advance


def make_response(status_code: int = 200, json_data=None, content: bytes = b""):
    """Build a stand-in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.json = Mock(return_value=json_data if json_data is not None else {})
    response.content = content
    return response


def make_png(color=(255, 0, 0, 255), size=(64, 64)) -> bytes:
    """Encode a solid-color PNG."""
    from PIL import Image
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def album_payload(album_id="ok-computer", track_count=12, release_date="1997-05-21", with_image=True):
    """Spotify /albums/{id} payload."""
    names = [
        "Airbag", "Paranoid Android", "Subterranean Homesick Alien",
        "Exit Music (For a Film)", "Let Down", "Karma Police",
        "Fitter Happier", "Electioneering", "Climbing Up the Walls",
        "No Surprises", "Lucky", "The Tourist",
    ]
    return {
        "id": album_id,
        "name": "OK Computer",
        "artists": [{"name": "Radiohead"}],
        "release_date": release_date,
        "images": [{"url": "https://i.scdn.co/image/ok-computer"}] if with_image else [],
        "external_urls": {"spotify": f"https://open.spotify.com/album/{album_id}"},
        "tracks": {
            "items": [
                {
                    "name": names[i % len(names)],
                    "duration_ms": 200000 + i * 1000,
                    "track_number": i + 1,
                    "preview_url": None,
                }
                for i in range(track_count)
            ],
            "next": None,
        },
    }


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    """Fake text measurer with a 10px advance."""
    return FixedWidthMeasurer()


@pytest.fixture
def mock_session():
    """Mock requests.Session shared by the token manager and gateway."""
    session = Mock()
    session.get = Mock()
    session.post = Mock()
    return session


@pytest.fixture
def mock_token_manager():
    """Token manager that always hands out the same token."""
    manager = Mock()
    manager.get_token = Mock(return_value="test-token")
    manager.invalidate = Mock()
    return manager


@pytest.fixture
def sample_album_record():
    """OK Computer with 12 tracks."""
    from vinylogue.models.records import AlbumRecord, TrackRecord
    payload = album_payload()
    return AlbumRecord(
        title=payload["name"],
        artist_names=("Radiohead",),
        release_date=payload["release_date"],
        canonical_url=payload["external_urls"]["spotify"],
        tracks=tuple(
            TrackRecord(
                name=item["name"],
                duration_ms=item["duration_ms"],
                track_number=item["track_number"],
            )
            for item in payload["tracks"]["items"]
        ),
        cover_image_url=payload["images"][0]["url"],
        album_id=payload["id"],
    )


@pytest.fixture
def red_png() -> bytes:
    return make_png()
