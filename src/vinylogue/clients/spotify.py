"""
Spotify Client Module
Gateway to the Spotify Web API: turns free-text artist and album names into
album and artist records.
"""

import concurrent.futures
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from ..core.config import SPOTIFY_CONFIG, ERROR_MESSAGES
from ..core.exceptions import (
    InvalidInputError,
    NotFoundError,
    UpstreamError,
)
from ..models.records import (
    AlbumRecord,
    ArtistAlbum,
    ArtistRecord,
    ArtistTrack,
    RelatedArtist,
    SearchResult,
    TrackRecord,
)
from ..utils.string_utils import sanitize_query
from .token_manager import TokenManager

logger = logging.getLogger(__name__)

# A 401 earns exactly one retry with a fresh token
AUTH_ATTEMPTS = 2


def _first_image_url(images: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    """Spotify lists images largest first."""
    if not images:
        return None
    return images[0].get("url")


class SpotifyGateway:
    """Spotify Web API gateway for album and artist lookups."""

    def __init__(
        self,
        token_manager: Optional[TokenManager] = None,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        market: Optional[str] = None,
    ):
        self.session = session or requests.Session()
        self.token_manager = token_manager or TokenManager(session=self.session)
        self.base_url = base_url or SPOTIFY_CONFIG["BASE_URL"]
        self.timeout = timeout or SPOTIFY_CONFIG["TIMEOUT"]
        self.market = market or SPOTIFY_CONFIG["MARKET"]

    def _get_headers(self, token: str) -> Dict[str, str]:
        """Get headers for API requests."""
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a Spotify resource as JSON.

        A 401 invalidates the cached token and the same call is retried once
        with a fresh one; a second 401 is reported as an upstream failure.

        Args:
            path: API path (``/albums/{id}``) or an absolute ``next`` URL
            params: Query parameters

        Raises:
            UpstreamError: On transport failures and non-2xx responses
            AuthFailure: If no token could be obtained
        """
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        display_path = url.split("?", 1)[0]

        for attempt in range(1, AUTH_ATTEMPTS + 1):
            token = self.token_manager.get_token()
            try:
                response = self.session.get(
                    url,
                    headers=self._get_headers(token),
                    params=params,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                raise UpstreamError(f"Spotify request to {display_path} failed: {e}") from e

            if response.status_code == 401:
                if attempt < AUTH_ATTEMPTS:
                    logger.info(f"Spotify rejected token on {display_path}, refreshing and retrying")
                    self.token_manager.invalidate(token)
                    continue
                raise UpstreamError(
                    ERROR_MESSAGES["UNAUTHORIZED_TWICE"].format(path=display_path),
                    status_code=401
                )

            if not 200 <= response.status_code < 300:
                raise UpstreamError(
                    ERROR_MESSAGES["UPSTREAM_FAILED"].format(status=response.status_code, path=display_path),
                    status_code=response.status_code
                )

            try:
                return response.json()
            except ValueError as e:
                raise UpstreamError(f"Spotify returned invalid JSON for {display_path}") from e

        # Should never reach here, but just in case
        raise UpstreamError(ERROR_MESSAGES["UNAUTHORIZED_TWICE"].format(path=display_path), status_code=401)

    def _search_items(self, query: str, search_type: str, limit: int) -> List[Dict[str, Any]]:
        """Run a single-type search and return the raw items."""
        payload = self._request("/search", {"q": query, "type": search_type, "limit": limit})
        items = (payload.get(f"{search_type}s") or {}).get("items") or []
        return [item for item in items if item]

    def resolve_album(self, artist: str, album: str) -> AlbumRecord:
        """
        Find the best matching album for free-text artist and album names.

        The first search hit is taken as-is; relevance is entirely up to
        Spotify's ranking.

        Raises:
            InvalidInputError: If either name is empty after sanitization
            NotFoundError: If the search returns nothing
            UpstreamError: On any other API failure
        """
        clean_artist = sanitize_query(artist)
        clean_album = sanitize_query(album)
        if not clean_artist or not clean_album:
            raise InvalidInputError(ERROR_MESSAGES["INVALID_QUERY"])

        query = f"{clean_album} artist:{clean_artist}"
        logger.debug(f"Searching Spotify albums for {query!r}")
        items = self._search_items(query, "album", 1)
        if not items:
            raise NotFoundError(ERROR_MESSAGES["ALBUM_NOT_FOUND"].format(album=album, artist=artist))

        album_id = items[0]["id"]
        album_data = self._request(f"/albums/{album_id}")
        try:
            record = self._parse_album(album_data)
        except (AttributeError, TypeError, ValueError) as e:
            raise UpstreamError(f"Spotify returned malformed album data for {album_id}: {e}") from e
        logger.info(f"Resolved album {record.title!r} by {record.artist_display} ({record.track_count} tracks)")
        return record

    def _parse_album(self, album_data: Dict[str, Any]) -> AlbumRecord:
        """Build an AlbumRecord, following track pagination."""
        album_id = album_data.get("id", "")
        tracks: List[TrackRecord] = []

        page = album_data.get("tracks") or {}
        while True:
            for item in page.get("items") or []:
                if not item:
                    continue
                tracks.append(TrackRecord(
                    name=item.get("name", "Unknown"),
                    duration_ms=int(item.get("duration_ms") or 0),
                    track_number=int(item.get("track_number") or len(tracks) + 1),
                    preview_url=item.get("preview_url"),
                ))
            next_url = page.get("next")
            if not next_url:
                break
            page = self._request(next_url)

        external_urls = album_data.get("external_urls") or {}
        return AlbumRecord(
            title=album_data.get("name", "Unknown Album"),
            artist_names=tuple(a.get("name", "Unknown Artist") for a in album_data.get("artists") or []),
            release_date=album_data.get("release_date") or "",
            canonical_url=external_urls.get("spotify") or f"https://open.spotify.com/album/{album_id}",
            tracks=tuple(tracks),
            cover_image_url=_first_image_url(album_data.get("images")),
            album_id=album_id,
        )

    def resolve_artist(self, artist: str) -> ArtistRecord:
        """
        Find an artist and enrich it with top tracks, albums and related artists.

        The three enrichment calls run concurrently; each one that fails
        leaves its field empty instead of failing the lookup.

        Raises:
            InvalidInputError: If the name is empty after sanitization
            NotFoundError: If the search returns nothing
            UpstreamError: On any failure of the search itself
        """
        clean_artist = sanitize_query(artist)
        if not clean_artist:
            raise InvalidInputError(ERROR_MESSAGES["INVALID_QUERY"])

        items = self._search_items(clean_artist, "artist", 1)
        if not items:
            raise NotFoundError(ERROR_MESSAGES["ARTIST_NOT_FOUND"].format(artist=artist))

        artist_data = items[0]
        artist_id = artist_data["id"]

        with concurrent.futures.ThreadPoolExecutor(max_workers=3) as executor:
            top_tracks_future = executor.submit(self._optional, "top tracks", self._fetch_top_tracks, artist_id)
            albums_future = executor.submit(self._optional, "albums", self._fetch_top_albums, artist_id)
            related_future = executor.submit(self._optional, "related artists", self._fetch_related_artists, artist_id)

            top_tracks = top_tracks_future.result()
            top_albums = albums_future.result()
            related_artists = related_future.result()

        external_urls = artist_data.get("external_urls") or {}
        return ArtistRecord(
            name=artist_data.get("name", "Unknown Artist"),
            canonical_url=external_urls.get("spotify") or f"https://open.spotify.com/artist/{artist_id}",
            image_url=_first_image_url(artist_data.get("images")),
            artist_id=artist_id,
            top_tracks=top_tracks,
            top_albums=top_albums,
            related_artists=related_artists,
        )

    def _optional(self, label: str, fetch: Callable[[str], Tuple], artist_id: str) -> Tuple:
        """Run an enrichment fetch, degrading any failure to an empty tuple."""
        try:
            return fetch(artist_id)
        except Exception as e:
            logger.warning(f"Could not fetch {label} for artist {artist_id}: {e}")
            return ()

    def _fetch_top_tracks(self, artist_id: str) -> Tuple[ArtistTrack, ...]:
        data = self._request(f"/artists/{artist_id}/top-tracks", {"market": self.market})
        tracks = (data.get("tracks") or [])[:SPOTIFY_CONFIG["TOP_TRACKS_LIMIT"]]
        return tuple(
            ArtistTrack(
                name=track.get("name", "Unknown"),
                duration_ms=int(track.get("duration_ms") or 0),
                album_name=(track.get("album") or {}).get("name", ""),
                preview_url=track.get("preview_url"),
            )
            for track in tracks
        )

    def _fetch_top_albums(self, artist_id: str) -> Tuple[ArtistAlbum, ...]:
        limit = SPOTIFY_CONFIG["TOP_ALBUMS_LIMIT"]
        data = self._request(
            f"/artists/{artist_id}/albums",
            {"include_groups": "album,single", "limit": limit, "market": self.market}
        )
        return tuple(
            ArtistAlbum(
                name=album.get("name", "Unknown Album"),
                release_date=album.get("release_date") or "",
                total_tracks=int(album.get("total_tracks") or 0),
                image_url=_first_image_url(album.get("images")),
            )
            for album in (data.get("items") or [])[:limit]
        )

    def _fetch_related_artists(self, artist_id: str) -> Tuple[RelatedArtist, ...]:
        data = self._request(f"/artists/{artist_id}/related-artists")
        return tuple(
            RelatedArtist(
                name=related.get("name", "Unknown Artist"),
                image_url=_first_image_url(related.get("images")),
            )
            for related in (data.get("artists") or [])[:SPOTIFY_CONFIG["RELATED_ARTISTS_LIMIT"]]
        )

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        """
        Search albums and artists at once.

        Returns:
            Albums first, then artists; empty for an empty query
        """
        clean_query = sanitize_query(query)
        if not clean_query:
            return []

        payload = self._request(
            "/search",
            {"q": clean_query, "type": "album,artist", "limit": limit or SPOTIFY_CONFIG["SEARCH_LIMIT"]}
        )

        results = []
        for album in (payload.get("albums") or {}).get("items") or []:
            if not album:
                continue
            artists = album.get("artists") or []
            results.append(SearchResult(
                result_type="album",
                item_id=album.get("id", ""),
                name=album.get("name", "Unknown Album"),
                artist=artists[0].get("name") if artists else None,
                image_url=_first_image_url(album.get("images")),
            ))
        for artist in (payload.get("artists") or {}).get("items") or []:
            if not artist:
                continue
            results.append(SearchResult(
                result_type="artist",
                item_id=artist.get("id", ""),
                name=artist.get("name", "Unknown Artist"),
                image_url=_first_image_url(artist.get("images")),
            ))
        return results
