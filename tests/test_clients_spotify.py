"""
Tests for the Spotify gateway.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

import requests

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vinylogue.clients.spotify import SpotifyGateway
from vinylogue.clients.token_manager import TokenManager
from vinylogue.core.exceptions import (
    AuthFailure,
    InvalidInputError,
    NotFoundError,
    UpstreamError,
)
from vinylogue.models.records import AlbumRecord, ArtistRecord
from conftest import make_response, album_payload


def search_payload(kind="albums", item_id="ok-computer", name="OK Computer"):
    return {kind: {"items": [{"id": item_id, "name": name}] if item_id else []}}


class TestResolveAlbum:
    """Tests for SpotifyGateway.resolve_album."""

    def test_resolves_album(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = [
            make_response(200, search_payload()),
            make_response(200, album_payload()),
        ]
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        record = gateway.resolve_album("Radiohead", "OK Computer")

        assert isinstance(record, AlbumRecord)
        assert record.title == "OK Computer"
        assert record.artist_names == ("Radiohead",)
        assert record.release_year == 1997
        assert record.track_count == 12
        assert [t.track_number for t in record.tracks] == list(range(1, 13))
        assert record.cover_image_url == "https://i.scdn.co/image/ok-computer"
        assert record.canonical_url == "https://open.spotify.com/album/ok-computer"

    def test_search_query_and_limit(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = [
            make_response(200, search_payload()),
            make_response(200, album_payload()),
        ]
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        gateway.resolve_album("  Guns N' Roses ", "Appetite for Destruction!")

        search_call = mock_session.get.call_args_list[0]
        assert search_call.args[0].endswith("/search")
        assert search_call.kwargs["params"] == {
            "q": "Appetite for Destruction artist:Guns N Roses",
            "type": "album",
            "limit": 1,
        }
        assert search_call.kwargs["headers"]["Authorization"] == "Bearer test-token"
        assert mock_session.get.call_args_list[1].args[0].endswith("/albums/ok-computer")

    def test_takes_first_result_unconditionally(self, mock_session, mock_token_manager):
        search = {"albums": {"items": [{"id": "first", "name": "Other"}, {"id": "second", "name": "OK Computer"}]}}
        mock_session.get.side_effect = [
            make_response(200, search),
            make_response(200, album_payload(album_id="first")),
        ]
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        record = gateway.resolve_album("Radiohead", "OK Computer")

        assert record.album_id == "first"

    @pytest.mark.parametrize("artist,album", [
        ("!!!", "OK Computer"),
        ("Radiohead", "???"),
        ("...", "---"),
        ("", ""),
    ])
    def test_invalid_input_makes_no_network_call(self, mock_session, mock_token_manager, artist, album):
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        with pytest.raises(InvalidInputError):
            gateway.resolve_album(artist, album)

        mock_session.get.assert_not_called()
        mock_token_manager.get_token.assert_not_called()

    def test_not_found(self, mock_session, mock_token_manager):
        mock_session.get.return_value = make_response(200, search_payload(item_id=None))
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        with pytest.raises(NotFoundError):
            gateway.resolve_album("Radiohead", "Nonexistent Album")
        assert mock_session.get.call_count == 1

    def test_upstream_error_on_search(self, mock_session, mock_token_manager):
        mock_session.get.return_value = make_response(500)
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        with pytest.raises(UpstreamError) as exc_info:
            gateway.resolve_album("Radiohead", "OK Computer")
        assert exc_info.value.status_code == 500
        assert "test-token" not in str(exc_info.value)

    def test_transport_error_is_upstream_error(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = requests.exceptions.Timeout("timed out")
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        with pytest.raises(UpstreamError):
            gateway.resolve_album("Radiohead", "OK Computer")

    def test_follows_track_pagination(self, mock_session, mock_token_manager):
        first = album_payload(track_count=2)
        first["tracks"]["next"] = "https://api.spotify.com/v1/albums/ok-computer/tracks?offset=2&limit=2"
        second_page = {
            "items": [{"name": "Karma Police", "duration_ms": 261000, "track_number": 3}],
            "next": None,
        }
        mock_session.get.side_effect = [
            make_response(200, search_payload()),
            make_response(200, first),
            make_response(200, second_page),
        ]
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        record = gateway.resolve_album("Radiohead", "OK Computer")

        assert [t.name for t in record.tracks] == ["Airbag", "Paranoid Android", "Karma Police"]
        assert mock_session.get.call_args_list[2].args[0] == first["tracks"]["next"]

    @pytest.mark.parametrize("bad_track", [
        {"name": "Airbag", "duration_ms": -1, "track_number": 1},
        {"name": "Airbag", "duration_ms": 284000, "track_number": -3},
        {"name": "Airbag", "duration_ms": "long", "track_number": 1},
    ])
    def test_malformed_track_is_upstream_error(self, mock_session, mock_token_manager, bad_track):
        payload = album_payload(track_count=1)
        payload["tracks"]["items"] = [bad_track]
        mock_session.get.side_effect = [
            make_response(200, search_payload()),
            make_response(200, payload),
        ]
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        with pytest.raises(UpstreamError):
            gateway.resolve_album("Radiohead", "OK Computer")

    def test_missing_artwork(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = [
            make_response(200, search_payload()),
            make_response(200, album_payload(with_image=False)),
        ]
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        assert gateway.resolve_album("Radiohead", "OK Computer").cover_image_url is None


class TestUnauthorizedRetry:
    """Tests for the single retry after a 401."""

    def _gateway(self, session):
        token_session = Mock()
        token_session.post.side_effect = [
            make_response(200, {"access_token": "token-1", "expires_in": 3600}),
            make_response(200, {"access_token": "token-2", "expires_in": 3600}),
            make_response(200, {"access_token": "token-3", "expires_in": 3600}),
        ]
        manager = TokenManager(client_id="id", client_secret="secret", session=token_session, sleep=Mock())
        return SpotifyGateway(token_manager=manager, session=session), token_session

    def test_401_then_success(self, mock_session):
        gateway, token_session = self._gateway(mock_session)
        gateway.token_manager.get_token()
        token_session.post.reset_mock()

        mock_session.get.side_effect = [
            make_response(401),
            make_response(200, search_payload()),
            make_response(200, album_payload()),
        ]

        record = gateway.resolve_album("Radiohead", "OK Computer")

        assert record.title == "OK Computer"
        assert token_session.post.call_count == 1
        search_calls = mock_session.get.call_args_list[:2]
        assert [c.kwargs["headers"]["Authorization"] for c in search_calls] == [
            "Bearer token-1",
            "Bearer token-2",
        ]

    def test_exactly_two_resource_calls(self, mock_session):
        gateway, token_session = self._gateway(mock_session)
        gateway.token_manager.get_token()
        token_session.post.reset_mock()
        mock_session.get.side_effect = [make_response(401), make_response(200, {"id": "x"})]

        assert gateway._request("/albums/x") == {"id": "x"}
        assert mock_session.get.call_count == 2
        assert token_session.post.call_count == 1

    def test_second_401_is_upstream_error(self, mock_session):
        gateway, token_session = self._gateway(mock_session)
        mock_session.get.return_value = make_response(401)

        with pytest.raises(UpstreamError) as exc_info:
            gateway._request("/albums/x")

        assert exc_info.value.status_code == 401
        assert mock_session.get.call_count == 2

    def test_auth_failure_propagates(self, mock_session):
        token_session = Mock()
        token_session.post.return_value = make_response(500)
        manager = TokenManager(client_id="id", client_secret="secret", session=token_session,
                               sleep=Mock(), max_retries=1)
        gateway = SpotifyGateway(token_manager=manager, session=mock_session)

        with pytest.raises(AuthFailure):
            gateway.resolve_album("Radiohead", "OK Computer")
        mock_session.get.assert_not_called()


class TestResolveArtist:
    """Tests for SpotifyGateway.resolve_artist."""

    ARTIST = {
        "id": "radiohead",
        "name": "Radiohead",
        "images": [{"url": "https://i.scdn.co/image/radiohead"}],
        "external_urls": {"spotify": "https://open.spotify.com/artist/radiohead"},
    }

    def _router(self, overrides=None):
        routes = {
            "/search": make_response(200, {"artists": {"items": [self.ARTIST]}}),
            "/top-tracks": make_response(200, {"tracks": [
                {"name": f"Hit {i}", "duration_ms": 240000, "album": {"name": "Album"}, "preview_url": None}
                for i in range(8)
            ]}),
            "/albums": make_response(200, {"items": [
                {"name": "In Rainbows", "release_date": "2007-10-10", "total_tracks": 10, "images": []},
            ]}),
            "/related-artists": make_response(200, {"artists": [
                {"name": f"Related {i}", "images": []} for i in range(6)
            ]}),
        }
        routes.update(overrides or {})

        def get(url, **kwargs):
            for suffix, response in routes.items():
                if url.endswith(suffix):
                    if isinstance(response, Exception):
                        raise response
                    return response
            raise AssertionError(f"unexpected url {url}")
        return get

    def test_resolves_artist_with_enrichment(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = self._router()
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        artist = gateway.resolve_artist("Radiohead")

        assert isinstance(artist, ArtistRecord)
        assert artist.name == "Radiohead"
        assert artist.image_url == "https://i.scdn.co/image/radiohead"
        assert len(artist.top_tracks) == 5
        assert artist.top_tracks[0].duration_display == "4:00"
        assert [a.name for a in artist.top_albums] == ["In Rainbows"]
        assert len(artist.related_artists) == 4

    def test_artist_search_params(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = self._router()
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        gateway.resolve_artist("Sigur Rós!")

        search_call = next(c for c in mock_session.get.call_args_list if c.args[0].endswith("/search"))
        assert search_call.kwargs["params"] == {"q": "Sigur Rós", "type": "artist", "limit": 1}

    def test_enrichment_failures_degrade_to_empty(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = self._router({
            "/top-tracks": make_response(500),
            "/related-artists": requests.exceptions.ConnectionError("reset"),
        })
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        artist = gateway.resolve_artist("Radiohead")

        assert artist.name == "Radiohead"
        assert artist.top_tracks == ()
        assert artist.related_artists == ()
        assert len(artist.top_albums) == 1

    def test_malformed_enrichment_payload_degrades_to_empty(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = self._router({
            "/top-tracks": make_response(200, {"tracks": [None]}),
            "/related-artists": make_response(200, {"artists": ["Thom Yorke"]}),
        })
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        artist = gateway.resolve_artist("Radiohead")

        assert artist.top_tracks == ()
        assert artist.related_artists == ()
        assert [a.name for a in artist.top_albums] == ["In Rainbows"]

    def test_all_enrichment_failing_still_resolves(self, mock_session, mock_token_manager):
        mock_session.get.side_effect = self._router({
            "/top-tracks": make_response(404),
            "/albums": make_response(502),
            "/related-artists": make_response(429),
        })
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        artist = gateway.resolve_artist("Radiohead")

        assert (artist.top_tracks, artist.top_albums, artist.related_artists) == ((), (), ())

    def test_not_found(self, mock_session, mock_token_manager):
        mock_session.get.return_value = make_response(200, {"artists": {"items": []}})
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        with pytest.raises(NotFoundError):
            gateway.resolve_artist("Nobody At All")

    def test_invalid_input(self, mock_session, mock_token_manager):
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        with pytest.raises(InvalidInputError):
            gateway.resolve_artist("!?!")
        mock_session.get.assert_not_called()


class TestSearch:
    """Tests for the combined album/artist search."""

    def test_albums_then_artists(self, mock_session, mock_token_manager):
        mock_session.get.return_value = make_response(200, {
            "albums": {"items": [{"id": "a1", "name": "OK Computer", "artists": [{"name": "Radiohead"}],
                                  "images": [{"url": "https://img/a1"}]}]},
            "artists": {"items": [{"id": "r1", "name": "Radiohead", "images": []}]},
        })
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        results = gateway.search("radiohead")

        assert [(r.result_type, r.name) for r in results] == [("album", "OK Computer"), ("artist", "Radiohead")]
        assert results[0].artist == "Radiohead"
        assert results[0].image_url == "https://img/a1"
        assert mock_session.get.call_args.kwargs["params"] == {"q": "radiohead", "type": "album,artist", "limit": 8}

    def test_empty_query_returns_nothing(self, mock_session, mock_token_manager):
        gateway = SpotifyGateway(token_manager=mock_token_manager, session=mock_session)

        assert gateway.search("  !! ") == []
        mock_session.get.assert_not_called()
