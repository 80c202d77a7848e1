"""Tests for Bandcamp search fan-out and fan-in."""

import asyncio

import httpx
import pytest

from playsource.domain.errors import ExtractorError, InvalidArgumentError, NoResultError
from playsource.infrastructure.connectors.bandcamp import BandcampAlbum, BandcampPlugin
from playsource.infrastructure.connectors.http import HttpSession
from tests.fixtures.pages import (
    ARTIST_ROOT,
    search_payload,
    search_result,
    track_entry,
    tralbum_data,
    tralbum_html,
)


def track_url(i: int) -> str:
    return f"{ARTIST_ROOT}/track/song-{i}"


def album_url(i: int) -> str:
    return f"{ARTIST_ROOT}/album/record-{i}"


def serve_tracks(fake, count, failing=(), pages=None):
    """Search results for `count` tracks.

    Pages fail with HTTP 500 for `failing` indexes; `pages` overrides the body
    served for an index.
    """
    fake.search = search_payload(
        [search_result("t", f"song {i}", track_url(i), item_id=i) for i in range(count)]
    )
    for i in range(count):
        if pages and i in pages:
            fake.pages[track_url(i)] = pages[i]
        elif i in failing:
            fake.pages[track_url(i)] = 500
        else:
            fake.pages[track_url(i)] = tralbum_html(
                tralbum_data([track_entry(track_id=i, title=f"song {i}")])
            )


@pytest.fixture
def plugin(http_session):
    return BandcampPlugin(http=http_session)


class TestSearchSongs:
    async def test_posts_query_and_filter(self, plugin, fake_bandcamp):
        serve_tracks(fake_bandcamp, 1)

        await plugin.search_songs("night drive", 5)

        assert fake_bandcamp.search_bodies == [
            {"search_text": "night drive", "search_filter": "t", "full_page": False}
        ]

    async def test_failing_candidates_are_dropped_in_order(self, plugin, fake_bandcamp):
        serve_tracks(fake_bandcamp, 10, failing={1, 4, 8})

        songs = await plugin.search_songs("song", 10)

        assert [s.name for s in songs] == [
            f"song {i}" for i in range(10) if i not in {1, 4, 8}
        ]

    async def test_unparseable_candidates_are_dropped_in_order(
        self, plugin, fake_bandcamp
    ):
        serve_tracks(
            fake_bandcamp,
            6,
            failing={5},
            pages={
                0: "<html><body>No record</body></html>",
                2: '<div data-tralbum="{&quot;broken&quot;:"></div>',
                3: tralbum_html(tralbum_data([track_entry(track_id=3, stream=None)])),
            },
        )

        songs = await plugin.search_songs("song", 6)

        assert [s.id for s in songs] == ["1", "4"]

    async def test_all_candidates_failing_gives_empty_list(self, plugin, fake_bandcamp):
        serve_tracks(fake_bandcamp, 3, failing={0, 1, 2})

        assert await plugin.search_songs("song", 3) == []

    async def test_limit_truncates_before_fetching(self, plugin, fake_bandcamp):
        serve_tracks(fake_bandcamp, 6)

        songs = await plugin.search_songs("song", 2)

        assert [s.id for s in songs] == ["0", "1"]
        assert sorted(fake_bandcamp.fetched) == [track_url(0), track_url(1)]

    async def test_results_of_other_kinds_are_ignored(self, plugin, fake_bandcamp):
        fake_bandcamp.search = search_payload(
            [
                search_result("a", "record", album_url(0)),
                search_result("b", "band", ARTIST_ROOT),
            ]
        )

        with pytest.raises(NoResultError) as exc_info:
            await plugin.search_songs("ghost", 5)

        assert exc_info.value.code == "BANDCAMP_PLUGIN_NO_RESULT"
        assert str(exc_info.value) == 'Cannot find any "ghost" tracks on Bandcamp!'
        assert fake_bandcamp.fetched == []

    async def test_malformed_response_means_no_result(self, plugin, fake_bandcamp):
        fake_bandcamp.search = {"unexpected": True}

        with pytest.raises(NoResultError):
            await plugin.search_songs("ghost", 5)

    async def test_search_endpoint_failure_is_wrapped(self, plugin, fake_bandcamp):
        fake_bandcamp.search_status = 500

        with pytest.raises(ExtractorError) as exc_info:
            await plugin.search_songs("song", 5)

        assert exc_info.value.code == "BANDCAMP_PLUGIN_SEARCH_ERROR"
        assert "500" in str(exc_info.value)

    @pytest.mark.parametrize("limit", [0, -1, 2.5, "3", True, None])
    async def test_invalid_limit_raises_before_io(self, plugin, fake_bandcamp, limit):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await plugin.search_songs("song", limit)

        assert exc_info.value.code == "INVALID_TYPE"
        assert fake_bandcamp.requests == []

    @pytest.mark.parametrize("query", [None, 42, ["song"]])
    async def test_invalid_query_raises_before_io(self, plugin, fake_bandcamp, query):
        with pytest.raises(InvalidArgumentError):
            await plugin.search_songs(query, 5)

        assert fake_bandcamp.requests == []


class TestSearchAlbums:
    async def test_resolves_album_candidates(self, plugin, fake_bandcamp):
        fake_bandcamp.search = search_payload(
            [
                search_result("t", "a track", track_url(0)),
                search_result("a", "first", album_url(0), item_id=10),
                search_result("a", "second", album_url(1), item_id=11),
            ]
        )
        for i, title in enumerate(["first", "second"]):
            fake_bandcamp.pages[album_url(i)] = tralbum_html(
                tralbum_data([track_entry(track_id=i)], title=title, record_id=10 + i)
            )

        albums = await plugin.search_albums("record", 5)

        assert [a.name for a in albums] == ["first", "second"]
        assert all(isinstance(a, BandcampAlbum) for a in albums)
        assert fake_bandcamp.search_bodies[0]["search_filter"] == "a"

    async def test_unparseable_albums_are_dropped_in_order(self, plugin, fake_bandcamp):
        fake_bandcamp.search = search_payload(
            [search_result("a", f"record {i}", album_url(i), item_id=i) for i in range(4)]
        )
        fake_bandcamp.pages[album_url(0)] = tralbum_html(
            tralbum_data([track_entry(track_id=0)], title="first")
        )
        fake_bandcamp.pages[album_url(1)] = "<html></html>"
        fake_bandcamp.pages[album_url(2)] = tralbum_html([1, 2, 3])
        fake_bandcamp.pages[album_url(3)] = tralbum_html(
            tralbum_data([track_entry(track_id=3)], title="last")
        )

        albums = await plugin.search_albums("record", 4)

        assert [a.name for a in albums] == ["first", "last"]

    async def test_no_albums(self, plugin, fake_bandcamp):
        fake_bandcamp.search = search_payload([])

        with pytest.raises(NoResultError, match='Cannot find any "nothing" albums'):
            await plugin.search_albums("nothing", 5)


class TestSearchSong:
    async def test_returns_best_match(self, plugin, fake_bandcamp):
        serve_tracks(fake_bandcamp, 3)

        song = await plugin.search_song("song")

        assert song.name == "song 0"
        assert fake_bandcamp.fetched == [track_url(0)]

    async def test_only_candidate_failing(self, plugin, fake_bandcamp):
        serve_tracks(fake_bandcamp, 1, failing={0})

        with pytest.raises(NoResultError):
            await plugin.search_song("song")


class TestSearchConcurrency:
    """Candidate pages are fetched concurrently, optionally bounded."""

    @staticmethod
    def tracking_transport(fake, stats):
        async def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                stats["in_flight"] += 1
                stats["peak"] = max(stats["peak"], stats["in_flight"])
                await asyncio.sleep(0.05)
                stats["in_flight"] -= 1
            return fake(request)

        return httpx.MockTransport(handler)

    async def test_unbounded_fetches_all_at_once(self, fake_bandcamp):
        stats = {"in_flight": 0, "peak": 0}
        serve_tracks(fake_bandcamp, 5)
        plugin = BandcampPlugin(
            http=HttpSession(transport=self.tracking_transport(fake_bandcamp, stats)),
            search_concurrency=None,
        )

        songs = await plugin.search_songs("song", 5)

        assert len(songs) == 5
        assert stats["peak"] == 5

    async def test_bounded_concurrency(self, fake_bandcamp):
        stats = {"in_flight": 0, "peak": 0}
        serve_tracks(fake_bandcamp, 6, failing={3})
        plugin = BandcampPlugin(
            http=HttpSession(transport=self.tracking_transport(fake_bandcamp, stats)),
            search_concurrency=2,
        )

        songs = await plugin.search_songs("song", 6)

        assert [s.id for s in songs] == ["0", "1", "2", "4", "5"]
        assert stats["peak"] == 2
