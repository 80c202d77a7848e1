"""Tests for the yt-dlp plugin, with the yt-dlp process mocked out."""

import json
from unittest.mock import AsyncMock

import pytest

from playsource.domain.entities import Playlist, Song
from playsource.domain.errors import InvalidSongError, YtDlpError
from playsource.infrastructure.connectors import ytdlp
from playsource.infrastructure.connectors.process import ProcessResult
from playsource.infrastructure.connectors.ytdlp import YtDlpPlugin

VIDEO_URL = "https://www.youtube.com/watch?v=abc123"


def video_info(**overrides):
    info = {
        "id": "abc123",
        "title": "A Video",
        "extractor": "youtube",
        "webpage_url": VIDEO_URL,
        "duration": 212,
        "thumbnail": "https://i.ytimg.com/vi/abc123/hq.jpg",
        "uploader": "Channel",
        "uploader_url": "https://www.youtube.com/@channel",
        "view_count": 1000,
        "like_count": 50,
        "age_limit": 0,
        "url": "https://rr1.googlevideo.com/audio",
    }
    info.update(overrides)
    return info


@pytest.fixture
def run_process(monkeypatch):
    mock = AsyncMock(return_value=ProcessResult(0, json.dumps(video_info()), ""))
    monkeypatch.setattr(ytdlp, "run_process", mock)
    return mock


@pytest.fixture
def plugin():
    return YtDlpPlugin(binary="yt-dlp", stream_format="ba/ba*")


class TestBuildArgs:
    def test_resolve_flags(self):
        args = ytdlp.build_args(
            VIDEO_URL,
            dump_single_json=True,
            no_warnings=True,
            prefer_free_formats=True,
            skip_download=True,
            simulate=True,
        )

        assert args == [
            "--dump-single-json",
            "--no-warnings",
            "--prefer-free-formats",
            "--skip-download",
            "--simulate",
            VIDEO_URL,
        ]

    def test_format_selector(self):
        assert ytdlp.build_args(VIDEO_URL, format="ba") == [
            "--dump-json",
            "--format",
            "ba",
            VIDEO_URL,
        ]


class TestParseOutput:
    def test_dump_json_uses_first_document(self):
        stdout = "\n".join(json.dumps({"id": str(i)}) for i in range(3))

        assert ytdlp.parse_output(stdout, dump_single_json=False) == {"id": "0"}

    @pytest.mark.parametrize("stdout", ["", "   \n", "not json", "[1, 2]"])
    def test_unusable_output(self, stdout):
        with pytest.raises(YtDlpError):
            ytdlp.parse_output(stdout, dump_single_json=True)


class TestResolve:
    async def test_video(self, plugin, run_process):
        song = await plugin.resolve(VIDEO_URL)

        assert isinstance(song, Song)
        assert song.source == "youtube [yt-dlp]"
        assert song.id == "abc123"
        assert song.name == "A Video"
        assert song.url == VIDEO_URL
        assert song.duration == 212
        assert song.uploader.name == "Channel"
        assert song.views == 1000
        assert song.likes == 50
        assert song.age_restricted is False
        assert song.plugin is plugin
        run_process.assert_awaited_once()
        assert run_process.await_args.args[0] == "yt-dlp"
        assert "--dump-single-json" in run_process.await_args.args

    async def test_live_and_age_restricted(self, plugin, run_process):
        run_process.return_value = ProcessResult(
            0, json.dumps(video_info(is_live=True, age_limit=18, duration=None)), ""
        )

        song = await plugin.resolve(VIDEO_URL)

        assert song.is_live is True
        assert song.duration == 0
        assert song.formatted_duration == "Live"
        assert song.age_restricted is True

    async def test_playlist(self, plugin, run_process):
        playlist_info = {
            "id": "PL1",
            "title": "Mix",
            "extractor": "youtube:tab",
            "webpage_url": "https://www.youtube.com/playlist?list=PL1",
            "thumbnails": [{"url": "https://i.ytimg.com/pl.jpg"}],
            "entries": [video_info(id="a", title="one"), video_info(id="b", title="two")],
        }
        run_process.return_value = ProcessResult(0, json.dumps(playlist_info), "")

        playlist = await plugin.resolve("https://www.youtube.com/playlist?list=PL1")

        assert isinstance(playlist, Playlist)
        assert playlist.source == "youtube:tab [yt-dlp]"
        assert playlist.thumbnail == "https://i.ytimg.com/pl.jpg"
        assert [s.name for s in playlist.songs] == ["one", "two"]

    async def test_empty_playlist(self, plugin, run_process):
        run_process.return_value = ProcessResult(
            0, json.dumps({"id": "PL1", "entries": []}), ""
        )

        with pytest.raises(YtDlpError, match="The playlist is empty"):
            await plugin.resolve("https://www.youtube.com/playlist?list=PL1")

    async def test_process_failure_carries_stderr(self, plugin, run_process):
        run_process.return_value = ProcessResult(1, "", "ERROR: Unsupported URL\n")

        with pytest.raises(YtDlpError) as exc_info:
            await plugin.resolve("https://example.com/nothing")

        assert exc_info.value.code == "YTDLP_ERROR"
        assert str(exc_info.value) == "ERROR: Unsupported URL"

    async def test_missing_binary(self, plugin, run_process):
        run_process.side_effect = FileNotFoundError("yt-dlp")

        with pytest.raises(YtDlpError, match="Cannot run yt-dlp"):
            await plugin.resolve(VIDEO_URL)


class TestGetStreamUrl:
    async def test_uses_audio_format(self, plugin, run_process):
        song = Song(source="youtube [yt-dlp]", url=VIDEO_URL)

        assert await plugin.get_stream_url(song) == "https://rr1.googlevideo.com/audio"
        args = run_process.await_args.args
        assert args[args.index("--format") + 1] == "ba/ba*"

    async def test_song_without_url(self, plugin, run_process):
        with pytest.raises(InvalidSongError) as exc_info:
            await plugin.get_stream_url(Song(source="youtube [yt-dlp]"))

        assert exc_info.value.code == "YTDLP_PLUGIN_INVALID_SONG"
        run_process.assert_not_awaited()

    async def test_playlist_url(self, plugin, run_process):
        run_process.return_value = ProcessResult(
            0, json.dumps({"id": "PL1", "entries": [video_info()]}), ""
        )

        with pytest.raises(YtDlpError, match="entire playlist"):
            await plugin.get_stream_url(Song(source="x", url=VIDEO_URL))


class TestHostIntegration:
    def test_accepts_every_url(self, plugin):
        assert plugin.validate("anything at all") is True

    async def test_no_related_songs(self, plugin):
        assert await plugin.get_related_songs(Song(source="x")) == []

    def test_warns_when_not_last(self, plugin, log_messages):
        class Host:
            plugins = [plugin, object()]

        plugin.init(Host())

        assert any("not the last plugin" in message for message in log_messages)

    def test_silent_when_last(self, plugin, log_messages):
        class Host:
            plugins = [object(), plugin]

        host = Host()
        plugin.init(host)

        assert plugin.host is host
        assert not any("not the last plugin" in message for message in log_messages)
