"""Tests for the synchronous adapter."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sample_pages import HLS_MANIFEST_URL, VIDEO_ID, FakeSite, make_player_response, make_watch_page
from ytstream import DownloadOptions, SourceUnavailable, VideoNotFound, VideoOptions, blocking


def make_site():
    return FakeSite(make_watch_page(make_player_response(hls_manifest_url=HLS_MANIFEST_URL)))


def test_blocking_video_mirrors_async_info():
    site = make_site()

    with blocking.Video(VIDEO_ID, client=site.client()) as video:
        basic = video.get_basic_info()
        full = video.get_info()

    assert [fmt.itag for fmt in basic.formats] == [18, 137, 140]
    assert [fmt.itag for fmt in full.formats] == [18, 95, 137, 140]
    assert video.get_video_url() == "https://www.youtube.com/watch?v=" + VIDEO_ID


def test_blocking_stream_iterates_chunks():
    site = make_site()
    options = VideoOptions(download_options=DownloadOptions(dl_chunk_size=10))

    with blocking.Video(VIDEO_ID, options, client=site.client()) as video:
        stream = video.stream()
        chunks = list(stream)
        trailing = stream.chunk()

    assert stream.content_length == 25
    assert [len(chunk) for chunk in chunks] == [10, 10, 5]
    assert trailing is None


def test_blocking_download(tmp_path):
    site = make_site()
    target = tmp_path / "out.mp4"

    with blocking.Video(VIDEO_ID, client=site.client()) as video:
        assert video.download(str(target)) == 25

    assert target.read_bytes() == bytes(range(25))


def test_blocking_errors_propagate():
    site = FakeSite(make_watch_page(make_player_response(streaming=False)))

    with blocking.Video(VIDEO_ID, client=site.client()) as video:
        with pytest.raises(SourceUnavailable):
            video.get_basic_info()


def test_invalid_id_raises_before_loop_is_used():
    with pytest.raises(VideoNotFound):
        blocking.Video("not a video")


def test_close_is_idempotent():
    video = blocking.Video(VIDEO_ID, client=make_site().client())

    video.close()
    video.close()


def test_generated_methods_keep_docstrings():
    assert blocking.Video.get_info.__doc__ == "Like get_basic_info, plus formats recovered from the HLS manifest."
    assert blocking.Video.get_info.__name__ == "get_info"
