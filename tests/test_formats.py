"""Tests for building the format catalog."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sample_pages import (
    DECIPHERED,
    HLS_MANIFEST,
    HLS_MANIFEST_URL,
    PLAYER_JS,
    audio_only_format,
    ciphered_format,
    make_player_response,
    muxed_format,
    video_only_format,
)
from ytstream.cipher import SignatureCipher
from ytstream.errors import CipherError, ParseError
from ytstream.formats import (
    add_format_meta,
    merge_formats,
    needs_decipher,
    parse_hls_manifest,
    parse_mime_type,
    parse_video_formats,
    resolve_url,
    rewrite_manifest_host,
)


def test_parse_mime_type_splits_codecs():
    mime = parse_mime_type('video/mp4; codecs="avc1.42001E, mp4a.40.2"')

    assert mime.mime == "video/mp4"
    assert mime.container == "mp4"
    assert mime.codecs == ("avc1.42001E", "mp4a.40.2")
    assert mime.video_codec == "avc1.42001E"
    assert mime.audio_codec == "mp4a.40.2"


def test_parse_mime_type_audio_only_has_no_video_codec():
    mime = parse_mime_type('audio/webm; codecs="opus"', has_video=False, has_audio=True)

    assert mime.video_codec is None
    assert mime.audio_codec == "opus"


def test_muxed_format_takes_audio_bitrate_from_static_table():
    fmt = add_format_meta(muxed_format())

    assert fmt.has_video and fmt.has_audio
    assert fmt.audio_bitrate == 96
    assert fmt.container == "mp4"
    assert fmt.content_length == 25
    assert (fmt.width, fmt.height) == (640, 360)


def test_adaptive_formats_are_single_track():
    video = add_format_meta(video_only_format())
    audio = add_format_meta(audio_only_format())

    assert video.has_video and not video.has_audio
    assert video.init_range.end == 740
    assert video.index_range.start == 741
    assert audio.has_audio and not audio.has_video
    assert audio.audio_bitrate == 128
    assert audio.audio_channels == 2


def test_format_without_itag_or_url_is_rejected():
    assert add_format_meta({"url": "https://example.com/v"}) is None
    assert add_format_meta({"itag": 18}) is None


def test_live_and_manifest_urls_are_flagged():
    live = add_format_meta({"itag": 95, "url": "https://x.googlevideo.com/videoplayback?source=yt_live_broadcast"})
    dash = add_format_meta({"itag": 137, "url": "https://manifest.googlevideo.com/api/manifest/dash/id/1"})

    assert live.is_live and not live.is_hls
    assert dash.is_dash_mpd


def test_direct_url_gets_ratebypass_once():
    url = resolve_url(muxed_format(), None)
    assert url.endswith("ratebypass=yes")

    already = resolve_url(muxed_format(url="https://rr1.googlevideo.com/videoplayback?ratebypass=no"), None)
    assert already == "https://rr1.googlevideo.com/videoplayback?ratebypass=no"


def test_cipher_entry_writes_signature_into_named_parameter():
    cipher = SignatureCipher.from_player_script(PLAYER_JS)

    url = resolve_url(ciphered_format(), cipher)

    assert url.startswith("https://rr1.googlevideo.com/videoplayback?")
    assert f"sig={DECIPHERED}" in url


def test_cipher_entry_without_cipher_raises():
    with pytest.raises(CipherError):
        resolve_url(ciphered_format(), None)


def test_needs_decipher_only_for_protected_entries():
    assert not needs_decipher(make_player_response())
    assert needs_decipher(make_player_response(adaptive_formats=[ciphered_format()]))


def test_undecipherable_formats_are_dropped():
    response = make_player_response(adaptive_formats=[ciphered_format(), audio_only_format()])

    formats = parse_video_formats(response, None)

    assert [fmt.itag for fmt in formats] == [18, 140]
    assert all(fmt.url for fmt in formats)


def test_deciphered_formats_are_kept():
    response = make_player_response(adaptive_formats=[ciphered_format()])

    formats = parse_video_formats(response, SignatureCipher.from_player_script(PLAYER_JS))

    assert [fmt.itag for fmt in formats] == [18, 251]
    assert DECIPHERED in formats[1].url


def test_manifest_host_is_rewritten():
    assert rewrite_manifest_host(HLS_MANIFEST_URL) == (
        "https://www.youtube.com/api/manifest/hls_variant/expire/1/id/x/file/index.m3u8"
    )


def test_hls_manifest_keeps_known_itags_only():
    repeated = HLS_MANIFEST + "#EXT-X-STREAM-INF:BANDWIDTH=1500000\n" + HLS_MANIFEST.splitlines()[2] + "\n"

    formats = parse_hls_manifest(repeated)

    assert len(formats) == 1
    fmt = formats[0]
    assert fmt.itag == 95
    assert fmt.is_hls
    assert fmt.container == "ts"
    assert fmt.has_audio_and_video
    assert fmt.quality_label == "720p"


def test_merge_keeps_first_format_per_url():
    first = add_format_meta(muxed_format())
    duplicate = add_format_meta(muxed_format(bitrate=1))
    other = add_format_meta(audio_only_format())

    merged = merge_formats([first], [duplicate, other])

    assert merged == [first, other]


def test_malformed_hls_manifest_raises_parse_error():
    with pytest.raises(ParseError):
        parse_hls_manifest("#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=abc\n" + HLS_MANIFEST.splitlines()[2] + "\n")
