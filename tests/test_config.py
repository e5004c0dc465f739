"""Tests for building VideoOptions from dicts, files and the environment."""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from ytstream.config import (
    apply_environment,
    load_options_file,
    options_from_dict,
    parse_cookie_header,
    positive_int,
)
from ytstream.constants import DEFAULT_DL_CHUNK_SIZE
from ytstream.errors import ConfigError
from ytstream.models import VideoOptions, VideoQuality, VideoSearchOptions


def test_positive_int_accepts_numbers_and_strings():
    assert positive_int(5) == 5
    assert positive_int("12", "itag") == 12
    assert positive_int(4.0) == 4


@pytest.mark.parametrize("value", [0, -3, "abc", None, True, "1.5", 1.5])
def test_positive_int_rejects_invalid(value):
    with pytest.raises(ConfigError):
        positive_int(value, "dl_chunk_size")


def test_options_from_dict_converts_every_field():
    options = options_from_dict({
        "quality": "highest_audio",
        "filter": "AUDIO_ONLY",
        "container": "WEBM",
        "itag": "251",
        "dl_chunk_size": 1024,
        "proxy": "socks5://127.0.0.1:9050",
        "cookies": "SID=abc; HSID=def",
        "source_address": "::1",
        "headers": {"Accept-Language": "en"},
        "timeout": 5,
        "retry_min_delay": 0.1,
        "retry_max_delay": 2,
        "max_retries": 5,
    })

    assert options.quality is VideoQuality.HIGHEST_AUDIO
    assert options.filter is VideoSearchOptions.AUDIO_ONLY
    assert options.container == "webm"
    assert options.itag == 251
    assert options.download_options.chunk_size == 1024
    assert options.request_options.proxy == "socks5://127.0.0.1:9050"
    assert options.request_options.cookies == "SID=abc; HSID=def"
    assert options.request_options.source_address == "::1"
    assert options.request_options.headers == (("Accept-Language", "en"),)
    assert options.request_options.timeout == 5.0
    assert options.request_options.retry.min_delay == 0.1
    assert options.request_options.retry.max_delay == 2.0
    assert options.request_options.retry.max_retries == 5


def test_empty_dict_gives_defaults():
    options = options_from_dict({})

    assert options == VideoOptions()
    assert options.download_options.chunk_size == DEFAULT_DL_CHUNK_SIZE


@pytest.mark.parametrize(
    "data",
    [
        {"quality": "best"},
        {"filter": "everything"},
        {"dl_chunk_size": 0},
        {"itag": -1},
        {"proxy": "ftp://proxy.example:21"},
        {"proxy": "not a url"},
        {"source_address": "300.1.1.1"},
        {"cookies": "no-equals-sign"},
        {"headers": ["X-Test: 1"]},
        {"timeout": -1},
        {"max_retries": -1},
        {"max_retries": 1.5},
        {"dl_chunk_size": 1.5},
        {"retry_min_delay": 5, "retry_max_delay": 1},
    ],
)
def test_malformed_values_raise_config_error(data):
    with pytest.raises(ConfigError):
        options_from_dict(data)


def test_non_mapping_raises_config_error():
    with pytest.raises(ConfigError):
        options_from_dict(["quality", "highest"])


def test_unknown_keys_are_logged_and_ignored(caplog):
    with caplog.at_level("WARNING", logger="ytstream.config"):
        options = options_from_dict({"qualty": "lowest"})

    assert options.quality is VideoQuality.HIGHEST
    assert "qualty" in caplog.text


def test_base_options_are_kept():
    base = options_from_dict({"itag": 18, "proxy": "http://proxy:8080"})

    options = options_from_dict({"dl_chunk_size": 10}, base=base)

    assert options.itag == 18
    assert options.request_options.proxy == "http://proxy:8080"
    assert options.download_options.dl_chunk_size == 10


def test_parse_cookie_header():
    assert parse_cookie_header("a=b; c = d ;e=") == {"a": "b", "c": "d", "e": ""}
    assert parse_cookie_header("") == {}


def test_load_options_file(tmp_path):
    path = tmp_path / "options.json"
    path.write_text(json.dumps({"quality": "lowest", "dl_chunk_size": 2048}), encoding="utf-8")

    options = load_options_file(str(path))

    assert options.quality is VideoQuality.LOWEST
    assert options.download_options.chunk_size == 2048


def test_missing_options_file_gives_defaults(tmp_path):
    assert load_options_file(str(tmp_path / "missing.json")) == VideoOptions()


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_bad_options_file_raises_config_error(tmp_path, content):
    path = tmp_path / "options.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_options_file(str(path))


def test_environment_fills_unset_fields_only():
    environ = {
        "YTSTREAM_PROXY": "http://env-proxy:3128",
        "YTSTREAM_COOKIES": "SID=env",
        "YTSTREAM_CHUNK_SIZE": "4096",
    }

    filled = apply_environment(VideoOptions(), environ)
    assert filled.request_options.proxy == "http://env-proxy:3128"
    assert filled.request_options.cookies == "SID=env"
    assert filled.download_options.dl_chunk_size == 4096

    explicit = options_from_dict({"proxy": "http://cli:8080", "dl_chunk_size": 1})
    kept = apply_environment(explicit, environ)
    assert kept.request_options.proxy == "http://cli:8080"
    assert kept.request_options.cookies == "SID=env"
    assert kept.download_options.dl_chunk_size == 1


def test_environment_bad_chunk_size_raises_config_error():
    with pytest.raises(ConfigError):
        apply_environment(VideoOptions(), {"YTSTREAM_CHUNK_SIZE": "zero"})


def test_empty_environment_returns_same_options():
    options = VideoOptions()

    assert apply_environment(options, {}) is options
