"""Tests for pulling the embedded JSON documents out of a watch page."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sample_pages import PLAYER_PATH, make_player_response, make_watch_page
from ytstream.errors import ParseError
from ytstream.extractor import extract_blob, extract_documents, get_html5player


def test_extract_documents_returns_both_blobs():
    page = make_watch_page(make_player_response())

    player_response, initial_data = extract_documents(page)

    assert player_response["videoDetails"]["title"] == "Sample video"
    assert "twoColumnWatchNextResults" in initial_data["contents"]


def test_window_assignment_and_trailing_statements_are_accepted():
    page = (
        "<html><body>"
        '<script>window["ytInitialPlayerResponse"] = {"a": {"b": "};"}};window.x = 1;</script>'
        "<script>var ytInitialData={\"c\": [1, 2]};</script>"
        "</body></html>"
    )

    player_response, initial_data = extract_documents(page)

    assert player_response == {"a": {"b": "};"}}
    assert initial_data == {"c": [1, 2]}


def test_only_first_matching_script_is_used():
    scripts = [
        "var other = 1;",
        'var ytInitialData = {"first": true};',
        'var ytInitialData = {"second": true};',
    ]

    assert extract_blob(scripts, "ytInitialData") == {"first": True}


@pytest.mark.parametrize(
    "scripts",
    [
        ["var nothing = {};"],
        ["var ytInitialData = {broken json;"],
        ["var ytInitialData = [1, 2, 3];"],
    ],
)
def test_missing_or_unparsable_blob_raises_parse_error(scripts):
    with pytest.raises(ParseError):
        extract_blob(scripts, "ytInitialData")


def test_page_without_initial_data_raises_parse_error():
    page = '<html><script>var ytInitialPlayerResponse = {"ok": 1};</script></html>'

    with pytest.raises(ParseError):
        extract_documents(page)


def test_html5player_from_script_tag():
    page = make_watch_page(make_player_response())

    assert get_html5player(page) == "https://www.youtube.com" + PLAYER_PATH


def test_html5player_from_js_url():
    page = '<script>ytcfg.set({"jsUrl":"\\/s\\/player\\/ff\\/base.js"});</script>'

    assert get_html5player(page) == "https://www.youtube.com/s/player/ff/base.js"


def test_html5player_missing():
    assert get_html5player("<html></html>") is None
