"""Tests for descriptive metadata assembled into VideoDetails."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sample_pages import VIDEO_ID, make_initial_data, make_player_response
from ytstream.extras import (
    clean_video_details,
    get_chapters,
    get_media,
    get_related_videos,
    get_storyboards,
)

STORYBOARD_SPEC = (
    "https://i.ytimg.com/sb/x/storyboard3_L$L/$N.jpg?sqp=abc"
    "|48#27#100#10#10#0#default#rs$AAA"
    "|80#45#212#10#10#2000#M$M#rs$BBB"
)


def test_clean_video_details_reads_both_documents():
    details = clean_video_details(make_initial_data(), make_player_response(), VIDEO_ID)

    assert details.title == "Sample video"
    assert details.description == "A sample description"
    assert details.length_seconds == 212
    assert details.view_count == 1234
    assert details.keywords == ("sample", "video")
    assert details.category == "Music"
    assert details.publish_date == "2009-10-24"
    assert details.available_countries == ("US", "DE")
    assert details.likes == 12345
    assert details.dislikes == 67
    assert details.thumbnails[0].width == 120
    assert details.video_url == "https://www.youtube.com/watch?v=" + VIDEO_ID
    assert not details.age_restricted


def test_author_is_merged_from_owner_and_microformat():
    author = clean_video_details(make_initial_data(), make_player_response(), VIDEO_ID).author

    assert author.name == "Sample Channel"
    assert author.id == "UC1234567890abcdefghijkl"
    assert author.user == "@samplechannel"
    assert author.user_url == "https://www.youtube.com/@samplechannel"
    assert author.channel_url == "https://www.youtube.com/channel/UC1234567890abcdefghijkl"
    assert author.verified
    assert author.subscriber_count == 1500000
    assert author.thumbnails[0].url == "https://yt3.ggpht.com/a.jpg"


def test_missing_documents_give_defaults():
    details = clean_video_details({}, {}, VIDEO_ID)

    assert details.title == ""
    assert details.likes == 0
    assert details.chapters == ()
    assert details.storyboards == ()
    assert details.media == {}
    assert details.is_family_safe
    assert details.author.name == ""


def test_storyboards_expand_template_per_level():
    response = {"storyboards": {"playerStoryboardSpecRenderer": {"spec": STORYBOARD_SPEC}}}

    boards = get_storyboards(response)

    assert len(boards) == 2
    first, second = boards
    assert first.template_url.startswith("https://i.ytimg.com/sb/x/storyboard3_L0/default.jpg?")
    assert "sigh=rs%24AAA" in first.template_url
    assert (first.thumbnail_width, first.thumbnail_height, first.thumbnail_count) == (48, 27, 100)
    assert first.storyboard_count == 1
    assert second.template_url.startswith("https://i.ytimg.com/sb/x/storyboard3_L1/M$M.jpg?")
    assert second.interval == 2000
    assert second.storyboard_count == 3


def test_chapters_convert_milliseconds():
    initial_data = {"playerOverlays": {"playerOverlayRenderer": {"decoratedPlayerBarRenderer": {
        "decoratedPlayerBarRenderer": {"playerBar": {"multiMarkersPlayerBarRenderer": {"markersMap": [
            {"key": "HEATSEEKER", "value": {}},
            {"key": "DESCRIPTION_CHAPTERS", "value": {"chapters": [
                {"chapterRenderer": {"title": {"simpleText": "Intro"}, "timeRangeStartMillis": 0}},
                {"chapterRenderer": {"title": {"simpleText": "Verse"}, "timeRangeStartMillis": 61500}},
            ]}},
        ]}}},
    }}}}

    chapters = get_chapters(initial_data)

    assert [(chapter.title, chapter.start_time) for chapter in chapters] == [("Intro", 0), ("Verse", 61)]


def test_related_videos_skip_non_video_entries():
    related = get_related_videos(make_initial_data())

    assert len(related) == 1
    video = related[0]
    assert video.id == "abcdefghijk"
    assert video.title == "Related one"
    assert video.url == "https://www.youtube.com/watch?v=abcdefghijk"
    assert video.author.name == "Other Channel"
    assert video.author.channel_url == "https://www.youtube.com/channel/UCother"
    assert video.view_count == 9876
    assert video.length_seconds == 185
    assert not video.is_live


def test_media_rows():
    initial_data = {"contents": {"twoColumnWatchNextResults": {"results": {"results": {"contents": [
        {"videoSecondaryInfoRenderer": {"metadataRowContainer": {"metadataRowContainerRenderer": {"rows": [
            {"metadataRowRenderer": {
                "title": {"simpleText": "Song"},
                "contents": [{"simpleText": "Never Gonna Give You Up"}],
            }},
            {"metadataRowRenderer": {
                "title": {"simpleText": "Artist"},
                "contents": [{"runs": [{
                    "text": "Rick Astley",
                    "navigationEndpoint": {"commandMetadata": {"webCommandMetadata": {"url": "/channel/UCrick"}}},
                }]}],
            }},
        ]}}}},
    ]}}}}}

    media = get_media(initial_data)

    assert media["song"] == "Never Gonna Give You Up"
    assert media["category"] == "Music"
    assert media["artist"] == "Rick Astley"
    assert media["artist_url"] == "/channel/UCrick"
