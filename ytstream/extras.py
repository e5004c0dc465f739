"""Descriptive metadata read from the player response and initial data."""

import math
from typing import Any, Dict, List, Optional, Tuple

from yt_dlp.utils import update_url_query

from .constants import BASE_URL, SITE_ROOT
from .errors import PlayabilityAnalyzer
from .models import Author, Chapter, RelatedVideo, StoryBoard, Thumbnail, VideoDetails
from .utils import dig, get_text, parse_abbreviated_number, parse_int, strip_non_digits

WATCH_RESULTS_PATH = ("contents", "twoColumnWatchNextResults", "results", "results", "contents")
SECONDARY_RESULTS_PATH = (
    "contents", "twoColumnWatchNextResults", "secondaryResults", "secondaryResults", "results",
)


def _watch_results(initial_data: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [item for item in dig(initial_data, *WATCH_RESULTS_PATH, default=[]) if isinstance(item, dict)]


def _find_renderer(initial_data: Dict[str, Any], key: str) -> Dict[str, Any]:
    for item in _watch_results(initial_data):
        renderer = dig(item, key, default={})
        if renderer:
            return renderer
    return {}


def _web_url(endpoint: Any) -> str:
    return dig(endpoint, "commandMetadata", "webCommandMetadata", "url", default="")


def get_thumbnails(obj: Any) -> Tuple[Thumbnail, ...]:
    thumbnails = []
    for item in dig(obj, "thumbnails", default=[]):
        url = dig(item, "url", default="")
        if not url:
            continue
        thumbnails.append(Thumbnail(
            url=url,
            width=parse_int(dig(item, "width")),
            height=parse_int(dig(item, "height")),
        ))
    return tuple(thumbnails)


def is_verified(badges: Any) -> bool:
    return any(
        "verified" in dig(badge, "metadataBadgeRenderer", "tooltip", default="").lower()
        for badge in (badges if isinstance(badges, list) else [])
    )


def get_media(initial_data: Dict[str, Any]) -> Dict[str, Any]:
    """Music/game/movie rows shown under the video description."""
    secondary = _find_renderer(initial_data, "videoSecondaryInfoRenderer")
    rows = dig(secondary, "metadataRowContainer", "metadataRowContainerRenderer", "rows", default=[])

    media: Dict[str, Any] = {}
    for row in rows:
        if dig(row, "metadataRowRenderer"):
            renderer = row["metadataRowRenderer"]
            title = get_text(dig(renderer, "title")).lower() or "title"
            contents = dig(renderer, "contents", 0, default={})
            media[title] = get_text(contents)
            url = _web_url(dig(contents, "runs", 0, "navigationEndpoint"))
            if url:
                media[f"{title}_url"] = url
            if title == "song":
                media["category"] = "Music"
                media["category_url"] = "https://music.youtube.com/"
        elif dig(row, "richMetadataRowRenderer"):
            for content in dig(row, "richMetadataRowRenderer", "contents", default=[]):
                meta = dig(content, "richMetadataRenderer", default={})
                style = dig(meta, "style", default="")
                if style == "RICH_METADATA_RENDERER_STYLE_BOX_ART":
                    call_to_action = get_text(dig(meta, "callToAction")).split(" ")
                    media_type = call_to_action[1].lower() if len(call_to_action) > 1 else "type"
                    media["year"] = get_text(dig(meta, "subtitle"))
                    media[media_type] = get_text(dig(meta, "title"))
                    media[f"{media_type}_url"] = _web_url(dig(meta, "endpoint"))
                    media["thumbnails"] = get_thumbnails(dig(meta, "thumbnail"))
                elif style == "RICH_METADATA_RENDERER_STYLE_TOPIC":
                    media["category"] = get_text(dig(meta, "title"))
                    media["category_url"] = _web_url(dig(meta, "endpoint"))
    return media


def get_author(initial_data: Dict[str, Any], player_response: Dict[str, Any]) -> Author:
    owner = dig(_find_renderer(initial_data, "videoSecondaryInfoRenderer"), "owner", "videoOwnerRenderer", default={})
    microformat = dig(player_response, "microformat", "playerMicroformatRenderer", default={})
    details = dig(player_response, "videoDetails", default={})

    channel_id = (
        dig(microformat, "channelId", default="")
        or dig(owner, "navigationEndpoint", "browseEndpoint", "browseId", default="")
        or dig(details, "channelId", default="")
    )
    user = dig(microformat, "ownerProfileUrl", default="").strip().rstrip("/").split("/")[-1]
    external_channel_id = dig(microformat, "externalChannelId", default="").strip()

    return Author(
        id=channel_id,
        name=dig(microformat, "ownerChannelName", default="") or dig(details, "author", default=""),
        user=user,
        channel_url=f"{SITE_ROOT}/channel/{channel_id}" if channel_id else "",
        external_channel_url=f"{SITE_ROOT}/channel/{external_channel_id}" if external_channel_id else "",
        user_url=f"{SITE_ROOT}/{user}" if user else "",
        thumbnails=get_thumbnails(dig(owner, "thumbnail")),
        verified=is_verified(dig(owner, "badges")),
        subscriber_count=parse_abbreviated_number(get_text(dig(owner, "subscriberCountText"))),
    )


def _toggle_count(initial_data: Dict[str, Any], icon_type: str) -> int:
    primary = _find_renderer(initial_data, "videoPrimaryInfoRenderer")
    buttons = dig(primary, "videoActions", "menuRenderer", "topLevelButtons", default=[])
    for button in buttons:
        renderer = dig(button, "toggleButtonRenderer", default={})
        if dig(renderer, "defaultIcon", "iconType") == icon_type:
            label = dig(renderer, "defaultText", "accessibility", "accessibilityData", "label", default="")
            return strip_non_digits(label)
    return 0


def get_likes(initial_data: Dict[str, Any]) -> int:
    return _toggle_count(initial_data, "LIKE")


def get_dislikes(initial_data: Dict[str, Any]) -> int:
    return _toggle_count(initial_data, "DISLIKE")


def get_storyboards(player_response: Dict[str, Any]) -> Tuple[StoryBoard, ...]:
    """Decode the ``|``-separated storyboard spec into one entry per level."""
    spec = dig(player_response, "storyboards", "playerStoryboardSpecRenderer", "spec", default="")
    if not spec:
        return ()

    parts = spec.split("|")
    base_url = parts.pop(0) or "https://i.ytimg.com/"
    storyboards = []
    for level, part in enumerate(parts):
        fields = part.split("#")
        fields += ["0"] * (8 - len(fields))
        width, height, count, columns, rows, interval, name, sigh = fields[:8]

        thumbnail_count = parse_int(count)
        per_sheet = parse_int(columns) * parse_int(rows)
        template_url = update_url_query(base_url, {"sigh": sigh})
        template_url = template_url.replace("$L", str(level)).replace("$N", name)

        storyboards.append(StoryBoard(
            template_url=template_url,
            thumbnail_width=parse_int(width),
            thumbnail_height=parse_int(height),
            thumbnail_count=thumbnail_count,
            interval=parse_int(interval),
            columns=parse_int(columns),
            rows=parse_int(rows),
            storyboard_count=math.ceil(thumbnail_count / per_sheet) if per_sheet else 0,
        ))
    return tuple(storyboards)


def get_chapters(initial_data: Dict[str, Any]) -> Tuple[Chapter, ...]:
    markers = dig(
        initial_data,
        "playerOverlays", "playerOverlayRenderer", "decoratedPlayerBarRenderer",
        "decoratedPlayerBarRenderer", "playerBar", "multiMarkersPlayerBarRenderer", "markersMap",
        default=[],
    )
    for marker in markers:
        chapters = dig(marker, "value", "chapters", default=[])
        if not chapters:
            continue
        return tuple(
            Chapter(
                title=get_text(dig(chapter, "chapterRenderer", "title")),
                start_time=parse_int(dig(chapter, "chapterRenderer", "timeRangeStartMillis")) // 1000,
            )
            for chapter in chapters
        )
    return ()


def _related_author(renderer: Dict[str, Any]) -> Optional[Author]:
    run = dig(renderer, "shortBylineText", "runs", 0, default={}) or dig(renderer, "longBylineText", "runs", 0, default={})
    if not run:
        return None
    channel_id = dig(run, "navigationEndpoint", "browseEndpoint", "browseId", default="")
    return Author(
        id=channel_id,
        name=dig(run, "text", default=""),
        channel_url=f"{SITE_ROOT}/channel/{channel_id}" if channel_id else "",
        thumbnails=get_thumbnails(dig(renderer, "channelThumbnail")),
        verified=is_verified(dig(renderer, "ownerBadges")),
    )


def get_related_videos(initial_data: Dict[str, Any]) -> Tuple[RelatedVideo, ...]:
    related = []
    for result in dig(initial_data, *SECONDARY_RESULTS_PATH, default=[]):
        renderer = dig(result, "compactVideoRenderer", default={})
        video_id = dig(renderer, "videoId", default="")
        if not video_id:
            continue
        badges = dig(renderer, "badges", default=[])
        related.append(RelatedVideo(
            id=video_id,
            title=get_text(dig(renderer, "title")),
            url=BASE_URL + video_id,
            published=get_text(dig(renderer, "publishedTimeText")),
            author=_related_author(renderer),
            short_view_count_text=get_text(dig(renderer, "shortViewCountText")),
            view_count=strip_non_digits(get_text(dig(renderer, "viewCountText"))),
            length_seconds=_parse_clock(get_text(dig(renderer, "lengthText"))),
            thumbnails=get_thumbnails(dig(renderer, "thumbnail")),
            is_live=any(
                dig(badge, "metadataBadgeRenderer", "label", default="") == "LIVE NOW"
                for badge in badges
            ),
        ))
    return tuple(related)


def _parse_clock(text: str) -> int:
    seconds = 0
    for part in text.split(":"):
        if not part.strip().isdigit():
            return 0
        seconds = seconds * 60 + int(part)
    return seconds


def is_age_restricted(player_response: Dict[str, Any]) -> bool:
    if dig(player_response, "microformat", "playerMicroformatRenderer", "isFamilySafe") is False:
        return True
    if dig(player_response, "playabilityStatus", "status") != "LOGIN_REQUIRED":
        return False
    reason = dig(player_response, "playabilityStatus", "reason", default="")
    return PlayabilityAnalyzer().categorize(reason) == "age_restricted"


def clean_video_details(
    initial_data: Dict[str, Any],
    player_response: Dict[str, Any],
    video_id: str,
) -> VideoDetails:
    """Assemble VideoDetails from both documents; missing pieces become defaults."""
    details = dig(player_response, "videoDetails", default={})
    microformat = dig(player_response, "microformat", "playerMicroformatRenderer", default={})

    return VideoDetails(
        video_id=video_id,
        title=dig(details, "title", default="") or get_text(dig(microformat, "title")),
        description=dig(details, "shortDescription", default="") or get_text(dig(microformat, "description")),
        length_seconds=parse_int(dig(details, "lengthSeconds")),
        view_count=parse_int(dig(details, "viewCount")),
        keywords=tuple(keyword for keyword in dig(details, "keywords", default=[]) if isinstance(keyword, str)),
        channel_id=dig(details, "channelId", default=""),
        author=get_author(initial_data, player_response),
        likes=get_likes(initial_data),
        dislikes=get_dislikes(initial_data),
        chapters=get_chapters(initial_data),
        storyboards=get_storyboards(player_response),
        thumbnails=get_thumbnails(dig(details, "thumbnail")),
        category=dig(microformat, "category", default=""),
        publish_date=dig(microformat, "publishDate", default=""),
        upload_date=dig(microformat, "uploadDate", default=""),
        is_live_content=dig(details, "isLiveContent", default=False),
        is_private=dig(details, "isPrivate", default=False),
        is_unlisted=dig(microformat, "isUnlisted", default=False),
        is_family_safe=dig(microformat, "isFamilySafe", default=True),
        age_restricted=is_age_restricted(player_response),
        available_countries=tuple(
            country for country in dig(microformat, "availableCountries", default=[])
            if isinstance(country, str)
        ),
        media=get_media(initial_data),
    )
