"""Validation of a parsed player response before formats are built."""

from typing import Any, Dict, Optional

from .errors import (
    PlayabilityAnalyzer,
    SourceUnavailable,
    VideoIsPrivate,
    VideoNotFound,
)
from .utils import dig, get_text


def _status(player_response: Dict[str, Any]) -> str:
    return dig(player_response, "playabilityStatus", "status", default="")


def _reason(player_response: Dict[str, Any]) -> Optional[str]:
    status = dig(player_response, "playabilityStatus", default={})
    reason = dig(status, "reason", expected_type=str)
    if reason:
        return reason
    return get_text(dig(status, "errorScreen", "playerErrorMessageRenderer", "reason")) or None


def is_play_error(player_response: Dict[str, Any]) -> bool:
    return _status(player_response) == "ERROR"


def is_private_video(player_response: Dict[str, Any], analyzer: Optional[PlayabilityAnalyzer] = None) -> bool:
    if dig(player_response, "videoDetails", "isPrivate", default=False):
        return True
    if _status(player_response) != "LOGIN_REQUIRED":
        return False
    analyzer = analyzer or PlayabilityAnalyzer()
    return analyzer.categorize(_reason(player_response)) == "private"


def is_rental(player_response: Dict[str, Any]) -> bool:
    status = dig(player_response, "playabilityStatus", default={})
    if dig(status, "status") != "UNPLAYABLE":
        return False
    error_screen = dig(status, "errorScreen", default={})
    return (
        "playerLegacyDesktopYpcOfferRenderer" in error_screen
        or "ypcTrailerRenderer" in error_screen
    )


def is_not_yet_broadcasted(player_response: Dict[str, Any]) -> bool:
    return _status(player_response) == "LIVE_STREAM_OFFLINE"


def check_playability(
    player_response: Dict[str, Any],
    reject_upcoming: bool = False,
    analyzer: Optional[PlayabilityAnalyzer] = None,
) -> None:
    """Raise the first matching failure for *player_response*, if any.

    The checks run in a fixed order: a response that is both private and a
    rental reports privacy.
    """
    analyzer = analyzer or PlayabilityAnalyzer()
    reason = _reason(player_response)

    if is_play_error(player_response):
        raise VideoNotFound(reason or "", category=analyzer.categorize(reason))

    if is_private_video(player_response, analyzer):
        raise VideoIsPrivate(reason or "", category="private")

    if is_rental(player_response):
        raise SourceUnavailable(reason or "Video is only available as a rental", category="rental")

    if reject_upcoming and is_not_yet_broadcasted(player_response):
        raise SourceUnavailable(reason or "Live event has not started yet", category="upcoming")

    if not isinstance(player_response.get("streamingData"), dict):
        raise SourceUnavailable(reason or "No streaming data in player response",
                                category=analyzer.categorize(reason) if reason else None)
