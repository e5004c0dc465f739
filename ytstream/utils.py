"""Video id parsing and tolerant traversal helpers for page documents."""

import re
import urllib.parse
from typing import Any, Optional

from yt_dlp.utils import int_or_none, parse_count, traverse_obj

from .constants import VALID_QUERY_DOMAINS

ID_REGEX = re.compile(r"^[a-zA-Z0-9_-]{11}$")
VALID_PATH_DOMAINS = re.compile(
    r"^https?://(youtu\.be/|(www\.|m\.)?youtube\.com/(embed|v|shorts|live)/)"
)

_MISSING = object()


def validate_id(video_id: str) -> bool:
    return bool(ID_REGEX.match(video_id))


def get_video_id(url_or_id: str) -> Optional[str]:
    """Return the video id in a watch URL, short URL or bare id, or None."""
    cleaned = (url_or_id or "").strip()
    if validate_id(cleaned):
        return cleaned

    if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", cleaned):
        cleaned = "https://" + cleaned.lstrip("/")

    parsed = urllib.parse.urlparse(cleaned)
    candidate: Optional[str] = None

    if parsed.netloc.lower() in VALID_QUERY_DOMAINS:
        candidate = urllib.parse.parse_qs(parsed.query).get("v", [None])[0]

    if candidate is None and VALID_PATH_DOMAINS.match(cleaned):
        segments = [segment for segment in parsed.path.split("/") if segment]
        if segments:
            candidate = segments[-1]

    if candidate is None:
        return None

    candidate = candidate[:11]
    return candidate if validate_id(candidate) else None


def dig(obj: Any, *path: Any, default: Any = None, expected_type: Optional[type] = None) -> Any:
    """Follow *path* through nested dicts and lists.

    Any missing key, out of range index or value of the wrong type yields
    *default* instead of an exception. When *expected_type* is omitted the
    type of *default* is used, unless default is None.
    """
    if expected_type is None and default is not None:
        expected_type = type(default)
        # bool is a subclass of int; do not let an int default reject it or vice versa
        if expected_type is int:
            value = traverse_obj(obj, path, default=_MISSING)
            if isinstance(value, bool) or not isinstance(value, int):
                return default
            return value
    return traverse_obj(obj, path, default=default, expected_type=expected_type)


def get_text(obj: Any) -> str:
    """Flatten a ``simpleText`` or ``runs`` text object."""
    simple = dig(obj, "simpleText", expected_type=str)
    if simple is not None:
        return simple
    runs = traverse_obj(obj, ("runs", ..., "text"), expected_type=str)
    if runs:
        return "".join(runs)
    return ""


def between(haystack: str, left: str, right: str) -> str:
    """Return the text between the first *left* and the following *right*."""
    pos = haystack.find(left)
    if pos == -1:
        return ""
    start = pos + len(left)
    end = haystack.find(right, start)
    if end == -1:
        return ""
    return haystack[start:end]


def parse_int(value: Any, default: int = 0) -> int:
    """Parse ints that the site serializes either as numbers or strings."""
    if isinstance(value, bool):
        return default
    parsed = int_or_none(value)
    return default if parsed is None else parsed


def parse_abbreviated_number(text: Optional[str]) -> int:
    """Parse counts such as ``1.2M subscribers`` or ``12,345 views``."""
    if not text:
        return 0
    parsed = parse_count(text.strip())
    return parsed or 0


def strip_non_digits(text: Optional[str]) -> int:
    digits = re.sub(r"\D+", "", text or "")
    return int(digits) if digits else 0
