"""Extraction of the JSON documents embedded in a watch page."""

import json
import re
import urllib.parse
from typing import Any, Dict, Optional, Tuple

from bs4 import BeautifulSoup

from .constants import SITE_ROOT
from .errors import ParseError

PLAYER_RESPONSE_MARKER = "ytInitialPlayerResponse"
INITIAL_DATA_MARKER = "ytInitialData"

HTML5PLAYER_PATTERN = re.compile(
    r'<script\s+src="([^"]+)"(?:\s+type="text/javascript")?\s+name="player_ias/base"\s*>'
    r'|"jsUrl":"([^"]+)"'
)

_decoder = json.JSONDecoder()


def _assignment_pattern(marker: str) -> "re.Pattern[str]":
    return re.compile(
        r'(?:var\s+%s|window\[["\']%s["\']\])\s*=\s*' % (re.escape(marker), re.escape(marker))
    )


def extract_blob(scripts, marker: str) -> Dict[str, Any]:
    """Decode the object assigned to *marker* in the first script that sets it."""
    pattern = _assignment_pattern(marker)
    for text in scripts:
        match = pattern.search(text)
        if not match:
            continue
        # Only the first script carrying the marker is considered
        try:
            value, _ = _decoder.raw_decode(text, match.end())
        except json.JSONDecodeError as exc:
            raise ParseError(f"{marker} is not valid JSON: {exc}") from exc
        if not isinstance(value, dict):
            raise ParseError(f"{marker} is not a JSON object")
        return value
    raise ParseError(f"{marker} not found in watch page")


def extract_documents(html: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return ``(player_response, initial_data)`` from watch page HTML."""
    document = BeautifulSoup(html, "html.parser")
    scripts = [script.get_text() for script in document.select("script")]

    player_response = extract_blob(scripts, PLAYER_RESPONSE_MARKER)
    initial_data = extract_blob(scripts, INITIAL_DATA_MARKER)
    return player_response, initial_data


def get_html5player(html: str) -> Optional[str]:
    """Absolute URL of the player script referenced by the page, if any."""
    match = HTML5PLAYER_PATTERN.search(html)
    if not match:
        return None
    path = match.group(1) or match.group(2)
    return urllib.parse.urljoin(SITE_ROOT, path.replace("\\/", "/"))
