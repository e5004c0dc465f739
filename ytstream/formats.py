"""Building the format catalog from streaming data and HLS manifests."""

import re
import urllib.parse
from typing import Any, Dict, Iterable, List, Optional

import m3u8
from yt_dlp.utils import update_url_query

from .cipher import SignatureCipher
from .constants import FORMATS, SITE_HOST
from .errors import CipherError, ParseError
from .logger import VideoLogger
from .models import MimeType, RangeObject, VideoFormat
from .utils import between, dig, parse_int

LIVE_URL_PATTERN = re.compile(r"\bsource[/=]yt_live_broadcast\b")
HLS_URL_PATTERN = re.compile(r"/manifest/hls_(variant|playlist)/")
DASH_URL_PATTERN = re.compile(r"/manifest/dash/")
MANIFEST_ITAG_PATTERN = re.compile(r"/itag/(\d+)/")


def parse_mime_type(mime_type: Optional[str], has_video: bool = True, has_audio: bool = True) -> MimeType:
    """Split ``video/mp4; codecs="avc1.4d401e, mp4a.40.2"`` into its parts."""
    if not mime_type:
        return MimeType(mime="", container="")

    mime = mime_type.split(";")[0].strip()
    container = mime.split("/")[1] if "/" in mime else ""
    codecs_text = between(mime_type, 'codecs="', '"')
    codecs = tuple(codec.strip() for codec in codecs_text.split(",") if codec.strip())

    return MimeType(
        mime=mime,
        container=container,
        codecs=codecs,
        video_codec=codecs[0] if has_video and codecs else None,
        audio_codec=codecs[-1] if has_audio and codecs else None,
    )


def _range(value: Any) -> Optional[RangeObject]:
    if not isinstance(value, dict) or "start" not in value or "end" not in value:
        return None
    return RangeObject(start=parse_int(value.get("start")), end=parse_int(value.get("end")))


def add_format_meta(raw: Dict[str, Any]) -> Optional[VideoFormat]:
    """Turn a raw format dict with a resolved ``url`` into a VideoFormat.

    Static itag metadata fills whatever the raw entry does not carry.
    Returns None when the entry has no itag or no URL.
    """
    itag = parse_int(raw.get("itag"), default=-1)
    url = raw.get("url")
    if itag < 0 or not isinstance(url, str) or not url:
        return None

    merged: Dict[str, Any] = dict(FORMATS.get(itag, {}))
    merged.update({key: value for key, value in raw.items() if value is not None})

    quality_label = dig(merged, "qualityLabel", expected_type=str)
    audio_bitrate = parse_int(merged.get("audioBitrate"), default=0) or None
    audio_quality = dig(merged, "audioQuality", expected_type=str)
    mime_text = dig(merged, "mimeType", expected_type=str)

    has_video = bool(quality_label)
    has_audio = bool(audio_bitrate or audio_quality or merged.get("audioSampleRate"))
    if not has_video and not has_audio and mime_text:
        has_video = mime_text.startswith("video/")
        has_audio = mime_text.startswith("audio/")

    content_length = parse_int(merged.get("contentLength"), default=-1)

    return VideoFormat(
        itag=itag,
        url=url,
        mime_type=parse_mime_type(mime_text, has_video, has_audio),
        bitrate=parse_int(merged.get("bitrate")),
        audio_bitrate=audio_bitrate,
        width=parse_int(merged.get("width"), default=0) or None,
        height=parse_int(merged.get("height"), default=0) or None,
        fps=parse_int(merged.get("fps"), default=0) or None,
        quality=dig(merged, "quality", expected_type=str),
        quality_label=quality_label,
        audio_quality=audio_quality,
        audio_sample_rate=dig(merged, "audioSampleRate", expected_type=str),
        audio_channels=parse_int(merged.get("audioChannels"), default=0) or None,
        content_length=content_length if content_length >= 0 else None,
        approx_duration_ms=parse_int(merged.get("approxDurationMs"), default=0) or None,
        last_modified=dig(merged, "lastModified", expected_type=str),
        init_range=_range(merged.get("initRange")),
        index_range=_range(merged.get("indexRange")),
        has_video=has_video,
        has_audio=has_audio,
        is_live=bool(LIVE_URL_PATTERN.search(url)),
        is_hls=bool(HLS_URL_PATTERN.search(url)),
        is_dash_mpd=bool(DASH_URL_PATTERN.search(url)),
    )


def raw_streaming_formats(player_response: Dict[str, Any]) -> List[Dict[str, Any]]:
    streaming_data = dig(player_response, "streamingData", default={})
    raw: List[Dict[str, Any]] = []
    for key in ("formats", "adaptiveFormats"):
        raw.extend(entry for entry in dig(streaming_data, key, default=[]) if isinstance(entry, dict))
    return raw


def _cipher_text(raw: Dict[str, Any]) -> Optional[str]:
    return dig(raw, "signatureCipher", expected_type=str) or dig(raw, "cipher", expected_type=str)


def needs_decipher(player_response: Dict[str, Any]) -> bool:
    """True when at least one format only has a protected locator."""
    return any(
        not raw.get("url") and _cipher_text(raw)
        for raw in raw_streaming_formats(player_response)
    )


def resolve_url(raw: Dict[str, Any], cipher: Optional[SignatureCipher]) -> str:
    """Return the playable URL for a raw format entry.

    Raises CipherError when the entry is protected and cannot be deciphered.
    """
    url = raw.get("url")
    if isinstance(url, str) and url:
        query = urllib.parse.parse_qs(urllib.parse.urlparse(url).query)
        if "ratebypass" not in query:
            url = update_url_query(url, {"ratebypass": "yes"})
        return url

    cipher_text = _cipher_text(raw)
    if not cipher_text:
        raise CipherError("Format carries neither a URL nor a signature cipher")

    args = urllib.parse.parse_qs(cipher_text)
    base_url = (args.get("url") or [""])[0]
    signature = (args.get("s") or [""])[0]
    if not base_url or not signature:
        raise CipherError("Signature cipher lacks url or s")
    if cipher is None:
        raise CipherError("No signature routine available")

    parameter = (args.get("sp") or ["signature"])[0]
    return update_url_query(base_url, {parameter: cipher.decipher(signature)})


def parse_video_formats(
    player_response: Dict[str, Any],
    cipher: Optional[SignatureCipher],
    logger: Optional[VideoLogger] = None,
) -> List[VideoFormat]:
    """Build formats from ``streamingData``, dropping any that cannot be resolved."""
    logger = logger or VideoLogger()
    formats: List[VideoFormat] = []

    for raw in raw_streaming_formats(player_response):
        logger.set_itag(parse_int(raw.get("itag"), default=-1))
        try:
            url = resolve_url(raw, cipher)
        except CipherError as exc:
            logger.warning("Dropping format: %s", exc)
            continue

        fmt = add_format_meta(dict(raw, url=url))
        if fmt is None:
            logger.warning("Dropping format without itag")
            continue
        formats.append(fmt)

    logger.set_itag(None)
    return formats


def rewrite_manifest_host(url: str) -> str:
    """Point a manifest URL at the canonical site host."""
    parsed = urllib.parse.urlparse(urllib.parse.urljoin(f"https://{SITE_HOST}", url))
    return urllib.parse.urlunparse(parsed._replace(netloc=SITE_HOST))


def parse_hls_manifest(body: str) -> List[VideoFormat]:
    """Formats listed in an HLS master manifest, keyed by known itags only."""
    try:
        manifest = m3u8.loads(body)
    except ValueError as exc:
        raise ParseError(f"HLS manifest is malformed: {exc}") from exc

    formats: List[VideoFormat] = []
    seen = set()
    for variant in manifest.playlists:
        uri = variant.uri or ""
        if not re.match(r"^https?://", uri) or uri in seen:
            continue
        match = MANIFEST_ITAG_PATTERN.search(uri)
        if not match:
            continue
        itag = int(match.group(1))
        if itag not in FORMATS:
            continue
        seen.add(uri)
        fmt = add_format_meta({"itag": itag, "url": uri})
        if fmt is not None:
            formats.append(fmt)
    return formats


def merge_formats(*sources: Iterable[VideoFormat]) -> List[VideoFormat]:
    """Concatenate catalogs, keeping the first format seen for each URL."""
    merged: List[VideoFormat] = []
    seen = set()
    for source in sources:
        for fmt in source:
            if fmt.url in seen:
                continue
            seen.add(fmt.url)
            merged.append(fmt)
    return merged
