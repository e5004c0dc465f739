"""Site constants, request defaults and the static itag table."""

from typing import Dict, Optional, Tuple

BASE_URL = "https://www.youtube.com/watch?v="
SITE_ROOT = "https://www.youtube.com"
SITE_HOST = "www.youtube.com"

VALID_QUERY_DOMAINS: Tuple[str, ...] = (
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "gaming.youtube.com",
)

# Bigger windows than this get throttled by the origin.
DEFAULT_DL_CHUNK_SIZE = 1024 * 1024 * 10

DEFAULT_RETRY_MIN_DELAY = 0.5
DEFAULT_RETRY_MAX_DELAY = 10.0
DEFAULT_MAX_RETRIES = 3

DEFAULT_TIMEOUT = 30.0

# User-Agent rotation pool to appear as different browsers
USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15',
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0',
]

# Container ranking used by the sorter, lower is preferred.
CONTAINER_PREFERENCE: Tuple[str, ...] = ("mp4", "webm", "m4a", "ts", "3gp", "flv")

# Environment variable names
ENV_PROXY = "YTSTREAM_PROXY"
ENV_COOKIES = "YTSTREAM_COOKIES"
ENV_CHUNK_SIZE = "YTSTREAM_CHUNK_SIZE"


def _fmt(
    mime_type: str,
    quality_label: Optional[str],
    bitrate: Optional[int],
    audio_bitrate: Optional[int],
) -> Dict[str, object]:
    return {
        "mimeType": mime_type,
        "qualityLabel": quality_label,
        "bitrate": bitrate,
        "audioBitrate": audio_bitrate,
    }


# Known characteristics per itag. Manifest entries carry nothing but the
# itag and the URL, so this is the only source of their metadata.
FORMATS: Dict[int, Dict[str, object]] = {
    5: _fmt('video/flv; codecs="Sorenson H.283, mp3"', "240p", 250000, 64),
    6: _fmt('video/flv; codecs="Sorenson H.263, mp3"', "270p", 800000, 64),
    13: _fmt('video/3gp; codecs="MPEG-4 Visual, aac"', None, 500000, None),
    17: _fmt('video/3gp; codecs="MPEG-4 Visual, aac"', "144p", 50000, 24),
    18: _fmt('video/mp4; codecs="H.264, aac"', "360p", 500000, 96),
    22: _fmt('video/mp4; codecs="H.264, aac"', "720p", 2000000, 192),
    34: _fmt('video/flv; codecs="H.264, aac"', "360p", 500000, 128),
    35: _fmt('video/flv; codecs="H.264, aac"', "480p", 800000, 128),
    36: _fmt('video/3gp; codecs="MPEG-4 Visual, aac"', "240p", 175000, 32),
    37: _fmt('video/mp4; codecs="H.264, aac"', "1080p", 3000000, 192),
    38: _fmt('video/mp4; codecs="H.264, aac"', "3072p", 3500000, 192),
    43: _fmt('video/webm; codecs="VP8, vorbis"', "360p", 500000, 128),
    44: _fmt('video/webm; codecs="VP8, vorbis"', "480p", 1000000, 128),
    45: _fmt('video/webm; codecs="VP8, vorbis"', "720p", 2000000, 192),
    46: _fmt('video/webm; codecs="vp8, vorbis"', "1080p", None, 192),
    82: _fmt('video/mp4; codecs="H.264, aac"', "360p", 500000, 96),
    83: _fmt('video/mp4; codecs="H.264, aac"', "240p", 500000, 96),
    84: _fmt('video/mp4; codecs="H.264, aac"', "720p", 2000000, 192),
    85: _fmt('video/mp4; codecs="H.264, aac"', "1080p", 3000000, 192),
    91: _fmt('video/ts; codecs="H.264, aac"', "144p", 100000, 48),
    92: _fmt('video/ts; codecs="H.264, aac"', "240p", 150000, 48),
    93: _fmt('video/ts; codecs="H.264, aac"', "360p", 500000, 128),
    94: _fmt('video/ts; codecs="H.264, aac"', "480p", 800000, 128),
    95: _fmt('video/ts; codecs="H.264, aac"', "720p", 1500000, 256),
    96: _fmt('video/ts; codecs="H.264, aac"', "1080p", 2500000, 256),
    100: _fmt('video/webm; codecs="VP8, vorbis"', "360p", None, 128),
    101: _fmt('video/webm; codecs="VP8, vorbis"', "360p", None, 192),
    102: _fmt('video/webm; codecs="VP8, vorbis"', "720p", None, 192),
    120: _fmt('video/flv; codecs="H.264, aac"', "720p", 2000000, 128),
    127: _fmt('audio/ts; codecs="aac"', None, None, 96),
    128: _fmt('audio/ts; codecs="aac"', None, None, 96),
    132: _fmt('video/ts; codecs="H.264, aac"', "240p", 150000, 48),
    133: _fmt('video/mp4; codecs="H.264"', "240p", 300000, None),
    134: _fmt('video/mp4; codecs="H.264"', "360p", 400000, None),
    135: _fmt('video/mp4; codecs="H.264"', "480p", 1000000, None),
    136: _fmt('video/mp4; codecs="H.264"', "720p", 1000000, None),
    137: _fmt('video/mp4; codecs="H.264"', "1080p", 2500000, None),
    138: _fmt('video/mp4; codecs="H.264"', "4320p", 13500000, None),
    139: _fmt('audio/mp4; codecs="aac"', None, None, 48),
    140: _fmt('audio/m4a; codecs="aac"', None, None, 128),
    141: _fmt('audio/mp4; codecs="aac"', None, None, 256),
    151: _fmt('video/ts; codecs="H.264, aac"', "720p", 50000, 24),
    160: _fmt('video/mp4; codecs="H.264"', "144p", 100000, None),
    171: _fmt('audio/webm; codecs="vorbis"', None, None, 128),
    172: _fmt('audio/webm; codecs="vorbis"', None, None, 192),
    242: _fmt('video/webm; codecs="VP9"', "240p", 100000, None),
    243: _fmt('video/webm; codecs="VP9"', "360p", 250000, None),
    244: _fmt('video/webm; codecs="VP9"', "480p", 500000, None),
    247: _fmt('video/webm; codecs="VP9"', "720p", 700000, None),
    248: _fmt('video/webm; codecs="VP9"', "1080p", 1500000, None),
    249: _fmt('audio/webm; codecs="opus"', None, None, 48),
    250: _fmt('audio/webm; codecs="opus"', None, None, 64),
    251: _fmt('audio/webm; codecs="opus"', None, None, 160),
    264: _fmt('video/mp4; codecs="H.264"', "1440p", 4000000, None),
    266: _fmt('video/mp4; codecs="H.264"', "2160p", 12500000, None),
    271: _fmt('video/webm; codecs="VP9"', "1440p", 9000000, None),
    272: _fmt('video/webm; codecs="VP9"', "4320p", 20000000, None),
    278: _fmt('video/webm; codecs="VP9"', "144p 30fps", 80000, None),
    298: _fmt('video/mp4; codecs="H.264"', "720p", 3000000, None),
    299: _fmt('video/mp4; codecs="H.264"', "1080p", 5500000, None),
    300: _fmt('video/ts; codecs="H.264, aac"', "720p", 1318000, 48),
    301: _fmt('video/ts; codecs="H.264, aac"', "1080p", 3000000, 128),
    302: _fmt('video/webm; codecs="VP9"', "720p HFR", 2500000, None),
    303: _fmt('video/webm; codecs="VP9"', "1080p HFR", 5000000, None),
    308: _fmt('video/webm; codecs="VP9"', "1440p HFR", 10000000, None),
    313: _fmt('video/webm; codecs="VP9"', "2160p", 13000000, None),
    315: _fmt('video/webm; codecs="VP9"', "2160p HFR", 20000000, None),
    330: _fmt('video/webm; codecs="VP9"', "144p HDR, HFR", 80000, None),
    331: _fmt('video/webm; codecs="VP9"', "240p HDR, HFR", 100000, None),
    332: _fmt('video/webm; codecs="VP9"', "360p HDR, HFR", 250000, None),
    333: _fmt('video/webm; codecs="VP9"', "480p HDR, HFR", 500000, None),
    334: _fmt('video/webm; codecs="VP9"', "720p HDR, HFR", 1000000, None),
    335: _fmt('video/webm; codecs="VP9"', "1080p HDR, HFR", 1500000, None),
    336: _fmt('video/webm; codecs="VP9"', "1440p HDR, HFR", 5000000, None),
    337: _fmt('video/webm; codecs="VP9"', "2160p HDR, HFR", 12000000, None),
}
