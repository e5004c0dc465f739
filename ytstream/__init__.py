"""Video watch-page extraction and resumable streaming."""

# Import main components for easier access
from .config import apply_environment, load_options_file, options_from_dict
from .errors import (
    ConfigError,
    FormatNotFound,
    ParseError,
    PlayabilityAnalyzer,
    SourceUnavailable,
    TransportError,
    VideoError,
    VideoIsPrivate,
    VideoNotFound,
)
from .http import HttpClient
from .logger import VideoLogger
from .models import (
    Author,
    Chapter,
    DownloadOptions,
    MimeType,
    RangeObject,
    RelatedVideo,
    RequestOptions,
    RetryPolicy,
    StoryBoard,
    Thumbnail,
    VideoDetails,
    VideoFormat,
    VideoInfo,
    VideoOptions,
    VideoQuality,
    VideoSearchOptions,
)
from .selection import choose_format, sort_formats
from .stream import LiveStream, NonLiveStream, Stream
from .utils import get_video_id, validate_id
from .video import Video

__all__ = [
    # Main entry points
    "Video",
    "Stream",
    "NonLiveStream",
    "LiveStream",
    "HttpClient",
    # Helpers
    "get_video_id",
    "validate_id",
    "choose_format",
    "sort_formats",
    # Configuration
    "VideoOptions",
    "RequestOptions",
    "DownloadOptions",
    "RetryPolicy",
    "VideoQuality",
    "VideoSearchOptions",
    "options_from_dict",
    "load_options_file",
    "apply_environment",
    # Models
    "VideoInfo",
    "VideoDetails",
    "VideoFormat",
    "MimeType",
    "RangeObject",
    "Author",
    "Chapter",
    "StoryBoard",
    "Thumbnail",
    "RelatedVideo",
    # Errors and logging
    "VideoError",
    "VideoNotFound",
    "VideoIsPrivate",
    "SourceUnavailable",
    "ParseError",
    "FormatNotFound",
    "TransportError",
    "ConfigError",
    "PlayabilityAnalyzer",
    "VideoLogger",
]
