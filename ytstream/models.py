"""Data models, enums and option records for video extraction."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .constants import (
    BASE_URL,
    DEFAULT_DL_CHUNK_SIZE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_MAX_DELAY,
    DEFAULT_RETRY_MIN_DELAY,
    DEFAULT_TIMEOUT,
)


class VideoQuality(Enum):
    """Which end of the sorted, filtered catalog to pick from."""
    HIGHEST = "highest"
    LOWEST = "lowest"
    HIGHEST_AUDIO = "highestaudio"
    LOWEST_AUDIO = "lowestaudio"
    HIGHEST_VIDEO = "highestvideo"
    LOWEST_VIDEO = "lowestvideo"


class VideoSearchOptions(Enum):
    """Track filter applied before quality selection."""
    VIDEO_AUDIO = "videoaudio"
    VIDEO = "video"
    VIDEO_ONLY = "videoonly"
    AUDIO = "audio"
    AUDIO_ONLY = "audioonly"
    ALL = "all"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for transient transport failures."""
    min_delay: float = DEFAULT_RETRY_MIN_DELAY
    max_delay: float = DEFAULT_RETRY_MAX_DELAY
    max_retries: int = DEFAULT_MAX_RETRIES


@dataclass(frozen=True)
class RequestOptions:
    """Network options shared by every request a Video makes."""
    proxy: Optional[str] = None
    cookies: Optional[str] = None
    source_address: Optional[str] = None
    headers: Tuple[Tuple[str, str], ...] = ()
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryPolicy = field(default_factory=RetryPolicy)


@dataclass(frozen=True)
class DownloadOptions:
    dl_chunk_size: Optional[int] = None

    @property
    def chunk_size(self) -> int:
        return self.dl_chunk_size or DEFAULT_DL_CHUNK_SIZE


@dataclass(frozen=True)
class VideoOptions:
    """Immutable configuration held by a Video for its whole lifetime."""
    quality: VideoQuality = VideoQuality.HIGHEST
    filter: VideoSearchOptions = VideoSearchOptions.VIDEO_AUDIO
    container: Optional[str] = None
    quality_label: Optional[str] = None
    itag: Optional[int] = None
    predicate: Optional[Callable[["VideoFormat"], bool]] = None
    download_options: DownloadOptions = field(default_factory=DownloadOptions)
    request_options: RequestOptions = field(default_factory=RequestOptions)


@dataclass(frozen=True)
class RangeObject:
    start: int
    end: int


@dataclass(frozen=True)
class MimeType:
    """Parsed ``type/subtype; codecs="..."`` string."""
    mime: str
    container: str
    codecs: Tuple[str, ...] = ()
    video_codec: Optional[str] = None
    audio_codec: Optional[str] = None


@dataclass(frozen=True)
class VideoFormat:
    """One playable representation of a video."""
    itag: int
    url: str
    mime_type: MimeType
    bitrate: int = 0
    audio_bitrate: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[int] = None
    quality: Optional[str] = None
    quality_label: Optional[str] = None
    audio_quality: Optional[str] = None
    audio_sample_rate: Optional[str] = None
    audio_channels: Optional[int] = None
    content_length: Optional[int] = None
    approx_duration_ms: Optional[int] = None
    last_modified: Optional[str] = None
    init_range: Optional[RangeObject] = None
    index_range: Optional[RangeObject] = None
    has_video: bool = False
    has_audio: bool = False
    is_live: bool = False
    is_hls: bool = False
    is_dash_mpd: bool = False

    @property
    def container(self) -> str:
        return self.mime_type.container

    @property
    def has_audio_and_video(self) -> bool:
        return self.has_video and self.has_audio


@dataclass(frozen=True)
class Thumbnail:
    url: str
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class Author:
    """Channel that uploaded the video."""
    id: str
    name: str
    user: str = ""
    channel_url: str = ""
    external_channel_url: str = ""
    user_url: str = ""
    thumbnails: Tuple[Thumbnail, ...] = ()
    verified: bool = False
    subscriber_count: int = 0


@dataclass(frozen=True)
class Chapter:
    title: str
    start_time: int


@dataclass(frozen=True)
class StoryBoard:
    """One level of the scrubbing preview sprite sheets."""
    template_url: str
    thumbnail_width: int
    thumbnail_height: int
    thumbnail_count: int
    interval: int
    columns: int
    rows: int
    storyboard_count: int


@dataclass(frozen=True)
class RelatedVideo:
    id: str
    title: str
    url: str
    published: str = ""
    author: Optional[Author] = None
    short_view_count_text: str = ""
    view_count: int = 0
    length_seconds: int = 0
    thumbnails: Tuple[Thumbnail, ...] = ()
    is_live: bool = False


@dataclass(frozen=True)
class VideoDetails:
    """Descriptive metadata assembled from both page documents."""
    video_id: str
    title: str = ""
    description: str = ""
    length_seconds: int = 0
    view_count: int = 0
    keywords: Tuple[str, ...] = ()
    channel_id: str = ""
    author: Optional[Author] = None
    likes: int = 0
    dislikes: int = 0
    chapters: Tuple[Chapter, ...] = ()
    storyboards: Tuple[StoryBoard, ...] = ()
    thumbnails: Tuple[Thumbnail, ...] = ()
    category: str = ""
    publish_date: str = ""
    upload_date: str = ""
    is_live_content: bool = False
    is_private: bool = False
    is_unlisted: bool = False
    is_family_safe: bool = True
    age_restricted: bool = False
    available_countries: Tuple[str, ...] = ()
    media: Dict[str, Any] = field(default_factory=dict)

    @property
    def video_url(self) -> str:
        return BASE_URL + self.video_id


@dataclass(frozen=True)
class VideoInfo:
    """Public result of an info request."""
    formats: Tuple[VideoFormat, ...]
    video_details: VideoDetails
    dash_manifest_url: Optional[str] = None
    hls_manifest_url: Optional[str] = None
    related_videos: Tuple[RelatedVideo, ...] = ()
