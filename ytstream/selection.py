"""Ordering the format catalog and choosing one format from it."""

import re
from typing import List, Sequence, Tuple

from .constants import CONTAINER_PREFERENCE
from .errors import FormatNotFound
from .models import VideoFormat, VideoOptions, VideoQuality, VideoSearchOptions


def quality_number(fmt: VideoFormat) -> int:
    """Vertical resolution from the quality label (``1080p60`` -> 1080)."""
    if fmt.quality_label:
        match = re.match(r"(\d+)", fmt.quality_label)
        if match:
            return int(match.group(1))
    return fmt.height or 0


def container_rank(fmt: VideoFormat) -> int:
    try:
        return CONTAINER_PREFERENCE.index(fmt.container)
    except ValueError:
        return len(CONTAINER_PREFERENCE)


def sort_key(fmt: VideoFormat) -> Tuple[int, int, int, int, int]:
    return (
        0 if fmt.has_audio_and_video else 1,
        container_rank(fmt),
        -quality_number(fmt),
        -fmt.bitrate,
        -(fmt.audio_bitrate or 0),
    )


def sort_formats(formats: Sequence[VideoFormat]) -> List[VideoFormat]:
    """Muxed formats first, then container preference, then quality and bitrate.

    The sort is stable so equal formats keep their discovery order.
    """
    return sorted(formats, key=sort_key)


def matches_filter(fmt: VideoFormat, search: VideoSearchOptions) -> bool:
    if search is VideoSearchOptions.VIDEO_AUDIO:
        return fmt.has_video and fmt.has_audio
    if search is VideoSearchOptions.VIDEO:
        return fmt.has_video
    if search is VideoSearchOptions.VIDEO_ONLY:
        return fmt.has_video and not fmt.has_audio
    if search is VideoSearchOptions.AUDIO:
        return fmt.has_audio
    if search is VideoSearchOptions.AUDIO_ONLY:
        return fmt.has_audio and not fmt.has_video
    return True


def filter_formats(formats: Sequence[VideoFormat], options: VideoOptions) -> List[VideoFormat]:
    """Apply every criterion in *options* except quality, preserving order."""
    candidates = []
    for fmt in formats:
        if not matches_filter(fmt, options.filter):
            continue
        if options.container and fmt.container != options.container:
            continue
        if options.quality_label and fmt.quality_label != options.quality_label:
            continue
        if options.itag is not None and fmt.itag != options.itag:
            continue
        if options.predicate is not None and not options.predicate(fmt):
            continue
        candidates.append(fmt)
    return candidates


def choose_format(formats: Sequence[VideoFormat], options: VideoOptions) -> VideoFormat:
    """Pick the format *options* asks for; raise FormatNotFound otherwise."""
    candidates = filter_formats(sort_formats(formats), options)

    quality = options.quality
    if quality in (VideoQuality.HIGHEST_AUDIO, VideoQuality.LOWEST_AUDIO):
        candidates = [fmt for fmt in candidates if fmt.has_audio]
        candidates.sort(key=lambda fmt: (-(fmt.audio_bitrate or 0), -fmt.bitrate))
    elif quality in (VideoQuality.HIGHEST_VIDEO, VideoQuality.LOWEST_VIDEO):
        candidates = [fmt for fmt in candidates if fmt.has_video]
        candidates.sort(key=lambda fmt: (-quality_number(fmt), -fmt.bitrate))

    if not candidates:
        raise FormatNotFound("No format matches the requested criteria")

    lowest = quality in (VideoQuality.LOWEST, VideoQuality.LOWEST_AUDIO, VideoQuality.LOWEST_VIDEO)
    chosen = candidates[-1] if lowest else candidates[0]

    if not chosen.url:
        raise FormatNotFound(f"Format {chosen.itag} has no URL")
    return chosen
