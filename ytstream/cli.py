"""Command line entry point: ``python -m ytstream info|download``."""

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any, Dict, Optional

from .blocking import Video
from .config import apply_environment, load_options_file, options_from_dict
from .errors import VideoError
from .models import VideoInfo, VideoOptions, VideoQuality, VideoSearchOptions


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(
        prog="ytstream",
        description="Inspect and download videos from their watch pages.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON options file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    # Selection
    parser.add_argument(
        "--quality",
        choices=[quality.value for quality in VideoQuality],
        default=None,
        help="Which end of the sorted catalog to pick (default: highest)",
    )
    parser.add_argument(
        "--filter",
        choices=[search.value for search in VideoSearchOptions],
        default=None,
        help="Track filter applied before quality selection (default: videoaudio)",
    )
    parser.add_argument("--container", default=None, help="Only consider this container, e.g. mp4")
    parser.add_argument("--itag", type=int, default=None, help="Only consider this format id")

    # Network
    parser.add_argument("--proxy", default=None, help="Proxy URL (http, https or socks5)")
    parser.add_argument("--cookies", default=None, help='Cookie header, e.g. "a=b; c=d"')
    parser.add_argument("--source-address", default=None, help="Local IP address to bind to")
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Bytes per ranged request (default: 10 MiB)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Print video details and formats")
    info.add_argument("video", help="Video id or URL")
    info.add_argument("--basic", action="store_true", help="Skip manifest formats")
    info.add_argument("--json", action="store_true", help="Print the full info as JSON")

    download = subparsers.add_parser("download", help="Download the selected format")
    download.add_argument("video", help="Video id or URL")
    download.add_argument(
        "-o", "--output",
        default=None,
        help="Output file (default: <video id>.<container>)",
    )

    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> VideoOptions:
    """Layer config file, command line flags and environment, in that order."""
    options = load_options_file(args.config) if args.config else VideoOptions()
    overrides: Dict[str, Any] = {
        "quality": args.quality,
        "filter": args.filter,
        "container": args.container,
        "itag": args.itag,
        "proxy": args.proxy,
        "cookies": args.cookies,
        "source_address": args.source_address,
        "dl_chunk_size": args.chunk_size,
    }
    options = options_from_dict(
        {key: value for key, value in overrides.items() if value is not None}, base=options
    )
    return apply_environment(options)


def print_info(info: VideoInfo) -> None:
    details = info.video_details
    print(f"Title:    {details.title}")
    print(f"Author:   {details.author.name if details.author else ''}")
    print(f"Duration: {details.length_seconds}s")
    print(f"Views:    {details.view_count}")
    print(f"URL:      {details.video_url}")
    print()
    print(f"{'itag':>5}  {'container':<9}  {'quality':<14}  {'bitrate':>9}  tracks")
    for fmt in info.formats:
        tracks = "+".join(name for name, present in (("video", fmt.has_video), ("audio", fmt.has_audio)) if present)
        print(
            f"{fmt.itag:>5}  {fmt.container:<9}  {fmt.quality_label or fmt.audio_quality or '':<14}"
            f"  {fmt.bitrate:>9}  {tracks}{' (hls)' if fmt.is_hls else ''}"
        )


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    video: Optional[Video] = None
    try:
        video = Video(args.video, build_options(args))
        if args.command == "info":
            info = video.get_basic_info() if args.basic else video.get_info()
            if args.json:
                print(json.dumps(dataclasses.asdict(info), indent=2))
            else:
                print_info(info)
        else:
            output = args.output
            if output is None:
                container = video.options.container or "mp4"
                output = f"{video.get_video_id()}.{container}"
            written = video.download(output)
            print(f"[download] {written} bytes written to {output}")
    except VideoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if video is not None:
            video.close()
    return 0
