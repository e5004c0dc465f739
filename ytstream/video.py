"""Async facade tying page extraction, format catalog and streaming together."""

from typing import Dict, List, Optional

from yt_dlp.utils import update_url_query

from .cipher import SignatureCipher
from .constants import BASE_URL
from .errors import (
    CipherError,
    FormatNotFound,
    ParseError,
    PlayabilityAnalyzer,
    SourceUnavailable,
    TransportError,
    VideoNotFound,
)
from .extractor import extract_documents, get_html5player
from .extras import clean_video_details, get_related_videos
from .formats import (
    merge_formats,
    needs_decipher,
    parse_hls_manifest,
    parse_video_formats,
    rewrite_manifest_host,
)
from .http import HttpClient
from .logger import VideoLogger
from .models import VideoFormat, VideoInfo, VideoOptions
from .playability import check_playability
from .selection import choose_format, sort_formats
from .stream import LiveStream, NonLiveStream, Stream
from .utils import dig, get_video_id


class Video:
    """A single video addressed by id or URL.

    Every info call refetches the watch page; nothing is cached between
    calls except deciphering plans keyed by player script URL.
    """

    def __init__(
        self,
        url_or_id: str,
        options: Optional[VideoOptions] = None,
        client: Optional[HttpClient] = None,
    ) -> None:
        video_id = get_video_id(url_or_id)
        if video_id is None:
            raise VideoNotFound(f"Not a valid video id or URL: {url_or_id!r}")

        self.video_id = video_id
        self.options = options or VideoOptions()
        self._owns_client = client is None
        self.client = client or HttpClient.from_options(self.options.request_options)
        self.logger = VideoLogger("ytstream.video", video_id)
        self.analyzer = PlayabilityAnalyzer()
        self._ciphers: Dict[str, SignatureCipher] = {}

    @classmethod
    def new(cls, url_or_id: str) -> "Video":
        return cls(url_or_id)

    @classmethod
    def new_with_options(cls, url_or_id: str, options: VideoOptions) -> "Video":
        return cls(url_or_id, options)

    def get_video_id(self) -> str:
        return self.video_id

    def get_video_url(self) -> str:
        return BASE_URL + self.video_id

    async def get_basic_info(self) -> VideoInfo:
        """Metadata and streaming-data formats, without manifest formats."""
        return await self._fetch(full=False)

    async def get_info(self) -> VideoInfo:
        """Like get_basic_info, plus formats recovered from the HLS manifest."""
        return await self._fetch(full=True)

    async def _fetch(self, full: bool) -> VideoInfo:
        page_url = update_url_query(self.get_video_url(), {"hl": "en"})
        self.logger.reset_reported()
        self.logger.debug("fetching watch page (full=%s)", full)
        html = await self.client.get_text(page_url)

        player_response, initial_data = extract_documents(html)
        check_playability(player_response, reject_upcoming=full, analyzer=self.analyzer)

        cipher = None
        if needs_decipher(player_response):
            cipher = await self._load_cipher(html)

        formats: List[VideoFormat] = parse_video_formats(player_response, cipher, self.logger)

        hls_manifest_url = dig(player_response, "streamingData", "hlsManifestUrl", expected_type=str)
        dash_manifest_url = dig(player_response, "streamingData", "dashManifestUrl", expected_type=str)
        if full and hls_manifest_url:
            formats = merge_formats(formats, await self._hls_formats(hls_manifest_url))

        if not formats:
            raise SourceUnavailable("No playable formats remain for this video")

        return VideoInfo(
            formats=tuple(sort_formats(formats)),
            video_details=clean_video_details(initial_data, player_response, self.video_id),
            dash_manifest_url=dash_manifest_url,
            hls_manifest_url=hls_manifest_url,
            related_videos=get_related_videos(initial_data),
        )

    async def _load_cipher(self, html: str) -> Optional[SignatureCipher]:
        player_url = get_html5player(html)
        if player_url is None:
            self.logger.warning("Watch page does not reference a player script")
            return None

        if player_url in self._ciphers:
            return self._ciphers[player_url]

        js = await self.client.get_text(player_url)
        try:
            cipher = SignatureCipher.from_player_script(js)
        except CipherError as exc:
            self.logger.warning("Cannot decipher signatures from %s: %s", player_url, exc)
            return None

        self._ciphers[player_url] = cipher
        return cipher

    async def _hls_formats(self, manifest_url: str) -> List[VideoFormat]:
        try:
            body = await self.client.get_text(rewrite_manifest_host(manifest_url))
            return parse_hls_manifest(body)
        except (TransportError, ParseError) as exc:
            self.logger.warning("Ignoring HLS manifest: %s", exc)
            return []

    async def stream(self) -> Stream:
        """Open a stream over the format chosen by this video's options."""
        info = await self.get_info()
        try:
            fmt = choose_format(info.formats, self.options)
        except FormatNotFound as exc:
            raise SourceUnavailable(str(exc)) from exc
        return await self.stream_with_format(fmt)

    async def stream_with_format(
        self, fmt: VideoFormat, start: int = 0, end: Optional[int] = None
    ) -> Stream:
        """Open a stream over *fmt*, limited to ``[start, end)`` for bounded sources."""
        logger = self.logger.child("stream")
        logger.set_itag(fmt.itag)

        if fmt.is_hls:
            return LiveStream(self.client, fmt.url, logger=logger)

        content_length = fmt.content_length
        if content_length is None:
            try:
                content_length = await self.client.content_length(fmt.url)
            except TransportError as exc:
                raise SourceUnavailable(f"Cannot determine size of format {fmt.itag}: {exc}") from exc
            if content_length is None:
                raise SourceUnavailable(f"Origin did not report a size for format {fmt.itag}")

        return NonLiveStream(
            self.client,
            fmt.url,
            content_length,
            dl_chunk_size=self.options.download_options.chunk_size,
            start=start,
            end=end,
            logger=logger,
        )

    async def download(self, path: str) -> int:
        """Write the chosen format to *path* and return the number of bytes written."""
        stream = await self.stream()
        written = 0
        with open(path, "wb") as f:
            async for data in stream:
                f.write(data)
                written += len(data)
        self.logger.info("wrote %d bytes to %s", written, path)
        return written

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "Video":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
