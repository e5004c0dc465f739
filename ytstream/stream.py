"""Pull-based byte streams over a chosen format."""

import abc
import asyncio
import collections
import urllib.parse
from typing import Deque, Optional

import m3u8

from .constants import DEFAULT_DL_CHUNK_SIZE
from .errors import ConfigError, SourceUnavailable
from .http import HttpClient
from .logger import VideoLogger


class Stream(abc.ABC):
    """A resumable source of media bytes.

    ``await chunk()`` returns the next window or None once the source is
    exhausted. A stream belongs to one consumer; open another stream for
    parallel reads.
    """

    def __init__(self, client: HttpClient, link: str, logger: Optional[VideoLogger] = None) -> None:
        self.client = client
        self.link = link
        self.logger = logger or VideoLogger("ytstream.stream")

    @property
    @abc.abstractmethod
    def content_length(self) -> Optional[int]:
        """Total size in bytes, or None when unknown in advance."""

    @abc.abstractmethod
    async def chunk(self) -> Optional[bytes]:
        """Fetch the next window of bytes."""

    def __aiter__(self) -> "Stream":
        return self

    async def __anext__(self) -> bytes:
        data = await self.chunk()
        if data is None:
            raise StopAsyncIteration
        return data


class NonLiveStream(Stream):
    """Bounded source read in ``[position, position + dl_chunk_size)`` windows."""

    def __init__(
        self,
        client: HttpClient,
        link: str,
        content_length: int,
        dl_chunk_size: int = DEFAULT_DL_CHUNK_SIZE,
        start: int = 0,
        end: Optional[int] = None,
        logger: Optional[VideoLogger] = None,
    ) -> None:
        super().__init__(client, link, logger)
        if dl_chunk_size <= 0:
            raise ConfigError("dl_chunk_size must be positive")
        if content_length < 0:
            raise ConfigError("content_length must not be negative")
        if end is None or end > content_length:
            end = content_length
        if start < 0 or start > end:
            raise ConfigError(f"Invalid byte range [{start}, {end})")

        self._content_length = content_length
        self.dl_chunk_size = dl_chunk_size
        self.position = start
        self.end = end

    @property
    def content_length(self) -> int:
        return self._content_length

    @property
    def finished(self) -> bool:
        return self.position >= self.end

    async def chunk(self) -> Optional[bytes]:
        if self.finished:
            return None

        stop = min(self.position + self.dl_chunk_size, self.end)
        self.logger.debug("range [%d, %d) of %d", self.position, stop, self._content_length)
        response = await self.client.request(
            "GET", self.link, headers={"Range": f"bytes={self.position}-{stop - 1}"}
        )
        body = response.content
        if response.status_code == 200 and len(body) > stop - self.position:
            # Origin ignored the Range header and sent the whole body
            body = body[self.position:stop]
        if not body:
            raise SourceUnavailable(f"Empty response for bytes {self.position}-{stop - 1}")

        self.position += len(body)
        return body


class LiveStream(Stream):
    """Open-ended source following an HLS media playlist until it ends."""

    def __init__(
        self,
        client: HttpClient,
        link: str,
        poll_interval: Optional[float] = None,
        logger: Optional[VideoLogger] = None,
    ) -> None:
        super().__init__(client, link, logger)
        self.poll_interval = poll_interval
        self.target_duration = 5.0
        self.ended = False
        self._last_sequence = -1
        self._pending: Deque[str] = collections.deque()
        self._refreshed = False

    @property
    def content_length(self) -> Optional[int]:
        return None

    async def _load_playlist(self) -> m3u8.M3U8:
        text = await self.client.get_text(self.link)
        try:
            return m3u8.loads(text)
        except ValueError as exc:
            raise SourceUnavailable(f"Unreadable HLS playlist: {exc}") from exc

    async def _refresh(self) -> None:
        playlist = await self._load_playlist()

        if playlist.is_variant:
            if not playlist.playlists:
                raise SourceUnavailable("HLS master playlist lists no variants")
            self.link = urllib.parse.urljoin(self.link, playlist.playlists[0].uri)
            self.logger.debug("following variant playlist %s", self.link)
            playlist = await self._load_playlist()

        if playlist.target_duration:
            self.target_duration = float(playlist.target_duration)

        sequence = playlist.media_sequence or 0
        for segment in playlist.segments:
            if sequence > self._last_sequence:
                self._pending.append(urllib.parse.urljoin(self.link, segment.uri))
                self._last_sequence = sequence
            sequence += 1

        if playlist.is_endlist:
            self.ended = True
        self._refreshed = True

    async def chunk(self) -> Optional[bytes]:
        while not self._pending:
            if self.ended:
                return None
            if self._refreshed:
                delay = self.target_duration if self.poll_interval is None else self.poll_interval
                await asyncio.sleep(delay)
            await self._refresh()

        segment = self._pending.popleft()
        self.logger.debug("segment %s", segment)
        return await self.client.get_bytes(segment)
