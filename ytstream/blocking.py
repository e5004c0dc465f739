"""Synchronous wrappers around the async Video and Stream.

Each blocking Video owns a private event loop; streams opened from it run
on the same loop. The wrappers are generated from the async methods.
"""

import asyncio
import functools
from typing import Iterator, Optional

from . import stream as _stream
from . import video as _video
from .models import VideoFormat, VideoOptions


def _sync(cls, name: str):
    coroutine_function = getattr(cls, name)

    @functools.wraps(coroutine_function, updated=())
    def method(self, *args, **kwargs):
        return self._run(getattr(self._async, name)(*args, **kwargs))

    return method


class _Blocking:
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def _run(self, coroutine):
        return self._loop.run_until_complete(coroutine)


class Stream(_Blocking):
    """Blocking view of a Stream; iterate it to receive every chunk."""

    def __init__(self, async_stream: _stream.Stream, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__(loop)
        self._async = async_stream

    chunk = _sync(_stream.Stream, "chunk")

    @property
    def content_length(self) -> Optional[int]:
        return self._async.content_length

    def __iter__(self) -> Iterator[bytes]:
        while True:
            data = self.chunk()
            if data is None:
                return
            yield data


class Video(_Blocking):
    """Blocking counterpart of ``ytstream.video.Video``."""

    def __init__(self, url_or_id: str, options: Optional[VideoOptions] = None, client=None) -> None:
        super().__init__(asyncio.new_event_loop())
        try:
            self._async = _video.Video(url_or_id, options, client)
        except BaseException:
            self._loop.close()
            raise

    @classmethod
    def new(cls, url_or_id: str) -> "Video":
        return cls(url_or_id)

    @classmethod
    def new_with_options(cls, url_or_id: str, options: VideoOptions) -> "Video":
        return cls(url_or_id, options)

    get_basic_info = _sync(_video.Video, "get_basic_info")
    get_info = _sync(_video.Video, "get_info")
    download = _sync(_video.Video, "download")

    def stream(self) -> Stream:
        return Stream(self._run(self._async.stream()), self._loop)

    def stream_with_format(self, fmt: VideoFormat, start: int = 0, end: Optional[int] = None) -> Stream:
        return Stream(self._run(self._async.stream_with_format(fmt, start, end)), self._loop)

    def get_video_id(self) -> str:
        return self._async.get_video_id()

    def get_video_url(self) -> str:
        return self._async.get_video_url()

    @property
    def options(self) -> VideoOptions:
        return self._async.options

    def close(self) -> None:
        if self._loop.is_closed():
            return
        try:
            self._run(self._async.aclose())
        finally:
            self._loop.close()

    def __enter__(self) -> "Video":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
