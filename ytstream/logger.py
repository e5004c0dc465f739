"""Context-aware logger for extraction and streaming."""

import logging
from typing import Optional, Set, Tuple


class VideoLogger:
    """Prefixes log records with the video and format being processed."""

    def __init__(self, name: str = "ytstream", video_id: Optional[str] = None) -> None:
        self._logger = logging.getLogger(name)
        self.current_video_id: Optional[str] = video_id
        self.current_itag: Optional[int] = None
        self._reported: Set[Tuple[Optional[str], Optional[int], str]] = set()

    def set_context(self, video_id: Optional[str], itag: Optional[int] = None) -> None:
        self.current_video_id = video_id
        self.current_itag = itag

    def set_itag(self, itag: Optional[int]) -> None:
        self.current_itag = itag

    def reset_reported(self) -> None:
        """Forget which warnings were already emitted."""
        self._reported.clear()

    def child(self, suffix: str) -> "VideoLogger":
        """Return a logger one level down the hierarchy sharing this context."""
        child = VideoLogger(f"{self._logger.name}.{suffix}", self.current_video_id)
        child.current_itag = self.current_itag
        return child

    def _format_with_context(self, message: str) -> str:
        context_parts = []
        if self.current_video_id:
            context_parts.append(f"video_id={self.current_video_id}")
        if self.current_itag is not None:
            context_parts.append(f"itag={self.current_itag}")
        if context_parts:
            return f"[{' '.join(context_parts)}] {message}"
        return message

    def debug(self, message: str, *args) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(self._format_with_context(message), *args)

    def info(self, message: str, *args) -> None:
        self._logger.info(self._format_with_context(message), *args)

    def warning(self, message: str, *args) -> None:
        # Same warning for the same format is only worth reporting once
        key = (self.current_video_id, self.current_itag, message % args if args else message)
        if key in self._reported:
            return
        self._reported.add(key)
        self._logger.warning(self._format_with_context(message), *args)

    def error(self, message: str, *args) -> None:
        self._logger.error(self._format_with_context(message), *args)
