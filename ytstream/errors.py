"""Error types and playability reason analysis."""

from typing import Dict, List, Optional


class VideoError(Exception):
    """Base class for every failure a public operation can raise."""

    def __init__(self, message: str = "", category: Optional[str] = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.__class__.__name__)
        self.category = category


class VideoNotFound(VideoError):
    """The video id is invalid or the video is unavailable."""


class VideoIsPrivate(VideoError):
    """The video is private."""


class SourceUnavailable(VideoError):
    """No usable stream data for this video."""


class ParseError(VideoError):
    """A watch page or manifest did not have the expected shape."""


class FormatNotFound(VideoError):
    """No format matched the selection criteria."""


class ConfigError(VideoError):
    """Malformed option input."""


class CipherError(VideoError):
    """The player script's signature routine could not be interpreted."""


class TransportError(VideoError):
    """A request failed after exhausting its retries."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlayabilityAnalyzer:
    """Categorizes the site's playability reason text."""

    # Order matters - more specific first
    CATEGORIES = (
        ("private", ("private", "uploader has not made")),
        ("geo_restricted", ("not available in your country", "geo", "region")),
        ("age_restricted", ("sign in to confirm your age", "age-restricted", "inappropriate for some users")),
        ("members_only", ("members only", "members-only", "channel members", "join this channel")),
        ("removed", ("deleted", "removed", "terminated", "no longer available")),
        ("rental", ("requires payment", "rent", "purchase")),
        ("upcoming", ("premieres in", "live event will begin", "scheduled")),
        ("unavailable", ("video unavailable", "content isn't available", "content is not available")),
    )

    def __init__(self) -> None:
        self.counts: Dict[str, int] = {name: 0 for name, _ in self.CATEGORIES}
        self.counts["unknown"] = 0
        self.samples: List[str] = []

    def categorize(self, reason: Optional[str]) -> str:
        """Return the category for *reason* and record it."""
        lowered = (reason or "").lower()

        category = "unknown"
        for name, fragments in self.CATEGORIES:
            if any(fragment in lowered for fragment in fragments):
                category = name
                break

        self.counts[category] += 1
        # Keep only the first 5 sample messages
        if reason and len(self.samples) < 5 and reason not in self.samples:
            self.samples.append(reason)
        return category
