"""Async HTTP client with transient-failure retries."""

import logging
import random
from typing import Dict, Mapping, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .config import parse_cookie_header
from .constants import SITE_HOST, USER_AGENTS
from .errors import TransportError
from .models import RequestOptions, RetryPolicy

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def is_transient(exc: BaseException) -> bool:
    """Resets, timeouts and server-side errors are worth another attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    if isinstance(exc, httpx.UnsupportedProtocol):
        return False
    return isinstance(exc, httpx.TransportError)


def build_async_client(
    options: RequestOptions,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the underlying httpx client for *options*."""
    headers: Dict[str, str] = {"User-Agent": random.choice(USER_AGENTS)}
    headers.update(dict(options.headers))

    cookies = httpx.Cookies()
    if options.cookies:
        for name, value in parse_cookie_header(options.cookies).items():
            cookies.set(name, value, domain="." + SITE_HOST.split(".", 1)[1])

    if transport is None:
        transport = httpx.AsyncHTTPTransport(
            proxy=options.proxy,
            local_address=options.source_address,
        )

    return httpx.AsyncClient(
        headers=headers,
        cookies=cookies,
        timeout=options.timeout,
        follow_redirects=True,
        transport=transport,
    )


class HttpClient:
    """Retrying wrapper around an ``httpx.AsyncClient``.

    Safe to share between Video objects and open streams; it holds no
    per-request state.
    """

    def __init__(self, client: httpx.AsyncClient, retry: Optional[RetryPolicy] = None) -> None:
        self._client = client
        self.retry = retry or RetryPolicy()

    @classmethod
    def from_options(
        cls,
        options: RequestOptions,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "HttpClient":
        return cls(build_async_client(options, transport), options.retry)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.retry.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.retry.min_delay,
                min=self.retry.min_delay,
                max=self.retry.max_delay,
            ),
            retry=retry_if_exception(is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Send a request, retrying transient failures; raise TransportError."""
        try:
            async for attempt in self._retrying():
                with attempt:
                    logger.debug("%s %s", method, url)
                    response = await self._client.request(method, url, headers=headers)
                    response.raise_for_status()
            return response
        except RetryError as exc:
            last = exc.last_attempt.exception()
            raise _transport_error(last, url) from last
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise _transport_error(exc, url) from exc

    async def get_text(self, url: str, headers: Optional[Mapping[str, str]] = None) -> str:
        response = await self.request("GET", url, headers=headers)
        return response.text

    async def get_bytes(self, url: str, headers: Optional[Mapping[str, str]] = None) -> bytes:
        response = await self.request("GET", url, headers=headers)
        return response.content

    async def content_length(self, url: str) -> Optional[int]:
        """Ask the origin for the body size without downloading it."""
        response = await self.request("HEAD", url)
        value = response.headers.get("content-length")
        if value is None or not value.isdigit():
            return None
        return int(value)

    async def aclose(self) -> None:
        await self._client.aclose()


def _transport_error(exc: Optional[BaseException], url: str) -> TransportError:
    status_code = None
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
    return TransportError(f"Request to {url} failed: {exc}", status_code=status_code)
