"""Building VideoOptions from dictionaries, JSON files and the environment."""

import dataclasses
import ipaddress
import json
import logging
import os
import urllib.parse
from typing import Any, Dict, Mapping, Optional

from .constants import ENV_CHUNK_SIZE, ENV_COOKIES, ENV_PROXY
from .errors import ConfigError
from .models import (
    VideoOptions,
    VideoQuality,
    VideoSearchOptions,
)

logger = logging.getLogger(__name__)

VALID_KEYS = frozenset({
    "quality", "filter", "container", "quality_label", "itag",
    "dl_chunk_size", "proxy", "cookies", "source_address", "headers",
    "timeout", "retry_min_delay", "retry_max_delay", "max_retries",
})

PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")


def positive_int(value: Any, name: str = "value") -> int:
    """Return *value* parsed as a positive integer."""

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name}: expected a positive integer, got {value!r}") from exc

    if isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{name}: expected a positive integer, got {value!r}")

    if isinstance(value, bool) or parsed <= 0:
        raise ConfigError(f"{name}: expected a positive integer, got {value!r}")

    return parsed


def non_negative_float(value: Any, name: str) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name}: expected a number, got {value!r}") from exc
    if parsed < 0:
        raise ConfigError(f"{name}: expected a non-negative number, got {value!r}")
    return parsed


def parse_cookie_header(text: str) -> Dict[str, str]:
    """Parse ``name=value; other=value`` into a dict."""
    cookies: Dict[str, str] = {}
    for part in text.split(";"):
        part = part.strip()
        if not part:
            continue
        name, sep, value = part.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ConfigError(f"Malformed cookie pair: {part!r}")
        cookies[name] = value.strip()
    return cookies


def validate_proxy(proxy: str) -> str:
    parsed = urllib.parse.urlparse(proxy)
    if parsed.scheme not in PROXY_SCHEMES or not parsed.netloc:
        raise ConfigError(f"Unsupported proxy URL: {proxy!r}")
    return proxy


def validate_source_address(address: str) -> str:
    try:
        ipaddress.ip_address(address)
    except ValueError as exc:
        raise ConfigError(f"Invalid source address: {address!r}") from exc
    return address


def _enum_value(enum_cls, value: Any, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower().replace("_", ""))
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"{name}: {value!r} is not one of {choices}") from exc


def options_from_dict(data: Mapping[str, Any], base: Optional[VideoOptions] = None) -> VideoOptions:
    """Build VideoOptions from a plain mapping, validating every value.

    Unknown keys are logged and ignored so a typo does not silently change
    behaviour elsewhere.
    """
    if not isinstance(data, Mapping):
        raise ConfigError("Options must be a mapping")

    invalid_keys = set(data) - VALID_KEYS
    if invalid_keys:
        logger.warning("Unknown option keys ignored: %s", ", ".join(sorted(invalid_keys)))

    options = base or VideoOptions()
    request = options.request_options
    retry = request.retry
    download = options.download_options
    top: Dict[str, Any] = {}

    if data.get("quality") is not None:
        top["quality"] = _enum_value(VideoQuality, data["quality"], "quality")
    if data.get("filter") is not None:
        top["filter"] = _enum_value(VideoSearchOptions, data["filter"], "filter")
    if data.get("container") is not None:
        top["container"] = str(data["container"]).lower()
    if data.get("quality_label") is not None:
        top["quality_label"] = str(data["quality_label"])
    if data.get("itag") is not None:
        top["itag"] = positive_int(data["itag"], "itag")

    if data.get("dl_chunk_size") is not None:
        download = dataclasses.replace(
            download, dl_chunk_size=positive_int(data["dl_chunk_size"], "dl_chunk_size")
        )

    request_changes: Dict[str, Any] = {}
    if data.get("proxy"):
        request_changes["proxy"] = validate_proxy(str(data["proxy"]))
    if data.get("cookies"):
        parse_cookie_header(str(data["cookies"]))
        request_changes["cookies"] = str(data["cookies"])
    if data.get("source_address"):
        request_changes["source_address"] = validate_source_address(str(data["source_address"]))
    if data.get("headers") is not None:
        headers = data["headers"]
        if not isinstance(headers, Mapping):
            raise ConfigError("headers: expected a mapping of header names to values")
        request_changes["headers"] = tuple((str(k), str(v)) for k, v in headers.items())
    if data.get("timeout") is not None:
        request_changes["timeout"] = non_negative_float(data["timeout"], "timeout")

    retry_changes: Dict[str, Any] = {}
    if data.get("retry_min_delay") is not None:
        retry_changes["min_delay"] = non_negative_float(data["retry_min_delay"], "retry_min_delay")
    if data.get("retry_max_delay") is not None:
        retry_changes["max_delay"] = non_negative_float(data["retry_max_delay"], "retry_max_delay")
    if data.get("max_retries") is not None:
        max_retries = data["max_retries"]
        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
            raise ConfigError(f"max_retries: expected a non-negative integer, got {max_retries!r}")
        retry_changes["max_retries"] = max_retries

    if retry_changes:
        retry = dataclasses.replace(retry, **retry_changes)
        if retry.min_delay > retry.max_delay:
            raise ConfigError("retry_min_delay must not exceed retry_max_delay")
        request_changes["retry"] = retry
    if request_changes:
        request = dataclasses.replace(request, **request_changes)

    return dataclasses.replace(
        options, download_options=download, request_options=request, **top
    )


def load_options_file(config_path: str) -> VideoOptions:
    """Load VideoOptions from a JSON file; a missing file yields the defaults."""
    if not os.path.exists(config_path):
        return VideoOptions()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse config file {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {config_path}: {exc}") from exc

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    return options_from_dict(config)


def apply_environment(
    options: VideoOptions, environ: Optional[Mapping[str, str]] = None
) -> VideoOptions:
    """Fill unset network and download options from the environment."""
    if environ is None:
        environ = os.environ

    overrides: Dict[str, Any] = {}
    request = options.request_options
    if not request.proxy and environ.get(ENV_PROXY):
        overrides["proxy"] = environ[ENV_PROXY]
    if not request.cookies and environ.get(ENV_COOKIES):
        overrides["cookies"] = environ[ENV_COOKIES]
    if options.download_options.dl_chunk_size is None and environ.get(ENV_CHUNK_SIZE):
        overrides["dl_chunk_size"] = environ[ENV_CHUNK_SIZE]

    if not overrides:
        return options
    return options_from_dict(overrides, base=options)

