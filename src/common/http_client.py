"""Shared HTTP helpers used by the repository client and file transfer.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. This module is dependency-light and can be
safely imported by both registry/* and copying/* without cycles.
"""
from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Optional, Dict, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {"User-Agent": Constants.USER_AGENT}

# One pooled session per process; the pipeline is single-threaded.
_session: Optional[requests.Session] = None


def get_session() -> requests.Session:
    """Return the shared session, creating it on first use."""
    global _session  # pylint: disable=global-statement
    if _session is None:
        _session = requests.Session()
        _session.headers.update(_DEFAULT_HEADERS)
    return _session


def safe_head(url: str, *, context: str, **kwargs: Any) -> Optional[requests.Response]:
    """Perform a HEAD request (redirects followed) with consistent error handling.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "maven").
        **kwargs: Passed through to requests.

    Returns:
        The HTTP response object, or None on timeouts and connection errors.
    """
    kwargs.setdefault("allow_redirects", True)
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="HEAD",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = get_session().head(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout:
            logger.debug("%s request to %s timed out", context, safe_target)
            return None
        except requests.RequestException as exc:  # includes ConnectionError
            logger.debug("%s connection error for %s: %s", context, safe_target, exc)
            return None
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="HEAD",
                    outcome="success" if res.status_code < 400 else "handled_non_2xx",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


# Simple in-memory cache for HTTP responses
_http_cache: Dict[str, Tuple[Any, float]] = {}


def _get_cache_key(method: str, url: str, headers: Optional[Dict[str, str]] = None) -> str:
    """Generate cache key from request parameters."""
    headers_str = str(sorted(headers.items())) if headers else ""
    return f"{method}:{url}:{headers_str}"


def _is_cache_valid(cache_entry: Tuple[Any, float]) -> bool:
    """Check if cache entry is still valid."""
    _, cached_time = cache_entry
    return time.time() - cached_time < Constants.HTTP_CACHE_TTL_SEC


def clear_cache() -> None:
    """Drop all cached responses."""
    _http_cache.clear()


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform GET request with timeout, retries, and caching with DEBUG traces.

    Never raises for network failures; after the last attempt the status code
    is 0 and the body empty.

    Returns:
        Tuple of (status_code, headers_dict, text)
    """
    cache_key = _get_cache_key('GET', url, headers)
    safe_target = safe_url(url)

    if cache_key in _http_cache and _is_cache_valid(_http_cache[cache_key]):
        cached_data, _ = _http_cache[cache_key]
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP cache hit",
                extra=extra_context(
                    event="cache_hit",
                    component="http_client",
                    action="GET",
                    target=safe_target
                )
            )
        return cached_data

    last_exception = None

    for attempt in range(Constants.HTTP_RETRY_MAX):
        with Timer() as t:
            try:
                response = get_session().get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=headers,
                    **kwargs
                )
            except requests.RequestException as exc:
                last_exception = str(exc)
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request exception",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="timeout" if isinstance(exc, requests.Timeout) else "request_exception",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** attempt))
                continue

            if response.status_code >= 500 and attempt + 1 < Constants.HTTP_RETRY_MAX:
                last_exception = f"status {response.status_code}"
                time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** attempt))
                continue

            cache_data = (response.status_code, dict(response.headers), response.text)
            # Don't cache server errors
            if response.status_code < 500:
                _http_cache[cache_key] = (cache_data, time.time())

            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        status_code=response.status_code,
                        duration_ms=t.duration_ms(),
                        attempt=attempt + 1,
                        target=safe_target
                    )
                )
            return cache_data

    logger.debug("GET %s failed after %d attempts: %s", safe_target, Constants.HTTP_RETRY_MAX, last_exception)
    return 0, {}, ""


def download(url: str, target: Path, *, context: str) -> Path:
    """Stream ``url`` into ``target`` atomically.

    The body is written to a temporary file beside ``target`` and renamed on
    completion, so an interrupted download never leaves a partial file under
    the final name.

    Raises:
        requests.RequestException: On connection errors or non-2xx responses.
        OSError: When the file cannot be written.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    safe_target = safe_url(url)
    with Timer() as t:
        with get_session().get(url, timeout=Constants.REQUEST_TIMEOUT, stream=True) as res:
            res.raise_for_status()
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
            try:
                with os.fdopen(fd, "wb") as fh:
                    for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
                os.replace(tmp_name, target)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
    logger.debug(
        "Downloaded artifact",
        extra=extra_context(
            event="download",
            component="http_client",
            target=safe_target,
            duration_ms=t.duration_ms(),
            context=context
        )
    )
    return target
