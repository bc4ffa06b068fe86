"""Shared HTTP helpers used by the snapshot catalog fetcher.

Encapsulates request/timeout error handling so callers only deal with
``NetworkError``. The body is streamed in chunks so a caller-supplied
cancel event and an overall deadline are honoured while downloading.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Optional

import requests

from constants import Constants
from common.errors import FetchCancelled, NetworkError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _check_cancelled(cancel_event: Optional[threading.Event], url: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise FetchCancelled("Request cancelled", url=safe_url(url))


def _decode_body(raw: bytes, encoding: Optional[str], context: str) -> str:
    """Decode with the declared charset, falling back to utf-8 when it is unknown."""
    try:
        return raw.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        logger.warning("%s response declared unknown charset %r, decoding as utf-8", context, encoding)
        return raw.decode("utf-8", errors="replace")


def fetch_text(
    url: str,
    *,
    context: str,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    **kwargs: Any,
) -> str:
    """GET ``url`` and return the fully buffered body as text.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "snapshots").
        timeout: Upper bound in seconds for the whole exchange. Defaults to
            ``Constants.REQUEST_TIMEOUT``.
        cancel_event: When set by another thread the download stops with
            ``FetchCancelled``.
        **kwargs: Passed through to requests.get.

    Returns:
        str: Decoded response body.

    Raises:
        NetworkError: On transport failure, non-2xx status or deadline overrun.
    """
    limit = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    safe_target = safe_url(url)
    _check_cancelled(cancel_event, url)

    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        deadline = time.monotonic() + limit
        try:
            with requests.get(url, timeout=limit, stream=True, **kwargs) as res:
                if res.status_code < 200 or res.status_code >= 300:
                    logger.warning(
                        "%s request returned HTTP %s",
                        context,
                        res.status_code,
                        extra=extra_context(
                            event="http_response",
                            component="http_client",
                            outcome="handled_non_2xx",
                            status_code=res.status_code,
                            target=safe_target,
                        ),
                    )
                    raise NetworkError(
                        f"{context} request returned HTTP {res.status_code}",
                        url=safe_target,
                        status_code=res.status_code,
                    )
                chunks = []
                for chunk in res.iter_content(chunk_size=Constants.HTTP_CHUNK_SIZE):
                    _check_cancelled(cancel_event, url)
                    if time.monotonic() > deadline:
                        raise NetworkError(
                            f"{context} request exceeded {limit} seconds",
                            url=safe_target,
                        )
                    if chunk:
                        chunks.append(chunk)
                body = _decode_body(b"".join(chunks), res.encoding, context)
        except requests.Timeout as exc:
            logger.warning("%s request timed out after %s seconds", context, limit)
            raise NetworkError(
                f"{context} request timed out after {limit} seconds", url=safe_target
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.warning("%s connection error: %s", context, exc)
            raise NetworkError(f"{context} connection error: {exc}", url=safe_target) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
    return body
