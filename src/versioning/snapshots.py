"""Snapshot catalog retrieval from the repository directory listing."""
from __future__ import annotations

import logging
import threading
from html.parser import HTMLParser
from typing import Callable, List, Optional

from constants import Constants
from common import http_client
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from .models import ServerVersion
from .parser import parse_server_version

logger = logging.getLogger(__name__)

HttpGet = Callable[..., str]


class _ListingParser(HTMLParser):
    """Collects the text of the first ``<td>`` cell of every ``<tr>`` row."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.entries: List[str] = []
        self._in_row = False
        self._row_has_cell = False
        self._in_first_cell = False
        self._cell_depth = 0
        self._text: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag == "tr":
            self._close_cell()
            self._in_row = True
            self._row_has_cell = False
        elif tag == "td" and self._in_row:
            if self._in_first_cell:
                self._cell_depth += 1
            elif not self._row_has_cell:
                self._row_has_cell = True
                self._in_first_cell = True
                self._cell_depth = 0
                self._text = []

    def handle_endtag(self, tag):
        if tag == "td" and self._in_first_cell:
            if self._cell_depth:
                self._cell_depth -= 1
            else:
                self._close_cell()
        elif tag == "tr":
            self._close_cell()
            self._in_row = False

    def handle_data(self, data):
        if self._in_first_cell:
            self._text.append(data)

    def close(self):
        super().close()
        self._close_cell()

    def _close_cell(self) -> None:
        if self._in_first_cell:
            self.entries.append("".join(self._text).strip())
            self._in_first_cell = False
            self._text = []


def extract_listing_entries(html: str) -> List[str]:
    """Return the first-cell text of each table row in a directory listing."""
    parser = _ListingParser()
    parser.feed(html)
    parser.close()
    return parser.entries


def parse_listing(html: str) -> List[ServerVersion]:
    """Keep directory rows (trailing ``/``) that parse as server versions.

    The directory separator is dropped so ``raw`` is a usable version string.
    """
    versions: List[ServerVersion] = []
    for entry in extract_listing_entries(html):
        if not entry.endswith("/"):
            continue
        parsed = parse_server_version(entry[:-1])
        if parsed is not None:
            versions.append(parsed)
    return versions


def fetch_snapshot_versions(
    url: Optional[str] = None,
    *,
    http_get: Optional[HttpGet] = None,
    cancel_event: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
) -> List[ServerVersion]:
    """Download the snapshot index and return every published version found.

    The result is in listing order, without deduplication or sorting.

    Raises:
        NetworkError: When the index cannot be retrieved.
    """
    target = url or Constants.SNAPSHOT_INDEX_URL
    getter = http_get or http_client.fetch_text
    body = getter(target, context="snapshots", timeout=timeout, cancel_event=cancel_event)
    versions = parse_listing(body)
    if is_debug_enabled(logger):
        logger.debug(
            "Parsed snapshot listing",
            extra=extra_context(
                event="parse",
                component="snapshots",
                action="fetch_snapshot_versions",
                outcome="success",
                count=len(versions),
                target=safe_url(target),
            ),
        )
    return versions
