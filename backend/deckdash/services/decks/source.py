"""Row sources for deck content.

The published spreadsheet is fetched as CSV and kept for a freshness
window; callers get plain lists of string rows and never see CSV syntax.
"""

import csv
import io
import logging
import time
from threading import Lock
from typing import Callable, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = 'deck_dash_cards'
DEFAULT_MAX_AGE_SEC = 24 * 60 * 60

Rows = List[List[str]]


class ContentLoadError(Exception):
    """Raised when deck content cannot be fetched or read."""


def sheet_url(config) -> str:
    """Published CSV URL if configured, else the gviz CSV export for the sheet."""
    published = config.get('GOOGLE_SHEETS_PUBLISHED_URL')
    if published:
        return published
    sheet_id = config.get('GOOGLE_SHEETS_ID') or ''
    sheet_name = config.get('SHEET_NAME') or DEFAULT_SHEET_NAME
    return f"https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv&sheet={sheet_name}"


def parse_csv(text: str) -> Rows:
    """Split CSV text into trimmed rows; blank rows are skipped.

    Quoted cells may span several lines, including empty ones.
    """
    rows = ([value.strip() for value in row] for row in csv.reader(io.StringIO(text)))
    return [row for row in rows if any(row)]


def http_fetch(url: str, timeout: float = 10) -> str:
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise ContentLoadError(f"Failed to fetch sheet data: {exc}") from exc
    if not response.ok:
        raise ContentLoadError(f"Failed to fetch sheet data: {response.status_code} {response.reason}")
    return response.text


class SheetSource:
    """Cached CSV rows with a timestamp + duration freshness policy."""

    def __init__(
        self,
        url: str,
        max_age: float = DEFAULT_MAX_AGE_SEC,
        fetch: Optional[Callable[[str], str]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.url = url
        self.max_age = max_age
        self._fetch = fetch or http_fetch
        self._clock = clock
        self._lock = Lock()
        self._rows: Optional[Rows] = None
        self._fetched_at: Optional[float] = None

    def is_fresh(self) -> bool:
        if self._rows is None or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.max_age

    def rows(self) -> Rows:
        with self._lock:
            if self.is_fresh():
                logger.debug("[sheet-cache-hit] url=%s", self.url)
                return self._rows
            logger.info("[sheet-fetch] url=%s", self.url)
            rows = parse_csv(self._fetch(self.url))
            self._rows = rows
            self._fetched_at = self._clock()
            return rows

    def invalidate(self) -> None:
        with self._lock:
            self._rows = None
            self._fetched_at = None


class StaticSource:
    """In-memory rows, for tests and offline play."""

    def __init__(self, rows: Rows):
        self._rows = [list(r) for r in rows]
        self.invalidations = 0

    def rows(self) -> Rows:
        return self._rows

    def invalidate(self) -> None:
        self.invalidations += 1
