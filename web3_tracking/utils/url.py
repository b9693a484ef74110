"""
URL, hostname and filename utilities for page analysis output.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from urllib import parse

_UNSAFE_URL_CHARS = re.compile(r"[^A-Za-z0-9]")
_UNSAFE_TIMESTAMP_CHARS = re.compile(r"[:.]")


def extract_domain(url: str) -> str:
    """Extract the hostname from a URL string."""
    try:
        parsed = parse.urlparse(url)
        return parsed.hostname or "unknown"
    except Exception:
        return "unknown"


def normalize_url(url: str) -> str:
    """Lowercase scheme and host and give an empty path a trailing ``/``.

    Browsers report ``https://app.uniswap.org`` as ``https://app.uniswap.org/``;
    both normalise to the same string.
    """
    parts = parse.urlsplit(url)
    return parse.urlunsplit(
        parts._replace(
            scheme=parts.scheme.lower(),
            netloc=parts.netloc.lower(),
            path=parts.path or "/",
        )
    )


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision.

    Matches the ``2026-01-01T12:00:00.000Z`` shape used in the reports.
    """
    now = datetime.now(UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_url(url: str) -> str:
    """Make *url* safe for use in a filename.

    Every character outside ``[A-Za-z0-9]`` becomes ``_`` and the
    result is lowercased, e.g. ``"https://App.x/?a=1"`` becomes
    ``"https___app_x__a_1"``.
    """
    return _UNSAFE_URL_CHARS.sub("_", url).lower()


def sanitize_timestamp(timestamp: str) -> str:
    """Replace ``:`` and ``.`` in an ISO timestamp with ``-``."""
    return _UNSAFE_TIMESTAMP_CHARS.sub("-", timestamp)
