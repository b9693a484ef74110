"""
Filesystem output for screenshots and results snapshots.

Both writers log failures and return ``None`` instead of raising, so
a broken output directory never interrupts an analysis run.
"""

from __future__ import annotations

import pathlib
from collections.abc import Awaitable, Callable, Mapping

from web3_tracking.models import analysis
from web3_tracking.utils import logger, serialization, url as url_mod

log = logger.create_logger("Output")

RESULTS_FILE_PREFIX = "analysis_results_"


def screenshot_filename(page_url: str, timestamp: str) -> str:
    """Return ``<sanitized-url>_<sanitized-timestamp>.png``."""
    return f"{url_mod.sanitize_url(page_url)}_{url_mod.sanitize_timestamp(timestamp)}.png"


def results_filename(timestamp: str) -> str:
    """Return ``analysis_results_<sanitized-timestamp>.json``."""
    return f"{RESULTS_FILE_PREFIX}{url_mod.sanitize_timestamp(timestamp)}.json"


async def save_screenshot(
    capture: Callable[[pathlib.Path], Awaitable[None]],
    directory: pathlib.Path,
    page_url: str,
) -> pathlib.Path | None:
    """Capture a screenshot for *page_url* into *directory*.

    Args:
        capture: Coroutine function writing the image to a path.
        directory: Target directory, created if absent.
        page_url: The analysed URL (used in the filename).

    Returns:
        The written path, or ``None`` if the capture failed.
    """
    path = directory / screenshot_filename(page_url, url_mod.utc_timestamp())
    try:
        directory.mkdir(parents=True, exist_ok=True)
        await capture(path)
    except Exception as error:
        log.error("Error saving screenshot", {"url": page_url, "error": str(error)})
        return None
    log.debug("Screenshot saved", {"path": str(path)})
    return path


def save_results(
    results: Mapping[str, analysis.AnalysisRecord],
    directory: pathlib.Path,
) -> pathlib.Path | None:
    """Write the full results mapping as pretty-printed JSON.

    Args:
        results: Every record analysed so far, keyed by URL.
        directory: Target directory, created if absent.

    Returns:
        The written path, or ``None`` if the write failed.
    """
    path = directory / results_filename(url_mod.utc_timestamp())
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(serialization.to_json(results), encoding="utf-8")
    except (OSError, TypeError, ValueError) as error:
        log.error("Error saving results", {"path": str(path), "error": str(error)})
        return None
    log.info("Results saved", {"path": str(path), "urls": len(results)})
    return path
