"""
Runtime configuration for the tracking analyzer.

Centralises environment variable names and default values for
browser launch, navigation timeout, and output locations.

Uses ``pydantic_settings.BaseSettings`` for automatic environment
variable binding, type coercion, and validation.
"""

from __future__ import annotations

import pathlib

import pydantic
import pydantic_settings

DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"


class AnalyzerSettings(pydantic_settings.BaseSettings):
    """Configuration for browser sessions and analysis output.

    Attributes:
        headless: Launch Chromium without a visible window.
        timeout_ms: Navigation timeout in milliseconds.
        user_agent: User agent for every browsing context.
        screenshots_dir: Directory for full-page screenshots.
        results_dir: Directory for the results JSON snapshots.
    """

    model_config = pydantic_settings.SettingsConfigDict(populate_by_name=True)

    headless: bool = pydantic.Field(
        default=True, validation_alias="TRACKER_HEADLESS"
    )
    timeout_ms: int = pydantic.Field(
        default=30000, gt=0, validation_alias="TRACKER_TIMEOUT_MS"
    )
    user_agent: str = pydantic.Field(
        default=DEFAULT_USER_AGENT, validation_alias="TRACKER_USER_AGENT"
    )
    screenshots_dir: pathlib.Path = pydantic.Field(
        default=pathlib.Path("screenshots"),
        validation_alias="TRACKER_SCREENSHOTS_DIR",
    )
    results_dir: pathlib.Path = pydantic.Field(
        default=pathlib.Path("results"),
        validation_alias="TRACKER_RESULTS_DIR",
    )

    def resolve_dir(self, directory: pathlib.Path) -> pathlib.Path:
        """Resolve *directory* against the current working directory."""
        return pathlib.Path.cwd() / directory
