"""Pydantic models for per-page analysis records and the aggregate report."""

from __future__ import annotations

from typing import Literal

import pydantic

from web3_tracking.utils.serialization import snake_to_camel

RequestCategory = Literal["cookie3", "analytics", "tracking", "other"]

_CAMEL_CONFIG = pydantic.ConfigDict(
    alias_generator=snake_to_camel, populate_by_name=True
)


class TrackingScript(pydantic.BaseModel):
    """A ``<script>`` element matching a tracking keyword."""

    src: str = ""
    content: str = ""


class NetworkRequest(pydantic.BaseModel):
    """An intercepted tracking-related request.

    ``body`` and ``category`` serialise as ``data`` and ``type``.
    """

    model_config = _CAMEL_CONFIG

    url: str
    method: str
    headers: dict[str, str] = pydantic.Field(default_factory=dict)
    body: str | None = pydantic.Field(default=None, alias="data")
    category: RequestCategory = pydantic.Field(default="other", alias="type")


class TrackedCookie(pydantic.BaseModel):
    """A cookie visible to the browsing context."""

    model_config = _CAMEL_CONFIG

    name: str
    value: str = ""
    domain: str = ""
    path: str = "/"
    expires: float = -1
    http_only: bool = False
    secure: bool = False
    same_site: str = "None"


class FingerprintingFlags(pydantic.BaseModel):
    """Browser APIs observed being invoked during page load.

    ``fonts`` has no observer and always stays ``False``.
    """

    canvas: bool = False
    webgl: bool = False
    fonts: bool = False
    audio: bool = False

    @property
    def any_detected(self) -> bool:
        """True when any instrumented API was invoked."""
        return self.canvas or self.webgl or self.audio


class WalletTracking(pydantic.BaseModel):
    """Evidence of access to an injected wallet provider."""

    detected: bool = False
    methods: list[str] = pydantic.Field(default_factory=list)


class AnalysisRecord(pydantic.BaseModel):
    """All observations collected for one URL in one run."""

    model_config = _CAMEL_CONFIG

    url: str
    timestamp: str
    tracking_scripts: list[TrackingScript] = pydantic.Field(default_factory=list)
    network_requests: list[NetworkRequest] = pydantic.Field(default_factory=list)
    cookies: list[TrackedCookie] = pydantic.Field(default_factory=list)
    local_storage: dict[str, str] = pydantic.Field(default_factory=dict)
    fingerprinting: FingerprintingFlags = pydantic.Field(
        default_factory=FingerprintingFlags
    )
    wallet_tracking: WalletTracking = pydantic.Field(
        default_factory=WalletTracking
    )
    errors: list[str] | None = None

    @pydantic.model_serializer(mode="wrap")
    def _omit_missing_errors(
        self, handler: pydantic.SerializerFunctionWrapHandler
    ) -> dict[str, object]:
        """Leave ``errors`` out of the output unless an error was recorded."""
        data = handler(self)
        if self.errors is None:
            data.pop("errors", None)
        return data


class TrackingImplementations(pydantic.BaseModel):
    """Per-SDK tallies.

    ``google_analytics`` and ``custom_tracking`` have no detector and
    remain zero.
    """

    model_config = _CAMEL_CONFIG

    cookie3: int = 0
    google_analytics: int = 0
    custom_tracking: int = 0


class AggregateReport(pydantic.BaseModel):
    """Summary counts derived from every record collected so far."""

    model_config = _CAMEL_CONFIG

    analyzed_urls: int = 0
    tracking_implementations: TrackingImplementations = pydantic.Field(
        default_factory=TrackingImplementations
    )
    fingerprinting_detected: int = 0
    wallet_tracking_detected: int = 0
    details: dict[str, AnalysisRecord] = pydantic.Field(default_factory=dict)
