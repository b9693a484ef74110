"""Shared fixtures for the test suite."""

from __future__ import annotations

import pathlib
from collections.abc import Callable

import pytest

from web3_tracking import analyzer, config
from web3_tracking.models import analysis

# ── Record Factories ────────────────────────────────────────────


@pytest.fixture()
def empty_record() -> analysis.AnalysisRecord:
    """A record with nothing detected."""
    return analysis.AnalysisRecord(
        url="https://example.com",
        timestamp="2026-01-01T00:00:00.000Z",
    )


@pytest.fixture()
def cookie3_record() -> analysis.AnalysisRecord:
    """A record for a dapp loading the Cookie3 SDK and touching the wallet."""
    return analysis.AnalysisRecord(
        url="https://app.uniswap.org",
        timestamp="2026-01-01T00:00:01.000Z",
        tracking_scripts=[
            analysis.TrackingScript(
                src="https://cdn.cookie3.co/scripts/analytics/latest/cookie3.analytics.min.js",
            ),
        ],
        network_requests=[
            analysis.NetworkRequest(
                url="https://api.cookie3.co/collect",
                method="POST",
                headers={"content-type": "application/json"},
                body='{"event":"pageview"}',
                category="cookie3",
            ),
        ],
        fingerprinting=analysis.FingerprintingFlags(canvas=True),
        wallet_tracking=analysis.WalletTracking(
            detected=True, methods=["ethereum", "accountsChanged"]
        ),
    )


@pytest.fixture()
def tracking_cookie() -> dict[str, object]:
    """A Google Analytics cookie as Playwright returns it."""
    return {
        "name": "_ga",
        "value": "GA1.2.123456789.1234567890",
        "domain": ".example.com",
        "path": "/",
        "expires": 1893456000,
        "httpOnly": False,
        "secure": False,
        "sameSite": "Lax",
    }


# ── Settings ────────────────────────────────────────────────────


@pytest.fixture()
def settings(tmp_path: pathlib.Path) -> config.AnalyzerSettings:
    """Settings writing screenshots and results under *tmp_path*."""
    return config.AnalyzerSettings(
        headless=True,
        timeout_ms=5000,
        screenshots_dir=tmp_path / "screenshots",
        results_dir=tmp_path / "results",
    )


# ── Fake Browser Session ────────────────────────────────────────


class FakeSession:
    """Stand-in for BrowserSession returning canned page observations.

    Set ``fail_on`` to a step name to make that step raise.
    """

    def __init__(self, headless: bool, user_agent: str, fail_on: str | None = None) -> None:
        self.headless = headless
        self.user_agent = user_agent
        self.fail_on = fail_on
        self.calls: list[str] = []
        self.closed = False
        self.navigation_timeout: int | None = None

        self.requests = [
            analysis.NetworkRequest(
                url="https://api.cookie3.co/collect",
                method="POST",
                body="{}",
                category="cookie3",
            ),
        ]
        self.scripts = [
            analysis.TrackingScript(src="https://cdn.cookie3.co/cookie3.analytics.min.js"),
        ]
        self.storage = {"c3_user": "abc"}
        self.cookies = [analysis.TrackedCookie(name="_ga", domain=".example.com")]
        self.wallet = analysis.WalletTracking(detected=True, methods=["ethereum", "web3"])
        self.flags = analysis.FingerprintingFlags(canvas=True, audio=True)

    async def _step(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"{name} failed")

    async def launch(self) -> None:
        await self._step("launch")

    async def start_network_monitoring(self) -> None:
        await self._step("network")

    async def install_fingerprinting_detection(self) -> None:
        await self._step("fingerprinting")

    async def navigate_to(self, url: str, timeout: int = 30000) -> None:
        self.navigation_timeout = timeout
        await self._step("navigate")

    async def collect_tracking_scripts(self) -> list[analysis.TrackingScript]:
        await self._step("scripts")
        return self.scripts

    async def capture_local_storage(self) -> dict[str, str]:
        await self._step("storage")
        return self.storage

    async def capture_tracking_cookies(self) -> list[analysis.TrackedCookie]:
        await self._step("cookies")
        return self.cookies

    async def detect_wallet_tracking(self) -> analysis.WalletTracking:
        await self._step("wallet")
        return self.wallet

    async def read_fingerprinting_flags(self) -> analysis.FingerprintingFlags:
        await self._step("flags")
        return self.flags

    async def take_screenshot(self, path: pathlib.Path) -> None:
        await self._step("screenshot")
        path.write_bytes(b"\x89PNG\r\n")

    def get_network_requests(self) -> list[analysis.NetworkRequest]:
        return self.requests

    async def close(self) -> None:
        self.closed = True


class FakeSessionFactory:
    """Callable building FakeSessions and remembering each one."""

    def __init__(self) -> None:
        self.fail_on: str | None = None
        self.sessions: list[FakeSession] = []

    def __call__(self, headless: bool, user_agent: str) -> FakeSession:
        session = FakeSession(headless, user_agent, fail_on=self.fail_on)
        self.sessions.append(session)
        return session


@pytest.fixture()
def session_factory() -> FakeSessionFactory:
    """Factory producing fake browser sessions."""
    return FakeSessionFactory()


@pytest.fixture()
def make_analyzer(
    settings: config.AnalyzerSettings,
    session_factory: FakeSessionFactory,
) -> Callable[[], analyzer.Web3TrackingAnalyzer]:
    """Build analyzers wired to the fake session factory and tmp settings."""

    def _make() -> analyzer.Web3TrackingAnalyzer:
        return analyzer.Web3TrackingAnalyzer(settings=settings, session_factory=session_factory)

    return _make
