"""Tests for web3_tracking.analyzer — per-page analysis lifecycle."""

from __future__ import annotations

import asyncio
import json
import pathlib
from collections.abc import Callable

from web3_tracking import analyzer, config

URL = "https://app.uniswap.org"


def _result_files(settings: config.AnalyzerSettings) -> list[pathlib.Path]:
    return sorted(settings.results_dir.glob("analysis_results_*.json"))


class TestAnalyze:
    """Tests for Web3TrackingAnalyzer.analyze()."""

    def test_successful_analysis_populates_record(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
    ) -> None:
        record = asyncio.run(make_analyzer().analyze(URL))

        session = session_factory.sessions[0]
        assert record.url == URL
        assert record.errors is None
        assert record.tracking_scripts == session.scripts
        assert record.network_requests == session.requests
        assert record.cookies == session.cookies
        assert record.local_storage == {"c3_user": "abc"}
        assert record.wallet_tracking.methods == ["ethereum", "web3"]
        assert record.fingerprinting.canvas is True
        assert record.fingerprinting.fonts is False

    def test_observers_attached_before_navigation(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
    ) -> None:
        asyncio.run(make_analyzer().analyze(URL))
        calls = session_factory.sessions[0].calls
        assert calls[:4] == ["launch", "network", "fingerprinting", "navigate"]
        assert calls[-1] == "screenshot"

    def test_session_uses_settings(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
        settings: config.AnalyzerSettings,
    ) -> None:
        asyncio.run(make_analyzer().analyze(URL))
        session = session_factory.sessions[0]
        assert session.headless is settings.headless
        assert session.user_agent == settings.user_agent
        assert session.navigation_timeout == settings.timeout_ms

    def test_navigation_failure_returns_partial_record(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
    ) -> None:
        session_factory.fail_on = "navigate"
        record = asyncio.run(make_analyzer().analyze(URL))

        session = session_factory.sessions[0]
        assert record.errors == ["navigate failed"]
        assert record.tracking_scripts == []
        assert record.local_storage == {}
        assert record.cookies == []
        assert record.wallet_tracking.detected is False
        assert record.fingerprinting.any_detected is False
        # Requests intercepted before the failure are kept.
        assert record.network_requests == session.requests
        assert session.closed is True
        assert "screenshot" not in session.calls

    def test_launch_failure_still_persists(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
        settings: config.AnalyzerSettings,
    ) -> None:
        session_factory.fail_on = "launch"
        record = asyncio.run(make_analyzer().analyze(URL))

        assert record.errors == ["launch failed"]
        assert session_factory.sessions[0].closed is True
        assert len(_result_files(settings)) == 1

    def test_screenshot_failure_is_not_a_record_error(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
        settings: config.AnalyzerSettings,
    ) -> None:
        session_factory.fail_on = "screenshot"
        record = asyncio.run(make_analyzer().analyze(URL))

        assert record.errors is None
        assert list(settings.screenshots_dir.glob("*.png")) == []

    def test_writes_screenshot(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        settings: config.AnalyzerSettings,
    ) -> None:
        asyncio.run(make_analyzer().analyze(URL))
        shots = list(settings.screenshots_dir.glob("*.png"))
        assert len(shots) == 1
        assert shots[0].name.startswith("https___app_uniswap_org_")

    def test_persists_accumulated_results_after_each_call(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        settings: config.AnalyzerSettings,
    ) -> None:
        subject = make_analyzer()

        async def run() -> None:
            await subject.analyze(URL)
            await asyncio.sleep(0.002)
            await subject.analyze("https://pancakeswap.finance/")

        asyncio.run(run())

        files = _result_files(settings)
        assert len(files) == 2
        latest = json.loads(files[-1].read_text(encoding="utf-8"))
        assert list(latest) == [URL, "https://pancakeswap.finance/"]

    def test_reanalysis_overwrites_entry(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
    ) -> None:
        subject = make_analyzer()

        async def run() -> None:
            await subject.analyze(URL)
            session_factory.fail_on = "navigate"
            await subject.analyze(URL)

        asyncio.run(run())

        assert list(subject.results) == [URL]
        assert subject.results[URL].errors == ["navigate failed"]

    def test_new_session_per_call(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
    ) -> None:
        subject = make_analyzer()

        async def run() -> None:
            await subject.analyze(URL)
            await subject.analyze("https://woofi.com/")

        asyncio.run(run())

        assert len(session_factory.sessions) == 2
        assert all(s.closed for s in session_factory.sessions)


class TestGenerateReport:
    """Tests for Web3TrackingAnalyzer.generate_report()."""

    def test_empty_analyzer(self, make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer]) -> None:
        report = make_analyzer().generate_report()
        assert report.analyzed_urls == 0
        assert report.details == {}

    def test_counts_after_analysis(
        self,
        make_analyzer: Callable[[], analyzer.Web3TrackingAnalyzer],
        session_factory,
    ) -> None:
        subject = make_analyzer()

        async def run() -> None:
            await subject.analyze(URL)
            session_factory.fail_on = "launch"
            await subject.analyze("https://meson.fi/")

        asyncio.run(run())
        report = subject.generate_report()

        assert report.analyzed_urls == 2
        assert report.wallet_tracking_detected == 1
        assert report.fingerprinting_detected == 1
        assert report.tracking_implementations.cookie3 == 1
        assert subject.generate_report().model_dump() == report.model_dump()
