"""
Per-page tracking analysis.

``Web3TrackingAnalyzer.analyze`` runs one browser session per URL:
attach observers, navigate, run the extraction battery, then persist a
screenshot and the accumulated results.  Records are kept in memory,
keyed by URL, for ``generate_report``.
"""

from __future__ import annotations

from collections.abc import Callable

from web3_tracking import config, output
from web3_tracking.analysis import report
from web3_tracking.browser import session as browser_session
from web3_tracking.models import analysis
from web3_tracking.utils import errors, logger, url as url_mod

log = logger.create_logger("Analyzer")

SessionFactory = Callable[[bool, str], browser_session.BrowserSession]


class Web3TrackingAnalyzer:
    """Sequential tracking analyzer holding results for the process lifetime."""

    def __init__(
        self,
        settings: config.AnalyzerSettings | None = None,
        session_factory: SessionFactory = browser_session.BrowserSession,
    ) -> None:
        """Create an analyzer with *settings* (read from the environment by default)."""
        self.settings = settings or config.AnalyzerSettings()
        self._session_factory = session_factory
        self.results: dict[str, analysis.AnalysisRecord] = {}

    async def analyze(self, url: str) -> analysis.AnalysisRecord:
        """Analyse *url* in a fresh browser session.

        Errors during launch, navigation or extraction are recorded on
        the returned record rather than raised.  The session is always
        closed and the results mapping is always persisted.

        Args:
            url: Absolute URL of the page to analyse.

        Returns:
            The (possibly partial) record for *url*.
        """
        log.info(f"Analyzing {url} for tracking implementations...")
        log.start_timer("analyze")

        record = analysis.AnalysisRecord(url=url, timestamp=url_mod.utc_timestamp())
        self.results[url] = record

        session = self._session_factory(self.settings.headless, self.settings.user_agent)
        try:
            await session.launch()
            await session.start_network_monitoring()
            await session.install_fingerprinting_detection()

            await session.navigate_to(url, timeout=self.settings.timeout_ms)

            record.tracking_scripts = await session.collect_tracking_scripts()
            record.local_storage = await session.capture_local_storage()
            record.cookies = await session.capture_tracking_cookies()
            record.wallet_tracking = await session.detect_wallet_tracking()
            record.fingerprinting = await session.read_fingerprinting_flags()

            await output.save_screenshot(
                session.take_screenshot,
                self.settings.resolve_dir(self.settings.screenshots_dir),
                url,
            )
        except Exception as error:
            message = errors.get_error_message(error)
            log.error(f"Error analyzing {url}", {"error": message})
            record.errors = [message]
        finally:
            record.network_requests = list(session.get_network_requests())
            await session.close()

        output.save_results(self.results, self.settings.resolve_dir(self.settings.results_dir))

        log.end_timer("analyze", "Analysis complete")
        report_findings = log.warn if record.errors else log.success
        report_findings(
            "Partial findings" if record.errors else "Findings",
            {
                "host": url_mod.extract_domain(url),
                "trackingScripts": len(record.tracking_scripts),
                "trackingRequests": len(record.network_requests),
                "trackingCookies": len(record.cookies),
                "fingerprinting": record.fingerprinting.any_detected,
                "walletTracking": record.wallet_tracking.detected,
            },
        )
        return record

    def generate_report(self) -> analysis.AggregateReport:
        """Summarise every record collected so far."""
        return report.build_report(self.results)
