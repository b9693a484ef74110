"""Aggregate report over every analysed page."""

from __future__ import annotations

from collections.abc import Mapping

from web3_tracking.models import analysis


def uses_cookie3(record: analysis.AnalysisRecord) -> bool:
    """True when any tracking script was loaded from a Cookie3 URL."""
    return any("cookie3" in s.src for s in record.tracking_scripts)


def build_report(
    results: Mapping[str, analysis.AnalysisRecord],
) -> analysis.AggregateReport:
    """Tally the results mapping into an aggregate report.

    The mapping is read once and never modified; ``details`` holds
    a shallow copy so later analyses do not alter a report already
    returned.
    """
    implementations = analysis.TrackingImplementations()
    fingerprinting = 0
    wallet = 0

    for record in results.values():
        if uses_cookie3(record):
            implementations.cookie3 += 1
        if record.fingerprinting.any_detected:
            fingerprinting += 1
        if record.wallet_tracking.detected:
            wallet += 1

    return analysis.AggregateReport(
        analyzed_urls=len(results),
        tracking_implementations=implementations,
        fingerprinting_detected=fingerprinting,
        wallet_tracking_detected=wallet,
        details=dict(results),
    )
