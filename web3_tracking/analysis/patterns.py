"""
Keyword patterns used to classify tracking activity on a page.

Plain substring lists (case sensitive) for network requests, script
elements, cookies, and wallet-provider usage in the rendered markup,
together with the small predicates that apply them.
"""

from __future__ import annotations

from collections.abc import Mapping

from web3_tracking.models import analysis

# ============================================================================
# Keyword Lists
# ============================================================================

TRACKING_REQUEST_PATTERNS: tuple[str, ...] = (
    "cookie3.co",
    "analytics",
    "tracking",
    "collect",
    "wallet",
)

TRACKING_SCRIPT_KEYWORDS: tuple[str, ...] = (
    "cookie3",
    "analytics",
    "tracking",
    "wallet",
    "web3",
)

TRACKING_COOKIE_PATTERNS: tuple[str, ...] = (
    "cookie3",
    "analytics",
    "_ga",
    "track",
)

# Checked in order; the first match wins.
REQUEST_CATEGORIES: tuple[tuple[str, analysis.RequestCategory], ...] = (
    ("cookie3.co", "cookie3"),
    ("analytics", "analytics"),
    ("tracking", "tracking"),
)

WALLET_PROVIDER_METHOD = "ethereum"

WALLET_SOURCE_PATTERNS: tuple[str, ...] = (
    "accountsChanged",
    "ethereum.on(",
    "wallet.on(",
    "web3",
)

# ============================================================================
# Predicates
# ============================================================================


def is_tracking_request(url: str) -> bool:
    """Return True when a request URL contains a tracking pattern."""
    return any(pattern in url for pattern in TRACKING_REQUEST_PATTERNS)


def categorize_request(url: str) -> analysis.RequestCategory:
    """Assign a coarse category to a tracking request URL."""
    for pattern, category in REQUEST_CATEGORIES:
        if pattern in url:
            return category
    return "other"


def is_tracking_script(script: analysis.TrackingScript) -> bool:
    """Return True when a script's src or inline content has a tracking keyword."""
    return any(
        term in script.src or term in script.content
        for term in TRACKING_SCRIPT_KEYWORDS
    )


def is_tracking_cookie(cookie: Mapping[str, object]) -> bool:
    """Return True when a cookie's name or domain has a tracking pattern."""
    name = str(cookie.get("name") or "")
    domain = str(cookie.get("domain") or "")
    return any(
        pattern in name or pattern in domain
        for pattern in TRACKING_COOKIE_PATTERNS
    )


def detect_wallet_tracking(
    has_provider: bool, page_source: str
) -> analysis.WalletTracking:
    """Build the wallet-tracking result for a page.

    The provider object and each markup pattern contribute one
    method entry; entries are not deduplicated.

    Args:
        has_provider: Whether ``window.ethereum`` exists on the page.
        page_source: The rendered ``document.documentElement.outerHTML``.

    Returns:
        WalletTracking with ``detected`` set when any method matched.
    """
    methods: list[str] = []
    if has_provider:
        methods.append(WALLET_PROVIDER_METHOD)
    methods.extend(p for p in WALLET_SOURCE_PATTERNS if p in page_source)
    return analysis.WalletTracking(detected=bool(methods), methods=methods)
