"""
Browser session management for a single page analysis.
Each BrowserSession instance owns its own Playwright driver, browser,
context and page, so no browser state is shared between analyses.
"""

from __future__ import annotations

import pathlib

from playwright import async_api

from web3_tracking.analysis import patterns
from web3_tracking.browser import instrumentation
from web3_tracking.config import DEFAULT_USER_AGENT
from web3_tracking.models import analysis
from web3_tracking.utils import logger, url as url_mod

log = logger.create_logger("BrowserSession")

# Flags the init script can set; anything else on the page global is ignored.
_OBSERVED_FINGERPRINT_APIS = ("canvas", "webgl", "audio")


class BrowserSession:
    """
    Manages an isolated browser session for a single URL analysis.
    """

    def __init__(self, headless: bool = True, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """Initialise a new browser session with empty state."""
        self._headless = headless
        self._user_agent = user_agent

        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._page: async_api.Page | None = None

        self._network_requests: list[analysis.NetworkRequest] = []

    # ==========================================================================
    # State Getters
    # ==========================================================================

    def get_page(self) -> async_api.Page | None:
        """Return the active Playwright page, if any."""
        return self._page

    def get_network_requests(self) -> list[analysis.NetworkRequest]:
        """Return the tracking requests intercepted during this session."""
        return self._network_requests

    def _require_page(self) -> async_api.Page:
        """Return the active page or raise when the browser is not running."""
        if not self._page:
            raise RuntimeError("No browser session active")
        return self._page

    # ==========================================================================
    # Browser Lifecycle
    # ==========================================================================

    async def launch(self) -> None:
        """Launch Chromium and open a page in a fresh isolated context."""
        log.debug("Launching browser", {"headless": self._headless})
        self._playwright = await async_api.async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._headless)
        self._context = await self._browser.new_context(user_agent=self._user_agent)
        self._page = await self._context.new_page()

    async def start_network_monitoring(self) -> None:
        """Intercept every request, recording the tracking-related ones."""
        await self._require_page().route("**/*", self._on_route)

    async def _on_route(self, route: async_api.Route) -> None:
        """Record a matching request, then let every request proceed."""
        request = route.request
        request_url = request.url

        try:
            if patterns.is_tracking_request(request_url):
                self._network_requests.append(self._describe_request(request))
        except Exception as exc:
            log.warn("Failed to record request", {"url": request_url, "error": str(exc)})
        finally:
            await route.continue_()

    @staticmethod
    def _describe_request(request: async_api.Request) -> analysis.NetworkRequest:
        """Build the record for an intercepted tracking request."""
        try:
            body = request.post_data
        except Exception:
            # Binary payloads cannot be decoded as text.
            body = None
        return analysis.NetworkRequest(
            url=request.url,
            method=request.method,
            headers=dict(request.headers),
            body=body,
            category=patterns.categorize_request(request.url),
        )

    async def install_fingerprinting_detection(self) -> None:
        """Register the API instrumentation to run before any page script."""
        await self._require_page().add_init_script(instrumentation.FINGERPRINT_INIT_SCRIPT)

    # ==========================================================================
    # Navigation
    # ==========================================================================

    async def navigate_to(self, url: str, timeout: int = 30000) -> None:
        """Navigate to *url* and wait for the network to settle.

        Raises:
            playwright.async_api.Error: On navigation failure or timeout.
        """
        page = self._require_page()
        log.debug("Navigating", {"host": url_mod.extract_domain(url), "timeout": timeout})
        response = await page.goto(url, wait_until="networkidle", timeout=timeout)

        if response is not None and response.status >= 400:
            log.warn(
                "Page responded with an error status",
                {"url": url, "statusCode": response.status},
            )
        if url_mod.normalize_url(page.url) != url_mod.normalize_url(url):
            log.info("Redirected", {"from": url, "to": page.url})

    # ==========================================================================
    # Data Capture
    # ==========================================================================

    async def collect_tracking_scripts(self) -> list[analysis.TrackingScript]:
        """Return every script element that mentions a tracking keyword."""
        raw = await self._require_page().evaluate(instrumentation.SCRIPTS_JS)
        scripts = [analysis.TrackingScript.model_validate(item) for item in raw]
        matched = [s for s in scripts if patterns.is_tracking_script(s)]
        log.debug("Scripts inspected", {"total": len(scripts), "tracking": len(matched)})
        return matched

    async def capture_local_storage(self) -> dict[str, str]:
        """Return the page's localStorage as a plain mapping."""
        data = await self._require_page().evaluate(instrumentation.LOCAL_STORAGE_JS)
        return {str(k): str(v) for k, v in data.items()}

    async def capture_tracking_cookies(self) -> list[analysis.TrackedCookie]:
        """Return the context's cookies whose name or domain looks like tracking."""
        if not self._context:
            raise RuntimeError("No browser session active")

        cookies = await self._context.cookies()
        log.debug("Captured raw cookies from browser", {"count": len(cookies)})
        return [
            analysis.TrackedCookie.model_validate(cookie)
            for cookie in cookies
            if patterns.is_tracking_cookie(cookie)
        ]

    async def detect_wallet_tracking(self) -> analysis.WalletTracking:
        """Check for an injected wallet provider and wallet code in the markup."""
        probe = await self._require_page().evaluate(instrumentation.WALLET_PROBE_JS)
        return patterns.detect_wallet_tracking(
            bool(probe.get("hasProvider")), str(probe.get("source") or "")
        )

    async def read_fingerprinting_flags(self) -> analysis.FingerprintingFlags:
        """Pull the flags set by the init script out of the page."""
        flags = await self._require_page().evaluate(instrumentation.FINGERPRINT_FLAGS_JS)
        return analysis.FingerprintingFlags(
            **{api: bool(flags.get(api)) for api in _OBSERVED_FINGERPRINT_APIS}
        )

    async def take_screenshot(self, path: pathlib.Path) -> None:
        """Write a full-page PNG screenshot to *path*."""
        await self._require_page().screenshot(path=str(path), full_page=True, type="png")

    # ==========================================================================
    # Cleanup
    # ==========================================================================

    async def close(self) -> None:
        """Close the browser and clean up all resources."""
        log.debug("Closing browser session")
        self._page = None

        if self._context:
            try:
                await self._context.close()
            except Exception as exc:
                log.debug("Context close error (non-fatal)", {"error": str(exc)})
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as exc:
                log.debug("Browser close error (non-fatal)", {"error": str(exc)})
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.debug("Playwright stop error (non-fatal)", {"error": str(exc)})
            self._playwright = None

        log.debug("Browser session closed")
