"""Browser-based HAR recording using Playwright.

This module drives a headed browser that records every request into a HAR
file while the user browses, and detects when the user closes it.
Requires the 'capture' optional dependency: pip install har-recorder[capture]
"""

from __future__ import annotations

import contextlib
import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from har_recorder.capture.deps import check_playwright
from har_recorder.capture.targets import BrowserConfig, get_browser_config

_LOGGER = logging.getLogger(__name__)


class CloseReason(str, Enum):
    """Why waiting for the browser ended."""

    EVENT = "event"
    PROBE_FAILED = "probe_failed"
    TIMEOUT = "timeout"


@dataclass
class RecordingOptions:
    """Options controlling a recording session.

    Attributes:
        headless: Run the browser without a window (for automated runs)
        navigation_timeout: Seconds to wait for the first page load
        wait_until: Playwright load state that ends navigation
        poll_interval: Seconds between liveness probes while waiting for close
        close_timeout: Seconds after which waiting for close is abandoned
        ignore_https_errors: Accept self-signed certificates
    """

    headless: bool = False
    navigation_timeout: float = 30.0
    wait_until: str = "networkidle"
    poll_interval: float = 1.0
    close_timeout: float = 3600.0
    ignore_https_errors: bool = False


@dataclass
class RecordingResult:
    """Result of a HAR recording session.

    Attributes:
        har_path: Path of the recorded HAR file
        success: True if the browser session ran and the HAR file was written
        error: Error message if recording failed
        navigated: True if the initial page load completed in time
        close_reason: How the end of the session was detected
    """

    har_path: Path | None = None
    success: bool = True
    error: str | None = None
    navigated: bool = False
    close_reason: CloseReason | None = None


def launch_browser(playwright: Any, config: BrowserConfig, *, headless: bool = False) -> Any:
    """Launch the browser described by config.

    Args:
        playwright: Object returned by ``sync_playwright().__enter__()``
        config: Browser to launch
        headless: Run without a window

    Returns:
        Playwright Browser instance
    """
    browser_type = getattr(playwright, config.engine)

    launch_options: dict[str, Any] = {"headless": headless}
    if config.channel and config.engine != "firefox":
        launch_options["channel"] = config.channel

    _LOGGER.debug("Launching %s with %s", config.engine, launch_options)
    return browser_type.launch(**launch_options)


def create_recording_context(browser: Any, har_path: Path, options: RecordingOptions) -> Any:
    """Open a browser context that records all traffic into har_path.

    Response bodies are embedded. The HAR is written when the context closes.
    """
    context_options: dict[str, Any] = {
        "record_har_path": str(har_path),
        "record_har_content": "embed",
    }
    if options.ignore_https_errors:
        context_options["ignore_https_errors"] = True
    return browser.new_context(**context_options)


def navigate_to_url(page: Any, url: str, options: RecordingOptions) -> bool:
    """Load url in page.

    A timeout or navigation error is not fatal: the browser stays open and
    recording continues.

    Returns:
        True if the page reached the configured load state
    """
    try:
        page.goto(url, wait_until=options.wait_until, timeout=options.navigation_timeout * 1000)
        return True
    except Exception as e:
        _LOGGER.warning("Page load timed out or failed: %s. Continuing to record...", e)
        return False


def wait_for_browser_close(
    browser: Any,
    context: Any,
    page: Any,
    *,
    poll_interval: float = 1.0,
    timeout: float = 3600.0,
) -> CloseReason:
    """Block until the user ends the browser session.

    The session is over at the first of: a browser ``disconnected`` event,
    a page or context ``close`` event, or a failing liveness probe
    (``page.evaluate("1")``). Events are dispatched while the probe runs.

    Args:
        browser: Playwright Browser
        context: Recording BrowserContext
        page: Page opened in context
        poll_interval: Seconds between liveness probes
        timeout: Seconds after which waiting is abandoned

    Returns:
        The CloseReason that ended the wait
    """
    closed: list[str] = []

    def _on_close(*_args: Any) -> None:
        closed.append("closed")

    listeners = ((browser, "disconnected"), (page, "close"), (context, "close"))
    for emitter, event in listeners:
        emitter.on(event, _on_close)

    deadline = time.monotonic() + timeout
    try:
        while True:
            if closed:
                return CloseReason.EVENT
            if time.monotonic() >= deadline:
                _LOGGER.warning("Gave up waiting for the browser to close after %.0f seconds", timeout)
                return CloseReason.TIMEOUT
            try:
                page.evaluate("1")
                page.wait_for_timeout(poll_interval * 1000)
            except Exception as e:
                if closed:
                    return CloseReason.EVENT
                _LOGGER.debug("Liveness probe failed: %s", e)
                return CloseReason.PROBE_FAILED
    finally:
        for emitter, event in listeners:
            with contextlib.suppress(Exception):
                emitter.remove_listener(event, _on_close)


def record_har(
    url: str,
    har_path: str | Path,
    browser: str | BrowserConfig = "chrome",
    options: RecordingOptions | None = None,
) -> RecordingResult:
    """Record the user's browsing session into a HAR file.

    Launches the browser, navigates to url and records all traffic until the
    user closes the browser. The HAR file is complete once this returns.

    Args:
        url: Page to open first
        har_path: Where to write the HAR file
        browser: Browser name, menu number or BrowserConfig
        options: Recording options (defaults to RecordingOptions())

    Returns:
        RecordingResult describing the session

    Example:
        >>> result = record_har("https://example.com", "hars/example.har")
        >>> result.success
        True

        # Automated recording
        >>> opts = RecordingOptions(headless=True, close_timeout=10)
        >>> result = record_har("https://example.com", "out.har", "chromium", opts)
    """
    if options is None:
        options = RecordingOptions()
    config = browser if isinstance(browser, BrowserConfig) else get_browser_config(browser)
    har_path = Path(har_path)

    if not check_playwright():
        return RecordingResult(
            har_path=har_path,
            success=False,
            error="Playwright not installed. Run: pip install har-recorder[capture]",
        )

    from playwright.sync_api import sync_playwright

    har_path.parent.mkdir(parents=True, exist_ok=True)
    result = RecordingResult(har_path=har_path)

    try:
        with sync_playwright() as p:
            browser_instance = launch_browser(p, config, headless=options.headless)
            try:
                context = create_recording_context(browser_instance, har_path, options)
                page = context.new_page()
                result.navigated = navigate_to_url(page, url, options)

                _LOGGER.info("Browser opened. Recording until the browser is closed.")
                result.close_reason = wait_for_browser_close(
                    browser_instance,
                    context,
                    page,
                    poll_interval=options.poll_interval,
                    timeout=options.close_timeout,
                )

                # Closing the context flushes the HAR file
                _LOGGER.info("Saving HAR file...")
                try:
                    context.close()
                except Exception as e:
                    _LOGGER.warning("Closing the recording context failed: %s", e)
            finally:
                with contextlib.suppress(Exception):
                    browser_instance.close()
    except Exception as e:
        result.success = False
        result.error = str(e)
        return result

    if not har_path.exists():
        result.success = False
        result.error = f"HAR file was not saved: {har_path}"

    return result
