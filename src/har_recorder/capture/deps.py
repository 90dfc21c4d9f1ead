"""Playwright and browser installation checks.

Branded channels (chrome, msedge) are installed through the same
``playwright install`` command as the bundled engines.
"""

from __future__ import annotations

import logging
import subprocess
import sys

from har_recorder.capture.targets import BrowserConfig

_LOGGER = logging.getLogger(__name__)


def check_playwright() -> bool:
    """Check if Playwright is installed.

    Returns:
        True if Playwright is available
    """
    try:
        import playwright  # noqa: F401

        return True
    except ImportError:
        return False


def check_browser_installed(config: BrowserConfig) -> bool:
    """Check if the Playwright browser for a config is installed.

    Args:
        config: Browser to check

    Returns:
        True if browser is installed and ready
    """
    if not check_playwright():
        return False

    try:
        result = subprocess.run(
            [sys.executable, "-m", "playwright", "install", "--dry-run", config.install_name],
            capture_output=True,
            text=True,
            check=False,
        )
        return "already installed" in result.stdout.lower() or result.returncode == 0
    except Exception as e:
        # Launch will fail with a clear error if the browser is really missing
        _LOGGER.debug("Browser install check failed for %s: %s", config.install_name, e)
        return True


def install_browser(config: BrowserConfig) -> bool:
    """Install the Playwright browser for a config.

    Args:
        config: Browser to install

    Returns:
        True if installation succeeded
    """
    _LOGGER.info("Installing %s...", config.install_name)
    try:
        subprocess.run(
            [sys.executable, "-m", "playwright", "install", config.install_name],
            check=True,
        )
        return True
    except subprocess.CalledProcessError as e:
        _LOGGER.error("Installation of %s failed: %s", config.install_name, e)
        return False
