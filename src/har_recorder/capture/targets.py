"""Browser selection, target URL normalisation and HAR output paths."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

DEFAULT_HAR_DIR_NAME = "hars"


@dataclass(frozen=True)
class BrowserConfig:
    """How to launch one browser through Playwright.

    Attributes:
        name: Short name used in CLI options and file names
        engine: Playwright browser type (chromium, firefox, webkit)
        channel: Branded chromium channel (chrome, msedge), None for bundled builds
        label: Human-readable menu label
    """

    name: str
    engine: str
    channel: str | None = None
    label: str = ""

    @property
    def install_name(self) -> str:
        """Name accepted by ``playwright install``."""
        return self.channel or self.engine


BROWSER_CONFIGS: dict[str, BrowserConfig] = {
    "chrome": BrowserConfig(name="chrome", engine="chromium", channel="chrome", label="Chrome (default)"),
    "edge": BrowserConfig(name="edge", engine="chromium", channel="msedge", label="Edge"),
    "firefox": BrowserConfig(name="firefox", engine="firefox", label="Firefox"),
    "chromium": BrowserConfig(name="chromium", engine="chromium", label="Chromium (bundled)"),
    "webkit": BrowserConfig(name="webkit", engine="webkit", label="WebKit"),
}

DEFAULT_BROWSER = "chrome"

# Interactive menu order
BROWSER_MENU: tuple[str, ...] = ("chrome", "edge", "firefox")


def get_browser_config(choice: str | None) -> BrowserConfig:
    """Resolve a menu number or browser name to a BrowserConfig.

    Unknown or empty choices fall back to Chrome.

    Example:
        >>> get_browser_config("2").channel
        'msedge'
        >>> get_browser_config("").name
        'chrome'
    """
    key = (choice or "").strip().lower()
    if key.isdigit() and 1 <= int(key) <= len(BROWSER_MENU):
        key = BROWSER_MENU[int(key) - 1]
    if key not in BROWSER_CONFIGS:
        if key:
            _LOGGER.debug("Unknown browser choice %r, using %s", choice, DEFAULT_BROWSER)
        key = DEFAULT_BROWSER
    return BROWSER_CONFIGS[key]


def format_url(target: str) -> str:
    """Normalise user input into a navigable URL.

    Handles various input formats:
    - "example.com" -> "https://example.com"
    - "http://10.0.0.1/admin" -> unchanged
    - "  HTTPS://Example.com " -> "HTTPS://Example.com"

    Args:
        target: URL or hostname typed by the user

    Returns:
        URL with an http(s) scheme

    Raises:
        ValueError: If target is empty
    """
    url = target.strip()
    if not url:
        raise ValueError("URL must not be empty")
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url


def get_har_dir(base: Path | None = None) -> Path:
    """Directory where recordings are written by default (./hars)."""
    return (base or Path.cwd()) / DEFAULT_HAR_DIR_NAME


def generate_har_path(
    browser_name: str,
    file_name: str | None = None,
    har_dir: Path | None = None,
) -> Path:
    """Build the output path for a recording, creating its directory.

    Args:
        browser_name: Browser short name, used in generated file names
        file_name: Custom file name (".har" is appended when missing)
        har_dir: Output directory (default: ./hars)

    Returns:
        Path to the HAR file to record into

    Example:
        >>> generate_har_path("firefox", "login", Path("/tmp/out"))
        PosixPath('/tmp/out/login.har')
    """
    directory = har_dir or get_har_dir()
    directory.mkdir(parents=True, exist_ok=True)

    if file_name:
        path = directory / file_name
        if path.suffix != ".har":
            path = path.with_name(path.name + ".har")
        return path

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return directory / f"recording-{timestamp}-{browser_name}.har"
