"""Record command for har-recorder CLI - records browser traffic to HAR files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from har_recorder.capture.browser import CloseReason, RecordingOptions
from har_recorder.capture.deps import check_playwright, install_browser
from har_recorder.capture.targets import (
    BROWSER_CONFIGS,
    BROWSER_MENU,
    DEFAULT_BROWSER,
    BrowserConfig,
    format_url,
    generate_har_path,
    get_browser_config,
)
from har_recorder.capture.workflow import check_browser_phase, run_recording_phase, run_stats_phase
from har_recorder.cli.stats import SEPARATOR, display_next_steps, display_stats


def record(
    url: Annotated[
        str | None,
        typer.Argument(help="URL or hostname to record (prompted when omitted)"),
    ] = None,
    browser: Annotated[
        str | None,
        typer.Option("--browser", "-b", help="Browser: chrome, edge, firefox, chromium, webkit, or 1-3"),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="HAR file name"),
    ] = None,
    har_dir: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Output directory (default: ./hars)"),
    ] = None,
    headless: Annotated[
        bool,
        typer.Option("--headless", help="Run the browser without a window"),
    ] = False,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Stop waiting for the browser after N seconds"),
    ] = None,
    poll_interval: Annotated[
        float,
        typer.Option("--poll-interval", help="Seconds between browser liveness checks"),
    ] = 1.0,
    navigation_timeout: Annotated[
        float,
        typer.Option("--navigation-timeout", help="Seconds to wait for the first page load"),
    ] = 30.0,
    no_stats: Annotated[
        bool,
        typer.Option("--no-stats", help="Skip the statistics summary"),
    ] = False,
) -> None:
    """Record browser traffic to a HAR file.

    Opens a browser at the target URL and records all network traffic
    until you close the browser, then prints statistics for the capture.
    Without a URL argument, the target, browser and file name are prompted.

    Args:
        url: URL or hostname to open first
        browser: Browser to record with (default: chrome)
        output: HAR file name (auto-generated if not provided)
        har_dir: Directory for the HAR file
        headless: Run the browser without a window
        timeout: Seconds after which recording stops (None = wait for close)
        poll_interval: Seconds between browser liveness checks
        navigation_timeout: Seconds to wait for the first page load
        no_stats: Skip the statistics summary

    Example:
        har-recorder record
        har-recorder record example.com --browser firefox
        har-recorder record https://example.com -o login.har --headless --timeout 10
    """
    if not check_playwright():
        typer.echo("Recording requires Playwright. Install with: pip install har-recorder[capture]", err=True)
        raise typer.Exit(1)

    if browser is not None and not _is_known_browser(browser):
        typer.echo(f"Error: unknown browser '{browser}'. Choose from: {', '.join(BROWSER_CONFIGS)}", err=True)
        raise typer.Exit(1)

    try:
        interactive = url is None
        if interactive:
            url = _prompt_url()

        try:
            target_url = format_url(url or "")
        except ValueError:
            typer.echo("Error: URL must not be empty", err=True)
            raise typer.Exit(1) from None
        typer.echo(f"  ✓ Target: {target_url}")
        typer.echo()

        if browser is None:
            browser = _prompt_browser() if interactive else DEFAULT_BROWSER
        config = get_browser_config(browser)
        if interactive:
            typer.echo(f"  ✓ Browser: {config.name.upper()}")
            typer.echo()

        if output is None and interactive:
            output = _prompt_file_name() or None
        har_path = generate_har_path(config.name, output, har_dir)

        _run_recording(
            target_url,
            har_path,
            config,
            RecordingOptions(
                headless=headless,
                navigation_timeout=navigation_timeout,
                poll_interval=poll_interval,
                close_timeout=timeout if timeout is not None else RecordingOptions.close_timeout,
            ),
            show_stats=not no_stats,
        )
    except (KeyboardInterrupt, typer.Abort):
        typer.echo()
        typer.echo("Interrupted by user")
        raise typer.Exit(0) from None


def _run_recording(
    target_url: str,
    har_path: Path,
    config: BrowserConfig,
    options: RecordingOptions,
    show_stats: bool = True,
) -> None:
    """Check the browser, record, and report."""
    # Phase 1: Check browser installation
    result = check_browser_phase(config.name)
    if result.needs_browser_install:
        _offer_browser_install(config)

    _display_header(target_url, config, har_path)
    _display_instructions()

    # Phase 2: Record until the browser is closed
    result = run_recording_phase(target_url, har_path, options=options, result=result)
    if not result.recording_success:
        typer.echo(f"Recording failed: {result.recording_error}", err=True)
        raise typer.Exit(1)

    if result.recording is not None:
        if not result.recording.navigated:
            typer.echo("  Note: the first page did not finish loading in time")
        if result.recording.close_reason is CloseReason.TIMEOUT:
            typer.echo("  Note: recording stopped after the timeout")
        else:
            typer.echo("  ✓ Browser closed")

    if not show_stats:
        typer.echo(f"  HAR saved: {har_path}")
        return

    # Phase 3: Statistics
    result = run_stats_phase(result=result)
    if result.stats is not None:
        display_stats(har_path, result.stats)
    if result.metrics is not None:
        display_next_steps()


def _is_known_browser(choice: str) -> bool:
    """True for a browser name or an interactive menu number."""
    key = choice.strip().lower()
    if key.isdigit():
        return 1 <= int(key) <= len(BROWSER_MENU)
    return key in BROWSER_CONFIGS


def _offer_browser_install(config: BrowserConfig) -> None:
    """Ask to install a missing browser, exiting if declined or failed."""
    typer.echo()
    typer.echo(f"Browser '{config.name}' is not installed.")
    typer.echo()
    if typer.confirm(f"Download and install {config.install_name}? (one-time)", default=True):
        typer.echo(f"Installing {config.install_name}...")
        if not install_browser(config):
            typer.echo(
                f"Failed to install {config.install_name}. Try manually: playwright install {config.install_name}",
                err=True,
            )
            raise typer.Exit(1)
        typer.echo(f"  ✓ {config.label or config.name} installed successfully!")
        typer.echo()
    else:
        typer.echo(f"Run manually: playwright install {config.install_name}")
        raise typer.Exit(1)


def _prompt_url() -> str:
    """Prompt for the target URL."""
    typer.echo("[1] Target URL")
    value: str = typer.prompt("  URL (e.g. example.com or https://example.com)", default="", show_default=False)
    return value


def _prompt_browser() -> str:
    """Show the browser menu and prompt for a choice."""
    typer.echo("[2] Browser")
    for index, name in enumerate(BROWSER_MENU, start=1):
        typer.echo(f"  {index}. {BROWSER_CONFIGS[name].label}")
    value: str = typer.prompt(f"  Choose (1-{len(BROWSER_MENU)})", default="1")
    return value


def _prompt_file_name() -> str:
    """Prompt for the HAR file name (empty for a generated one)."""
    typer.echo("[3] Output file")
    value: str = typer.prompt("  HAR file name (Enter for default)", default="", show_default=False)
    typer.echo()
    return value.strip()


def _display_header(target_url: str, config: BrowserConfig, har_path: Path) -> None:
    """Display recording header."""
    typer.echo(SEPARATOR)
    typer.echo("HAR RECORDER")
    typer.echo(SEPARATOR)
    typer.echo()
    typer.echo(f"  Target:     {target_url}")
    typer.echo(f"  Browser:    {config.label or config.name}")
    typer.echo(f"  Output:     {har_path}")
    typer.echo()


def _display_instructions() -> None:
    """Display recording instructions."""
    typer.echo("Instructions:")
    typer.echo("  1. Browse the site in the window that opens")
    typer.echo("  2. Every request is recorded to the HAR file")
    typer.echo("  3. Close the browser window when done - recording stops automatically")
    typer.echo()
