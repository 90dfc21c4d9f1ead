"""Recording workflow orchestration.

This module provides the business logic for the record workflow,
separated from CLI concerns for testability.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from har_recorder.capture.browser import CloseReason, RecordingOptions
from har_recorder.capture.targets import BrowserConfig, get_browser_config

if TYPE_CHECKING:
    from har_recorder.stats import Metrics

# =============================================================================
# Phase-specific result types
# =============================================================================


@dataclass
class BrowserCheckResult:
    """Result of browser installation check.

    Attributes:
        config: Browser that was checked
        needs_install: True if browser needs to be installed
    """

    config: BrowserConfig = field(default_factory=lambda: get_browser_config(None))
    needs_install: bool = False


@dataclass
class RecordingPhaseResult:
    """Result of the recording phase.

    Attributes:
        success: True if the session ran and the HAR file was written
        error: Error message if recording failed
        har_path: Path to the HAR file
        navigated: True if the first page load completed
        close_reason: How the end of the session was detected
    """

    success: bool = False
    error: str | None = None
    har_path: Path | None = None
    navigated: bool = False
    close_reason: CloseReason | None = None


@dataclass
class StatsResult:
    """Result of the statistics phase.

    Attributes:
        metrics: Aggregated metrics (None if the HAR could not be analysed)
        file_size: HAR file size in bytes
        error: Why metrics are missing
    """

    metrics: Metrics | None = None
    file_size: int = 0
    error: str | None = None


# =============================================================================
# Workflow context - composes phase results
# =============================================================================


@dataclass
class RecordingWorkflowResult:
    """Result of a record workflow execution.

    Composes results from each phase. Check the phase field to determine
    how far the workflow progressed.

    Attributes:
        phase: Current phase of the workflow
        browser: Result of browser check phase
        recording: Result of recording phase (None if not reached)
        stats: Result of statistics phase (None if not reached)
    """

    phase: str = "init"
    browser: BrowserCheckResult = field(default_factory=BrowserCheckResult)
    recording: RecordingPhaseResult | None = None
    stats: StatsResult | None = None

    @property
    def needs_browser_install(self) -> bool:
        """True if browser needs installation."""
        return self.browser.needs_install

    @property
    def recording_success(self) -> bool:
        """True if recording completed successfully."""
        return self.recording.success if self.recording else False

    @property
    def recording_error(self) -> str | None:
        """Error message if recording failed."""
        return self.recording.error if self.recording else None

    @property
    def har_path(self) -> Path | None:
        """Path to the recorded HAR file."""
        return self.recording.har_path if self.recording else None

    @property
    def metrics(self) -> Metrics | None:
        """Aggregated metrics of the recording."""
        return self.stats.metrics if self.stats else None

    @property
    def stats_error(self) -> str | None:
        """Why the recording could not be analysed."""
        return self.stats.error if self.stats else None


# =============================================================================
# Phase functions
# =============================================================================


def check_browser_phase(browser: str | None = None) -> RecordingWorkflowResult:
    """Check if the chosen browser is installed.

    Args:
        browser: Browser name or menu number (default: chrome)

    Returns:
        RecordingWorkflowResult with browser check status
    """
    from har_recorder.capture.deps import check_browser_installed

    config = get_browser_config(browser)
    browser_result = BrowserCheckResult(
        config=config,
        needs_install=not check_browser_installed(config),
    )
    return RecordingWorkflowResult(phase="browser_check", browser=browser_result)


def run_recording_phase(
    url: str,
    har_path: Path,
    browser: str | None = None,
    options: RecordingOptions | None = None,
    result: RecordingWorkflowResult | None = None,
) -> RecordingWorkflowResult:
    """Record a browsing session into har_path.

    Args:
        url: Page to open first
        har_path: Output HAR path
        browser: Browser name; defaults to the one from the browser check
        options: Recording options
        result: Existing result to update, or None to create new

    Returns:
        RecordingWorkflowResult with recording status
    """
    from har_recorder.capture.browser import record_har

    if result is None:
        result = RecordingWorkflowResult(browser=BrowserCheckResult(config=get_browser_config(browser)))
    result.phase = "recording"

    config = get_browser_config(browser) if browser else result.browser.config
    recording = record_har(url, har_path, config, options)

    result.recording = RecordingPhaseResult(
        success=recording.success,
        error=recording.error,
        har_path=recording.har_path,
        navigated=recording.navigated,
        close_reason=recording.close_reason,
    )

    if recording.success:
        result.phase = "recorded"

    return result


def run_stats_phase(
    har_path: Path | None = None,
    result: RecordingWorkflowResult | None = None,
) -> RecordingWorkflowResult:
    """Compute metrics for the recorded HAR.

    A malformed or missing HAR does not raise: the reason is stored in
    ``result.stats.error`` so the caller can show a warning.

    Args:
        har_path: HAR file to analyse (default: the recorded one)
        result: Existing result to update, or None to create new

    Returns:
        RecordingWorkflowResult with statistics
    """
    from har_recorder.stats import MalformedHarError, load_har_metrics

    if result is None:
        result = RecordingWorkflowResult()
    result.phase = "stats"

    path = har_path or result.har_path
    if path is None or not path.is_file():
        result.stats = StatsResult(error=f"HAR file was not saved: {path}")
        return result

    stats = StatsResult(file_size=path.stat().st_size)
    try:
        stats.metrics = load_har_metrics(path)
    except MalformedHarError as e:
        stats.error = str(e)
    except OSError as e:
        stats.error = f"Could not read HAR file: {e}"
    result.stats = stats

    if stats.metrics is not None:
        result.phase = "complete"

    return result


def run_recording_workflow(
    url: str,
    har_path: Path,
    browser: str | None = None,
    options: RecordingOptions | None = None,
    skip_browser_check: bool = False,
) -> RecordingWorkflowResult:
    """Run the complete record workflow.

    This function orchestrates all phases of the workflow:
    1. Check if browser is installed
    2. Record until the user closes the browser
    3. Compute statistics for the HAR file

    Args:
        url: Page to open first
        har_path: Output HAR path
        browser: Browser name or menu number
        options: Recording options
        skip_browser_check: Skip browser installation check

    Returns:
        RecordingWorkflowResult with workflow status

    Example:
        >>> result = run_recording_workflow("https://example.com", Path("hars/example.har"))
        >>> if result.needs_browser_install:
        ...     install_browser(result.browser.config)
        >>> if result.metrics:
        ...     print(result.metrics.total_requests)
    """
    # Phase 1: Browser check
    if not skip_browser_check:
        result = check_browser_phase(browser)
        if result.needs_browser_install:
            return result
    else:
        result = RecordingWorkflowResult(browser=BrowserCheckResult(config=get_browser_config(browser)))

    # Phase 2: Recording
    result = run_recording_phase(url, har_path, options=options, result=result)
    if not result.recording_success:
        return result

    # Phase 3: Statistics
    return run_stats_phase(result=result)
