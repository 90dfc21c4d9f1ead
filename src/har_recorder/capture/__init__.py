"""Browser-based HAR recording using Playwright.

Requires the 'capture' optional dependency: pip install har-recorder[capture]

Exports:
    - record_har: Record a browsing session into a HAR file
    - RecordingOptions / RecordingResult / CloseReason
    - BrowserConfig, BROWSER_CONFIGS, get_browser_config: Browser selection
    - format_url, generate_har_path: Target and output helpers
    - check_playwright / check_browser_installed / install_browser
    - RecordingWorkflowResult, run_recording_workflow and its phases
"""

from __future__ import annotations

from har_recorder.capture.browser import (
    CloseReason,
    RecordingOptions,
    RecordingResult,
    create_recording_context,
    launch_browser,
    navigate_to_url,
    record_har,
    wait_for_browser_close,
)
from har_recorder.capture.deps import (
    check_browser_installed,
    check_playwright,
    install_browser,
)
from har_recorder.capture.targets import (
    BROWSER_CONFIGS,
    BROWSER_MENU,
    DEFAULT_BROWSER,
    BrowserConfig,
    format_url,
    generate_har_path,
    get_browser_config,
    get_har_dir,
)
from har_recorder.capture.workflow import (
    BrowserCheckResult,
    RecordingPhaseResult,
    RecordingWorkflowResult,
    StatsResult,
    check_browser_phase,
    run_recording_phase,
    run_recording_workflow,
    run_stats_phase,
)

__all__ = [
    # Core recording
    "record_har",
    "launch_browser",
    "create_recording_context",
    "navigate_to_url",
    "wait_for_browser_close",
    "RecordingOptions",
    "RecordingResult",
    "CloseReason",
    # Targets
    "BrowserConfig",
    "BROWSER_CONFIGS",
    "BROWSER_MENU",
    "DEFAULT_BROWSER",
    "get_browser_config",
    "format_url",
    "generate_har_path",
    "get_har_dir",
    # Dependency management
    "check_playwright",
    "check_browser_installed",
    "install_browser",
    # Workflow orchestration
    "RecordingWorkflowResult",
    "BrowserCheckResult",
    "RecordingPhaseResult",
    "StatsResult",
    "check_browser_phase",
    "run_recording_phase",
    "run_stats_phase",
    "run_recording_workflow",
]
