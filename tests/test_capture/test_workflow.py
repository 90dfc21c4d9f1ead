"""Tests for recording workflow orchestration."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from har_recorder.capture.browser import CloseReason, RecordingOptions, RecordingResult
from har_recorder.capture.targets import BROWSER_CONFIGS
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
from har_recorder.stats import Metrics

# =============================================================================
# Test Phase-specific Result Types
# =============================================================================


class TestBrowserCheckResult:
    """Tests for BrowserCheckResult dataclass."""

    def test_default_values(self) -> None:
        """Test default values."""
        result = BrowserCheckResult()
        assert result.config.name == "chrome"
        assert result.needs_install is False

    def test_custom_values(self) -> None:
        """Test custom values."""
        result = BrowserCheckResult(config=BROWSER_CONFIGS["firefox"], needs_install=True)
        assert result.config.name == "firefox"
        assert result.needs_install is True


class TestRecordingPhaseResult:
    """Tests for RecordingPhaseResult dataclass."""

    def test_default_values(self) -> None:
        """Test default values."""
        result = RecordingPhaseResult()
        assert result.success is False
        assert result.error is None
        assert result.har_path is None
        assert result.navigated is False
        assert result.close_reason is None


class TestStatsResult:
    """Tests for StatsResult dataclass."""

    def test_default_values(self) -> None:
        """Test default values."""
        result = StatsResult()
        assert result.metrics is None
        assert result.file_size == 0
        assert result.error is None


# =============================================================================
# Test RecordingWorkflowResult
# =============================================================================


class TestRecordingWorkflowResult:
    """Tests for RecordingWorkflowResult dataclass."""

    def test_default_values(self) -> None:
        """Test default values are set correctly."""
        result = RecordingWorkflowResult()

        assert result.phase == "init"
        assert result.browser.config.name == "chrome"
        assert result.recording is None
        assert result.stats is None

    def test_convenience_properties_with_none(self) -> None:
        """Test convenience properties return safe defaults when phase not reached."""
        result = RecordingWorkflowResult()

        # Should return safe defaults, not raise
        assert result.needs_browser_install is False
        assert result.recording_success is False
        assert result.recording_error is None
        assert result.har_path is None
        assert result.metrics is None
        assert result.stats_error is None

    def test_convenience_properties_with_values(self, tmp_path: Path) -> None:
        """Test convenience properties return composed values."""
        metrics = Metrics(total_requests=3)
        result = RecordingWorkflowResult(
            phase="complete",
            browser=BrowserCheckResult(config=BROWSER_CONFIGS["edge"], needs_install=False),
            recording=RecordingPhaseResult(success=True, har_path=tmp_path / "test.har"),
            stats=StatsResult(metrics=metrics, file_size=42),
        )

        assert result.needs_browser_install is False
        assert result.recording_success is True
        assert result.har_path == tmp_path / "test.har"
        assert result.metrics is metrics
        assert result.stats_error is None


# =============================================================================
# Test check_browser_phase
# =============================================================================


class TestCheckBrowserPhase:
    """Tests for check_browser_phase function."""

    @patch("har_recorder.capture.deps.check_browser_installed")
    def test_browser_installed(self, mock_check: MagicMock) -> None:
        """Test when browser is already installed."""
        mock_check.return_value = True

        result = check_browser_phase("edge")

        assert result.phase == "browser_check"
        assert result.browser.config.name == "edge"
        assert result.browser.needs_install is False
        mock_check.assert_called_once_with(BROWSER_CONFIGS["edge"])

    @patch("har_recorder.capture.deps.check_browser_installed")
    def test_browser_not_installed(self, mock_check: MagicMock) -> None:
        """Test when browser needs installation."""
        mock_check.return_value = False

        result = check_browser_phase("firefox")

        assert result.browser.config.name == "firefox"
        assert result.needs_browser_install is True

    @patch("har_recorder.capture.deps.check_browser_installed")
    def test_default_browser_is_chrome(self, mock_check: MagicMock) -> None:
        """Test default browser is chrome."""
        mock_check.return_value = True

        result = check_browser_phase()

        assert result.browser.config.name == "chrome"
        mock_check.assert_called_once_with(BROWSER_CONFIGS["chrome"])


# =============================================================================
# Test run_recording_phase
# =============================================================================


class TestRunRecordingPhase:
    """Tests for run_recording_phase function."""

    @patch("har_recorder.capture.browser.record_har")
    def test_successful_recording(self, mock_record: MagicMock, tmp_path: Path) -> None:
        """Test a successful recording advances the phase."""
        har_path = tmp_path / "test.har"
        mock_record.return_value = RecordingResult(
            har_path=har_path,
            navigated=True,
            close_reason=CloseReason.EVENT,
        )

        result = run_recording_phase("https://example.com", har_path, "firefox")

        assert result.phase == "recorded"
        assert result.recording_success is True
        assert result.har_path == har_path
        assert result.recording is not None
        assert result.recording.navigated is True
        assert result.recording.close_reason is CloseReason.EVENT
        mock_record.assert_called_once_with("https://example.com", har_path, BROWSER_CONFIGS["firefox"], None)

    @patch("har_recorder.capture.browser.record_har")
    def test_failed_recording(self, mock_record: MagicMock, tmp_path: Path) -> None:
        """Test a failed recording stays in the recording phase."""
        mock_record.return_value = RecordingResult(har_path=tmp_path / "x.har", success=False, error="crashed")

        result = run_recording_phase("https://example.com", tmp_path / "x.har")

        assert result.phase == "recording"
        assert result.recording_success is False
        assert result.recording_error == "crashed"

    @patch("har_recorder.capture.browser.record_har")
    def test_uses_checked_browser(self, mock_record: MagicMock, tmp_path: Path) -> None:
        """Test the browser from the check phase is used when none is given."""
        har_path = tmp_path / "a.har"
        mock_record.return_value = RecordingResult(har_path=har_path)
        options = RecordingOptions(headless=True)
        existing = RecordingWorkflowResult(browser=BrowserCheckResult(config=BROWSER_CONFIGS["edge"]))

        result = run_recording_phase("https://example.com", har_path, options=options, result=existing)

        assert result is existing
        mock_record.assert_called_once_with("https://example.com", har_path, BROWSER_CONFIGS["edge"], options)


# =============================================================================
# Test run_stats_phase
# =============================================================================


class TestRunStatsPhase:
    """Tests for run_stats_phase function."""

    def test_metrics_computed(self, temp_har_file, sample_har_entry) -> None:
        """Test metrics and file size are recorded."""
        har_file = temp_har_file([sample_har_entry(), sample_har_entry(status=404)])

        result = run_stats_phase(har_file)

        assert result.phase == "complete"
        assert result.stats is not None
        assert result.stats.file_size == har_file.stat().st_size
        assert result.metrics is not None
        assert result.metrics.total_requests == 2
        assert result.metrics.failed_count == 1

    def test_uses_recorded_path(self, temp_har_file) -> None:
        """Test the recorded HAR is analysed when no path is given."""
        har_file = temp_har_file([])
        existing = RecordingWorkflowResult(recording=RecordingPhaseResult(success=True, har_path=har_file))

        result = run_stats_phase(result=existing)

        assert result.metrics is not None
        assert result.metrics.total_requests == 0

    def test_malformed_har(self, tmp_path: Path) -> None:
        """Test a malformed HAR is reported, not raised."""
        har_file = tmp_path / "bad.har"
        har_file.write_text("not json", encoding="utf-8")

        result = run_stats_phase(har_file)

        assert result.phase == "stats"
        assert result.metrics is None
        assert "Malformed HAR" in (result.stats_error or "")
        assert result.stats is not None
        assert result.stats.file_size == 8

    def test_missing_har(self, tmp_path: Path) -> None:
        """Test a missing HAR is reported as not saved."""
        result = run_stats_phase(tmp_path / "missing.har")

        assert result.metrics is None
        assert "was not saved" in (result.stats_error or "")

    def test_directory_rejected(self, tmp_path: Path) -> None:
        """Test a directory is reported instead of being opened."""
        result = run_stats_phase(tmp_path)

        assert result.metrics is None
        assert "was not saved" in (result.stats_error or "")

    @patch("har_recorder.stats.load_har_metrics", side_effect=PermissionError(13, "Permission denied"))
    def test_unreadable_har(self, mock_load: MagicMock, temp_har_file) -> None:
        """Test read errors are reported, not raised."""
        result = run_stats_phase(temp_har_file([]))

        assert result.metrics is None
        assert "Could not read HAR file" in (result.stats_error or "")
        assert "Permission denied" in (result.stats_error or "")


# =============================================================================
# Test run_recording_workflow
# =============================================================================


class TestRunRecordingWorkflow:
    """Tests for run_recording_workflow function."""

    @patch("har_recorder.capture.deps.check_browser_installed", return_value=False)
    def test_stops_when_browser_missing(self, mock_check: MagicMock, tmp_path: Path) -> None:
        """Test the workflow stops before recording when install is needed."""
        result = run_recording_workflow("https://example.com", tmp_path / "a.har", "edge")

        assert result.phase == "browser_check"
        assert result.needs_browser_install is True
        assert result.recording is None

    @patch("har_recorder.capture.browser.record_har")
    @patch("har_recorder.capture.deps.check_browser_installed", return_value=True)
    def test_full_workflow(self, mock_check: MagicMock, mock_record: MagicMock, tmp_path: Path) -> None:
        """Test all phases run through to statistics."""
        har_path = tmp_path / "a.har"

        def _record(url, path, config, options):
            path.write_text(json.dumps({"log": {"entries": []}}), encoding="utf-8")
            return RecordingResult(har_path=path, close_reason=CloseReason.EVENT)

        mock_record.side_effect = _record

        result = run_recording_workflow("https://example.com", har_path)

        assert result.phase == "complete"
        assert result.metrics is not None
        assert result.metrics.total_requests == 0

    @patch("har_recorder.capture.browser.record_har")
    @patch("har_recorder.capture.deps.check_browser_installed")
    def test_skip_browser_check(self, mock_check: MagicMock, mock_record: MagicMock, tmp_path: Path) -> None:
        """Test the browser check can be skipped."""
        mock_record.return_value = RecordingResult(har_path=tmp_path / "a.har", success=False, error="boom")

        result = run_recording_workflow("https://example.com", tmp_path / "a.har", "webkit", skip_browser_check=True)

        mock_check.assert_not_called()
        assert result.recording_error == "boom"
        assert result.stats is None
        assert mock_record.call_args[0][2] == BROWSER_CONFIGS["webkit"]
