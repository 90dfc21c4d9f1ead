"""Interactive HAR recording and statistics.

This library provides tools for:
- Recording browser traffic as HAR files using Playwright
- Summarising HAR files: request counts, status codes, resource types,
  timing phases, slowest/largest requests and busiest domains

Core statistics have ZERO dependencies (only stdlib).
Optional features require: playwright (capture), typer (cli).

Example usage:
    from har_recorder import load_har_metrics

    metrics = load_har_metrics("hars/recording.har")
    print(metrics.total_requests, f"{metrics.success_rate:.2f}%")
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export public API for convenience
from har_recorder.stats import (
    MalformedHarError,
    Metrics,
    compute_har_metrics,
    compute_metrics,
    load_har_metrics,
)

__all__ = [
    "__version__",
    "MalformedHarError",
    "Metrics",
    "compute_har_metrics",
    "compute_metrics",
    "load_har_metrics",
]
