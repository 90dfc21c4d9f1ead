"""HAR statistics: loading, classification and metrics aggregation.

This package has ZERO external dependencies (stdlib only).

Exports:
    - compute_metrics: Aggregate a sequence of HAR entries
    - compute_har_metrics: Validate and aggregate an in-memory HAR document
    - load_har_metrics: Load a HAR file and aggregate it
    - Metrics: Aggregation result
    - MalformedHarError: Raised for unparseable or structurally invalid HARs
"""

from __future__ import annotations

from har_recorder.stats.classify import RESOURCE_TYPES, resource_type
from har_recorder.stats.loader import (
    DEFAULT_LARGE_HAR_SIZE,
    MalformedHarError,
    load_har,
    validate_har_document,
)
from har_recorder.stats.metrics import (
    TIMING_PHASES,
    TOP_N,
    URL_DISPLAY_LENGTH,
    DomainStats,
    Metrics,
    RequestRecord,
    ResourceTypeStats,
    TimingBreakdown,
    compute_har_metrics,
    compute_metrics,
    load_har_metrics,
    percentage,
)

__all__ = [
    # Aggregation
    "compute_metrics",
    "compute_har_metrics",
    "load_har_metrics",
    "percentage",
    "Metrics",
    "RequestRecord",
    "ResourceTypeStats",
    "DomainStats",
    "TimingBreakdown",
    "TIMING_PHASES",
    "TOP_N",
    "URL_DISPLAY_LENGTH",
    # Classification
    "resource_type",
    "RESOURCE_TYPES",
    # Loading
    "load_har",
    "validate_har_document",
    "DEFAULT_LARGE_HAR_SIZE",
    "MalformedHarError",
]
