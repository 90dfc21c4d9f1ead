"""HAR metrics aggregation.

Computes summary statistics for a captured HAR in a single forward pass:
request totals, success/failure counts, resource-type and status-code
breakdowns, timing-phase sums, per-domain counters, and the five slowest
and largest requests.

Entries are read leniently: missing, null, non-numeric or negative numbers
(HAR uses -1 for "does not apply") count as 0.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any
from urllib.parse import urlsplit

from har_recorder.stats.classify import resource_type
from har_recorder.stats.loader import MalformedHarError, load_har, validate_har_document

_LOGGER = logging.getLogger(__name__)

# Size of the slowest/largest rankings
TOP_N = 5

# Retained request URLs are cut to this many characters
URL_DISPLAY_LENGTH = 60

TIMING_PHASES: tuple[str, ...] = ("blocked", "dns", "connect", "send", "wait", "receive")


def percentage(part: float, whole: float) -> float:
    """Return part as a percentage of whole, or 0.0 when whole is zero."""
    if not whole:
        return 0.0
    return part / whole * 100


@dataclass(frozen=True)
class RequestRecord:
    """A request retained in a top-N ranking.

    Attributes:
        url: Request URL, truncated to URL_DISPLAY_LENGTH characters
        time: Total elapsed time in milliseconds
        size: Response content size in bytes
        status: HTTP status code
    """

    url: str
    time: float
    size: float
    status: int


@dataclass(frozen=True)
class ResourceTypeStats:
    """Request count and cumulative size for one resource type."""

    count: int = 0
    size: float = 0


@dataclass(frozen=True)
class DomainStats:
    """Request count, cumulative size and cumulative time for one hostname."""

    count: int = 0
    size: float = 0
    time: float = 0


@dataclass(frozen=True)
class TimingBreakdown:
    """Summed HAR timing phases in milliseconds."""

    blocked: float = 0
    dns: float = 0
    connect: float = 0
    send: float = 0
    wait: float = 0
    receive: float = 0


@dataclass(frozen=True)
class Metrics:
    """Summary statistics for a HAR capture.

    Attributes:
        total_requests: Number of entries
        total_size: Sum of response content sizes in bytes
        total_time: Sum of entry times in milliseconds
        success_count: Entries with 2xx status
        failed_count: Entries with status >= 400
        resource_types: Per resource type counts and sizes
        status_codes: Entry count per exact status code
        timings: Summed timing phases
        slowest_requests: Up to TOP_N records, slowest first
        largest_resources: Up to TOP_N records, largest first
        domain_stats: Per hostname counts, sizes and times
    """

    total_requests: int = 0
    total_size: float = 0
    total_time: float = 0
    success_count: int = 0
    failed_count: int = 0
    resource_types: Mapping[str, ResourceTypeStats] = field(default_factory=dict)
    status_codes: Mapping[int, int] = field(default_factory=dict)
    timings: TimingBreakdown = field(default_factory=TimingBreakdown)
    slowest_requests: tuple[RequestRecord, ...] = ()
    largest_resources: tuple[RequestRecord, ...] = ()
    domain_stats: Mapping[str, DomainStats] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only views over private copies
        for name in ("resource_types", "status_codes", "domain_stats"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def success_rate(self) -> float:
        """Percentage of 2xx responses (0.0 for an empty capture)."""
        return percentage(self.success_count, self.total_requests)

    @property
    def average_time(self) -> float:
        """Mean entry time in milliseconds (0.0 for an empty capture)."""
        if not self.total_requests:
            return 0.0
        return self.total_time / self.total_requests

    @property
    def average_size(self) -> float:
        """Mean response size in bytes (0.0 for an empty capture)."""
        if not self.total_requests:
            return 0.0
        return self.total_size / self.total_requests

    def top_domains(self, limit: int = TOP_N) -> list[tuple[str, DomainStats]]:
        """Return the busiest hostnames by request count, first-seen on ties."""
        ranked = sorted(self.domain_stats.items(), key=lambda item: item[1].count, reverse=True)
        return ranked[:limit]


class _BoundedTopK:
    """Bounded min-heap keeping the records with the highest keys.

    Heap items are ``(key, -sequence, record)`` so that, among equal keys,
    the most recently seen record is evicted first.
    """

    def __init__(self, capacity: int = TOP_N) -> None:
        self.capacity = capacity
        self._heap: list[tuple[float, int, RequestRecord]] = []

    def offer(self, key: float, sequence: int, record: RequestRecord) -> None:
        if self.capacity <= 0:
            return
        item = (key, -sequence, record)
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, item)
        elif key > self._heap[0][0]:
            heapq.heapreplace(self._heap, item)

    def ranked(self) -> tuple[RequestRecord, ...]:
        """Records sorted by key descending, then by first-seen order."""
        ordered = sorted(self._heap, key=lambda item: (-item[0], -item[1]))
        return tuple(record for _, _, record in ordered)


def _as_number(value: Any) -> float:
    """Read a HAR numeric field, mapping absent/invalid/negative values to 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value if value > 0 else 0


def _as_status(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _as_mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _hostname(url: str) -> str | None:
    """Extract the hostname of an absolute URL, or None if there is none."""
    try:
        return urlsplit(url).hostname or None
    except ValueError:
        return None


def compute_metrics(entries: Iterable[Any]) -> Metrics:
    """Aggregate HAR entries into a Metrics summary.

    Args:
        entries: The ``log.entries`` sequence of a HAR document

    Returns:
        Metrics for the entries

    Raises:
        MalformedHarError: If an entry is not a JSON object

    Example:
        >>> metrics = compute_metrics([
        ...     {"request": {"url": "https://example.com/"},
        ...      "response": {"status": 200, "content": {"size": 512, "mimeType": "text/html"}},
        ...      "time": 42},
        ... ])
        >>> metrics.total_requests, metrics.success_count
        (1, 1)
    """
    total_requests = 0
    total_size: float = 0
    total_time: float = 0
    success_count = 0
    failed_count = 0
    resource_types: dict[str, ResourceTypeStats] = {}
    status_codes: dict[int, int] = {}
    timing_totals: dict[str, float] = dict.fromkeys(TIMING_PHASES, 0)
    domain_stats: dict[str, DomainStats] = {}
    slowest = _BoundedTopK(TOP_N)
    largest = _BoundedTopK(TOP_N)

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise MalformedHarError("entry must be an object", f"log.entries[{index}]")

        request = _as_mapping(entry.get("request"))
        response = _as_mapping(entry.get("response"))
        content = _as_mapping(response.get("content"))

        elapsed = _as_number(entry.get("time"))
        size = _as_number(content.get("size"))
        status = _as_status(response.get("status"))
        url = request.get("url")
        if not isinstance(url, str):
            url = ""

        total_requests += 1
        total_size += size
        total_time += elapsed

        if 200 <= status < 300:
            success_count += 1
        elif status >= 400:
            failed_count += 1

        kind = resource_type(content.get("mimeType"))
        bucket = resource_types.get(kind, ResourceTypeStats())
        resource_types[kind] = ResourceTypeStats(count=bucket.count + 1, size=bucket.size + size)

        status_codes[status] = status_codes.get(status, 0) + 1

        timings = _as_mapping(entry.get("timings"))
        for phase in TIMING_PHASES:
            timing_totals[phase] += _as_number(timings.get(phase))

        host = _hostname(url)
        if host is not None:
            domain = domain_stats.get(host, DomainStats())
            domain_stats[host] = DomainStats(
                count=domain.count + 1,
                size=domain.size + size,
                time=domain.time + elapsed,
            )
        else:
            _LOGGER.debug("No hostname in %r; skipping domain stats", url[:URL_DISPLAY_LENGTH])

        record = RequestRecord(url=url[:URL_DISPLAY_LENGTH], time=elapsed, size=size, status=status)
        slowest.offer(elapsed, index, record)
        largest.offer(size, index, record)

    return Metrics(
        total_requests=total_requests,
        total_size=total_size,
        total_time=total_time,
        success_count=success_count,
        failed_count=failed_count,
        resource_types=resource_types,
        status_codes=status_codes,
        timings=TimingBreakdown(**timing_totals),
        slowest_requests=slowest.ranked(),
        largest_resources=largest.ranked(),
        domain_stats=domain_stats,
    )


def compute_har_metrics(har_data: Any) -> Metrics:
    """Validate an in-memory HAR document and aggregate its entries.

    Raises:
        MalformedHarError: If the document lacks log.entries
    """
    return compute_metrics(validate_har_document(har_data))


def load_har_metrics(har_path: str | Path) -> Metrics:
    """Load a HAR file from disk and aggregate its entries.

    Args:
        har_path: Path to a closed, complete ``.har`` or ``.har.gz`` file

    Returns:
        Metrics for the file's entries

    Raises:
        MalformedHarError: If the file is not valid JSON or lacks log.entries
        FileNotFoundError: If the file does not exist
    """
    har_data = load_har(har_path)
    return compute_metrics(har_data["log"]["entries"])
