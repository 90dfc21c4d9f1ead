"""Stats command for har-recorder CLI - summarises a HAR file."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer

if TYPE_CHECKING:
    from har_recorder.capture.workflow import StatsResult
    from har_recorder.stats import Metrics

SEPARATOR = "=" * 60


def stats(
    har_file: Annotated[
        Path,
        typer.Argument(help="HAR file to analyse (.har or .har.gz)"),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print metrics as JSON"),
    ] = False,
) -> None:
    """Show network statistics for a HAR file.

    Prints request counts, success rate, timing phases, data volume,
    resource-type and status-code distributions, the slowest and largest
    requests, and the busiest domains.

    Args:
        har_file: HAR file to analyse
        as_json: Print metrics as JSON instead of text

    Example:
        har-recorder stats hars/recording.har
        har-recorder stats capture.har.gz --json
    """
    from har_recorder.capture.workflow import run_stats_phase

    if not har_file.exists():
        typer.echo(f"Error: File not found: {har_file}", err=True)
        raise typer.Exit(1)
    if not har_file.is_file():
        typer.echo(f"Error: Not a file: {har_file}", err=True)
        raise typer.Exit(1)

    result = run_stats_phase(har_file)

    if as_json:
        if result.metrics is None:
            typer.echo(f"Error: {result.stats_error}", err=True)
            raise typer.Exit(1)
        typer.echo(json.dumps(metrics_to_dict(result.metrics), indent=2))
        return

    if result.stats is not None:
        display_stats(har_file, result.stats, title="HAR STATISTICS")
    if result.metrics is None:
        raise typer.Exit(1)


def metrics_to_dict(metrics: Metrics) -> dict[str, Any]:
    """Convert metrics to JSON-ready data, including derived rates."""
    data: dict[str, Any] = {
        field.name: getattr(metrics, field.name)
        for field in dataclasses.fields(metrics)
        if field.name not in ("resource_types", "status_codes", "domain_stats")
    }
    data["timings"] = dataclasses.asdict(metrics.timings)
    data["slowest_requests"] = [dataclasses.asdict(r) for r in metrics.slowest_requests]
    data["largest_resources"] = [dataclasses.asdict(r) for r in metrics.largest_resources]
    data["resource_types"] = {name: dataclasses.asdict(b) for name, b in metrics.resource_types.items()}
    data["status_codes"] = {str(code): count for code, count in metrics.status_codes.items()}
    data["domain_stats"] = {name: dataclasses.asdict(b) for name, b in metrics.domain_stats.items()}
    data["success_rate"] = metrics.success_rate
    data["average_time"] = metrics.average_time
    data["average_size"] = metrics.average_size
    return data


def display_stats(har_path: Path, stats_result: StatsResult, title: str = "RECORDING COMPLETE") -> None:
    """Display file info and metrics, or a warning if the HAR is unusable."""
    typer.echo()
    typer.echo(SEPARATOR)
    typer.echo(title)
    typer.echo(SEPARATOR)
    typer.echo()
    typer.echo("File:")
    typer.echo(f"  Location:   {har_path}")
    typer.echo(f"  Size:       {stats_result.file_size / 1024:.2f} KB")
    typer.echo()

    if stats_result.metrics is None:
        typer.echo(f"Warning: could not read HAR statistics: {stats_result.error}", err=True)
        typer.echo()
        return

    display_metrics(stats_result.metrics)


def display_metrics(metrics: Metrics) -> None:
    """Display all metric sections."""
    from har_recorder.stats import percentage

    total = metrics.total_requests

    typer.echo("Network:")
    typer.echo(f"  Total requests:     {total}")
    typer.echo(f"  Successful:         {metrics.success_count}")
    if metrics.failed_count > 0:
        typer.echo(f"  Failed:             {metrics.failed_count}")
    typer.echo(f"  Success rate:       {metrics.success_rate:.2f}%")
    typer.echo()

    typer.echo("Timing:")
    typer.echo(f"  Total load time:    {metrics.total_time / 1000:.2f} s")
    typer.echo(f"  Avg response time:  {metrics.average_time / 1000:.3f} s")
    typer.echo(f"  Waiting (TTFB):     {metrics.timings.wait / 1000:.2f} s")
    typer.echo(f"  Receiving:          {metrics.timings.receive / 1000:.2f} s")
    typer.echo()

    typer.echo("Data transfer:")
    typer.echo(f"  Total size:         {metrics.total_size / 1024 / 1024:.2f} MB")
    typer.echo(f"  Avg request size:   {metrics.average_size / 1024:.2f} KB")
    typer.echo()

    typer.echo("Resource types:")
    for name, bucket in metrics.resource_types.items():
        share = percentage(bucket.count, total)
        typer.echo(f"  {name.upper():<8} {bucket.count} ({share:.1f}%) - {bucket.size / 1024:.2f} KB")
    typer.echo()

    typer.echo("Status codes:")
    for code, count in sorted(metrics.status_codes.items()):
        typer.echo(f"  {code}: {count} ({percentage(count, total):.1f}%)")
    typer.echo()

    typer.echo("Slowest requests:")
    for index, record in enumerate(metrics.slowest_requests, start=1):
        typer.echo(f"  {index}. {record.url} ({record.time / 1000:.3f}s)")
    typer.echo()

    typer.echo("Largest resources:")
    for index, record in enumerate(metrics.largest_resources, start=1):
        typer.echo(f"  {index}. {record.url} ({record.size / 1024:.2f} KB)")
    typer.echo()

    top_domains = metrics.top_domains()
    if top_domains:
        typer.echo("Top domains:")
        for domain, bucket in top_domains:
            typer.echo(f"  {domain}: {bucket.count} requests - {bucket.time / 1000:.2f}s")
        typer.echo()


def display_next_steps() -> None:
    """Display what the HAR file can be used for."""
    typer.echo("Next steps:")
    typer.echo("  • Import the HAR into JMeter or k6 for load testing")
    typer.echo("  • Replay it offline with Playwright's route_from_har")
    typer.echo("  • Compare network performance across recordings")
    typer.echo()
    typer.echo(SEPARATOR)
