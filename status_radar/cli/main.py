"""CLI commands for the status radar."""

import asyncio
import json
import logging
import sys
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import click
import httpx
import structlog

from status_radar import __version__
from status_radar.aggregator import (
    AggregateSummary,
    SortKey,
    StatusFilter,
    build_issue_feed,
    classify_latency,
    select_services,
)
from status_radar.fetch import FetchMetrics, RelayFetcher, build_relays
from status_radar.monitor import (
    BatchResult,
    CheckOrchestrator,
    MonitorMetrics,
    RefreshLoop,
)
from status_radar.observability.logging import configure_logging
from status_radar.registry import (
    RegistryConfig,
    RegistryLoader,
    RegistryValidationError,
    ServiceDescriptor,
    format_validation_error,
)
from status_radar.settings import AppSettings, get_settings
from status_radar.status import CheckResult, HistorySample


logger = structlog.get_logger()

COMPONENT_CLI = "cli"
OUTPUT_FORMATS = ("table", "json")


class ConsoleHooks:
    """Presentation hooks that echo each committed result as one line."""

    def __init__(self, descriptors: Sequence[ServiceDescriptor]) -> None:
        self._names = {d.id: d.name for d in descriptors}

    def on_result_updated(
        self,
        service_id: str,
        result: CheckResult,
        history: tuple[HistorySample, ...],
    ) -> None:
        sparkline = "".join(_HISTORY_GLYPHS[s.status.value] for s in history)
        click.echo(
            f"{result.observed_at:%H:%M:%S} {self._names.get(service_id, service_id):<16} "
            f"{result.status.value:<12} {_format_latency(result.latency_ms):>8} "
            f"{sparkline:<12} {'(simulated)' if result.is_simulated else ''}"
        )

    def on_batch_summary_updated(self, summary: AggregateSummary) -> None:  # noqa: ARG002
        return None


_HISTORY_GLYPHS = {"operational": "+", "degraded": "~", "down": "x"}


def _format_latency(latency_ms: int | None) -> str:
    return f"{latency_ms}ms" if latency_ms is not None else "-"


def _setup_logging(json_logs: bool, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    configure_logging(level=level, json_format=json_logs)


def _load_registry(
    registry_path: Path | None, loader: RegistryLoader | None = None
) -> RegistryConfig:
    """Load the registry, exiting with a readable report on failure."""
    loader = loader or RegistryLoader()
    try:
        if registry_path is None:
            return loader.load_default()
        return loader.load(registry_path)
    except RegistryValidationError as e:
        logger.bind(component=COMPONENT_CLI).error(
            "registry_invalid", file_path=e.file_path, error_count=len(e.errors)
        )
        click.echo("Registry validation failed:", err=True)
        for error in loader.validation_errors:
            formatted = format_validation_error(
                location=error["loc"],
                message=error["msg"],
                error_type=error.get("type", "unknown"),
                include_hint=True,
            )
            click.echo(f"  - {formatted}", err=True)
        sys.exit(1)
    except FileNotFoundError as e:
        missing = e.filename or registry_path
        logger.bind(component=COMPONENT_CLI).error(
            "registry_not_found", file_path=str(missing)
        )
        click.echo(f"Error: Registry file not found: {missing}", err=True)
        sys.exit(1)


@asynccontextmanager
async def _orchestrator(
    registry: RegistryConfig,
    settings: AppSettings,
    hooks: ConsoleHooks | None = None,
) -> AsyncIterator[CheckOrchestrator]:
    """Build an orchestrator sharing one async client for its lifetime."""
    fetch_config = settings.fetch_config()
    async with httpx.AsyncClient(
        timeout=fetch_config.relay_timeout_seconds,
        follow_redirects=fetch_config.follow_redirects,
    ) as client:
        yield CheckOrchestrator(
            fetcher=RelayFetcher(fetch_config, client),
            relays=build_relays(registry.relays),
            hooks=hooks,
            discard_stale_results=settings.discard_stale_results,
        )


def _result_row(descriptor: ServiceDescriptor, result: CheckResult | None) -> dict[str, Any]:
    if result is None:
        return {"id": descriptor.id, "name": descriptor.name, "status": "checking"}
    return {
        "id": descriptor.id,
        "name": descriptor.name,
        "category": descriptor.category,
        "status": result.status.value,
        "latency_ms": result.latency_ms,
        "latency_class": classify_latency(result.latency_ms).value,
        "message": result.message,
        "observed_at": result.observed_at.isoformat(),
        "is_simulated": result.is_simulated,
    }


def _echo_table(rows: list[dict[str, Any]], summary: AggregateSummary) -> None:
    click.echo(f"{'SERVICE':<16} {'STATUS':<12} {'LATENCY':>8}  {'SOURCE':<10} MESSAGE")
    for row in rows:
        source = "simulated" if row.get("is_simulated") else "live"
        if row["status"] == "checking":
            source = "-"
        click.echo(
            f"{row['name']:<16} {row['status']:<12} "
            f"{_format_latency(row.get('latency_ms')):>8}  {source:<10} "
            f"{row.get('message', '')}"
        )
    click.echo("")
    click.echo(_summary_line(summary))


def _summary_line(summary: AggregateSummary) -> str:
    total = summary.total_services if summary.total_services is not None else "?"
    return (
        f"{summary.operational_count} operational, "
        f"{summary.degraded_count} degraded, {summary.down_count} down; "
        f"avg {_format_latency(summary.average_latency_ms)}; "
        f"{summary.checked_count} of {total} checked"
    )


def _emit_report(  # noqa: PLR0913
    descriptors: Sequence[ServiceDescriptor],
    results: Mapping[str, CheckResult],
    summary: AggregateSummary,
    output_format: str,
    status_filter: StatusFilter,
    query: str,
    sort: SortKey,
) -> None:
    selected = select_services(descriptors, results, status_filter, query, sort)
    rows = [_result_row(d, results.get(d.id)) for d in selected]

    if output_format == "json":
        feed = build_issue_feed(descriptors, results)
        click.echo(
            json.dumps(
                {
                    "summary": summary.model_dump(),
                    "services": rows,
                    "feed": [item.model_dump(mode="json") for item in feed],
                },
                indent=2,
            )
        )
        return

    _echo_table(rows, summary)
    for item in build_issue_feed(descriptors, results):
        click.echo(f"  * {item.text}")


def _emit_metrics() -> None:
    click.echo(
        json.dumps(
            {
                "fetch": FetchMetrics.get_instance().to_dict(),
                "monitor": MonitorMetrics.get_instance().to_dict(),
            },
            indent=2,
        ),
        err=True,
    )


registry_option = click.option(
    "--registry",
    "registry_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to services.yaml (default: STATUS_RADAR_REGISTRY_PATH or bundled).",
)
json_logs_option = click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: STATUS_RADAR_JSON_LOGS).",
)
verbose_option = click.option(
    "--verbose", "-v", is_flag=True, help="Enable verbose logging."
)
timeout_option = click.option(
    "--timeout-ms",
    type=click.IntRange(min=1),
    default=None,
    help="Per relay attempt timeout in milliseconds.",
)


def _resolve_settings(
    registry_path: Path | None,
    timeout_ms: int | None,
    json_logs: bool | None,
    verbose: bool,
) -> tuple[AppSettings, RegistryConfig]:
    settings = get_settings()
    overrides: dict[str, Any] = {}
    if timeout_ms is not None:
        overrides["relay_timeout_ms"] = timeout_ms
    if json_logs is not None:
        overrides["json_logs"] = json_logs
    if overrides:
        settings = settings.model_copy(update=overrides)

    _setup_logging(settings.json_logs, verbose)
    registry = _load_registry(registry_path or settings.registry_path)
    return settings, registry


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Status radar: poll third-party status pages and classify their health."""


@cli.command()
@registry_option
@timeout_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="table",
    help="Output format (default: table).",
)
@click.option(
    "--status",
    "status_filter",
    type=click.Choice([f.value for f in StatusFilter]),
    default=StatusFilter.ALL.value,
    help="Only show services in this status.",
)
@click.option("--search", "query", default="", help="Filter by name or category.")
@click.option(
    "--sort",
    type=click.Choice([s.value for s in SortKey]),
    default=SortKey.DEFAULT.value,
    help="Sort order (default: registry order).",
)
@click.option("--metrics", "show_metrics", is_flag=True, help="Print metrics to stderr.")
@json_logs_option
@verbose_option
def check(  # noqa: PLR0913
    registry_path: Path | None,
    timeout_ms: int | None,
    output_format: str,
    status_filter: str,
    query: str,
    sort: str,
    show_metrics: bool,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Check every registered service once and print the results."""
    settings, registry = _resolve_settings(registry_path, timeout_ms, json_logs, verbose)
    descriptors = registry.descriptors()

    async def _run() -> BatchResult:
        async with _orchestrator(registry, settings) as orchestrator:
            return await orchestrator.refresh_all(descriptors)

    batch = asyncio.run(_run())
    _emit_report(
        descriptors,
        batch.results,
        batch.summary,
        output_format,
        StatusFilter(status_filter),
        query,
        SortKey(sort),
    )
    if show_metrics:
        _emit_metrics()


@cli.command()
@registry_option
@timeout_option
@click.option(
    "--interval",
    "interval_seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between refresh cycles (default: STATUS_RADAR_REFRESH_INTERVAL_SECONDS).",
)
@click.option(
    "--cycles",
    "max_cycles",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many cycles (default: run until interrupted).",
)
@json_logs_option
@verbose_option
def watch(  # noqa: PLR0913
    registry_path: Path | None,
    timeout_ms: int | None,
    interval_seconds: float | None,
    max_cycles: int | None,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Refresh continuously, printing each result as it arrives."""
    settings, registry = _resolve_settings(registry_path, timeout_ms, json_logs, verbose)
    descriptors = registry.descriptors()
    interval = interval_seconds or settings.refresh_interval_seconds

    def _on_cycle(batch: BatchResult) -> None:
        click.echo(f"-- cycle {batch.cycle_id}: {_summary_line(batch.summary)}")

    async def _run() -> None:
        hooks = ConsoleHooks(descriptors)
        async with _orchestrator(registry, settings, hooks) as orchestrator:
            loop = RefreshLoop(
                orchestrator, descriptors, interval, on_cycle_complete=_on_cycle
            )
            await loop.run(max_cycles=max_cycles)

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.bind(component=COMPONENT_CLI).info("watch_interrupted")
        click.echo("Stopped.")


@cli.command()
@click.argument("service_id")
@registry_option
@timeout_option
@json_logs_option
@verbose_option
def ping(
    service_id: str,
    registry_path: Path | None,
    timeout_ms: int | None,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Check a single service by id."""
    settings, registry = _resolve_settings(registry_path, timeout_ms, json_logs, verbose)
    descriptors = {d.id: d for d in registry.descriptors()}
    descriptor = descriptors.get(service_id)
    if descriptor is None:
        click.echo(f"Error: Unknown service '{service_id}'", err=True)
        sys.exit(1)

    async def _run() -> CheckResult:
        async with _orchestrator(registry, settings) as orchestrator:
            return await orchestrator.check_service(descriptor)

    result = asyncio.run(_run())
    click.echo(json.dumps(_result_row(descriptor, result), indent=2))


@cli.command()
@registry_option
def services(registry_path: Path | None) -> None:
    """List the registered services."""
    _setup_logging(json_logs=False, verbose=False)
    registry = _load_registry(registry_path or get_settings().registry_path)
    for d in registry.descriptors():
        profile = d.effective_mock_profile
        click.echo(
            f"{d.id:<12} {d.name:<16} {d.category:<14} "
            f"base={profile.base_latency_ms:g}ms up={profile.up_probability:g}"
        )


@cli.command()
@click.option(
    "--registry",
    "registry_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to services.yaml.",
)
def validate(registry_path: Path) -> None:
    """Validate a registry file without checking any service."""
    _setup_logging(json_logs=False, verbose=False)
    loader = RegistryLoader()
    registry = _load_registry(registry_path, loader)
    click.echo("Registry is valid!")
    click.echo(f"  Services: {len(registry.services)}")
    click.echo(f"  Relays: {', '.join(r.name for r in registry.relays)}")
    click.echo(f"  Mock profiles: {len(registry.mock_profiles)}")
    click.echo(f"  Checksum: {loader.checksum}")


if __name__ == "__main__":
    cli()
