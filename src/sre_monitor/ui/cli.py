"""CLI interface for the system monitor.

This module provides a Typer-based command-line interface for running
monitoring cycles, the adaptive watch loop, and standalone latency probes.
"""

import asyncio
import json

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from sre_monitor.config.settings import AppConfig, get_settings
from sre_monitor.pipeline.classifier import classify_latency
from sre_monitor.pipeline.scheduler import MonitorScheduler
from sre_monitor.pipeline.types import CycleResult, MetricStatus
from sre_monitor.pipeline.workflow import MonitoringPipeline
from sre_monitor.sensors.latency import LatencyProbeConfig, LatencySampler

app = typer.Typer(help="SRE system monitor - host health checks with adaptive scheduling")
console = Console()

_STATUS_STYLES = {
    MetricStatus.OK: "green",
    MetricStatus.WARN: "yellow",
    MetricStatus.CRIT: "bold red",
    MetricStatus.UNKNOWN: "dim",
}


def _styled(status: MetricStatus) -> str:
    style = _STATUS_STYLES[status]
    return f"[{style}]{status.value}[/{style}]"


def _load_settings() -> AppConfig:
    """Load settings or exit with code 2 on invalid configuration."""
    try:
        return get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        raise typer.Exit(code=2) from None


def _render_cycle(result: CycleResult) -> None:
    """Print a cycle result as rich tables."""
    snapshot = result.snapshot
    analysis = result.analysis

    table = Table(title=f"System health @ {snapshot.timestamp.isoformat(timespec='seconds')}")
    table.add_column("Metric", style="cyan")
    table.add_column("Status")
    table.add_column("Value", justify="right")
    for domain, report in snapshot.reports.items():
        value = "-" if report.value is None else f"{report.value:.2f}"
        table.add_row(domain.component, _styled(report.status), value)
    console.print(table)

    console.print(f"Overall: {_styled(analysis.overall_status)} ({result.outcome.value})")
    if result.result.degraded:
        console.print(f"[red]Analysis degraded:[/red] {result.result.error}")

    for issue in analysis.critical_issues:
        console.print(
            f"[bold red]{issue.severity.value if issue.severity else ''}[/bold red] "
            f"{issue.component}: {issue.description}\n  → {issue.recommendation}"
        )
    for warning in analysis.warnings:
        console.print(
            f"[yellow]WARN[/yellow] {warning.component}: {warning.description}\n"
            f"  → {warning.recommendation}"
        )
    for rec in analysis.recommendations:
        console.print(f"• {rec}")

    if result.notification is not None:
        sent = "sent" if result.notification.sent else "[red]failed[/red]"
        console.print(f"[dim]Notification #{result.notification.channel}: {sent}[/dim]")
    console.print(f"[dim]Next check-in: {analysis.next_check_in.isoformat()}[/dim]")


@app.command(name="run")
def run_command(
    as_json: bool = typer.Option(False, "--json", help="Print the cycle result as JSON"),
    notify: bool = typer.Option(True, "--notify/--no-notify", help="Dispatch notifications"),
) -> None:
    """Run one monitoring cycle now.

    Examples:
        sre-monitor run
        sre-monitor run --json --no-notify
    """
    config = _load_settings()
    pipeline = MonitoringPipeline(
        config=config, notifications_enabled=notify and config.notifications_enabled
    )
    scheduler = MonitorScheduler.from_settings(config, pipeline)
    result = asyncio.run(scheduler.run_once())

    if as_json:
        console.print_json(result.model_dump_json())
    else:
        _render_cycle(result)


@app.command(name="watch")
def watch_command(
    notify: bool = typer.Option(True, "--notify/--no-notify", help="Dispatch notifications"),
) -> None:
    """Run cycles continuously, re-checking sooner when the system is unhealthy.

    Stop with Ctrl-C; an in-flight cycle is allowed to finish.
    """
    config = _load_settings()
    pipeline = MonitoringPipeline(
        config=config, notifications_enabled=notify and config.notifications_enabled
    )
    asyncio.run(_watch(config, pipeline))


async def _watch(config: AppConfig, pipeline: MonitoringPipeline) -> None:
    scheduler = MonitorScheduler.from_settings(config, pipeline, on_cycle=_render_cycle)
    await scheduler.start()
    try:
        while scheduler.running:
            await asyncio.sleep(1.0)
    except asyncio.CancelledError:
        pass
    finally:
        console.print("[dim]Stopping monitor...[/dim]")
        await scheduler.stop()


@app.command(name="latency")
def latency_command(
    url: str = typer.Argument(..., help="URL to probe with HEAD requests"),
    attempts: int = typer.Option(5, "--attempts", "-n", help="Number of attempts (1-20)"),
    timeout_ms: int = typer.Option(10000, "--timeout-ms", help="Per-attempt timeout (100-60000)"),
    pause_ms: int = typer.Option(100, "--pause-ms", help="Pause between attempts"),
) -> None:
    """Probe a URL's latency and classify it with the configured thresholds."""
    config = _load_settings()
    try:
        probe = LatencyProbeConfig(
            url=url, attempts=attempts, timeout_ms=timeout_ms, pause_ms=pause_ms
        )
    except ValidationError as e:
        console.print(f"[red]Invalid probe configuration:[/red]\n{e}")
        raise typer.Exit(code=2) from None

    sample = asyncio.run(LatencySampler().sample(probe))
    report = classify_latency(sample, config.threshold_config().latency)

    console.print(f"{report.details.get('url', url)}: {_styled(report.status)}")
    console.print(json.dumps(report.details, indent=2))


@app.command(name="config")
def config_command() -> None:
    """Show the effective configuration."""
    config = _load_settings()
    table = Table(title="Effective configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.model_dump(mode="json").items():
        if key == "slack_webhook_url" and value:
            value = "***"
        table.add_row(key, str(value))
    console.print(table)


if __name__ == "__main__":
    app()
