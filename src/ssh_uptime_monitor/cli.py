"""Command-line interface for SSH Uptime Monitor."""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ssh_uptime_monitor import __version__
from ssh_uptime_monitor.config import Config, create_example_config
from ssh_uptime_monitor.models import HealthStatus, ProbeOutcome, TargetState
from ssh_uptime_monitor.monitor import HealthMonitor

console = Console()

DEFAULT_CONFIG_PATHS = ["sshmon.yaml", "sshmon.yml", "~/.config/sshmon/config.yaml"]


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def status_color(status: TargetState) -> str:
    """Get Rich color for a target state."""
    colors = {
        TargetState.ONLINE: "green",
        TargetState.OFFLINE: "red",
        TargetState.ERROR: "yellow",
        TargetState.UNKNOWN: "dim",
    }
    return colors.get(status, "white")


def load_config(config: Optional[str]) -> Config:
    """Load config from an explicit path or the default locations."""
    if config:
        return Config.from_yaml(config)

    for default_path in DEFAULT_CONFIG_PATHS:
        path = Path(default_path).expanduser()
        if path.exists():
            return Config.from_yaml(path)

    console.print("[red]No configuration file found.[/]")
    console.print("Create one with: [cyan]sshmon init[/]")
    sys.exit(1)


def build_monitor(config: Optional[str], log_level: Optional[str] = None) -> HealthMonitor:
    cfg = load_config(config)
    setup_logging(log_level or cfg.log_level)
    return HealthMonitor.from_config(cfg)


def _format_time(value) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S") if value else "-"


def create_status_table(monitor: HealthMonitor, statuses: list[HealthStatus]) -> Table:
    """Create a Rich table displaying target statuses."""
    table = Table(title="Target Status", show_header=True, header_style="bold")

    table.add_column("Target", style="cyan", no_wrap=True)
    table.add_column("Status", justify="center")
    table.add_column("Uptime 24h", justify="right")
    table.add_column("Response", justify="right")
    table.add_column("Failures", justify="right")
    table.add_column("Last Check", justify="center")
    table.add_column("Monitoring", justify="center")
    table.add_column("Error")

    for status in statuses:
        config = monitor.registry.get(status.target_id)
        if config is None:
            monitoring = Text("-", style="dim")
        elif config.enabled:
            monitoring = Text(f"every {config.interval_minutes}m", style="green")
        else:
            monitoring = Text("paused", style="yellow")

        uptime_style = "green" if status.uptime_percentage >= 99 else (
            "yellow" if status.uptime_percentage >= 90 else "red"
        )
        table.add_row(
            status.target_id,
            Text(status.status.value.upper(), style=status_color(status.status)),
            Text(f"{status.uptime_percentage}%", style=uptime_style),
            f"{status.response_time_ms}ms" if status.response_time_ms is not None else "-",
            str(status.consecutive_failures),
            _format_time(status.last_checked_at),
            monitoring,
            Text(status.error_message or "", style="dim"),
        )

    return table


def _known_statuses(monitor: HealthMonitor) -> list[HealthStatus]:
    statuses = []
    for config in monitor.get_configs():
        status = monitor.get_status(config.target_id)
        statuses.append(status or HealthStatus(target_id=config.target_id))
    return statuses


def _print_statuses(monitor: HealthMonitor, statuses: list[HealthStatus], output_json: bool) -> None:
    if output_json:
        click.echo(json.dumps([s.to_dict() for s in statuses], indent=2))
    elif statuses:
        console.print(create_status_table(monitor, statuses))
    else:
        console.print("[dim]No monitored targets. Add one with: [cyan]sshmon monitor TARGET[/][/]")


config_option = click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """SSH Uptime Monitor - reachability tracking for SSH hosts."""
    pass


@main.command()
@config_option
@click.option("--json", "output_json", is_flag=True, help="Output in JSON format")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (defaults to the config file's)",
)
def run(config: Optional[str], output_json: bool, log_level: Optional[str]) -> None:
    """Run one monitoring pass over all enabled targets."""
    monitor = build_monitor(config, log_level)
    statuses = monitor.run_monitoring_pass()
    _print_statuses(monitor, statuses, output_json)

    if any(s.status != TargetState.ONLINE for s in statuses):
        sys.exit(1)


@main.command()
@config_option
@click.option(
    "--interval", "-i",
    default=None,
    type=click.IntRange(min=1),
    help="Minutes between passes (defaults to check_interval)",
)
def watch(config: Optional[str], interval: Optional[int]) -> None:
    """Run monitoring passes until interrupted."""
    cfg = load_config(config)
    setup_logging(cfg.log_level)
    monitor = HealthMonitor.from_config(cfg)
    minutes = interval or cfg.check_interval

    console.print(f"[dim]Monitoring every {minutes} minute(s), Ctrl+C to stop[/]")
    try:
        while True:
            statuses = monitor.run_monitoring_pass()
            if statuses:
                console.print(create_status_table(monitor, statuses))
            time.sleep(minutes * 60)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped monitoring.[/]")


@main.command()
@click.argument("target")
@config_option
@click.option("--json", "output_json", is_flag=True, help="Output JSON")
def check(target: str, config: Optional[str], output_json: bool) -> None:
    """Check a single target right now."""
    monitor = build_monitor(config, "WARNING")

    if not output_json:
        console.print(f"[dim]Checking {target}...[/]")
    status = monitor.check_target(target)
    if status is None:
        console.print(f"[red]Could not resolve target or credentials: {target}[/]")
        sys.exit(1)

    _print_statuses(monitor, [status], output_json)
    if status.status != TargetState.ONLINE:
        sys.exit(1)


@main.command()
@config_option
@click.option("--json", "output_json", is_flag=True, help="Output JSON")
def status(config: Optional[str], output_json: bool) -> None:
    """Show the last known status of every monitored target."""
    monitor = build_monitor(config, "WARNING")
    _print_statuses(monitor, _known_statuses(monitor), output_json)


@main.command()
@click.argument("target")
@config_option
@click.option("-n", "--limit", default=None, type=click.IntRange(min=1), help="Number of records")
@click.option("--json", "output_json", is_flag=True, help="Output JSON")
def history(target: str, config: Optional[str], limit: Optional[int], output_json: bool) -> None:
    """Show recent probe records for a target."""
    monitor = build_monitor(config, "WARNING")
    records = monitor.get_history(target, limit)

    if output_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        console.print(f"[dim]No history for {target}[/]")
        return

    table = Table(title=f"History: {target}", show_header=True, header_style="bold")
    table.add_column("Time", no_wrap=True)
    table.add_column("Outcome", justify="center")
    table.add_column("Response", justify="right")
    table.add_column("Error")
    for record in records:
        ok = record.outcome == ProbeOutcome.SUCCESS
        table.add_row(
            _format_time(record.timestamp),
            Text(record.outcome.value, style="green" if ok else "red"),
            f"{record.response_time_ms}ms" if record.response_time_ms is not None else "-",
            record.error_detail or "",
        )
    console.print(table)


@main.command()
@click.argument("target")
@config_option
@click.option("--interval", "-i", default=15, type=click.IntRange(min=1), help="Check interval in minutes")
@click.option("--notify-failure/--no-notify-failure", default=True, help="Alert when the target goes down")
@click.option("--notify-recovery/--no-notify-recovery", default=True, help="Alert when the target recovers")
def monitor(
    target: str,
    config: Optional[str],
    interval: int,
    notify_failure: bool,
    notify_recovery: bool,
) -> None:
    """Start monitoring a target."""
    cfg = load_config(config)
    setup_logging("WARNING")
    if cfg.get_target(target) is None:
        console.print(f"[yellow]Warning: {target} is not defined in the config targets[/]")

    health_monitor = HealthMonitor.from_config(cfg)
    health_monitor.set_monitoring(
        target,
        interval_minutes=interval,
        notify_on_failure=notify_failure,
        notify_on_recovery=notify_recovery,
    )
    console.print(f"[green]Monitoring {target} every {interval} minute(s)[/]")


@main.command()
@click.argument("target")
@config_option
@click.option("--purge", is_flag=True, help="Also delete the target's probe history")
def unmonitor(target: str, config: Optional[str], purge: bool) -> None:
    """Stop monitoring a target."""
    monitor = build_monitor(config, "WARNING")
    if purge:
        monitor.forget_target(target)
    else:
        monitor.stop_monitoring(target)
    console.print(f"[green]Stopped monitoring {target}[/]")


@main.command()
@click.argument("target")
@config_option
def enable(target: str, config: Optional[str]) -> None:
    """Resume monitoring a target."""
    monitor = build_monitor(config, "WARNING")
    monitor.set_enabled(target, True)
    console.print(f"[green]Enabled {target}[/]")


@main.command()
@click.argument("target")
@config_option
def disable(target: str, config: Optional[str]) -> None:
    """Pause monitoring a target without losing its settings."""
    monitor = build_monitor(config, "WARNING")
    monitor.set_enabled(target, False)
    console.print(f"[yellow]Disabled {target}[/]")


@main.command()
@click.option(
    "-o", "--output",
    default="sshmon.yaml",
    help="Output file path",
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing file",
)
def init(output: str, force: bool) -> None:
    """Create an example configuration file."""
    path = Path(output)

    if path.exists() and not force:
        console.print(f"[red]File already exists: {path}[/]")
        console.print("Use --force to overwrite")
        sys.exit(1)

    example = create_example_config()
    example.to_yaml(path)

    console.print(f"[green]Created example configuration: {path}[/]")
    console.print("Edit this file to add your targets and settings.")


if __name__ == "__main__":
    main()
