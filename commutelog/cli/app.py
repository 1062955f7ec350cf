"""
Command line interface for CommuteLog
Manual runs with console output, and configuration checks
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from commutelog.config.loader import ConfigLoader
from commutelog.config.models import CommuteLogConfig
from commutelog.core.errors import CommuteLogError, ConfigurationError, PermutationLimitError
from commutelog.core.models import CommuteDirection, PipelineResult
from commutelog.distancematrix.fetcher import MAX_PERMUTATIONS, check_permutations
from commutelog.pipeline import build_writer, run_pipeline

DEFAULT_AUTH_FILE = Path("auth.json")

# Initialize Typer app
app = typer.Typer(
    name="commutelog",
    help="CommuteLog - record driving times between home and work addresses",
    add_completion=False,
)

# Console for rich output
console = Console()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_config(config_path: Optional[Path], remote_url: Optional[str]) -> CommuteLogConfig:
    loader = ConfigLoader(config_path=config_path, remote_url=remote_url)
    try:
        return loader.load()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)


def show_results(result: PipelineResult) -> None:
    """Display measured routes"""
    table = Table(title=f"Travel times ({result.direction.label})")
    table.add_column("Origin", style="cyan")
    table.add_column("Destination", style="yellow")
    table.add_column("Travel time", justify="right", style="green")

    for measurement in result.fetch.measurements:
        table.add_row(measurement.origin, measurement.destination, measurement.travel_time)

    console.print(table)

    if result.fetch.skipped:
        console.print(
            f"[yellow]⚠ Skipped {result.fetch.skipped} of {result.fetch.requested} routes[/yellow]"
        )


@app.command()
def run(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (JSON/YAML)"),
    remote_url: Optional[str] = typer.Option(None, "--remote-url", help="Fetch config from this URL"),
    auth_file: Optional[Path] = typer.Option(None, "--auth", help="AWS credentials file (defaults to ./auth.json if present)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Fetch travel times without recording them"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    Measure travel times for all home/work pairs and record them

    Examples:
        commutelog run
        commutelog run --config config.yaml --dry-run
        commutelog run --remote-url https://example.com/config.json --auth auth.json
    """
    setup_logging(verbose)
    config = load_config(config_path, remote_url)

    if auth_file is None and DEFAULT_AUTH_FILE.exists():
        auth_file = DEFAULT_AUTH_FILE

    try:
        writer = None if dry_run else build_writer(config, auth_file=auth_file)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[blue]Measuring {config.locations.permutations} routes...[/blue]"
    )

    try:
        result = asyncio.run(run_pipeline(config, writer=writer, dry_run=dry_run))
    except KeyboardInterrupt:
        console.print("\n[yellow]Run cancelled by user[/yellow]")
        raise typer.Exit(0)
    except CommuteLogError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print("Got result times,")
    show_results(result)

    if result.write is None:
        console.print("[yellow]Dry run: nothing recorded[/yellow]")
    else:
        console.print("Recording to database...")
        if result.write.success:
            console.print(
                f"[green]✓ Batch write was successful ({result.write.written} records)[/green]"
            )
            if result.write.unprocessed:
                console.print(
                    f"[yellow]⚠ {result.write.unprocessed} records were not processed[/yellow]"
                )
        else:
            console.print(f"[red]{result.write.error}[/red]")

    console.print("Complete.")


@app.command()
def check(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (JSON/YAML)"),
    remote_url: Optional[str] = typer.Option(None, "--remote-url", help="Fetch config from this URL"),
):
    """Validate configuration and show what a run would do"""
    config = load_config(config_path, remote_url)
    direction = CommuteDirection.now(config.utc_offset_hours)

    table = Table(title="Configuration Summary")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Table", config.aws.table)
    table.add_row("Region", config.aws.region or "default")
    table.add_row("Home locations", str(len(config.locations.home)))
    table.add_row("Work locations", str(len(config.locations.work)))
    table.add_row("Routes per run", f"{config.locations.permutations} / {MAX_PERMUTATIONS}")
    table.add_row("UTC offset", f"{config.utc_offset_hours:+g}h")
    table.add_row("Current direction", direction.label)

    console.print(table)

    try:
        check_permutations(config.locations.home, config.locations.work)
    except (ConfigurationError, PermutationLimitError) as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ Configuration is valid[/green]")


@app.callback()
def callback():
    """
    CommuteLog - scheduled driving time measurements

    Queries the Distance Matrix API for every home/work pair and appends
    the results to a DynamoDB table.
    """
    pass


def main():
    """Main entry point for CLI"""
    # Load environment variables
    from dotenv import load_dotenv
    load_dotenv()

    app()


if __name__ == "__main__":
    main()
