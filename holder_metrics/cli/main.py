"""CLI entry point for the Holder Snapshot Tool.

Usage:
    holder-snapshot run --config config/snapshot.yaml
    holder-snapshot run --rows exports/holders.json --output public/data/holders.json
    holder-snapshot show public/data/holders.json
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..core.config import APIConfig, EngineConfig
from ..core.exceptions import HolderSnapshotError
from ..orchestrator import SnapshotOrchestrator
from ..output.formatters import TableFormatter
from ..providers.base import BaseProvider
from ..providers.dune import DuneProvider
from ..providers.file_rows import FileRowsProvider
from ..storage.json_store import DEFAULT_OUTPUT_PATH, SnapshotStore

# Initialize app
app = typer.Typer(
    name="holder-snapshot",
    help="Multi-chain token holder distribution snapshot",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def _load_engine_config(
    config: Optional[Path],
    retail_threshold: Optional[float],
    mega_holder_threshold: Optional[float],
) -> EngineConfig:
    engine_config = EngineConfig.from_yaml(config) if config else EngineConfig()
    return engine_config.with_overrides(
        retail_threshold=retail_threshold,
        mega_holder_threshold=mega_holder_threshold,
    )


@app.command()
def run(
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to snapshot YAML config (chains, thresholds, exclusions)",
    ),
    rows: Optional[Path] = typer.Option(
        None,
        "--rows", "-r",
        help="Read rows from a local JSON export instead of querying Dune",
    ),
    query_id: Optional[str] = typer.Option(
        None,
        "--query-id", "-q",
        help="Dune query ID (default: DUNE_QUERY_ID)",
    ),
    output: Path = typer.Option(
        DEFAULT_OUTPUT_PATH,
        "--output", "-o",
        help="Snapshot output path",
    ),
    retail_threshold: Optional[float] = typer.Option(
        None,
        "--retail-threshold",
        help="Override the retail threshold",
    ),
    mega_holder_threshold: Optional[float] = typer.Option(
        None,
        "--mega-holder-threshold",
        help="Override the mega-holder threshold",
    ),
    workers: int = typer.Option(
        1,
        "--workers", "-w",
        help="Chains aggregated in parallel",
    ),
    generated_at: Optional[str] = typer.Option(
        None,
        "--generated-at",
        help="Pin the snapshot timestamp (ISO-8601)",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Path to .env file with DUNE_API_KEY",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Build a holder snapshot and write it if anything changed.

    Examples:
        holder-snapshot run --config config/snapshot.yaml
        holder-snapshot run --rows exports/holders.json -o out/holders.json
    """
    setup_logging(verbose)

    generated_at_dt = None
    if generated_at:
        try:
            generated_at_dt = datetime.fromisoformat(generated_at.replace("Z", "+00:00"))
        except ValueError:
            console.print(f"[red]Invalid timestamp: {escape(generated_at)}. Use ISO-8601[/]")
            raise typer.Exit(1)

    provider: BaseProvider | None = None
    try:
        engine_config = _load_engine_config(config, retail_threshold, mega_holder_threshold)

        if rows:
            provider = FileRowsProvider(rows)
        else:
            api_config = APIConfig.load(env_file)
            if query_id:
                api_config.dune_query_id = query_id
            api_config.require_dune_key()
            provider = DuneProvider(config=api_config)

        orchestrator = SnapshotOrchestrator(engine_config, max_workers=workers)
        snapshot = orchestrator.run(provider, generated_at=generated_at_dt)
        changed = SnapshotStore(output).write(snapshot)

    except HolderSnapshotError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)
    finally:
        if isinstance(provider, DuneProvider):
            provider.close()

    console.print(TableFormatter().summary_table(snapshot))
    if changed:
        console.print(f"[green]Updated holder snapshot -> {escape(str(output))}[/]")
    else:
        console.print("[yellow]No changes detected; data file remains unchanged.[/]")


@app.command()
def show(
    snapshot_file: Path = typer.Argument(
        DEFAULT_OUTPUT_PATH,
        help="Snapshot JSON file",
    ),
    top: int = typer.Option(
        10,
        "--top", "-t",
        help="Holders listed per chain",
    ),
) -> None:
    """Display a saved snapshot."""
    snapshot = SnapshotStore(snapshot_file).load()
    if snapshot is None:
        console.print(f"[red]File not found: {escape(str(snapshot_file))}[/]")
        raise typer.Exit(1)

    typer.echo(TableFormatter(top_holders=top, width=console.width).format(snapshot), nl=False)


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"Holder Snapshot Tool v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
