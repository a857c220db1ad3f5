"""CLI entry point for the HDFS log loader.

Usage:
    python -m hdfslog.ingestion.runner hdfs_logs
    python -m hdfslog.ingestion.runner hdfs_logs --batch-size 10000 --max-rows 200000
    python -m hdfslog.ingestion.runner hdfs_logs --input ./data/logs.json --tidb-host db.local
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hdfslog.config import get_settings
from hdfslog.db import open_connection
from hdfslog.errors import LoaderError, PipelineAborted
from hdfslog.ingestion import pipeline
from hdfslog.models.pipeline import RunSummary
from hdfslog.models.records import ParseError

app = typer.Typer(help="Load HDFS logs from a JSON-lines file into a TiDB table")
console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _print_failure(exc: BaseException) -> None:
    console.print(f"[red]✗ {escape(str(exc))}[/red]")
    cause = exc.__cause__
    while cause is not None:
        console.print(f"[red]  caused by: {escape(str(cause))}[/red]")
        cause = cause.__cause__


def _print_summary(summary: RunSummary) -> None:
    table = Table(title=f"Load Summary ({summary.table_name})")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    table.add_row("Lines read", str(summary.total_read))
    table.add_row("Records inserted", str(summary.total_inserted))
    table.add_row("Parse errors", str(summary.error_count))
    table.add_row("Batches", str(summary.batches))
    console.print(table)


@app.command()
def load(
    table_name: str = typer.Argument(..., help="Name of the database table"),
    max_rows: Optional[int] = typer.Option(None, "--max-rows", min=0, help="Maximum number of rows to process"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", min=1, help="Number of rows in each insert batch"),
    tidb_host: Optional[str] = typer.Option(None, "--tidb-host", help="TiDB address to connect to"),
    tidb_port: Optional[int] = typer.Option(None, "--tidb-port", help="TiDB port to connect to"),
    asset_dir: Optional[str] = typer.Option(None, "--asset-dir", help="Directory containing the input file (default: current directory)"),
    input_path: Optional[Path] = typer.Option(None, "--input", help="Input file path (overrides --asset-dir)"),
    severity_overflow: Optional[str] = typer.Option(None, "--severity-overflow", help="truncate or reject severity_text over 50 chars"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Recreate TABLE_NAME and load every log entry from the input file into it."""
    overrides = {
        "max_rows": max_rows,
        "batch_size": batch_size,
        "tidb_host": tidb_host,
        "tidb_port": tidb_port,
        "asset_dir": asset_dir,
        "severity_overflow": severity_overflow,
        "log_level": log_level,
    }
    settings = get_settings().model_copy(
        update={k: v for k, v in overrides.items() if v is not None},
    )
    if settings.severity_overflow not in ("truncate", "reject"):
        console.print(f"[red]Invalid --severity-overflow: {settings.severity_overflow}. Use truncate or reject[/red]")
        raise typer.Exit(2)
    _setup_logging(settings.log_level)

    source = input_path or settings.input_path
    console.print(f"\n[bold]Processing HDFS logs into database table '{table_name}':[/bold]")
    console.print(f"[bold]Source:[/bold] {source}")
    console.print(f"[bold]Batch:[/bold]  {settings.batch_size}")
    if settings.max_rows is not None:
        console.print(f"[bold]Limit:[/bold]  {settings.max_rows} line(s)")
    console.print()

    def on_batch(batches: int, total: int) -> None:
        console.print(f"  [dim]batch {batches}[/dim] total inserted so far: {total}")

    def on_error(error: ParseError) -> None:
        console.print(f"  [yellow]skipped {escape(str(error))}[/yellow]")

    conn = None
    try:
        conn = open_connection(settings)
        console.print(f"[cyan]▶ Connected to {settings.tidb_host}:{settings.tidb_port}[/cyan]")
        summary = pipeline.run(
            conn,
            table_name,
            source,
            batch_size=settings.batch_size,
            max_rows=settings.max_rows,
            severity_overflow=settings.severity_overflow,
            on_batch=on_batch,
            on_error=on_error,
        )
    except LoaderError as e:
        logger.error("Load failed: %s", e, exc_info=True)
        _print_failure(e)
        if isinstance(e, PipelineAborted):
            _print_summary(e.summary)
        raise typer.Exit(1)
    finally:
        if conn is not None:
            conn.close()
            conn.engine.dispose()

    console.print()
    _print_summary(summary)
    if summary.error_count > 0:
        console.print(f"[yellow]⚠ {summary.error_count} line(s) skipped due to parse errors.[/yellow]")
    console.print("\n[green]✓ Data processing complete.[/green]")


if __name__ == "__main__":
    app()
