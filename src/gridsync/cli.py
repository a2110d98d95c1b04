"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
from pathlib import Path

import typer
from rich import print
from rich.table import Table

from .errors import GridSyncError, SettingsError
from .settings.options import load_settings

app = typer.Typer(help="Server-synchronised tables with loading placeholders")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SettingsError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except GridSyncError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.command("check-settings")
@_handle_errors
def check_settings(path: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Validate a settings file and show the effective values."""

    settings = load_settings(path)
    table = Table(title=f"Settings from {path.name}")
    table.add_column("Key")
    table.add_column("Value")
    table.add_row("loading_row_count", str(settings.loading_row_count))
    table.add_row("debounce_ms", str(settings.debounce_ms))
    table.add_row("fetch_timeout_ms", str(settings.fetch_timeout_ms))
    table.add_row("max_threads", str(settings.max_threads))
    table.add_row("sentinel_max_codepoint", str(settings.sentinel_max_codepoint))
    for table_id, ids in sorted(settings.filter_skip.items()):
        table.add_row(f"filter_skip[{table_id}]", ", ".join(ids) or "-")
    print(table)
    print("[green]Settings are valid")


@app.command()
def demo(
    rows: int = typer.Option(500, min=0, help="Rows held by the simulated server"),
    latency: float = typer.Option(1.0, min=0.0, help="Seconds each fetch takes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every sync step"),
) -> None:
    """Open a demo table backed by a simulated remote source."""

    from .demo import main

    raise typer.Exit(main([], rows=rows, latency=latency, verbose=verbose))


if __name__ == "__main__":  # pragma: no cover - manual launch
    app()
