"""Sudojo CLI (Typer + Rich).

Thin shell over `SudojoClient`: every command opens one httpx transport,
runs one client call and renders the result. Errors are shown by `kind`
and turned into a non-zero exit code.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from adapters.http_client import HttpxNetworkClient
from adapters.json_exporter import export_response_json
from cli import doctor
from cli.ui_components import (
    build_board_panel,
    build_hints_table,
    build_levels_table,
    build_techniques_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import HintAccessDeniedError, SudojoError
from core.domain.models import SolverBoard, SudojoAuth
from core.services.sudojo_client import SudojoClient

app = typer.Typer(no_args_is_help=True, help="Command-line client for the Sudojo puzzle API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _call(action: Callable[[SudojoClient], Awaitable[Any]]) -> Any:
    """Run one client call on a fresh transport; map errors to exit codes."""

    settings = AppSettings()

    async def _runner() -> Any:
        async with HttpxNetworkClient(settings) as transport:
            client = SudojoClient(transport, settings.to_client_config())
            return await action(client)

    try:
        return asyncio.run(_runner())
    except HintAccessDeniedError as exc:
        _console.print(
            Panel(
                f"{exc}\n\nHint level: {exc.hint_level}\nRequired: {exc.required_entitlement}",
                title="[bold yellow]Upgrade required[/bold yellow]",
                border_style="yellow",
            )
        )
        raise typer.Exit(code=2) from exc
    except SudojoError as exc:
        _console.print(f"[red]{exc.kind} error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _auth(token: Optional[str]) -> SudojoAuth | None:
    return SudojoAuth(access_token=token) if token else None


def _export(response: Any, output: Optional[Path]) -> None:
    if output is None:
        return
    path = export_response_json(response=response, output_path=output)
    _console.print(f"[green]Saved:[/green] {path}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request (DEBUG)."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override SUDOJO_LOG_LEVEL."),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the welcome banner."),
) -> None:
    settings = AppSettings()
    _configure_logging("DEBUG" if verbose else (log_level or settings.log_level))
    if banner:
        print_banner(_console)


@app.command()
def health() -> None:
    """Check that the API is up."""

    response = _call(lambda client: client.get_health())
    data = response.data
    if data is None:
        _console.print("[green]OK[/green]")
        return
    _console.print(f"[green]OK[/green] {data.name or ''} {data.version or ''} {data.status or ''}".rstrip())


@app.command()
def levels() -> None:
    """List difficulty levels."""

    response = _call(lambda client: client.get_levels())
    _console.print(build_levels_table(response.data or []))


@app.command()
def techniques(
    level: Optional[int] = typer.Option(None, "--level", "-l", help="Only techniques of this level (1-12)."),
) -> None:
    """List solving techniques."""

    response = _call(lambda client: client.get_techniques(level=level))
    _console.print(build_techniques_table(response.data or []))


@app.command()
def daily(
    date: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD (default: today)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Export the response as JSON."),
) -> None:
    """Show the daily puzzle."""

    if date:
        response = _call(lambda client: client.get_daily_by_date(date))
    else:
        response = _call(lambda client: client.get_today_daily())
    if response.data is not None:
        d = response.data
        _console.print(f"[bold]{d.date or ''}[/bold] level {d.level if d.level is not None else '?'}")
        if d.board:
            _console.print(build_board_panel(SolverBoard(original=d.board), title="Daily"))
    _export(response, output)


@app.command()
def solve(
    original: str = typer.Argument(..., help="81-character puzzle."),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="81-character user input (default: empty)."),
    token: Optional[str] = typer.Option(None, "--token", "-t", envvar="SUDOJO_ACCESS_TOKEN", help="Bearer token."),
    auto_pencilmarks: Optional[bool] = typer.Option(None, "--auto-pencilmarks/--no-auto-pencilmarks"),
    pencilmarks: Optional[str] = typer.Option(None, "--pencilmarks", help="Comma-separated pencilmarks."),
    filters: Optional[str] = typer.Option(None, "--filters", help="Technique filters."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Export the response as JSON."),
) -> None:
    """Ask the solver for the next hint(s)."""

    options = {
        "original": original,
        "user": user or "0" * len(original),
        "auto_pencilmarks": auto_pencilmarks,
        "pencilmarks": pencilmarks,
        "filters": filters,
    }
    response = _call(lambda client: client.solve(options, _auth(token)))
    if response.data is not None:
        _console.print(build_board_panel(response.data.board, title="Solve"))
        _console.print(build_hints_table(response.data.hints or []))
    _export(response, output)


@app.command()
def validate(
    original: str = typer.Argument(..., help="81-character puzzle."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Export the response as JSON."),
) -> None:
    """Check that a puzzle has exactly one solution."""

    response = _call(lambda client: client.validate({"original": original}))
    data = response.data
    if data is not None and data.has_unique_solution:
        _console.print("[green]Unique solution[/green]")
        _console.print(build_board_panel(data.board, title="Solution", solved=True))
    else:
        _console.print(f"[red]Invalid puzzle[/red] {response.error or ''}".rstrip())
    _export(response, output)


@app.command()
def generate(
    symmetrical: Optional[bool] = typer.Option(None, "--symmetrical/--asymmetrical", help="Symmetric clue layout."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Export the response as JSON."),
) -> None:
    """Generate a new puzzle."""

    response = _call(lambda client: client.generate({"symmetrical": symmetrical}))
    data = response.data
    if data is not None:
        _console.print(build_board_panel(data.board, title="Generated"))
        logger.info("generated level=%s techniques=%s", data.level, data.techniques)
    _export(response, output)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
