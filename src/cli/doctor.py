"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import HttpxNetworkClient
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import SudojoError
from core.services.sudojo_client import SudojoClient

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_health(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with HttpxNetworkClient(settings) as transport:
            client = SudojoClient(transport, settings.to_client_config())
            response = await client.get_health()
    except SudojoError as exc:
        return False, f"{exc.kind}: {exc}"

    data = response.data
    if data is None:
        return True, "reachable (empty health payload)"
    parts = [p for p in (data.name, data.version, data.status) if p]
    return True, " ".join(parts) or "reachable"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Sudojo Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Base URL", "OK", settings.to_client_config().base_url)
    if settings.api_token:
        table.add_row("API token", "OK", "Static token set")
    else:
        table.add_row("API token", "OPTIONAL", "No token -> solve and account endpoints need --token")
    table.add_row("Validate timeout", "OK", f"{settings.validate_timeout_seconds:g}s")
    table.add_row("User config", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))

    # Connectivity
    ok_health, detail_health = asyncio.run(_check_health(settings))
    table.add_row("API health", "OK" if ok_health else "FAIL", detail_health)

    _console.print(table)

    if not ok_health:
        _console.print(
            "\n[yellow]Note:[/yellow] Check SUDOJO_BASE_URL or run `sudojo doctor setup`."
        )


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    base_url = typer.prompt("API base URL", default=settings.base_url, show_default=True).strip()
    api_token = typer.prompt(
        "API token (empty to skip)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()

    if not base_url:
        raise typer.BadParameter("base_url is required")

    env_path = write_user_env_vars(
        {
            "SUDOJO_BASE_URL": base_url,
            "SUDOJO_API_TOKEN": api_token or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
