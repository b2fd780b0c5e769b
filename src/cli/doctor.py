"""Doctor command for environment diagnostics."""

from __future__ import annotations

import shutil
import subprocess

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_http_client
from core.config import HarnessSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(settings: HarnessSettings) -> tuple[bool, str]:
    try:
        with build_http_client(settings.http_config()) as client:
            response = client.head(settings.base_url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_binary(binary: str, *version_args: str) -> tuple[bool, str]:
    path = shutil.which(binary)
    if path is None:
        return False, f"{binary} not found in PATH"
    result = subprocess.run([path, *version_args], capture_output=True, text=True)
    output = (result.stdout or result.stderr).strip().splitlines()
    return result.returncode == 0, output[0] if output else path


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = HarnessSettings()

    table = Table(title="meterian-harness doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    for label, value, env in (
        ("API token", settings.api_token, "METERIAN_API_TOKEN"),
        ("GitHub token", settings.github_token, "METERIAN_GITHUB_TOKEN"),
    ):
        table.add_row(label, "OK" if value else "MISSING", f"{env} {'set' if value else 'not set'}")
    table.add_row(
        "GitHub identity",
        "OK" if settings.github_user and settings.github_email else "OPTIONAL",
        f"{settings.github_user or 'meterian-bot'} <{settings.github_email or 'bot.github@meterian.io'}>",
    )
    table.add_row("Base URL", "OK", settings.base_url)

    ok_git, detail_git = _check_binary("git", "--version")
    table.add_row("git", "OK" if ok_git else "FAIL", detail_git)
    ok_java, detail_java = _check_binary(settings.java_binary, "-version")
    table.add_row("java", "OK" if ok_java else "FAIL", detail_java)

    ok_http, detail_http = _check_http(settings)
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not settings.api_token or not settings.github_token:
        _console.print("\n[yellow]Note:[/yellow] run `meterian-harness doctor setup` to store the tokens.")


@app.command(name="setup")
def setup() -> None:
    """Interactive token setup (stores config in the user config .env)."""

    api_token = typer.prompt("Meterian API token", hide_input=True).strip()
    github_token = typer.prompt("GitHub token", hide_input=True).strip()
    github_user = typer.prompt("GitHub user", default="meterian-bot", show_default=True).strip()
    github_email = typer.prompt("GitHub email", default="bot.github@meterian.io", show_default=True).strip()

    if not api_token:
        raise typer.BadParameter("the Meterian API token is required")

    env_path = write_user_env_vars(
        {
            "METERIAN_API_TOKEN": api_token,
            "METERIAN_GITHUB_TOKEN": github_token or None,
            "METERIAN_GITHUB_USER": github_user or None,
            "METERIAN_GITHUB_EMAIL": github_email or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
