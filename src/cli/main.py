"""CLI principal (Typer).

Comandos:
- `download`: descarga/actualiza el jar del cliente.
- `clone`: prepara el repo de ejemplo (clon limpio + borrado de rama obsoleta).
- `autofix`: escenario completo de autofix con verificación del log.
- `verify-log`: comprueba líneas esperadas en un log existente.
- `doctor`: diagnóstico del entorno.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.client_downloader import ClientDownloadError, ClientDownloader
from adapters.git_client import GitError
from adapters.http_client import build_http_client
from adapters.shell import ShellError
from cli import doctor
from cli.ui_components import build_outcome_panel, build_verification_table, print_banner
from core.config import ConfigurationError, HarnessSettings
from core.domain.models import GitRepository
from core.logging import configure_logging
from core.services.autofix_pipeline import AutofixRequest, PipelineHooks, run_autofix
from core.services.log_verifier import AUTOFIX_EXPECTED_LOG_LINES, verify_run_analysis_logs
from core.services.repository import AUTOFIX_BRANCH, SAMPLE_REPOSITORY, RepositoryPreparer

app = typer.Typer(no_args_is_help=True, help="Integration harness for the Meterian client.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

HARNESS_ERRORS = (ConfigurationError, ClientDownloadError, GitError, ShellError)


def _fail(exc: Exception) -> NoReturn:
    _console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option("INFO", "--log-level", help="Console log level."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored log output."),
) -> None:
    configure_logging(log_level, color=not no_color)


@app.command()
def download(
    cache_dir: Optional[Path] = typer.Option(None, help="Where to keep meterian-cli.jar."),
) -> None:
    """Download (or refresh) the Meterian client jar."""

    settings = HarnessSettings()
    try:
        with build_http_client(settings.http_config()) as client:
            jar = ClientDownloader(client, settings.base_url, cache_dir=cache_dir or settings.cache_dir).load()
    except HARNESS_ERRORS as exc:
        _fail(exc)
    _console.print(f"[green]Client:[/green] {jar}")


@app.command(name="clone")
def clone_cmd(
    root: Path = typer.Argument(..., help="Scratch directory (wiped before cloning)."),
    org: str = typer.Option(SAMPLE_REPOSITORY.org, help="GitHub organisation or user."),
    name: str = typer.Option(SAMPLE_REPOSITORY.name, help="Repository name."),
    url: Optional[str] = typer.Option(None, help="Clone URL (defaults to the SSH URL)."),
    stale_branch: Optional[str] = typer.Option(AUTOFIX_BRANCH, help="Remote branch to delete after cloning."),
) -> None:
    """Clone a fresh copy of the sample repository."""

    repo = GitRepository(org=org, name=name)
    try:
        folder = RepositoryPreparer(url=url).prepare(repo, root, stale_branch=stale_branch or None)
    except HARNESS_ERRORS as exc:
        _fail(exc)
    _console.print(f"[green]Cloned into:[/green] {folder}")


@app.command()
def autofix(
    root: Optional[Path] = typer.Option(
        None, help="Scratch directory for the clone (default: $WORKSPACE/github-repo or ./target/github-repo)."
    ),
    url: Optional[str] = typer.Option(None, help="Clone URL (defaults to the SSH URL)."),
    log_file: Optional[Path] = typer.Option(None, help="Where to write the client log."),
) -> None:
    """Run the client with --autofix against the sample repository and verify its log."""

    settings = HarnessSettings()
    print_banner(_console)
    request = AutofixRequest(scratch_root=root or settings.scratch_root(), clone_url=url, log_file=log_file)
    hooks = PipelineHooks(step=lambda message: _console.print(f"[cyan]•[/cyan] {escape(message)}"))
    try:
        result = run_autofix(settings=settings, request=request, hooks=hooks)
    except HARNESS_ERRORS as exc:
        _fail(exc)

    _console.print(build_verification_table(result.report))
    _console.print(build_outcome_panel(result.outcome, result.report))
    for warning in result.warnings:
        _console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
    if not result.report.ok:
        raise typer.Exit(code=1)


@app.command(name="verify-log")
def verify_log(
    log_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Log to check."),
    lines: Optional[list[str]] = typer.Argument(None, help="Expected substrings (default: autofix contract)."),
) -> None:
    """Check that every expected line appears in a log file."""

    report = verify_run_analysis_logs(log_file, lines or AUTOFIX_EXPECTED_LOG_LINES)
    _console.print(build_verification_table(report))
    if not report.ok:
        _console.print(f"[red]{len(report.missing)} expected line(s) missing[/red]")
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
