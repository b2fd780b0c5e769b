"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ExecutionOutcome, VerificationReport


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("meterian-harness", style="bold cyan")
    subtitle = Text("Client download • Autofix runs • Log verification", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_verification_table(report: VerificationReport) -> Table:
    """Tabla con cada línea esperada y si apareció en el log."""

    table = Table(title=f"Log verification: {report.log_file}")
    table.add_column("Expected line", style="white")
    table.add_column("Found", no_wrap=True)
    for line in report.expected:
        found = line not in report.missing
        table.add_row(Text(line), Text("yes", style="green") if found else Text("no", style="red"))
    return table


def build_outcome_panel(outcome: ExecutionOutcome, report: VerificationReport) -> Panel:
    ok = outcome.succeeded and report.ok
    body = Text()
    body.append(f"Exit code: {outcome.exit_code}\n")
    body.append(f"Autofix: {'on' if outcome.autofix else 'off'}\n")
    if outcome.log_file:
        body.append(f"Log: {outcome.log_file}\n", style="dim")
    body.append(f"Expected lines found: {len(report.found)}/{len(report.expected)}")
    return Panel(body, title=Text("Run", style="bold"), border_style="green" if ok else "yellow")
