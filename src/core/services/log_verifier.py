"""Verificación de líneas esperadas en el log de una ejecución."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.domain.models import VerificationReport

AUTOFIX_EXPECTED_LOG_LINES: tuple[str, ...] = (
    "[meterian] Client successfully authorized",
    "[meterian] Meterian Client v",
    "[meterian] - autofix mode:      on",
    "[meterian] Running autofix, 1 programs",
    "[meterian] Autofix applied, will run the build again.",
    "[meterian] Project information:",
    "[meterian] JAVA scan -",
    "MeterianHQ/autofix-sample-maven-upgrade.git",
    "[meterian] Full report available at: ",
    "[meterian] Build unsuccesful!",
    "[meterian] Failed checks: [security]",
    "[meterian] Finished creating pull request for org: MeterianHQ, "
    "repo: MeterianHQ/autofix-sample-maven-upgrade, branch: fixed-by-meterian-29c4d26.",
)


class LogVerificationError(AssertionError):
    """Raised when expected lines are missing from a run log."""

    def __init__(self, report: VerificationReport) -> None:
        missing = "\n".join(f"  - {line!r}" for line in report.missing)
        super().__init__(f"{len(report.missing)} expected line(s) missing from {report.log_file}:\n{missing}")
        self.report = report


def read_run_analysis_logs(path: Path | str) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


def verify_run_analysis_logs(path: Path | str, lines: Iterable[str]) -> VerificationReport:
    """Comprueba que cada línea esperada aparece (como substring) en el log."""

    text = read_run_analysis_logs(path)
    expected = list(lines)
    return VerificationReport(
        log_file=Path(path),
        expected=expected,
        missing=[line for line in expected if line not in text],
    )


def assert_log_contains(path: Path | str, lines: Iterable[str]) -> VerificationReport:
    report = verify_run_analysis_logs(path, lines)
    if not report.ok:
        raise LogVerificationError(report)
    return report
