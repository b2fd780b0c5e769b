"""Autofix scenario orchestration.

Wires the pieces together the same way the live integration test does:
prepare the sample repository, download the client, run it with
``--interactive=false --autofix`` and check the captured log. The CLI and
the tests share this entry point so the scenario stays in one place.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from adapters.client_downloader import ClientDownloader
from adapters.http_client import build_http_client
from core.config import HarnessSettings
from core.domain.models import ExecutionOutcome, GitRepository, VerificationReport
from core.services.autofix import AutofixFeature
from core.services.client import ClientRunner, MeterianClient
from core.services.executor import StandardExecutor
from core.services.log_verifier import AUTOFIX_EXPECTED_LOG_LINES, verify_run_analysis_logs
from core.services.repository import AUTOFIX_BRANCH, SAMPLE_REPOSITORY, RepositoryPreparer

logger = logging.getLogger(__name__)

AUTOFIX_CLIENT_ARGS: tuple[str, ...] = ("--interactive=false", "--autofix")


@dataclass
class AutofixRequest:
    """Parameters of a single autofix scenario run."""

    scratch_root: Path
    repository: GitRepository = SAMPLE_REPOSITORY
    stale_branch: str | None = AUTOFIX_BRANCH
    clone_url: str | None = None
    client_args: Sequence[str] = AUTOFIX_CLIENT_ARGS
    expected_lines: Sequence[str] = AUTOFIX_EXPECTED_LOG_LINES
    log_file: Path | None = None


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    step: Callable[[str], None] | None = None


@dataclass
class AutofixResult:
    working_folder: Path
    outcome: ExecutionOutcome
    report: VerificationReport
    warnings: list[str] = field(default_factory=list)


def new_log_file(prefix: str = "jenkins-logger-") -> Path:
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=".log")
    os.close(fd)
    return Path(name)


def run_autofix(
    *,
    settings: HarnessSettings,
    request: AutofixRequest,
    hooks: PipelineHooks | None = None,
    downloader: ClientDownloader | None = None,
) -> AutofixResult:
    hooks = hooks or PipelineHooks()

    def step(message: str) -> None:
        logger.info(message)
        if hooks.step:
            hooks.step(message)

    configuration = settings.client_configuration()

    step(f"Cloning {request.repository.full_name}")
    working_folder = RepositoryPreparer(url=request.clone_url).prepare(
        request.repository, request.scratch_root, stale_branch=request.stale_branch
    )

    environment = dict(os.environ)
    environment["WORKSPACE"] = str(working_folder)
    if settings.github_user:
        environment["METERIAN_GITHUB_USER"] = settings.github_user
    if settings.github_email:
        environment["METERIAN_GITHUB_EMAIL"] = settings.github_email

    log_path = request.log_file or new_log_file()
    step(f"Jenkins log file: {log_path}")

    with build_http_client(settings.http_config()) as http_client:
        step("Loading Meterian client")
        if downloader is None:
            downloader = ClientDownloader(http_client, settings.base_url, cache_dir=settings.cache_dir)
        client_jar = downloader.load()

        with log_path.open("w", encoding="utf-8") as jenkins_log:
            client = MeterianClient.build(
                configuration,
                environment,
                jenkins_log,
                settings.jvm_args,
                client_jar,
                java_binary=settings.java_binary,
            ).prepare(*request.client_args)
            runner = ClientRunner(client, jenkins_log)
            autofix = AutofixFeature(configuration, working_folder, runner, jenkins_log, environment)
            step("Running Meterian client")
            outcome = StandardExecutor(runner, autofix).run(client)

    report = verify_run_analysis_logs(log_path, request.expected_lines)
    warnings = []
    if not outcome.succeeded:
        warnings.append(f"Client exited with code {outcome.exit_code}")
    return AutofixResult(working_folder=working_folder, outcome=outcome, report=report, warnings=warnings)
