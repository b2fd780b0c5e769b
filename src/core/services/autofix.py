"""Autofix: preparación del workspace antes de ejecutar el cliente.

El cliente crea la rama, hace commit, push y abre el pull request; aquí solo
se garantiza que el workspace es un repo git con identidad de commit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

from adapters.git_client import GitError, LocalGitClient, run_git
from core.domain.models import ClientConfiguration
from core.interfaces.runner import Runner
from core.services.client import LOG_PREFIX, MeterianClient

logger = logging.getLogger(__name__)

DEFAULT_GIT_USER = "meterian-bot"
DEFAULT_GIT_EMAIL = "bot.github@meterian.io"


class AutofixFeature:
    """Ejecuta el cliente en modo autofix sobre un workspace git."""

    def __init__(
        self,
        configuration: ClientConfiguration,
        workspace: Path | str | None,
        runner: Runner,
        log: TextIO,
        environment: Mapping[str, str] | None = None,
    ) -> None:
        self.configuration = configuration
        self.workspace = Path(workspace) if workspace else None
        self.runner = runner
        self.log = log
        self.environment = dict(environment or {})

    def git_identity(self) -> tuple[str, str]:
        user = self.environment.get("METERIAN_GITHUB_USER") or DEFAULT_GIT_USER
        email = self.environment.get("METERIAN_GITHUB_EMAIL") or DEFAULT_GIT_EMAIL
        return user, email

    def prepare_workspace(self) -> LocalGitClient:
        if self.workspace is None or not self.workspace.is_dir():
            raise GitError(f"Workspace {self.workspace} does not exist")
        result = run_git(["rev-parse", "--is-inside-work-tree"], cwd=self.workspace, check=False)
        if result.returncode != 0:
            raise GitError(f"Workspace {self.workspace} is not a git repository", exit_code=result.returncode)

        git = LocalGitClient(self.workspace)
        user, email = self.git_identity()
        git.configure_user(user, email)
        logger.debug("Configured git identity %s <%s>", user, email)
        return git

    def execute(self, client: MeterianClient) -> int:
        self.prepare_workspace()
        if not self.configuration.github_token:
            self.log.write(f"{LOG_PREFIX}No GitHub token configured, pull requests will not be created\n")
            self.log.flush()
        return self.runner.run(client)
