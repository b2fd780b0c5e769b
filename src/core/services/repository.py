"""Preparación del repositorio de ejemplo para cada ejecución."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from adapters.git_client import LocalGitClient, clone
from core.domain.models import GitRepository

logger = logging.getLogger(__name__)

SAMPLE_REPOSITORY = GitRepository(org="MeterianHQ", name="autofix-sample-maven-upgrade")
AUTOFIX_BRANCH = "fixed-by-meterian-29c4d26"


def prepare_scratch_dir(root: Path | str) -> Path:
    """Borra `root` (si existe) y lo vuelve a crear vacío."""

    root = Path(root)
    if root.exists():
        shutil.rmtree(root)
    root.mkdir(parents=True)
    return root


def clone_repository(
    repo: GitRepository,
    root: Path | str,
    branch: str | None = None,
    url: str | None = None,
) -> Path:
    """Clona `repo` dentro de `root`; devuelve la carpeta de trabajo."""

    root = Path(root)
    working_folder = clone(url or repo.ssh_url, root, directory=repo.name, branch=branch)
    logger.info("Cloned %s into %s", repo.full_name, working_folder)
    return working_folder


class RepositoryPreparer:
    """Scratch dir limpio + clon + borrado de la rama remota obsoleta."""

    def __init__(self, url: str | None = None) -> None:
        self.url = url

    def prepare(
        self,
        repo: GitRepository,
        root: Path | str,
        stale_branch: str | None = None,
        branch: str | None = None,
    ) -> Path:
        prepare_scratch_dir(root)
        working_folder = clone_repository(repo, root, branch=branch, url=self.url)
        if stale_branch:
            # Borrar la rama remota cierra cualquier pull request asociado
            LocalGitClient(working_folder).delete_remote_branch(stale_branch)
        return working_folder
