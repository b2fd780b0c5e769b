"""Tests for the repository preparer."""

from pathlib import Path

import pytest

from adapters.git_client import GitError, LocalGitClient
from core.domain.models import GitRepository
from core.services.repository import RepositoryPreparer, clone_repository, prepare_scratch_dir

SAMPLE = GitRepository(org="MeterianHQ", name="autofix-sample")


def test_prepare_scratch_dir_wipes_previous_content(temp_dir: Path) -> None:
    root = temp_dir / "github-repo"
    (root / "old-clone").mkdir(parents=True)
    (root / "old-clone" / "file.txt").write_text("stale")

    result = prepare_scratch_dir(root)

    assert result == root
    assert root.is_dir()
    assert list(root.iterdir()) == []


def test_clone_repository_uses_repo_name(temp_dir: Path, remote_repo: Path) -> None:
    (temp_dir / "clones").mkdir()

    folder = clone_repository(SAMPLE, temp_dir / "clones", url=str(remote_repo))

    assert folder == temp_dir / "clones" / "autofix-sample"
    assert (folder / ".git").exists()


def test_clone_failure_surfaces_exit_code(temp_dir: Path) -> None:
    with pytest.raises(GitError, match="error code"):
        clone_repository(SAMPLE, temp_dir, url=str(temp_dir / "does-not-exist.git"))


def test_prepare_deletes_stale_remote_branch(temp_dir: Path, git_repo: Path, remote_repo: Path) -> None:
    origin = LocalGitClient(git_repo)
    origin.create_branch("fixed-by-meterian-29c4d26")
    origin.push_branch("fixed-by-meterian-29c4d26")
    assert origin.remote_branch_exists("fixed-by-meterian-29c4d26")

    folder = RepositoryPreparer(url=str(remote_repo)).prepare(
        SAMPLE, temp_dir / "scratch", stale_branch="fixed-by-meterian-29c4d26"
    )

    assert (folder / "README.md").exists()
    assert not LocalGitClient(folder).remote_branch_exists("fixed-by-meterian-29c4d26")


def test_prepare_without_stale_branch(temp_dir: Path, remote_repo: Path) -> None:
    folder = RepositoryPreparer(url=str(remote_repo)).prepare(SAMPLE, temp_dir / "scratch")

    assert folder.parent == temp_dir / "scratch"
