"""Pytest configuration and fixtures."""

import os
import subprocess
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test User",
    "GIT_AUTHOR_EMAIL": "test@test.com",
    "GIT_COMMITTER_NAME": "Test User",
    "GIT_COMMITTER_EMAIL": "test@test.com",
}


def git(*args: str, cwd: Path) -> str:
    # Preserve PATH so git can be found
    env = os.environ.copy()
    env.update(GIT_ENV)
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True, env=env
    )
    return result.stdout.strip()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_repo(temp_dir: Path) -> Path:
    """Create a temporary git repository with one commit."""
    repo_path = temp_dir / "test-repo"
    repo_path.mkdir()

    git("init", cwd=repo_path)
    git("config", "user.email", "test@test.com", cwd=repo_path)
    git("config", "user.name", "Test User", cwd=repo_path)
    # Disable GPG signing for test commits
    git("config", "commit.gpgsign", "false", cwd=repo_path)

    (repo_path / "README.md").write_text("# Test Repo\n")
    git("add", ".", cwd=repo_path)
    git("commit", "-m", "Initial commit", cwd=repo_path)

    return repo_path


@pytest.fixture
def default_branch(git_repo: Path) -> str:
    return git("rev-parse", "--abbrev-ref", "HEAD", cwd=git_repo)


@pytest.fixture
def remote_repo(temp_dir: Path, git_repo: Path, default_branch: str) -> Path:
    """A bare repository set as ``origin`` of ``git_repo``."""
    bare = temp_dir / "remote" / "autofix-sample.git"
    bare.mkdir(parents=True)
    git("init", "--bare", cwd=bare)

    git("remote", "add", "origin", str(bare), cwd=git_repo)
    git("push", "origin", default_branch, cwd=git_repo)
    git("symbolic-ref", "HEAD", f"refs/heads/{default_branch}", cwd=bare)
    git("fetch", "origin", cwd=git_repo)
    return bare


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove harness variables inherited from the developer's shell."""
    for key in list(os.environ):
        if key.startswith("METERIAN_") or key == "WORKSPACE":
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
