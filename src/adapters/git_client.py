"""Local git operations used to prepare and verify autofix runs."""

from __future__ import annotations

import logging
import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

_CREDENTIALS = re.compile(r"(://)[^/@\s]+@")


def redact(text: str) -> str:
    """Hide credentials embedded in URLs."""
    return _CREDENTIALS.sub(r"\1***@", text)


class GitError(Exception):
    """Exception raised for Git operation errors."""

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def run_git(args: list[str], cwd: Path | None = None, check: bool = True) -> subprocess.CompletedProcess:
    """Run a git command and return the result.

    With ``check`` a non-zero exit raises `GitError` carrying the exit code.
    """
    cmd = ["git"] + args
    logger.debug("git %s (cwd=%s)", redact(" ".join(args)), cwd)
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH")

    if check and result.returncode != 0:
        error_msg = redact(result.stderr.strip()) if result.stderr else "Unknown error"
        raise GitError(
            f"git {args[0]} failed with error code {result.returncode}: {error_msg}",
            exit_code=result.returncode,
        )
    return result


def clone(url: str, parent: Path, directory: str | None = None, branch: str | None = None) -> Path:
    """Clone ``url`` inside ``parent`` and return the working folder."""
    args = ["clone"]
    if branch:
        args.extend(["-b", branch])
    args.append(url)
    if directory:
        args.append(directory)
    run_git(args, cwd=parent)

    name = directory or url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return parent / name.removesuffix(".git")


class LocalGitClient:
    """Git operations on a single working folder."""

    def __init__(self, working_folder: Path | str) -> None:
        self.working_folder = Path(working_folder)

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        return run_git(list(args), cwd=self.working_folder, check=check)

    def configure_user(self, name: str, email: str) -> None:
        self._git("config", "user.name", name)
        self._git("config", "user.email", email)

    def current_branch(self) -> str:
        return self._git("rev-parse", "--abbrev-ref", "HEAD").stdout.strip()

    def checkout_branch(self, name: str) -> None:
        self._git("checkout", name)

    def create_branch(self, name: str) -> None:
        self._git("checkout", "-b", name)

    def local_branch_exists(self, name: str) -> bool:
        result = self._git("show-ref", "--verify", "--quiet", f"refs/heads/{name}", check=False)
        return result.returncode == 0

    def remote_branch_exists(self, name: str, remote: str = "origin") -> bool:
        result = self._git("ls-remote", "--heads", remote, name)
        return any(
            line.split("\t", 1)[-1] == f"refs/heads/{name}"
            for line in result.stdout.splitlines()
        )

    def delete_local_branch(self, name: str) -> bool:
        """Delete a local branch; returns False when there was nothing to delete."""
        if not self.local_branch_exists(name):
            return False
        if self.current_branch() == name:
            raise GitError(f"Cannot delete the checked out branch {name}")
        self._git("branch", "-D", name)
        return True

    def delete_remote_branch(self, name: str, remote: str = "origin") -> bool:
        """Delete a remote branch, which also closes any pull request attached to it."""
        if not self.remote_branch_exists(name, remote):
            logger.info("Remote branch %s not found on %s, nothing to delete", name, remote)
            return False
        self._git("push", remote, f":{name}")
        return True

    def change_content_of_file(self, relative_path: str) -> Path:
        target = self.working_folder / relative_path
        stamp = datetime.now(timezone.utc).isoformat()
        with target.open("a", encoding="utf-8") as fh:
            fh.write(f"\nUpdated by meterian-harness at {stamp}\n")
        return target

    def has_changes(self) -> bool:
        return bool(self._git("status", "--porcelain").stdout.strip())

    def commit_all(self, message: str) -> None:
        self._git("add", "-A")
        self._git("commit", "-m", message)

    def push_branch(self, name: str, remote_url: str | None = None) -> None:
        """Push ``name`` and set upstream; an explicit URL (e.g. with a token) replaces ``origin``."""
        self._git("push", "--set-upstream", remote_url or "origin", f"{name}:{name}")

    def verify_remote_branch_created(self, name: str, remote: str = "origin") -> None:
        if not self.remote_branch_exists(name, remote):
            raise GitError(f"Remote branch {name} was not created on {remote}")
