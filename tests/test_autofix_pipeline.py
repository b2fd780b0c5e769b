"""End-to-end autofix scenario against a local remote and a fake client."""

import stat
import sys
from pathlib import Path

import pytest

from core.config import ConfigurationError, HarnessSettings
from core.domain.models import GitRepository
from core.services.autofix_pipeline import AutofixRequest, PipelineHooks, run_autofix

from .conftest import git

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="fake client is a POSIX shell script")

FAKE_JAVA = """#!/bin/sh
echo "Meterian Client v1.2.9, build test"
echo "Client successfully authorized"
echo "- autofix mode:      on"
echo "args: $*"
echo "token: $METERIAN_API_TOKEN"
echo "identity: $METERIAN_GITHUB_USER <$METERIAN_GITHUB_EMAIL>"
git config user.name
exit 1
"""


class StubDownloader:
    def __init__(self, jar: Path) -> None:
        self.jar = jar

    def load(self) -> Path:
        return self.jar


@pytest.fixture
def fake_java(temp_dir: Path) -> Path:
    script = temp_dir / "bin" / "java"
    script.parent.mkdir()
    script.write_text(FAKE_JAVA)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def settings(temp_dir: Path, fake_java: Path, clean_env: pytest.MonkeyPatch) -> HarnessSettings:
    return HarnessSettings(
        _env_file=None,
        api_token="api-123",
        github_token="gh-456",
        java_binary=str(fake_java),
        cache_dir=temp_dir / "cache",
    )


def test_run_autofix_end_to_end(
    temp_dir: Path, settings: HarnessSettings, git_repo: Path, remote_repo: Path
) -> None:
    git("branch", "fixed-by-meterian-29c4d26", cwd=git_repo)
    git("push", "origin", "fixed-by-meterian-29c4d26", cwd=git_repo)
    log_file = temp_dir / "jenkins.log"
    request = AutofixRequest(
        scratch_root=temp_dir / "github-repo",
        repository=GitRepository(org="MeterianHQ", name="autofix-sample"),
        clone_url=str(remote_repo),
        expected_lines=[
            "[meterian] Client successfully authorized",
            "[meterian] - autofix mode:      on",
            "--interactive=false --autofix --jenkins --url=https://www.meterian.com",
            "[meterian] token: api-123",
            "[meterian] meterian-bot",
        ],
        log_file=log_file,
    )
    steps: list[str] = []

    result = run_autofix(
        settings=settings,
        request=request,
        hooks=PipelineHooks(step=steps.append),
        downloader=StubDownloader(temp_dir / "meterian-cli.jar"),
    )

    assert result.working_folder == temp_dir / "github-repo" / "autofix-sample"
    assert result.report.ok, result.report.missing
    assert result.outcome.autofix
    assert result.outcome.exit_code == 1
    assert result.warnings == ["Client exited with code 1"]
    assert "[meterian] args: -jar " in log_file.read_text()
    assert "fixed-by-meterian-29c4d26" not in git("ls-remote", "--heads", str(remote_repo), cwd=temp_dir)
    assert any(step.startswith("Jenkins log file:") for step in steps)


def test_run_autofix_uses_configured_identity_and_jvm_args(
    temp_dir: Path, settings: HarnessSettings, remote_repo: Path
) -> None:
    settings = settings.model_copy(
        update={"github_user": "someone", "github_email": "someone@example.com", "jvm_args": "-Xmx1g"}
    )
    log_file = temp_dir / "jenkins.log"
    request = AutofixRequest(
        scratch_root=temp_dir / "github-repo",
        repository=GitRepository(org="MeterianHQ", name="autofix-sample"),
        clone_url=str(remote_repo),
        stale_branch=None,
        expected_lines=["[meterian] someone", "[meterian] identity: someone <someone@example.com>"],
        log_file=log_file,
    )

    result = run_autofix(settings=settings, request=request, downloader=StubDownloader(temp_dir / "meterian-cli.jar"))

    assert result.report.ok, result.report.missing
    text = log_file.read_text()
    assert "[meterian] args: -Xmx1g -jar " in text
    assert text.count("-Xmx1g") == 1
    assert git("config", "user.email", cwd=result.working_folder) == "someone@example.com"


def test_run_autofix_requires_tokens(temp_dir: Path, clean_env: pytest.MonkeyPatch) -> None:
    settings = HarnessSettings(_env_file=None)

    with pytest.raises(ConfigurationError):
        run_autofix(settings=settings, request=AutofixRequest(scratch_root=temp_dir / "x"))

    assert not (temp_dir / "x").exists()
