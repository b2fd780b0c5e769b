"""Tests for Shell / ShellTask."""

import sys
from pathlib import Path

import pytest

from adapters.shell import Shell, ShellError, ShellOptions


def python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


class TestShell:
    def test_exit_code_is_reported(self) -> None:
        task = Shell().exec(python("import sys; sys.exit(3)"))

        assert task.wait_for() == 3
        assert task.exit_value() == 3

    def test_exit_value_before_wait_raises(self) -> None:
        task = Shell().exec(python("pass"))

        with pytest.raises(ShellError):
            task.exit_value()
        task.wait_for()

    def test_output_lines_reach_the_sink(self) -> None:
        received: list[str] = []
        options = ShellOptions().with_output(received.append)
        code = "import sys; print('one'); print('two', file=sys.stderr, flush=True); print('three')"

        task = Shell().exec(python(code), options)
        task.wait_for()

        assert sorted(received) == ["one", "three", "two"]
        assert "one" in task.output

    def test_runs_in_directory_with_env(self, temp_dir: Path) -> None:
        options = ShellOptions().on_directory(temp_dir).with_env(HARNESS_VALUE="42")
        code = "import os; print(os.getcwd()); print(os.environ['HARNESS_VALUE'])"

        result = Shell().run(python(code), options)

        cwd, value = result.output.splitlines()
        assert Path(cwd).resolve() == temp_dir.resolve()
        assert value == "42"
        assert result.ok

    def test_missing_binary_raises(self) -> None:
        with pytest.raises(ShellError, match="not installed"):
            Shell().exec(["definitely-not-a-real-binary-xyz"])

    def test_missing_directory_raises(self, temp_dir: Path) -> None:
        options = ShellOptions(directory=temp_dir / "missing")

        with pytest.raises(ShellError, match="Not a directory"):
            Shell().exec(python("pass"), options)
