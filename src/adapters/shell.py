"""Ejecución de comandos externos.

Un `Shell` lanza el proceso y devuelve un `ShellTask`; el llamador decide
cuándo esperar. La salida (stdout + stderr combinados) se entrega línea a
línea a un sink opcional y se acumula en el task.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from core.domain.models import ShellResult

logger = logging.getLogger(__name__)


class ShellError(Exception):
    """Raised when a command cannot be started."""


@dataclass
class ShellOptions:
    """Directorio, entorno extra y sink de salida para un comando."""

    directory: Path | None = None
    env: dict[str, str] = field(default_factory=dict)
    inherit_env: bool = True
    on_output: Callable[[str], None] | None = None

    def on_directory(self, directory: Path | str) -> "ShellOptions":
        self.directory = Path(directory)
        return self

    def with_env(self, **values: str) -> "ShellOptions":
        self.env.update(values)
        return self

    def with_output(self, sink: Callable[[str], None]) -> "ShellOptions":
        self.on_output = sink
        return self

    def build_env(self) -> dict[str, str]:
        base = os.environ.copy() if self.inherit_env else {}
        base.update(self.env)
        return base


class ShellTask:
    """Proceso en ejecución."""

    def __init__(self, command: Sequence[str], process: subprocess.Popen, options: ShellOptions) -> None:
        self.command = list(command)
        self._process = process
        self._options = options
        self._lines: list[str] = []
        self._exit_code: int | None = None

    def wait_for(self) -> int:
        """Consume la salida hasta EOF y espera al proceso."""

        if self._exit_code is not None:
            return self._exit_code

        assert self._process.stdout is not None
        with self._process.stdout:
            for raw in self._process.stdout:
                line = raw.rstrip("\r\n")
                self._lines.append(line)
                if self._options.on_output is not None:
                    self._options.on_output(line)
        self._exit_code = self._process.wait()
        logger.debug("%s exited with %s", self.command[0], self._exit_code)
        return self._exit_code

    def exit_value(self) -> int:
        if self._exit_code is None:
            raise ShellError("Process has not finished, call wait_for() first")
        return self._exit_code

    @property
    def output(self) -> str:
        return "\n".join(self._lines)

    def result(self) -> ShellResult:
        return ShellResult(command=self.command, exit_code=self.wait_for(), output=self.output)


class Shell:
    """Lanza comandos externos con `subprocess.Popen`."""

    def exec(self, command: Sequence[str], options: ShellOptions | None = None) -> ShellTask:
        options = options or ShellOptions()
        logger.debug("Running %s in %s", " ".join(command), options.directory or Path.cwd())
        if options.directory is not None and not options.directory.is_dir():
            raise ShellError(f"Not a directory: {options.directory}")
        try:
            process = subprocess.Popen(
                list(command),
                cwd=options.directory,
                env=options.build_env(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise ShellError(f"{command[0]} is not installed or not in PATH") from exc
        return ShellTask(command, process, options)

    def run(self, command: Sequence[str], options: ShellOptions | None = None) -> ShellResult:
        return self.exec(command, options).result()
