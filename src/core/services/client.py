"""Cliente Meterian como proceso externo.

`MeterianClient` arma la línea de comandos (`java -jar meterian-cli.jar ...`)
y el entorno del proceso; `ClientRunner` lo ejecuta y vuelca la salida al
log del job con el prefijo `[meterian] `.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

from adapters.shell import Shell, ShellOptions
from core.domain.models import ClientConfiguration

logger = logging.getLogger(__name__)

LOG_PREFIX = "[meterian] "
AUTOFIX_FLAG = "--autofix"


class MeterianClient:
    """Invocación preparada del jar del cliente."""

    def __init__(
        self,
        configuration: ClientConfiguration,
        environment: Mapping[str, str],
        log: TextIO,
        jvm_args: str,
        client_jar: Path,
        java_binary: str = "java",
        shell: Shell | None = None,
    ) -> None:
        self.configuration = configuration
        self.environment = dict(environment)
        self.log = log
        self.jvm_args = jvm_args
        self.client_jar = Path(client_jar)
        self.java_binary = java_binary
        self._shell = shell or Shell()
        self._args: list[str] = []

    @classmethod
    def build(
        cls,
        configuration: ClientConfiguration,
        environment: Mapping[str, str],
        log: TextIO,
        jvm_args: str,
        client_jar: Path,
        **kwargs,
    ) -> "MeterianClient":
        return cls(configuration, environment, log, jvm_args, client_jar, **kwargs)

    def prepare(self, *args: str) -> "MeterianClient":
        self._args = list(args)
        return self

    @property
    def args(self) -> list[str]:
        return list(self._args)

    def is_autofix_mode(self) -> bool:
        return any(arg == AUTOFIX_FLAG or arg.startswith(AUTOFIX_FLAG + "=") for arg in self._args)

    @property
    def workspace(self) -> Path | None:
        value = self.environment.get("WORKSPACE")
        return Path(value) if value else None

    def command(self) -> list[str]:
        # explicit jvm args win over the configured ones
        jvm = shlex.split(self.jvm_args or self.configuration.jvm_args)
        return [
            self.java_binary,
            *jvm,
            "-jar",
            str(self.client_jar),
            *self._args,
            "--jenkins",
            f"--url={self.configuration.base_url}",
        ]

    def process_env(self) -> dict[str, str]:
        env = dict(self.environment)
        env["METERIAN_API_TOKEN"] = self.configuration.api_token
        if self.configuration.github_token:
            env["METERIAN_GITHUB_TOKEN"] = self.configuration.github_token
        return env

    def write_log(self, line: str) -> None:
        self.log.write(f"{LOG_PREFIX}{line}\n")
        self.log.flush()

    def run(self) -> int:
        """Ejecuta el cliente en WORKSPACE y devuelve el exit code."""

        options = ShellOptions(directory=self.workspace, env=self.process_env()).with_output(self.write_log)
        task = self._shell.exec(self.command(), options)
        return task.wait_for()


class ClientRunner:
    """Ejecuta un `MeterianClient` dejando traza en el log del job."""

    def __init__(self, client: MeterianClient, log: TextIO) -> None:
        self.client = client
        self.log = log

    def run(self, client: MeterianClient | None = None) -> int:
        client = client or self.client
        logger.info("Running Meterian client %s", " ".join(client.args))
        exit_code = client.run()
        logger.info("Meterian client exited with %s", exit_code)
        if exit_code != 0:
            self.log.write(f"meterian-harness: client exited with code {exit_code}\n")
            self.log.flush()
        return exit_code
