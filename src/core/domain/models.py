"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta de la configuración del cliente y del pool HTTP antes
  de lanzar procesos o abrir conexiones.
- Los resultados (ejecución, verificación de logs) se pueden serializar tal
  cual para reportes en CI.

Nota:
- Estos modelos describen *qué* se ejecuta y verifica, no *cómo*.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ClientConfiguration(BaseModel):
    """Configuración con la que se construye el cliente Meterian."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        ...,
        min_length=8,
        description="URL base del servicio Meterian.",
    )
    api_token: str = Field(
        ...,
        min_length=1,
        description="Token de la API de Meterian.",
    )
    jvm_args: str = Field(
        default="",
        description="Argumentos de la JVM, separados por espacios.",
    )
    github_token: str = Field(
        default="",
        description="Token de GitHub que el cliente usa para abrir pull requests.",
    )


class HttpClientConfig(BaseModel):
    """Parámetros del pool HTTP usado para descargar el cliente.

    `None` en los timeouts significa sin límite.
    """

    model_config = ConfigDict(frozen=True)

    connect_timeout: float | None = Field(default=None, gt=0)
    socket_timeout: float | None = Field(default=None, gt=0)
    max_total_connections: int = Field(default=100, ge=1)
    max_connections_per_route: int = Field(default=100, ge=1)
    user_agent: str | None = Field(default=None)


class GitRepository(BaseModel):
    """Repositorio remoto en GitHub (org + nombre)."""

    model_config = ConfigDict(frozen=True)

    org: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    host: str = Field(default="github.com", min_length=1)

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.name}"

    @property
    def ssh_url(self) -> str:
        return f"git@{self.host}:{self.full_name}.git"

    def https_url(self, user: str | None = None, token: str | None = None) -> str:
        """URL HTTPS, con credenciales embebidas si se pasan."""

        if token:
            credentials = f"{user or 'x-access-token'}:{token}@"
        else:
            credentials = ""
        return f"https://{credentials}{self.host}/{self.full_name}.git"


class ShellResult(BaseModel):
    """Resultado de un comando externo ya terminado."""

    command: list[str] = Field(default_factory=list)
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class VerificationReport(BaseModel):
    """Resultado de comprobar líneas esperadas contra un log."""

    log_file: Path
    expected: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)

    @property
    def found(self) -> list[str]:
        return [line for line in self.expected if line not in self.missing]

    @property
    def ok(self) -> bool:
        return not self.missing


class ExecutionOutcome(BaseModel):
    """Resultado de una ejecución del cliente a través de un executor."""

    exit_code: int
    log_file: Path | None = None
    autofix: bool = False

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
