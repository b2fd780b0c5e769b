"""Configuración del harness.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los tokens del cliente Meterian y de GitHub se leen con los mismos nombres
  que usa el plugin (`METERIAN_API_TOKEN`, `METERIAN_GITHUB_TOKEN`, ...).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import ClientConfiguration, HttpClientConfig


DEFAULT_BASE_URL = "https://www.meterian.com"


class ConfigurationError(Exception):
    """Raised when a required setting is missing or invalid."""


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "meterian-harness"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "meterian-harness"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "meterian-harness"
    return Path.home() / ".config" / "meterian-harness"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# meterian-harness user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class HarnessSettings(BaseSettings):
    """Configuración central del harness.

    Tokens y usuario de GitHub son opcionales aquí: los tests offline no los
    necesitan, y los escenarios en vivo llaman a `require_tokens()`.
    """

    model_config = SettingsConfigDict(
        env_prefix="METERIAN_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_token: str | None = Field(
        default=None,
        description="Token de la API de Meterian (METERIAN_API_TOKEN).",
    )
    github_token: str | None = Field(
        default=None,
        description="Token de GitHub usado por autofix para push y pull requests.",
    )
    github_user: str | None = Field(
        default=None,
        description="Usuario para los commits de autofix.",
    )
    github_email: str | None = Field(
        default=None,
        description="Email para los commits de autofix.",
    )
    workspace: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("WORKSPACE", "workspace"),
        description="Directorio de trabajo del job (WORKSPACE, como en Jenkins).",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=8,
        description="URL base del servicio Meterian.",
    )
    jvm_args: str = Field(
        default="",
        description="Argumentos extra para la JVM del cliente.",
    )
    java_binary: str = Field(
        default="java",
        min_length=1,
        description="Ejecutable de Java usado para lanzar el jar.",
    )
    cache_dir: Path = Field(
        default_factory=lambda: Path.home() / ".meterian",
        description="Directorio donde se cachea meterian-cli.jar.",
    )

    http_connect_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout de conexión (segundos). None = sin límite.",
    )
    http_socket_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout de lectura/escritura (segundos). None = sin límite.",
    )
    http_max_total_connections: int = Field(
        default=100,
        ge=1,
        description="Conexiones máximas del pool HTTP.",
    )
    http_max_connections_per_route: int = Field(
        default=100,
        ge=1,
        description="Conexiones keep-alive máximas por host.",
    )
    http_user_agent: str | None = Field(
        default=None,
        description="User-Agent para la descarga del cliente (opcional).",
    )

    def require_tokens(self) -> None:
        missing = []
        if not self.api_token:
            missing.append("METERIAN_API_TOKEN")
        if not self.github_token:
            missing.append("METERIAN_GITHUB_TOKEN")
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} has not been set, cannot run without a valid value"
            )

    def scratch_root(self) -> Path:
        """Carpeta donde se clona el repo de ejemplo: dentro de WORKSPACE o en `./target`."""

        base = self.workspace or Path.cwd() / "target"
        return base / "github-repo"

    def client_configuration(self) -> ClientConfiguration:
        self.require_tokens()
        return ClientConfiguration(
            base_url=self.base_url,
            api_token=self.api_token or "",
            jvm_args=self.jvm_args,
            github_token=self.github_token or "",
        )

    def http_config(self) -> HttpClientConfig:
        return HttpClientConfig(
            connect_timeout=self.http_connect_timeout,
            socket_timeout=self.http_socket_timeout,
            max_total_connections=self.http_max_total_connections,
            max_connections_per_route=self.http_max_connections_per_route,
            user_agent=self.http_user_agent,
        )
