"""Contratos de ejecución del cliente.

Por qué Protocol:
- El executor solo necesita algo con `run(client) -> int`; en tests se
  sustituye por un runner falso sin lanzar procesos.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from core.services.client import MeterianClient


@runtime_checkable
class Runner(Protocol):
    """Ejecuta un cliente preparado y devuelve su exit code."""

    def run(self, client: "MeterianClient | None" = None) -> int:
        ...
