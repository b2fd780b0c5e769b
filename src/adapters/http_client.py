"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, límites del pool y User-Agent en un solo sitio.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.domain.models import HttpClientConfig


def build_timeout(config: HttpClientConfig) -> httpx.Timeout:
    """Traduce connect/socket timeout a `httpx.Timeout` (None = sin límite)."""

    return httpx.Timeout(
        connect=config.connect_timeout,
        read=config.socket_timeout,
        write=config.socket_timeout,
        pool=config.connect_timeout,
    )


def build_limits(config: HttpClientConfig) -> httpx.Limits:
    """Traduce los límites del pool.

    httpx no tiene límite por ruta; el equivalente más cercano es el número de
    conexiones keep-alive, acotado por el total.
    """

    return httpx.Limits(
        max_connections=config.max_total_connections,
        max_keepalive_connections=min(
            config.max_connections_per_route, config.max_total_connections
        ),
    )


def build_http_client(
    config: HttpClientConfig | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` síncrono para descargas."""

    config = config or HttpClientConfig()
    headers: dict[str, str] = {}
    if config.user_agent:
        headers["User-Agent"] = config.user_agent
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=build_timeout(config),
        limits=build_limits(config),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
