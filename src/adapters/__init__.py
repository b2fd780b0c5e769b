"""Adaptadores de infraestructura.

Por qué está separado:
- HTTP (httpx), git y procesos son detalles de I/O.
- El Core los usa a través de funciones/clases pequeñas y fáciles de sustituir en tests.
"""
