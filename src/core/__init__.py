"""Core del harness.

Por qué:
- Configuración, dominio y servicios (orquestación) sin depender de la CLI.
"""
