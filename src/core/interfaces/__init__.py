"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los runners concretos.
- Permite invertir dependencias: el Core depende de abstracciones.
"""
