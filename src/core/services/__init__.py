"""Servicios: preparación del repo, ejecución del cliente y verificación de logs."""
