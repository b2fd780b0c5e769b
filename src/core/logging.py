"""Logging helpers for the harness CLI and test runs.

Console logging goes through Rich. The client's own console output (the
"Jenkins log") is a separate plain-text file and never passes through here.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PROJECT_PREFIXES = ("core", "adapters", "cli")


class ThirdPartyPrefixFilter(logging.Filter):
    """Prefix third-party records with a short token like "[httpx]"."""

    def filter(self, record: logging.LogRecord) -> bool:
        top = record.name.split(".")[0]
        record.prefix = "" if top in PROJECT_PREFIXES else f"[{top}] "
        return True


def config_console_handler(level: int = logging.INFO, color: bool = True) -> RichHandler:
    console = Console(stderr=True, color_system="auto" if color else None)
    handler = RichHandler(
        console=console,
        level=level,
        show_path=level <= logging.DEBUG,
        rich_tracebacks=True,
        markup=False,
    )
    handler.addFilter(ThirdPartyPrefixFilter())
    handler.setFormatter(logging.Formatter("%(prefix)s%(message)s"))
    return handler


def configure_logging(level: int | str = logging.INFO, color: bool = True) -> None:
    """Install a single Rich console handler on the root logger.

    Calling it again replaces the handler instead of stacking a second one.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError("Unknown log level")

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(config_console_handler(level, color))
    root.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(level, logging.WARNING))
