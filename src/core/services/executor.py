"""Executor estándar: decide cómo correr el cliente según sus flags."""

from __future__ import annotations

import logging

from core.domain.models import ExecutionOutcome
from core.interfaces.runner import Runner
from core.services.autofix import AutofixFeature
from core.services.client import MeterianClient

logger = logging.getLogger(__name__)


class StandardExecutor:
    def __init__(self, runner: Runner, autofix: AutofixFeature) -> None:
        self.runner = runner
        self.autofix = autofix

    def run(self, client: MeterianClient) -> ExecutionOutcome:
        autofix_mode = client.is_autofix_mode()
        try:
            if autofix_mode:
                exit_code = self.autofix.execute(client)
            else:
                exit_code = self.runner.run(client)
        except Exception:
            logger.exception("Meterian client run failed")
            raise

        log_name = getattr(client.log, "name", None)
        return ExecutionOutcome(
            exit_code=exit_code,
            log_file=log_name if isinstance(log_name, str) else None,
            autofix=autofix_mode,
        )
