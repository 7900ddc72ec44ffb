"""A small synchronous saga: run steps, undo the completed ones on failure.

Each step commits on its own (one Protean unit of work per command), so a
failure halfway through checkout cannot be rolled back by a transaction.
Instead every step that changes state registers a compensation, and when
a later step raises, the compensations run newest first before the
original error propagates.
"""

from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class Saga:
    def __init__(self, name: str, **context: Any) -> None:
        self.name = name
        self.context = context
        self._compensations: list[tuple[str, Callable[[], Any]]] = []
        self.completed: list[str] = []

    def step(self, label: str, action: Callable[[], Any], compensation: Callable[[], Any] | None = None) -> Any:
        result = action()
        self.completed.append(label)
        if compensation is not None:
            self._compensations.append((label, compensation))
        return result

    def compensate(self) -> None:
        """Run every registered compensation in reverse order.

        A failing compensation is logged and the rest still run.
        """
        while self._compensations:
            label, compensation = self._compensations.pop()
            try:
                compensation()
            except Exception:
                logger.exception("saga_compensation_failed", saga=self.name, step=label, **self.context)
            else:
                logger.info("saga_step_compensated", saga=self.name, step=label, **self.context)

    def __enter__(self) -> "Saga":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            logger.warning(
                "saga_aborted",
                saga=self.name,
                completed_steps=list(self.completed),
                error=str(exc),
                **self.context,
            )
            self.compensate()
        else:
            self._compensations.clear()
        return False
