"""Request-scoped state threaded through every compilation stage."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from .errors import CompilationCancelled
from .logging import get_logger


@dataclass
class CompilationContext:
    """Carries the logger and cancellation signals for one compilation call.

    A context is created per call and never shared between calls. Stages call
    :meth:`checkpoint` at their boundaries so a deadline or an external
    cancellation stops work between units instead of mid-stage.
    """

    logger: logging.Logger = field(default_factory=lambda: get_logger("compile"))
    deadline: Optional[float] = None
    cancel_event: Optional[threading.Event] = None

    @classmethod
    def with_timeout(
        cls,
        timeout_seconds: float | None,
        *,
        logger: logging.Logger | None = None,
        cancel_event: threading.Event | None = None,
    ) -> "CompilationContext":
        deadline = None
        if timeout_seconds is not None and timeout_seconds > 0:
            deadline = time.monotonic() + timeout_seconds
        return cls(
            logger=logger or get_logger("compile"),
            deadline=deadline,
            cancel_event=cancel_event,
        )

    def cancelled_reason(self) -> Optional[str]:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return "cancellation requested"
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return "deadline exceeded"
        return None

    def checkpoint(self, where: str) -> None:
        """Raise CompilationCancelled if the call should stop before ``where``."""
        reason = self.cancelled_reason()
        if reason is None:
            return
        self.logger.warning("Stopping before %s: %s", where, reason)
        raise CompilationCancelled(f"{reason} before {where}")


__all__ = ["CompilationContext"]
