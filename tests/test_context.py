"""Tests for request-scoped compilation contexts."""

from __future__ import annotations

import logging
import threading
import time

import pytest

from spacecompiler.context import CompilationContext
from spacecompiler.errors import CompilationCancelled


def test_checkpoint_passes_without_deadline_or_event() -> None:
    context = CompilationContext()

    context.checkpoint("anything")

    assert context.cancelled_reason() is None


def test_checkpoint_raises_once_event_is_set() -> None:
    event = threading.Event()
    context = CompilationContext(cancel_event=event)
    context.checkpoint("first")

    event.set()

    with pytest.raises(CompilationCancelled, match="cancellation requested before second"):
        context.checkpoint("second")


def test_with_timeout_sets_future_deadline() -> None:
    context = CompilationContext.with_timeout(60)

    assert context.deadline is not None
    assert context.deadline > time.monotonic()
    assert CompilationContext.with_timeout(None).deadline is None
    assert CompilationContext.with_timeout(0).deadline is None


def test_expired_deadline_is_reported(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("compile-context-test")
    context = CompilationContext(logger=logger, deadline=time.monotonic() - 0.5)

    with caplog.at_level(logging.WARNING, logger="compile-context-test"):
        with pytest.raises(CompilationCancelled, match="deadline exceeded"):
            context.checkpoint("attention")

    assert "Stopping before attention" in caplog.text
