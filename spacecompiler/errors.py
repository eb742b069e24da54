"""Exception types raised inside compilation stages."""

from __future__ import annotations


class CompilationError(RuntimeError):
    """Base class for failures raised while compiling a unit of work."""


class InputError(CompilationError):
    """Raised when required structural input is missing from a request."""


class DescriptorError(CompilationError):
    """Raised when a project descriptor cannot be parsed."""


class CompilationCancelled(CompilationError):
    """Raised at a checkpoint once the deadline passed or cancellation was requested."""


class StageFailure(CompilationError):
    """Wraps an unexpected exception raised by a pipeline stage for one unit."""

    def __init__(self, stage: str, unit: str, cause: BaseException) -> None:
        self.stage = stage
        self.unit = unit
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")


__all__ = [
    "CompilationCancelled",
    "CompilationError",
    "DescriptorError",
    "InputError",
    "StageFailure",
]
