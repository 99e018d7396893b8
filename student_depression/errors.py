"""
student_depression/errors.py

Exceptions raised by the pipeline stages. Each one records the stage that
failed so the CLI can report "<stage>: <reason>" and abort the run.
"""

from __future__ import annotations

from typing import Any, Optional


class PipelineError(Exception):
    """Base class for fatal pipeline failures."""

    stage = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.stage}: {self.message}"


class RecodeError(PipelineError):
    """Schema or vocabulary mismatch in the raw survey table."""

    stage = "recode"

    def __init__(self, field: str, value: Any = None, message: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        if message is None:
            message = f"unrecognized value {value!r} in field '{field}'"
        super().__init__(message)


class BalanceError(PipelineError):
    """Label column missing or degenerate in the training set."""

    stage = "balance"


class FitError(PipelineError):
    """Training data empty or single-class."""

    stage = "fit"


class EvalError(PipelineError):
    """Test set empty or carrying labels the model never saw."""

    stage = "evaluate"
