"""
Saga — multi-step writes with compensation.

    from toybox import saga as S

    saga = S.step(action, compensate).then(lambda v: S.step(action2, compensate2))
    result = await S.run(saga)
"""

from __future__ import annotations

from toybox.saga._types import (
    CompensatorWithValue,
    SagaStep,
    SagaExpr,
    SagaResult,
    SagaError,
    Then,
)
from toybox.saga._step import step, from_async
from toybox.saga._run import run
from toybox.saga import policy

__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "SagaExpr",
    "SagaResult",
    "SagaError",
    "Then",
    "step",
    "from_async",
    "run",
    "policy",
)
