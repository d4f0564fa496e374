"""
Saga execution with automatic rollback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from kungfu import Result, Ok, Error

from toybox.saga._types import (
    SagaStep,
    SagaExpr,
    SagaResult,
    SagaError,
    Then,
    CompensatorWithValue,
)
from toybox.saga.policy._compensate import (
    AllOnFailurePolicy,
    CompensationPolicy,
    SkipPolicy,
    all_on_failure,
)

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Recorded Compensator
# ═══════════════════════════════════════════════════════════════════════════════

type RecordedCompensator[T] = tuple[str, T, CompensatorWithValue[T]]


@dataclass(slots=True)
class _Trace:
    """Mutable bookkeeping for one saga execution."""

    compensators: list[RecordedCompensator[Any]] = field(default_factory=list)
    steps: int = 0
    failed_name: str = ""


# ═══════════════════════════════════════════════════════════════════════════════
# run_step() — Execute single step
# ═══════════════════════════════════════════════════════════════════════════════

async def run_step[T, E](
    step: SagaStep[T, E],
    trace: _Trace,
) -> Result[T, E]:
    """Execute single step, recording compensator on success."""
    trace.steps += 1
    result = await step.action
    match result:
        case Ok(value):
            if step.compensate is not None:
                trace.compensators.append((step.name, value, step.compensate))
            return Ok(value)
        case Error(e):
            trace.failed_name = step.name
            return Error(e)


async def _execute(expr: SagaExpr[Any, Any], trace: _Trace) -> Result[Any, Any]:
    """Walk the Then chain left to right, stopping at the first failure."""
    match expr:
        case SagaStep():
            return await run_step(expr, trace)
        case Then(inner, f):
            inner_result = await _execute(inner, trace)
            match inner_result:
                case Ok(value):
                    return await _execute(f(value), trace)
                case Error(e):
                    return Error(e)
    raise TypeError(f"Not a saga expression: {expr!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# run_compensators() — Rollback
# ═══════════════════════════════════════════════════════════════════════════════

async def run_compensators(
    compensators: list[RecordedCompensator[Any]],
) -> tuple[int, int]:
    """Run compensators in reverse. Returns (run, failed)."""
    comp_run = 0
    comp_failed = 0

    for name, value, comp in reversed(compensators):
        try:
            await comp(value)
            comp_run += 1
        except Exception:
            logger.exception("Compensation failed for step %r", name)
            comp_failed += 1

    return comp_run, comp_failed


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Execute Saga
# ═══════════════════════════════════════════════════════════════════════════════

async def run[T, E](
    saga: SagaExpr[T, E],
    policy: CompensationPolicy = all_on_failure(),
) -> Result[SagaResult[T], SagaError[E]]:
    """
    Execute a step or a chain of steps with rollback on failure.

    On success: returns SagaResult with value and metadata.
    On failure: applies the compensation policy, returns SagaError.
        all_on_failure() — run recorded compensators in reverse
        skip()           — leave completed steps in place

    Example:
        from toybox import saga as S

        result = await S.run(
            S.step(create_order, delete_order, name="create_order")
            .then(lambda order: S.step(add_items(order), delete_items(order))),
        )

        match result:
            case Ok(r):
                print(f"Success: {r.value}")
            case Error(e):
                print(f"Failed at step {e.step_name}")
    """
    trace = _Trace()

    result = await _execute(saga, trace)

    match result:
        case Ok(value):
            return Ok(SagaResult(
                value=value,
                steps_executed=trace.steps,
                compensators_recorded=len(trace.compensators),
            ))

        case Error(error):
            match policy:
                case AllOnFailurePolicy():
                    comp_run, comp_failed = await run_compensators(trace.compensators)
                    rollback_complete = comp_failed == 0
                case SkipPolicy():
                    comp_run, comp_failed = 0, 0
                    rollback_complete = not trace.compensators

            return Error(SagaError(
                error=error,
                step_failed=trace.steps,
                step_name=trace.failed_name,
                compensators_run=comp_run,
                compensators_failed=comp_failed,
                rollback_complete=rollback_complete,
            ))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("run", "run_step", "run_compensators")
