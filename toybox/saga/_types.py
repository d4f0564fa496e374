"""
Saga types — steps, chains and the two outcomes of a run.

A step pairs a lazy store write with the call that undoes it. Steps carry
a name so a failed run can say where it stopped.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Callable, Awaitable
from kungfu import LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Compensator — Undo Action
# ═══════════════════════════════════════════════════════════════════════════════

type CompensatorWithValue[T] = Callable[[T], Awaitable[None]]
"""Compensation function that receives the action result and undoes it."""

# ═══════════════════════════════════════════════════════════════════════════════
# SagaStep — Single Step with Compensation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaStep[T, E]:
    """
    One write and its undo.

    compensate receives the value the action produced. It is recorded only
    once the action succeeds; steps without one (final, irreversible writes)
    are skipped during rollback.
    """

    action: LazyCoroResult[T, E]
    compensate: CompensatorWithValue[T] | None
    name: str = ""

    def then[U, E2](
        self,
        f: Callable[[T], SagaStep[U, E2]],
    ) -> Then[T, U, E, E2]:
        """Chain another saga step after this one."""
        return Then(self, f)


# ═══════════════════════════════════════════════════════════════════════════════
# Saga AST — Composition
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Then[T, U, E, E2]:
    """
    Sequential composition (monadic bind).

    inner may itself be a Then, so chains of any length nest to the left:
        step_a.then(f).then(g)  ==  Then(Then(step_a, f), g)
    """

    inner: SagaStep[T, E] | Then[object, T, object, E]
    f: Callable[[T], SagaStep[U, E2]]

    def then[V, E3](
        self,
        g: Callable[[U], SagaStep[V, E3]],
    ) -> Then[U, V, E | E2, E3]:
        """Append another step to the chain."""
        return Then(self, g)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════════════
# Result Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaResult[T]:
    """Value of the last step plus how many steps ran."""

    value: T
    steps_executed: int
    compensators_recorded: int


@dataclass(frozen=True, slots=True)
class SagaError[E]:
    """
    The failing step's error and what rollback managed.

    rollback_complete is False when a compensator raised, or when the policy
    skipped compensation and some completed step had one.
    """

    error: E
    step_failed: int
    step_name: str
    compensators_run: int
    compensators_failed: int
    rollback_complete: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Saga Expression
# ═══════════════════════════════════════════════════════════════════════════════

type SagaExpr[T, E] = SagaStep[T, E] | Then[object, T, object, E]

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "Then",
    "SagaExpr",
    "SagaResult",
    "SagaError",
)
