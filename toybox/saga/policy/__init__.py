"""
Saga execution policies.

Namespace: S.policy.*

Examples:
    await S.run(saga, S.policy.compensate.all_on_failure())
    await S.run(saga, S.policy.compensate.skip())
"""

from __future__ import annotations

from toybox.saga.policy._compensate import (
    AllOnFailurePolicy,
    SkipPolicy,
    CompensationPolicy,
    all_on_failure,
    skip,
)


# Namespace objects
class compensate:
    """Compensation policies."""

    all_on_failure = staticmethod(all_on_failure)
    skip = staticmethod(skip)


__all__ = (
    "compensate",
    "AllOnFailurePolicy",
    "SkipPolicy",
    "CompensationPolicy",
)
