"""
Compensation policies.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AllOnFailurePolicy:
    """Compensate all completed steps on any failure."""
    pass

def all_on_failure() -> AllOnFailurePolicy:
    """Compensate all steps on failure."""
    return AllOnFailurePolicy()


@dataclass(frozen=True, slots=True)
class SkipPolicy:
    """Skip compensation entirely; completed steps stay applied."""
    pass

def skip() -> SkipPolicy:
    """No compensation."""
    return SkipPolicy()


type CompensationPolicy = AllOnFailurePolicy | SkipPolicy


__all__ = (
    "AllOnFailurePolicy",
    "all_on_failure",
    "SkipPolicy",
    "skip",
    "CompensationPolicy",
)
