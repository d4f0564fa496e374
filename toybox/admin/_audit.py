"""
Audit trail — where toy deletion outcomes are written.

DeletionLogRepository satisfies AuditTrail; tests swap in their own.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from toybox.domain import DeletionLogEntry

PLACEHOLDER_ADMIN_ID = "00000000-0000-0000-0000-000000000000"
UNKNOWN_TOY = "Unknown"


@runtime_checkable
class AuditTrail(Protocol):
    async def record(self, entry: DeletionLogEntry) -> None: ...


__all__ = ("AuditTrail", "PLACEHOLDER_ADMIN_ID", "UNKNOWN_TOY")
