"""
Admin — toy deletion with audit trail, rental returns, dashboard.
"""

from toybox.admin._audit import AuditTrail, PLACEHOLDER_ADMIN_ID, UNKNOWN_TOY
from toybox.admin._deletion import ToyDeletion
from toybox.admin._rentals import RentalDesk
from toybox.admin._dashboard import dashboard

__all__ = (
    "AuditTrail",
    "PLACEHOLDER_ADMIN_ID",
    "UNKNOWN_TOY",
    "ToyDeletion",
    "RentalDesk",
    "dashboard",
)
