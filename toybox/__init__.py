"""
toybox — rental and sale storefront core.

    from toybox import pricing as P  # Rental days, VAT, totals
    from toybox import saga as S     # Compensated multi-step writes
    from toybox.services import Shop # Everything wired to one database
"""

from toybox import pricing
from toybox import saga
from toybox import lift
from toybox._errors import ErrorKind, ShopError, ShopErrors
from toybox._types import (
    Lazy,
    Pure,
    Money,
    LCR,
    NoError,
)

__version__ = "0.1.0"

__all__ = (
    "pricing",
    "saga",
    "lift",
    "ErrorKind",
    "ShopError",
    "ShopErrors",
    "Lazy",
    "Pure",
    "Money",
    "LCR",
    "NoError",
)
