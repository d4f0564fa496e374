"""
Storefront errors — one error value for every service operation.

Operations return Result[T, ShopError]; nothing is raised across the
service boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ErrorKind(Enum):
    """Kinds of storefront errors."""

    VALIDATION = auto()  # Rejected before any store call
    NOT_AUTHENTICATED = auto()  # No principal
    FORBIDDEN = auto()  # Principal lacks the admin role
    NOT_FOUND = auto()
    BUSINESS_RULE = auto()  # e.g. deleting a toy with active rentals
    EXTERNAL = auto()  # Store / network failure
    CHECKOUT = auto()  # A checkout step failed


@dataclass(frozen=True, slots=True)
class ShopError:
    """
    Operation error.

    Note: step is set only for CHECKOUT errors and names the failed step.
    """

    kind: ErrorKind
    message: str
    step: str | None = None

    def __str__(self) -> str:
        return self.message


class ShopErrors:
    @staticmethod
    def validation(msg: str) -> ShopError:
        return ShopError(ErrorKind.VALIDATION, msg)

    @staticmethod
    def not_authenticated() -> ShopError:
        return ShopError(ErrorKind.NOT_AUTHENTICATED, "Sign in to continue")

    @staticmethod
    def forbidden(msg: str = "Only administrators can do this") -> ShopError:
        return ShopError(ErrorKind.FORBIDDEN, msg)

    @staticmethod
    def not_found(entity: str, id: str) -> ShopError:
        return ShopError(ErrorKind.NOT_FOUND, f'{entity} "{id}" not found')

    @staticmethod
    def business_rule(msg: str) -> ShopError:
        return ShopError(ErrorKind.BUSINESS_RULE, msg)

    @staticmethod
    def external(msg: str) -> ShopError:
        return ShopError(ErrorKind.EXTERNAL, msg)

    @staticmethod
    def checkout(step: str, cause: ShopError) -> ShopError:
        return ShopError(ErrorKind.CHECKOUT, cause.message, step=step)


__all__ = ("ErrorKind", "ShopError", "ShopErrors")
