"""
Request dependencies — the shop, the caller, and Result unwrapping.

The identity provider in front of the API authenticates the caller and
forwards who they are in X-User-* headers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request
from kungfu import Result, Ok, Error

from toybox._errors import ErrorKind, ShopError, ShopErrors
from toybox.domain import Principal, Role
from toybox.services import Shop

STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.NOT_AUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BUSINESS_RULE: 409,
    ErrorKind.EXTERNAL: 502,
    ErrorKind.CHECKOUT: 400,
}


class ShopFailure(Exception):
    """Raised by route handlers; rendered as ErrorOut by the app."""

    def __init__(self, error: ShopError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.error.kind]


def unwrap[T](result: Result[T, ShopError]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise ShopFailure(e)


def get_shop(request: Request) -> Shop:
    return request.app.state.shop


def get_principal(
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_email: Annotated[str, Header()] = "",
    x_user_role: Annotated[str, Header()] = Role.USER.value,
) -> Principal | None:
    if not x_user_id:
        return None
    try:
        role = Role(x_user_role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role: {x_user_role}") from None
    return Principal(user_id=x_user_id, email=x_user_email, role=role)


def require_principal(
    principal: Annotated[Principal | None, Depends(get_principal)],
) -> Principal:
    if principal is None:
        raise ShopFailure(ShopErrors.not_authenticated())
    return principal


ShopDep = Annotated[Shop, Depends(get_shop)]
MaybePrincipal = Annotated[Principal | None, Depends(get_principal)]
SignedIn = Annotated[Principal, Depends(require_principal)]


__all__ = (
    "STATUS_CODES",
    "ShopFailure",
    "unwrap",
    "get_shop",
    "get_principal",
    "require_principal",
    "ShopDep",
    "MaybePrincipal",
    "SignedIn",
)
