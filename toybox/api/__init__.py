"""
HTTP API.

    uvicorn toybox.api:app
"""

from toybox.api._app import create_app
from toybox.api._deps import STATUS_CODES, ShopFailure, unwrap

app = create_app()

__all__ = ("app", "create_app", "STATUS_CODES", "ShopFailure", "unwrap")
