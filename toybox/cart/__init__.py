"""
Cart — per-user cart aggregate.

    from toybox.cart import Cart

    cart = Cart(principal, carts, toys)
    await cart.add(toy_id, 1)
"""

from toybox.cart._aggregate import Cart, check_line, check_mode

__all__ = ("Cart", "check_line", "check_mode")
