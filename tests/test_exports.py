import importlib

import pytest


@pytest.mark.parametrize(
    "module",
    ["toybox", "toybox._types", "toybox.lift", "toybox.store", "toybox.checkout", "toybox.catalog"],
)
def test_every_exported_name_resolves(module: str) -> None:
    mod = importlib.import_module(module)

    missing = [name for name in mod.__all__ if not hasattr(mod, name)]

    assert missing == []


def test_lift_exports_only_what_toybox_uses() -> None:
    import toybox.lift

    assert set(toybox.lift.__all__) == {"pure", "fail", "catching_async", "from_result", "store_call"}
