"""Router import resolution: ``"module:attribute"`` to a router.

Shared by ``waypoint routes`` and ``waypoint match``.
"""

import importlib
from collections.abc import Sequence

from waypoint.routed import RoutedRequestHandler
from waypoint.routing.route import Controller


def _coerce(obj: object) -> RoutedRequestHandler | None:
    if isinstance(obj, RoutedRequestHandler):
        return obj
    if isinstance(obj, Sequence) and not isinstance(obj, str | bytes):
        if all(isinstance(item, Controller) for item in obj):
            return RoutedRequestHandler(list(obj))
    return None


def resolve_router(import_string: str) -> RoutedRequestHandler:
    """Resolve an import string to a ``RoutedRequestHandler``.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"router"``. The attribute may be a router, a sequence
    of ``Controller`` (a router is built from it), or a zero-argument
    factory returning either.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is none of the above.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    router = _coerce(obj)
    if router is None and callable(obj):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc
        router = _coerce(obj)

    if router is None:
        msg = (
            f"{import_string!r} resolved to {type(obj).__name__}, "
            "not a RoutedRequestHandler or a list of Controller"
        )
        raise TypeError(msg)
    return router
