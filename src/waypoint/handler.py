"""Handler protocol: the one capability every collaborator shares.

Destination handlers, pre-response transforms, and the router itself
all expose the same two methods::

    class Greeter:
        async def handle(self, context):
            return Response(body="hello")

        async def can_handle(self, context):
            return True

No base class required. The router checks the shape, not the lineage.
Either method may be ``def`` or ``async def``.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from waypoint._internal.invoke import invoke
from waypoint.http.request import RequestContext


@runtime_checkable
class Handler(Protocol):
    """Protocol for anything the router can dispatch to.

    Destination handlers return a ``Response`` from ``handle``.
    Pre-response transforms return the ``RequestContext`` to pass on.
    """

    def handle(self, context: RequestContext) -> Any: ...

    def can_handle(self, context: RequestContext | None) -> Any: ...


@dataclass(frozen=True, slots=True)
class FunctionHandler:
    """Adapts a plain callable to the ``Handler`` protocol.

    Built by :func:`handler_from`; rarely constructed directly.
    """

    func: Callable[[RequestContext], Any]
    predicate: Callable[[RequestContext | None], Any] | None = None

    async def handle(self, context: RequestContext) -> Any:
        return await invoke(self.func, context)

    async def can_handle(self, context: RequestContext | None) -> bool:
        if self.predicate is None:
            return True
        return bool(await invoke(self.predicate, context))

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"FunctionHandler({name})"


def handler_from(
    func: Callable[[RequestContext], Any],
    *,
    can_handle: Callable[[RequestContext | None], Any] | None = None,
) -> FunctionHandler:
    """Wrap *func* so it can be used as a route handler or transform.

    Usage::

        async def show_user(context):
            return Response(body=context.request.parameters["id"])

        Route("/users/:id", (RouteOperation("GET"),), handler_from(show_user))
    """
    return FunctionHandler(func, can_handle)
