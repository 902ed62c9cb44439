"""Test helpers for route tables built on waypoint.

Provides a recording fake handler and a context factory so user code
can assert which handler a request reached, and with what::

    from waypoint.testing import RecordingHandler, make_context

    users = RecordingHandler()
    router = RoutedRequestHandler([Controller("users", [Route("/users/:id", [RouteOperation("GET")], users)])])

    await router.handle(make_context("/users/7"))
    assert users.calls[0].request.parameters == {"id": "7"}
"""

from collections.abc import Callable, Mapping
from typing import Any

from waypoint.http.request import Request, RequestContext
from waypoint.http.response import Response


def make_context(
    path: str,
    method: str = "GET",
    *,
    headers: Mapping[str, str] | None = None,
    base: str = "http://example.com",
) -> RequestContext:
    """Build a ``RequestContext`` for *method* *path* against *base*."""
    return RequestContext(Request(url=f"{base}{path}", method=method, headers=dict(headers or {})))


class RecordingHandler:
    """A ``Handler`` that records every context it is given.

    ``handle`` returns *response* (default ``Response(200)``), or the
    result of calling it when it is callable. Set *error* to make every
    call raise instead.
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("calls", "error", "response")

    def __init__(
        self,
        response: Response | Callable[[RequestContext], Any] | None = None,
        *,
        error: BaseException | None = None,
    ) -> None:
        self.response = response if response is not None else Response()
        self.error = error
        self.calls: list[RequestContext] = []

    async def handle(self, context: RequestContext) -> Any:
        self.calls.append(context)
        if self.error is not None:
            raise self.error
        if callable(self.response):
            return self.response(context)
        return self.response

    async def can_handle(self, context: RequestContext | None) -> bool:
        return True

    @property
    def call_count(self) -> int:
        return len(self.calls)


class PassThroughTransform(RecordingHandler):
    """A recording pre-response transform that returns its input."""

    __slots__ = ()

    def __init__(self, *, error: BaseException | None = None) -> None:
        super().__init__(lambda context: context, error=error)
