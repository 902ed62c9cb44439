"""Method resolution and synthesized responses.

Once a path has matched, the requested method decides what happens:

1. ``OPTIONS``            -> :class:`OptionsProbe`, answered by the router
2. a declared method      -> :class:`Dispatch`, handed to the route's handler
3. anything else          -> :class:`MethodMismatch`, answered with 405

A path that matched nothing is :class:`NotFound`. None of these are
exceptions; each is turned into a response by :func:`to_response`.
"""

from dataclasses import dataclass
from typing import TypeAlias

from waypoint.http.response import Response
from waypoint.routing.route import Route, RouteMatch

OPTIONS = "OPTIONS"


def allowed_methods(route: Route) -> tuple[str, ...]:
    """Methods advertised by *route*, in declaration order.

    Published operations are advertised. A declared ``OPTIONS``
    operation is always listed since the router answers it itself.
    """
    return tuple(op.method for op in route.operations if op.publish or op.method == OPTIONS)


def allow_header(route: Route) -> str:
    """Value of the ``Allow`` header for *route*."""
    return ", ".join(allowed_methods(route))


@dataclass(frozen=True, slots=True)
class NotFound:
    """No route matched the request path."""

    status: int = 404


@dataclass(frozen=True, slots=True)
class MethodMismatch:
    """The path matched but the method is not declared on the route."""

    match: RouteMatch
    allow: str
    status: int = 405


@dataclass(frozen=True, slots=True)
class OptionsProbe:
    """An ``OPTIONS`` request against a matched route."""

    match: RouteMatch
    allow: str


@dataclass(frozen=True, slots=True)
class Dispatch:
    """The request goes to the matched route's handler."""

    match: RouteMatch


Outcome: TypeAlias = NotFound | MethodMismatch | OptionsProbe | Dispatch


def resolve(match: RouteMatch | None, method: str) -> Outcome:
    """Decide what to do with *method* against a path match."""
    if match is None:
        return NotFound()
    if method == OPTIONS:
        return OptionsProbe(match, allow_header(match.route))
    if method in match.route.methods:
        return Dispatch(match)
    return MethodMismatch(match, allow_header(match.route))


def to_response(
    outcome: NotFound | MethodMismatch | OptionsProbe,
    *,
    options_status: int = 200,
) -> Response:
    """Build the response for an outcome the router answers itself."""
    match outcome:
        case NotFound():
            return Response(status=outcome.status)
        case MethodMismatch():
            return Response(status=outcome.status, headers={"Allow": outcome.allow})
        case OptionsProbe():
            return Response(status=options_status, headers={"Allow": outcome.allow})
    msg = f"No synthesized response for {outcome!r}"
    raise TypeError(msg)
