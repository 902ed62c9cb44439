"""Path matching over an ordered, flattened route table.

Precedence is registration order: controllers in the order given,
routes in the order declared. The first route whose segments line up
with the request path wins, so literal routes must be declared before
dynamic routes that overlap them.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import unquote

from waypoint.errors import ConfigurationError
from waypoint.routing.route import Controller, PathSegment, Route, RouteMatch

logger = logging.getLogger("waypoint.routing")


def parse_path(pattern: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/users"          -> (PathSegment("users"),)
        "/users/:id"      -> (PathSegment("users"), PathSegment(":id", is_param=True, param_name="id"))
        "/"               -> (PathSegment(""),)

    Raises ``ConfigurationError`` for patterns that do not start with
    ``/``, dynamic segments without a name, and repeated names.
    """
    if not pattern.startswith("/"):
        msg = f"Route pattern {pattern!r} must start with '/'."
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in pattern[1:].split("/"):
        if not part.startswith(":"):
            segments.append(PathSegment(value=part))
            continue
        name = part[1:]
        if not name:
            msg = f"Route pattern {pattern!r} has a dynamic segment without a name."
            raise ConfigurationError(msg)
        if name in seen:
            msg = f"Route pattern {pattern!r} binds {name!r} more than once."
            raise ConfigurationError(msg)
        seen.add(name)
        segments.append(PathSegment(value=part, is_param=True, param_name=name))
    return tuple(segments)


def split_path(path: str, *, strict_slashes: bool = True) -> list[str]:
    """Split a request path into raw segments.

    The leading ``/`` is dropped; every other ``/`` delimits a segment,
    so ``/one/`` yields ``["one", ""]``. With ``strict_slashes=False``
    a single trailing ``/`` is ignored (``/`` itself is left alone).
    """
    if not strict_slashes and len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    if path.startswith("/"):
        path = path[1:]
    return path.split("/")


def _bind(
    segments: tuple[PathSegment, ...],
    parts: list[str],
    decode: bool,
) -> dict[str, str] | None:
    """Line *parts* up against *segments*; return bound parameters or ``None``."""
    if len(segments) != len(parts):
        return None
    params: dict[str, str] = {}
    for seg, part in zip(segments, parts, strict=True):
        if seg.is_param:
            if not part:
                return None
            params[seg.param_name] = unquote(part) if decode else part  # type: ignore[index]
        elif seg.value != part:
            return None
    return params


def match_path(
    routes: Sequence[Route],
    path: str,
    *,
    strict_slashes: bool = True,
    decode: bool = True,
) -> tuple[Route, dict[str, str]] | None:
    """Return ``(route, parameters)`` for the first route matching *path*.

    Stateless counterpart of :meth:`RouteTable.match` for a bare list of
    routes. Patterns are parsed on every call.
    """
    parts = split_path(path, strict_slashes=strict_slashes)
    for route in routes:
        params = _bind(parse_path(route.path), parts, decode)
        if params is not None:
            return route, params
    return None


@dataclass(frozen=True, slots=True)
class _Entry:
    """One row of the compiled table."""

    controller: Controller
    route: Route
    segments: tuple[PathSegment, ...]


class RouteTable:
    """Immutable, registration-ordered table of (controller, route) pairs.

    Usage::

        table = RouteTable([Controller("users", routes=[...])])
        match = table.match("/users/42")

    Built once, read concurrently without locks.
    """

    __slots__ = ("_decode", "_entries", "_strict_slashes")

    def __init__(
        self,
        controllers: Sequence[Controller],
        *,
        strict_slashes: bool = True,
        decode: bool = True,
    ) -> None:
        entries: list[_Entry] = []
        for controller in controllers:
            for route in controller.routes:
                _check_route(controller, route)
                entries.append(_Entry(controller, route, parse_path(route.path)))
        self._entries: tuple[_Entry, ...] = tuple(entries)
        self._strict_slashes = strict_slashes
        self._decode = decode
        logger.debug(
            "Compiled %d routes from %d controllers", len(self._entries), len(controllers)
        )

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def routes(self) -> list[tuple[Controller, Route]]:
        """All (controller, route) pairs in matching order."""
        return [(entry.controller, entry.route) for entry in self._entries]

    def match(self, path: str) -> RouteMatch | None:
        """Return the first match for *path*, or ``None`` if nothing fits."""
        parts = split_path(path, strict_slashes=self._strict_slashes)
        for entry in self._entries:
            params = _bind(entry.segments, parts, self._decode)
            if params is not None:
                return RouteMatch(controller=entry.controller, route=entry.route, parameters=params)
        return None


def _check_route(controller: Controller, route: Route) -> None:
    """Reject routes the resolver could not answer for deterministically."""
    if route.handler is None:
        msg = f"Route {route.path!r} in controller {controller.label!r} has no handler."
        raise ConfigurationError(msg)
    seen: set[str] = set()
    for method in route.methods:
        if method in seen:
            msg = (
                f"Route {route.path!r} in controller {controller.label!r} "
                f"declares {method} more than once."
            )
            raise ConfigurationError(msg)
        seen.add(method)
