"""Route table descriptors: operations, routes, controllers, matches."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class RouteOperation:
    """One HTTP method a route accepts.

    ``publish`` controls whether the method is advertised in the
    ``Allow`` header of synthesized 405 and OPTIONS responses.
    """

    method: str
    publish: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())


@dataclass(frozen=True, slots=True)
class Route:
    """A path pattern, the operations it accepts, and who handles it.

    Patterns use ``:name`` for dynamic segments::

        Route("/users/:id", (RouteOperation("GET"), RouteOperation("DELETE")), handler)
    """

    path: str
    operations: Sequence[RouteOperation]
    handler: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", tuple(self.operations))

    @property
    def methods(self) -> tuple[str, ...]:
        """Declared methods, in declaration order."""
        return tuple(op.method for op in self.operations)


@dataclass(frozen=True, slots=True)
class Controller:
    """A labelled group of routes sharing an optional pre-response transform."""

    label: str
    routes: Sequence[Route] = ()
    pre_response_handler: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "routes", tuple(self.routes))


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``users``  (is_param=False)
    Dynamic: ``:id``    (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful path match."""

    controller: Controller
    route: Route
    parameters: dict[str, str] = field(default_factory=dict)
