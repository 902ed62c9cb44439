"""Waypoint: an ordered, controller-based HTTP request router.

Routes are grouped into controllers, matched segment by segment in
registration order, and dispatched to any object with ``handle`` and
``can_handle`` methods.

Basic usage::

    from waypoint import Controller, RoutedRequestHandler, Route, RouteOperation

    router = RoutedRequestHandler([
        Controller("users", routes=[
            Route("/users/:id", [RouteOperation("GET")], show_user),
        ]),
    ])

    response = await router.handle(context)
"""

__version__ = "0.1.0"
__all__ = [
    "ASGIAdapter",
    "ConfigurationError",
    "Controller",
    "Handler",
    "InvalidRequestError",
    "Request",
    "RequestContext",
    "Response",
    "Route",
    "RouteOperation",
    "RoutedRequestHandler",
    "RouterConfig",
    "WaypointError",
    "handler_from",
]

_LAZY: dict[str, str] = {
    "ASGIAdapter": "waypoint.asgi",
    "ConfigurationError": "waypoint.errors",
    "Controller": "waypoint.routing.route",
    "Handler": "waypoint.handler",
    "InvalidRequestError": "waypoint.errors",
    "Request": "waypoint.http.request",
    "RequestContext": "waypoint.http.request",
    "Response": "waypoint.http.response",
    "Route": "waypoint.routing.route",
    "RouteOperation": "waypoint.routing.route",
    "RoutedRequestHandler": "waypoint.routed",
    "RouterConfig": "waypoint.config",
    "WaypointError": "waypoint.errors",
    "handler_from": "waypoint.handler",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import waypoint`` fast while providing a flat top-level API.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module 'waypoint' has no attribute {name!r}"
        raise AttributeError(msg)
    import importlib

    return getattr(importlib.import_module(module_name), name)
