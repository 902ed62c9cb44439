"""Waypoint exception hierarchy.

Shared across the route table, the routed handler, and the ASGI adapter
so every module raises and catches the same types.

Routing outcomes (404, 405, OPTIONS probes) are not errors. They are
values returned by the method resolver and turned into responses.
"""


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when a router cannot be built from what it was given.

    Covers a missing controller list, malformed path patterns, and
    duplicate methods on a route. Always raised at construction time,
    before any request is handled.
    """


class InvalidRequestError(WaypointError, ValueError):
    """Raised when ``handle()`` receives a context of the wrong shape.

    The message names the missing field (``context`` or
    ``context.request``).
    """
