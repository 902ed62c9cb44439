"""Routed request handler: matches, resolves, and dispatches one request.

The router is itself a ``Handler``, so it can be mounted as the
destination of another router's route.

Usage::

    router = RoutedRequestHandler([
        Controller(
            "users",
            routes=[
                Route("/users", [RouteOperation("GET"), RouteOperation("POST")], list_users),
                Route("/users/:id", [RouteOperation("GET")], show_user),
            ],
            pre_response_handler=authenticate,
        ),
    ])

    response = await router.handle(RequestContext(Request("/users/42", "GET")))
"""

import logging
from collections.abc import Sequence
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint.config import RouterConfig
from waypoint.errors import ConfigurationError, InvalidRequestError
from waypoint.http.request import RequestContext
from waypoint.routing.matcher import RouteTable
from waypoint.routing.methods import (
    Dispatch,
    MethodMismatch,
    NotFound,
    OptionsProbe,
    resolve,
    to_response,
)
from waypoint.routing.route import Controller

logger = logging.getLogger("waypoint.router")


class RoutedRequestHandler:
    """Routes requests to the handlers declared on a list of controllers.

    Parameters
    ----------
    controllers:
        Controllers in precedence order. Required; ``None`` raises
        ``ConfigurationError`` immediately.
    config:
        Optional :class:`RouterConfig`.
    """

    __slots__ = ("config", "table")

    def __init__(
        self,
        controllers: Sequence[Controller] | None,
        config: RouterConfig | None = None,
    ) -> None:
        if controllers is None:
            msg = "controllers must be defined."
            raise ConfigurationError(msg)
        self.config = config or RouterConfig()
        self.table = RouteTable(
            controllers,
            strict_slashes=self.config.strict_slashes,
            decode=self.config.decode_parameters,
        )

    async def can_handle(self, context: RequestContext | None) -> bool:
        """True when *context* carries a request. Routability is not checked."""
        return context is not None and getattr(context, "request", None) is not None

    async def handle(self, context: RequestContext | None) -> Any:
        """Produce the response for *context*.

        Returns a synthesized 404, 405, or OPTIONS response, or whatever
        the matched route's handler returns. Failures raised by the
        pre-response transform or the handler propagate unchanged.
        """
        if context is None:
            msg = "context must be defined."
            raise InvalidRequestError(msg)
        request = getattr(context, "request", None)
        if request is None:
            msg = "context.request must be defined."
            raise InvalidRequestError(msg)

        path = request.path
        outcome = resolve(self.table.match(path), request.method)

        match outcome:
            case NotFound():
                logger.debug("404 %s %s", request.method, path)
                return to_response(outcome)
            case MethodMismatch():
                logger.debug("405 %s %s (Allow: %s)", request.method, path, outcome.allow)
                return to_response(outcome)
            case OptionsProbe():
                logger.debug("OPTIONS %s (Allow: %s)", path, outcome.allow)
                return to_response(outcome, options_status=self.config.options_status)
            case Dispatch(match=matched):
                request.parameters = matched.parameters
                logger.debug(
                    "Dispatch %s %s -> %s %r",
                    request.method,
                    path,
                    matched.controller.label,
                    matched.route.path,
                )
                pre_response = matched.controller.pre_response_handler
                if pre_response is not None:
                    context = await invoke(pre_response.handle, context)
                return await invoke(matched.route.handler.handle, context)

        msg = f"Unhandled routing outcome {outcome!r}"
        raise TypeError(msg)

    def __repr__(self) -> str:
        return f"RoutedRequestHandler({len(self.table)} routes)"
