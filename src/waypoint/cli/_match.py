"""``waypoint match``: show how one request would be routed.

By default only the resolver runs and no handler is called. With
``--dispatch`` the request goes through the router for real and the
response is printed.
"""

import argparse
import sys

import anyio

from waypoint.cli._resolve import resolve_router
from waypoint.errors import ConfigurationError
from waypoint.http.request import Request, RequestContext
from waypoint.routed import RoutedRequestHandler
from waypoint.routing.methods import Dispatch, MethodMismatch, NotFound, OptionsProbe, resolve


def describe(router: RoutedRequestHandler, method: str, path: str) -> str:
    """Describe the routing outcome for *method* *path* without dispatching."""
    request = Request(url=path, method=method)
    outcome = resolve(router.table.match(request.path), method)
    match outcome:
        case NotFound():
            return "404 Not Found"
        case MethodMismatch():
            return f"405 Method Not Allowed\nAllow: {outcome.allow}"
        case OptionsProbe():
            return f"{router.config.options_status} OPTIONS\nAllow: {outcome.allow}"
        case Dispatch(match=matched):
            lines = [f"dispatch -> {matched.controller.label} {matched.route.path}"]
            lines.extend(f"  {name} = {value!r}" for name, value in matched.parameters.items())
            if matched.controller.pre_response_handler is not None:
                lines.append("  (pre-response transform runs first)")
            return "\n".join(lines)
    return repr(outcome)


async def _dispatch(router: RoutedRequestHandler, method: str, path: str) -> str:
    response = await router.handle(RequestContext(Request(url=path, method=method)))
    lines = [str(getattr(response, "status", response))]
    lines.extend(f"{name}: {value}" for name, value in getattr(response, "headers", {}).items())
    body = getattr(response, "body", None)
    if body is not None:
        lines.extend(("", str(body)))
    return "\n".join(lines)


def run_match(args: argparse.Namespace) -> None:
    """Print how ``args.method`` ``args.path`` is routed."""
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    method = args.method.upper()
    if args.dispatch:
        print(anyio.run(_dispatch, router, method, args.path))
    else:
        print(describe(router, method, args.path))
