"""``waypoint routes``: list routes in the order they are matched."""

import argparse
import sys

from waypoint.cli._resolve import resolve_router
from waypoint.errors import ConfigurationError


def _methods_column(route) -> str:
    return ", ".join(op.method if op.publish else f"({op.method})" for op in route.operations)


def run_routes(args: argparse.Namespace) -> None:
    """Print CONTROLLER, METHODS, PATH, and HANDLER for every route.

    Unpublished methods are shown in parentheses.
    """
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = router.table.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for controller, route in routes:
        handler_name = getattr(route.handler, "__name__", None) or repr(route.handler)
        rows.append((controller.label, _methods_column(route), route.path, handler_name))

    headers = ("CONTROLLER", "METHODS", "PATH", "HANDLER")
    widths = [max(len(headers[i]), *(len(r[i]) for r in rows)) for i in range(3)]

    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format(*headers))
    sep_len = sum(widths) + 6 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
