"""Invoke helpers: call sync or async collaborators uniformly.

Destination handlers and pre-response transforms may implement
``handle`` as ``def`` or ``async def``. Anything that calls a
collaborator goes through this helper so the check lives in one place.

Usage::

    from waypoint._internal.invoke import invoke

    response = await invoke(route.handler.handle, context)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
