"""Request and per-request context.

Unlike responses, these are mutable: the router enriches the request
in place with the parameters it extracted, and pre-response transforms
may stash values in ``RequestContext.state``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit


@dataclass(slots=True)
class Request:
    """An incoming HTTP request as seen by the router.

    ``url`` may be absolute (``http://example.com/users/1?x=y``) or
    origin-form (``/users/1?x=y``). Only its path takes part in matching.

    ``parameters`` stays ``None`` until the router matches a route, then
    holds the values bound to the route's dynamic segments.
    """

    url: str
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    parameters: dict[str, str] | None = None

    @property
    def path(self) -> str:
        """The raw (still percent-encoded) path component of ``url``."""
        if self.url.startswith("/"):
            # Origin form: a leading "//" is part of the path, not a host.
            path = self.url.partition("?")[0].partition("#")[0]
        else:
            path = urlsplit(self.url).path
        return path or "/"


@dataclass(slots=True)
class RequestContext:
    """Everything a handler receives for one request.

    ``request`` is optional at the type level so that a malformed
    context can reach ``handle()`` and be rejected there with a clear
    message rather than an ``AttributeError``.
    """

    request: Request | None
    state: dict[str, Any] = field(default_factory=dict)
