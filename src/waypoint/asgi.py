"""ASGI adapter: serve any waypoint ``Handler`` from an ASGI server.

The only module that touches raw ASGI. Converts scope dicts to a
``RequestContext``, awaits the handler, and sends the ``Response``
back through ASGI ``send()``.

Usage::

    app = ASGIAdapter(router)
    # granian --interface asgi myapp:app
"""

import json
import logging
from typing import Any

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint._internal.invoke import invoke
from waypoint.http.request import Request, RequestContext
from waypoint.http.response import Response

logger = logging.getLogger("waypoint.asgi")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_body(body: Any) -> tuple[bytes, str | None]:
    """Encode a response body, returning ``(bytes, default content type)``."""
    if body is None:
        return b"", None
    if isinstance(body, bytes):
        return body, "application/octet-stream"
    if isinstance(body, str):
        return body.encode("utf-8"), "text/plain; charset=utf-8"
    return json.dumps(body).encode("utf-8"), "application/json"


def _headers_from_scope(raw: Any) -> dict[str, str]:
    """Decode ASGI header pairs, joining repeated names with ``", "``."""
    headers: dict[str, str] = {}
    for name, value in raw:
        key = name.decode("latin-1").lower()
        text = value.decode("latin-1")
        headers[key] = f"{headers[key]}, {text}" if key in headers else text
    return headers


def context_from_scope(scope: Scope, receive: Receive) -> RequestContext:
    """Build a ``RequestContext`` from an ASGI HTTP scope."""
    raw_path = scope.get("raw_path")
    url = raw_path.decode("latin-1") if raw_path else scope["path"]
    query = scope.get("query_string", b"")
    if query:
        url = f"{url}?{query.decode('latin-1')}"
    request = Request(
        url=url,
        method=scope["method"],
        headers=_headers_from_scope(scope.get("headers", ())),
    )
    return RequestContext(request=request, state={"receive": receive})


async def send_response(response: Response, send: Send) -> None:
    """Translate a waypoint Response into ASGI send() calls."""
    body, content_type = encode_body(response.body)
    if not _body_allowed(response.status):
        body = b""

    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers.items()
    ]
    if content_type and body and response.header("content-type") is None:
        raw_headers.append((b"content-type", content_type.encode("latin-1")))
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


class ASGIAdapter:
    """ASGI 3.0 application wrapping a ``Handler``.

    Parameters
    ----------
    handler:
        Usually a :class:`~waypoint.routed.RoutedRequestHandler`.
    """

    __slots__ = ("handler",)

    def __init__(self, handler: Any) -> None:
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await _handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        context = context_from_scope(scope, receive)
        try:
            response = await invoke(self.handler.handle, context)
        except Exception:
            logger.exception("500 %s %s", scope["method"], scope["path"])
            response = Response(status=500)
        else:
            if not isinstance(response, Response):
                logger.error(
                    "500 %s %s: handler returned %s, not a Response",
                    scope["method"],
                    scope["path"],
                    type(response).__name__,
                )
                response = Response(status=500)

        await send_response(response, send)


async def _handle_lifespan(receive: Receive, send: Send) -> None:
    """Minimal lifespan responder: accept startup/shutdown with no-ops."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
