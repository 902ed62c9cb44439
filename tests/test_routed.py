"""Tests for waypoint.routed: the routed request handler."""

import pytest

from waypoint.config import RouterConfig
from waypoint.errors import ConfigurationError, InvalidRequestError
from waypoint.handler import Handler, handler_from
from waypoint.http.request import Request, RequestContext
from waypoint.http.response import Response
from waypoint.routed import RoutedRequestHandler
from waypoint.routing.route import Controller, Route, RouteOperation
from waypoint.testing import PassThroughTransform, RecordingHandler, make_context


def _get_route(path: str) -> tuple[RecordingHandler, Route]:
    handler = RecordingHandler()
    return handler, Route(path, [RouteOperation("GET")], handler)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def pre_response() -> PassThroughTransform:
    return PassThroughTransform()


@pytest.fixture
def router(handler: RecordingHandler, pre_response: PassThroughTransform) -> RoutedRequestHandler:
    return RoutedRequestHandler(
        [
            Controller(
                "1",
                pre_response_handler=pre_response,
                routes=[
                    Route(
                        "/path1",
                        [RouteOperation("GET"), RouteOperation("OPTIONS", publish=False)],
                        handler,
                    ),
                ],
            ),
            Controller(
                "2",
                routes=[
                    Route("/path2", [RouteOperation("POST"), RouteOperation("PUT")], handler),
                ],
            ),
        ]
    )


class TestConstruction:
    def test_builds_from_controllers(self, router: RoutedRequestHandler) -> None:
        assert len(router.table) == 2

    def test_none_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match=r"controllers must be defined\."):
            RoutedRequestHandler(None)

    def test_empty_list_allowed(self) -> None:
        assert len(RoutedRequestHandler([]).table) == 0

    def test_invalid_pattern_fails_construction(self) -> None:
        route = Route("/a/:x/:x", [RouteOperation("GET")], RecordingHandler())
        with pytest.raises(ConfigurationError):
            RoutedRequestHandler([Controller("c", routes=[route])])

    def test_default_config(self, router: RoutedRequestHandler) -> None:
        assert router.config == RouterConfig()

    def test_satisfies_handler_protocol(self, router: RoutedRequestHandler) -> None:
        assert isinstance(router, Handler)


class TestHandleValidation:
    @pytest.mark.anyio
    async def test_none_context(self, router: RoutedRequestHandler) -> None:
        with pytest.raises(InvalidRequestError, match=r"^context must be defined\.$"):
            await router.handle(None)

    @pytest.mark.anyio
    async def test_none_request(self, router: RoutedRequestHandler) -> None:
        with pytest.raises(InvalidRequestError, match=r"^context\.request must be defined\.$"):
            await router.handle(RequestContext(request=None))

    @pytest.mark.anyio
    async def test_validation_error_is_value_error(self, router: RoutedRequestHandler) -> None:
        with pytest.raises(ValueError):
            await router.handle(None)


class TestHandleDispatch:
    @pytest.mark.anyio
    async def test_calls_route_handler(
        self, router: RoutedRequestHandler, handler: RecordingHandler
    ) -> None:
        await router.handle(make_context("/path1"))
        assert handler.call_count == 1

    @pytest.mark.anyio
    async def test_returns_handler_response_unchanged(self) -> None:
        expected = Response(status=201, headers={"X-Test": "yes"}, body={"ok": True})
        handler = RecordingHandler(expected)
        router = RoutedRequestHandler(
            [Controller("c", routes=[Route("/x", [RouteOperation("POST")], handler)])]
        )
        response = await router.handle(make_context("/x", "POST"))
        assert response is expected

    @pytest.mark.anyio
    async def test_static_route_gets_empty_parameters(
        self, router: RoutedRequestHandler, handler: RecordingHandler
    ) -> None:
        await router.handle(make_context("/path1"))
        assert handler.calls[0].request.parameters == {}

    @pytest.mark.anyio
    async def test_query_string_ignored_for_matching(
        self, router: RoutedRequestHandler, handler: RecordingHandler
    ) -> None:
        await router.handle(make_context("/path1?page=2"))
        assert handler.call_count == 1

    @pytest.mark.anyio
    async def test_origin_form_url(
        self, router: RoutedRequestHandler, handler: RecordingHandler
    ) -> None:
        await router.handle(RequestContext(Request(url="/path1", method="GET")))
        assert handler.call_count == 1

    @pytest.mark.anyio
    async def test_unpublished_method_dispatches(self) -> None:
        handler = RecordingHandler()
        route = Route("/x", [RouteOperation("DELETE", publish=False)], handler)
        router = RoutedRequestHandler([Controller("c", routes=[route])])
        await router.handle(make_context("/x", "DELETE"))
        assert handler.call_count == 1

    @pytest.mark.anyio
    async def test_parses_url_parameters(self) -> None:
        one_dynamic, one_dynamic_route = _get_route("/one/:dynamic")
        dynamic_one, dynamic_one_route = _get_route("/:dynamic/one")
        never, never_route = _get_route("/never")
        router = RoutedRequestHandler(
            [Controller("testRoutes", routes=[one_dynamic_route, dynamic_one_route, never_route])]
        )

        for path, expected in (
            ("/one/dynamicParam", one_dynamic),
            ("/dynamicParam/one", dynamic_one),
        ):
            await router.handle(make_context(path))
            assert expected.call_count == 1
            request = expected.calls[0].request
            assert request.parameters == {"dynamic": "dynamicParam"}
            assert request.url == f"http://example.com{path}"
            assert request.method == "GET"
            assert request.headers == {}

        assert never.call_count == 0

    @pytest.mark.anyio
    async def test_calls_right_handler_for_path(self) -> None:
        paths = [
            "/one",
            "/two",
            "/nested/one",
            "/nested/nested/one",
            "/nested/two",
            "/one/:dynamic",
            "/:dynamic/one",
        ]
        handlers = {}
        routes = []
        for path in paths:
            handlers[path], route = _get_route(path)
            routes.append(route)
        never, never_route = _get_route("/never")
        routes.append(never_route)
        router = RoutedRequestHandler([Controller("testRoutes", routes=routes)])

        requests = {
            "/one": "/one",
            "/two": "/two",
            "/nested/one": "/nested/one",
            "/nested/nested/one": "/nested/nested/one",
            "/nested/two": "/nested/two",
            "/one/dynamicParam": "/one/:dynamic",
            "/dynamicParam/one": "/:dynamic/one",
        }
        for request_path in requests:
            await router.handle(make_context(request_path))

        for pattern in requests.values():
            assert handlers[pattern].call_count == 1
        assert never.call_count == 0

    @pytest.mark.anyio
    async def test_sync_handler_supported(self) -> None:
        def plain(context: RequestContext) -> Response:
            return Response(body=context.request.parameters["id"])

        route = Route("/users/:id", [RouteOperation("GET")], handler_from(plain))
        router = RoutedRequestHandler([Controller("users", routes=[route])])
        response = await router.handle(make_context("/users/7"))
        assert response.body == "7"

    @pytest.mark.anyio
    async def test_nested_router(self) -> None:
        inner_handler = RecordingHandler(Response(body="inner"))
        inner = RoutedRequestHandler(
            [Controller("inner", routes=[Route("/api/:id", [RouteOperation("GET")], inner_handler)])]
        )
        outer = RoutedRequestHandler(
            [Controller("outer", routes=[Route("/api/:id", [RouteOperation("GET")], inner)])]
        )
        response = await outer.handle(make_context("/api/3"))
        assert response.body == "inner"
        assert inner_handler.calls[0].request.parameters == {"id": "3"}


class TestHandleSynthesized:
    @pytest.mark.anyio
    async def test_not_found(self, router: RoutedRequestHandler, handler: RecordingHandler) -> None:
        response = await router.handle(make_context("/nonExistantPath"))
        assert response.status == 404
        assert "Allow" not in response.headers
        assert handler.call_count == 0

    @pytest.mark.anyio
    async def test_method_not_allowed(
        self, router: RoutedRequestHandler, handler: RecordingHandler
    ) -> None:
        response = await router.handle(make_context("/path2"))
        assert response.status == 405
        assert response.headers == {"Allow": "POST, PUT"}
        assert handler.call_count == 0

    @pytest.mark.anyio
    async def test_lowercase_method_not_allowed(
        self, router: RoutedRequestHandler, handler: RecordingHandler
    ) -> None:
        response = await router.handle(make_context("/path1", "get"))
        assert response.status == 405
        assert response.headers == {"Allow": "GET, OPTIONS"}
        assert handler.call_count == 0

    @pytest.mark.anyio
    async def test_options_lists_allowed_methods(
        self,
        router: RoutedRequestHandler,
        handler: RecordingHandler,
        pre_response: PassThroughTransform,
    ) -> None:
        response = await router.handle(make_context("/path1", "OPTIONS"))
        assert response.status == 200
        assert response.headers["Allow"] == "GET, OPTIONS"
        assert handler.call_count == 0
        assert pre_response.call_count == 0

    @pytest.mark.anyio
    async def test_options_on_route_without_options(self, router: RoutedRequestHandler) -> None:
        response = await router.handle(make_context("/path2", "OPTIONS"))
        assert response.headers == {"Allow": "POST, PUT"}

    @pytest.mark.anyio
    async def test_options_status_configurable(self, handler: RecordingHandler) -> None:
        router = RoutedRequestHandler(
            [Controller("c", routes=[Route("/x", [RouteOperation("GET")], handler)])],
            RouterConfig(options_status=204),
        )
        response = await router.handle(make_context("/x", "OPTIONS"))
        assert response.status == 204

    @pytest.mark.anyio
    async def test_options_on_unknown_path_is_not_found(self, router: RoutedRequestHandler) -> None:
        response = await router.handle(make_context("/nope", "OPTIONS"))
        assert response.status == 404

    @pytest.mark.anyio
    async def test_short_circuit_leaves_parameters_unset(self, router: RoutedRequestHandler) -> None:
        context = make_context("/path2")
        await router.handle(context)
        assert context.request.parameters is None

    @pytest.mark.anyio
    async def test_trailing_slash_not_found_by_default(self, router: RoutedRequestHandler) -> None:
        response = await router.handle(make_context("/path1/"))
        assert response.status == 404

    @pytest.mark.anyio
    async def test_trailing_slash_tolerated_when_configured(self, handler: RecordingHandler) -> None:
        router = RoutedRequestHandler(
            [Controller("c", routes=[Route("/x", [RouteOperation("GET")], handler)])],
            RouterConfig(strict_slashes=False),
        )
        await router.handle(make_context("/x/"))
        assert handler.call_count == 1


class TestPreResponse:
    @pytest.mark.anyio
    async def test_called_before_handler(
        self,
        router: RoutedRequestHandler,
        handler: RecordingHandler,
        pre_response: PassThroughTransform,
    ) -> None:
        await router.handle(make_context("/path1"))
        assert pre_response.call_count == 1
        assert handler.call_count == 1

    @pytest.mark.anyio
    async def test_passes_original_context_through(
        self,
        router: RoutedRequestHandler,
        handler: RecordingHandler,
        pre_response: PassThroughTransform,
    ) -> None:
        context = make_context("/path1")
        original_request = context.request
        await router.handle(context)
        assert pre_response.calls[0] is context
        assert handler.calls[0] is context
        assert handler.calls[0].request is original_request

    @pytest.mark.anyio
    async def test_sees_parameters(self) -> None:
        seen: list[dict[str, str] | None] = []

        def transform(context: RequestContext) -> RequestContext:
            seen.append(context.request.parameters)
            return context

        route = Route("/users/:id", [RouteOperation("GET")], RecordingHandler())
        router = RoutedRequestHandler(
            [Controller("users", routes=[route], pre_response_handler=handler_from(transform))]
        )
        await router.handle(make_context("/users/9"))
        assert seen == [{"id": "9"}]

    @pytest.mark.anyio
    async def test_output_replaces_context(self) -> None:
        replacement = make_context("/elsewhere")
        handler = RecordingHandler()
        router = RoutedRequestHandler(
            [
                Controller(
                    "c",
                    routes=[Route("/x", [RouteOperation("GET")], handler)],
                    pre_response_handler=handler_from(lambda context: replacement),
                )
            ]
        )
        await router.handle(make_context("/x"))
        assert handler.calls == [replacement]

    @pytest.mark.anyio
    async def test_not_called_for_other_controllers(
        self,
        router: RoutedRequestHandler,
        pre_response: PassThroughTransform,
    ) -> None:
        await router.handle(make_context("/path2", "POST"))
        assert pre_response.call_count == 0

    @pytest.mark.anyio
    async def test_not_called_on_method_mismatch(
        self,
        router: RoutedRequestHandler,
        pre_response: PassThroughTransform,
    ) -> None:
        await router.handle(make_context("/path1", "DELETE"))
        assert pre_response.call_count == 0


class TestDownstreamFailures:
    @pytest.mark.anyio
    async def test_handler_error_propagates(self) -> None:
        error = RuntimeError("boom")
        route = Route("/x", [RouteOperation("GET")], RecordingHandler(error=error))
        router = RoutedRequestHandler([Controller("c", routes=[route])])
        with pytest.raises(RuntimeError) as exc_info:
            await router.handle(make_context("/x"))
        assert exc_info.value is error

    @pytest.mark.anyio
    async def test_pre_response_error_skips_handler(self) -> None:
        handler = RecordingHandler()
        transform = PassThroughTransform(error=PermissionError("denied"))
        router = RoutedRequestHandler(
            [
                Controller(
                    "c",
                    routes=[Route("/x", [RouteOperation("GET")], handler)],
                    pre_response_handler=transform,
                )
            ]
        )
        with pytest.raises(PermissionError, match="denied"):
            await router.handle(make_context("/x"))
        assert transform.call_count == 1
        assert handler.call_count == 0


class TestCanHandle:
    @pytest.mark.anyio
    async def test_true_with_request(self, router: RoutedRequestHandler) -> None:
        assert await router.can_handle(make_context("/path1")) is True

    @pytest.mark.anyio
    async def test_true_for_unroutable_path(self, router: RoutedRequestHandler) -> None:
        assert await router.can_handle(make_context("/nowhere")) is True

    @pytest.mark.anyio
    async def test_false_without_context(self, router: RoutedRequestHandler) -> None:
        assert await router.can_handle(None) is False

    @pytest.mark.anyio
    async def test_false_without_request(self, router: RoutedRequestHandler) -> None:
        assert await router.can_handle(RequestContext(request=None)) is False
