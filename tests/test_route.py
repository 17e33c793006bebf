"""Tests for ctxrouter.routing.route — Route, RouteEntry and RouteMatch."""

import dataclasses

import pytest

from ctxrouter.routing.route import Route, RouteEntry, RouteMatch, exact_key


async def _handler(ctx):
    return ctx


class TestExactKey:
    def test_with_op(self) -> None:
        assert exact_key("GET", "/users") == "GET:/users"

    def test_without_op(self) -> None:
        assert exact_key(None, "users.list") == ":users.list"

    def test_empty_op_is_wildcard(self) -> None:
        assert exact_key("", "users.list") == ":users.list"


class TestRoute:
    def test_exact(self) -> None:
        route = Route("order.created", _handler)
        assert route.is_exact is True
        assert route.key == ":order.created"

    def test_parameterized(self) -> None:
        route = Route("/user/:id", _handler, op="GET", separator="/")
        assert route.is_exact is False
        assert route.key == "GET:/user/:id"
        assert route.matcher("/user/9") == {"id": "9"}

    def test_default_separator_is_dot(self) -> None:
        route = Route("job.:id", _handler)
        assert route.matcher("job.1") == {"id": "1"}
        assert route.matcher("job.1.x") is None

    def test_frozen(self) -> None:
        route = Route("/x", _handler)
        with pytest.raises(dataclasses.FrozenInstanceError):
            route.pattern = "/y"  # type: ignore[misc]


class TestRouteMatch:
    def test_route_property(self) -> None:
        route = Route("/x", _handler)
        entry = RouteEntry(route=route, segments=("x",))
        match = RouteMatch(entry=entry, params={})
        assert match.route is route
        assert match.entry.segments == ("x",)
