"""Tests for ctxrouter.routing.store — two-tier exact/param resolution."""

import logging

import pytest

from ctxrouter.routing.route import Route
from ctxrouter.routing.store import RouteStore


def _named(name: str):
    async def handler(ctx):
        return ctx

    handler.__name__ = name
    return handler


class TestCommit:
    def test_exact_goes_to_table(self) -> None:
        store = RouteStore()
        entry = store.commit(Route("order.created", _named("a")), ("order.created",))
        assert store.exact == {":order.created": entry}
        assert store.params == []
        assert entry.segments == ("order.created",)

    def test_parameterized_goes_to_list(self) -> None:
        store = RouteStore()
        entry = store.commit(Route("/user/:id", _named("a"), op="GET", separator="/"))
        assert store.exact == {}
        assert store.params == [entry]

    def test_each_route_in_exactly_one_tier(self) -> None:
        store = RouteStore()
        store.commit(Route("a", _named("a")))
        store.commit(Route("b.:id", _named("b")))
        store.commit(Route("c", _named("c"), op="POST"))
        assert len(store) == 3
        assert len(store.exact) + len(store.params) == 3

    def test_duplicate_exact_replaces_and_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        store = RouteStore()
        first = _named("first")
        second = _named("second")
        store.commit(Route("/x", first, op="GET"))
        with caplog.at_level(logging.WARNING, logger="ctxrouter.routing"):
            store.commit(Route("/x", second, op="GET"))

        match = store.resolve("GET", "/x")
        assert match is not None
        assert match.route.handler is second
        assert len(store) == 1
        assert "registered twice" in caplog.text

    def test_routes_lists_exact_then_params(self) -> None:
        store = RouteStore()
        p = store.commit(Route("job.:id", _named("p")))
        e = store.commit(Route("job.list", _named("e")))
        assert store.routes == [e, p]


class TestResolveExact:
    def test_exact_hit(self) -> None:
        store = RouteStore()
        store.commit(Route("/users", _named("list"), op="GET", separator="/"))
        match = store.resolve("GET", "/users")
        assert match is not None
        assert match.params == {}

    def test_op_mismatch_misses(self) -> None:
        store = RouteStore()
        store.commit(Route("/users", _named("list"), op="GET", separator="/"))
        assert store.resolve("POST", "/users") is None

    def test_wildcard_route_answers_any_op(self) -> None:
        store = RouteStore()
        store.commit(Route("order.created", _named("h")))
        assert store.resolve(None, "order.created") is not None
        assert store.resolve("PUBLISH", "order.created") is not None

    def test_op_specific_exact_beats_wildcard(self) -> None:
        store = RouteStore()
        any_op = _named("any")
        get = _named("get")
        store.commit(Route("/x", any_op))
        store.commit(Route("/x", get, op="GET"))
        assert store.resolve("GET", "/x").route.handler is get  # type: ignore[union-attr]
        assert store.resolve("POST", "/x").route.handler is any_op  # type: ignore[union-attr]

    def test_exact_beats_param(self) -> None:
        store = RouteStore()
        param = _named("param")
        exact = _named("exact")
        store.commit(Route("/user/:id", param, op="GET", separator="/"))
        store.commit(Route("/user/me", exact, op="GET", separator="/"))

        match = store.resolve("GET", "/user/me")
        assert match is not None
        assert match.route.handler is exact
        assert match.params == {}

    def test_pattern_literal_is_not_confused_with_raw(self) -> None:
        store = RouteStore()
        store.commit(Route("/user/:id", _named("h"), op="GET", separator="/"))
        match = store.resolve("GET", "/user/:id")
        assert match is not None
        assert match.params == {"id": ":id"}


class TestResolveParams:
    def test_params_captured(self) -> None:
        store = RouteStore()
        store.commit(Route("/user/:id", _named("h"), op="GET", separator="/"))
        match = store.resolve("GET", "/user/42")
        assert match is not None
        assert match.params == {"id": "42"}
        assert match.route.pattern == "/user/:id"

    def test_first_registered_wins(self) -> None:
        store = RouteStore()
        first = _named("first")
        second = _named("second")
        store.commit(Route("/a/:x", first, separator="/"))
        store.commit(Route("/:y/b", second, separator="/"))
        assert store.resolve(None, "/a/b").route.handler is first  # type: ignore[union-attr]

    def test_op_filter_runs_before_pattern(self) -> None:
        store = RouteStore()
        post = _named("post")
        get = _named("get")
        store.commit(Route("/user/:id", post, op="POST", separator="/"))
        store.commit(Route("/user/:id", get, op="GET", separator="/"))
        assert store.resolve("GET", "/user/1").route.handler is get  # type: ignore[union-attr]
        assert store.resolve("POST", "/user/1").route.handler is post  # type: ignore[union-attr]
        assert store.resolve("DELETE", "/user/1") is None

    def test_wildcard_then_specific_first_registered_wins(self) -> None:
        store = RouteStore()
        wildcard = _named("wildcard")
        get = _named("get")
        store.commit(Route("job.:id", wildcard))
        store.commit(Route("job.:id", get, op="GET"))

        match = store.resolve("GET", "job.42")

        assert match is not None
        assert match.route.handler is wildcard
        assert match.params == {"id": "42"}

    def test_specific_then_wildcard_first_registered_wins(self) -> None:
        store = RouteStore()
        get = _named("get")
        wildcard = _named("wildcard")
        store.commit(Route("job.:id", get, op="GET"))
        store.commit(Route("job.:id", wildcard))

        assert store.resolve("GET", "job.42").route.handler is get  # type: ignore[union-attr]
        assert store.resolve("POST", "job.42").route.handler is wildcard  # type: ignore[union-attr]

    def test_op_route_skipped_without_invocation_op(self) -> None:
        store = RouteStore()
        store.commit(Route("/user/:id", _named("h"), op="GET", separator="/"))
        assert store.resolve(None, "/user/1") is None

    def test_wildcard_param_route_matches_any_op(self) -> None:
        store = RouteStore()
        store.commit(Route("job.:id", _named("h")))
        assert store.resolve("RUN", "job.7").params == {"id": "7"}  # type: ignore[union-attr]

    def test_miss(self) -> None:
        store = RouteStore()
        store.commit(Route("job.:id", _named("h")))
        assert store.resolve(None, "task.7") is None
