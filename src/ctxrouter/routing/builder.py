"""Route builder — the ``route / via / to`` registration DSL.

A chain of segments is turned into one or two routes when ``to()`` is
called::

    router.route("user").route(":id").route("detail").to(h)
    # -> "user.:id.detail" (any op)

    router.route("GET /user/:id").to(h)
    # -> "user/:id" (op GET) and "/user/:id" (op GET)

Segments are tokenized on whitespace. A token equal to an HTTP verb
(case-insensitive) marks the chain as HTTP-flavored and the first verb
becomes the op. The remaining tokens form the base segments. HTTP-flavored
chains register a second, slash-joined route so one handler answers both
``job.42`` style operation names and ``/job/42`` style paths.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ctxrouter._internal.invoke import invoke
from ctxrouter._internal.types import Middleware, Pipeline
from ctxrouter.errors import InvalidHandler, InvalidMiddleware, InvalidSegment, MissingSegments
from ctxrouter.routing.route import Route
from ctxrouter.routing.store import RouteStore

HTTP_METHODS: frozenset[str] = frozenset(
    {"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"}
)


@dataclass(frozen=True, slots=True)
class SegmentAnalysis:
    """Outcome of HTTP-grammar detection over a segment chain."""

    is_http: bool
    op: str | None
    base: tuple[str, ...]


def analyze_segments(segments: Iterable[str]) -> SegmentAnalysis:
    """Detect HTTP grammar in *segments*.

    Examples::

        ["job", ":id", "GET"]  -> is_http=True,  op="GET", base=("job", ":id")
        ["GET /user/:id"]      -> is_http=True,  op="GET", base=("user/:id",)
        ["event", ":name"]     -> is_http=False, op=None,  base=("event", ":name")
    """
    verbs: list[str] = []
    base: list[str] = []

    for segment in segments:
        tokens = segment.split()
        if not any(token.upper() in HTTP_METHODS for token in tokens):
            base.append(segment)
            continue

        for token in tokens:
            if token.upper() in HTTP_METHODS:
                verbs.append(token.upper())
                continue
            token = token.removeprefix("/")
            if token:
                base.append(token)

    return SegmentAnalysis(is_http=bool(verbs), op=verbs[0] if verbs else None, base=tuple(base))


def build_patterns(analysis: SegmentAnalysis) -> list[tuple[str, str]]:
    """Return ``(pattern, separator)`` pairs: dot identity, then HTTP path."""
    patterns = [(".".join(analysis.base), ".")]
    if analysis.is_http:
        path = "/".join(analysis.base)
        if not path.startswith("/"):
            path = f"/{path}"
        patterns.append((path, "/"))
    return patterns


def build_routes(segments: Iterable[str], handler: Pipeline) -> list[Route]:
    """Build the primary route and, for HTTP grammar, the secondary route."""
    analysis = analyze_segments(segments)
    return [
        Route(pattern=pattern, handler=handler, op=analysis.op, separator=separator)
        for pattern, separator in build_patterns(analysis)
    ]


def compose(middleware: Iterable[Middleware], handler: Middleware) -> Pipeline:
    """Compose middleware and the terminal handler into one async pipeline.

    Stages run in order, each receiving the context returned by the
    previous one. A stage returning ``None`` passes the context on
    unchanged.
    """
    stages = (*middleware, handler)

    async def pipeline(ctx: Any) -> Any:
        for stage in stages:
            result = await invoke(stage, ctx)
            if result is not None:
                ctx = result
        return ctx

    pipeline.__name__ = getattr(handler, "__name__", "pipeline")
    pipeline.__qualname__ = getattr(handler, "__qualname__", pipeline.__name__)
    return pipeline


class RouteBuilder:
    """Immutable registration chain.

    Every ``route()`` / ``via()`` call returns a new builder sharing the
    same store, so a partially built chain can be reused as a prefix::

        users = router.route("user")
        users.route("GET /:id").to(get_user)
        users.route("POST /update").via(auth).to(update_user)
    """

    __slots__ = ("_middleware", "_segments", "_store")

    def __init__(
        self,
        store: RouteStore,
        segments: tuple[str, ...] = (),
        middleware: tuple[Middleware, ...] = (),
    ) -> None:
        self._store = store
        self._segments = segments
        self._middleware = middleware

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return self._middleware

    def route(self, segment: str) -> RouteBuilder:
        """Append one segment to the chain."""
        if not isinstance(segment, str) or not segment:
            raise InvalidSegment(data={"segment": repr(segment)})
        return RouteBuilder(
            self._store,
            (*self._segments, segment),
            self._middleware,
        )

    def via(self, *fns: Middleware) -> RouteBuilder:
        """Append middleware. They run in order: first ``via`` to last, then the handler."""
        for fn in fns:
            if not callable(fn):
                raise InvalidMiddleware(data={"middleware": repr(fn)})
        return RouteBuilder(
            self._store,
            self._segments,
            (*self._middleware, *fns),
        )

    def to(self, handler: Middleware) -> None:
        """Register *handler* as the end of this chain. Terminal."""
        if not callable(handler):
            raise InvalidHandler(data={"handler": repr(handler)})
        if not self._segments:
            raise MissingSegments()

        routes = build_routes(self._segments, compose(self._middleware, handler))
        for route in routes:
            self._store.commit(route, self._segments)

    def __repr__(self) -> str:
        return f"<RouteBuilder segments={list(self._segments)!r} middleware={len(self._middleware)}>"
