"""Two-tier route store.

Routes without parameters live in a dict keyed by ``op:pattern`` for O(1)
lookup. Parameterized routes live in a list scanned in registration order.

Resolution order:

1. Exact lookup with the raw invocation value, first under the invocation's
   op, then under the wildcard key. A hit always wins.
2. Scan parameterized routes in registration order. A route with an ``op``
   is skipped unless it equals the invocation's op; then its pattern is
   matched against the raw value. The first entry passing both checks wins.

There is no specificity scoring beyond this: among parameterized routes
the first registered wins.
"""

import logging

from ctxrouter.routing.route import Route, RouteEntry, RouteMatch, exact_key

logger = logging.getLogger("ctxrouter.routing")


class RouteStore:
    """Exact table + ordered parameter list.

    Usage::

        store = RouteStore()
        store.commit(Route("/user/:id", handler, op="GET", separator="/"))
        match = store.resolve("GET", "/user/42")
    """

    __slots__ = ("exact", "params")

    def __init__(self) -> None:
        self.exact: dict[str, RouteEntry] = {}
        self.params: list[RouteEntry] = []

    def commit(self, route: Route, segments: tuple[str, ...] | list[str] = ()) -> RouteEntry:
        """Insert *route* into exactly one tier and return its entry."""
        entry = RouteEntry(route=route, segments=tuple(segments))

        if not route.is_exact:
            self.params.append(entry)
            logger.debug("Registered param route %s %s", route.op or "*", route.pattern)
            return entry

        key = route.key
        if key in self.exact:
            logger.warning(
                "Route %s %s registered twice; the later registration replaces the earlier one",
                route.op or "*",
                route.pattern,
            )
        self.exact[key] = entry
        logger.debug("Registered exact route %s %s", route.op or "*", route.pattern)
        return entry

    def resolve(self, op: str | None, raw: str) -> RouteMatch | None:
        """Return the first route matching ``(op, raw)``, or ``None``."""
        entry = self.exact.get(exact_key(op, raw))
        if entry is None and op:
            # Wildcard exact routes are keyed without an op.
            entry = self.exact.get(exact_key(None, raw))
        if entry is not None:
            return RouteMatch(entry=entry, params={})

        for entry in self.params:
            route = entry.route
            if route.op is not None and route.op != op:
                continue
            params = route.matcher(raw)
            if params is not None:
                return RouteMatch(entry=entry, params=params)

        return None

    @property
    def routes(self) -> list[RouteEntry]:
        """All committed entries, exact first then parameterized."""
        return [*self.exact.values(), *self.params]

    def __len__(self) -> int:
        return len(self.exact) + len(self.params)
