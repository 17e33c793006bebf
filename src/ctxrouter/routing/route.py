"""Route, RouteEntry and RouteMatch frozen dataclasses."""

from dataclasses import dataclass, field

from ctxrouter._internal.types import Pipeline
from ctxrouter.routing.params import Matcher, compile_matcher, has_params


def exact_key(op: str | None, value: str) -> str:
    """Key of the exact-match table: ``"GET:/users"`` or ``":users.list"``.

    Used with a route pattern at commit time and with the raw invocation
    value at resolve time; for exact routes the two are equal on a hit.
    """
    return f"{op}:{value}" if op else f":{value}"


@dataclass(frozen=True, slots=True)
class Route:
    """A compiled route.

    ``pattern`` is the canonical, low-cardinality identity (may contain
    parameters). ``op`` is the operation discriminator; ``None`` matches
    any op.
    """

    pattern: str
    handler: Pipeline
    op: str | None = None
    separator: str = "."
    matcher: Matcher = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", compile_matcher(self.pattern, self.separator))

    @property
    def is_exact(self) -> bool:
        return not has_params(self.pattern)

    @property
    def key(self) -> str:
        return exact_key(self.op, self.pattern)


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A committed route plus the builder segments it came from.

    Segments are kept for diagnostics only and never used for matching.
    """

    route: Route
    segments: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful resolve."""

    entry: RouteEntry
    params: dict[str, str]

    @property
    def route(self) -> Route:
        return self.entry.route
