"""The dispatch context and the request-scoped ContextVar.

A transport adapter builds a ``Ctx`` (usually via ``router.new_ctx()``),
fills in ``req.route.op`` / ``req.route.raw`` and any input in ``req.data``,
then calls ``router.exec(ctx)``.

The router owns ``meta`` during dispatch: instance snapshot, timestamps and
trace identifiers are overwritten on every ``exec()``. It writes the matched
pattern to ``req.route.pattern`` and captured parameters to ``req.params``.

Provides:
- ``ctx_var``: the context being dispatched in this task/thread.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from ctxrouter.errors import CtxError
from ctxrouter.instance import InstanceSnapshot

PENDING = "PENDING"
"""Placeholder for values the router or adapter fills in later."""


@dataclass(slots=True)
class RouteInfo:
    """Routing identity of one invocation.

    ``raw`` is the concrete value (``"/users/42"``), ``pattern`` the matched
    canonical pattern (``"/users/:id"``), ``op`` the operation discriminator.
    """

    raw: str = PENDING
    op: str | None = None
    pattern: str = PENDING


@dataclass(slots=True)
class Invocation:
    """Caller-supplied invocation metadata. ``ts`` is the client send time (epoch ms)."""

    trace_id: str | None = None
    span_id: str | None = None
    seq: int | None = None
    ts: int | None = None


@dataclass(slots=True)
class Transport:
    """Transport details for logging and escape hatches. Not for business logic."""

    protocol: str = "unknown"
    raw: Any = None
    meta: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class CtxReq:
    data: dict[str, Any] = field(default_factory=dict)
    route: RouteInfo = field(default_factory=RouteInfo)
    params: dict[str, str] = field(default_factory=dict)
    auth: dict[str, str] = field(default_factory=dict)
    client: dict[str, str] = field(default_factory=dict)
    invocation: Invocation | None = None
    transport: Transport = field(default_factory=Transport)


@dataclass(slots=True)
class ResMeta:
    """Response metadata stamped at the end of ``exec()``."""

    ctx_id: str
    seq: int
    trace_id: str
    span_id: str
    in_time: int
    out_time: int
    exec_time: int
    owd: int


@dataclass(slots=True)
class CtxRes:
    """Transport-neutral outcome. Only ``code == "OK"`` means success."""

    code: str = "OK"
    msg: str = "OK"
    data: dict[str, Any] = field(default_factory=dict)
    meta: ResMeta | None = None


@dataclass(slots=True)
class CtxUser:
    """Identity of the caller. Anonymous until an auth stage fills it in."""

    id: str = "none"
    kind: str = "user"
    role: list[str] = field(default_factory=lambda: ["none"])
    scope: list[str] = field(default_factory=list)
    handle: str | None = None


@dataclass(slots=True)
class Timestamps:
    """Execution timestamps in epoch ms; ``-1`` until set."""

    in_: int = -1
    client_in: int = -1
    out: int = -1
    exec_time: int = -1
    owd: int = -1


@dataclass(slots=True)
class Monitor:
    trace_id: str = PENDING
    span_id: str = PENDING


@dataclass(slots=True)
class LogBuffer:
    """Log lines captured during one dispatch. Preserved across ``exec()``."""

    stdout: list[str] = field(default_factory=list)
    db: list[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class CtxMeta:
    service_name: str = "ctx-service"
    instance: InstanceSnapshot = field(
        default_factory=lambda: InstanceSnapshot(id=PENDING, created_at=-1, seq=-1, inflight=-1)
    )
    ts: Timestamps = field(default_factory=Timestamps)
    monitor: Monitor = field(default_factory=Monitor)
    log: LogBuffer | None = None


@dataclass(slots=True)
class Ctx:
    """Everything one dispatch reads and writes."""

    id: str = PENDING
    req: CtxReq = field(default_factory=CtxReq)
    res: CtxRes = field(default_factory=CtxRes)
    err: CtxError | None = None
    user: CtxUser = field(default_factory=CtxUser)
    meta: CtxMeta = field(default_factory=CtxMeta)
    locals: dict[str, Any] = field(default_factory=dict)


# -- Dispatch context --

ctx_var: ContextVar[Ctx] = ContextVar("ctxrouter_ctx")
"""The context being dispatched. Set by ``exec()`` for its duration."""


def get_ctx() -> Ctx:
    """Return the context currently being dispatched.

    Raises ``LookupError`` if called outside ``exec()``.
    """
    return ctx_var.get()
