"""Ready-made lifecycle hooks.

None of these are installed automatically. Opt in explicitly::

    from ctxrouter.defaults import error_to_response, log_before

    router.hook.before(log_before("standard"))
    router.hook.error(error_to_response)

Installing ``error_to_response`` makes every dispatch failure recoverable:
``exec()`` returns the context with ``ctx.res`` describing the error.
"""

import json
import logging
from typing import Literal, TypeAlias

from ctxrouter._internal.types import Hook
from ctxrouter.context import Ctx
from ctxrouter.errors import CtxError, UnknownError

logger = logging.getLogger("ctxrouter.exec")

LogLevel: TypeAlias = Literal["none", "minimal", "standard", "verbose"]

LOG_LEVELS: tuple[str, ...] = ("none", "minimal", "standard", "verbose")


def log_before(level: LogLevel = "standard") -> Hook:
    """Build a ``before`` hook that logs one line per dispatch.

    - ``minimal``: raw route and trace id
    - ``standard``: adds user, seq and inflight
    - ``verbose``: adds span id, origin, client seq and request data
    """
    if level not in LOG_LEVELS:
        msg = f"Unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}"
        raise ValueError(msg)

    def hook(ctx: Ctx) -> None:
        if level == "none":
            return

        route = ctx.req.route
        target = f"{route.op} {route.raw}" if route.op else route.raw
        trace_id = ctx.meta.monitor.trace_id

        if level == "minimal":
            logger.info("[%s] TraceId: %s", target, trace_id)
            return

        instance = ctx.meta.instance
        if level == "standard":
            logger.info(
                "[%s] TraceId: %s | UserId: %s | Seq: %s | Inflight: %s",
                target,
                trace_id,
                ctx.user.id,
                instance.seq,
                instance.inflight,
            )
            return

        invocation = ctx.req.invocation
        logger.info(
            "[%s] Origin: %s | TraceId: %s | SpanId: %s | UserId: %s | UserSeq: %s | Seq: %s | Inflight: %s | Data: %s",
            target,
            ctx.req.transport.meta.get("origin_ip", "unknown"),
            trace_id,
            ctx.meta.monitor.span_id,
            ctx.user.id,
            (invocation.seq if invocation is not None else None) or 0,
            instance.seq,
            instance.inflight,
            json.dumps(ctx.req.data, default=str),
        )

    hook.__name__ = f"log_before_{level}"
    return hook


def error_to_response(ctx: Ctx, exc: BaseException) -> None:
    """``error`` hook: record the error and write its client-safe view to ``ctx.res``.

    ``CtxError`` instances are kept as-is; anything else is logged with its
    traceback and replaced by ``UNKNOWN_ERROR`` so internals never reach
    the caller.
    """
    if isinstance(exc, CtxError):
        logger.warning(
            "%s: %s | data=%s | info=%s",
            exc.name,
            exc.message,
            json.dumps(exc.data, default=str),
            json.dumps(exc.info, default=str) if exc.info is not None else None,
        )
        error = exc
    else:
        logger.error("Unhandled error during dispatch %s", ctx.id, exc_info=exc)
        error = UnknownError()

    ctx.err = error
    ctx.res.code = error.name
    ctx.res.msg = error.message
    ctx.res.data = dict(error.data)
