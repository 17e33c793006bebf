"""The ``exec()`` lifecycle.

One call dispatches one context::

    seal hooks
    refresh stats (if stale)
    begin   seq, inflight, timestamps, trace ids -> ctx.meta
    try:
        before(ctx)
        resolve (op, raw) -> route        # HandlerNotFound on a miss
        ctx.req.route.pattern = matched pattern
        ctx.req.data <- params (caller keys win)
        ctx = await pipeline(ctx)
        after(ctx)
        return ctx
    except Exception:
        error hook set  -> error(ctx, exc); return ctx
        error hook unset -> re-raise
    finally:
        finally(ctx)
        end     out, exec_time, ctx.res.meta, inflight -= 1

Routing failures and hook failures take the same path through the except
stage. ``inflight`` is decremented exactly once per call, whichever path
was taken, even if the ``finally`` hook itself raises.
"""

import logging
from typing import Any

from ctxrouter._internal.invoke import invoke
from ctxrouter.context import PENDING, Ctx, CtxMeta, Monitor, ResMeta, Timestamps, ctx_var
from ctxrouter.errors import HandlerNotFound
from ctxrouter.hooks import HookRegistry
from ctxrouter.instance import Instance, InstanceSnapshot, now_ms
from ctxrouter.routing.store import RouteStore
from ctxrouter.stats import ProcessStats

logger = logging.getLogger("ctxrouter.exec")


def trace_ids(instance_id: str, seq: int) -> tuple[str, str]:
    """Trace and span id for dispatch *seq* of an instance."""
    trace_id = f"{instance_id}-{seq}"
    return trace_id, trace_id


def begin(
    ctx: Ctx,
    instance: Instance,
    stats: ProcessStats | None,
    *,
    seq: int,
    inflight: int,
    in_time: int,
) -> None:
    """Stamp begin-of-dispatch metadata into *ctx*.

    Replaces ``ctx.meta`` wholesale so values set before ``exec()`` never
    leak through; only an existing log buffer is carried over. The matched
    pattern of a previous dispatch is cleared.
    """
    invocation = ctx.req.invocation
    client_in = in_time
    if invocation is not None and invocation.ts is not None:
        client_in = int(invocation.ts)

    trace_id, span_id = trace_ids(instance.id, seq)
    ctx.id = trace_id
    ctx.req.route.pattern = PENDING
    ctx.meta = CtxMeta(
        service_name=instance.service_name,
        instance=InstanceSnapshot(
            id=instance.id,
            created_at=instance.created_at,
            seq=seq,
            inflight=inflight,
            cpu=stats.cpu if stats is not None else -1,
            mem=stats.mem if stats is not None else -1,
        ),
        ts=Timestamps(in_=in_time, client_in=client_in, owd=in_time - client_in),
        monitor=Monitor(trace_id=trace_id, span_id=span_id),
        log=ctx.meta.log,
    )


def end(ctx: Ctx, in_time: int) -> None:
    """Stamp end-of-dispatch timing and response metadata."""
    out_time = now_ms()
    ts = ctx.meta.ts
    ts.out = out_time
    ts.exec_time = out_time - in_time

    invocation = ctx.req.invocation
    client_seq = invocation.seq if invocation is not None else None
    ctx.res.meta = ResMeta(
        ctx_id=ctx.id,
        seq=client_seq if isinstance(client_seq, int) else 0,
        trace_id=ctx.meta.monitor.trace_id,
        span_id=ctx.meta.monitor.span_id,
        in_time=in_time,
        out_time=out_time,
        exec_time=ts.exec_time,
        owd=ts.owd,
    )


async def dispatch(ctx: Ctx, store: RouteStore) -> Ctx:
    """Resolve the route for *ctx* and run its pipeline."""
    route_info = ctx.req.route
    match = store.resolve(route_info.op, route_info.raw)
    if match is None:
        logger.debug("No route for op=%r raw=%r", route_info.op, route_info.raw)
        raise HandlerNotFound(
            data={"op": route_info.op, "raw": route_info.raw, "pattern": route_info.pattern}
        )

    route_info.pattern = match.route.pattern
    ctx.req.params = dict(match.params)
    for name, value in match.params.items():
        ctx.req.data.setdefault(name, value)

    result: Any = await match.route.handler(ctx)
    return ctx if result is None else result


async def execute(
    ctx: Ctx,
    *,
    store: RouteStore,
    hooks: HookRegistry,
    instance: Instance,
    stats: ProcessStats | None = None,
) -> Ctx:
    """Run one dispatch through the full lifecycle. See the module docstring."""
    hooks.seal()
    if stats is not None:
        stats.refresh_if_stale()

    in_time = now_ms()
    seq, inflight = instance.begin()
    token = ctx_var.set(ctx)
    try:
        begin(ctx, instance, stats, seq=seq, inflight=inflight, in_time=in_time)
        try:
            if hooks.before is not None:
                await invoke(hooks.before, ctx)
            ctx = await dispatch(ctx, store)
            ctx_var.set(ctx)
            if hooks.after is not None:
                await invoke(hooks.after, ctx)
            return ctx
        except Exception as exc:
            if hooks.error is None:
                raise
            await invoke(hooks.error, ctx, exc)
            return ctx
        finally:
            if hooks.finally_ is not None:
                await invoke(hooks.finally_, ctx)
    finally:
        try:
            end(ctx, in_time)
        finally:
            instance.decrement_inflight()
            ctx_var.reset(token)
