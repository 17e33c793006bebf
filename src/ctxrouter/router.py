"""The ctxrouter engine.

Mutable during setup (route registration, hooks).
Hooks are sealed when ``exec()`` is first invoked.
"""

from __future__ import annotations

from ctxrouter._internal.types import ErrorHook, Hook
from ctxrouter.config import RouterConfig
from ctxrouter.context import PENDING, Ctx, CtxMeta, LogBuffer, Transport
from ctxrouter.hooks import HookRegistry
from ctxrouter.instance import Instance, InstanceSnapshot
from ctxrouter.lifecycle import execute
from ctxrouter.routing.builder import RouteBuilder
from ctxrouter.routing.route import RouteEntry
from ctxrouter.routing.store import RouteStore
from ctxrouter.stats import ProcessStats


class HookDSL:
    """Fluent hook registration: ``router.hook.before(fn).hook.error(fn)``.

    Each setter returns the router. Raises ``HooksAlreadySealed`` once the
    router has dispatched.
    """

    __slots__ = ("_registry", "_router")

    def __init__(self, router: CtxRouter, registry: HookRegistry) -> None:
        self._router = router
        self._registry = registry

    def before(self, fn: Hook) -> CtxRouter:
        self._registry.set_before(fn)
        return self._router

    def after(self, fn: Hook) -> CtxRouter:
        self._registry.set_after(fn)
        return self._router

    def error(self, fn: ErrorHook) -> CtxRouter:
        self._registry.set_error(fn)
        return self._router

    def finally_(self, fn: Hook) -> CtxRouter:
        self._registry.set_finally(fn)
        return self._router


class CtxRouter:
    """Transport-agnostic dispatch engine.

    Usage::

        router = CtxRouter()

        async def get_user(ctx):
            ctx.res.data = {"id": ctx.req.data["id"]}
            return ctx

        router.route("GET /user/:id").to(get_user)
        router.hook.error(error_to_response)

        ctx = router.new_ctx("http")
        ctx.req.route.op = "GET"
        ctx.req.route.raw = "/user/7"
        ctx = await router.exec(ctx)

    Thread safety:
        Registration is single-threaded (module import / startup). After the
        first ``exec()`` the route store and hooks are only read; the
        instance counters are lock-protected, so ``exec()`` may run
        concurrently from several tasks or threads.
    """

    __slots__ = ("_hooks", "_instance", "_stats", "_store", "config", "hook")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._store = RouteStore()
        self._hooks = HookRegistry()
        self._instance = Instance(self.config.service_name)
        self._stats: ProcessStats | None = (
            ProcessStats(self.config.stats_interval) if self.config.stats_enabled else None
        )
        self.hook = HookDSL(self, self._hooks)

    # -- Route registration --

    def route(self, segment: str) -> RouteBuilder:
        """Start a registration chain with its first segment.

        Examples::

            router.route("user").route(":id").route("detail").to(h)  # "user.:id.detail"
            router.route("GET /user/:id").to(h)  # "user/:id" + "/user/:id", op GET
        """
        return RouteBuilder(self._store).route(segment)

    @property
    def routes(self) -> list[RouteEntry]:
        """All committed routes, exact first then parameterized."""
        return self._store.routes

    @property
    def store(self) -> RouteStore:
        return self._store

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    @property
    def sealed(self) -> bool:
        return self._hooks.sealed

    # -- Instance --

    @property
    def instance(self) -> InstanceSnapshot:
        """Current counters. A copy; mutating it has no effect on the router."""
        stats = self._stats
        return self._instance.snapshot(
            cpu=stats.cpu if stats is not None else -1,
            mem=stats.mem if stats is not None else -1,
        )

    # -- Dispatch --

    def new_ctx(self, protocol: str | None = None) -> Ctx:
        """Create a context with placeholder values.

        Does not touch ``seq`` or ``inflight``; timing and trace ids are set
        by ``exec()``. Adapters fill ``req.route`` and ``req.data`` before
        dispatching.
        """
        ctx = Ctx(
            id=PENDING,
            meta=CtxMeta(
                service_name=self._instance.service_name,
                instance=InstanceSnapshot(
                    id=self._instance.id,
                    created_at=self._instance.created_at,
                    seq=-1,
                    inflight=-1,
                ),
                log=LogBuffer(),
            ),
        )
        ctx.req.transport = Transport(protocol=protocol or "unknown")
        return ctx

    async def exec(self, ctx: Ctx) -> Ctx:
        """Dispatch *ctx* through hooks, route matching and the handler pipeline.

        Seals the hooks on first call. Errors propagate unless an ``error``
        hook is registered, in which case the context is returned.
        """
        return await execute(
            ctx,
            store=self._store,
            hooks=self._hooks,
            instance=self._instance,
            stats=self._stats,
        )

    def __repr__(self) -> str:
        return f"<CtxRouter {self._instance.id} routes={len(self._store)} sealed={self.sealed}>"
