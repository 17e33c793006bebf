"""ctxrouter — a transport-agnostic request dispatch engine.

One handler registration answers HTTP paths, queue events and RPC names
alike. Every dispatch runs through a sealed before/after/error/finally
hook lifecycle with per-instance sequence, inflight and timing metadata.

Basic usage::

    from ctxrouter import CtxRouter

    router = CtxRouter()

    async def get_user(ctx):
        ctx.res.data = {"id": ctx.req.data["id"]}
        return ctx

    router.route("GET /user/:id").to(get_user)

    ctx = router.new_ctx("http")
    ctx.req.route.op, ctx.req.route.raw = "GET", "/user/7"
    ctx = await router.exec(ctx)
"""

from importlib import import_module

__version__ = "0.1.0"
__all__ = [
    "ROUTER_ERRORS",
    "CtxError",
    "CtxLogHandler",
    "CtxRouter",
    "Ctx",
    "HandlerNotFound",
    "HooksAlreadySealed",
    "RouterConfig",
    "RouterError",
    "ValidationError",
    "error_map",
    "error_to_response",
    "get_ctx",
    "log_before",
]

_LAZY_IMPORTS: dict[str, str] = {
    "ROUTER_ERRORS": "ctxrouter.errors",
    "CtxError": "ctxrouter.errors",
    "CtxLogHandler": "ctxrouter.capture",
    "CtxRouter": "ctxrouter.router",
    "Ctx": "ctxrouter.context",
    "HandlerNotFound": "ctxrouter.errors",
    "HooksAlreadySealed": "ctxrouter.errors",
    "RouterConfig": "ctxrouter.config",
    "RouterError": "ctxrouter.errors",
    "ValidationError": "ctxrouter.errors",
    "error_map": "ctxrouter.errors",
    "error_to_response": "ctxrouter.defaults",
    "get_ctx": "ctxrouter.context",
    "log_before": "ctxrouter.defaults",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import ctxrouter`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module 'ctxrouter' has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(import_module(module_name), name)
