"""Lifecycle hook registry.

Four optional slots wrap every dispatch:

- ``before(ctx)``: after begin bookkeeping, before route matching
- ``after(ctx)``: after the handler pipeline succeeded
- ``error(ctx, exc)``: on any failure; when set, the dispatch is recovered
- ``finally_(ctx)``: always, before end bookkeeping

Hooks mutate the context in place; their return values are ignored. They
may be sync or async.

Hooks are registered during startup. The first ``exec()`` seals the
registry and every later setter raises ``HooksAlreadySealed``. Once sealed
the registry is read-only, so concurrent dispatches read it without locks.
"""

from __future__ import annotations

from ctxrouter._internal.types import ErrorHook, Hook
from ctxrouter.errors import HooksAlreadySealed, InvalidHandler


class HookRegistry:
    """Holds the four lifecycle hooks and the one-way ``sealed`` flag."""

    __slots__ = ("_sealed", "after", "before", "error", "finally_")

    def __init__(self) -> None:
        self.before: Hook | None = None
        self.after: Hook | None = None
        self.error: ErrorHook | None = None
        self.finally_: Hook | None = None
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Freeze the registry. Idempotent."""
        self._sealed = True

    def _check_settable(self, slot: str, fn: object) -> None:
        if self._sealed:
            raise HooksAlreadySealed(data={"hook": slot})
        if not callable(fn):
            raise InvalidHandler(f"Hook {slot!r} requires a function", data={"hook": slot})

    def set_before(self, fn: Hook) -> HookRegistry:
        self._check_settable("before", fn)
        self.before = fn
        return self

    def set_after(self, fn: Hook) -> HookRegistry:
        self._check_settable("after", fn)
        self.after = fn
        return self

    def set_error(self, fn: ErrorHook) -> HookRegistry:
        self._check_settable("error", fn)
        self.error = fn
        return self

    def set_finally(self, fn: Hook) -> HookRegistry:
        self._check_settable("finally", fn)
        self.finally_ = fn
        return self

    def __repr__(self) -> str:
        slots = [name for name in ("before", "after", "error", "finally_") if getattr(self, name)]
        return f"<HookRegistry sealed={self._sealed} set={slots}>"
