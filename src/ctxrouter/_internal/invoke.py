"""Call user-supplied stages the same way whether they are sync or async.

Middleware, handlers and lifecycle hooks all go through ``invoke`` so the
pipeline and ``execute()`` never branch on coroutine functions.
"""

import inspect
from typing import Any


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Return ``fn(*args, **kwargs)``, awaiting it first if it is awaitable."""
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
