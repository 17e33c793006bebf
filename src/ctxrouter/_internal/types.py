"""Shared type aliases used across ctxrouter modules."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

# Pipeline stage (middleware or terminal handler): receives the context and
# returns it, sync or async. Returning None keeps the current context.
Middleware: TypeAlias = Callable[[Any], Any]

# Composed pipeline stored on a Route
Pipeline: TypeAlias = Callable[[Any], Awaitable[Any]]

# Side-effect hooks: before / after / finally receive the context,
# error receives (ctx, exc). Return values are ignored.
Hook: TypeAlias = Callable[[Any], Any]
ErrorHook: TypeAlias = Callable[[Any, BaseException], Any]
