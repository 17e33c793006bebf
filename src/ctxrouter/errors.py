"""ctxrouter exception hierarchy and error-catalog factory.

Every error carries the same four fields:

- ``name``: constant identifier (``"HANDLER_NOT_FOUND"``)
- ``message``: human-readable text
- ``data``: client-safe mapping, may be sent back to the caller
- ``info``: internal-only mapping, logged but never sent to the caller

Framework errors are ``RouterError`` subclasses so handlers can branch on
framework vs application errors::

    try:
        await router.exec(ctx)
    except RouterError:
        ...  # routing / registration problem
    except CtxError:
        ...  # raised by application code
"""

from collections.abc import Callable, Iterator, Mapping
from typing import Any, ClassVar, TypeAlias


class CtxError(Exception):
    """Base for structured errors raised by the router and by applications.

    Subclass it for application error kinds and build factories for them
    with :func:`error_map`.
    """

    def __init__(
        self,
        name: str,
        msg: str,
        data: Mapping[str, Any] | None = None,
        info: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(msg)
        self.name = name
        self.message = msg
        self.data: dict[str, Any] = dict(data) if data else {}
        self.info: dict[str, Any] | None = dict(info) if info is not None else None

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, msg={self.message!r}, data={self.data!r})"

    def to_dict(self) -> dict[str, Any]:
        """Client-safe view. ``info`` is deliberately left out."""
        return {"code": self.name, "msg": self.message, "data": dict(self.data)}


class RouterError(CtxError):
    """Base for all errors raised by ctxrouter itself."""

    code: ClassVar[str] = "ROUTER_ERROR"
    default_msg: ClassVar[str] = "Router error"

    def __init__(
        self,
        msg: str | None = None,
        *,
        name: str | None = None,
        data: Mapping[str, Any] | None = None,
        info: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(name or self.code, msg or self.default_msg, data, info)


class ConfigurationError(RouterError):
    """Invalid router configuration, typically from environment variables."""

    code = "CONFIGURATION_ERROR"
    default_msg = "Invalid router configuration"


class UnknownError(RouterError):
    """Stand-in for exceptions that are not ``CtxError`` instances."""

    code = "UNKNOWN_ERROR"
    default_msg = "Something went wrong"


# -- Builder-time validation --


class ValidationError(RouterError):
    """Bad input to the ``route / via / to`` builder."""

    code = "VALIDATION_ERROR"
    default_msg = "Invalid route definition"


class InvalidSegment(ValidationError):
    code = "INVALID_ROUTE_SEGMENT"
    default_msg = "Router.route() requires a non-empty string segment"


class InvalidMiddleware(ValidationError):
    code = "INVALID_MIDDLEWARE"
    default_msg = "Router.via() requires function arguments"


class InvalidHandler(ValidationError):
    code = "INVALID_HANDLER"
    default_msg = "Router.to() requires a function"


class MissingSegments(ValidationError):
    code = "MISSING_SEGMENTS"
    default_msg = "Cannot register handler without segments. Use .route(segment) first."


# -- Lifecycle --


class HooksAlreadySealed(RouterError):
    code = "HOOKS_ALREADY_SEALED"
    default_msg = "Hooks must be registered during startup, before exec()"


class HandlerNotFound(RouterError):
    """No route resolved for an invocation.

    ``data`` carries the attempted ``op``, ``raw`` and ``pattern``.
    """

    code = "HANDLER_NOT_FOUND"
    default_msg = "Handler not found"


# -- Catalog factory --

ErrorFactory: TypeAlias = Callable[..., CtxError]


class ErrorCategory:
    """One category of an :class:`ErrorMap`. Attributes are error factories."""

    __slots__ = ("_factories", "_name")

    def __init__(self, name: str, factories: dict[str, ErrorFactory]) -> None:
        self._name = name
        self._factories = factories

    def __getattr__(self, key: str) -> ErrorFactory:
        try:
            return self._factories[key]
        except KeyError:
            msg = f"Error category {self._name!r} has no error {key!r}"
            raise AttributeError(msg) from None

    def __getitem__(self, key: str) -> ErrorFactory:
        return self._factories[key]

    def __contains__(self, key: object) -> bool:
        return key in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __repr__(self) -> str:
        return f"<ErrorCategory {self._name} {sorted(self._factories)}>"


class ErrorMap:
    """Categories of error factories built by :func:`error_map`."""

    __slots__ = ("_categories",)

    def __init__(self, categories: dict[str, ErrorCategory]) -> None:
        self._categories = categories

    def __getattr__(self, category: str) -> ErrorCategory:
        try:
            return self._categories[category]
        except KeyError:
            msg = f"Error map has no category {category!r}"
            raise AttributeError(msg) from None

    def __getitem__(self, category: str) -> ErrorCategory:
        return self._categories[category]

    def __contains__(self, category: object) -> bool:
        return category in self._categories

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __repr__(self) -> str:
        return f"<ErrorMap {sorted(self._categories)}>"


def _make_factory(error_class: type[CtxError], key: str, default_msg: str) -> ErrorFactory:
    def factory(
        msg: str | None = None,
        data: Mapping[str, Any] | None = None,
        info: Mapping[str, Any] | None = None,
    ) -> CtxError:
        return error_class(name=key, msg=msg or default_msg, data=data, info=info)

    factory.__name__ = key
    factory.__qualname__ = f"{error_class.__name__}.{key}"
    return factory


def error_map(
    error_class: type[CtxError],
    catalog: Mapping[str, Mapping[str, str]],
    *,
    kinds: Mapping[str, type[CtxError]] | None = None,
) -> ErrorMap:
    """Turn a ``{category: {NAME: message}}`` catalog into error factories.

    Each factory accepts optional ``msg`` (overrides the default message),
    ``data`` and ``info`` and returns a new *error_class* instance::

        class AppError(CtxError):
            pass

        errs = error_map(AppError, {
            "auth": {"UNAUTHORIZED": "User is not authorized"},
        })

        raise errs.auth.UNAUTHORIZED(data={"reason": "missing_token"})

    *kinds* maps individual names to a subclass of *error_class* to
    instantiate instead, so catalog entries can be caught by type.
    """
    if not (isinstance(error_class, type) and issubclass(error_class, CtxError)):
        msg = f"error_map() requires a CtxError subclass, got {error_class!r}"
        raise TypeError(msg)

    kinds = kinds or {}
    for key, kind in kinds.items():
        if not issubclass(kind, error_class):
            msg = f"Error kind for {key!r} must subclass {error_class.__name__}"
            raise TypeError(msg)

    categories: dict[str, ErrorCategory] = {}
    for category, entries in catalog.items():
        factories = {
            key: _make_factory(kinds.get(key, error_class), key, default_msg)
            for key, default_msg in entries.items()
        }
        categories[category] = ErrorCategory(category, factories)
    return ErrorMap(categories)


_ROUTER_KINDS: tuple[type[RouterError], ...] = (
    UnknownError,
    HooksAlreadySealed,
    InvalidSegment,
    InvalidMiddleware,
    InvalidHandler,
    MissingSegments,
    HandlerNotFound,
)

ROUTER_ERRORS: ErrorMap = error_map(
    RouterError,
    {
        "general": {UnknownError.code: UnknownError.default_msg},
        "hook": {HooksAlreadySealed.code: HooksAlreadySealed.default_msg},
        "router": {
            kind.code: kind.default_msg
            for kind in (InvalidSegment, InvalidMiddleware, InvalidHandler, MissingSegments)
        },
        "handler": {HandlerNotFound.code: HandlerNotFound.default_msg},
    },
    kinds={kind.code: kind for kind in _ROUTER_KINDS},
)
"""The framework's own catalog, e.g. ``ROUTER_ERRORS.handler.HANDLER_NOT_FOUND()``."""
