"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from ctxrouter.errors import ConfigurationError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(service_name="payments", stats_enabled=False)
    """

    # Reported in ctx.meta.service_name
    service_name: str = "ctx-service"

    # Process telemetry (CPU / memory), sampled lazily during traffic
    stats_enabled: bool = True
    stats_interval: float = 5.0  # seconds between samples

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RouterConfig":
        """Build a config from ``CTXROUTER_*`` environment variables.

        Unset variables keep their defaults. Raises ``ConfigurationError``
        for values that cannot be parsed.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        service_name = env.get("CTXROUTER_SERVICE_NAME", defaults.service_name)

        stats_enabled = defaults.stats_enabled
        raw_enabled = env.get("CTXROUTER_STATS_ENABLED")
        if raw_enabled is not None:
            value = raw_enabled.strip().lower()
            if value in _TRUE:
                stats_enabled = True
            elif value in _FALSE:
                stats_enabled = False
            else:
                raise ConfigurationError(
                    f"CTXROUTER_STATS_ENABLED must be a boolean, got {raw_enabled!r}",
                    data={"var": "CTXROUTER_STATS_ENABLED"},
                )

        stats_interval = defaults.stats_interval
        raw_interval = env.get("CTXROUTER_STATS_INTERVAL")
        if raw_interval is not None:
            try:
                stats_interval = float(raw_interval)
            except ValueError:
                raise ConfigurationError(
                    f"CTXROUTER_STATS_INTERVAL must be a number, got {raw_interval!r}",
                    data={"var": "CTXROUTER_STATS_INTERVAL"},
                ) from None
            if stats_interval < 0:
                raise ConfigurationError(
                    "CTXROUTER_STATS_INTERVAL must not be negative",
                    data={"var": "CTXROUTER_STATS_INTERVAL"},
                )

        return cls(
            service_name=service_name,
            stats_enabled=stats_enabled,
            stats_interval=stats_interval,
        )
