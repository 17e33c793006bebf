"""Per-router instance identity and counters.

Each ``CtxRouter`` owns one ``Instance``. The counters are the only mutable
state shared between concurrent ``exec()`` calls.

Thread safety:
    ``seq`` and ``inflight`` are read-modify-write under a ``threading.Lock``
    so they stay exact when ``exec()`` runs on several threads (free-threaded
    builds, one event loop per worker). Under a single event loop the lock
    is uncontended.
"""

import secrets
import threading
import time
from dataclasses import dataclass


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True, slots=True)
class InstanceSnapshot:
    """Point-in-time view of an instance, stamped into ``ctx.meta.instance``."""

    id: str
    created_at: int
    seq: int
    inflight: int
    cpu: float = -1
    mem: float = -1


class Instance:
    """Engine identity plus the monotonic ``seq`` counter and ``inflight`` gauge."""

    __slots__ = ("_inflight", "_lock", "_seq", "created_at", "id", "service_name")

    def __init__(self, service_name: str = "ctx-service") -> None:
        self.id: str = secrets.token_hex(5)
        self.created_at: int = now_ms()
        self.service_name = service_name
        self._seq = 0
        self._inflight = 0
        self._lock = threading.Lock()

    @property
    def seq(self) -> int:
        return self._seq

    @property
    def inflight(self) -> int:
        return self._inflight

    def next_seq(self) -> int:
        """Increment and return the sequence number. The first call returns 1."""
        with self._lock:
            self._seq += 1
            return self._seq

    def increment_inflight(self) -> int:
        with self._lock:
            self._inflight += 1
            return self._inflight

    def decrement_inflight(self) -> int:
        with self._lock:
            self._inflight -= 1
            return self._inflight

    def begin(self) -> tuple[int, int]:
        """Take the next ``seq`` and bump ``inflight`` in one step.

        Returns ``(seq, inflight)`` as seen by this dispatch.
        """
        with self._lock:
            self._seq += 1
            self._inflight += 1
            return self._seq, self._inflight

    def snapshot(self, *, cpu: float = -1, mem: float = -1) -> InstanceSnapshot:
        with self._lock:
            return InstanceSnapshot(
                id=self.id,
                created_at=self.created_at,
                seq=self._seq,
                inflight=self._inflight,
                cpu=cpu,
                mem=mem,
            )

    def __repr__(self) -> str:
        return f"<Instance {self.id} seq={self._seq} inflight={self._inflight}>"
