"""In-memory cache with a fixed TTL and a background expiry sweep.

Reads check expiry themselves, so a stale value is never returned even if the
sweep has not run yet. The sweep only exists to keep dead entries from piling
up in memory.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
a country may be fetched twice (once per worker).
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    expires_at: float


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of lookups cannot
    starve the sweep.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ExpiringCache(Generic[V]):
    """Thread-safe string-keyed cache where every entry lives for ``ttl`` seconds.

    The sweep thread is not started by the constructor. Call ``start()`` (or
    use the cache as a context manager) and ``stop()`` when done.

    ``stop()`` is guarded: a second call logs a warning and does nothing.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl}")
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[V]] = {}
        self._lock = ReadWriteLock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def sweep_interval(self) -> float:
        return self._ttl / 2

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def get(self, key: str) -> tuple[V | None, bool]:
        """Return ``(value, True)`` for a live entry, ``(None, False)`` otherwise."""
        with self._lock.read_locked():
            entry = self._entries.get(key)
            if entry is None:
                return None, False
            if entry.expires_at <= self._clock():
                return None, False
            return entry.value, True

    def set(self, key: str, value: V) -> None:
        with self._lock.write_locked():
            self._entries[key] = CacheEntry(value, self._clock() + self._ttl)

    def size(self) -> int:
        """Number of entries held, counting expired ones the sweep has not removed yet."""
        with self._lock.read_locked():
            return len(self._entries)

    def purge_expired(self) -> int:
        """Drop every entry at or past its expiry. Returns how many were removed."""
        with self._lock.write_locked():
            now = self._clock()
            expired = [k for k, entry in self._entries.items() if entry.expires_at <= now]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def start(self) -> None:
        if self._thread is not None or self._stop_event.is_set():
            raise RuntimeError("ExpiringCache can only be started once")
        self._thread = threading.Thread(
            target=self._sweep_loop,
            name="expiring-cache-sweep",
            daemon=True,
        )
        self._thread.start()
        logger.info("Cache sweep started (ttl=%ss, interval=%ss)", self._ttl, self.sweep_interval)

    def stop(self) -> None:
        """Signal the sweep thread to exit. Does not wait for it."""
        if self._stop_event.is_set():
            logger.warning("ExpiringCache.stop() called more than once; ignoring")
            return
        self._stop_event.set()
        logger.info("Cache sweep stopped")

    def _sweep_loop(self) -> None:
        while not self._stop_event.wait(self.sweep_interval):
            removed = self.purge_expired()
            if removed:
                logger.debug("Swept %d expired cache entries", removed)

    def __enter__(self) -> "ExpiringCache[V]":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
