"""Bounded, time-limited memoization of schema existence lookups."""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from concurrent.futures import Future

logger = logging.getLogger(__name__)

DEFAULT_MAXIMUM_SIZE = 1000
DEFAULT_EXPIRE_AFTER_WRITE = 300.0


class ExistenceCache:
    """Caches ``loader(name) -> bool`` results.

    Entries expire ``expire_after_write`` seconds after they are stored and
    at most ``maximum_size`` entries are kept, dropping the oldest write
    first. A miss triggers exactly one loader call per name: concurrent
    callers asking for the same name wait on the in-flight lookup and get
    its result, or its exception. Failed lookups are not cached.

    The cache holds existence flags only, never schema content.
    """

    def __init__(
        self,
        loader: Callable[[str], bool],
        maximum_size: int = DEFAULT_MAXIMUM_SIZE,
        expire_after_write: float = DEFAULT_EXPIRE_AFTER_WRITE,
        clock: Callable[[], float] = time.monotonic,
    ):
        if maximum_size <= 0:
            raise ValueError("maximum_size must be positive")
        self._loader = loader
        self._maximum_size = maximum_size
        self._expire_after_write = expire_after_write
        self._clock = clock
        self._entries: OrderedDict[str, tuple[bool, float]] = OrderedDict()
        self._in_flight: dict[str, Future] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, name: str) -> bool:
        with self._lock:
            entry = self._entries.get(name)
            if entry is not None:
                value, written_at = entry
                if self._clock() - written_at < self._expire_after_write:
                    return value
                del self._entries[name]

            pending = self._in_flight.get(name)
            owner = pending is None
            if owner:
                pending = Future()
                self._in_flight[name] = pending

        if not owner:
            return pending.result()
        return self._load(name, pending)

    def _load(self, name: str, pending: Future) -> bool:
        logger.debug("Schema existence cache miss for %s", name)
        try:
            value = bool(self._loader(name))
        except BaseException as e:
            with self._lock:
                del self._in_flight[name]
            pending.set_exception(e)
            raise

        with self._lock:
            self._entries[name] = (value, self._clock())
            self._entries.move_to_end(name)
            while len(self._entries) > self._maximum_size:
                self._entries.popitem(last=False)
            del self._in_flight[name]
        pending.set_result(value)
        return value
