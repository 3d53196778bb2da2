from threading import Lock
from typing import Callable, Generic, Hashable, TypeVar

from loguru import logger

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


class EntityCache(Generic[K, V]):
    """
    Read-through store of fetched entities, keyed by identifier.

    Entries live until ``clear`` is called; there is no eviction. Stored values
    are immutable, so every caller receives the same shared object.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[K, V] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: K, value: V) -> V:
        with self._lock:
            self._entries[key] = value
        return value

    def get_or_fetch(self, key: K, fetch: Callable[[], V]) -> V:
        with self._lock:
            if key in self._entries:
                logger.debug(f"Using cached {self.name}", key=key)
                return self._entries[key]
        logger.debug(f"{self.name} not fetched yet. Fetching now.", key=key)
        value = fetch()
        with self._lock:
            # a concurrent fetch of the same key keeps the first stored value
            return self._entries.setdefault(key, value)

    def find(self, predicate: Callable[[V], bool]) -> V | None:
        with self._lock:
            candidates = list(self._entries.values())
        return next((value for value in candidates if predicate(value)), None)

    def values(self) -> list[V]:
        with self._lock:
            return list(self._entries.values())

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug(f"Cleared {self.name} cache", entries=count)
