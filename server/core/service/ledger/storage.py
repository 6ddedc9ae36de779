"""Key-value storage used by the order and redemption ledgers."""
import threading
from abc import ABC, abstractmethod
from typing import Generic, Iterator, Optional, TypeVar

V = TypeVar("V")


class KeyValueStore(ABC, Generic[V]):
    """
    Minimal storage contract for the ledgers.

    `pop` must be atomic: when two callers race on the same key exactly one
    of them receives the value.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[V]:
        pass

    @abstractmethod
    def put(self, key: str, value: V) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    def pop(self, key: str) -> Optional[V]:
        pass

    @abstractmethod
    def items(self) -> list[tuple[str, V]]:
        pass

    def values(self) -> list[V]:
        return [value for _, value in self.items()]

    def __len__(self) -> int:
        return len(self.items())


class InMemoryStore(KeyValueStore[V]):
    """Dict guarded by a single lock. Never hold the lock across network I/O."""

    def __init__(self, initial: Optional[dict[str, V]] = None):
        self._data: dict[str, V] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def pop(self, key: str) -> Optional[V]:
        with self._lock:
            return self._data.pop(key, None)

    def items(self) -> list[tuple[str, V]]:
        with self._lock:
            return list(self._data.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
