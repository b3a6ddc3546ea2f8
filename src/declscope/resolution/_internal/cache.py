"""Process-lifetime caches shared by concurrent resolution queries.

Every cached computation is idempotent and side-effect free, so two threads
racing on the same key may both compute it; only insertion is serialized,
and the first stored value wins (compute-if-absent).
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Generic, TypeVar

from declscope.config.constants import DEFAULT_INTERFACE_METHOD_CACHE_SIZE

if TYPE_CHECKING:
    from declscope.model import ClassDecl, MethodDecl

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class ComputeIfAbsentMap(Generic[K, V]):
    """Unbounded map with atomic compute-if-absent insertion."""

    def __init__(self) -> None:
        self._data: dict[K, V] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        value = self._data.get(key, _MISSING)
        if value is not _MISSING:
            return value  # type: ignore[return-value]
        computed = compute(key)
        with self._lock:
            return self._data.setdefault(key, computed)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class LruCache(Generic[K, V]):
    """Thread-safe bounded LRU cache with compute-if-absent lookups."""

    def __init__(self, max_entries: int = DEFAULT_INTERFACE_METHOD_CACHE_SIZE) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()
        self._max = max_entries

    @property
    def max_entries(self) -> int:
        return self._max

    def get(self, key: K) -> V | None:
        """Retrieve a cached value (None if missing), marking it recently used."""
        with self._lock:
            if key not in self._entries:
                return None
            self._entries.move_to_end(key)
            return self._entries[key]

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            self._evict()

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return self._entries[key]
        computed = compute(key)
        with self._lock:
            if key in self._entries:
                # Another thread stored it first
                self._entries.move_to_end(key)
                return self._entries[key]
            self._entries[key] = computed
            self._evict()
            return computed

    def _evict(self) -> None:
        # Evict oldest if over capacity
        while len(self._entries) > self._max:
            self._entries.popitem(last=False)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class ResolutionCaches:
    """The three caches consulted by the hierarchy walker and tag resolver.

    - no-cycle names: classes already proven free of enclosing-class cycles
    - container types: tag type -> whether it is a repeatable-tag container
    - interface methods: concrete method -> equivalent public interface method
    """

    def __init__(self, interface_method_cache_size: int = DEFAULT_INTERFACE_METHOD_CACHE_SIZE) -> None:
        self._no_cycle_names: set[str] = set()
        self._no_cycle_lock = threading.Lock()
        self.container_types: ComputeIfAbsentMap[ClassDecl, bool] = ComputeIfAbsentMap()
        self.interface_methods: LruCache[MethodDecl, MethodDecl] = LruCache(
            interface_method_cache_size
        )

    def is_known_cycle_free(self, class_name: str) -> bool:
        return class_name in self._no_cycle_names

    def mark_cycle_free(self, class_name: str) -> None:
        with self._no_cycle_lock:
            self._no_cycle_names.add(class_name)

    @property
    def cycle_free_count(self) -> int:
        return len(self._no_cycle_names)

    def clear(self) -> None:
        with self._no_cycle_lock:
            self._no_cycle_names.clear()
        self.container_types.clear()
        self.interface_methods.clear()
