"""Per-run memoization for the cache-then-fetch lookups (decimals, metadata, price)."""

from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

from loguru import logger

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoizedResolver(Generic[K, V]):
    """Return a cached value for a key, or compute and store it.

    The compute step may fail. With `fallback` set, failures of the types in
    `failure_types` are stored as `fallback()` and never re-attempted; without
    it, the exception propagates and nothing is cached for that key.
    A successful compute is always cached, including a None result.
    """

    def __init__(
        self,
        name: str,
        *,
        fallback: Callable[[], V] | None = None,
        failure_types: tuple[type[BaseException], ...] = (),
    ) -> None:
        self._name = name
        self._fallback = fallback
        self._failure_types = failure_types
        self._cache: dict[K, V] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def peek(self, key: K) -> V | None:
        return self._cache.get(key)

    def seed(self, key: K, value: V) -> None:
        """Insert only if the key has no value yet."""
        self._cache.setdefault(key, value)

    def put(self, key: K, value: V) -> None:
        self._cache[key] = value

    async def get(self, key: K, compute: Callable[[], Awaitable[V]]) -> V:
        if key in self._cache:
            return self._cache[key]

        if self._fallback is not None and self._failure_types:
            try:
                value = await compute()
            except self._failure_types as e:
                logger.debug(f"[CACHE] {self._name} lookup failed for {key}: {e}")
                value = self._fallback()
        else:
            value = await compute()

        self._cache[key] = value
        return value
