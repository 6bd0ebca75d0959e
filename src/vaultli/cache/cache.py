"""Per-client memo of decoded responses, keyed by resolved path.

Reads are gated by the ``enabled`` flag passed on each call, writes are not:
a read made with caching off still stores its result, so a later read of the
same path with caching on is a hit. Nothing is ever evicted or expired, and
``write``/``delete`` on a path do not invalidate its entry, so a cached read
after a mutation returns the value from before it.

Values are deep-copied on the way in and on the way out. A caller that
mutates the ``data`` dict of a returned :class:`~vaultli.models.Secret` never
changes what the next caller gets.

The store is a plain ``dict`` with no locking. Two threads missing on the
same key at the same time both run ``compute`` and the last write wins.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, TypeVar

from vaultli.output import get_output

T = TypeVar("T")


class ResponseCache:
    """Unbounded in-memory cache of decoded responses.

    Example::

        cache = ResponseCache()
        secret = cache.cache("secret/app", True, lambda: fetch("secret/app"))
    """

    def __init__(self) -> None:
        self._store: dict[str, Any] = {}

    def cache(self, key: str, enabled: bool, compute: Callable[[], T]) -> T:
        """Return the cached value for *key*, or compute and store it.

        Args:
            key: The resolved request path.
            enabled: When ``True`` an existing entry is returned without
                calling *compute*. When ``False`` *compute* always runs.
            compute: Zero-argument callable performing the request and
                decoding. Exceptions propagate and nothing is stored.

        Returns:
            The computed value on a miss, or a deep copy of the stored value
            on a hit.
        """
        if enabled and key in self._store:
            get_output().debug(f"Cache hit: {key}")
            return copy.deepcopy(self._store[key])

        value = compute()
        self._store[key] = copy.deepcopy(value)
        return value

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        """Remove all entries from the cache."""
        self._store.clear()

    def stats(self) -> dict[str, Any]:
        """Return the number of entries and their keys."""
        return {
            "size": len(self._store),
            "keys": sorted(self._store),
        }
