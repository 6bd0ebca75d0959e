"""In-memory response caching for vaultli.

This package provides :class:`ResponseCache`, the per-client memo that
:class:`~vaultli.api.logical.Logical` wraps around ``read`` calls. Entries
are keyed by the resolved secret path and live as long as the owning
:class:`~vaultli.client.vault.VaultClient`.

The per-call ``cache`` option (or the client-wide
:attr:`~vaultli.models.ClientConfig.cache` default) decides whether a read
may be served from the cache; every successful read is stored either way.
"""

from vaultli.cache.cache import ResponseCache

__all__ = ["ResponseCache"]
