"""HTTP client module for vaultli.

Provides the blocking :class:`Transport` that wraps :mod:`httpx` with token
injection, path encoding, retry with exponential backoff and error mapping,
and the :class:`VaultClient` facade that bundles a transport, the
client-wide defaults, a response cache and the logical operations.

Example::

    from vaultli.client import VaultClient

    with VaultClient(address="https://vault.example.com:8200", token=tok) as client:
        secret = client.logical.read("secret/app")
"""

from vaultli.client.transport import Transport
from vaultli.client.vault import VaultClient

__all__ = ["Transport", "VaultClient"]
