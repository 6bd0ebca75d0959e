"""The :class:`VaultClient` facade.

One client owns one :class:`~vaultli.client.transport.Transport`, one
:class:`~vaultli.cache.ResponseCache` and one lazily built
:class:`~vaultli.api.logical.Logical`. Caches are never shared between
clients.
"""

from __future__ import annotations

from typing import Any, Optional

from vaultli.api.logical import Logical
from vaultli.cache import ResponseCache
from vaultli.client.transport import Transport
from vaultli.config import resolve_config
from vaultli.models import ClientConfig


class VaultClient:
    """Entry point for talking to a Vault server.

    Args:
        config: Full client configuration. When omitted, one is built from
            *settings*.
        **settings: :class:`~vaultli.models.ClientConfig` fields, applied on
            top of *config* when both are given.

    Example::

        client = VaultClient(address="http://127.0.0.1:8200", token="root",
                             path_prefix="secret", cache=True)
        with client:
            client.logical.write("app", {"value": "s3cr3t"})
            client.read("app")   #=> "s3cr3t"
    """

    def __init__(self, config: Optional[ClientConfig] = None, **settings: Any) -> None:
        if config is None:
            config = ClientConfig(**settings)
        elif settings:
            config = ClientConfig.model_validate({**config.model_dump(), **settings})
        self.config = config
        self.transport = Transport(config)
        self.cache = ResponseCache()
        self._logical: Optional[Logical] = None

    @classmethod
    def from_env(cls, **overrides: Any) -> VaultClient:
        """Build a client from the config file, ``VAULT_*`` variables and *overrides*."""
        return cls(resolve_config(**overrides))

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> VaultClient:
        self.transport.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def logical(self) -> Logical:
        """The :class:`~vaultli.api.logical.Logical` operations of this client."""
        if self._logical is None:
            self._logical = Logical(self.transport, self.config, self.cache)
        return self._logical

    @property
    def token(self) -> Optional[str]:
        return self.transport.token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self.transport.token = value

    def with_token(self, token: Optional[str]):
        """Context manager making requests with *token* inside the block."""
        return self.transport.with_token(token)

    # ------------------------------------------------------------------ #
    # Shortcuts
    # ------------------------------------------------------------------ #

    def read(self, path: str, **options: Any) -> Any:
        """Return the ``value`` field of the secret at *path*, or ``None``."""
        secret = self.logical.read(path, **options)
        if secret is None or secret.data is None:
            return None
        return secret.data.get("value")

    def full_path(self, path: str, **options: Any) -> str:
        """Return the resolved path for *path*."""
        return self.logical.full_path(path, **options)
