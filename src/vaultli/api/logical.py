"""Path-based secret operations: list, read, write, delete, unwrap.

:class:`Logical` is the request pipeline every secret call goes through::

    resolve path -> (read only: response cache) -> jitter -> transport -> decode

It owns a :class:`~vaultli.api.paths.PathResolver`, a
:class:`~vaultli.api.jitter.JitterPolicy` and shares the client's
:class:`~vaultli.cache.ResponseCache`. Nothing here retries; retry and
timeouts belong to the :class:`~vaultli.client.transport.Transport`.

A 404 from the server is the only error this layer interprets. ``read`` and
``list`` either raise :class:`~vaultli.exceptions.SecretNotFoundError` or
return ``None`` / ``[]`` depending on the effective ``raise_on_not_found``
option. Every other error propagates unchanged.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Optional, Union

from pydantic import ValidationError

from vaultli.api.jitter import JitterPolicy
from vaultli.api.paths import PathResolver
from vaultli.cache import ResponseCache
from vaultli.config import resolve_option
from vaultli.exceptions import (
    DecodeError,
    HTTPError,
    InvalidOptionsError,
    SecretNotFoundError,
)
from vaultli.models import ClientConfig, RequestOptions, Secret

if TYPE_CHECKING:
    from vaultli.client.transport import Transport

API_VERSION = "v1"
UNWRAP_PATH = "cubbyhole/response"


def _is_not_found(exc: HTTPError) -> bool:
    return exc.status_code == 404


class Logical:
    """The logical secret operations of a client.

    Usually reached through :attr:`vaultli.client.vault.VaultClient.logical`
    rather than built directly.

    Args:
        transport: The HTTP transport requests are sent through.
        defaults: Client-wide configuration supplying option defaults.
        cache: Response cache shared with the owning client. A private one is
            created when omitted.

    Example::

        logical.write("secret/app", {"password": "hunter2"})
        logical.read("secret/app").data        #=> {"password": "hunter2"}
        logical.read("app", path_prefix="secret", cache=True)
        logical.list("secret")                 #=> ["app"]
        logical.delete("secret/app")           #=> True
    """

    def __init__(
        self,
        transport: Transport,
        defaults: Optional[ClientConfig] = None,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self._transport = transport
        self._defaults = defaults if defaults is not None else ClientConfig()
        self._paths = PathResolver(self._defaults)
        self._jitter = JitterPolicy(self._defaults)
        self._cache = cache if cache is not None else ResponseCache()

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def list(self, path: str, **options: Any) -> list[str]:
        """List the keys under *path*.

        Returns ``[]`` when nothing is stored there, unless
        ``raise_on_not_found`` is in effect.

        Raises:
            SecretNotFoundError: On a 404 with ``raise_on_not_found``.
        """
        opts = self._options(options)
        resolved = self._paths.resolve(path, opts)
        self._jitter.maybe_delay(opts)
        try:
            json_body = self._transport.list(
                self._api_path(resolved), headers=self._headers(opts),
            )
        except HTTPError as exc:
            if _is_not_found(exc):
                if self._raise_on_not_found(opts):
                    raise SecretNotFoundError(resolved) from exc
                return []
            raise

        if not json_body:
            return []
        secret = Secret.decode(json_body)
        return list((secret.data or {}).get("keys") or [])

    def read(self, path: str, **options: Any) -> Optional[Secret]:
        """Read the secret at *path*.

        With ``cache=True`` a previously read value for the same resolved path
        is returned without contacting the server.

        Returns:
            The decoded :class:`~vaultli.models.Secret`, or ``None`` when
            nothing is stored there and ``raise_on_not_found`` is off.

        Raises:
            SecretNotFoundError: On a 404 with ``raise_on_not_found``.
        """
        opts = self._options(options)
        resolved = self._paths.resolve(path, opts)
        cache_enabled = bool(resolve_option("cache", opts, self._defaults))

        def fetch() -> Secret:
            self._jitter.maybe_delay(opts)
            json_body = self._transport.get(
                self._api_path(resolved), headers=self._headers(opts),
            )
            return Secret.decode(json_body)

        try:
            return self._cache.cache(resolved, cache_enabled, fetch)
        except HTTPError as exc:
            if _is_not_found(exc):
                if self._raise_on_not_found(opts):
                    raise SecretNotFoundError(resolved) from exc
                return None
            raise

    def write(
        self,
        path: str,
        data: Optional[dict[str, Any]] = None,
        **options: Any,
    ) -> Union[Secret, bool]:
        """Write *data* to *path*, replacing whatever was stored there.

        Returns:
            ``True`` when the server answers with an empty body, otherwise
            the decoded :class:`~vaultli.models.Secret`.
        """
        opts = self._options(options)
        resolved = self._paths.resolve(path, opts)
        self._jitter.maybe_delay(opts)
        json_body = self._transport.put(
            self._api_path(resolved),
            json.dumps(data or {}),
            headers=self._headers(opts),
        )
        if json_body is None:
            return True
        return Secret.decode(json_body)

    def delete(self, path: str, **options: Any) -> bool:
        """Delete the secret at *path*. Always ``True``, even if nothing was there."""
        opts = self._options(options)
        resolved = self._paths.resolve(path, opts)
        self._jitter.maybe_delay(opts)
        self._transport.delete(self._api_path(resolved), headers=self._headers(opts))
        return True

    def unwrap(self, wrapper: str) -> Optional[Secret]:
        """Exchange a wrapping token for the response it wraps.

        The request is made with *wrapper* as the active token; the client's
        own token is restored afterwards.

        Returns:
            The unwrapped :class:`~vaultli.models.Secret`, or ``None`` when
            the wrapper holds no response or no longer exists.
        """
        opts = RequestOptions()
        self._jitter.maybe_delay(opts)
        try:
            with self._transport.with_token(wrapper) as transport:
                json_body = transport.get(self._api_path(UNWRAP_PATH))
        except HTTPError as exc:
            if _is_not_found(exc):
                return None
            raise

        if not json_body:
            return None
        secret = Secret.decode(json_body)
        if not secret.data or secret.data.get("response") is None:
            return None

        response = secret.data["response"]
        if isinstance(response, str):
            try:
                response = json.loads(response)
            except json.JSONDecodeError as exc:
                raise DecodeError(f"Malformed wrapped response: {exc}") from exc
        return Secret.decode(response)

    def unwrap_token(self, wrapper: Union[str, Secret]) -> Optional[str]:
        """Unwrap a wrapped token and return the client token inside.

        Args:
            wrapper: The wrapping token, or a :class:`~vaultli.models.Secret`
                whose ``wrap_info`` carries it.

        Returns:
            The unwrapped ``auth.client_token``, or ``None`` if the unwrapped
            response has no ``auth`` block.
        """
        if isinstance(wrapper, Secret):
            if wrapper.wrap_info is None:
                return None
            wrapper = wrapper.wrap_info.token

        secret = self.unwrap(wrapper)
        if secret is None or secret.auth is None:
            return None
        return secret.auth.client_token

    def full_path(self, path: str, **options: Any) -> str:
        """Return the resolved path for *path* without making a request."""
        return self._paths.resolve(path, self._options(options))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _options(self, options: dict[str, Any]) -> RequestOptions:
        try:
            return RequestOptions.model_validate(options)
        except ValidationError as exc:
            raise InvalidOptionsError(f"Invalid request options: {exc}") from exc

    def _raise_on_not_found(self, opts: RequestOptions) -> bool:
        return bool(resolve_option("raise_on_not_found", opts, self._defaults))

    def _headers(self, opts: RequestOptions) -> dict[str, str]:
        # Client-wide headers are already applied by the transport.
        return dict(opts.headers or {})

    @staticmethod
    def _api_path(resolved: str) -> str:
        return f"/{API_VERSION}/{resolved.lstrip('/')}"
