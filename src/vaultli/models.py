"""Canonical Pydantic models shared across all vaultli modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- :class:`ClientConfig` holds the connection
settings and client-wide request defaults (persisted as JSON in the user's
config directory), and :class:`RequestOptions` holds the per-call overrides
passed to the logical operations.

**Response models** -- :class:`Secret` and its sub-records
:class:`SecretAuth` and :class:`SecretWrapInfo`, decoded from the JSON body
the server returns.

Both configuration models share the option keys ``path_prefix``, ``cache``,
``raise_on_not_found``, ``jitter_size``, ``jitter_multiplier``,
``jitter_constant`` and ``headers``. A value of ``None`` means "not set at
this level"; :func:`~vaultli.config.resolve_option` walks call level first,
then client level.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vaultli.exceptions import DecodeError


# --- Configuration ---


class ClientConfig(BaseModel):
    """Connection settings and client-wide request defaults.

    Loaded and saved by :func:`~vaultli.config.load_client_config` and
    :func:`~vaultli.config.save_client_config`, and layered with environment
    variables by :func:`~vaultli.config.resolve_config`.

    Example::

        ClientConfig(
            address="https://vault.example.com:8200",
            token="s.xxxxxxxx",
            path_prefix="secret",
            jitter_size=50,
            jitter_multiplier=10,
        )
    """

    address: str = Field(
        default="https://127.0.0.1:8200", description="Base URL of the Vault server"
    )
    token: Optional[str] = Field(
        default=None, description="Token sent as X-Vault-Token"
    )
    token_source: Optional[str] = Field(
        default=None,
        description="Credential source for the token: env:VAR, file:/path, prompt",
    )
    namespace: Optional[str] = Field(
        default=None, description="Enterprise namespace sent as X-Vault-Namespace"
    )
    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    max_retries: int = Field(
        default=2, description="Retries on 5xx and network errors"
    )
    # Client-wide defaults for per-call options.
    path_prefix: Optional[str] = None
    cache: Optional[bool] = None
    raise_on_not_found: Optional[bool] = None
    jitter_size: Optional[float] = None
    jitter_multiplier: Optional[float] = None
    jitter_constant: Optional[float] = None
    headers: dict[str, str] = Field(default_factory=dict)


class RequestOptions(BaseModel):
    """Per-call overrides accepted by every logical operation.

    Unknown keys are rejected so that a typo like ``raise_on_notfound=True``
    fails loudly instead of silently falling back to the client default.
    """

    model_config = ConfigDict(extra="forbid")

    path_prefix: Optional[str] = None
    cache: Optional[bool] = None
    raise_on_not_found: Optional[bool] = None
    jitter_size: Optional[float] = None
    jitter_multiplier: Optional[float] = None
    jitter_constant: Optional[float] = None
    headers: Optional[dict[str, str]] = None


# --- Responses ---


class SecretAuth(BaseModel):
    """The ``auth`` block of a response (present after logins and token creation)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    client_token: Optional[str] = None
    accessor: Optional[str] = None
    policies: list[str] = Field(default_factory=list)
    metadata: Optional[dict[str, Any]] = None
    lease_duration: int = 0
    renewable: bool = False


class SecretWrapInfo(BaseModel):
    """The ``wrap_info`` block of a response-wrapped reply."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    token: str
    ttl: int = 0
    creation_time: Optional[str] = None
    wrapped_accessor: Optional[str] = None


class Secret(BaseModel):
    """A decoded response from the server.

    Attributes are read-only once constructed. The ``data`` mapping itself is
    a plain ``dict``; callers served from the response cache get their own
    deep copy, so mutating it never affects anyone else.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    request_id: Optional[str] = None
    lease_id: Optional[str] = None
    lease_duration: int = 0
    renewable: bool = False
    data: Optional[dict[str, Any]] = None
    warnings: Optional[list[str]] = None
    auth: Optional[SecretAuth] = None
    wrap_info: Optional[SecretWrapInfo] = None

    @classmethod
    def decode(cls, json: Any) -> Secret:
        """Build a :class:`Secret` from a decoded JSON response body.

        Raises:
            DecodeError: If *json* is not a mapping of the expected shape.
        """
        try:
            return cls.model_validate(json)
        except ValidationError as exc:
            raise DecodeError(f"Malformed secret response: {exc}") from exc
