"""Exception hierarchy for vaultli.

All exceptions inherit from :class:`VaultliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`vaultli.exit_codes`.
The CLI entry point in :func:`vaultli.app.main` catches ``VaultliError`` and
exits with the appropriate code.

Subclass hierarchy::

    VaultliError (exit 1)
    +-- InvalidOptionsError     (exit 2)
    +-- ConfigError             (exit 1)
    +-- DecodeError             (exit 1)
    +-- SecretNotFoundError     (exit 4)
    +-- HTTPConnectionError     (exit 6)
    +-- HTTPError               (exit 5)
        +-- HTTPClientError     (exit 3 on 401/403, 4 on 404, else 5)
        +-- HTTPServerError     (exit 5)

:class:`HTTPError` is what the transport raises for every non-2xx status.
The logical layer inspects ``status_code == 404`` to decide the not-found
branch and re-raises everything else unchanged.
"""

from __future__ import annotations

from typing import Optional

from vaultli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class VaultliError(Exception):
    """Base exception for all vaultli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`vaultli.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidOptionsError(VaultliError):
    """Raised when a call passes an unknown or ill-typed request option."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(VaultliError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class DecodeError(VaultliError):
    """Raised when a response body cannot be decoded into a :class:`~vaultli.models.Secret`."""

    exit_code = EXIT_GENERIC_FAILURE


class SecretNotFoundError(VaultliError):
    """Raised by ``read``/``list`` on a 404 when ``raise_on_not_found`` is set.

    Args:
        path: The resolved path that was requested.
    """

    exit_code = EXIT_NOT_FOUND

    def __init__(self, path: str):
        super().__init__(f"No secret found at '{path}'")
        self.path = path


class HTTPConnectionError(VaultliError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, address: str, message: str):
        super().__init__(f"Could not reach {address}: {message}")
        self.address = address


class HTTPError(VaultliError):
    """Raised when the server answers with a non-2xx status.

    Args:
        address: The server address the request went to.
        status_code: The numeric HTTP status.
        errors: Error strings from the ``errors`` array of the response body.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(
        self,
        address: str,
        status_code: int,
        errors: Optional[list[str]] = None,
    ):
        self.address = address
        self.status_code = status_code
        self.errors = list(errors or [])
        message = f"The Vault server at {address} responded with HTTP {status_code}"
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)

    @property
    def code(self) -> int:
        """Alias for :attr:`status_code`."""
        return self.status_code


class HTTPClientError(HTTPError):
    """Raised for 4xx responses."""

    def __init__(
        self,
        address: str,
        status_code: int,
        errors: Optional[list[str]] = None,
    ):
        super().__init__(address, status_code, errors)
        if status_code in (401, 403):
            self.exit_code = EXIT_AUTH_FAILURE
        elif status_code == 404:
            self.exit_code = EXIT_NOT_FOUND


class HTTPServerError(HTTPError):
    """Raised for 5xx responses once the transport has exhausted its retries."""
