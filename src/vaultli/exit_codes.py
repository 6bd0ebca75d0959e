"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~vaultli.exceptions.VaultliError` subclass.
Shell wrappers can inspect the exit code to tell a missing secret apart
from a rejected token without parsing stderr.

Example::

    $ vaultli read secret/does-not-exist --raise-on-not-found
    $ echo $?
    4   # EXIT_NOT_FOUND -- nothing stored at that path
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or unknown request options."""

EXIT_AUTH_FAILURE = 3
"""The server rejected the token (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""Nothing is stored at the requested path (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The server returned an error status that is not otherwise classified."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
