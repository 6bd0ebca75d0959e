"""Secret commands -- read, write, list, delete and unwrap.

Each command builds a :class:`~vaultli.client.vault.VaultClient` from the
resolved configuration (``--address`` flag, ``VAULT_*`` environment
variables, config file) and calls the matching
:class:`~vaultli.api.logical.Logical` operation. Results go to stdout through
the output system; diagnostics go to stderr.

Example::

    vaultli write secret/app password=hunter2 user=admin
    vaultli read secret/app --field password
    vaultli list secret
    vaultli delete secret/app
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from vaultli.client.vault import VaultClient
from vaultli.models import Secret
from vaultli.output import format_response, info, print_data, success, warning


def _make_client(ctx: typer.Context) -> VaultClient:
    """Build a client from the root-callback options stored on *ctx*."""
    obj = ctx.obj or {}
    return VaultClient.from_env(
        address=obj.get("address"),
        path_prefix=obj.get("path_prefix"),
    )


def _report_warnings(secret: Secret) -> None:
    """Relay the server's response warnings to stderr."""
    for message in secret.warnings or []:
        warning(message)


def _parse_pairs(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` arguments into a dict."""
    data: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got: {pair}")
        data[key] = value
    return data


def read_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Secret path to read."),
    field: Optional[str] = typer.Option(
        None, "--field", help="Print only this key of the secret's data."
    ),
    raise_on_not_found: bool = typer.Option(
        False, "--raise-on-not-found", help="Fail with exit code 4 if nothing is stored."
    ),
) -> None:
    """Read a secret and print its data."""
    with _make_client(ctx) as client:
        secret = client.logical.read(path, raise_on_not_found=raise_on_not_found or None)

    if secret is None:
        info(f"No value found at {path}")
        return
    _report_warnings(secret)
    data = secret.data or {}
    if field is not None:
        if field not in data:
            info(f"Field '{field}' not present at {path}")
            raise typer.Exit(code=2)
        print_data(str(data[field]))
        return
    format_response(data)


def write_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Secret path to write."),
    pairs: list[str] = typer.Argument(help="Data as KEY=VALUE pairs."),
) -> None:
    """Write KEY=VALUE pairs to a secret, replacing existing data."""
    data = _parse_pairs(pairs)
    with _make_client(ctx) as client:
        result = client.logical.write(path, data)

    if result is True:
        success(f"Success! Data written to: {path}")
    else:
        _report_warnings(result)
        format_response(result.model_dump(mode="json", exclude_none=True))


def list_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path to list keys under."),
) -> None:
    """List the keys stored under a path."""
    with _make_client(ctx) as client:
        keys = client.logical.list(path)

    if not keys:
        info(f"No keys found at {path}")
        return
    format_response(keys)


def delete_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Secret path to delete."),
) -> None:
    """Delete a secret. Succeeds even if nothing was stored."""
    with _make_client(ctx) as client:
        client.logical.delete(path)
    success(f"Success! Data deleted (if it existed) at: {path}")


def unwrap_command(
    ctx: typer.Context,
    token: str = typer.Argument(help="Wrapping token."),
) -> None:
    """Unwrap a response-wrapping token and print the wrapped response."""
    with _make_client(ctx) as client:
        secret = client.logical.unwrap(token)

    if secret is None:
        info("Nothing was wrapped under that token")
        return
    _report_warnings(secret)
    format_response(secret.model_dump(mode="json", exclude_none=True))
