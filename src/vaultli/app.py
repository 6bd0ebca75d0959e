"""Typer application and CLI entry point for vaultli.

This module wires together the top-level Typer application and registers the
secret commands (``read``, ``write``, ``list``, ``delete``, ``unwrap``) and
the ``config`` sub-command group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~vaultli.exceptions.VaultliError` instances end
the process with their ``exit_code``; anything else is written to a crash log
under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from vaultli import __version__
from vaultli.commands.config import config_app
from vaultli.commands.secrets import (
    delete_command,
    list_command,
    read_command,
    unwrap_command,
    write_command,
)
from vaultli.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="vaultli",
    help="Read, write, list and delete secrets in a Vault server.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("read")(read_command)
app.command("write")(write_command)
app.command("list")(list_command)
app.command("delete")(delete_command)
app.command("unwrap")(unwrap_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"vaultli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    address: Optional[str] = typer.Option(
        None, "--address", "-a", help="Vault server address (overrides VAULT_ADDR)."
    ),
    path_prefix: Optional[str] = typer.Option(
        None, "--path-prefix", help="Prefix joined onto every secret path."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~vaultli.output.OutputManager` from the
    output flags and stores the connection overrides in ``ctx.obj``.
    """
    from vaultli.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["address"] = address
    ctx.obj["path_prefix"] = path_prefix


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from vaultli.config import get_data_dir

    logs_dir = get_data_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``vaultli`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from vaultli.exceptions import VaultliError
        from vaultli.output import error

        if isinstance(exc, VaultliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
