"""Config commands -- view and modify the client configuration.

Provides the ``vaultli config`` sub-command group for reading and updating
the persisted :class:`~vaultli.models.ClientConfig`. Settings control the
server address and the client-wide defaults for path prefix, caching,
not-found handling and jitter.
"""

from __future__ import annotations

import typer

from vaultli.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the configuration file contents.

    Example::

        vaultli config show
        vaultli --json config show
    """
    from vaultli.config import get_config_dir, load_client_config

    config = load_client_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json", exclude={"token"}))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key, e.g. 'jitter_size'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The string is coerced to the field's type by Pydantic validation.
    Writing ``token`` is refused; point ``token_source`` at it instead.

    Example::

        vaultli config set address https://vault.example.com:8200
        vaultli config set path_prefix secret
        vaultli config set cache true
    """
    from vaultli.config import load_client_config, save_client_config
    from vaultli.models import ClientConfig

    if key == "token":
        error("Refusing to store a token; set token_source instead (env:VAR or file:/path)")
        raise typer.Exit(code=2)
    if key not in ClientConfig.model_fields or key == "headers":
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    data = load_client_config().model_dump(mode="json")
    data[key] = value

    try:
        new_config = ClientConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_client_config(new_config)
    success(f"Set {key} = {getattr(new_config, key)}")
