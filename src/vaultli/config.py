"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all configuration for vaultli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.vaultli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Client config** -- A single :class:`~vaultli.models.ClientConfig` JSON
  file storing the server address and client-wide request defaults.
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  overrides, ``VAULT_*`` environment variables, the config file and
  defaults into the effective configuration.
* **Credential resolution** -- :func:`resolve_credential` reads the token
  from env vars, files, or an interactive prompt.
* **Option resolution** -- :func:`resolve_option` applies the call-level /
  client-level lookup used by every logical operation.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from vaultli.exceptions import ConfigError
from vaultli.models import ClientConfig

_APP_NAME = "vaultli"
_CONFIG_FILENAME = "config.json"
_TOKEN_FILENAME = ".vault-token"

# Environment variable -> ClientConfig field.
_ENV_FIELDS = {
    "VAULT_ADDR": "address",
    "VAULT_TOKEN": "token",
    "VAULT_NAMESPACE": "namespace",
    "VAULT_PATH_PREFIX": "path_prefix",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/vaultli/`` (default ``~/.config/vaultli/``).
    On macOS/Windows: ``~/.vaultli/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/vaultli/`` (default ``~/.local/share/vaultli/``).
    On macOS/Windows: ``~/.vaultli/logs/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Client config file ---


def _client_config_path() -> Path:
    """Path to the client config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_client_config() -> ClientConfig:
    """Load the client configuration from the config directory.

    Returns:
        The deserialised :class:`~vaultli.models.ClientConfig`. If the file
        does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _client_config_path()
    if not path.is_file():
        return ClientConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return ClientConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid client config at {path}: {exc}") from exc


def save_client_config(config: ClientConfig) -> None:
    """Persist the client configuration atomically to disk.

    The token itself is never written; use ``token_source`` to point at it.
    """
    data = config.model_dump(mode="json", exclude={"token"})
    _atomic_write(_client_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    """Collect ``VAULT_*`` environment variables as ClientConfig fields."""
    overrides: dict[str, Any] = {}
    for var, field in _ENV_FIELDS.items():
        value = os.environ.get(var)
        if value:
            overrides[field] = value
    skip_verify = os.environ.get("VAULT_SKIP_VERIFY")
    if skip_verify:
        overrides["verify_ssl"] = skip_verify.lower() not in ("1", "true", "yes")
    return overrides


def _read_token_file() -> Optional[str]:
    """Return the token cached in ``~/.vault-token`` by the official CLI, if any."""
    path = Path.home() / _TOKEN_FILENAME
    if not path.is_file():
        return None
    token = path.read_text(encoding="utf-8").strip()
    return token or None


def resolve_config(**overrides: Any) -> ClientConfig:
    """Resolve the effective client config.

    Precedence (high to low):
        1. Explicit *overrides* (``None`` values are ignored)
        2. Environment variables (``VAULT_ADDR``, ``VAULT_TOKEN``,
           ``VAULT_NAMESPACE``, ``VAULT_PATH_PREFIX``, ``VAULT_SKIP_VERIFY``)
        3. Config file (``~/.config/vaultli/config.json``)
        4. Defaults

    When no token is found at any level, ``token_source`` is consulted, and
    failing that ``~/.vault-token``.

    Raises:
        ConfigError: If the config file is invalid or a value fails validation.
    """
    base = load_client_config()
    data = base.model_dump()
    data.update(_env_overrides())
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = ClientConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    if config.token is None:
        if config.token_source:
            config.token = resolve_credential(config.token_source)
        else:
            config.token = _read_token_file()
    return config


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Vault token: ")

    raise ConfigError(f"Unknown credential source format: {source}")


# --- Per-call option resolution ---


def resolve_option(
    key: str,
    call_options: Optional[BaseModel],
    client_defaults: Optional[BaseModel],
) -> Any:
    """Return the effective value of option *key*.

    The call-level value wins when it is not ``None`` (an explicit ``False``
    or ``0`` still wins); otherwise the client-level default is used. Returns
    ``None`` when neither level sets the key.
    """
    value = getattr(call_options, key, None)
    if value is None:
        value = getattr(client_defaults, key, None)
    return value
