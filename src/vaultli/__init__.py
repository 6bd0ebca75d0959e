"""vaultli -- a client library and CLI for Vault-compatible secret servers.

The library exposes path-based secret operations (read, write, list, delete,
unwrap) over the server's versioned REST API. Every call goes through the
same pipeline: path resolution, an optional response cache, optional
randomized jitter, the HTTP transport, and decoding or error classification.

Typical use::

    from vaultli.client import VaultClient

    with VaultClient.from_env(path_prefix="secret") as client:
        client.logical.write("app", {"password": "hunter2"})
        secret = client.logical.read("app", cache=True)

Modules:
    api: Path resolution, jitter, and the logical operations.
    cache: Per-client response cache.
    client: HTTP transport and the ``VaultClient`` facade.
    models: Pydantic models for configuration, options and responses.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"
