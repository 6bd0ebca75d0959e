"""Shared test fixtures for vaultli.

Provides an in-memory fake Vault server served through
:class:`httpx.MockTransport`, a factory for clients wired to it, config
isolation, and output-state management. These fixtures are automatically
discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import copy
import itertools
import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from vaultli.client.vault import VaultClient
from vaultli.output import OutputFormat, OutputManager, reset_output, set_output


VAULT_ADDRESS = "http://vault.test:8200"
ROOT_TOKEN = "root"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale, so a fresh manager is created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake Vault server
# ---------------------------------------------------------------------------


class FakeVault:
    """A tiny key/value Vault stand-in.

    Secrets live in :attr:`secrets` keyed by path (without ``/v1/``).
    :meth:`wrap` stores a response under a fresh wrapping token, readable
    once from ``cubbyhole/response``. :attr:`overrides` forces a status and
    body for a given path; :attr:`fail_with` forces a status for everything.
    Every request is recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.secrets: dict[str, dict[str, Any]] = {}
        self.wrapped: dict[str, dict[str, Any]] = {}
        self.overrides: dict[str, tuple[int, Any]] = {}
        self.fail_with: Optional[int] = None
        self.requests: list[httpx.Request] = []
        self._counter = itertools.count(1)

    # -- helpers for tests ------------------------------------------------

    def wrap(self, response: dict[str, Any]) -> str:
        token = f"wrap-{next(self._counter)}"
        self.wrapped[token] = response
        return token

    def requests_for(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == f"/v1/{path}"
        ]

    # -- request handling -------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        assert path.startswith("/v1/"), path
        key = path[len("/v1/"):]

        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"errors": ["forced failure"]})
        if key in self.overrides:
            status, body = self.overrides[key]
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)

        if key == "cubbyhole/response":
            return self._unwrap(request)
        if request.method == "GET" and request.url.params.get("list") == "true":
            return self._list(key)
        if request.method == "GET":
            return self._read(key)
        if request.method == "PUT":
            self.secrets[key] = json.loads(request.content or b"{}")
            return httpx.Response(204)
        if request.method == "DELETE":
            self.secrets.pop(key, None)
            return httpx.Response(204)
        return httpx.Response(405, json={"errors": ["unsupported method"]})

    def _read(self, key: str) -> httpx.Response:
        if key not in self.secrets:
            return httpx.Response(404, json={"errors": []})
        return httpx.Response(200, json={
            "request_id": "req-1",
            "lease_id": "",
            "lease_duration": 2764800,
            "renewable": False,
            "data": copy.deepcopy(self.secrets[key]),
        })

    def _list(self, key: str) -> httpx.Response:
        prefix = key.rstrip("/") + "/"
        keys: list[str] = []
        for stored in sorted(self.secrets):
            if not stored.startswith(prefix):
                continue
            rest = stored[len(prefix):]
            head, sep, _ = rest.partition("/")
            entry = head + sep
            if entry not in keys:
                keys.append(entry)
        if not keys:
            return httpx.Response(404, json={"errors": []})
        return httpx.Response(200, json={"data": {"keys": keys}})

    def _unwrap(self, request: httpx.Request) -> httpx.Response:
        token = request.headers.get("x-vault-token")
        response = self.wrapped.pop(token, None)
        if response is None:
            return httpx.Response(404, json={"errors": []})
        return httpx.Response(200, json={"data": {"response": json.dumps(response)}})


@pytest.fixture
def fake_vault() -> FakeVault:
    """A fresh, empty fake Vault server."""
    return FakeVault()


@pytest.fixture
def make_client(fake_vault: FakeVault) -> Callable[..., VaultClient]:
    """Factory for clients whose transport talks to :func:`fake_vault`.

    Keyword arguments are :class:`~vaultli.models.ClientConfig` fields.
    Retries are off unless asked for.
    """

    def _make(**settings: Any) -> VaultClient:
        settings.setdefault("address", VAULT_ADDRESS)
        settings.setdefault("token", ROOT_TOKEN)
        settings.setdefault("max_retries", 0)
        client = VaultClient(**settings)
        client.transport._client = httpx.Client(
            base_url=settings["address"],
            transport=httpx.MockTransport(fake_vault.handler),
        )
        return client

    return _make


@pytest.fixture
def logical(make_client: Callable[..., VaultClient]):
    """The logical operations of a default client."""
    return make_client().logical


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME and ``$HOME`` at
    subdirectories of tmp_path, clears the VAULT_* environment variables and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("vaultli.config._is_xdg_platform", lambda: True)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))

    for var in [
        "VAULT_ADDR",
        "VAULT_TOKEN",
        "VAULT_NAMESPACE",
        "VAULT_PATH_PREFIX",
        "VAULT_SKIP_VERIFY",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a plain, verbose, colourless OutputManager."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
