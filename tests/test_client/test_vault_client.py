"""Tests for the VaultClient facade."""

from __future__ import annotations

from pathlib import Path

from vaultli.api.logical import Logical
from vaultli.client.vault import VaultClient
from vaultli.models import ClientConfig


class TestConstruction:
    def test_settings_build_config(self) -> None:
        client = VaultClient(address="http://vault.local:8200", token="t", path_prefix="kv")
        assert client.config.address == "http://vault.local:8200"
        assert client.config.path_prefix == "kv"
        assert client.token == "t"

    def test_settings_layer_over_config(self) -> None:
        base = ClientConfig(address="http://a:8200", token="t", jitter_size=5)
        client = VaultClient(base, path_prefix="kv")
        assert client.config.address == "http://a:8200"
        assert client.config.jitter_size == 5
        assert client.config.path_prefix == "kv"
        assert base.path_prefix is None

    def test_each_client_has_its_own_cache(self) -> None:
        assert VaultClient().cache is not VaultClient().cache

    def test_logical_is_built_once(self) -> None:
        client = VaultClient()
        assert isinstance(client.logical, Logical)
        assert client.logical is client.logical

    def test_reads_fill_the_client_cache(self, make_client, fake_vault) -> None:
        fake_vault.secrets["secret/app"] = {"value": "s3cr3t"}
        client = make_client()
        client.logical.read("secret/app")
        assert "secret/app" in client.cache

    def test_from_env(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("VAULT_ADDR", "http://env:8200")
        monkeypatch.setenv("VAULT_TOKEN", "env-token")
        client = VaultClient.from_env(path_prefix="kv")
        assert client.config.address == "http://env:8200"
        assert client.token == "env-token"
        assert client.config.path_prefix == "kv"


class TestContextManager:
    def test_opens_and_closes_transport(self) -> None:
        client = VaultClient()
        with client as entered:
            assert entered is client
            assert client.transport._client is not None
        assert client.transport._client is None


class TestToken:
    def test_setter_updates_transport(self) -> None:
        client = VaultClient(token="a")
        client.token = "b"
        assert client.transport.token == "b"

    def test_with_token_restores(self) -> None:
        client = VaultClient(token="a")
        with client.with_token("wrapper"):
            assert client.token == "wrapper"
        assert client.token == "a"


class TestShortcuts:
    def test_read_returns_value_field(self, make_client, fake_vault) -> None:
        fake_vault.secrets["secret/app"] = {"value": "s3cr3t"}
        assert make_client().read("secret/app") == "s3cr3t"

    def test_read_uses_path_prefix(self, make_client, fake_vault) -> None:
        fake_vault.secrets["secret/app"] = {"value": "s3cr3t"}
        assert make_client(path_prefix="secret").read("app") == "s3cr3t"

    def test_read_missing_returns_none(self, make_client) -> None:
        assert make_client().read("secret/missing") is None

    def test_read_without_value_field(self, make_client, fake_vault) -> None:
        fake_vault.secrets["secret/app"] = {"other": "x"}
        assert make_client().read("secret/app") is None

    def test_full_path(self) -> None:
        client = VaultClient(path_prefix="secret")
        assert client.full_path("app") == "secret/app"
        assert client.full_path("app", path_prefix="kv") == "kv/app"
