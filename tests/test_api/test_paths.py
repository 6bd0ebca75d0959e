"""Tests for path resolution (prefix joining and separator collapsing)."""

from __future__ import annotations

import pytest

from vaultli.api.paths import PathResolver, resolve_path
from vaultli.models import ClientConfig, RequestOptions


class TestResolvePath:
    def test_no_prefix_returns_path(self) -> None:
        assert resolve_path("secret/app") == "secret/app"

    def test_call_prefix_is_joined(self) -> None:
        opts = RequestOptions(path_prefix="secret")
        assert resolve_path("app/db", opts) == "secret/app/db"

    def test_client_prefix_is_joined(self) -> None:
        defaults = ClientConfig(path_prefix="kv")
        assert resolve_path("app", None, defaults) == "kv/app"

    def test_call_prefix_overrides_client_prefix(self) -> None:
        defaults = ClientConfig(path_prefix="kv")
        opts = RequestOptions(path_prefix="secret")
        assert resolve_path("app", opts, defaults) == "secret/app"

    def test_collapses_internal_runs(self) -> None:
        assert resolve_path("secret//app///db") == "secret/app/db"

    def test_collapses_at_the_join(self) -> None:
        opts = RequestOptions(path_prefix="secret/")
        assert resolve_path("/app", opts) == "secret/app"

    def test_keeps_single_leading_and_trailing_slash(self) -> None:
        assert resolve_path("//secret/app//") == "/secret/app/"

    def test_empty_prefix_is_ignored(self) -> None:
        opts = RequestOptions(path_prefix="")
        assert resolve_path("secret/app", opts) == "secret/app"

    def test_special_characters_untouched(self) -> None:
        assert resolve_path('secret/b:@c%n-read/"Test Group"') == 'secret/b:@c%n-read/"Test Group"'

    @pytest.mark.parametrize("prefix", ["secret", "secret/", "/secret//", "a//b"])
    @pytest.mark.parametrize("path", ["x", "/x", "x//y", "///x///y///", "a b/c"])
    def test_never_leaves_separator_runs(self, prefix: str, path: str) -> None:
        result = resolve_path(path, RequestOptions(path_prefix=prefix))
        assert "//" not in result


class TestPathResolver:
    def test_binds_client_defaults(self) -> None:
        resolver = PathResolver(ClientConfig(path_prefix="secret"))
        assert resolver.resolve("app") == "secret/app"
        assert resolver.resolve("app", RequestOptions(path_prefix="other")) == "other/app"

    def test_without_defaults(self) -> None:
        assert PathResolver().resolve("a//b") == "a/b"
