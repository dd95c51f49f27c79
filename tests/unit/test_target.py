"""Tests for target resolution."""

from __future__ import annotations

import pytest

from menuload._internal.config import HarnessConfig
from menuload._internal.errors import ConfigurationError
from menuload.engine.target import Target, resolve


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in ("MENULOAD_BASE_URL", "MENULOAD_TIMEOUT", "MENULOAD_POOL_SIZE"):
        monkeypatch.delenv(var, raising=False)


class TestResolve:
    """Tests for resolve()."""

    def test_exact_value_kept(self):
        target = resolve({"base_url": "https://graphql.ucsc.menu"})
        assert target == Target(base_url="https://graphql.ucsc.menu")

    def test_default(self):
        assert resolve().base_url == "https://graphql.ucsc.menu"

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MENULOAD_BASE_URL", "http://localhost:3000")
        assert resolve().base_url == "http://localhost:3000"

    def test_from_harness_config(self):
        target = resolve(HarnessConfig(base_url="http://127.0.0.1:8000"))
        assert target.base_url == "http://127.0.0.1:8000"

    def test_unrecognized_options_ignored(self):
        target = resolve({"base_url": "http://localhost:3000", "vus": 10})
        assert target.base_url == "http://localhost:3000"

    @pytest.mark.parametrize(
        "base_url",
        [
            "not a url",
            "",
            "graphql.ucsc.menu",
            "ftp://graphql.ucsc.menu",
            "http://",
            "https://:443",
            "http://localhost:notaport",
        ],
    )
    def test_invalid_urls(self, base_url):
        with pytest.raises(ConfigurationError):
            resolve({"base_url": base_url})

    def test_deterministic(self):
        config = {"base_url": "http://localhost:3000"}
        assert resolve(config) == resolve(config)


class TestTarget:
    """Tests for URL joining."""

    @pytest.mark.parametrize(
        ("base_url", "path", "expected"),
        [
            ("https://graphql.ucsc.menu", "/graphql", "https://graphql.ucsc.menu/graphql"),
            ("https://graphql.ucsc.menu/", "/graphql", "https://graphql.ucsc.menu/graphql"),
            ("https://graphql.ucsc.menu", "graphql", "https://graphql.ucsc.menu/graphql"),
            ("http://host/api", "/graphql", "http://host/api/graphql"),
            ("http://host", "", "http://host"),
        ],
    )
    def test_url_for(self, base_url, path, expected):
        assert Target(base_url).url_for(path) == expected

    def test_frozen(self):
        target = Target("http://host")
        with pytest.raises(AttributeError):
            target.base_url = "http://other"  # type: ignore[misc]


class TestResolveIgnoresOtherSettings:
    """resolve() reads only the base URL."""

    @pytest.mark.parametrize(
        ("var", "value"),
        [("MENULOAD_TIMEOUT", "soon"), ("MENULOAD_POOL_SIZE", "0")],
    )
    def test_malformed_unrelated_env(self, monkeypatch: pytest.MonkeyPatch, var, value):
        monkeypatch.setenv(var, value)
        assert resolve({"base_url": "https://graphql.ucsc.menu"}).base_url == (
            "https://graphql.ucsc.menu"
        )
        assert resolve().base_url == "https://graphql.ucsc.menu"

    def test_invalid_timeout_in_mapping_ignored(self):
        target = resolve({"base_url": "http://localhost:3000", "request_timeout": "soon"})
        assert target.base_url == "http://localhost:3000"

    def test_non_string_base_url(self):
        with pytest.raises(ConfigurationError, match="must be a string"):
            resolve({"base_url": 3000})
