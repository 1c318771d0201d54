"""Tests for warbler.config: AppConfig frozen dataclass."""

import pytest

from warbler.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()

        assert cfg.host == "127.0.0.1"
        assert cfg.port == 3000
        assert cfg.debug is False
        assert cfg.app_name == "warbler"
        assert cfg.case_sensitive is False
        assert cfg.strict_routing is False
        assert cfg.body_limit == 4 * 1024 * 1024
        assert cfg.prefork is False
        assert cfg.workers == 0
        assert cfg.idle_timeout == 5.0
        assert cfg.log_level == "info"
        assert cfg.access_log is True

    def test_override(self) -> None:
        cfg = AppConfig(host="localhost", port=8080, prefork=True, idle_timeout=2.5)

        assert cfg.host == "localhost"
        assert cfg.port == 8080
        assert cfg.prefork is True
        assert cfg.idle_timeout == 2.5

    def test_frozen(self) -> None:
        cfg = AppConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]


class TestConfigAffectsRouting:
    async def test_case_sensitive(self) -> None:
        from warbler import App
        from warbler.testing import TestClient

        app = App(AppConfig(case_sensitive=True, access_log=False))
        app.get("/hello")(lambda: "hi")

        async with TestClient(app) as client:
            assert (await client.get("/hello")).status == 200
            assert (await client.get("/HELLO")).status == 404

    async def test_strict_routing(self) -> None:
        from warbler import App
        from warbler.testing import TestClient

        app = App(AppConfig(strict_routing=True, access_log=False))
        app.get("/hello")(lambda: "hi")

        async with TestClient(app) as client:
            assert (await client.get("/hello")).status == 200
            assert (await client.get("/hello/")).status == 404
