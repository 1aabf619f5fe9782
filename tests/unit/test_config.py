"""Unit tests for engine configuration."""

from pathlib import Path

from swapengine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from swapengine.constants import STATE_VIEW, UNIVERSAL_ROUTER, WORLD_CHAIN_ID


class TestEngineConfig:
    """Tests for EngineConfig defaults and environment loading."""

    def test_defaults(self):
        config = DEFAULT_ENGINE_CONFIG
        assert config.chain_id == WORLD_CHAIN_ID == 480
        assert config.state_view_address == STATE_VIEW
        assert config.universal_router_address == UNIVERSAL_ROUTER
        assert config.quote_cache_ttl == 30.0
        assert config.deadline_window == 1800
        assert config.poll_interval == 30.0
        assert config.reject_malformed_amounts is False
        assert config.require_known_pool is False
        assert config.use_periphery_action_codes is False

    def test_from_env_unset(self, monkeypatch):
        """Without variables the defaults apply."""
        for name in (
            "SWAPENGINE_RPC_URL",
            "SWAPENGINE_ORDERS_PATH",
            "SWAPENGINE_REJECT_MALFORMED_AMOUNTS",
            "SWAPENGINE_BACKEND_URL",
        ):
            monkeypatch.delenv(name, raising=False)
        assert EngineConfig.from_env() == EngineConfig()

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SWAPENGINE_RPC_URL", "https://rpc.example")
        monkeypatch.setenv("SWAPENGINE_POLL_INTERVAL", "5")
        monkeypatch.setenv("SWAPENGINE_ORDERS_PATH", str(tmp_path / "orders.json"))
        monkeypatch.setenv("SWAPENGINE_REJECT_MALFORMED_AMOUNTS", "true")
        monkeypatch.setenv("SWAPENGINE_REQUIRE_KNOWN_POOL", "1")
        monkeypatch.setenv("SWAPENGINE_PERIPHERY_ACTIONS", "no")
        monkeypatch.setenv("SWAPENGINE_BACKEND_URL", "https://backend.example")

        config = EngineConfig.from_env()

        assert config.rpc_url == "https://rpc.example"
        assert config.poll_interval == 5.0
        assert config.orders_path == Path(tmp_path / "orders.json")
        assert config.reject_malformed_amounts is True
        assert config.require_known_pool is True
        assert config.use_periphery_action_codes is False
        assert config.backend_url == "https://backend.example"
