"""Unit tests for engine wiring."""

import pytest

from swapengine.amm.uniswap_v4.state import MockStateReader
from swapengine.config import EngineConfig
from swapengine.engine import build_engine, configure_logging
from swapengine.execution.signer import MockSigner
from swapengine.orders.store import InMemoryOrderStore, JsonFileOrderStore
from swapengine.portfolio import MockBalanceReader


class TestBuildEngine:
    """Tests for build_engine."""

    def test_wires_services(self):
        """Every service shares the same quote engine and config."""
        config = EngineConfig()
        engine = build_engine(
            MockSigner(),
            config,
            state_reader=MockStateReader(),
            balance_reader=MockBalanceReader(),
        )

        assert engine.executor.quote_engine is engine.quote_engine
        assert engine.monitor.quote_engine is engine.quote_engine
        assert engine.monitor.executor is engine.executor
        assert isinstance(engine.monitor.store, InMemoryOrderStore)
        assert engine.monitor.backend is None
        assert engine.price_feed is None
        assert engine.portfolio is not None

    def test_optional_collaborators_from_config(self, tmp_path):
        config = EngineConfig(
            orders_path=tmp_path / "orders.json",
            backend_url="https://backend.example",
            price_feed_url="https://prices.example",
        )
        engine = build_engine(
            MockSigner(),
            config,
            state_reader=MockStateReader(),
            balance_reader=MockBalanceReader(),
        )

        assert isinstance(engine.monitor.store, JsonFileOrderStore)
        assert engine.monitor.backend is not None
        assert engine.price_feed is not None
        assert engine.portfolio.price_feed is engine.price_feed

    @pytest.mark.asyncio
    async def test_shutdown(self):
        engine = build_engine(
            MockSigner(), state_reader=MockStateReader(), balance_reader=MockBalanceReader()
        )
        await engine.shutdown()
        assert not engine.monitor.is_polling


def test_configure_logging():
    """Logging configuration accepts both verbosity levels."""
    configure_logging(verbose=True)
    configure_logging()
