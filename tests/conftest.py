"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field

import pytest

from swapengine.amm.uniswap_v4.quoter import QuoteEngine
from swapengine.amm.uniswap_v4.state import MockStateReader
from swapengine.config import EngineConfig
from swapengine.errors import StateUnavailable, SwapExecutionFailed
from swapengine.execution.signer import MockSigner
from swapengine.execution.swap import SwapExecutor, SwapParams
from swapengine.models.quote import Quote
from swapengine.models.token import Token
from swapengine.orders.monitor import LimitOrderMonitor
from swapengine.orders.store import InMemoryOrderStore
from swapengine.tokens import DEFAULT_REGISTRY
from tests.helpers import NOW, make_pool_state

# =============================================================================
# Mock classes for dependency injection
# =============================================================================


class FakeClock:
    """Manually advanced clock, usable for both wall and monotonic time."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockPriceSource:
    """Scripted market price source standing in for the quote engine.

    Usage:
        # Same price every call
        source = MockPriceSource(prices=[1.0])

        # Price sequence; the last value repeats once exhausted
        source = MockPriceSource(prices=[0.9, 1.0, 1.1])

        # Fail with StateUnavailable
        source = MockPriceSource(error=StateUnavailable("rpc down"))
    """

    def __init__(
        self,
        prices: list[float] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.prices = list(prices or [1.0])
        self.error = error
        self.calls: list[tuple[str, str]] = []  # (symbol_in, symbol_out)
        self.on_call = None  # Optional hook run before returning a price

    async def get_market_price(self, token_in: Token, token_out: Token) -> float:
        self.calls.append((token_in.symbol, token_out.symbol))
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        if len(self.prices) > 1:
            return self.prices.pop(0)
        return self.prices[0]


@dataclass
class MockExecutor:
    """Mock execution facade recording every execute_swap call.

    Set fail_for to a set of amount_in strings whose swaps should fail.
    """

    fail_for: set[str] = field(default_factory=set)
    error: str = "signer rejected"
    calls: list[tuple[SwapParams, Quote, str]] = field(default_factory=list)

    async def execute_swap(self, params: SwapParams, quote: Quote, signer_address: str) -> str:
        self.calls.append((params, quote, signer_address))
        if params.amount_in in self.fail_for:
            raise SwapExecutionFailed(self.error)
        return f"0x{len(self.calls):064x}"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> EngineConfig:
    """Config with a long poll interval so tests drive ticks by hand."""
    return EngineConfig(poll_interval=3600.0)


@pytest.fixture
def state_reader() -> MockStateReader:
    """Reader returning price 1.0 with deep liquidity for every pool."""
    return MockStateReader(default_state=make_pool_state())


@pytest.fixture
def quote_engine(state_reader, config, clock) -> QuoteEngine:
    return QuoteEngine(state_reader, DEFAULT_REGISTRY, config, clock=clock)


@pytest.fixture
def signer() -> MockSigner:
    return MockSigner()


@pytest.fixture
def executor(quote_engine, signer, config, clock) -> SwapExecutor:
    return SwapExecutor(
        quote_engine, signer, DEFAULT_REGISTRY, config, clock=clock, cache_clock=clock
    )


@pytest.fixture
def price_source() -> MockPriceSource:
    return MockPriceSource(prices=[1.0])


@pytest.fixture
def mock_executor() -> MockExecutor:
    return MockExecutor()


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def monitor(price_source, mock_executor, order_store, config, clock) -> LimitOrderMonitor:
    """Monitor wired to scripted prices and a recording executor."""
    return LimitOrderMonitor(
        price_source,  # type: ignore[arg-type]
        mock_executor,  # type: ignore[arg-type]
        store=order_store,
        config=config,
        clock=clock,
    )


@pytest.fixture
def failing_price_source() -> MockPriceSource:
    return MockPriceSource(error=StateUnavailable("pool state unreachable"))
