"""Engine wiring: one instance of each service, built at process start."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import structlog

from swapengine.amm.uniswap_v4.quoter import QuoteEngine
from swapengine.amm.uniswap_v4.state import StateReader, Web3StateReader
from swapengine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from swapengine.execution.signer import TransactionSigner
from swapengine.execution.swap import SwapExecutor
from swapengine.orders.backend import BackendOrderMirror
from swapengine.orders.monitor import LimitOrderMonitor
from swapengine.orders.store import InMemoryOrderStore, JsonFileOrderStore, OrderStore
from swapengine.portfolio import BalanceReader, PortfolioService, Web3BalanceReader
from swapengine.prices import PriceFeedClient
from swapengine.tokens import DEFAULT_REGISTRY, TokenRegistry

logger = structlog.get_logger()


def configure_logging(verbose: bool = False) -> None:
    """Route structlog output to the console at INFO (or DEBUG if verbose)."""
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


@dataclass
class TradingEngine:
    """The wired services handed to consumers."""

    config: EngineConfig
    registry: TokenRegistry
    quote_engine: QuoteEngine
    executor: SwapExecutor
    monitor: LimitOrderMonitor
    price_feed: PriceFeedClient | None = None
    portfolio: PortfolioService | None = None

    async def shutdown(self) -> None:
        await self.monitor.stop()
        if self.monitor.backend is not None:
            await self.monitor.backend.drain()


def build_engine(
    signer: TransactionSigner,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    store: OrderStore | None = None,
    state_reader: StateReader | None = None,
    balance_reader: BalanceReader | None = None,
    registry: TokenRegistry = DEFAULT_REGISTRY,
) -> TradingEngine:
    """Build every service from a config.

    Collaborators not passed in are created from the config: Web3 readers
    against config.rpc_url, a JSON order store at config.orders_path (or an
    in-memory store), and the backend mirror and price feed when their URLs
    are set.
    """
    if state_reader is None:
        state_reader = Web3StateReader(
            config.rpc_url, config.state_view_address, request_timeout=config.rpc_timeout
        )
    if store is None:
        store = (
            JsonFileOrderStore(config.orders_path)
            if config.orders_path is not None
            else InMemoryOrderStore()
        )

    quote_engine = QuoteEngine(state_reader, registry, config)
    executor = SwapExecutor(quote_engine, signer, registry, config)

    backend = None
    if config.backend_url:
        backend = BackendOrderMirror(config.backend_url, timeout=config.http_timeout)
    monitor = LimitOrderMonitor(quote_engine, executor, store, backend, config)

    price_feed = None
    if config.price_feed_url:
        price_feed = PriceFeedClient(config.price_feed_url, timeout=config.http_timeout)

    if balance_reader is None:
        balance_reader = Web3BalanceReader(config.rpc_url, request_timeout=config.rpc_timeout)
    portfolio = PortfolioService(balance_reader, price_feed, registry, config)

    logger.info(
        "engine_built",
        chain_id=config.chain_id,
        rpc_url=config.rpc_url,
        orders_path=str(config.orders_path) if config.orders_path else None,
        backend=bool(backend),
        price_feed=bool(price_feed),
    )
    return TradingEngine(
        config=config,
        registry=registry,
        quote_engine=quote_engine,
        executor=executor,
        monitor=monitor,
        price_feed=price_feed,
        portfolio=portfolio,
    )


__all__ = ["TradingEngine", "build_engine", "configure_logging"]
