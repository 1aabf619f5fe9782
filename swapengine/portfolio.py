"""Wallet portfolio valuation.

Reads ERC20 balances for every registry token and values them with the USD
price feed.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

import structlog
from pydantic import BaseModel

from swapengine.amm.uniswap_v4.amounts import format_token_amount, to_decimal
from swapengine.cache import TTLCache
from swapengine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from swapengine.errors import StateUnavailable
from swapengine.models.token import Token
from swapengine.models.types import normalize_address
from swapengine.prices import PriceFeedClient
from swapengine.tokens import DEFAULT_REGISTRY, TokenRegistry

logger = structlog.get_logger()

ERC20_BALANCE_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "balance", "type": "uint256"}],
    }
]


class TokenBalance(BaseModel):
    """One token holding.

    Attributes:
        token: The token held
        balance: Raw balance in base units
        balance_formatted: Human display string (max 6 decimals)
        usd_value: balance * USD price, 0.0 when no price is known
    """

    token: Token
    balance: int
    balance_formatted: str
    usd_value: float = 0.0


class PortfolioSummary(BaseModel):
    """All holdings of a wallet and their total USD value."""

    total_value_usd: float
    token_balances: list[TokenBalance]
    last_updated: datetime


class BalanceReader(Protocol):
    """Protocol for ERC20 balance readers."""

    async def balance_of(self, token: Token, owner: str) -> int:
        """Raw balance of owner.

        Raises:
            StateUnavailable: If the balance cannot be read
        """
        ...


class MockBalanceReader:
    """Mock reader for testing without RPC calls.

    Balances are keyed by token symbol; tokens listed in failing raise
    StateUnavailable.
    """

    def __init__(self, balances: dict[str, int] | None = None, failing: set[str] | None = None):
        self.balances = balances or {}
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []  # (symbol, owner)

    async def balance_of(self, token: Token, owner: str) -> int:
        self.calls.append((token.symbol, owner))
        if token.symbol in self.failing:
            raise StateUnavailable(f"balanceOf reverted for {token.symbol}")
        return self.balances.get(token.symbol, 0)


class Web3BalanceReader:
    """Reads ERC20 balanceOf via an AsyncWeb3 HTTP provider."""

    def __init__(self, web3_provider: str, request_timeout: float = 10.0):
        from web3 import AsyncHTTPProvider, AsyncWeb3

        self.w3 = AsyncWeb3(
            AsyncHTTPProvider(web3_provider, request_kwargs={"timeout": request_timeout})
        )
        self._to_checksum = AsyncWeb3.to_checksum_address

    async def balance_of(self, token: Token, owner: str) -> int:
        contract = self.w3.eth.contract(
            address=self._to_checksum(token.address), abi=ERC20_BALANCE_ABI
        )
        try:
            result = await contract.functions.balanceOf(self._to_checksum(owner)).call()
        except Exception as e:
            logger.warning("erc20_balance_read_failed", token=token.symbol, error=str(e))
            raise StateUnavailable(f"balanceOf failed for {token.symbol}: {e}") from e
        return int(result)


class PortfolioService:
    """Builds and caches portfolio summaries per wallet address."""

    def __init__(
        self,
        balance_reader: BalanceReader,
        price_feed: PriceFeedClient | None = None,
        registry: TokenRegistry = DEFAULT_REGISTRY,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.balance_reader = balance_reader
        self.price_feed = price_feed
        self.registry = registry
        self.config = config
        self.cache: TTLCache[PortfolioSummary] = TTLCache(config.quote_cache_ttl, clock)

    async def get_portfolio(self, address: str) -> PortfolioSummary:
        """Balances and USD values of every registry token held by address.

        Tokens whose balance read fails are left out of the summary.
        """
        cache_key = normalize_address(address)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        tokens = self.registry.tokens
        results = await asyncio.gather(
            *(
                asyncio.wait_for(
                    self.balance_reader.balance_of(token, address),
                    timeout=self.config.rpc_timeout,
                )
                for token in tokens
            ),
            return_exceptions=True,
        )

        holdings: list[tuple[Token, int]] = []
        for token, result in zip(tokens, results):
            if isinstance(result, BaseException):
                logger.warning("portfolio_balance_skipped", token=token.symbol, error=str(result))
                continue
            holdings.append((token, result))

        prices = {}
        if self.price_feed is not None and holdings:
            prices = await self.price_feed.get_prices([token.symbol for token, _ in holdings])

        balances = []
        for token, raw in holdings:
            price = prices.get(token.symbol)
            usd_value = float(to_decimal(raw, token.decimals)) * price.usd if price else 0.0
            balances.append(
                TokenBalance(
                    token=token,
                    balance=raw,
                    balance_formatted=format_token_amount(raw, token.decimals),
                    usd_value=usd_value,
                )
            )

        summary = PortfolioSummary(
            total_value_usd=sum(balance.usd_value for balance in balances),
            token_balances=balances,
            last_updated=datetime.now(timezone.utc),
        )
        self.cache.set(cache_key, summary)
        logger.debug(
            "portfolio_computed",
            address=cache_key,
            tokens=len(balances),
            total_value_usd=summary.total_value_usd,
        )
        return summary

    def clear_cache(self) -> None:
        self.cache.clear()


__all__ = [
    "TokenBalance",
    "PortfolioSummary",
    "BalanceReader",
    "MockBalanceReader",
    "Web3BalanceReader",
    "PortfolioService",
]
