"""Token registry: tradable assets and configured V4 pools on World Chain.

Pool configurations are stored unordered; PoolKey construction sorts the
currencies, so a pair can be declared in either order here.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from swapengine.constants import WORLD_CHAIN_ID
from swapengine.errors import ConfigNotFound
from swapengine.models.token import Token
from swapengine.models.types import ZERO_ADDRESS, normalize_address

logger = structlog.get_logger()

ETH = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x4200000000000000000000000000000000000006",
    decimals=18,
    symbol="ETH",
    name="World Chain ETH",
)
USDC = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x79A02482A880bCE3F13e09Da970dC34db4CD24d1",
    decimals=6,
    symbol="USDC",
    name="USDC",
)
WLD = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x2cFc85d8E48F8EAB294be644d9E25C3030863003",
    decimals=18,
    symbol="WLD",
    name="Worldcoin",
)
WBTC = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x03C7054BCB39f7b2e5B2c7AcB37583e32D70Cfa3",
    decimals=8,
    symbol="WBTC",
    name="Wrapped BTC",
)
UXRP = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x2615a94df961278DcbC41Fb0a54fEc5f10a693aE",
    decimals=6,
    symbol="uXRP",
    name="XRP (Universal)",
)
UDOGE = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x12E96C2BFEA6E835CF8Dd38a5834fa61Cf723736",
    decimals=8,
    symbol="uDOGE",
    name="Dogecoin (Universal)",
)
USOL = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x9B8Df6E244526ab5F6e6400d331DB28C8fdDdb55",
    decimals=9,
    symbol="uSOL",
    name="Solana (Universal)",
)
USUI = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0xb0505e5a99abd03d94a1169e638B78EDfEd26ea4",
    decimals=9,
    symbol="uSUI",
    name="Sui (Universal)",
)
USDT0 = Token(
    chain_id=WORLD_CHAIN_ID,
    address="0x102d758f688a4C1C5a80b116bD945d4455460282",
    decimals=6,
    symbol="USD₮0",
    name="Stargate USD₮0",
)

# World token first, matching the swap screen's default ordering
AVAILABLE_TOKENS = [WLD, ETH, USDC, WBTC, UXRP, UDOGE, USOL, USUI, USDT0]


@dataclass(frozen=True)
class PoolConfig:
    """A V4 pool known to exist on chain.

    Attributes:
        token_a: One side of the pair (either order)
        token_b: The other side of the pair
        fee: Fee in Uniswap units (e.g., 3000 for 0.3%)
        tick_spacing: Tick spacing the pool was initialized with
        hooks: Hook contract address (zero address = no hook)
    """

    token_a: str
    token_b: str
    fee: int
    tick_spacing: int
    hooks: str = ZERO_ADDRESS

    def matches(self, token_a: str, token_b: str) -> bool:
        """Order-independent, case-insensitive pair match."""
        pair = {normalize_address(token_a), normalize_address(token_b)}
        return pair == {normalize_address(self.token_a), normalize_address(self.token_b)}


POOL_CONFIGS = [
    PoolConfig(ETH.address, USDC.address, fee=500, tick_spacing=10),
    PoolConfig(ETH.address, WLD.address, fee=3000, tick_spacing=60),
    PoolConfig(ETH.address, WBTC.address, fee=3000, tick_spacing=60),
    PoolConfig(WLD.address, USDC.address, fee=1400, tick_spacing=20),
    PoolConfig(USDC.address, UXRP.address, fee=500, tick_spacing=10),
    PoolConfig(USDC.address, UDOGE.address, fee=500, tick_spacing=10),
    PoolConfig(USDC.address, USDT0.address, fee=100, tick_spacing=1),
    PoolConfig(ETH.address, USDT0.address, fee=500, tick_spacing=10),
]


class TokenRegistry:
    """Lookup of tokens by address or symbol and of pools by pair."""

    def __init__(
        self,
        tokens: list[Token] | None = None,
        pools: list[PoolConfig] | None = None,
    ) -> None:
        self.tokens = list(AVAILABLE_TOKENS if tokens is None else tokens)
        self.pools = list(POOL_CONFIGS if pools is None else pools)
        self._by_address = {token.key: token for token in self.tokens}
        self._by_symbol = {token.symbol.lower(): token for token in self.tokens}

    def get_token(self, address_or_symbol: str) -> Token | None:
        """Find a token by address (any case) or by symbol (any case)."""
        if address_or_symbol.lower().startswith("0x"):
            return self._by_address.get(normalize_address(address_or_symbol))
        return self._by_symbol.get(address_or_symbol.lower())

    def find_pool_config(
        self, token_a: str, token_b: str, fee: int | None = None
    ) -> PoolConfig | None:
        """Find a configured pool for the pair, optionally pinned to a fee tier.

        Returns the first match in declaration order, or None.
        """
        for config in self.pools:
            if config.matches(token_a, token_b) and (fee is None or config.fee == fee):
                return config
        return None

    def require_pool_config(self, token_a: str, token_b: str, fee: int | None = None) -> PoolConfig:
        """Like find_pool_config, but raises when no pool is configured.

        Raises:
            ConfigNotFound: If the pair (and fee, when given) has no configured pool
        """
        config = self.find_pool_config(token_a, token_b, fee)
        if config is None:
            logger.debug("pool_config_not_found", token_a=token_a, token_b=token_b, fee=fee)
            raise ConfigNotFound(
                f"No pool configured for {token_a}/{token_b}"
                + (f" at fee {fee}" if fee is not None else "")
            )
        return config

    def pools_for_token(self, token: str) -> list[PoolConfig]:
        """All configured pools that include the token."""
        norm = normalize_address(token)
        return [
            config
            for config in self.pools
            if norm in (normalize_address(config.token_a), normalize_address(config.token_b))
        ]

    def pools_for_pair(self, token_a: str, token_b: str) -> list[PoolConfig]:
        """Configured pools for the pair across every fee tier, in declaration order."""
        return [config for config in self.pools if config.matches(token_a, token_b)]

    def pools_by_fee(self, fee: int) -> list[PoolConfig]:
        return [config for config in self.pools if config.fee == fee]


# Default registry instance
DEFAULT_REGISTRY = TokenRegistry()
