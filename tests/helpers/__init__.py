"""Test helpers module for shared test utilities.

- constants: Tokens, wallets and pool state values
- factories: Pool state, quote and order factory functions
"""

from tests.helpers.constants import (
    DEEP_LIQUIDITY,
    ETH,
    HOOK_A,
    HOOK_B,
    NOW,
    OTHER_OWNER,
    OWNER,
    SQRT_PRICE_1,
    SQRT_PRICE_4,
    USDC,
    WBTC,
    WLD,
)
from tests.helpers.factories import make_order, make_pool_state, make_quote

__all__ = [
    # Constants
    "ETH",
    "USDC",
    "WBTC",
    "WLD",
    "OWNER",
    "OTHER_OWNER",
    "HOOK_A",
    "HOOK_B",
    "SQRT_PRICE_1",
    "SQRT_PRICE_4",
    "DEEP_LIQUIDITY",
    "NOW",
    # Factories
    "make_pool_state",
    "make_quote",
    "make_order",
]
