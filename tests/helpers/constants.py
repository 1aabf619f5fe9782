"""Shared constants for tests.

Token objects come from the engine's registry; addresses here are extra
wallets and contracts used as fixtures.

Usage:
    from tests.helpers import OWNER, ETH, USDC
"""

from swapengine.amm.uniswap_v4.constants import Q96
from swapengine.tokens import ETH, USDC, WBTC, WLD

# =============================================================================
# Wallets
# =============================================================================

OWNER = "0x1111111111111111111111111111111111111111"
OTHER_OWNER = "0x2222222222222222222222222222222222222222"

# =============================================================================
# Hooks
# =============================================================================

HOOK_A = "0x00000000000000000000000000000000000000a0"
HOOK_B = "0x00000000000000000000000000000000000000b0"

# =============================================================================
# Pool state
# =============================================================================

# sqrtPriceX96 for a raw price of 1.0 and of 4.0
SQRT_PRICE_1 = Q96
SQRT_PRICE_4 = 2 * Q96

DEEP_LIQUIDITY = 10**30

# Fixed wall clock for deterministic timestamps
NOW = 1_700_000_000.0


__all__ = [
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
]
