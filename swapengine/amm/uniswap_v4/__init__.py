"""UniswapV4 AMM implementation package.

This package provides client-side UniswapV4 support:
- PoolKey construction and pool identifiers
- Pool state readers (Mock and Web3-based)
- Quote engine with simulation fallback
- Action plan encoding for the Universal Router
"""

from .amounts import format_token_amount, format_units, format_usd, parse_amount, parse_units
from .constants import (
    DEFAULT_ACTION_CODES,
    DEFAULT_FEE,
    PERIPHERY_ACTION_CODES,
    V4_FEE_HIGH,
    V4_FEE_LOW,
    V4_FEE_LOWEST,
    V4_FEE_MEDIUM,
    V4_FEE_TIERS,
    V4_SWAP_GAS_ESTIMATE,
    V4_TICK_SPACING,
    ActionCodes,
)
from .encoding import (
    SwapEncodingParams,
    build_router_envelope,
    encode_execute_calldata,
    encode_swap,
)
from .pool_key import PoolKey, build_pool_key, pool_identifier, tick_spacing_for_fee
from .quoter import QuoteEngine
from .state import MockStateReader, PoolState, Slot0, StateReader, Web3StateReader

__all__ = [
    # Constants
    "V4_FEE_LOWEST",
    "V4_FEE_LOW",
    "V4_FEE_MEDIUM",
    "V4_FEE_HIGH",
    "V4_FEE_TIERS",
    "V4_TICK_SPACING",
    "V4_SWAP_GAS_ESTIMATE",
    "DEFAULT_FEE",
    "ActionCodes",
    "DEFAULT_ACTION_CODES",
    "PERIPHERY_ACTION_CODES",
    # Amounts
    "parse_units",
    "format_units",
    "parse_amount",
    "format_token_amount",
    "format_usd",
    # Pool key
    "PoolKey",
    "build_pool_key",
    "pool_identifier",
    "tick_spacing_for_fee",
    # State
    "Slot0",
    "PoolState",
    "StateReader",
    "MockStateReader",
    "Web3StateReader",
    # Quoter
    "QuoteEngine",
    # Encoding
    "SwapEncodingParams",
    "encode_swap",
    "build_router_envelope",
    "encode_execute_calldata",
]
