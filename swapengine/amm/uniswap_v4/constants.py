"""UniswapV4 constants including fee tiers, action codes and default pool state."""

from dataclasses import dataclass

# Fee tiers in Uniswap units (hundredths of a basis point)
# Fee = units / 1,000,000 (e.g., 3000 = 0.3%)
V4_FEE_LOWEST = 100  # 0.01% - stable pairs
V4_FEE_LOW = 500  # 0.05% - stable pairs
V4_FEE_MEDIUM = 3000  # 0.30% - most pairs
V4_FEE_HIGH = 10000  # 1.00% - exotic pairs

V4_FEE_TIERS = [V4_FEE_LOWEST, V4_FEE_LOW, V4_FEE_MEDIUM, V4_FEE_HIGH]

FEE_DENOMINATOR = 1_000_000

DEFAULT_FEE = V4_FEE_MEDIUM
DEFAULT_TICK_SPACING = 60

# Tick spacing per fee tier
V4_TICK_SPACING = {
    V4_FEE_LOWEST: 1,
    V4_FEE_LOW: 10,
    V4_FEE_MEDIUM: 60,
    V4_FEE_HIGH: 200,
}

Q96 = 2**96

# Substituted when a StateView read fails (price 1.0, 1e18 liquidity)
DEFAULT_SQRT_PRICE_X96 = Q96
DEFAULT_LIQUIDITY = 10**18

# Gas estimate reported with V4 single-hop quotes
V4_SWAP_GAS_ESTIMATE = 150_000

# Universal Router command that runs a V4 action plan
V4_SWAP_COMMAND = 0x10

# execute(bytes,bytes[],uint256)
EXECUTE_SELECTOR = bytes.fromhex("3593564c")


@dataclass(frozen=True)
class ActionCodes:
    """Byte codes of the three actions in an exact-input single-hop plan."""

    swap_exact_in_single: int
    settle_all: int
    take_all: int

    def as_bytes(self) -> bytes:
        return bytes([self.swap_exact_in_single, self.settle_all, self.take_all])


DEFAULT_ACTION_CODES = ActionCodes(swap_exact_in_single=0x00, settle_all=0x11, take_all=0x14)

# Action numbering of the deployed v4-periphery release
PERIPHERY_ACTION_CODES = ActionCodes(swap_exact_in_single=0x06, settle_all=0x0C, take_all=0x0F)

# V4 StateView ABI - minimal, just the functions we need
STATE_VIEW_ABI = [
    {
        "name": "getSlot0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "poolId", "type": "bytes32"}],
        "outputs": [
            {"name": "sqrtPriceX96", "type": "uint160"},
            {"name": "tick", "type": "int24"},
            {"name": "protocolFee", "type": "uint24"},
            {"name": "lpFee", "type": "uint24"},
        ],
    },
    {
        "name": "getLiquidity",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "poolId", "type": "bytes32"}],
        "outputs": [{"name": "liquidity", "type": "uint128"}],
    },
]


__all__ = [
    "V4_FEE_LOWEST",
    "V4_FEE_LOW",
    "V4_FEE_MEDIUM",
    "V4_FEE_HIGH",
    "V4_FEE_TIERS",
    "V4_TICK_SPACING",
    "FEE_DENOMINATOR",
    "DEFAULT_FEE",
    "DEFAULT_TICK_SPACING",
    "Q96",
    "DEFAULT_SQRT_PRICE_X96",
    "DEFAULT_LIQUIDITY",
    "V4_SWAP_GAS_ESTIMATE",
    "V4_SWAP_COMMAND",
    "EXECUTE_SELECTOR",
    "ActionCodes",
    "DEFAULT_ACTION_CODES",
    "PERIPHERY_ACTION_CODES",
    "STATE_VIEW_ABI",
]
