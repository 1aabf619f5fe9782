"""Chain constants for the trading engine.

Centralizes well-known World Chain addresses and protocol parameters.
"""

from swapengine.models.types import is_valid_address

WORLD_CHAIN_ID = 480


def _validate_contract_address(name: str, address: str) -> str:
    """Validate and return a contract address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Uniswap V4 deployment on World Chain
# All addresses are validated at import time to catch typos early
POOL_MANAGER = _validate_contract_address(
    "POOL_MANAGER", "0xb1860d529182ac3bc1f51fa2abd56662b7d13f33"
)
POSITION_MANAGER = _validate_contract_address(
    "POSITION_MANAGER", "0xc585e0f504613b5fbf874f21af14c65260fb41fa"
)
QUOTER = _validate_contract_address("QUOTER", "0x55d235b3ff2daf7c3ede0defc9521f1d6fe6c5c0")
STATE_VIEW = _validate_contract_address(
    "STATE_VIEW", "0x51d394718bc09297262e368c1a481217fdeb71eb"
)
UNIVERSAL_ROUTER = _validate_contract_address(
    "UNIVERSAL_ROUTER", "0x8ac7bee993bb44dab564ea4bc9ea67bf9eb5e743"
)
PERMIT2 = _validate_contract_address("PERMIT2", "0x000000000022D473030F116dDEE9F6B43aC78BA3")

# Default public RPC endpoint (overridable via SWAPENGINE_RPC_URL)
DEFAULT_RPC_URL = "https://worldchain-mainnet.g.alchemy.com/public"
