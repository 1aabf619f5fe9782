"""Universal Router calldata encoding for UniswapV4 single-hop swaps.

A V4 swap is an action plan executed by the router's V4_SWAP command:

    SWAP_EXACT_IN_SINGLE -> SETTLE_ALL (pay currency in) -> TAKE_ALL (receive currency out)

The plan is abi.encode(bytes actions, bytes[] params), with one params
entry per action.
"""

from __future__ import annotations

from dataclasses import dataclass

from eth_abi import encode

from swapengine.models.types import UINT128_MAX, address_to_bytes

from .constants import DEFAULT_ACTION_CODES, EXECUTE_SELECTOR, V4_SWAP_COMMAND, ActionCodes
from .pool_key import PoolKey

UINT160_MAX = 2**160 - 1

# ((currency0, currency1, fee, tickSpacing, hooks), zeroForOne, amountIn,
#  amountOutMinimum, sqrtPriceLimitX96, hookData)
SWAP_EXACT_IN_SINGLE_TYPE = "((address,address,uint24,int24,address),bool,uint128,uint128,uint160,bytes)"
SETTLE_ALL_TYPES = ["address", "uint256"]
TAKE_ALL_TYPES = ["address", "uint256"]


@dataclass(frozen=True)
class SwapEncodingParams:
    """Inputs for an exact-input single-hop V4 swap.

    Attributes:
        pool_key: Pool to swap through
        zero_for_one: True if swapping currency0 for currency1
        amount_in: Exact input in raw units (uint128)
        min_amount_out: Slippage floor in raw units (uint128)
        price_limit: sqrtPriceX96 limit (0 = no limit)
        hook_data: Opaque bytes forwarded to the pool's hook
    """

    pool_key: PoolKey
    zero_for_one: bool
    amount_in: int
    min_amount_out: int
    price_limit: int = 0
    hook_data: bytes = b""

    @property
    def currency_in(self) -> str:
        return self.pool_key.currency0 if self.zero_for_one else self.pool_key.currency1

    @property
    def currency_out(self) -> str:
        return self.pool_key.currency1 if self.zero_for_one else self.pool_key.currency0


def _check_range(name: str, value: int, upper: int) -> None:
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range: {value}")


def encode_swap(
    params: SwapEncodingParams, action_codes: ActionCodes = DEFAULT_ACTION_CODES
) -> bytes:
    """Encode the swap/settle/take action plan.

    Args:
        params: Swap inputs
        action_codes: Action numbering to emit (default or deployed periphery)

    Returns:
        abi.encode(bytes actions, bytes[] params)

    Raises:
        ValueError: If an amount or the price limit does not fit its ABI type
    """
    _check_range("amount_in", params.amount_in, UINT128_MAX)
    _check_range("min_amount_out", params.min_amount_out, UINT128_MAX)
    _check_range("price_limit", params.price_limit, UINT160_MAX)

    swap_params = encode(
        [SWAP_EXACT_IN_SINGLE_TYPE],
        [
            (
                params.pool_key.as_tuple(),
                params.zero_for_one,
                params.amount_in,
                params.min_amount_out,
                params.price_limit,
                params.hook_data,
            )
        ],
    )
    settle_params = encode(
        SETTLE_ALL_TYPES, [address_to_bytes(params.currency_in), params.amount_in]
    )
    take_params = encode(
        TAKE_ALL_TYPES, [address_to_bytes(params.currency_out), params.min_amount_out]
    )

    return encode(
        ["bytes", "bytes[]"],
        [action_codes.as_bytes(), [swap_params, settle_params, take_params]],
    )


def build_router_envelope(encoded_swap: bytes) -> tuple[bytes, list[bytes]]:
    """Wrap an encoded action plan as a single V4_SWAP router command.

    Returns:
        Tuple of (commands, inputs)
    """
    return bytes([V4_SWAP_COMMAND]), [encoded_swap]


def encode_execute_calldata(commands: bytes, inputs: list[bytes], deadline: int) -> str:
    """Encode UniversalRouter.execute(bytes,bytes[],uint256) calldata.

    Returns:
        0x-prefixed calldata hex
    """
    encoded_args = encode(["bytes", "bytes[]", "uint256"], [commands, inputs, deadline])
    return "0x" + (EXECUTE_SELECTOR + encoded_args).hex()


__all__ = [
    "SWAP_EXACT_IN_SINGLE_TYPE",
    "SwapEncodingParams",
    "encode_swap",
    "build_router_envelope",
    "encode_execute_calldata",
]
