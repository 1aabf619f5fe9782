"""Unit tests for Universal Router V4 swap encoding."""

import pytest
from eth_abi import decode

from swapengine.amm.uniswap_v4.constants import PERIPHERY_ACTION_CODES
from swapengine.amm.uniswap_v4.encoding import (
    SWAP_EXACT_IN_SINGLE_TYPE,
    SwapEncodingParams,
    build_router_envelope,
    encode_execute_calldata,
    encode_swap,
)
from swapengine.amm.uniswap_v4.pool_key import build_pool_key
from swapengine.models.types import UINT128_MAX
from tests.helpers import ETH, USDC


def make_params(zero_for_one: bool = True, **overrides) -> SwapEncodingParams:
    values = {
        "pool_key": build_pool_key(ETH, USDC),
        "zero_for_one": zero_for_one,
        "amount_in": 10**18,
        "min_amount_out": 2_400_000_000,
    }
    values.update(overrides)
    return SwapEncodingParams(**values)


def decode_plan(encoded: bytes) -> tuple[bytes, list[bytes]]:
    actions, params = decode(["bytes", "bytes[]"], encoded)
    return actions, list(params)


class TestEncodeSwap:
    """Tests for the action plan."""

    def test_default_actions(self):
        """Plan is swap, settle all, take all with default codes."""
        actions, params = decode_plan(encode_swap(make_params()))
        assert actions == bytes([0x00, 0x11, 0x14])
        assert len(params) == 3

    def test_periphery_actions(self):
        """The periphery table emits its own codes."""
        actions, _ = decode_plan(encode_swap(make_params(), PERIPHERY_ACTION_CODES))
        assert actions == bytes([0x06, 0x0C, 0x0F])

    def test_swap_params(self):
        """Swap params carry the pool key, direction and amounts."""
        _, params = decode_plan(encode_swap(make_params(hook_data=b"\x01\x02")))
        (key, zero_for_one, amount_in, min_out, price_limit, hook_data) = decode(
            [SWAP_EXACT_IN_SINGLE_TYPE], params[0]
        )[0]

        currency0, currency1, fee, tick_spacing, hooks = key
        assert currency0.lower() == ETH.address.lower()
        assert currency1.lower() == USDC.address.lower()
        assert fee == 500
        assert tick_spacing == 10
        assert int(hooks, 16) == 0
        assert zero_for_one is True
        assert amount_in == 10**18
        assert min_out == 2_400_000_000
        assert price_limit == 0
        assert hook_data == b"\x01\x02"

    def test_settle_and_take_zero_for_one(self):
        """Settle pays currency0 and take receives currency1."""
        _, params = decode_plan(encode_swap(make_params(zero_for_one=True)))
        settle_currency, settle_amount = decode(["address", "uint256"], params[1])
        take_currency, take_amount = decode(["address", "uint256"], params[2])

        assert settle_currency.lower() == ETH.address.lower()
        assert settle_amount == 10**18
        assert take_currency.lower() == USDC.address.lower()
        assert take_amount == 2_400_000_000

    def test_settle_and_take_one_for_zero(self):
        """Reverse direction swaps the settle and take currencies."""
        _, params = decode_plan(encode_swap(make_params(zero_for_one=False)))
        settle_currency, _ = decode(["address", "uint256"], params[1])
        take_currency, _ = decode(["address", "uint256"], params[2])

        assert settle_currency.lower() == USDC.address.lower()
        assert take_currency.lower() == ETH.address.lower()

    def test_deterministic(self):
        """Identical inputs encode to identical bytes."""
        assert encode_swap(make_params()) == encode_swap(make_params())

    def test_amount_overflow_rejected(self):
        """Amounts must fit uint128."""
        with pytest.raises(ValueError):
            encode_swap(make_params(amount_in=UINT128_MAX + 1))

    def test_negative_min_out_rejected(self):
        """Negative amounts are not encodable."""
        with pytest.raises(ValueError):
            encode_swap(make_params(min_amount_out=-1))


class TestRouterEnvelope:
    """Tests for the router command wrapper and execute calldata."""

    def test_envelope(self):
        """A single V4_SWAP command carries the plan."""
        encoded = encode_swap(make_params())
        commands, inputs = build_router_envelope(encoded)
        assert commands == b"\x10"
        assert inputs == [encoded]

    def test_execute_calldata(self):
        """Calldata is the execute selector followed by the encoded args."""
        encoded = encode_swap(make_params())
        commands, inputs = build_router_envelope(encoded)
        calldata = encode_execute_calldata(commands, inputs, 1_700_001_800)

        assert calldata.startswith("0x3593564c")
        decoded_commands, decoded_inputs, deadline = decode(
            ["bytes", "bytes[]", "uint256"], bytes.fromhex(calldata[10:])
        )
        assert decoded_commands == commands
        assert list(decoded_inputs) == inputs
        assert deadline == 1_700_001_800
