"""Unit tests for UniswapV4 pool keys and identifiers."""

import pytest
from eth_abi import encode
from web3 import Web3

from swapengine.amm.uniswap_v4.pool_key import (
    POOL_KEY_TYPES,
    PoolKey,
    build_pool_key,
    pool_identifier,
    sort_currencies,
    tick_spacing_for_fee,
)
from swapengine.tokens import TokenRegistry
from tests.helpers import ETH, HOOK_A, HOOK_B, USDC, WBTC, WLD


class TestTickSpacing:
    """Tests for the fee tier table."""

    @pytest.mark.parametrize(
        "fee,expected", [(100, 1), (500, 10), (3000, 60), (10000, 200), (2500, 60)]
    )
    def test_tick_spacing_for_fee(self, fee, expected):
        """Known tiers map to their spacing; unknown fees fall back to 60."""
        assert tick_spacing_for_fee(fee) == expected


class TestBuildPoolKey:
    """Tests for build_pool_key."""

    def test_currencies_sorted(self):
        """currency0 is the lower address regardless of argument order."""
        key = build_pool_key(USDC, ETH)
        assert key.currency0.lower() < key.currency1.lower()
        assert key.currency0 == ETH.address

    def test_order_independent(self):
        """Swapping the arguments yields the same key."""
        assert build_pool_key(ETH, USDC) == build_pool_key(USDC, ETH)

    def test_configured_pool_used(self):
        """WLD/USDC uses its configured 0.14% fee and spacing 20."""
        key = build_pool_key(WLD, USDC)
        assert key.fee == 1400
        assert key.tick_spacing == 20

    def test_unconfigured_pair_defaults(self):
        """Pairs without a configured pool use fee 3000, spacing 60."""
        key = build_pool_key(WLD, WBTC)
        assert key.fee == 3000
        assert key.tick_spacing == 60

    def test_explicit_fee_on_unconfigured_pair(self):
        """An explicit fee picks spacing from the tier table."""
        key = build_pool_key(WLD, WBTC, fee=500)
        assert key.fee == 500
        assert key.tick_spacing == 10

    def test_accepts_addresses(self):
        """Plain address strings work as well as Token objects."""
        assert build_pool_key(ETH.address, USDC.address.lower()).fee == 500

    def test_identical_tokens_rejected(self):
        """A pool needs two distinct currencies."""
        with pytest.raises(ValueError):
            build_pool_key(ETH, ETH.address.lower())

    def test_hooks_from_registry(self):
        """A configured hook address ends up in the key."""
        from swapengine.tokens import PoolConfig

        registry = TokenRegistry(
            pools=[PoolConfig(WLD.address, WBTC.address, fee=3000, tick_spacing=60, hooks=HOOK_A)]
        )
        assert build_pool_key(WLD, WBTC, registry=registry).hooks == HOOK_A


class TestPoolKey:
    """Tests for the PoolKey dataclass."""

    def test_unsorted_currencies_rejected(self):
        """Constructing with currency0 > currency1 fails."""
        with pytest.raises(ValueError):
            PoolKey(currency0=USDC.address, currency1=ETH.address, fee=500, tick_spacing=10)

    def test_zero_for_one(self):
        """Direction is true iff token_in is currency0."""
        key = build_pool_key(ETH, USDC)
        assert key.zero_for_one(ETH.address) is True
        assert key.zero_for_one(USDC.address.lower()) is False

    def test_zero_for_one_foreign_token(self):
        """A token outside the pool raises."""
        with pytest.raises(ValueError):
            build_pool_key(ETH, USDC).zero_for_one(WLD.address)

    def test_fee_decimal(self):
        """Fee units convert to a fraction."""
        assert build_pool_key(ETH, USDC).fee_decimal == 0.0005


class TestPoolIdentifier:
    """Tests for pool_identifier."""

    def test_format(self):
        """Identifier is a 0x-prefixed 32-byte hex string."""
        pool_id = pool_identifier(build_pool_key(ETH, USDC))
        assert pool_id.startswith("0x")
        assert len(pool_id) == 66
        int(pool_id, 16)

    def test_order_independent(self):
        """Both argument orders yield the same identifier."""
        assert pool_identifier(build_pool_key(ETH, WLD)) == pool_identifier(
            build_pool_key(WLD, ETH)
        )

    def test_matches_abi_encoded_key(self):
        """Identifier is keccak256 of the abi-encoded five-field key."""
        key = build_pool_key(ETH, USDC)
        encoded = encode(
            POOL_KEY_TYPES,
            [
                bytes.fromhex(ETH.address[2:]),
                bytes.fromhex(USDC.address[2:]),
                500,
                10,
                bytes(20),
            ],
        )
        assert len(encoded) == 5 * 32
        assert pool_identifier(key) == "0x" + Web3.keccak(encoded).hex().removeprefix("0x")

    def test_hooks_change_identifier(self):
        """Keys differing only in hooks identify different pools."""
        c0, c1 = sort_currencies(WLD.address, WBTC.address)
        key_a = PoolKey(c0, c1, fee=3000, tick_spacing=60, hooks=HOOK_A)
        key_b = PoolKey(c0, c1, fee=3000, tick_spacing=60, hooks=HOOK_B)
        assert pool_identifier(key_a) != pool_identifier(key_b)

    def test_fee_changes_identifier(self):
        """Different fee tiers identify different pools."""
        assert pool_identifier(build_pool_key(WLD, WBTC, fee=500)) != pool_identifier(
            build_pool_key(WLD, WBTC, fee=3000)
        )
