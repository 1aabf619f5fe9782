"""UniswapV4 PoolKey and pool identifier derivation."""

from __future__ import annotations

from dataclasses import dataclass

from eth_abi import encode
from web3 import Web3

from swapengine.models.token import Token
from swapengine.models.types import ZERO_ADDRESS, address_to_bytes, normalize_address
from swapengine.tokens import DEFAULT_REGISTRY, TokenRegistry

from .constants import DEFAULT_FEE, DEFAULT_TICK_SPACING, FEE_DENOMINATOR, V4_TICK_SPACING

POOL_KEY_TYPES = ["address", "address", "uint24", "int24", "address"]


def tick_spacing_for_fee(fee: int) -> int:
    """Tick spacing for a fee tier; unmapped fees use the medium tier's spacing."""
    return V4_TICK_SPACING.get(fee, DEFAULT_TICK_SPACING)


def sort_currencies(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two addresses ascending, compared case-insensitively."""
    if normalize_address(token_a) < normalize_address(token_b):
        return token_a, token_b
    return token_b, token_a


@dataclass(frozen=True)
class PoolKey:
    """Identifies a V4 pool inside the singleton PoolManager.

    Invariant: currency0 < currency1 (lowercase hex compare).
    """

    currency0: str
    currency1: str
    fee: int  # Fee in Uniswap units (e.g., 3000 for 0.3%)
    tick_spacing: int
    hooks: str = ZERO_ADDRESS

    def __post_init__(self) -> None:
        if normalize_address(self.currency0) >= normalize_address(self.currency1):
            raise ValueError(
                f"currency0 must sort below currency1: {self.currency0} >= {self.currency1}"
            )
        if not 0 <= self.fee < FEE_DENOMINATOR:
            raise ValueError(f"fee out of range: {self.fee}")

    @property
    def fee_decimal(self) -> float:
        """Fee as decimal (e.g., 0.003 for 0.3%)."""
        return self.fee / FEE_DENOMINATOR

    def zero_for_one(self, token_in: str) -> bool:
        """True iff token_in is currency0 (swap direction currency0 -> currency1)."""
        norm = normalize_address(token_in)
        if norm == normalize_address(self.currency0):
            return True
        if norm == normalize_address(self.currency1):
            return False
        raise ValueError(f"Token {token_in} not in pool")

    def as_tuple(self) -> tuple[bytes, bytes, int, int, bytes]:
        """ABI-ready tuple (address, address, uint24, int24, address)."""
        return (
            address_to_bytes(self.currency0),
            address_to_bytes(self.currency1),
            self.fee,
            self.tick_spacing,
            address_to_bytes(self.hooks),
        )


def _address_of(token: Token | str) -> str:
    return token.address if isinstance(token, Token) else token


def build_pool_key(
    token_a: Token | str,
    token_b: Token | str,
    fee: int | None = None,
    registry: TokenRegistry = DEFAULT_REGISTRY,
) -> PoolKey:
    """Build the canonical PoolKey for an unordered token pair.

    A configured pool for the pair (and fee, when given) supplies fee, tick
    spacing and hooks. Otherwise the fee defaults to 3000 and tick spacing
    comes from the fee tier table.

    Raises:
        ValueError: If both tokens are the same
    """
    address_a = _address_of(token_a)
    address_b = _address_of(token_b)
    if normalize_address(address_a) == normalize_address(address_b):
        raise ValueError(f"Cannot build a pool key for identical tokens: {address_a}")

    currency0, currency1 = sort_currencies(address_a, address_b)

    config = registry.find_pool_config(address_a, address_b, fee)
    if config is not None:
        return PoolKey(
            currency0=currency0,
            currency1=currency1,
            fee=config.fee,
            tick_spacing=config.tick_spacing,
            hooks=config.hooks,
        )

    pool_fee = DEFAULT_FEE if fee is None else fee
    return PoolKey(
        currency0=currency0,
        currency1=currency1,
        fee=pool_fee,
        tick_spacing=tick_spacing_for_fee(pool_fee),
    )


def pool_identifier(key: PoolKey) -> str:
    """keccak256(abi.encode(PoolKey)) as a 0x-prefixed 32-byte hex string."""
    encoded = encode(POOL_KEY_TYPES, list(key.as_tuple()))
    return "0x" + Web3.keccak(encoded).hex().removeprefix("0x")


__all__ = [
    "POOL_KEY_TYPES",
    "PoolKey",
    "build_pool_key",
    "pool_identifier",
    "sort_currencies",
    "tick_spacing_for_fee",
]
