"""Integer swap math on the sqrtPriceX96 representation.

price = (sqrtPriceX96 / 2^96)^2 is the raw currency1-per-currency0 ratio.
Everything here works on raw base units, so token decimals are already
folded into the price.
"""

from __future__ import annotations

from .constants import FEE_DENOMINATOR, Q96

Q192 = Q96 * Q96


def fee_amount(amount_in: int, fee: int) -> int:
    """LP fee charged on an input amount (rounded down)."""
    return amount_in * fee // FEE_DENOMINATOR


def linear_amount_out(amount_in: int, sqrt_price_x96: int, zero_for_one: bool, fee: int) -> int:
    """Output at the pool's current price, ignoring depth.

    currency0 -> currency1 multiplies by price, currency1 -> currency0
    divides by it; the fee is then taken off the result.
    """
    if amount_in <= 0 or sqrt_price_x96 <= 0:
        return 0
    price_num = sqrt_price_x96 * sqrt_price_x96
    fee_keep = FEE_DENOMINATOR - fee
    if zero_for_one:
        return amount_in * price_num * fee_keep // (Q192 * FEE_DENOMINATOR)
    return amount_in * Q192 * fee_keep // (price_num * FEE_DENOMINATOR)


def single_tick_swap(
    amount_in: int, sqrt_price_x96: int, liquidity: int, zero_for_one: bool, fee: int
) -> tuple[int, int]:
    """Exact-input swap assuming all liquidity sits in the current tick.

    Returns:
        Tuple of (amount_out, sqrt_price_x96_after)
    """
    amount_less_fee = amount_in - fee_amount(amount_in, fee)
    if amount_less_fee <= 0 or liquidity <= 0 or sqrt_price_x96 <= 0:
        return 0, sqrt_price_x96

    if zero_for_one:
        # Price moves down: sqrtP' = L * sqrtP / (L + amount * sqrtP / Q96), rounded up
        numerator = liquidity * Q96
        denominator = numerator + amount_less_fee * sqrt_price_x96
        sqrt_after = -(-numerator * sqrt_price_x96 // denominator)
        amount_out = liquidity * (sqrt_price_x96 - sqrt_after) // Q96
    else:
        # Price moves up: sqrtP' = sqrtP + amount * Q96 / L
        sqrt_after = sqrt_price_x96 + amount_less_fee * Q96 // liquidity
        amount_out = liquidity * Q96 * (sqrt_after - sqrt_price_x96) // (sqrt_after * sqrt_price_x96)

    return max(amount_out, 0), sqrt_after


def price_impact_percent(expected_out: int, actual_out: int) -> float:
    """Shortfall of actual versus expected output, in percent, never negative."""
    if expected_out <= 0:
        return 0.0
    impact = (expected_out - actual_out) * 100 / expected_out
    return max(0.0, float(impact))


__all__ = [
    "fee_amount",
    "linear_amount_out",
    "single_tick_swap",
    "price_impact_percent",
]
