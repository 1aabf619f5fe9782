"""Quote result type shared by the quote engine, executor and monitor."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

# Slippage tolerance is expressed in percent; work in millionths for integer math
_SLIPPAGE_SCALE = 1_000_000


class QuoteSource(str, Enum):
    """Where a quote's price came from."""

    ONCHAIN = "onchain"
    DEFAULT_STATE = "default_state"  # at least one state read fell back to a default
    SIMULATED = "simulated"  # no price source reachable; low confidence


def apply_slippage(amount: int, slippage_percent: float) -> int:
    """Reduce an amount by a slippage tolerance given in percent.

    Rounds down so the floor never exceeds what the caller accepted.
    """
    if slippage_percent < 0 or slippage_percent >= 100:
        raise ValueError(f"slippage must be in [0, 100), got {slippage_percent}")
    kept = _SLIPPAGE_SCALE - int(Decimal(str(slippage_percent)) * _SLIPPAGE_SCALE / 100)
    return amount * kept // _SLIPPAGE_SCALE


@dataclass(frozen=True)
class Quote:
    """Result of quoting an exact-input swap.

    All amounts are raw integer base units (token_in units for amount_in and
    fee_amount, token_out units for amount_out and minimum_received).

    Attributes:
        amount_in: Parsed input amount
        amount_out: Expected output amount
        price_impact_percent: Non-negative price impact in percent
        minimum_received: amount_out reduced by the slippage tolerance
        fee_amount: LP fee charged on the input
        route: Token symbols in swap order
        sqrt_price_x96_after: Post-trade sqrt price (0 for simulated quotes)
        gas_estimate: Estimated gas for the swap
        source: Where the price came from
    """

    amount_in: int
    amount_out: int
    price_impact_percent: float
    minimum_received: int
    fee_amount: int
    route: tuple[str, ...]
    gas_estimate: int
    sqrt_price_x96_after: int = 0
    source: QuoteSource = QuoteSource.ONCHAIN

    @property
    def is_simulated(self) -> bool:
        """True if this quote came from the no-network simulation path."""
        return self.source == QuoteSource.SIMULATED

    def with_slippage(self, slippage_percent: float) -> Quote:
        """Return a copy whose minimum_received reflects the given slippage."""
        return replace(
            self, minimum_received=apply_slippage(self.amount_out, slippage_percent)
        )
