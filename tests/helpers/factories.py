"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_pool_state, make_quote, make_order
"""

from swapengine.amm.uniswap_v4.state import PoolState
from swapengine.models.orders import LimitOrder, OrderStatus
from swapengine.models.quote import Quote, QuoteSource
from swapengine.models.token import Token
from tests.helpers.constants import DEEP_LIQUIDITY, NOW, OWNER, SQRT_PRICE_1, USDC, WLD

# Global counter for unique order ids
_order_counter = 0


def make_pool_state(
    sqrt_price_x96: int = SQRT_PRICE_1,
    liquidity: int = DEEP_LIQUIDITY,
    tick: int = 0,
    lp_fee: int = 3000,
) -> PoolState:
    """Create a pool state with sensible defaults (price 1.0, deep liquidity)."""
    return PoolState(
        sqrt_price_x96=sqrt_price_x96,
        tick=tick,
        protocol_fee=0,
        lp_fee=lp_fee,
        liquidity=liquidity,
    )


def make_quote(
    amount_in: int = 10**18,
    amount_out: int = 1_000_000,
    minimum_received: int | None = None,
    source: QuoteSource = QuoteSource.ONCHAIN,
) -> Quote:
    """Create a quote; minimum_received defaults to amount_out."""
    return Quote(
        amount_in=amount_in,
        amount_out=amount_out,
        price_impact_percent=0.0,
        minimum_received=amount_out if minimum_received is None else minimum_received,
        fee_amount=0,
        route=("WLD", "USDC"),
        gas_estimate=150_000,
        source=source,
    )


def make_order(
    token_in: Token = WLD,
    token_out: Token = USDC,
    amount_in: str = "1",
    target_price: float = 1.0,
    status: OrderStatus = OrderStatus.PENDING,
    created_at: float = NOW,
    expiry_timestamp: float | None = None,
    order_id: str | None = None,
    owner_address: str = OWNER,
) -> LimitOrder:
    """Create a limit order with sensible defaults (1 WLD -> USDC at 1.0, one week)."""
    global _order_counter
    if order_id is None:
        _order_counter += 1
        order_id = f"order_test_{_order_counter}"

    return LimitOrder(
        id=order_id,
        owner_address=owner_address,
        token_in=token_in,
        token_out=token_out,
        amount_in=amount_in,
        target_price=target_price,
        expiry_timestamp=created_at + 7 * 86400 if expiry_timestamp is None else expiry_timestamp,
        status=status,
        created_at=created_at,
        pair=f"{token_in.symbol}/{token_out.symbol}",
    )
