"""Pydantic models for client-side limit orders."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from swapengine.models.token import Token
from swapengine.models.types import Address

SECONDS_PER_DAY = 24 * 60 * 60


class OrderStatus(str, Enum):
    """Lifecycle state of a limit order. Only PENDING is non-terminal."""

    PENDING = "pending"
    EXECUTED = "executed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    FAILED = "failed"


class PriceSelector(str, Enum):
    """How the target price is chosen at creation time."""

    MARKET = "market"
    PLUS_1 = "+1%"
    PLUS_5 = "+5%"
    PLUS_10 = "+10%"
    CUSTOM = "custom"


class ExpirySelector(str, Enum):
    """How long an order stays live."""

    ONE_DAY = "1day"
    ONE_WEEK = "1week"
    ONE_MONTH = "1month"
    ONE_YEAR = "1year"


# Multiplier applied to the market price snapshot for non-custom selectors
PRICE_MULTIPLIERS: dict[PriceSelector, float] = {
    PriceSelector.MARKET: 1.0,
    PriceSelector.PLUS_1: 1.01,
    PriceSelector.PLUS_5: 1.05,
    PriceSelector.PLUS_10: 1.10,
}

EXPIRY_DURATIONS: dict[ExpirySelector, int] = {
    ExpirySelector.ONE_DAY: SECONDS_PER_DAY,
    ExpirySelector.ONE_WEEK: 7 * SECONDS_PER_DAY,
    ExpirySelector.ONE_MONTH: 30 * SECONDS_PER_DAY,
    ExpirySelector.ONE_YEAR: 365 * SECONDS_PER_DAY,
}


class CreateLimitOrderParams(BaseModel):
    """Caller input for creating a limit order."""

    token_in: Token
    token_out: Token
    amount_in: str = Field(description="Human-decimal amount of token_in to sell")
    price_selector: PriceSelector = PriceSelector.MARKET
    expiry_selector: ExpirySelector = ExpirySelector.ONE_WEEK
    custom_price: float | None = Field(
        default=None, gt=0, description="Target price, required for CUSTOM"
    )


class LimitOrder(BaseModel):
    """A sell order that fires when token_out per token_in reaches target_price.

    Timestamps are Unix seconds.
    """

    id: str
    owner_address: Address
    token_in: Token
    token_out: Token
    amount_in: str
    target_price: float = Field(gt=0, description="token_out per token_in, human units")
    expiry_timestamp: float
    status: OrderStatus = OrderStatus.PENDING
    created_at: float
    executed_at: float | None = None
    transaction_id: str | None = None
    error: str | None = None
    pair: str

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    def is_expired_at(self, now: float) -> bool:
        """True once now is strictly past the expiry timestamp."""
        return now > self.expiry_timestamp


class OrderStats(BaseModel):
    """Order counts by status."""

    total: int = 0
    pending: int = 0
    executed: int = 0
    cancelled: int = 0
    expired: int = 0
    failed: int = 0
