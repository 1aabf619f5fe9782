"""Client-side limit order monitor.

Orders live in memory, are persisted to an OrderStore after every change
and are mirrored best-effort to a backend. A background asyncio task polls
the market price for every pending order and executes the swap once the
price reaches the order's target.

    pending -> executed | cancelled | expired | failed
"""

from __future__ import annotations

import asyncio
import contextlib
import decimal
import secrets
import time
from collections.abc import Callable
from decimal import Decimal

import structlog
from pydantic import ValidationError

from swapengine.amm.uniswap_v4.amounts import DECIMAL_HIGH_PREC_CONTEXT, parse_amount
from swapengine.amm.uniswap_v4.constants import DEFAULT_FEE, V4_SWAP_GAS_ESTIMATE
from swapengine.amm.uniswap_v4.quoter import QuoteEngine
from swapengine.amm.uniswap_v4.swap_math import fee_amount
from swapengine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from swapengine.errors import (
    EngineError,
    InvalidSwapParams,
    MalformedAmount,
    NotConnected,
    OrderCreationFailed,
)
from swapengine.execution.swap import SwapExecutor, SwapParams
from swapengine.models.orders import (
    EXPIRY_DURATIONS,
    PRICE_MULTIPLIERS,
    SECONDS_PER_DAY,
    CreateLimitOrderParams,
    LimitOrder,
    OrderStats,
    OrderStatus,
    PriceSelector,
)
from swapengine.models.quote import Quote, apply_slippage

from .backend import BackendOrderMirror
from .store import InMemoryOrderStore, OrderStore

logger = structlog.get_logger()

# Slippage used when a triggered order is executed
LIMIT_ORDER_SLIPPAGE_PERCENT = 0.5

DEFAULT_CLEANUP_AGE = 30 * SECONDS_PER_DAY


def new_order_id(now: float) -> str:
    return f"order_{int(now * 1000)}_{secrets.token_hex(4)}"


class LimitOrderMonitor:
    """Owns the order list and the polling task.

    Callers receive copies of orders; mutate them only through
    create_limit_order, cancel_order and cleanup_old_orders.
    """

    def __init__(
        self,
        quote_engine: QuoteEngine,
        executor: SwapExecutor,
        store: OrderStore | None = None,
        backend: BackendOrderMirror | None = None,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the monitor and load stored orders.

        Polling does not start until resume() or create_limit_order() is
        called from a running event loop.

        Args:
            quote_engine: Market price source
            executor: Execution facade used for triggered orders
            store: Order persistence (defaults to in-memory)
            backend: Optional backend mirror for new orders
            config: Engine configuration (poll interval)
            clock: Wall clock returning Unix seconds
        """
        self.quote_engine = quote_engine
        self.executor = executor
        self.store = store if store is not None else InMemoryOrderStore()
        self.backend = backend
        self.config = config
        self._clock = clock
        self._orders: list[LimitOrder] = self._load_orders()
        self._task: asyncio.Task | None = None
        self._tick_lock = asyncio.Lock()
        # Ids of orders whose swap has been handed to the executor
        self._executing: set[str] = set()

    # ------------------------------------------------------------------
    # Order lifecycle
    # ------------------------------------------------------------------

    async def create_limit_order(
        self, params: CreateLimitOrderParams, owner_address: str
    ) -> LimitOrder:
        """Create a pending order and start polling.

        Raises:
            NotConnected: If owner_address is empty
            InvalidSwapParams: If token_in and token_out are the same
            MalformedAmount: If amount_in is not a positive decimal amount
            OrderCreationFailed: If the target price cannot be determined
        """
        if not owner_address:
            raise NotConnected("No wallet connected")
        if params.token_in == params.token_out:
            raise InvalidSwapParams(f"Cannot trade {params.token_in.symbol} for itself")
        if parse_amount(params.amount_in, params.token_in.decimals, strict=True) <= 0:
            raise MalformedAmount(f"Order amount must be positive: {params.amount_in!r}")

        target_price = await self._target_price(params)
        now = self._clock()
        order = LimitOrder(
            id=new_order_id(now),
            owner_address=owner_address,
            token_in=params.token_in,
            token_out=params.token_out,
            amount_in=params.amount_in,
            target_price=target_price,
            expiry_timestamp=now + EXPIRY_DURATIONS[params.expiry_selector],
            created_at=now,
            pair=f"{params.token_in.symbol}/{params.token_out.symbol}",
        )

        self._orders.append(order)
        self._persist()
        if self.backend is not None:
            self.backend.mirror(order)

        logger.info(
            "limit_order_created",
            order_id=order.id,
            pair=order.pair,
            amount_in=order.amount_in,
            target_price=order.target_price,
            expiry=order.expiry_timestamp,
        )

        self._ensure_polling()
        return order.model_copy()

    def cancel_order(self, order_id: str) -> bool:
        """Cancel a pending order.

        Returns False if the order is missing, not pending, or its swap has
        already been submitted.
        """
        order = self._find(order_id)
        if order is None or not order.is_pending:
            return False
        if order_id in self._executing:
            logger.info("limit_order_cancel_rejected_in_flight", order_id=order_id)
            return False
        order.status = OrderStatus.CANCELLED
        self._persist()
        logger.info("limit_order_cancelled", order_id=order_id)
        return True

    def cleanup_old_orders(self, max_age: float = DEFAULT_CLEANUP_AGE) -> int:
        """Drop non-pending orders created more than max_age seconds ago.

        Returns:
            Number of orders removed
        """
        cutoff = self._clock() - max_age
        kept = [order for order in self._orders if order.is_pending or order.created_at > cutoff]
        removed = len(self._orders) - len(kept)
        if removed:
            self._orders = kept
            self._persist()
            logger.info("limit_orders_cleaned_up", removed=removed)
        return removed

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def tick(self) -> None:
        """Evaluate every pending order once, then persist.

        Overlapping calls are serialized; a second tick starts only after
        the first has persisted.
        """
        async with self._tick_lock:
            for order in [o for o in self._orders if o.is_pending]:
                await self._check_order(order)
            self._persist()

    def resume(self) -> None:
        """Reload orders from the store and restart polling if any are pending.

        Ignored while polling or a tick is running, since the in-memory
        orders are newer than the store.
        """
        if self.is_polling or self._tick_lock.locked():
            logger.warning("limit_order_resume_ignored", polling=self.is_polling)
            return
        self._orders = self._load_orders()
        self._ensure_polling()

    async def stop(self) -> None:
        """Cancel the polling task, if running."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    def _ensure_polling(self) -> None:
        if self.is_polling or not self._has_pending():
            return
        self._task = asyncio.create_task(self._poll_loop())

    async def _poll_loop(self) -> None:
        logger.debug("limit_order_monitor_started", interval=self.config.poll_interval)
        while self._has_pending():
            try:
                await self.tick()
            except Exception:
                logger.exception("limit_order_tick_failed")
            if not self._has_pending():
                break
            await asyncio.sleep(self.config.poll_interval)
        logger.debug("limit_order_monitor_idle")

    async def _check_order(self, order: LimitOrder) -> None:
        if order.is_expired_at(self._clock()):
            order.status = OrderStatus.EXPIRED
            logger.info("limit_order_expired", order_id=order.id)
            return

        try:
            price = await self.quote_engine.get_market_price(order.token_in, order.token_out)
        except EngineError as e:
            logger.warning("limit_order_price_unavailable", order_id=order.id, error=str(e))
            return
        except Exception:
            logger.exception("limit_order_price_check_failed", order_id=order.id)
            return

        if price < order.target_price:
            return
        # A cancel may have landed while the price was being fetched
        if not order.is_pending:
            return

        logger.info(
            "limit_order_triggered",
            order_id=order.id,
            price=price,
            target_price=order.target_price,
        )
        await self._execute(order)

    async def _execute(self, order: LimitOrder) -> None:
        params = SwapParams(
            token_in=order.token_in,
            token_out=order.token_out,
            amount_in=order.amount_in,
            slippage_tolerance=LIMIT_ORDER_SLIPPAGE_PERCENT,
        )
        self._executing.add(order.id)
        try:
            quote = self._target_quote(order)
            transaction_id = await self.executor.execute_swap(params, quote, order.owner_address)
        except EngineError as e:
            if not order.is_pending:
                return
            order.status = OrderStatus.FAILED
            order.error = str(e)
            logger.warning("limit_order_failed", order_id=order.id, error=str(e))
            return
        except Exception as e:
            if not order.is_pending:
                return
            order.status = OrderStatus.FAILED
            order.error = str(e) or type(e).__name__
            logger.exception("limit_order_failed_unexpectedly", order_id=order.id)
            return
        finally:
            self._executing.discard(order.id)

        if not order.is_pending:
            logger.warning(
                "limit_order_executed_after_status_change",
                order_id=order.id,
                status=order.status.value,
                transaction_id=transaction_id,
            )
            return
        order.status = OrderStatus.EXECUTED
        order.executed_at = self._clock()
        order.transaction_id = transaction_id
        logger.info("limit_order_executed", order_id=order.id, transaction_id=transaction_id)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_orders(self) -> list[LimitOrder]:
        return [order.model_copy() for order in self._orders]

    def get_pending_orders(self) -> list[LimitOrder]:
        return [order.model_copy() for order in self._orders if order.is_pending]

    def get_order(self, order_id: str) -> LimitOrder | None:
        order = self._find(order_id)
        return order.model_copy() if order is not None else None

    def get_order_stats(self) -> OrderStats:
        counts = {status: 0 for status in OrderStatus}
        for order in self._orders:
            counts[order.status] += 1
        return OrderStats(
            total=len(self._orders),
            pending=counts[OrderStatus.PENDING],
            executed=counts[OrderStatus.EXECUTED],
            cancelled=counts[OrderStatus.CANCELLED],
            expired=counts[OrderStatus.EXPIRED],
            failed=counts[OrderStatus.FAILED],
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _target_price(self, params: CreateLimitOrderParams) -> float:
        if params.price_selector == PriceSelector.CUSTOM:
            if params.custom_price is None:
                raise OrderCreationFailed("A custom price is required for custom orders")
            return params.custom_price

        try:
            market_price = await self.quote_engine.get_market_price(
                params.token_in, params.token_out
            )
        except EngineError as e:
            raise OrderCreationFailed(f"Unable to fetch current market price: {e}") from e
        if market_price <= 0:
            raise OrderCreationFailed("Unable to fetch current market price")
        return market_price * PRICE_MULTIPLIERS[params.price_selector]

    @staticmethod
    def _target_quote(order: LimitOrder) -> Quote:
        """Quote implied by the order's target price rather than live state."""
        amount_in = parse_amount(order.amount_in, order.token_in.decimals, strict=True)
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            scale = Decimal(10) ** (order.token_out.decimals - order.token_in.decimals)
            amount_out = int(Decimal(amount_in) * Decimal(str(order.target_price)) * scale)
        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            price_impact_percent=0.0,
            minimum_received=apply_slippage(amount_out, LIMIT_ORDER_SLIPPAGE_PERCENT),
            fee_amount=fee_amount(amount_in, DEFAULT_FEE),
            route=(order.token_in.symbol, order.token_out.symbol),
            gas_estimate=V4_SWAP_GAS_ESTIMATE,
        )

    def _find(self, order_id: str) -> LimitOrder | None:
        return next((order for order in self._orders if order.id == order_id), None)

    def _has_pending(self) -> bool:
        return any(order.is_pending for order in self._orders)

    def _load_orders(self) -> list[LimitOrder]:
        orders = []
        for data in self.store.load():
            try:
                orders.append(LimitOrder.model_validate(data))
            except ValidationError as e:
                logger.warning(
                    "stored_order_invalid",
                    order_id=data.get("id") if isinstance(data, dict) else None,
                    error=str(e),
                )
        return orders

    def _persist(self) -> None:
        try:
            self.store.save([order.model_dump(mode="json") for order in self._orders])
        except OSError as e:
            logger.error("order_store_save_failed", error=str(e))


__all__ = ["LimitOrderMonitor", "LIMIT_ORDER_SLIPPAGE_PERCENT", "new_order_id"]
