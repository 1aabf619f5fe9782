"""Best-effort mirror of limit orders to a backend service."""

from __future__ import annotations

import asyncio

import httpx
import structlog

from swapengine.models.orders import LimitOrder

logger = structlog.get_logger()

LIMIT_ORDERS_PATH = "/api/limit-orders"


class BackendOrderMirror:
    """POSTs new orders to <base_url>/api/limit-orders.

    Failures are logged and never raised; the local store stays the source
    of truth. mirror() schedules the request in the background and returns
    immediately.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._tasks: set[asyncio.Task] = set()

    @staticmethod
    def order_payload(order: LimitOrder) -> dict:
        payload = order.model_dump(mode="json")
        # The backend keys orders by "user"
        payload["user"] = order.owner_address
        return payload

    async def post_order(self, order: LimitOrder) -> bool:
        """Send one order; returns True if the backend accepted it."""
        url = f"{self.base_url}{LIMIT_ORDERS_PATH}"
        try:
            if self._client is not None:
                response = await self._client.post(
                    url, json=self.order_payload(order), timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=self.order_payload(order))
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("order_backend_sync_failed", order_id=order.id, error=str(e))
            return False

        logger.debug("order_backend_synced", order_id=order.id)
        return True

    def mirror(self, order: LimitOrder) -> None:
        """Schedule post_order without waiting for it."""
        task = asyncio.create_task(self.post_order(order))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for every scheduled mirror request to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


__all__ = ["BackendOrderMirror", "LIMIT_ORDERS_PATH"]
