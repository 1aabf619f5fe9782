"""Durable local storage for limit orders.

Stores hold plain JSON-compatible dicts; the monitor converts to and from
LimitOrder models.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()


class OrderStore(Protocol):
    """Protocol for order persistence backends."""

    def load(self) -> list[dict]:
        """Return every stored order, or [] when nothing is stored."""
        ...

    def save(self, orders: list[dict]) -> None:
        """Replace the stored orders."""
        ...


class InMemoryOrderStore:
    """Process-local store. Useful for tests and short-lived engines."""

    def __init__(self, orders: list[dict] | None = None):
        self._orders = [dict(order) for order in orders or []]
        self.save_count = 0

    def load(self) -> list[dict]:
        return [dict(order) for order in self._orders]

    def save(self, orders: list[dict]) -> None:
        self._orders = [dict(order) for order in orders]
        self.save_count += 1


class JsonFileOrderStore:
    """Store backed by a single JSON file.

    Writes go to a sibling temp file that is then renamed over the target,
    so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("order_store_load_failed", path=str(self.path), error=str(e))
            return []
        if not isinstance(data, list):
            logger.warning("order_store_unexpected_format", path=str(self.path))
            return []
        return data

    def save(self, orders: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(orders, f, indent=2)
        os.replace(tmp_path, self.path)


__all__ = ["OrderStore", "InMemoryOrderStore", "JsonFileOrderStore"]
