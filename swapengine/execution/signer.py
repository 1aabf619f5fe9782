"""Transaction signer collaborator.

The engine never holds keys. A signer receives a fully-encoded router call,
signs and broadcasts it, and reports a status back.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Protocol

SIGNER_STATUS_SUCCESS = "success"
SIGNER_STATUS_ERROR = "error"


@dataclass(frozen=True)
class TransactionRequest:
    """A contract call to be signed by the wallet at from_address."""

    to: str
    data: str  # 0x-prefixed calldata
    from_address: str
    chain_id: int
    value: int = 0
    # Decoded form of data, for wallets that encode the call themselves
    function_name: str = "execute"
    args: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class SignerResult:
    """Outcome reported by the signer."""

    status: str
    transaction_id: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SIGNER_STATUS_SUCCESS and bool(self.transaction_id)


class TransactionSigner(Protocol):
    """Protocol for wallet signers.

    This allows swapping between a real wallet bridge and a mock for testing.
    """

    async def send_transaction(self, request: TransactionRequest) -> SignerResult:
        """Sign and broadcast a transaction.

        Returns:
            SignerResult with status "success" and a transaction id, or
            status "error" with a message
        """
        ...


class MockSigner:
    """Mock signer for testing without a wallet.

    Returns a configurable result (a fresh transaction id per call by
    default) and records every request for assertions. Set delay to
    simulate a slow wallet.
    """

    def __init__(
        self,
        result: SignerResult | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.result = result
        self.error = error
        self.delay = delay
        self.requests: list[TransactionRequest] = []

    async def send_transaction(self, request: TransactionRequest) -> SignerResult:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return SignerResult(
            status=SIGNER_STATUS_SUCCESS,
            transaction_id=f"0x{len(self.requests):064x}",
        )


__all__ = [
    "SIGNER_STATUS_SUCCESS",
    "SIGNER_STATUS_ERROR",
    "TransactionRequest",
    "SignerResult",
    "TransactionSigner",
    "MockSigner",
]
