"""Swap execution: signer collaborator and the execution facade."""

from swapengine.execution.signer import (
    MockSigner,
    SignerResult,
    TransactionRequest,
    TransactionSigner,
)
from swapengine.execution.swap import SwapExecutor, SwapParams

__all__ = [
    # Signer
    "TransactionRequest",
    "SignerResult",
    "TransactionSigner",
    "MockSigner",
    # Facade
    "SwapParams",
    "SwapExecutor",
]
