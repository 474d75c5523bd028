"""
Transaction construction.

Envelope building, the signed transaction container and ledger transfers.
"""

from .options import IngressExpiry, SigningOptions
from .envelope import (
    CallContent, ReadStateContent, Envelope,
    build_call_envelope, build_read_state_envelope,
)
from .rosetta import RequestType, RequestKind, EnvelopePair, SignedTransaction
from .transfer import Transfer, Icrc1Transfer, sign_transaction

__all__ = [
    "IngressExpiry",
    "SigningOptions",
    "CallContent",
    "ReadStateContent",
    "Envelope",
    "build_call_envelope",
    "build_read_state_envelope",
    "RequestType",
    "RequestKind",
    "EnvelopePair",
    "SignedTransaction",
    "Transfer",
    "Icrc1Transfer",
    "sign_transaction",
]
