"""
ICP Python Client

Offline construction of signed Internet Computer ledger transfers: principal
and account address codecs, request-id hashing, envelope signing and the
CBOR signed transaction container.
"""

__version__ = "0.1.0"

from .runtime.errors import *
from .runtime.principal import Principal
from .address import AccountIdentifier, IcrcAccount
from .codec import RequestId, representation_independent_hash, make_signature_payload
from .crypto import Secp256k1PrivateKey, Secp256k1PublicKey
from .signers import Identity, Signature
from .tx import (
    IngressExpiry, SigningOptions,
    CallContent, ReadStateContent, Envelope,
    build_call_envelope, build_read_state_envelope,
    RequestType, RequestKind, EnvelopePair, SignedTransaction,
    Transfer, Icrc1Transfer, sign_transaction,
)
from .context import LedgerContext, InternetComputerContext, ChainkeyBitcoinContext
from .signer import Signer, SigningInput, SigningOutput, sign
