"""
Ledger transfer construction.

Two transfer kinds are supported:

* ``Transfer`` calls the legacy ``send_pb`` endpoint of the ICP ledger with a
  protobuf ``SendRequest`` addressed to a hex account identifier.
* ``Icrc1Transfer`` calls ``icrc1_transfer`` on any ICRC-1 ledger with
  Candid ``TransferArgs`` addressed to an ICRC-1 account.

Both produce a signed transaction with one ``TRANSACTION`` request holding
a single (call, read_state) envelope pair.
"""

from __future__ import annotations
import logging
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..address.account_identifier import SUBACCOUNT_LENGTH, AccountIdentifier
from ..address.icrc import IcrcAccount
from ..codec.candid import ICRC1_TRANSFER_ARGS, encode_args
from ..codec.protobuf import SendRequest, encode_send_request
from ..crypto.secp256k1 import Secp256k1PrivateKey
from ..runtime.errors import (
    EncodingArgsFailedError,
    EncodingError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidArgumentsError,
    InvalidToAddressError,
)
from ..runtime.principal import Principal
from ..signers.identity import Identity
from .envelope import build_call_envelope, build_read_state_envelope
from .options import SigningOptions
from .rosetta import EnvelopePair, RequestType, SignedTransaction

logger = logging.getLogger(__name__)

SEND_PB_METHOD = "send_pb"
ICRC1_TRANSFER_METHOD = "icrc1_transfer"


def _check_subaccount(v: Optional[bytes]) -> Optional[bytes]:
    if v is not None and len(v) != SUBACCOUNT_LENGTH:
        raise ValueError(f"from_subaccount must be {SUBACCOUNT_LENGTH} bytes, got {len(v)}")
    return v


class Transfer(BaseModel):
    """Arguments of a legacy ICP ledger transfer."""

    to_account_identifier: str = Field(
        ...,
        description="Destination account identifier as 64 hex characters"
    )
    amount: int = Field(..., ge=0, description="Amount to send in e8s")
    memo: int = Field(default=0, ge=0, description="Transaction memo")
    max_fee: Optional[int] = Field(
        default=None,
        ge=0,
        description="Maximum fee in e8s; the minimum ledger fee when unset"
    )
    from_subaccount: Optional[bytes] = Field(default=None, description="Source subaccount")
    created_at: Optional[int] = Field(
        default=None,
        ge=0,
        description="Block index the transaction was created at"
    )
    current_timestamp_nanos: Optional[int] = Field(
        default=None,
        ge=0,
        description="Creation time in nanoseconds since the epoch"
    )

    @field_validator("from_subaccount")
    @classmethod
    def validate_from_subaccount(cls, v: Optional[bytes]) -> Optional[bytes]:
        return _check_subaccount(v)


class Icrc1Transfer(BaseModel):
    """Arguments of an ICRC-1 ledger transfer."""

    to_icrc_account: str = Field(..., description="Destination ICRC-1 account text")
    amount: int = Field(..., ge=0, description="Amount to send in the token's base unit")
    memo: Optional[bytes] = Field(default=None, description="Opaque memo bytes")
    fee: Optional[int] = Field(default=None, ge=0, description="Fee; the ledger fee when unset")
    from_subaccount: Optional[bytes] = Field(default=None, description="Source subaccount")
    created_at_time_nanos: Optional[int] = Field(
        default=None,
        ge=0,
        description="Creation time in nanoseconds since the epoch"
    )

    @field_validator("from_subaccount")
    @classmethod
    def validate_from_subaccount(cls, v: Optional[bytes]) -> Optional[bytes]:
        return _check_subaccount(v)


TransactionArgs = Union[Transfer, Icrc1Transfer]


def _check_amount(amount: int) -> None:
    if amount < 1:
        raise InvalidAmountError(f"Amount must be at least 1, got {amount}")


def _require_timestamp(timestamp_nanos: Optional[int]) -> int:
    if timestamp_nanos is None:
        raise InvalidArgumentsError("Creation timestamp is required")
    return timestamp_nanos


def _sign_call(
    identity: Identity,
    canister_id: Principal,
    method_name: str,
    arg: bytes,
    timestamp_nanos: int,
    options: SigningOptions,
) -> SignedTransaction:
    ingress_expiry = options.ingress_expiry.expiry_for(timestamp_nanos)
    request_id, update = build_call_envelope(
        identity, canister_id, method_name, arg, ingress_expiry, nonce=options.nonce
    )
    _, read_state = build_read_state_envelope(identity, request_id, ingress_expiry)
    pair = EnvelopePair.new(update, read_state)
    logger.debug(f"Signed {method_name} on {canister_id}: request {request_id}")
    return SignedTransaction.assemble(RequestType.send(), [pair])


def transfer(
    identity: Identity,
    canister_id: Principal,
    args: Transfer,
    options: Optional[SigningOptions] = None,
) -> SignedTransaction:
    """
    Sign a legacy ``send_pb`` transfer.

    Args:
        identity: Sender identity
        canister_id: ICP ledger canister
        args: Transfer arguments
        options: Signing options

    Returns:
        Signed transaction

    Raises:
        InvalidAmountError: If the amount is zero
        InvalidArgumentsError: If the timestamp is missing
        InvalidToAddressError: If the destination is not an account identifier
        EncodingArgsFailedError: If the request cannot be encoded
        SigningError: If signing fails
    """
    options = options or SigningOptions()
    _check_amount(args.amount)
    timestamp_nanos = _require_timestamp(args.current_timestamp_nanos)

    try:
        to = AccountIdentifier.from_hex(args.to_account_identifier)
    except InvalidAddressError as e:
        raise InvalidToAddressError(
            f"Invalid destination account identifier: {args.to_account_identifier!r}", cause=e
        )

    request = SendRequest(
        memo=args.memo,
        amount_e8s=args.amount,
        to=to.to_bytes(),
        max_fee_e8s=args.max_fee if args.max_fee is not None else options.default_max_fee_e8s,
        from_subaccount=args.from_subaccount,
        created_at=args.created_at,
        created_at_time_nanos=timestamp_nanos,
    )
    try:
        arg = encode_send_request(request)
    except EncodingError as e:
        raise EncodingArgsFailedError(f"Failed to encode SendRequest: {e.message}", cause=e)

    return _sign_call(identity, canister_id, SEND_PB_METHOD, arg, timestamp_nanos, options)


def icrc1_transfer(
    identity: Identity,
    canister_id: Principal,
    args: Icrc1Transfer,
    options: Optional[SigningOptions] = None,
) -> SignedTransaction:
    """
    Sign an ``icrc1_transfer`` call.

    Args:
        identity: Sender identity
        canister_id: ICRC-1 ledger canister
        args: Transfer arguments
        options: Signing options

    Returns:
        Signed transaction

    Raises:
        InvalidAmountError: If the amount is zero
        InvalidArgumentsError: If the timestamp is missing
        InvalidToAddressError: If the destination is not an ICRC-1 account
        EncodingArgsFailedError: If the arguments cannot be encoded
        SigningError: If signing fails
    """
    options = options or SigningOptions()
    _check_amount(args.amount)
    timestamp_nanos = _require_timestamp(args.created_at_time_nanos)

    try:
        to = IcrcAccount.from_text(args.to_icrc_account)
    except InvalidAddressError as e:
        raise InvalidToAddressError(
            f"Invalid destination account: {args.to_icrc_account!r}", cause=e
        )

    transfer_args = {
        "from_subaccount": args.from_subaccount,
        "to": {"owner": to.owner, "subaccount": to.subaccount},
        "amount": args.amount,
        "fee": args.fee,
        "memo": args.memo,
        "created_at_time": timestamp_nanos,
    }
    try:
        arg = encode_args([ICRC1_TRANSFER_ARGS], [transfer_args])
    except EncodingError as e:
        raise EncodingArgsFailedError(f"Failed to encode TransferArgs: {e.message}", cause=e)

    return _sign_call(identity, canister_id, ICRC1_TRANSFER_METHOD, arg, timestamp_nanos, options)


def sign_transaction(
    private_key: Union[Secp256k1PrivateKey, bytes],
    canister_id: Principal,
    transaction: TransactionArgs,
    options: Optional[SigningOptions] = None,
) -> SignedTransaction:
    """
    Sign a transfer of either kind.

    Args:
        private_key: Sender key, or its 32 raw bytes
        canister_id: Ledger canister receiving the call
        transaction: Transfer or Icrc1Transfer arguments
        options: Signing options

    Returns:
        Signed transaction

    Raises:
        InvalidArgumentsError: If the transaction kind is not supported
    """
    if not isinstance(private_key, Secp256k1PrivateKey):
        private_key = Secp256k1PrivateKey(private_key)
    identity = Identity(private_key)

    if isinstance(transaction, Transfer):
        return transfer(identity, canister_id, transaction, options)
    if isinstance(transaction, Icrc1Transfer):
        return icrc1_transfer(identity, canister_id, transaction, options)
    raise InvalidArgumentsError(
        f"Unsupported transaction kind: {type(transaction).__name__}"
    )


__all__ = [
    "Transfer",
    "Icrc1Transfer",
    "TransactionArgs",
    "transfer",
    "icrc1_transfer",
    "sign_transaction",
    "SEND_PB_METHOD",
    "ICRC1_TRANSFER_METHOD",
]
