"""
Protobuf encoding of the legacy ledger ``SendRequest``.

Message layout (every amount, memo and timestamp is wrapped in its own
single-field message)::

    SendRequest {
        1: Memo            { 1: uint64 memo }
        2: Payment         { 1: Tokens receiver_gets }
        3: Tokens max_fee  { 1: uint64 e8s }
        4: Subaccount      { 1: bytes sub_account }
        5: AccountIdentifier { 1: bytes hash }
        6: BlockIndex      { 1: uint64 height }
        7: TimeStamp       { 1: uint64 timestamp_nanos }
    }

The message classes are built at import time from a file descriptor held in
a private pool. Memo, payment and destination are always present, even when
empty; zero scalars inside them are omitted.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Optional

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from ..runtime.errors import DecodingError, EncodingError

logger = logging.getLogger(__name__)

PACKAGE = "ic_ledger.pb.v1"

_UINT64 = descriptor_pb2.FieldDescriptorProto.TYPE_UINT64
_BYTES = descriptor_pb2.FieldDescriptorProto.TYPE_BYTES
_MESSAGE = descriptor_pb2.FieldDescriptorProto.TYPE_MESSAGE

# message name -> [(field name, number, type, message type name)]
_MESSAGES = {
    "Memo": [("memo", 1, _UINT64, None)],
    "Tokens": [("e8s", 1, _UINT64, None)],
    "Payment": [("receiver_gets", 1, _MESSAGE, "Tokens")],
    "Subaccount": [("sub_account", 1, _BYTES, None)],
    "AccountIdentifier": [("hash", 1, _BYTES, None)],
    "BlockIndex": [("height", 1, _UINT64, None)],
    "TimeStamp": [("timestamp_nanos", 1, _UINT64, None)],
    "SendRequest": [
        ("memo", 1, _MESSAGE, "Memo"),
        ("payment", 2, _MESSAGE, "Payment"),
        ("max_fee", 3, _MESSAGE, "Tokens"),
        ("from_subaccount", 4, _MESSAGE, "Subaccount"),
        ("to", 5, _MESSAGE, "AccountIdentifier"),
        ("created_at", 6, _MESSAGE, "BlockIndex"),
        ("created_at_time", 7, _MESSAGE, "TimeStamp"),
    ],
}


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="ic_ledger/pb/v1/send_request.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        for field_name, number, field_type, type_name in fields:
            field = message.field.add(
                name=field_name,
                number=number,
                type=field_type,
                label=descriptor_pb2.FieldDescriptorProto.LABEL_OPTIONAL,
            )
            if type_name is not None:
                field.type_name = f".{PACKAGE}.{type_name}"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())

SendRequestMessage = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.SendRequest")
)


@dataclass(frozen=True)
class SendRequest:
    """Arguments of the ledger ``send_pb`` endpoint."""
    memo: int
    amount_e8s: int
    to: bytes
    max_fee_e8s: Optional[int] = None
    from_subaccount: Optional[bytes] = None
    created_at: Optional[int] = None
    created_at_time_nanos: Optional[int] = None


def _to_message(request: SendRequest):
    message = SendRequestMessage()
    message.memo.SetInParent()
    message.memo.memo = request.memo
    message.payment.receiver_gets.SetInParent()
    message.payment.receiver_gets.e8s = request.amount_e8s
    if request.max_fee_e8s is not None:
        message.max_fee.SetInParent()
        message.max_fee.e8s = request.max_fee_e8s
    if request.from_subaccount is not None:
        message.from_subaccount.SetInParent()
        message.from_subaccount.sub_account = request.from_subaccount
    message.to.SetInParent()
    message.to.hash = request.to
    if request.created_at is not None:
        message.created_at.SetInParent()
        message.created_at.height = request.created_at
    if request.created_at_time_nanos is not None:
        message.created_at_time.SetInParent()
        message.created_at_time.timestamp_nanos = request.created_at_time_nanos
    return message


def encode_send_request(request: SendRequest) -> bytes:
    """
    Encode a SendRequest in protobuf wire format.

    Args:
        request: Request to encode

    Returns:
        Encoded bytes

    Raises:
        EncodingError: If an integer is out of range or a field has the wrong type
    """
    try:
        message = _to_message(request)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode SendRequest: {e}", cause=e)
    encoded = message.SerializeToString(deterministic=True)
    logger.debug(f"Encoded SendRequest ({len(encoded)} bytes)")
    return encoded


def decode_send_request(data: bytes) -> SendRequest:
    """
    Decode a SendRequest from protobuf wire format.

    Repeated occurrences of a sub-message are merged.

    Raises:
        DecodingError: If the bytes are malformed
    """
    message = SendRequestMessage()
    try:
        message.ParseFromString(data)
    except (DecodeError, TypeError) as e:
        raise DecodingError(f"Malformed SendRequest: {e}", cause=e)

    def optional(field: str, value):
        return value if message.HasField(field) else None

    return SendRequest(
        memo=message.memo.memo,
        amount_e8s=message.payment.receiver_gets.e8s,
        to=message.to.hash,
        max_fee_e8s=optional("max_fee", message.max_fee.e8s),
        from_subaccount=optional("from_subaccount", message.from_subaccount.sub_account),
        created_at=optional("created_at", message.created_at.height),
        created_at_time_nanos=optional("created_at_time", message.created_at_time.timestamp_nanos),
    )


__all__ = [
    "SendRequestMessage",
    "SendRequest",
    "encode_send_request",
    "decode_send_request",
]
