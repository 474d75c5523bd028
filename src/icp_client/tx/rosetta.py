"""
Signed transaction container.

A signed transaction is a list of requests; each request is a request type
and the envelope pairs (call + read_state) submitted for it. The container
is serialized as CBOR::

    [[request_type, [{"update": envelope, "read_state": envelope}, ...]], ...]

The request type of a transfer is the bare string ``"TRANSACTION"``; the
neuron management types are single-entry maps such as
``{"STAKE": {"neuron_index": 1}}``.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import cbor2

from ..runtime.errors import DecodingError, EncodingError, EnvelopePairError, InvalidPrincipalError
from ..runtime.principal import Principal
from .envelope import CallContent, Envelope, ReadStateContent

logger = logging.getLogger(__name__)


class RequestKind(Enum):
    """Operation kinds; values are the wire tags."""

    SEND = "TRANSACTION"
    STAKE = "STAKE"
    SET_DISSOLVE_TIMESTAMP = "SET_DISSOLVE_TIMESTAMP"
    CHANGE_AUTO_STAKE_MATURITY = "CHANGE_AUTO_STAKE_MATURITY"
    START_DISSOLVE = "START_DISSOLVE"
    STOP_DISSOLVE = "STOP_DISSOLVE"
    DISBURSE = "DISBURSE"
    ADD_HOT_KEY = "ADD_HOT_KEY"
    REMOVE_HOT_KEY = "REMOVE_HOTKEY"
    SPAWN = "SPAWN"
    MERGE_MATURITY = "MERGE_MATURITY"
    STAKE_MATURITY = "STAKE_MATURITY"
    REGISTER_VOTE = "REGISTER_VOTE"
    NEURON_INFO = "NEURON_INFO"
    FOLLOW = "FOLLOW"


# Older producers tag requests with the variant name instead
_KIND_ALIASES: Dict[str, RequestKind] = {
    "Send": RequestKind.SEND,
    "Stake": RequestKind.STAKE,
    "SetDissolveTimestamp": RequestKind.SET_DISSOLVE_TIMESTAMP,
    "ChangeAutoStakeMaturity": RequestKind.CHANGE_AUTO_STAKE_MATURITY,
    "StartDissolve": RequestKind.START_DISSOLVE,
    "StopDissolve": RequestKind.STOP_DISSOLVE,
    "Disperse": RequestKind.DISBURSE,
    "AddHotKey": RequestKind.ADD_HOT_KEY,
    "RemoveHotKey": RequestKind.REMOVE_HOT_KEY,
    "Spawn": RequestKind.SPAWN,
    "MergeMaturity": RequestKind.MERGE_MATURITY,
    "StakeMaturity": RequestKind.STAKE_MATURITY,
    "RegisterVote": RequestKind.REGISTER_VOTE,
    "NeuronInfo": RequestKind.NEURON_INFO,
    "Follow": RequestKind.FOLLOW,
}

_CONTROLLER_KINDS = (RequestKind.NEURON_INFO, RequestKind.FOLLOW)


def _kind_from_tag(tag: str) -> RequestKind:
    try:
        return RequestKind(tag)
    except ValueError:
        pass
    if tag in _KIND_ALIASES:
        return _KIND_ALIASES[tag]
    raise DecodingError(f"Unknown request type: {tag!r}")


@dataclass(frozen=True)
class RequestType:
    """
    Type of a request in a signed transaction.

    Every kind except ``SEND`` carries a neuron index; ``NEURON_INFO`` and
    ``FOLLOW`` additionally carry an optional controller.
    """
    kind: RequestKind
    neuron_index: Optional[int] = None
    controller: Optional[Principal] = None

    def __post_init__(self):
        if self.kind is RequestKind.SEND:
            if self.neuron_index is not None or self.controller is not None:
                raise EncodingError("TRANSACTION requests carry no neuron index or controller")
            return
        if self.neuron_index is None:
            raise EncodingError(f"{self.kind.value} requests require a neuron index")
        if self.controller is not None and self.kind not in _CONTROLLER_KINDS:
            raise EncodingError(f"{self.kind.value} requests carry no controller")

    @classmethod
    def send(cls) -> RequestType:
        return cls(RequestKind.SEND)

    @property
    def name(self) -> str:
        """Wire tag of the request type."""
        return self.kind.value

    @property
    def is_transfer(self) -> bool:
        return self.kind is RequestKind.SEND

    def to_cbor_value(self) -> Any:
        if self.kind is RequestKind.SEND:
            return self.kind.value
        fields: Dict[str, Any] = {"neuron_index": self.neuron_index}
        if self.kind in _CONTROLLER_KINDS:
            fields["controller"] = self.controller.as_bytes() if self.controller is not None else None
        return {self.kind.value: fields}

    @classmethod
    def from_cbor_value(cls, value: Any) -> RequestType:
        if isinstance(value, str):
            kind = _kind_from_tag(value)
            if kind is not RequestKind.SEND:
                raise DecodingError(f"{value} requests require a neuron index")
            return cls(kind)
        if not isinstance(value, dict) or len(value) != 1:
            raise DecodingError(f"Malformed request type: {value!r}")
        (tag, fields), = value.items()
        kind = _kind_from_tag(tag)
        if not isinstance(fields, dict) or "neuron_index" not in fields:
            raise DecodingError(f"{tag} requests require a neuron index")
        neuron_index = fields["neuron_index"]
        if isinstance(neuron_index, bool) or not isinstance(neuron_index, int):
            raise DecodingError(f"{tag} neuron index must be an integer, got {neuron_index!r}")
        controller = fields.get("controller")
        try:
            return cls(
                kind=kind,
                neuron_index=neuron_index,
                controller=Principal(controller) if controller is not None else None,
            )
        except (EncodingError, InvalidPrincipalError) as e:
            raise DecodingError(e.message, cause=e)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class EnvelopePair:
    """A signed call and the read_state query polling its status."""
    update: Envelope
    read_state: Envelope

    @classmethod
    def new(cls, update: Envelope, read_state: Envelope) -> EnvelopePair:
        """
        Pair a call envelope with its read_state envelope.

        Raises:
            EnvelopePairError: If the envelopes do not carry call and
                read_state contents respectively
        """
        if not isinstance(update.content, CallContent):
            raise EnvelopePairError(
                "Update envelope must carry call content",
                details={"found": update.content.request_type},
            )
        if not isinstance(read_state.content, ReadStateContent):
            raise EnvelopePairError(
                "Read state envelope must carry read_state content",
                details={"found": read_state.content.request_type},
            )
        return cls(update=update, read_state=read_state)

    def to_cbor_map(self) -> Dict[str, Any]:
        return {
            "update": self.update.to_cbor_map(),
            "read_state": self.read_state.to_cbor_map(),
        }

    @classmethod
    def from_cbor_map(cls, value: Any) -> EnvelopePair:
        if not isinstance(value, dict) or "update" not in value or "read_state" not in value:
            raise DecodingError("Envelope pair must be a map with update and read_state")
        try:
            return cls.new(
                Envelope.from_cbor_map(value["update"]),
                Envelope.from_cbor_map(value["read_state"]),
            )
        except EnvelopePairError as e:
            raise DecodingError(e.message, cause=e)


Request = Tuple[RequestType, List[EnvelopePair]]


class SignedTransaction:
    """Ordered list of (request type, envelope pairs) entries."""

    def __init__(self, requests: Sequence[Request]):
        self.requests: List[Request] = [
            (request_type, list(pairs)) for request_type, pairs in requests
        ]

    @classmethod
    def assemble(cls, request_type: RequestType, pairs: Sequence[EnvelopePair]) -> SignedTransaction:
        """Wrap envelope pairs in a single-request transaction."""
        return cls([(request_type, list(pairs))])

    def to_cbor(self) -> bytes:
        """
        Serialize to CBOR.

        Raises:
            EncodingError: If serialization fails
        """
        value = [
            [request_type.to_cbor_value(), [pair.to_cbor_map() for pair in pairs]]
            for request_type, pairs in self.requests
        ]
        try:
            encoded = cbor2.dumps(value)
        except cbor2.CBOREncodeError as e:
            raise EncodingError(f"Failed to serialize signed transaction: {e}", cause=e)
        logger.debug(f"Serialized signed transaction with {len(self.requests)} request(s), {len(encoded)} bytes")
        return encoded

    def to_hex(self) -> str:
        """Lowercase hex of the CBOR serialization."""
        return self.to_cbor().hex()

    @classmethod
    def from_cbor(cls, data: bytes) -> SignedTransaction:
        """
        Deserialize from CBOR.

        Raises:
            DecodingError: If the bytes are not a signed transaction
        """
        try:
            value = cbor2.loads(data)
        except cbor2.CBORDecodeError as e:
            raise DecodingError(f"Invalid CBOR: {e}", cause=e)
        if not isinstance(value, list):
            raise DecodingError("Signed transaction must be an array")

        requests: List[Request] = []
        for entry in value:
            if not isinstance(entry, list) or len(entry) != 2 or not isinstance(entry[1], list):
                raise DecodingError("Request must be a [request_type, pairs] array")
            request_type = RequestType.from_cbor_value(entry[0])
            pairs = [EnvelopePair.from_cbor_map(pair) for pair in entry[1]]
            requests.append((request_type, pairs))
        return cls(requests)

    @classmethod
    def from_hex(cls, hex_str: str) -> SignedTransaction:
        try:
            data = bytes.fromhex(hex_str)
        except ValueError as e:
            raise DecodingError("Signed transaction is not valid hex", cause=e)
        return cls.from_cbor(data)

    def __len__(self) -> int:
        return len(self.requests)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, SignedTransaction):
            return self.requests == other.requests
        return NotImplemented

    def __repr__(self) -> str:
        kinds = ", ".join(request_type.name for request_type, _ in self.requests)
        return f"SignedTransaction([{kinds}])"


__all__ = [
    "RequestKind",
    "RequestType",
    "EnvelopePair",
    "Request",
    "SignedTransaction",
]
