"""
Request envelopes.

An envelope is a request content plus the sender's DER public key and
signature. Two content kinds are built here: ``call`` (a state-changing
canister method invocation) and ``read_state`` (a status query for a prior
call).
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..codec.request_id import RequestId
from ..runtime.errors import DecodingError, InvalidPrincipalError
from ..runtime.principal import Principal
from ..signers.identity import Identity

logger = logging.getLogger(__name__)

CALL_REQUEST_TYPE = "call"
READ_STATE_REQUEST_TYPE = "read_state"
REQUEST_STATUS_LABEL = b"request_status"


@dataclass(frozen=True)
class CallContent:
    """Content of a canister update call."""
    ingress_expiry: int
    sender: Principal
    canister_id: Principal
    method_name: str
    arg: bytes
    nonce: Optional[bytes] = None

    request_type = CALL_REQUEST_TYPE

    def to_request_id(self) -> RequestId:
        return RequestId.from_fields({
            "request_type": self.request_type,
            "nonce": self.nonce,
            "ingress_expiry": self.ingress_expiry,
            "sender": self.sender.as_bytes(),
            "canister_id": self.canister_id.as_bytes(),
            "method_name": self.method_name,
            "arg": self.arg,
        })

    def to_cbor_map(self) -> Dict[str, Any]:
        """Content map in wire key order."""
        content: Dict[str, Any] = {"request_type": self.request_type}
        if self.nonce is not None:
            content["nonce"] = self.nonce
        content["ingress_expiry"] = self.ingress_expiry
        content["sender"] = self.sender.as_bytes()
        content["canister_id"] = self.canister_id.as_bytes()
        content["method_name"] = self.method_name
        content["arg"] = self.arg
        return content


@dataclass(frozen=True)
class ReadStateContent:
    """Content of a read_state query."""
    ingress_expiry: int
    sender: Principal
    paths: Tuple[Tuple[bytes, ...], ...] = field(default_factory=tuple)

    request_type = READ_STATE_REQUEST_TYPE

    def to_request_id(self) -> RequestId:
        return RequestId.from_fields({
            "request_type": self.request_type,
            "ingress_expiry": self.ingress_expiry,
            "sender": self.sender.as_bytes(),
            "paths": [list(path) for path in self.paths],
        })

    def to_cbor_map(self) -> Dict[str, Any]:
        """Content map in wire key order."""
        return {
            "request_type": self.request_type,
            "ingress_expiry": self.ingress_expiry,
            "sender": self.sender.as_bytes(),
            "paths": [list(path) for path in self.paths],
        }


EnvelopeContent = Union[CallContent, ReadStateContent]


def _cbor_uint(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    return value


def content_from_cbor_map(content: Dict[str, Any]) -> EnvelopeContent:
    """
    Rebuild envelope content from its decoded CBOR map.

    Raises:
        DecodingError: If the map is not a call or read_state content
    """
    if not isinstance(content, dict):
        raise DecodingError(f"Envelope content must be a map, got {type(content).__name__}")
    request_type = content.get("request_type")
    try:
        if request_type == CALL_REQUEST_TYPE:
            return CallContent(
                ingress_expiry=_cbor_uint(content["ingress_expiry"]),
                sender=Principal(content["sender"]),
                canister_id=Principal(content["canister_id"]),
                method_name=str(content["method_name"]),
                arg=bytes(content["arg"]),
                nonce=content.get("nonce"),
            )
        if request_type == READ_STATE_REQUEST_TYPE:
            return ReadStateContent(
                ingress_expiry=_cbor_uint(content["ingress_expiry"]),
                sender=Principal(content["sender"]),
                paths=tuple(tuple(bytes(label) for label in path) for path in content["paths"]),
            )
    except (KeyError, TypeError, ValueError, InvalidPrincipalError) as e:
        raise DecodingError(f"Malformed {request_type} content: {e}", cause=e)
    raise DecodingError(f"Unknown request type: {request_type!r}")


@dataclass(frozen=True)
class Envelope:
    """Request content with optional sender public key and signature."""
    content: EnvelopeContent
    sender_pubkey: Optional[bytes] = None
    sender_sig: Optional[bytes] = None

    @property
    def is_signed(self) -> bool:
        return self.sender_pubkey is not None and self.sender_sig is not None

    def to_cbor_map(self) -> Dict[str, Any]:
        """Envelope map; the public key and signature are arrays of byte values."""
        envelope: Dict[str, Any] = {"content": self.content.to_cbor_map()}
        if self.sender_pubkey is not None:
            envelope["sender_pubkey"] = list(self.sender_pubkey)
        if self.sender_sig is not None:
            envelope["sender_sig"] = list(self.sender_sig)
        return envelope

    @classmethod
    def from_cbor_map(cls, envelope: Dict[str, Any]) -> Envelope:
        if not isinstance(envelope, dict) or "content" not in envelope:
            raise DecodingError("Envelope must be a map with a content entry")

        def byte_array(key: str) -> Optional[bytes]:
            value = envelope.get(key)
            if value is None:
                return None
            try:
                return bytes(value)
            except (TypeError, ValueError) as e:
                raise DecodingError(f"Envelope {key} is not a byte array", cause=e)

        return cls(
            content=content_from_cbor_map(envelope["content"]),
            sender_pubkey=byte_array("sender_pubkey"),
            sender_sig=byte_array("sender_sig"),
        )


def _sign_content(identity: Identity, content: EnvelopeContent) -> Tuple[RequestId, Envelope]:
    request_id = content.to_request_id()
    signature = identity.sign(request_id)
    logger.debug(f"Built {content.request_type} envelope {request_id} (expiry {content.ingress_expiry})")
    return request_id, Envelope(
        content=content,
        sender_pubkey=signature.public_key,
        sender_sig=signature.signature,
    )


def build_call_envelope(
    identity: Identity,
    canister_id: Principal,
    method_name: str,
    arg: bytes,
    ingress_expiry: int,
    nonce: Optional[bytes] = None,
) -> Tuple[RequestId, Envelope]:
    """
    Build and sign a call envelope.

    Args:
        identity: Sender identity
        canister_id: Target canister
        method_name: Canister method to invoke
        arg: Encoded method arguments
        ingress_expiry: Expiry timestamp in nanoseconds
        nonce: Optional nonce to make the request id unique

    Returns:
        Tuple of (request id, signed envelope)

    Raises:
        SigningError: If signing fails
    """
    content = CallContent(
        ingress_expiry=ingress_expiry,
        sender=identity.sender(),
        canister_id=canister_id,
        method_name=method_name,
        arg=bytes(arg),
        nonce=nonce,
    )
    return _sign_content(identity, content)


def build_read_state_envelope(
    identity: Identity,
    prior_request_id: RequestId,
    ingress_expiry: int,
    extra_paths: Sequence[Sequence[bytes]] = (),
) -> Tuple[RequestId, Envelope]:
    """
    Build and sign a read_state envelope for the status of a prior call.

    The content queries ``["request_status", prior_request_id]``. The
    returned request id is that of the read_state content itself.

    Args:
        identity: Sender identity
        prior_request_id: Request id of the call to poll
        ingress_expiry: Expiry timestamp in nanoseconds
        extra_paths: Additional state tree paths to query

    Returns:
        Tuple of (request id, signed envelope)

    Raises:
        SigningError: If signing fails
    """
    paths: List[Tuple[bytes, ...]] = [(REQUEST_STATUS_LABEL, prior_request_id.as_bytes())]
    paths.extend(tuple(bytes(label) for label in path) for path in extra_paths)
    content = ReadStateContent(
        ingress_expiry=ingress_expiry,
        sender=identity.sender(),
        paths=tuple(paths),
    )
    return _sign_content(identity, content)


__all__ = [
    "CallContent",
    "ReadStateContent",
    "EnvelopeContent",
    "Envelope",
    "build_call_envelope",
    "build_read_state_envelope",
    "content_from_cbor_map",
    "CALL_REQUEST_TYPE",
    "READ_STATE_REQUEST_TYPE",
]
