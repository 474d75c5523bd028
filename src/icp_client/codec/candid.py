"""
Candid argument encoder.

Encodes the subset of Candid used by ledger transfer calls: ``nat``,
``nat8``, ``nat64``, ``text``, ``bool``, ``null``, ``principal``, ``opt``,
``vec`` and ``record``. A message is::

    "DIDL" type_table arg_types values

Compound types are registered in the type table in pre-order (a type gets
its index before its children) and de-duplicated structurally. Record fields
are ordered by their label hash.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..runtime.errors import EncodingError
from ..runtime.principal import Principal
from .writer import BinaryWriter

MAGIC = b"DIDL"

# Type opcodes (negative SLEB128 values)
NULL_OPCODE = -1
BOOL_OPCODE = -2
NAT_OPCODE = -3
NAT8_OPCODE = -5
NAT64_OPCODE = -8
TEXT_OPCODE = -15
PRINCIPAL_OPCODE = -24
OPT_OPCODE = -18
VEC_OPCODE = -19
RECORD_OPCODE = -20


def idl_hash(label: str) -> int:
    """Candid field label hash."""
    h = 0
    for b in label.encode("utf-8"):
        h = (h * 223 + b) & 0xFFFFFFFF
    return h


class CandidType:
    """Base class of Candid types."""

    opcode: int = 0

    @property
    def is_primitive(self) -> bool:
        return True

    def key(self) -> Tuple:
        """Structural identity used to de-duplicate table entries."""
        return (self.opcode,)

    def encode_entry(self, table: TypeTable) -> bytes:
        raise NotImplementedError

    def encode_value(self, writer: BinaryWriter, value: Any) -> None:
        raise NotImplementedError


class PrimitiveType(CandidType):
    def __init__(self, name: str, opcode: int):
        self.name = name
        self.opcode = opcode

    def encode_value(self, writer: BinaryWriter, value: Any) -> None:
        if self.opcode == NULL_OPCODE:
            if value is not None:
                raise EncodingError(f"null expects None, got {value!r}")
            return
        if self.opcode == BOOL_OPCODE:
            if not isinstance(value, bool):
                raise EncodingError(f"bool expects a bool, got {value!r}")
            writer.u8(1 if value else 0)
            return
        if self.opcode == TEXT_OPCODE:
            if not isinstance(value, str):
                raise EncodingError(f"text expects a str, got {value!r}")
            writer.len_prefixed_bytes(value.encode("utf-8"))
            return
        if self.opcode == PRINCIPAL_OPCODE:
            if not isinstance(value, Principal):
                raise EncodingError(f"principal expects a Principal, got {value!r}")
            writer.u8(1)
            writer.len_prefixed_bytes(value.as_bytes())
            return

        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(f"{self.name} expects an int, got {value!r}")
        try:
            if self.opcode == NAT_OPCODE:
                writer.uvarint(value)
            elif self.opcode == NAT8_OPCODE:
                if not 0 <= value <= 0xFF:
                    raise ValueError(f"Value does not fit in nat8: {value}")
                writer.u8(value)
            elif self.opcode == NAT64_OPCODE:
                writer.u64le(value)
            else:
                raise EncodingError(f"Unsupported primitive type: {self.name}")
        except ValueError as e:
            raise EncodingError(str(e), cause=e)

    def __repr__(self) -> str:
        return self.name


class Opt(CandidType):
    opcode = OPT_OPCODE

    def __init__(self, inner: CandidType):
        self.inner = inner

    @property
    def is_primitive(self) -> bool:
        return False

    def key(self) -> Tuple:
        return (self.opcode, self.inner.key())

    def encode_entry(self, table: TypeTable) -> bytes:
        writer = BinaryWriter()
        writer.svarint(self.opcode)
        writer.svarint(table.ref(self.inner))
        return writer.to_bytes()

    def encode_value(self, writer: BinaryWriter, value: Any) -> None:
        if value is None:
            writer.u8(0)
        else:
            writer.u8(1)
            self.inner.encode_value(writer, value)

    def __repr__(self) -> str:
        return f"opt {self.inner!r}"


class Vec(CandidType):
    opcode = VEC_OPCODE

    def __init__(self, inner: CandidType):
        self.inner = inner

    @property
    def is_primitive(self) -> bool:
        return False

    def key(self) -> Tuple:
        return (self.opcode, self.inner.key())

    def encode_entry(self, table: TypeTable) -> bytes:
        writer = BinaryWriter()
        writer.svarint(self.opcode)
        writer.svarint(table.ref(self.inner))
        return writer.to_bytes()

    def encode_value(self, writer: BinaryWriter, value: Any) -> None:
        if isinstance(value, (bytes, bytearray)):
            if self.inner.opcode != NAT8_OPCODE:
                raise EncodingError(f"bytes can only encode vec nat8, not {self!r}")
            writer.len_prefixed_bytes(bytes(value))
            return
        if not isinstance(value, (list, tuple)):
            raise EncodingError(f"vec expects a list, got {value!r}")
        writer.uvarint(len(value))
        for item in value:
            self.inner.encode_value(writer, item)

    def __repr__(self) -> str:
        return f"vec {self.inner!r}"


class Record(CandidType):
    opcode = RECORD_OPCODE

    def __init__(self, fields: Sequence[Tuple[str, CandidType]]):
        self.fields: List[Tuple[str, CandidType]] = sorted(
            fields, key=lambda field: idl_hash(field[0])
        )

    @property
    def is_primitive(self) -> bool:
        return False

    def key(self) -> Tuple:
        return (self.opcode,) + tuple((idl_hash(name), t.key()) for name, t in self.fields)

    def encode_entry(self, table: TypeTable) -> bytes:
        writer = BinaryWriter()
        writer.svarint(self.opcode)
        writer.uvarint(len(self.fields))
        for name, field_type in self.fields:
            writer.uvarint(idl_hash(name))
            writer.svarint(table.ref(field_type))
        return writer.to_bytes()

    def encode_value(self, writer: BinaryWriter, value: Any) -> None:
        if not isinstance(value, Mapping):
            raise EncodingError(f"record expects a mapping, got {type(value).__name__}")
        for name, field_type in self.fields:
            if name not in value and not isinstance(field_type, Opt):
                raise EncodingError(f"Missing record field: {name}")
            field_type.encode_value(writer, value.get(name))

    def __repr__(self) -> str:
        inner = "; ".join(f"{name} : {t!r}" for name, t in self.fields)
        return f"record {{ {inner} }}"


class TypeTable:
    """Type table under construction."""

    def __init__(self):
        self._index: Dict[Tuple, int] = {}
        self._entries: List[bytes] = []

    def ref(self, candid_type: CandidType) -> int:
        """
        Reference a type from the table.

        Returns:
            The opcode of a primitive type, or the table index of a compound one
        """
        if candid_type.is_primitive:
            return candid_type.opcode
        key = candid_type.key()
        if key in self._index:
            return self._index[key]
        index = len(self._entries)
        self._index[key] = index
        self._entries.append(b"")
        self._entries[index] = candid_type.encode_entry(self)
        return index

    def write(self, writer: BinaryWriter) -> None:
        writer.uvarint(len(self._entries))
        for entry in self._entries:
            writer.bytes(entry)


def encode_args(types: Sequence[CandidType], values: Sequence[Any]) -> bytes:
    """
    Encode a Candid argument sequence.

    Args:
        types: Argument types
        values: Argument values, one per type

    Returns:
        Candid message bytes

    Raises:
        EncodingError: If a value does not match its type
    """
    if len(types) != len(values):
        raise EncodingError(f"Expected {len(types)} arguments, got {len(values)}")

    table = TypeTable()
    refs = [table.ref(t) for t in types]

    writer = BinaryWriter()
    writer.bytes(MAGIC)
    table.write(writer)
    writer.uvarint(len(refs))
    for ref in refs:
        writer.svarint(ref)
    for candid_type, value in zip(types, values):
        candid_type.encode_value(writer, value)
    return writer.to_bytes()


NULL = PrimitiveType("null", NULL_OPCODE)
BOOL = PrimitiveType("bool", BOOL_OPCODE)
NAT = PrimitiveType("nat", NAT_OPCODE)
NAT8 = PrimitiveType("nat8", NAT8_OPCODE)
NAT64 = PrimitiveType("nat64", NAT64_OPCODE)
TEXT = PrimitiveType("text", TEXT_OPCODE)
PRINCIPAL = PrimitiveType("principal", PRINCIPAL_OPCODE)
BLOB = Vec(NAT8)

ICRC1_ACCOUNT = Record([
    ("owner", PRINCIPAL),
    ("subaccount", Opt(BLOB)),
])

ICRC1_TRANSFER_ARGS = Record([
    ("from_subaccount", Opt(BLOB)),
    ("to", ICRC1_ACCOUNT),
    ("amount", NAT),
    ("fee", Opt(NAT)),
    ("memo", Opt(BLOB)),
    ("created_at_time", Opt(NAT64)),
])


__all__ = [
    "CandidType",
    "PrimitiveType",
    "Opt",
    "Vec",
    "Record",
    "TypeTable",
    "encode_args",
    "idl_hash",
    "NULL",
    "BOOL",
    "NAT",
    "NAT8",
    "NAT64",
    "TEXT",
    "PRINCIPAL",
    "BLOB",
    "ICRC1_ACCOUNT",
    "ICRC1_TRANSFER_ARGS",
]
