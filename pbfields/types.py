"""Field type codes, wire types and descriptor width selection."""

from __future__ import annotations

import enum
from dataclasses import dataclass

LTYPE_MASK = 0x0F
HTYPE_MASK = 0x30
ATYPE_MASK = 0xC0

LTYPE_LAST_PACKABLE = 0x05
LTYPES_COUNT = 0x0C

MAX_REQUIRED_FIELDS = 64
PROTO_HEADER_VERSION = 40


class LType(enum.IntEnum):
    """Scalar data type of a field (the low four bits of the type byte)."""

    BOOL = 0x00
    VARINT = 0x01
    UVARINT = 0x02
    SVARINT = 0x03
    FIXED32 = 0x04
    FIXED64 = 0x05
    BYTES = 0x06
    STRING = 0x07
    SUBMESSAGE = 0x08
    SUBMSG_W_CB = 0x09
    EXTENSION = 0x0A
    FIXED_LENGTH_BYTES = 0x0B

    @property
    def packable(self) -> bool:
        """True for numeric types that may be encoded as packed arrays."""
        return self <= LTYPE_LAST_PACKABLE


class HType(enum.IntEnum):
    """Repetition rule of a field."""

    REQUIRED = 0x00
    OPTIONAL = 0x10
    SINGULAR = 0x10
    REPEATED = 0x20
    FIXARRAY = 0x20
    ONEOF = 0x30


class AType(enum.IntEnum):
    """Allocation kind of a field."""

    STATIC = 0x00
    CALLBACK = 0x40
    POINTER = 0x80


class WireType(enum.IntEnum):
    """Protocol buffers wire types; PACKED is an internal marker."""

    VARINT = 0
    BIT64 = 1
    STRING = 2
    BIT32 = 5
    PACKED = 255


class ProtoType(enum.Enum):
    """Field types as they appear in a message definition."""

    BOOL = "bool"
    BYTES = "bytes"
    DOUBLE = "double"
    ENUM = "enum"
    UENUM = "uenum"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    MESSAGE = "message"
    MSG_W_CB = "msg_w_cb"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    STRING = "string"
    UINT32 = "uint32"
    UINT64 = "uint64"
    EXTENSION = "extension"
    FIXED_LENGTH_BYTES = "fixed_length_bytes"


_LTYPE_MAP: dict[ProtoType, LType] = {
    ProtoType.BOOL: LType.BOOL,
    ProtoType.BYTES: LType.BYTES,
    ProtoType.DOUBLE: LType.FIXED64,
    ProtoType.ENUM: LType.VARINT,
    ProtoType.UENUM: LType.UVARINT,
    ProtoType.FIXED32: LType.FIXED32,
    ProtoType.FIXED64: LType.FIXED64,
    ProtoType.FLOAT: LType.FIXED32,
    ProtoType.INT32: LType.VARINT,
    ProtoType.INT64: LType.VARINT,
    ProtoType.MESSAGE: LType.SUBMESSAGE,
    ProtoType.MSG_W_CB: LType.SUBMSG_W_CB,
    ProtoType.SFIXED32: LType.FIXED32,
    ProtoType.SFIXED64: LType.FIXED64,
    ProtoType.SINT32: LType.SVARINT,
    ProtoType.SINT64: LType.SVARINT,
    ProtoType.STRING: LType.STRING,
    ProtoType.UINT32: LType.UVARINT,
    ProtoType.UINT64: LType.UVARINT,
    ProtoType.EXTENSION: LType.EXTENSION,
    ProtoType.FIXED_LENGTH_BYTES: LType.FIXED_LENGTH_BYTES,
}

_TYPE_WIDTH: dict[ProtoType, int] = {
    ProtoType.BOOL: 1,
    ProtoType.BYTES: 2,
    ProtoType.DOUBLE: 1,
    ProtoType.ENUM: 1,
    ProtoType.UENUM: 1,
    ProtoType.FIXED32: 1,
    ProtoType.FIXED64: 1,
    ProtoType.FLOAT: 1,
    ProtoType.INT32: 1,
    ProtoType.INT64: 1,
    ProtoType.MESSAGE: 2,
    ProtoType.MSG_W_CB: 2,
    ProtoType.SFIXED32: 1,
    ProtoType.SFIXED64: 1,
    ProtoType.SINT32: 1,
    ProtoType.SINT64: 1,
    ProtoType.STRING: 2,
    ProtoType.UINT32: 1,
    ProtoType.UINT64: 1,
    ProtoType.EXTENSION: 1,
    ProtoType.FIXED_LENGTH_BYTES: 2,
}


@dataclass(frozen=True)
class FieldType:
    """The combined allocation, repetition and data type of a field."""

    atype: AType
    htype: HType
    ltype: LType

    @classmethod
    def from_byte(cls, value: int) -> FieldType:
        """Split a type byte into its three parts."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"type byte out of range: {value}")
        try:
            atype = AType(value & ATYPE_MASK)
            ltype = LType(value & LTYPE_MASK)
        except ValueError as exc:
            raise ValueError(f"invalid type byte: {value:#04x}") from exc
        return cls(atype, HType(value & HTYPE_MASK), ltype)

    def to_byte(self) -> int:
        """Combine the three parts into a single type byte."""
        return int(self.atype) | int(self.htype) | int(self.ltype)

    def is_submessage(self) -> bool:
        """True if the field holds a submessage, with or without callback."""
        return self.ltype in (LType.SUBMESSAGE, LType.SUBMSG_W_CB)


def ltype_for(proto_type: ProtoType) -> LType:
    """Return the data type code used for a definition-level field type."""
    return _LTYPE_MAP[ProtoType(proto_type)]


def auto_width(atype: AType, htype: HType, proto_type: ProtoType) -> int:
    """Pick the descriptor width in words: 1 where possible, otherwise 2."""
    if AType(atype) == AType.CALLBACK:
        return 2
    if HType(htype) == HType.REPEATED:
        return 2
    return _TYPE_WIDTH[ProtoType(proto_type)]


def fits(value: int, bits: int) -> bool:
    """Check that value, taken as an unsigned 32-bit number, fits in bits."""
    if not 0 <= bits <= 32:
        raise ValueError(f"bit count out of range: {bits}")
    return (value & 0xFFFFFFFF) < (1 << bits)