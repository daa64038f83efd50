"""Packed field descriptors and message descriptors built from them.

Each field is described by 1, 2, 4 or 8 unsigned 32-bit words. The lowest
two bits of the first word give the descriptor size, the next six bits the
low bits of the tag and the following byte the field type.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from .types import AType, FieldType, HType, LType, ProtoType, auto_width, fits, ltype_for

_WORD_MASK = 0xFFFFFFFF
_WIDTHS = (1, 2, 4, 8)
_LEN_CODE = {1: 0, 2: 1, 4: 2, 8: 3}
AUTO = "auto"


class FieldInfoOverflow(ValueError):
    """A field's values do not fit in the chosen descriptor width."""


def word_count(width: int) -> int:
    """Number of 32-bit words used by a descriptor with size code width (0..3)."""
    if width not in (0, 1, 2, 3):
        raise ValueError(f"descriptor size code out of range: {width}")
    return 1 << width


def _check_width(width: int) -> None:
    if width not in _WIDTHS:
        raise ValueError(f"descriptor width must be one of {_WIDTHS}, not {width!r}")


def _int8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def _representative_proto_type(ltype: LType) -> ProtoType:
    return next(p for p in ProtoType if ltype_for(p) == ltype)


@dataclass(frozen=True)
class FieldInfo:
    """Layout information of one message field."""

    tag: int
    type: FieldType
    data_offset: int
    data_size: int
    size_offset: int = 0
    array_size: int = 1

    def pack(self, width: int) -> list[int]:
        """Encode the field as a list of width 32-bit words."""
        _check_width(width)
        head = _LEN_CODE[width] | ((self.tag << 2) & 0xFF) | (self.type.to_byte() << 8)

        if width == 1:
            word = (
                head
                | ((self.data_offset & 0xFF) << 16)
                | ((self.size_offset & 0x0F) << 24)
                | ((self.data_size & 0x0F) << 28)
            )
            return [word & _WORD_MASK]

        if width == 2:
            word0 = head | ((self.array_size & 0xFFF) << 16) | ((self.size_offset & 0x0F) << 28)
            word1 = (
                (self.data_offset & 0xFFFF)
                | ((self.data_size & 0xFFF) << 16)
                | ((self.tag & 0x3C0) << 22)
            )
            return [word0 & _WORD_MASK, word1 & _WORD_MASK]

        # The size offset is sign-extended, as the wide formats store it signed.
        word1 = ((_int8(self.size_offset) & _WORD_MASK) | ((self.tag << 2) & 0xFFFFFF00)) & _WORD_MASK
        data_offset = self.data_offset & _WORD_MASK
        data_size = self.data_size & _WORD_MASK

        if width == 4:
            word0 = head | ((self.array_size & 0xFFFF) << 16)
            return [word0 & _WORD_MASK, word1, data_offset, data_size]

        return [head & _WORD_MASK, word1, data_offset, data_size, self.array_size & _WORD_MASK, 0, 0, 0]

    @classmethod
    def unpack(cls, words: Sequence[int]) -> FieldInfo:
        """Decode one descriptor from the start of words; extra words are ignored."""
        if not words:
            raise ValueError("no descriptor words given")
        word0 = words[0] & _WORD_MASK
        count = word_count(word0 & 0x03)
        if len(words) < count:
            raise ValueError(f"descriptor needs {count} words, only {len(words)} given")

        tag = (word0 >> 2) & 0x3F
        field_type = FieldType.from_byte((word0 >> 8) & 0xFF)

        if count == 1:
            return cls(
                tag=tag,
                type=field_type,
                data_offset=(word0 >> 16) & 0xFF,
                data_size=(word0 >> 28) & 0x0F,
                size_offset=(word0 >> 24) & 0x0F,
                array_size=1,
            )

        word1 = words[1] & _WORD_MASK

        if count == 2:
            return cls(
                tag=tag | ((word1 >> 22) & 0x3C0),
                type=field_type,
                data_offset=word1 & 0xFFFF,
                data_size=(word1 >> 16) & 0xFFF,
                size_offset=(word0 >> 28) & 0x0F,
                array_size=(word0 >> 16) & 0xFFF,
            )

        tag |= (word1 >> 2) & 0x3FFFFFC0
        array_size = (word0 >> 16) & 0xFFFF if count == 4 else words[4] & _WORD_MASK
        return cls(
            tag=tag,
            type=field_type,
            data_offset=words[2] & _WORD_MASK,
            data_size=words[3] & _WORD_MASK,
            size_offset=_int8(word1),
            array_size=array_size,
        )

    def check_fits(self, width: int, field_32bit: bool = False) -> None:
        """Raise FieldInfoOverflow if the field cannot be stored in width words."""
        _check_width(width)
        if width == 1:
            limits = [
                ("tag", self.tag, 6),
                ("data_offset", self.data_offset, 8),
                ("size_offset", self.size_offset, 4),
                ("data_size", self.data_size, 4),
                ("array_size", self.array_size, 1),
            ]
        elif width == 2:
            limits = [
                ("tag", self.tag, 10),
                ("data_offset", self.data_offset, 16),
                ("size_offset", self.size_offset, 4),
                ("data_size", self.data_size, 12),
                ("array_size", self.array_size, 12),
            ]
        elif not field_32bit:
            limits = [
                ("tag", self.tag, 16),
                ("data_offset", self.data_offset, 16),
                ("size_offset", _int8(self.size_offset), 8),
                ("data_size", self.data_size, 16),
                ("array_size", self.array_size, 16),
            ]
        else:
            limits = [
                ("tag", self.tag, 30),
                ("data_offset", self.data_offset, 31),
                ("size_offset", self.size_offset, 8),
                ("data_size", self.data_size, 31),
                ("array_size", self.array_size, 16 if width == 4 else 31),
            ]

        for name, value, bits in limits:
            if not fits(value, bits):
                raise FieldInfoOverflow(
                    f"field {self.tag}: {name}={value} does not fit in width {width} descriptor"
                )


def _auto_width_for(info: FieldInfo) -> int:
    proto_type = _representative_proto_type(info.type.ltype)
    return auto_width(info.type.atype, info.type.htype, proto_type)


@dataclass(frozen=True)
class MessageDescriptor:
    """The fields of one message, with the descriptor width chosen for each."""

    fields: tuple[FieldInfo, ...]
    widths: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.fields) != len(self.widths):
            raise ValueError("fields and widths differ in length")
        for width in self.widths:
            _check_width(width)

    @classmethod
    def bind(cls, fields: Iterable[FieldInfo], width: int | str = AUTO) -> MessageDescriptor:
        """Build a descriptor, checking that every field fits its width.

        width is 1, 2, 4 or 8 for all fields, or "auto" to pick per field.
        """
        fields = tuple(fields)
        if width == AUTO:
            widths = tuple(_auto_width_for(f) for f in fields)
        else:
            _check_width(width)  # type: ignore[arg-type]
            widths = tuple(width for _ in fields)  # type: ignore[misc]
        for info, w in zip(fields, widths):
            info.check_fits(w)
        return cls(fields, widths)

    @property
    def field_count(self) -> int:
        """Number of fields in the message."""
        return len(self.fields)

    @property
    def required_field_count(self) -> int:
        """Number of required fields."""
        return sum(1 for f in self.fields if f.type.htype == HType.REQUIRED)

    @property
    def largest_tag(self) -> int:
        """Tag of the last field, which is listed last in ascending tag order."""
        return self.fields[-1].tag if self.fields else 0

    def field_info_words(self) -> list[int]:
        """All descriptor words, in field order, followed by a terminating zero."""
        words: list[int] = []
        for info, width in zip(self.fields, self.widths):
            words.extend(info.pack(width))
        words.append(0)
        return words

    def iter_fields(self) -> Iterator[FieldInfo]:
        """Decode the fields back from the packed descriptor words."""
        words = self.field_info_words()
        position = 0
        for _ in range(self.field_count):
            info = FieldInfo.unpack(words[position:])
            yield info
            position += word_count(words[position] & 0x03)