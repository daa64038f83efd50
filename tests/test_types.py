import itertools

import pytest

from pbfields.types import (
    AType,
    FieldType,
    HType,
    LType,
    ProtoType,
    WireType,
    auto_width,
    fits,
    ltype_for,
)


@pytest.mark.parametrize(
    "atype, htype, ltype",
    list(itertools.product(AType, HType, LType)),
)
def test_type_byte_round_trip(atype, htype, ltype):
    ft = FieldType(atype, htype, ltype)
    assert FieldType.from_byte(ft.to_byte()) == ft


def test_type_byte_layout():
    ft = FieldType(AType.POINTER, HType.REPEATED, LType.STRING)
    assert ft.to_byte() == 0x80 | 0x20 | 0x07


def test_from_byte_rejects_unknown_ltype():
    with pytest.raises(ValueError):
        FieldType.from_byte(0x0C)


def test_from_byte_rejects_unknown_atype():
    with pytest.raises(ValueError):
        FieldType.from_byte(0xC0)


def test_from_byte_rejects_out_of_range():
    with pytest.raises(ValueError):
        FieldType.from_byte(0x100)


def test_htype_aliases():
    singular = FieldType(AType.STATIC, HType.SINGULAR, LType(0x00))
    optional = FieldType(AType.STATIC, HType.OPTIONAL, LType(0x00))
    assert singular.to_byte() == optional.to_byte() == 0x10
    assert FieldType.from_byte(0x10) == singular

    fixarray = FieldType(AType.STATIC, HType.FIXARRAY, LType(0x00))
    assert fixarray.to_byte() == 0x20
    assert FieldType.from_byte(0x20) == fixarray


def test_wire_type_values():
    assert WireType(5) is WireType.BIT32
    assert WireType(255) is WireType.PACKED


@pytest.mark.parametrize("ltype", list(LType))
def test_is_submessage(ltype):
    ft = FieldType(AType.STATIC, HType.REQUIRED, ltype)
    assert ft.is_submessage() == (ltype in (LType.SUBMESSAGE, LType.SUBMSG_W_CB))


def test_packable_types():
    assert ltype_for(ProtoType.DOUBLE).packable
    assert not ltype_for(ProtoType.BYTES).packable
    assert not ltype_for(ProtoType.MESSAGE).packable


@pytest.mark.parametrize(
    "proto, expected",
    [
        (ProtoType.DOUBLE, LType.FIXED64),
        (ProtoType.FLOAT, LType.FIXED32),
        (ProtoType.ENUM, LType.VARINT),
        (ProtoType.UENUM, LType.UVARINT),
        (ProtoType.SINT64, LType.SVARINT),
        (ProtoType.SFIXED32, LType.FIXED32),
        (ProtoType.MESSAGE, LType.SUBMESSAGE),
        (ProtoType.MSG_W_CB, LType.SUBMSG_W_CB),
        (ProtoType.FIXED_LENGTH_BYTES, LType.FIXED_LENGTH_BYTES),
    ],
)
def test_ltype_for(proto, expected):
    assert ltype_for(proto) is expected


def test_ltype_for_covers_all():
    assert {ltype_for(p) for p in ProtoType} == set(LType)


def test_auto_width_scalar_is_one():
    assert auto_width(AType.STATIC, HType.OPTIONAL, ProtoType.INT32) == 1


def test_auto_width_string_is_two():
    assert auto_width(AType.STATIC, HType.REQUIRED, ProtoType.STRING) == 2


def test_auto_width_repeated_is_two():
    assert auto_width(AType.POINTER, HType.REPEATED, ProtoType.BOOL) == 2


def test_auto_width_callback_is_two():
    assert auto_width(AType.CALLBACK, HType.OPTIONAL, ProtoType.UINT32) == 2


@pytest.mark.parametrize("proto", list(ProtoType))
def test_auto_width_is_one_or_two(proto):
    assert auto_width(AType.STATIC, HType.ONEOF, proto) in (1, 2)


def test_fits_negative_wraps():
    assert not fits(-1, 31)
    assert fits(-1, 32)


def test_fits_rejects_bad_bits():
    with pytest.raises(ValueError):
        fits(1, 33)