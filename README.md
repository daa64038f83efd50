# pbfields

`pbfields` describes the fields of protocol buffer messages the way a compact,
table-driven protobuf runtime does. Each field's type is packed into a single
byte, and each field's layout is packed into a variable-width descriptor of
1, 2, 4 or 8 unsigned 32-bit words.

## What it provides

### `pbfields.types`

- `LType`, `HType` and `AType` are the three parts of a field type byte: the
  scalar kind (low four bits), the repetition rule and the allocation style.
  `LType.packable` is true for the numeric kinds that may be sent as packed
  arrays.
- `WireType` lists the protobuf wire types (`VARINT`, `BIT64`, `STRING`,
  `BIT32`) and the internal `PACKED` marker.
- `ProtoType` lists the field types as written in a message definition.
- `FieldType(atype, htype, ltype)` combines the three parts.
  `FieldType.from_byte()` splits a type byte and raises `ValueError` for a byte
  out of range or with an unknown allocation or data kind; `to_byte()` builds
  the byte; `is_submessage()` tells whether the field holds a nested message,
  with or without a callback.
- `ltype_for(proto_type)` maps a `ProtoType` to its `LType`.
- `auto_width(atype, htype, proto_type)` gives the descriptor width chosen
  automatically: 2 words for callback and repeated fields and for bytes,
  string and message types, otherwise 1.
- `fits(value, bits)` tells whether a value, taken as an unsigned 32-bit
  number, fits in the given number of bits.

### `pbfields.fieldinfo`

- `FieldInfo(tag, type, data_offset, data_size, size_offset=0, array_size=1)`
  holds the layout of one field. `pack(width)` turns it into a list of 1, 2, 4
  or 8 words, and `FieldInfo.unpack(words)` reads one descriptor back from the
  start of a word sequence.
- `check_fits(width, field_32bit=False)` raises `FieldInfoOverflow` (a
  `ValueError`) when a value does not fit in the chosen width. With
  `field_32bit` the 4- and 8-word formats accept tags and sizes up to 30 and 31
  bits.
- `word_count(width)` gives the number of words for a size code 0 to 3.
- `MessageDescriptor.bind(fields, width)` builds a message descriptor, checking
  every field against its width. `width` is 1, 2, 4 or 8 for all fields, or
  `"auto"` (the default, also available as `pbfields.fieldinfo.AUTO`) to pick
  each field's width with `auto_width`. The descriptor has `field_count`,
  `required_field_count` and `largest_tag` (the tag of the last field);
  `field_info_words()` gives the packed table followed by a terminating zero
  and `iter_fields()` decodes the fields from that table again.

## Installation

```
pip install pbfields
```

## Example

```python
from pbfields.types import AType, HType, FieldType, LType
from pbfields.fieldinfo import FieldInfo, MessageDescriptor

ftype = FieldType(atype=AType.STATIC, htype=HType.REQUIRED, ltype=LType.VARINT)
info = FieldInfo(tag=1, type=ftype, data_offset=0, data_size=4)

words = info.pack(1)
assert FieldInfo.unpack(words) == info

descriptor = MessageDescriptor.bind([info])
assert list(descriptor.iter_fields()) == [info]
assert descriptor.required_field_count == 1
```

A descriptor that is too narrow for its field is rejected:

```python
from pbfields.fieldinfo import FieldInfoOverflow

big = FieldInfo(tag=100, type=ftype, data_offset=0, data_size=4)
try:
    big.check_fits(1)
except FieldInfoOverflow as exc:
    print(exc)
```

## What it does not do

`pbfields` only describes fields and packs their descriptors. It does not
encode or decode protobuf messages, read or write streams, or generate field
tables from message definitions.

## Running the tests

```
pip install pbfields[test]
pytest
```