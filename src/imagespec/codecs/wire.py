"""Low-level wire primitives: base-128 varints and field keys.

A message is a flat run of fields. Each field starts with a varint key
``(field_number << 3) | wire_type`` followed by either a varint value
(VARINT) or a varint length and that many payload bytes (LEN).
"""

from collections.abc import Iterator
from enum import IntEnum
from typing import NamedTuple

from schemas.operation import UINT32_MAX

from ..exceptions import MalformedFieldError, TruncatedError

MAX_VARINT_BYTES = 10


class WireType(IntEnum):
    VARINT = 0
    LEN = 2


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a base-128 varint.

    Examples:
        >>> encode_varint(1)
        b'\\x01'
        >>> encode_varint(300)
        b'\\xac\\x02'
    """
    if value < 0:
        raise ValueError(f"varint must be non-negative, got {value}")
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_key(field_number: int, wire_type: WireType) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


def encode_len_field(field_number: int, payload: bytes) -> bytes:
    return encode_key(field_number, WireType.LEN) + encode_varint(len(payload)) + payload


def encode_varint_field(field_number: int, value: int) -> bytes:
    """Encode a VARINT field, or nothing when *value* is zero."""
    if value == 0:
        return b""
    return encode_key(field_number, WireType.VARINT) + encode_varint(value)


def decode_varint(data: bytes, pos: int, base: int = 0) -> tuple[int, int]:
    """Decode a varint starting at *pos*.

    *base* is the offset of *data* within the outermost input and only
    affects the positions reported in errors.

    Returns:
        The decoded value and the position just past it

    Raises:
        TruncatedError: If the input ends before the final varint byte
        MalformedFieldError: If the varint is longer than 10 bytes
    """
    result = 0
    shift = 0
    start = base + pos
    first = pos
    while True:
        if pos >= len(data):
            raise TruncatedError(f"Input ends inside varint at byte {start}", offset=start)
        if pos - first >= MAX_VARINT_BYTES:
            raise MalformedFieldError(f"Varint at byte {start} is too long", offset=start)
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7


class Field(NamedTuple):
    """One decoded field.

    Attributes:
        number: Field number from the key
        wire_type: VARINT or LEN
        value: The integer for VARINT fields, the payload bytes for LEN fields
        offset: Position of the field key in the outermost input
        payload_offset: Position of the first payload byte in the outermost input
    """

    number: int
    wire_type: WireType
    value: int | bytes
    offset: int
    payload_offset: int


def iter_fields(data: bytes, base: int = 0) -> Iterator[Field]:
    """Walk the fields of one message.

    Args:
        data: The message bytes
        base: Offset of *data* within the outermost input, for error positions

    Raises:
        TruncatedError: If a field runs past the end of *data*
        MalformedFieldError: On field number 0 or an unsupported wire type
    """
    pos = 0
    while pos < len(data):
        offset = base + pos
        key, pos = decode_varint(data, pos, base)
        number, raw_type = key >> 3, key & 0x07
        if number == 0:
            raise MalformedFieldError(f"Field number 0 at byte {offset}", offset=offset)
        try:
            wire_type = WireType(raw_type)
        except ValueError:
            raise MalformedFieldError(
                f"Unsupported wire type {raw_type} for field {number} at byte {offset}",
                offset=offset,
            ) from None

        if wire_type is WireType.VARINT:
            value_offset = base + pos
            value, pos = decode_varint(data, pos, base)
            yield Field(number, wire_type, value, offset, value_offset)
            continue

        length, pos = decode_varint(data, pos, base)
        end = pos + length
        if end > len(data):
            raise TruncatedError(
                f"Field {number} at byte {offset} declares {length} bytes, "
                f"only {len(data) - pos} remain",
                offset=offset,
            )
        yield Field(number, wire_type, data[pos:end], offset, base + pos)
        pos = end


def expect_varint(field: Field) -> int:
    if field.wire_type is not WireType.VARINT:
        raise MalformedFieldError(
            f"Field {field.number} at byte {field.offset} must be a varint",
            offset=field.offset,
        )
    return field.value


def expect_uint32(field: Field) -> int:
    value = expect_varint(field)
    if value > UINT32_MAX:
        raise MalformedFieldError(
            f"Field {field.number} at byte {field.offset} overflows uint32: {value}",
            offset=field.offset,
        )
    return value


def expect_len(field: Field) -> bytes:
    if field.wire_type is not WireType.LEN:
        raise MalformedFieldError(
            f"Field {field.number} at byte {field.offset} must be length-delimited",
            offset=field.offset,
        )
    return field.value
