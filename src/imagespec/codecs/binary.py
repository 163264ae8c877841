"""Binary codec for pipelines.

Wire layout (field numbers in parentheses):

    Pipeline   operations (1, LEN, repeated)
    Operation  one of: resize (1, LEN) | filter (2, LEN) | watermark (3, LEN)
    Resize     width (1), height (2), resize_type (3), sample_filter (4)
    Filter     filter (1)
    Watermark  x (1), y (2)

All scalar fields are varints. Fields are written in ascending field-number
order and zero-valued scalars are omitted, so a pipeline has exactly one
encoding.

An unknown variant tag in an Operation is an error. An unknown integer in an
enum field is not: it resolves to the enum's zero-valued default.
"""

import logging
from collections.abc import Callable
from typing import assert_never

from schemas.operation import (
    Filter,
    FilterKind,
    Operation,
    Resize,
    ResizeType,
    SampleFilter,
    Watermark,
)
from schemas.pipeline import Pipeline

from ..exceptions import MalformedFieldError, UnknownVariantError
from .wire import (
    Field,
    encode_len_field,
    encode_varint_field,
    expect_len,
    expect_uint32,
    expect_varint,
    iter_fields,
)

logger = logging.getLogger(__name__)

PIPELINE_OPERATIONS = 1

RESIZE = 1
FILTER = 2
WATERMARK = 3

RESIZE_WIDTH = 1
RESIZE_HEIGHT = 2
RESIZE_TYPE = 3
RESIZE_SAMPLE_FILTER = 4

FILTER_KIND = 1

WATERMARK_X = 1
WATERMARK_Y = 2


def encode(pipeline: Pipeline) -> bytes:
    """Serialize *pipeline* to bytes.

    Identical pipelines always produce identical bytes.
    """
    data = b"".join(
        encode_len_field(PIPELINE_OPERATIONS, _encode_operation(operation))
        for operation in pipeline.operations
    )
    logger.debug(f"Encoded {len(pipeline)} operations into {len(data)} bytes")
    return data


def _encode_operation(operation: Operation) -> bytes:
    match operation:
        case Resize():
            payload = b"".join([
                encode_varint_field(RESIZE_WIDTH, operation.width),
                encode_varint_field(RESIZE_HEIGHT, operation.height),
                encode_varint_field(RESIZE_TYPE, operation.resize_type),
                encode_varint_field(RESIZE_SAMPLE_FILTER, operation.sample_filter),
            ])
            return encode_len_field(RESIZE, payload)
        case Filter():
            payload = encode_varint_field(FILTER_KIND, operation.filter)
            return encode_len_field(FILTER, payload)
        case Watermark():
            payload = b"".join([
                encode_varint_field(WATERMARK_X, operation.x),
                encode_varint_field(WATERMARK_Y, operation.y),
            ])
            return encode_len_field(WATERMARK, payload)
        case _:
            assert_never(operation)


def decode(data: bytes) -> Pipeline:
    """Deserialize a pipeline from bytes.

    Raises:
        TruncatedError: If the input ends inside a field
        MalformedFieldError: If a field does not fit the schema
        UnknownVariantError: If an operation has an undeclared variant tag
    """
    operations = []
    for field in iter_fields(data):
        if field.number != PIPELINE_OPERATIONS:
            raise MalformedFieldError(
                f"Unexpected pipeline field {field.number} at byte {field.offset}",
                offset=field.offset,
            )
        operations.append(_decode_operation(field))

    logger.debug(f"Decoded {len(operations)} operations from {len(data)} bytes")
    return Pipeline.new(operations)


def _decode_operation(outer: Field) -> Operation:
    payload = expect_len(outer)
    operation: Operation | None = None

    for field in iter_fields(payload, base=outer.payload_offset):
        decoder = _VARIANT_DECODERS.get(field.number)
        if decoder is None:
            raise UnknownVariantError(
                f"Unknown operation variant {field.number} at byte {field.offset}",
                tag=field.number,
                offset=field.offset,
            )
        if operation is not None:
            raise MalformedFieldError(
                f"Operation at byte {outer.offset} holds more than one variant",
                offset=field.offset,
            )
        operation = decoder(field)

    if operation is None:
        raise MalformedFieldError(
            f"Operation at byte {outer.offset} holds no variant", offset=outer.offset
        )
    return operation


def _scalar_fields(outer: Field, name: str, known: set[int]) -> dict[int, Field]:
    """Collect the scalar fields of a variant message, rejecting unknown ones.

    A repeated field keeps its last occurrence.
    """
    fields = {}
    for field in iter_fields(expect_len(outer), base=outer.payload_offset):
        if field.number not in known:
            raise MalformedFieldError(
                f"Unknown {name} field {field.number} at byte {field.offset}",
                offset=field.offset,
            )
        fields[field.number] = field
    return fields


def _uint32(fields: dict[int, Field], number: int) -> int:
    field = fields.get(number)
    return 0 if field is None else expect_uint32(field)


def _enum(fields: dict[int, Field], number: int, enum_type):
    field = fields.get(number)
    if field is None:
        return enum_type(0)
    raw = expect_varint(field)
    member = enum_type.resolve(raw)
    if member.value != raw:
        logger.debug(
            f"Unknown {enum_type.__name__} value {raw} at byte {field.offset}, "
            f"using {member.name}"
        )
    return member


def _decode_resize(outer: Field) -> Resize:
    fields = _scalar_fields(
        outer,
        "resize",
        {RESIZE_WIDTH, RESIZE_HEIGHT, RESIZE_TYPE, RESIZE_SAMPLE_FILTER},
    )
    return Resize(
        width=_uint32(fields, RESIZE_WIDTH),
        height=_uint32(fields, RESIZE_HEIGHT),
        resize_type=_enum(fields, RESIZE_TYPE, ResizeType),
        sample_filter=_enum(fields, RESIZE_SAMPLE_FILTER, SampleFilter),
    )


def _decode_filter(outer: Field) -> Filter:
    fields = _scalar_fields(outer, "filter", {FILTER_KIND})
    return Filter(filter=_enum(fields, FILTER_KIND, FilterKind))


def _decode_watermark(outer: Field) -> Watermark:
    fields = _scalar_fields(outer, "watermark", {WATERMARK_X, WATERMARK_Y})
    return Watermark(
        x=_uint32(fields, WATERMARK_X),
        y=_uint32(fields, WATERMARK_Y),
    )


_VARIANT_DECODERS: dict[int, Callable[[Field], Operation]] = {
    RESIZE: _decode_resize,
    FILTER: _decode_filter,
    WATERMARK: _decode_watermark,
}
