"""URL-safe token encoding for image transformation pipelines."""

from .codecs import (
    decode,
    decode_text,
    decode_token,
    encode,
    encode_text,
    encode_token,
)
from .exceptions import (
    DecodeError,
    ImageSpecError,
    InvalidEncodingError,
    MalformedFieldError,
    TruncatedError,
    UnknownVariantError,
)
from .rendering import NativeFilter, filter_name, to_native_filter

__all__ = [
    "decode",
    "decode_text",
    "decode_token",
    "encode",
    "encode_text",
    "encode_token",
    "DecodeError",
    "ImageSpecError",
    "InvalidEncodingError",
    "MalformedFieldError",
    "TruncatedError",
    "UnknownVariantError",
    "NativeFilter",
    "filter_name",
    "to_native_filter",
]
