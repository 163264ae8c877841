"""Codecs between pipelines, bytes and URL tokens."""

from schemas.pipeline import Pipeline

from .binary import decode, encode
from .text import decode_text, encode_text


def encode_token(pipeline: Pipeline) -> str:
    """Encode *pipeline* as a URL-safe token."""
    return encode_text(encode(pipeline))


def decode_token(token: str) -> Pipeline:
    """Decode a URL-safe token back into a pipeline.

    Raises:
        InvalidEncodingError: If the token is not valid URL-safe base64
        DecodeError: If the decoded bytes are not a valid pipeline
    """
    return decode(decode_text(token))


__all__ = [
    "decode",
    "decode_text",
    "decode_token",
    "encode",
    "encode_text",
    "encode_token",
]
