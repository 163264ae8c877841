"""Textual codec: unpadded URL-safe base64.

Tokens use only ``A-Z a-z 0-9 - _`` and carry no ``=`` padding, so they can
sit in a URL path segment without percent-encoding.
"""

import base64
import binascii
import re

from ..exceptions import InvalidEncodingError

_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]*")


def encode_text(data: bytes) -> str:
    """Encode bytes as an unpadded URL-safe base64 token.

    Examples:
        >>> encode_text(b"\\xfb\\xff")
        '-_8'
    """
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_text(token: str) -> bytes:
    """Decode an unpadded URL-safe base64 token.

    Only the canonical token for a byte string is accepted: a token whose
    final character carries non-zero unused bits is rejected.

    Raises:
        InvalidEncodingError: On characters outside the URL-safe alphabet,
            padding, an impossible length, or a non-canonical final character
    """
    if not _TOKEN_RE.fullmatch(token):
        raise InvalidEncodingError(f"Token contains characters outside the URL-safe alphabet: {token!r}")
    if len(token) % 4 == 1:
        raise InvalidEncodingError(f"Token has invalid length {len(token)}")

    padded = token + "=" * (-len(token) % 4)
    try:
        data = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Token is not valid base64: {e}") from e

    if encode_text(data) != token:
        raise InvalidEncodingError(f"Token is not canonically encoded: {token!r}")
    return data
