"""Exceptions raised while encoding or decoding pipeline tokens."""


class ImageSpecError(Exception):
    """Base exception for all imagespec errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class InvalidEncodingError(ImageSpecError):
    """Raised when a token is not valid unpadded URL-safe base64."""

    pass


class DecodeError(ImageSpecError):
    """Base exception for binary pipeline decoding failures.

    Attributes:
        offset: Byte position in the input where decoding failed, if known
    """

    def __init__(self, message: str, offset: int | None = None, *args, **kwargs):
        self.offset = offset
        super().__init__(message, *args, **kwargs)


class TruncatedError(DecodeError):
    """Raised when the input ends in the middle of a field or message."""

    pass


class MalformedFieldError(DecodeError):
    """Raised when a field's tag, wire type or length does not fit the schema."""

    pass


class UnknownVariantError(DecodeError):
    """Raised when an operation carries a variant tag that is not declared."""

    def __init__(self, message: str, tag: int, offset: int | None = None):
        self.tag = tag
        super().__init__(message, offset=offset)
