"""HTTP client for image services."""

from .exceptions import (
    ClientError,
    ImageNotFoundError,
    RateLimitError,
    RenderRequestError,
    ServiceConnectionError,
    TokenRejectedError,
)
from .image_client import ImageClient

__all__ = [
    "ImageClient",
    "ClientError",
    "ServiceConnectionError",
    "RenderRequestError",
    "TokenRejectedError",
    "ImageNotFoundError",
    "RateLimitError",
]
