"""Exceptions raised while requesting rendered images."""

from ..exceptions import ImageSpecError


class ClientError(ImageSpecError):
    """Base exception for image service failures."""

    pass


class ServiceConnectionError(ClientError):
    """Raised when the image service cannot be reached after all retries."""

    pass


class RenderRequestError(ClientError):
    """Raised when the image service answers a render request with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response
        token: Pipeline token of the rejected request
    """

    def __init__(self, message: str, status_code: int, token: str):
        self.status_code = status_code
        self.token = token
        super().__init__(message)


class TokenRejectedError(RenderRequestError):
    """Raised on 400 or 422: the service could not decode or apply the pipeline."""

    pass


class ImageNotFoundError(RenderRequestError):
    """Raised on 404: the source image does not exist."""

    pass


class RateLimitError(RenderRequestError):
    """Raised on 429."""

    pass
