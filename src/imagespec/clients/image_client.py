"""Client for an image service that renders tokenized pipelines."""

import logging
from time import sleep
from urllib.parse import quote

import httpx

from schemas.pipeline import Pipeline

from ..codecs import encode_token
from .exceptions import (
    ImageNotFoundError,
    RateLimitError,
    RenderRequestError,
    ServiceConnectionError,
    TokenRejectedError,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[RenderRequestError]] = {
    400: TokenRejectedError,
    404: ImageNotFoundError,
    422: TokenRejectedError,
    429: RateLimitError,
}


class ImageClient:
    """Client for image services addressed as ``{base_url}/{token}/{image_url}``.

    The token is the pipeline encoded with ``encode_token``; the image URL is
    percent-encoded into a single trailing path segment. Connect errors and
    timeouts are retried; error statuses are not.

    Config keys:
        base_url (required): Image service root, e.g. "http://localhost:3000/image"
        timeout: Request timeout in seconds (default: 30)
        retry_attempts: Number of attempts for transient failures (default: 3)
        retry_delay: Delay between retries in seconds (default: 1)
        headers: Additional headers to include in requests

    Example:
        pipeline = Pipeline.new([Resize.normal(600, 600, SampleFilter.CATMULL_ROM)])
        with ImageClient({"base_url": "http://localhost:3000/image"}) as client:
            data = client.fetch_image(pipeline, "https://example.com/cat.jpg")
    """

    def __init__(self, config: dict):
        if "base_url" not in config:
            raise ValueError("config must include 'base_url'")

        self._config = config
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return str(self._config["base_url"])

    @property
    def timeout(self) -> float:
        return float(self._config.get("timeout", 30))

    @property
    def retry_attempts(self) -> int:
        return int(self._config.get("retry_attempts", 3))

    @property
    def retry_delay(self) -> float:
        return float(self._config.get("retry_delay", 1))

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._config.get("headers", {}))

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
        return self._client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def build_path(self, pipeline: Pipeline, image_url: str) -> str:
        return _render_path(encode_token(pipeline), image_url)

    def build_url(self, pipeline: Pipeline, image_url: str) -> str:
        return self.base_url.rstrip("/") + self.build_path(pipeline, image_url)

    def fetch(self, pipeline: Pipeline, image_url: str) -> httpx.Response:
        """Request *image_url* rendered through *pipeline*.

        Raises:
            TokenRejectedError: If the service rejects the pipeline token
            ImageNotFoundError: If the service returns 404
            RateLimitError: If the service returns 429
            RenderRequestError: For other non-2xx responses
            ServiceConnectionError: If the service cannot be reached
        """
        token = encode_token(pipeline)
        path = _render_path(token, image_url)
        logger.debug(f"GET {path} ({len(pipeline)} operations)")
        return self._check_response(self._get_with_retries(path), token)

    def fetch_image(self, pipeline: Pipeline, image_url: str) -> bytes:
        response = self.fetch(pipeline, image_url)
        logger.info(
            f"Fetched {len(response.content)} bytes "
            f"({response.headers.get('content-type', 'unknown type')})"
        )
        return response.content

    def _get_with_retries(self, path: str) -> httpx.Response:
        last_exception: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                return self.client.get(path)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                logger.warning(
                    f"{type(e).__name__} (attempt {attempt + 1}/{self.retry_attempts}): {e}"
                )
            if attempt < self.retry_attempts - 1:
                sleep(self.retry_delay)

        raise ServiceConnectionError(
            f"Image service unreachable after {self.retry_attempts} attempts"
        ) from last_exception

    def _check_response(self, response: httpx.Response, token: str) -> httpx.Response:
        if response.is_success:
            return response

        status_code = response.status_code
        error_type = _STATUS_ERRORS.get(status_code, RenderRequestError)
        raise error_type(
            f"Image service returned {status_code} for token {token}",
            status_code=status_code,
            token=token,
        )


def _render_path(token: str, image_url: str) -> str:
    return f"/{token}/{quote(image_url, safe='')}"
