"""Tests for the image service client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from imagespec.clients import (
    ClientError,
    ImageClient,
    ImageNotFoundError,
    RateLimitError,
    RenderRequestError,
    ServiceConnectionError,
    TokenRejectedError,
)
from imagespec.codecs import decode_token
from imagespec.exceptions import ImageSpecError
from schemas import Filter, FilterKind, Pipeline

BASE_URL = "http://images.test/image"
IMAGE_URL = "https://example.com/cat.jpg"
MARINE_TOKEN = "CgQSAggD"


@pytest.fixture
def marine_pipeline():
    return Pipeline.new([Filter.of(FilterKind.MARINE)])


def _mock_transport_client(client: ImageClient, handler) -> None:
    client._client = httpx.Client(
        base_url=client.base_url,
        transport=httpx.MockTransport(handler),
    )


class TestImageClientConfiguration:
    """Tests for ImageClient configuration."""

    def test_requires_base_url(self):
        with pytest.raises(ValueError, match="base_url"):
            ImageClient({})

    def test_defaults(self):
        client = ImageClient({"base_url": BASE_URL})

        assert client.timeout == 30
        assert client.retry_attempts == 3
        assert client.retry_delay == 1
        assert client.headers == {}

    def test_overrides(self):
        client = ImageClient({
            "base_url": BASE_URL,
            "timeout": 5,
            "retry_attempts": 1,
            "retry_delay": 0.25,
            "headers": {"User-Agent": "tests"},
        })

        assert client.timeout == 5
        assert client.retry_attempts == 1
        assert client.retry_delay == 0.25
        assert client.headers == {"User-Agent": "tests"}

    def test_lazy_initialization(self):
        client = ImageClient({"base_url": BASE_URL})

        assert client._client is None

    def test_context_manager_closes_client(self):
        with ImageClient({"base_url": BASE_URL}) as client:
            _ = client.client
            assert isinstance(client._client, httpx.Client)

        assert client._client is None


class TestImageClientURLs:
    """Tests for building image service URLs."""

    def test_build_path(self, marine_pipeline):
        client = ImageClient({"base_url": BASE_URL})

        path = client.build_path(marine_pipeline, IMAGE_URL)

        assert path == f"/{MARINE_TOKEN}/https%3A%2F%2Fexample.com%2Fcat.jpg"

    def test_build_url(self, marine_pipeline):
        client = ImageClient({"base_url": BASE_URL + "/"})

        url = client.build_url(marine_pipeline, IMAGE_URL)

        assert url == f"{BASE_URL}/{MARINE_TOKEN}/https%3A%2F%2Fexample.com%2Fcat.jpg"

    def test_token_segment_decodes_to_pipeline(self, resize_and_filter_pipeline):
        client = ImageClient({"base_url": BASE_URL})

        token = client.build_path(resize_and_filter_pipeline, IMAGE_URL).split("/")[1]

        assert decode_token(token) == resize_and_filter_pipeline


class TestImageClientFetch:
    """Tests for fetching rendered images."""

    def test_fetch_image_returns_body(self, marine_pipeline):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=b"\xff\xd8jpeg", headers={"content-type": "image/jpeg"})

        client = ImageClient({"base_url": BASE_URL})
        _mock_transport_client(client, handler)

        data = client.fetch_image(marine_pipeline, IMAGE_URL)

        assert data == b"\xff\xd8jpeg"
        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert f"/image/{MARINE_TOKEN}/" in requests[0].url.path

    @pytest.mark.parametrize(
        "status,error",
        [
            (400, TokenRejectedError),
            (422, TokenRejectedError),
            (404, ImageNotFoundError),
            (429, RateLimitError),
            (500, RenderRequestError),
        ],
    )
    def test_error_statuses_carry_token(self, marine_pipeline, status, error):
        """A rejected request reports its status and the token it sent."""
        client = ImageClient({"base_url": BASE_URL})
        _mock_transport_client(client, lambda request: httpx.Response(status))

        with pytest.raises(error) as exc_info:
            client.fetch(marine_pipeline, IMAGE_URL)

        assert exc_info.value.status_code == status
        assert exc_info.value.token == MARINE_TOKEN
        assert MARINE_TOKEN in exc_info.value.message

    def test_server_error_is_not_a_token_rejection(self, marine_pipeline):
        client = ImageClient({"base_url": BASE_URL})
        _mock_transport_client(client, lambda request: httpx.Response(503))

        with pytest.raises(RenderRequestError) as exc_info:
            client.fetch(marine_pipeline, IMAGE_URL)

        assert not isinstance(exc_info.value, TokenRejectedError)

    @patch("imagespec.clients.image_client.sleep")
    def test_retries_connection_errors(self, mock_sleep, marine_pipeline):
        client = ImageClient({"base_url": BASE_URL, "retry_attempts": 3, "retry_delay": 0.1})
        mock_http_client = MagicMock()
        mock_http_client.get.side_effect = httpx.ConnectError("Connection refused")
        client._client = mock_http_client

        with pytest.raises(ServiceConnectionError, match="after 3 attempts"):
            client.fetch(marine_pipeline, IMAGE_URL)

        assert mock_http_client.get.call_count == 3
        assert mock_sleep.call_count == 2

    @patch("imagespec.clients.image_client.sleep")
    def test_succeeds_after_timeout(self, mock_sleep, marine_pipeline):
        success = MagicMock()
        success.is_success = True
        mock_http_client = MagicMock()
        mock_http_client.get.side_effect = [httpx.TimeoutException("slow"), success]

        client = ImageClient({"base_url": BASE_URL})
        client._client = mock_http_client

        assert client.fetch(marine_pipeline, IMAGE_URL) is success
        assert mock_sleep.call_count == 1

    def test_no_retry_on_error_status(self, marine_pipeline):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        client = ImageClient({"base_url": BASE_URL})
        _mock_transport_client(client, handler)

        with pytest.raises(RenderRequestError):
            client.fetch(marine_pipeline, IMAGE_URL)

        assert len(calls) == 1


class TestClientExceptions:
    """Tests for client exception classes."""

    def test_render_request_error_attributes(self):
        error = ImageNotFoundError("missing", status_code=404, token="AA")

        assert error.message == "missing"
        assert error.status_code == 404
        assert error.token == "AA"
        assert isinstance(error, RenderRequestError)

    @pytest.mark.parametrize(
        "error",
        [
            ServiceConnectionError("unreachable"),
            TokenRejectedError("bad", status_code=400, token="AA"),
            RateLimitError("slow down", status_code=429, token="AA"),
        ],
    )
    def test_client_errors_are_imagespec_errors(self, error):
        """One except clause covers codec and client failures."""
        assert isinstance(error, ClientError)
        assert isinstance(error, ImageSpecError)
