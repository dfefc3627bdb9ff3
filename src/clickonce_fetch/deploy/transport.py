"""HTTP transport used to fetch manifests and deployed files."""
import logging
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel, Field

from clickonce_fetch.core.errors import TransportError
from clickonce_fetch.deploy.config import SessionConfig

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404


class FetchResult(BaseModel):
    """Outcome of a single GET request."""

    status_code: int = Field(..., description="HTTP status code")
    content: bytes = Field(default=b"", description="Full response body")
    url: str = Field(..., description="Final URL, after redirects")

    @property
    def not_found(self) -> bool:
        return self.status_code == HTTP_NOT_FOUND

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Fetch the bytes and status of a URL."""

    def fetch(self, url: str) -> FetchResult:
        ...


class HttpTransport:
    """Transport backed by an ``httpx.Client``.

    Redirects are followed and the whole body is read before returning.
    Network failures are reported as TransportError; HTTP statuses are
    returned as-is for the caller to interpret.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        config = config or SessionConfig()
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=config.timeout,
            headers={"User-Agent": config.user_agent},
            transport=transport,
        )

    def fetch(self, url: str) -> FetchResult:
        try:
            response = self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request to '{url}' failed: {e}") from e

        logger.debug(f"GET {url} -> {response.status_code}")
        return FetchResult(
            status_code=response.status_code,
            content=response.content,
            url=str(response.url),
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
