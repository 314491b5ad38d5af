import time
from typing import Any, Final

import httpx

from ...constants import DEFAULT_HTTP_TIMEOUT
from ...domain.exceptions import ArgumentError, TransportError
from ...logging_config import get_logger
from ...logging_utils import log_http_request

logger: Final = get_logger(__name__)


def parse_base_url(locator: str) -> httpx.URL:
    """Validate a tea API base address.

    Raises:
        ArgumentError: If the locator is empty or not an absolute http(s) URL
    """
    if not locator or not locator.strip():
        raise ArgumentError("locator", "A URL endpoint must be specified for the tea API")

    try:
        url = httpx.URL(locator.strip())
    except httpx.InvalidURL as exc:
        raise ArgumentError("locator", f"Invalid tea API URL {locator!r}") from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise ArgumentError(
            "locator", f"Tea API URL must be an absolute http(s) URL, got {locator!r}"
        )
    return url


class ApiEndpoint:
    """Base address of a tea API plus the settings for talking to it.

    Each request runs on its own short-lived ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        locator: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        self.base_url = parse_base_url(locator)
        self._transport = transport
        self._timeout = httpx.Timeout(timeout)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            transport=self._transport,
            timeout=self._timeout,
            headers={"Accept": "application/json"},
        )

    async def send(
        self, method: str, path: str, payload: Any | None = None
    ) -> httpx.Response:
        """Send one request and return the response, whatever its status.

        Raises:
            TransportError: If no response was received
        """
        async with self.client() as client:
            start_time = time.perf_counter()
            try:
                response = await client.request(method, path, json=payload)
            except httpx.HTTPError as exc:
                log_http_request(
                    method=method,
                    url=f"{self.base_url}{path}",
                    response_status=None,
                    process_time_ms=(time.perf_counter() - start_time) * 1000,
                )
                raise TransportError(f"{method} {path} failed: {exc}") from exc

            log_http_request(
                method=method,
                url=str(response.request.url),
                response_status=response.status_code,
                process_time_ms=(time.perf_counter() - start_time) * 1000,
            )
            return response
