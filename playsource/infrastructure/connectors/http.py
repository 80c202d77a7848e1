"""Shared HTTP access for connectors.

Thin wrapper over httpx.AsyncClient so every connector performs I/O the same
way: cooperative, without retries, with non-success statuses turned into
FetchError. A transport can be injected for tests.
"""

from typing import Any

from attrs import define, field
import httpx

from playsource.config import get_logger, settings
from playsource.domain.errors import FetchError

logger = get_logger(__name__).bind(service="http")


@define(slots=True)
class HttpSession:
    """Factory for short-lived async HTTP clients.

    Attributes:
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        timeout: Request timeout in seconds, None for no timeout
        follow_redirects: Whether redirects are followed
    """

    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    timeout: float | None = field(factory=lambda: settings.http.timeout)
    follow_redirects: bool = field(factory=lambda: settings.http.follow_redirects)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport,
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
        )

    async def get_text(self, url: str, headers: dict[str, str] | None = None) -> str:
        """GET a URL and return its decoded body."""
        async with self.client() as client:
            response = await client.get(url, headers=headers)
        _raise_for_status(response, url)
        return response.text

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        request_headers = {"Content-Type": "application/json; charset=UTF-8"}
        request_headers.update(headers or {})
        async with self.client() as client:
            response = await client.post(url, json=payload, headers=request_headers)
        _raise_for_status(response, url)
        return response.json()

    async def head(self, url: str) -> httpx.Response:
        """HEAD a URL and return the raw response, whatever its status."""
        async with self.client() as client:
            return await client.head(url)


def _raise_for_status(response: httpx.Response, url: str) -> None:
    if response.is_success:
        return
    logger.debug(
        "Non-success response",
        url=url,
        status=response.status_code,
        reason=response.reason_phrase,
    )
    raise FetchError(response.status_code, response.reason_phrase, url=url)
