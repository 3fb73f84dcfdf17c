"""Transports that deliver a request and return the raw response text."""

import logging
from typing import Protocol

import httpx

from restclient.exceptions import TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can execute a request and hand back the raw HTTP response."""

    def execute(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | bytes | None,
    ) -> str:
        """Send one request and return the raw response (status line, headers, body)."""
        ...

    def close(self) -> None:
        """Release any held resources."""
        ...


def render_raw_response(response: httpx.Response) -> str:
    """Rebuild the raw HTTP text of a received response, repeated headers included."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    for key, value in response.headers.raw:
        lines.append(f"{key.decode('latin-1')}: {value.decode('latin-1')}")
    return "\r\n".join(lines) + "\r\n\r\n" + response.text


class HttpxTransport:
    """Synchronous transport backed by an ``httpx.Client``."""

    def __init__(
        self,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        verify_ssl: bool = True,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.client: httpx.Client | None = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _get_client(self) -> httpx.Client:
        if self.client is None:
            self.client = httpx.Client(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                verify=self.verify_ssl,
            )
        return self.client

    def execute(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | bytes | None,
    ) -> str:
        """Make an HTTP request and return the raw response text."""
        content = body.encode() if isinstance(body, str) else body
        try:
            response = self._get_client().request(
                method=method,
                url=url,
                headers=headers,
                content=content,
            )
        except httpx.HTTPError as exc:
            logger.debug("Request failed for %s %s: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return render_raw_response(response)

    def close(self) -> None:
        """Close the underlying HTTP client and release the connection."""
        if self.client is not None:
            self.client.close()
            self.client = None
