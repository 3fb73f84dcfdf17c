"""REST client: request building, execution and response handling."""

import copy
import logging
import time
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as pkg_version
from pathlib import Path
from typing import Any

from restclient.config import get_base_url, get_timeout, get_user_agent, get_verify_ssl
from restclient.debug import debug_request, debug_response
from restclient.decoders import DEFAULT_DECODERS, DEFAULT_FORMAT_REGEX, Decoder, detect_format
from restclient.exceptions import DecodeError, ResponseFormatError, RestClientError
from restclient.parser import ParsedResponse, ResponseHeaders, parse_response
from restclient.query import Parameters, format_query
from restclient.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

QUERY_METHODS = frozenset({"GET", "HEAD"})
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_OPTION_NAMES = frozenset(
    {
        "base_url",
        "headers",
        "parameters",
        "user_agent",
        "build_indexed_queries",
        "format",
        "format_regex",
        "decoders",
        "timeout",
        "follow_redirects",
        "verify_ssl",
        "transport",
    }
)

_TRANSPORT_OPTIONS = frozenset({"timeout", "follow_redirects", "verify_ssl"})


def _default_user_agent() -> str:
    try:
        current_version = pkg_version("restclient")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"
    return f"restclient/{current_version}"


@dataclass
class ResponseInfo:
    """Metadata about the last executed request."""

    url: str
    method: str
    status_code: int
    response_time: float
    content_type: str = ""


class RestClient:
    """
    Minimal REST client.

    Each request returns a new client carrying the response (status lines,
    headers, body), so one configured client can issue many requests::

        api = RestClient(base_url="https://api.example.com")
        result = api.get("items", {"page": 2})
        if result.status_code == 200:
            items = result.decode_response()
    """

    def __init__(
        self,
        base_url: str | None = None,
        headers: Mapping[str, str] | None = None,
        parameters: Mapping[str, Any] | None = None,
        user_agent: str | None = None,
        build_indexed_queries: bool = False,
        format: str | None = None,
        format_regex: str = DEFAULT_FORMAT_REGEX,
        decoders: Mapping[str, Decoder] | None = None,
        timeout: float | None = None,
        follow_redirects: bool = True,
        verify_ssl: bool | None = None,
        transport: Transport | None = None,
        env_file: Path | None = None,
    ):
        self.env_file = env_file
        self.base_url = base_url if base_url is not None else get_base_url(env_file)
        self.headers: dict[str, str] = dict(headers or {})
        self.parameters: dict[str, Any] = dict(parameters or {})
        self.user_agent = user_agent or get_user_agent(env_file) or _default_user_agent()
        self.build_indexed_queries = build_indexed_queries
        self.format = format
        self.format_regex = format_regex
        self.decoders: dict[str, Decoder] = {**DEFAULT_DECODERS, **(decoders or {})}

        if transport is None:
            transport = HttpxTransport(
                timeout=timeout if timeout is not None else get_timeout(env_file),
                follow_redirects=follow_redirects,
                verify_ssl=verify_ssl if verify_ssl is not None else get_verify_ssl(env_file),
            )
        self.transport = transport
        self._owns_transport = True

        self._reset_response()

    def _reset_response(self) -> None:
        self.url: str | None = None
        self.parsed: ParsedResponse | None = None
        self.response_status_lines: list[str] = []
        self.response_headers = ResponseHeaders()
        self.response: str | None = None
        self.info: ResponseInfo | None = None
        self._decoded: Any = None
        self._has_decoded = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the transport. Results returned by execute leave it open."""
        if self._owns_transport:
            self.transport.close()

    def set_option(self, name: str, value: Any) -> None:
        """Change one client option after construction."""
        if name not in _OPTION_NAMES:
            raise RestClientError(f"Unknown option {name!r}")
        if name in _TRANSPORT_OPTIONS:
            if not isinstance(self.transport, HttpxTransport):
                raise RestClientError(f"Option {name!r} only applies to HttpxTransport")
            # Drop the current httpx.Client so the next request picks up the new setting.
            self.transport.close()
            setattr(self.transport, name, value)
            return
        if name == "transport":
            self.transport = value
            self._owns_transport = True
            return
        if name in ("headers", "parameters", "decoders"):
            value = dict(value or {})
            if name == "decoders":
                value = {**DEFAULT_DECODERS, **value}
        setattr(self, name, value)

    def register_decoder(self, format: str, decoder: Decoder) -> None:
        """Register a decoder used by decode_response for the given format."""
        self.decoders[format] = decoder

    # Request methods

    def get(self, url: str, parameters=None, headers=None) -> "RestClient":
        return self.execute(url, "GET", parameters, headers)

    def post(self, url: str, parameters=None, headers=None) -> "RestClient":
        return self.execute(url, "POST", parameters, headers)

    def put(self, url: str, parameters=None, headers=None) -> "RestClient":
        return self.execute(url, "PUT", parameters, headers)

    def patch(self, url: str, parameters=None, headers=None) -> "RestClient":
        return self.execute(url, "PATCH", parameters, headers)

    def delete(self, url: str, parameters=None, headers=None) -> "RestClient":
        return self.execute(url, "DELETE", parameters, headers)

    def head(self, url: str, parameters=None, headers=None) -> "RestClient":
        return self.execute(url, "HEAD", parameters, headers)

    def build_url(self, url: str) -> str:
        """Apply base_url and format to a request URL."""
        if self.base_url:
            url = f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"
        if self.format:
            url = f"{url}.{self.format}"
        return url

    def build_headers(self, headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Merge default headers, per-request headers and the User-Agent."""
        merged = {**self.headers, **(headers or {})}
        if self.user_agent and not any(key.lower() == "user-agent" for key in merged):
            merged["User-Agent"] = self.user_agent
        return merged

    def execute(
        self,
        url: str,
        method: str = "GET",
        parameters: Parameters | str | bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> "RestClient":
        """
        Execute a request and return a new client holding the response.

        Args:
            url: Request URL, relative to base_url when one is set
            method: HTTP method
            parameters: Mapping encoded as query (GET/HEAD) or form body, or a
                raw str/bytes body sent verbatim
            headers: Extra request headers

        Returns:
            A copy of this client with the parsed response attached

        Raises:
            TransportError: If the request could not be sent
            InvalidParameterError: If a parameter value cannot be encoded
        """
        method = method.upper()
        request_url = self.build_url(url)
        request_headers = self.build_headers(headers)
        body: str | bytes | None = None

        if isinstance(parameters, (str, bytes)):
            raw_body: str | bytes | None = parameters
            query = ""
        else:
            raw_body = None
            merged: Parameters
            if parameters is None or isinstance(parameters, Mapping):
                merged = {**self.parameters, **(parameters or {})}
            else:
                merged = [*self.parameters.items(), *parameters]
            query = format_query(merged, indexed_arrays=self.build_indexed_queries)

        if method in QUERY_METHODS:
            if query:
                separator = "&" if "?" in request_url else "?"
                request_url = f"{request_url}{separator}{query}"
            body = raw_body
        elif raw_body is not None:
            body = raw_body
        else:
            body = query
            if not any(key.lower() == "content-type" for key in request_headers):
                request_headers["Content-Type"] = FORM_CONTENT_TYPE

        debug_request(method, request_url, request_headers, body)
        start = time.monotonic()
        raw = self.transport.execute(method, request_url, request_headers, body)
        elapsed = round(time.monotonic() - start, 4)

        result = self._spawn()
        result.url = request_url
        parsed = result.parse_response(raw)
        result.info = ResponseInfo(
            url=request_url,
            method=method,
            status_code=parsed.status_code,
            response_time=elapsed,
            content_type=parsed.headers.get_last("content_type", "") or "",
        )
        logger.debug("%s %s -> %s (%.3fs)", method, request_url, parsed.status_code, elapsed)
        debug_response(parsed, elapsed)
        return result

    def _spawn(self) -> "RestClient":
        clone = copy.copy(self)
        clone.headers = dict(self.headers)
        clone.parameters = dict(self.parameters)
        clone.decoders = dict(self.decoders)
        clone._owns_transport = False
        clone._reset_response()
        return clone

    # Response handling

    def parse_response(self, raw: str | bytes) -> ParsedResponse:
        """Parse a raw response and store it as this client's last response."""
        parsed = parse_response(raw)
        self.parsed = parsed
        self.response_status_lines = parsed.status_lines
        self.response_headers = parsed.headers
        self.response = parsed.body
        self._decoded = None
        self._has_decoded = False
        return parsed

    @property
    def status_code(self) -> int:
        """Status code of the final response block, 0 when there is none."""
        return self.parsed.status_code if self.parsed else 0

    def get_response_format(self) -> str:
        """
        Determine the response format.

        The ``format`` option wins, otherwise the format is read from the last
        Content-Type header with ``format_regex``.
        """
        if self.parsed is None:
            raise ResponseFormatError("A response must exist before it can be decoded.")
        if self.format:
            return self.format
        content_type = self.response_headers.get_last("content_type")
        if content_type:
            detected = detect_format(content_type, self.format_regex)
            if detected:
                return detected
        raise ResponseFormatError("Response format could not be determined.")

    def decode_response(self) -> Any:
        """Decode the response body with the decoder registered for its format."""
        if self._has_decoded:
            return self._decoded
        response_format = self.get_response_format()
        decoder = self.decoders.get(response_format)
        if decoder is None:
            raise ResponseFormatError(
                f"'{response_format}' is not a supported format, "
                "register a decoder to handle this response."
            )
        try:
            self._decoded = decoder(self.response or "")
        except Exception as exc:
            raise DecodeError(f"Could not decode {response_format} response: {exc}") from exc
        self._has_decoded = True
        return self._decoded

    # Container access to the decoded response

    def __getitem__(self, key: Any) -> Any:
        return self.decode_response()[key]

    def __contains__(self, key: Any) -> bool:
        decoded = self.decode_response()
        try:
            return key in decoded
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Any]:
        return iter(self.decode_response())

    def __len__(self) -> int:
        return len(self.decode_response())

    def __bool__(self) -> bool:
        return True
