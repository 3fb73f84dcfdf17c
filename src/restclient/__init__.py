"""restclient - a minimal HTTP REST client."""

from restclient.client import ResponseInfo, RestClient
from restclient.exceptions import (
    DecodeError,
    InvalidParameterError,
    ResponseFormatError,
    RestClientError,
    TransportError,
)
from restclient.parser import ParsedResponse, ResponseHeaders, normalize_header_name, parse_response
from restclient.query import format_query, parse_query
from restclient.transport import HttpxTransport, Transport

__all__ = [
    "DecodeError",
    "HttpxTransport",
    "InvalidParameterError",
    "ParsedResponse",
    "ResponseFormatError",
    "ResponseHeaders",
    "ResponseInfo",
    "RestClient",
    "RestClientError",
    "Transport",
    "TransportError",
    "format_query",
    "normalize_header_name",
    "parse_query",
    "parse_response",
]
