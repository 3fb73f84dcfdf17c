"""Exceptions raised by restclient."""


class RestClientError(Exception):
    """Base error for all restclient failures."""


class InvalidParameterError(RestClientError, TypeError):
    """A request parameter is not a scalar or a list of scalars."""


class TransportError(RestClientError):
    """The transport could not deliver the request or read the response."""


class ResponseFormatError(RestClientError):
    """The response format is missing, unknown, or has no registered decoder."""


class DecodeError(RestClientError):
    """A decoder failed to turn the response body into structured data."""
