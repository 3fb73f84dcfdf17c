"""Raw HTTP response parsing.

Splits a raw response into its status lines, the headers of the final
message block and the body. Informational responses (``100 Continue``)
that precede the final response contribute status lines only.

The parser is lenient: malformed input never raises, missing parts come
back empty.
"""

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

STATUS_LINE_PATTERN = re.compile(r"HTTP/\d+(?:\.\d+)?[ \t]+\d{3}(?:[ \t][^\r\n]*)?(?=\r?\n|$)")
_NON_ALNUM = re.compile(r"[^a-z0-9]")

HeaderValue = str | list[str]


def normalize_header_name(name: str) -> str:
    """Lower-case a header name and replace non-alphanumerics with ``_``."""
    return _NON_ALNUM.sub("_", name.strip().lower())


class ResponseHeaders(Mapping[str, HeaderValue]):
    """
    Headers of a parsed response keyed by normalized name.

    A header seen once maps to its value, a repeated header maps to the list
    of its values in the order received. Lookups normalize the key first, so
    ``headers["Content-Type"]`` and ``headers["content_type"]`` are the same.
    """

    def __init__(self) -> None:
        self._values: dict[str, HeaderValue] = {}

    def add(self, name: str, value: str) -> None:
        """Record one header line, folding repeats into a list."""
        key = normalize_header_name(name)
        current = self._values.get(key)
        if current is None:
            self._values[key] = value
        elif isinstance(current, list):
            current.append(value)
        else:
            self._values[key] = [current, value]

    def get_all(self, name: str) -> list[str]:
        """Return every value of a header, or an empty list."""
        value = self._values.get(normalize_header_name(name))
        if value is None:
            return []
        if isinstance(value, list):
            return list(value)
        return [value]

    def get_first(self, name: str, default: str | None = None) -> str | None:
        values = self.get_all(name)
        return values[0] if values else default

    def get_last(self, name: str, default: str | None = None) -> str | None:
        values = self.get_all(name)
        return values[-1] if values else default

    def to_dict(self) -> dict[str, HeaderValue]:
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in self._values.items()
        }

    def __getitem__(self, name: str) -> HeaderValue:
        return self._values[normalize_header_name(name)]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_header_name(name) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResponseHeaders):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ResponseHeaders({self._values!r})"


@dataclass
class ParsedResponse:
    """Structured view of a raw HTTP response."""

    status_lines: list[str] = field(default_factory=list)
    headers: ResponseHeaders = field(default_factory=ResponseHeaders)
    body: str = ""

    @property
    def status_line(self) -> str:
        """The final (authoritative) status line."""
        return self.status_lines[-1] if self.status_lines else ""

    @property
    def status_code(self) -> int:
        parts = self.status_line.split(None, 2)
        if len(parts) >= 2 and parts[1].isdigit():
            return int(parts[1])
        return 0

    @property
    def reason(self) -> str:
        parts = self.status_line.split(None, 2)
        return parts[2] if len(parts) == 3 else ""


def _read_line(text: str, pos: int) -> tuple[str, int]:
    """Return the line starting at pos without its terminator, and the next position."""
    end = text.find("\n", pos)
    if end == -1:
        return text[pos:], len(text)
    line = text[pos:end]
    if line.endswith("\r"):
        line = line[:-1]
    return line, end + 1


def parse_response(raw: str | bytes) -> ParsedResponse:
    """
    Parse a raw HTTP response.

    Args:
        raw: Response text, possibly holding several message blocks.

    Returns:
        ParsedResponse with one status line per block, the last block's
        headers, and everything after its blank line as the body. Input that
        does not start with a status line is returned whole as the body.
    """
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw

    if not STATUS_LINE_PATTERN.match(text):
        return ParsedResponse(body=text)

    status_lines: list[str] = []
    pos = 0
    while True:
        status_line, pos = _read_line(text, pos)
        status_lines.append(status_line)
        headers = ResponseHeaders()

        while pos < len(text):
            line, next_pos = _read_line(text, pos)
            if not line.strip():
                pos = next_pos
                break
            name, sep, value = line.partition(":")
            if not sep:
                logger.debug("Header section ended by malformed line %r", line)
                return ParsedResponse(status_lines, headers, text[pos:])
            headers.add(name, value.strip())
            pos = next_pos
        else:
            # Input ended inside the header section.
            return ParsedResponse(status_lines, headers, "")

        if not STATUS_LINE_PATTERN.match(text, pos):
            return ParsedResponse(status_lines, headers, text[pos:])
