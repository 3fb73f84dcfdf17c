"""Response format detection and body decoders."""

import json
import re
from collections.abc import Callable
from typing import Any

import yaml

Decoder = Callable[[str], Any]

# Group 2 is the format: "text/json" -> json, "application/json-patch+json" -> json,
# "application/x-yaml" -> yaml.
DEFAULT_FORMAT_REGEX = r"(\w+)/(?:[\w.-]+\+)?(?:x-)?(\w+)"

DEFAULT_DECODERS: dict[str, Decoder] = {
    "json": json.loads,
    "yaml": yaml.safe_load,
}


def detect_format(
    content_type: str,
    format_regex: str | re.Pattern[str] = DEFAULT_FORMAT_REGEX,
) -> str | None:
    """Extract the response format from a Content-Type value."""
    match = re.search(format_regex, content_type)
    if not match:
        return None
    return match.group(2).lower()
