"""Debug tracing of requests and responses.

Thread-local switch with rich formatting. Nothing is printed unless tracing
is enabled, either with ``set_debug_enabled(True)`` or ``RESTCLIENT_DEBUG``.
"""

import json
import threading
from typing import Any

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from restclient.config import get_debug_enabled
from restclient.parser import ParsedResponse

# Thread-local storage for debug state
_debug_state = threading.local()

_BODY_PREVIEW_CHARS = 500


def set_debug_enabled(enabled: bool) -> None:
    """Set debug mode for the current thread."""
    _debug_state.enabled = enabled


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled for the current thread."""
    enabled = getattr(_debug_state, "enabled", None)
    if enabled is None:
        enabled = get_debug_enabled()
        _debug_state.enabled = enabled
    return enabled


def debug_print(category: str, message: str, **data: Any) -> None:
    """Print debug information if debug mode is enabled.

    Args:
        category: Debug category (request, response, transport)
        message: Main message to display
        **data: Additional key-value pairs to display
    """
    if not is_debug_enabled():
        return
    console = Console(stderr=True)
    console.print(f"[DEBUG:{category}] {message}", style="bold cyan", markup=False)
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            try:
                json_str = json.dumps(value, indent=2)
                console.print(f"  {key}:", style="dim", markup=False)
                console.print(Syntax(json_str, "json", theme="monokai", line_numbers=False))
            except (TypeError, ValueError):
                console.print(f"  {key}: {value}", style="dim", markup=False)
        elif isinstance(value, str) and len(value) > _BODY_PREVIEW_CHARS:
            # Truncate long strings
            preview = value[:_BODY_PREVIEW_CHARS]
            console.print(f"  {key}: {preview}... ({len(value)} chars)", style="dim", markup=False)
        else:
            console.print(f"  {key}: {value}", style="dim", markup=False)


def debug_request(method: str, url: str, headers: dict[str, str], body: str | bytes | None) -> None:
    """Log an outgoing request in debug mode."""
    if not is_debug_enabled():
        return
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    debug_print("request", f"{method} {url}", headers=headers, body=body or None)


def debug_response(parsed: ParsedResponse, elapsed: float) -> None:
    """Log a parsed response in debug mode, headers rendered as a table."""
    if not is_debug_enabled():
        return
    console = Console(stderr=True)
    console.print(
        f"[DEBUG:response] {' -> '.join(parsed.status_lines) or '(no status line)'} ({elapsed:.3f}s)",
        style="bold cyan",
        markup=False,
    )
    if parsed.headers:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Header")
        table.add_column("Value")
        for name in parsed.headers:
            for value in parsed.headers.get_all(name):
                table.add_row(name, value)
        console.print(table)
    if parsed.body:
        debug_print("response", "body", body=parsed.body)
