"""Terminal output.

- Plain mode: the raw response text, untouched.
- JSON mode: pretty-printed, colorized JSON via rich. If the response is not JSON,
  warn on stderr and print the raw text instead.
"""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

from .coerce import parse_json_payload
from .errors import DecodeError
from .logging_util import get_logger
from .types import Response

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)

def render_text(response: Response, out: Optional[Console] = None) -> None:
    (out or console).out(response.raw_text, highlight=False)

def render_json(response: Response, out: Optional[Console] = None) -> None:
    """Raises DecodeError when the response carries no JSON payload."""
    payload = response.json_payload
    if payload is None:
        payload = parse_json_payload(response.raw_text)
    (out or console).print_json(data=payload, indent=2)

def render(
    response: Response,
    json_mode: bool,
    out: Optional[Console] = None,
    err: Optional[Console] = None,
) -> None:
    if not json_mode:
        render_text(response, out)
        return

    try:
        render_json(response, out)
    except DecodeError as e:
        logger.info("JSON render fallback: %s", e)
        (err or err_console).print(f"[yellow]warning:[/yellow] {escape(str(e))}; showing plain text", highlight=False)
        render_text(response, out)
