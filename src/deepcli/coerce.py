"""JSON payload extraction for --json output.

Rules:
- If the response text is valid JSON, that is the payload.
- Models often wrap JSON in a ```json fence; the fenced body is accepted too.
- Otherwise raise DecodeError. The caller decides whether to fall back to plain text.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

from .errors import DecodeError

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n(.*?)\n?```$", flags=re.DOTALL)

def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")

def _finite_float(s: str) -> float:
    f = float(s)
    if not math.isfinite(f):
        raise ValueError(f"number out of range: {s}")
    return f

def _loads(s: str) -> Any:
    # Strict JSON only: no NaN or Infinity, including overflowing literals.
    return json.loads(s, parse_constant=_reject_constant, parse_float=_finite_float)

def _strip_fence(s: str) -> Optional[str]:
    m = _FENCE_RE.match(s)
    if not m:
        return None
    return m.group(1).strip()

def parse_json_payload(text: Optional[str]) -> Any:
    if text is None:
        raise DecodeError("empty response")

    s = str(text).strip()
    if not s:
        raise DecodeError("empty response")

    try:
        return _loads(s)
    except ValueError:
        pass

    fenced = _strip_fence(s)
    if fenced is None:
        raise DecodeError("response is not valid JSON")

    try:
        return _loads(fenced)
    except ValueError as e:
        raise DecodeError(f"json parse failed after removing code fence: {e}")

def try_parse_json_payload(text: Optional[str]) -> Optional[Any]:
    try:
        return parse_json_payload(text)
    except DecodeError:
        return None
