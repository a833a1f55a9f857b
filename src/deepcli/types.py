"""Shared types and lightweight data containers."""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Optional

Model = Literal["r1", "chat"]
AttachmentKind = Literal["text", "image"]

@dataclass
class Attachment:
    path: Path
    content: bytes
    kind: AttachmentKind
    mime_type: str

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def text(self) -> str:
        return self.content.decode("utf-8-sig")

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

@dataclass
class Request:
    model: Model
    prompt: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    attachment: Optional[Attachment] = None
    json_mode: bool = False

@dataclass
class Response:
    raw_text: str
    # Parsed structure mirroring raw_text when raw_text is valid JSON.
    json_payload: Optional[Any] = None
    model: str = ""
    usage: Dict[str, Any] = field(default_factory=dict)

@dataclass
class Exchange:
    request: Request
    response: Response
