"""File attachments for --file and the interactive \\file directive.

Classification order:
1. Magic bytes (PNG, JPEG, GIF, WEBP) -> image
2. Extension via mimetypes: image/* -> image
3. Anything that decodes as UTF-8 -> text
Everything else is rejected.
"""
from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional, Union

from .errors import ValidationError
from .logging_util import get_logger
from .types import Attachment

logger = get_logger(__name__)

_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)

def sniff_image_type(head: bytes) -> Optional[str]:
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    for magic, mime in _SIGNATURES:
        if head.startswith(magic):
            return mime
    return None

def read_attachment(path: Union[str, Path]) -> Attachment:
    p = Path(path).expanduser()
    if not p.exists():
        raise ValidationError(f"File not found: {path}")
    if not p.is_file():
        raise ValidationError(f"Not a regular file: {path}")

    try:
        data = p.read_bytes()
    except OSError as e:
        raise ValidationError(f"Failed to read file: {path} ({e})")

    mime = sniff_image_type(data[:16])
    if mime is None:
        guessed, _ = mimetypes.guess_type(p.name)
        if guessed and guessed.startswith("image/"):
            mime = guessed

    if mime:
        logger.debug("Attachment %s classified as image (%s, %d bytes)", p, mime, len(data))
        return Attachment(path=p, content=data, kind="image", mime_type=mime)

    try:
        data.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError(f"Unsupported file (neither UTF-8 text nor a known image): {path}")

    guessed, _ = mimetypes.guess_type(p.name)
    logger.debug("Attachment %s classified as text (%d bytes)", p, len(data))
    return Attachment(path=p, content=data, kind="text", mime_type=guessed or "text/plain")
