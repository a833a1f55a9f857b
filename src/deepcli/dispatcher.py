"""Query dispatcher: validated input -> one chat-completion call -> Response.

Steps per query:
1. build_request: validate flags and read the optional attachment (no network)
2. build_messages: system prompt + history + new user turn
3. Dispatcher.send: one POST through the adapter, then decode the reply
"""
from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .adapters.base import BaseChatAdapter
from .adapters.openai_style import OpenAIStyleAdapter
from .attachments import read_attachment
from .coerce import try_parse_json_payload
from .config import Settings
from .errors import TransportError, ValidationError
from .logging_util import get_logger, log_step
from .registry import MODEL_ALIASES, map_model
from .types import Attachment, Exchange, Request, Response

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant."
SYSTEM_PROMPT_JSON = "You are a helpful assistant. You must output your response in a valid JSON format."

TEMPERATURE_MIN = 0.0
TEMPERATURE_MAX = 2.0

def validate_model(model: Any) -> str:
    s = (model or "").strip().lower() if isinstance(model, str) else ""
    if s not in MODEL_ALIASES:
        raise ValidationError(f"Invalid model: {model!r}. Use 'r1' or 'chat'.")
    return s

def validate_temperature(temperature: Optional[float]) -> Optional[float]:
    if temperature is None:
        return None
    try:
        t = float(temperature)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid temperature: {temperature!r}")
    if math.isnan(t) or not TEMPERATURE_MIN <= t <= TEMPERATURE_MAX:
        raise ValidationError("Temperature must be between 0.0 and 2.0")
    return t

def validate_max_tokens(max_tokens: Optional[int]) -> Optional[int]:
    if max_tokens is None:
        return None
    if isinstance(max_tokens, bool) or not isinstance(max_tokens, int):
        raise ValidationError(f"max_tokens must be an integer: {max_tokens!r}")
    if max_tokens <= 0:
        raise ValidationError("max_tokens must be a positive integer")
    return max_tokens

def build_request(
    prompt: Optional[str],
    model: str = "chat",
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    file_path: Optional[Union[str, Path]] = None,
    json_mode: bool = False,
    attachment: Optional[Attachment] = None,
) -> Request:
    """Validate CLI-level input and assemble a Request. Never touches the network.

    ``file_path`` is read here; ``attachment`` is for callers that already read one
    (interactive \\file). Passing both is a ValidationError.
    """
    model = validate_model(model)
    temperature = validate_temperature(temperature)
    max_tokens = validate_max_tokens(max_tokens)

    text = (prompt or "").strip()
    if not text:
        raise ValidationError("Prompt is empty")

    if file_path is not None and attachment is not None:
        raise ValidationError("Only one attachment per request")
    if file_path is not None:
        attachment = read_attachment(file_path)

    return Request(
        model=model,  # type: ignore[arg-type]
        prompt=text,
        temperature=temperature,
        max_tokens=max_tokens,
        attachment=attachment,
        json_mode=bool(json_mode),
    )

def _user_message(req: Request) -> Dict[str, Any]:
    att = req.attachment
    if att is None:
        return {"role": "user", "content": req.prompt}

    if att.kind == "image":
        return {
            "role": "user",
            "content": [
                {"type": "text", "text": req.prompt},
                {"type": "image_url", "image_url": {"url": att.data_url}},
            ],
        }

    return {
        "role": "user",
        "content": f"{req.prompt}\n\nFile content ({att.name}):\n{att.text}",
    }

def build_messages(req: Request, history: Iterable[Exchange] = ()) -> List[Dict[str, Any]]:
    system_text = SYSTEM_PROMPT_JSON if req.json_mode else SYSTEM_PROMPT
    messages: List[Dict[str, Any]] = [{"role": "system", "content": system_text}]

    for ex in history:
        messages.append(_user_message(ex.request))
        messages.append({"role": "assistant", "content": ex.response.raw_text})

    messages.append(_user_message(req))
    return messages

def _extract_text(raw: Dict[str, Any]) -> str:
    choices = raw.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise TransportError("Malformed API response: no choices")
    msg = choices[0].get("message")
    if not isinstance(msg, dict) or not isinstance(msg.get("content"), str):
        raise TransportError("Malformed API response: missing message content")
    return msg["content"]

class Dispatcher:
    def __init__(self, settings: Settings, adapter: Optional[BaseChatAdapter] = None):
        self.settings = settings
        self.adapter = adapter or OpenAIStyleAdapter(
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            timeout=settings.timeout,
        )

    def send(self, req: Request, history: Iterable[Exchange] = ()) -> Response:
        log_step(logger, "2.1", "build messages")
        messages = build_messages(req, history)
        model_id = map_model(req.model, self.settings.models)

        cfg = {
            "model": model_id,
            "temperature": req.temperature,
            "max_tokens": req.max_tokens,
            "return_json": req.json_mode,
        }

        log_step(logger, "2.2", f"call provider model={model_id}")
        raw = self.adapter.generate(messages, cfg)

        log_step(logger, "2.3", "decode response")
        text = _extract_text(raw)
        logger.debug("usage: %s", raw.get("usage"))
        return Response(
            raw_text=text,
            json_payload=try_parse_json_payload(text),
            model=str(raw.get("model") or model_id),
            usage=raw.get("usage") or {},
        )
