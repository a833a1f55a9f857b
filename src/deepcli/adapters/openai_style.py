"""OpenAI-style chat.completions adapter."""
from __future__ import annotations

import requests
from typing import Any, Dict, List, Optional

from ..errors import TransportError
from .base import BaseChatAdapter

class OpenAIStyleAdapter(BaseChatAdapter):
    def __init__(self, endpoint: str, api_key: str, timeout: Optional[float] = 60):
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout

    @staticmethod
    def build_payload(messages: List[Dict[str, Any]], cfg: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": cfg.get("model"),
            "messages": messages,
            "stream": False,
        }

        # Unset options are left to the provider's defaults.
        if cfg.get("temperature") is not None:
            payload["temperature"] = cfg["temperature"]
        if cfg.get("max_tokens") is not None:
            payload["max_tokens"] = cfg["max_tokens"]

        if cfg.get("return_json"):
            payload["response_format"] = {"type": "json_object"}

        return payload

    def generate(self, messages: List[Dict[str, Any]], cfg: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(messages, cfg)

        try:
            r = requests.post(self.endpoint, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"API request failed: {e}")

        if r.status_code != 200:
            raise TransportError(f"API Error {r.status_code}: {r.text[:800]}")

        try:
            data = r.json()
        except ValueError as e:
            raise TransportError(f"Failed to parse API response: {e}")

        if not isinstance(data, dict):
            raise TransportError("Failed to parse API response: expected a JSON object")
        return data
