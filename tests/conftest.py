import io
import json

import pytest
import requests
from rich.console import Console

from src.deepcli.config import Settings

class FakeHttpResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body

def completion(content, model="deepseek-chat"):
    return {
        "model": model,
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 3, "completion_tokens": 5, "total_tokens": 8},
    }

@pytest.fixture
def settings():
    return Settings(
        api_key="test_key",
        endpoint="https://llm.example.test/v1/chat/completions",
        timeout=5,
        models={"r1": "deepseek-r1", "chat": "deepseek-chat"},
    )

@pytest.fixture
def fake_post(monkeypatch):
    """Replace requests.post; queue responses on .replies, inspect .calls."""

    class _FakePost:
        def __init__(self):
            self.calls = []
            self.replies = []

        def __call__(self, url, headers=None, json=None, timeout=None):
            self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
            reply = self.replies.pop(0) if self.replies else FakeHttpResponse(body=completion("ok"))
            if isinstance(reply, Exception):
                raise reply
            return reply

    fp = _FakePost()
    monkeypatch.setattr(requests, "post", fp)
    return fp

def make_console():
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)

@pytest.fixture
def out():
    return make_console()

@pytest.fixture
def err():
    return make_console()
