"""Tests for the OpenAI wrapper and JSON parsing of model output."""

import pytest

from studynotes.models import llm_client
from studynotes.models.llm_client import LLMConfig, call_llm, parse_json_or_throw


class _Message:
    def __init__(self, content):
        self.content = content


class _Choice:
    def __init__(self, content):
        self.message = _Message(content)


class _Response:
    def __init__(self, content):
        self.choices = [_Choice(content)]


class FakeOpenAI:
    last_request = None

    def __init__(self, api_key=None):
        self.chat = self
        self.completions = self

    def create(self, **request):
        FakeOpenAI.last_request = request
        return _Response('{"ok": true}')


def test_call_llm_builds_json_request(monkeypatch):
    monkeypatch.setattr(llm_client, "OpenAI", FakeOpenAI)

    cfg = LLMConfig(model="gpt-4o-mini", max_completion_tokens=100, temperature=0.2)
    out = call_llm("sys", "user", cfg, json_mode=True)

    req = FakeOpenAI.last_request
    assert out == '{"ok": true}'
    assert req["model"] == "gpt-4o-mini"
    assert req["max_completion_tokens"] == 100
    assert req["temperature"] == 0.2
    assert req["response_format"] == {"type": "json_object"}
    assert "seed" not in req
    assert req["messages"][0] == {"role": "system", "content": "sys"}
    assert req["messages"][1] == {"role": "user", "content": "user"}


def test_call_llm_omits_unset_options(monkeypatch):
    monkeypatch.setattr(llm_client, "OpenAI", FakeOpenAI)

    call_llm("sys", "user", LLMConfig(model="m"))

    req = FakeOpenAI.last_request
    assert "temperature" not in req
    assert "response_format" not in req


def test_parse_json_direct():
    assert parse_json_or_throw('{"a": 1}') == {"a": 1}


def test_parse_json_embedded_in_text():
    text = 'Here you go:\n```json\n{"verdict": "correct"}\n```'
    assert parse_json_or_throw(text) == {"verdict": "correct"}


def test_parse_json_invalid_raises():
    with pytest.raises(ValueError):
        parse_json_or_throw("no json here")
