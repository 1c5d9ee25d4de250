from types import SimpleNamespace

import pytest
import requests

from oncoguide.generate.clients import ollama_client
from oncoguide.generate.clients.echo_dev_client import EchoDevClient
from oncoguide.generate.clients.ollama_client import OllamaClient
from oncoguide.generate.clients.openai_client import OpenAIClient
from oncoguide.generate.types import Message, ModelParams

MESSAGES = [Message("system", "be careful"), Message("user", "What is FOLFOX?")]
PARAMS = ModelParams(temperature=0.3, max_tokens=250, top_p=0.9, repetition_penalty=1.1)


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        choice = SimpleNamespace(message=SimpleNamespace(content=self.content))
        return SimpleNamespace(choices=[choice])


def _sdk(content):
    completions = FakeCompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_openai_client_sends_repetition_penalty_when_supported():
    sdk, completions = _sdk("  A regimen.  ")
    client = OpenAIClient(model="llama", engine="together", supports_repetition_penalty=True, client=sdk)
    text, meta = client.generate(MESSAGES, PARAMS)

    assert text == "A regimen."
    assert meta == {"engine": "together", "model": "llama"}
    assert completions.kwargs["messages"][0] == {"role": "system", "content": "be careful"}
    assert completions.kwargs["max_tokens"] == 250
    assert completions.kwargs["top_p"] == 0.9
    assert completions.kwargs["extra_body"] == {"repetition_penalty": 1.1}


def test_openai_client_drops_repetition_penalty_when_unsupported():
    sdk, completions = _sdk("ok")
    OpenAIClient(model="llama", engine="groq", client=sdk).generate(MESSAGES, PARAMS)
    assert "extra_body" not in completions.kwargs


def test_openai_client_empty_content():
    sdk, _ = _sdk(None)
    text, _ = OpenAIClient(client=sdk).generate(MESSAGES, PARAMS)
    assert text == ""


class FakeResponse:
    def __init__(self, data, status=200):
        self.data = data
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        return self.data


def test_ollama_client_payload(monkeypatch):
    seen = {}

    def fake_post(url, json, timeout):
        seen.update(url=url, json=json)
        return FakeResponse({"response": " FOLFOX combines three drugs. "})

    monkeypatch.setattr(ollama_client.requests, "post", fake_post)
    text, meta = OllamaClient(model="mistral", host="http://ollama:11434").generate(MESSAGES, PARAMS)

    assert text == "FOLFOX combines three drugs."
    assert meta["engine"] == "ollama"
    assert seen["url"] == "http://ollama:11434/api/generate"
    assert seen["json"]["options"] == {
        "temperature": 0.3,
        "num_predict": 250,
        "top_p": 0.9,
        "repeat_penalty": 1.1,
    }
    assert "USER:\nWhat is FOLFOX?" in seen["json"]["prompt"]


def test_ollama_client_http_error(monkeypatch):
    monkeypatch.setattr(ollama_client.requests, "post", lambda *a, **k: FakeResponse({}, status=503))
    with pytest.raises(requests.HTTPError):
        OllamaClient().generate(MESSAGES, PARAMS)


def test_echo_client_caps_words():
    text, meta = EchoDevClient().generate(
        [Message("user", "one two three four")], ModelParams(max_tokens=2)
    )
    assert text == "[ECHO RESPONSE] one two"
    assert meta["truncated"] is True


def test_ollama_client_host_defaults_to_settings(monkeypatch):
    monkeypatch.setattr(ollama_client.settings, "OLLAMA_HOST", "http://gpu-box:11434")
    assert OllamaClient().host == "http://gpu-box:11434"
    assert OllamaClient(host="http://other:1").host == "http://other:1"
