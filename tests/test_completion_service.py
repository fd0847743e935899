from __future__ import annotations

import json
from typing import Dict, List

import pytest

from src.providers.base import CompletionProvider
from src.sitesmith.models.exceptions import EmptyResponseError, RequestError
from src.sitesmith.models.project import Message
from src.sitesmith.services import user_settings_manager
from src.sitesmith.services.completion_service import CompletionService


class RecordingProvider(CompletionProvider):
    def __init__(self, reply: str = "<!DOCTYPE html><html></html>") -> None:
        self.reply = reply
        self.requests: List[List[Dict[str, str]]] = []

    @property
    def provider_name(self) -> str:
        return "Recording"

    def complete(self, messages: List[Dict[str, str]]) -> str:
        self.requests.append(messages)
        return self.reply


class FailingProvider(RecordingProvider):
    def complete(self, messages: List[Dict[str, str]]) -> str:
        raise RequestError("boom", status_code=500)


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def service(provider: RecordingProvider) -> CompletionService:
    return CompletionService(provider)


def test_generate_prefixes_system_instruction_and_keeps_roles(service, provider) -> None:
    history = [
        Message(role="user", content="A bakery site"),
        Message(role="assistant", content="<!DOCTYPE html><html>v1</html>"),
        Message(role="user", content="Make it blue"),
    ]

    result = service.generate(history)

    assert result == provider.reply
    sent = provider.requests[0]
    assert sent[0]["role"] == "system"
    assert "Tailwind" in sent[0]["content"]
    assert sent[1:] == [
        {"role": "user", "content": "A bakery site"},
        {"role": "assistant", "content": "<!DOCTYPE html><html>v1</html>"},
        {"role": "user", "content": "Make it blue"},
    ]


def test_generation_instruction_renders_site_rules(service) -> None:
    instruction = service.build_generation_messages([])[0]["content"]

    assert '<script src="https://cdn.tailwindcss.com"></script>' in instruction
    assert "<!DOCTYPE html>" in instruction
    assert "{{" not in instruction


def test_generate_returns_raw_text_without_cleaning() -> None:
    provider = RecordingProvider(reply="```html\n<!DOCTYPE html>\n```")

    assert CompletionService(provider).generate([Message(role="user", content="hi")]) == provider.reply


def test_generate_propagates_provider_errors() -> None:
    service = CompletionService(FailingProvider())

    with pytest.raises(RequestError):
        service.generate([Message(role="user", content="hi")])


def test_enhance_sends_trimmed_prompt_with_enhancement_instruction() -> None:
    provider = RecordingProvider(reply="  A detailed brief for a bakery website.\n")
    service = CompletionService(provider)

    result = service.enhance("  bakery site  ")

    assert result == "A detailed brief for a bakery website."
    system, user = provider.requests[0]
    assert system["role"] == "system"
    assert "prompt engineer" in system["content"]
    assert user == {"role": "user", "content": "bakery site"}


@pytest.mark.parametrize("prompt", ["", "   ", None])
def test_enhance_rejects_blank_prompts(service, provider, prompt) -> None:
    with pytest.raises(ValueError):
        service.enhance(prompt)

    assert provider.requests == []


def test_enhance_rejects_blank_reply() -> None:
    service = CompletionService(RecordingProvider(reply="  \n "))

    with pytest.raises(EmptyResponseError):
        service.enhance("bakery site")


class KeyedProvider(RecordingProvider):
    def __init__(self) -> None:
        super().__init__()
        self.api_key = None

    def set_api_key(self, api_key: str) -> None:
        if not api_key.strip():
            raise ValueError("blank key")
        self.api_key = api_key.strip()


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "user_settings.json"
    monkeypatch.setattr(user_settings_manager, "SETTINGS_FILE", path)
    return path


def test_update_api_key_applies_and_saves_key(settings_file) -> None:
    provider = KeyedProvider()

    CompletionService(provider).update_api_key(" sk-entered ")

    assert provider.api_key == "sk-entered"
    assert json.loads(settings_file.read_text(encoding="utf-8"))["api_keys"]["openrouter"] == "sk-entered"


def test_blank_api_key_is_not_saved(settings_file) -> None:
    with pytest.raises(ValueError):
        CompletionService(KeyedProvider()).update_api_key("  ")

    assert not settings_file.exists()


def test_providers_without_keys_refuse_updates(service, settings_file) -> None:
    with pytest.raises(NotImplementedError):
        service.update_api_key("sk-entered")
