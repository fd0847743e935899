from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Union

import pytest

from src.sitesmith.models.events import Event
from src.sitesmith.models.project import Message
from src.sitesmith.services.project_persistence_service import InMemoryProjectStorage
from src.sitesmith.services.project_store import ProjectStore

SAMPLE_DOCUMENT = "<!DOCTYPE html>\n<html><body><h1>Hello</h1></body></html>"


class RecordingEventBus:
    """Synchronous in-memory event bus used by tests."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[[Event], None]]] = {}
        self.dispatched: List[Event] = []

    def subscribe(self, event_type: str, callback: Callable[[Event], None]) -> None:
        self._subscribers.setdefault(event_type, []).append(callback)

    def dispatch(self, event: Event) -> None:
        self.dispatched.append(event)
        for callback in self._subscribers.get(event.event_type, []):
            callback(event)

    def types(self) -> List[str]:
        return [event.event_type for event in self.dispatched]


class ScriptedCompletionClient:
    """
    Stand-in for CompletionService that replays scripted outcomes.

    Each scripted item is either the raw text to return or an exception to raise.
    """

    def __init__(self, outcomes: Optional[List[Union[str, Exception]]] = None) -> None:
        self.outcomes: List[Union[str, Exception]] = list(outcomes or [])
        self.calls: List[List[Message]] = []
        self.on_generate: Optional[Callable[[Sequence[Message]], None]] = None

    def generate(self, chat_history: Sequence[Message]) -> str:
        self.calls.append(list(chat_history))
        if self.on_generate is not None:
            self.on_generate(chat_history)
        outcome = self.outcomes.pop(0) if self.outcomes else SAMPLE_DOCUMENT
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def sample_document() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture
def storage() -> InMemoryProjectStorage:
    return InMemoryProjectStorage()


@pytest.fixture
def completion_client() -> ScriptedCompletionClient:
    return ScriptedCompletionClient()


@pytest.fixture
def event_bus() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def store_factory(
    storage: InMemoryProjectStorage,
    completion_client: ScriptedCompletionClient,
    event_bus: RecordingEventBus,
) -> Callable[..., ProjectStore]:
    """Factory fixture building a ProjectStore over the shared fakes."""

    def _factory(**overrides: object) -> ProjectStore:
        return ProjectStore(
            overrides.get("storage", storage),  # type: ignore[arg-type]
            overrides.get("completion_client", completion_client),
            event_bus=overrides.get("event_bus", event_bus),
        )

    return _factory
