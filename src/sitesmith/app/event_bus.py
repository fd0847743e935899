import logging
from typing import Callable, Dict, List

from PySide6.QtCore import QObject, Signal

from src.sitesmith.models.events import Event

logger = logging.getLogger(__name__)

EventCallback = Callable[[Event], None]


class EventBusSignaller(QObject):
    """
    Carries events across threads. Lives on the UI thread, so a queued
    connection delivers every emitted event there.
    """
    event_emitted = Signal(Event)


class EventBus:
    """
    Publish/subscribe hub between the project store and the window.

    The store dispatches from whichever thread ran the generation; subscribers
    are always called on the UI thread, in subscription order.
    """
    def __init__(self):
        """Initializes the EventBus. Must be created on the UI thread."""
        self._subscribers: Dict[str, List[EventCallback]] = {}
        self._signaller = EventBusSignaller()
        self._signaller.event_emitted.connect(self._deliver)

    def subscribe(self, event_type: str, callback: EventCallback) -> None:
        """
        Register ``callback`` for one event type.

        Args:
            event_type: One of the constants in event_types.
            callback: Called with the Event on the UI thread.
        """
        self._subscribers.setdefault(event_type, []).append(callback)
        logger.debug("Subscribed %s to '%s'", _callback_name(callback), event_type)

    def dispatch(self, event: Event) -> None:
        """Queue an event for delivery on the UI thread. Safe to call from any thread."""
        logger.debug("Dispatching '%s' with payload %s", event.event_type, event.payload)
        self._signaller.event_emitted.emit(event)

    def _deliver(self, event: Event) -> None:
        callbacks = list(self._subscribers.get(event.event_type, []))
        if not callbacks:
            logger.debug("No subscribers for '%s'", event.event_type)
        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                # One broken view must not stop the others from updating.
                logger.error(
                    "Subscriber %s failed handling '%s': %s",
                    _callback_name(callback),
                    event.event_type,
                    e,
                    exc_info=True,
                )


def _callback_name(callback: Callable) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
