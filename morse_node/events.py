"""Single-slot listener registry for decoder and sentence events."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

LOGGER = logging.getLogger(__name__)

Handler = Callable[..., Any]


class EventKind(str, Enum):
    """Events a consumer can subscribe to.

    ``AUDIO_STATE_CHANGED`` and ``SENTENCE_CHANGED`` handlers receive
    ``(current, previous)``; ``CHARACTER_END`` and ``WORD_END`` handlers
    receive the finished segment.
    """

    AUDIO_STATE_CHANGED = "on:audio:state:change"
    SENTENCE_CHANGED = "on:change"
    CHARACTER_END = "on:character:end"
    WORD_END = "on:word:end"


class EventNotifier:
    """Holds at most one handler per event kind; the last registration wins."""

    def __init__(self) -> None:
        self._handlers: Dict[EventKind, Handler] = {}

    def subscribe(self, kind: EventKind | str, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError(f"{handler!r} is not callable")
        self._handlers[EventKind(kind)] = handler

    def unsubscribe(self, kind: EventKind | str) -> None:
        self._handlers.pop(EventKind(kind), None)

    def handler_for(self, kind: EventKind | str) -> Optional[Handler]:
        return self._handlers.get(EventKind(kind))

    def emit(self, kind: EventKind, *args: Any) -> None:
        """Invoke the registered handler synchronously, if any."""
        handler = self._handlers.get(kind)
        if handler is None:
            return
        LOGGER.debug("Emitting %s%r", kind.value, args)
        handler(*args)

    # Typed helpers ------------------------------------------------------------

    def audio_state_changed(self, current: Any, previous: Any) -> None:
        self.emit(EventKind.AUDIO_STATE_CHANGED, current, previous)

    def sentence_changed(self, current: str, previous: str) -> None:
        self.emit(EventKind.SENTENCE_CHANGED, current, previous)

    def character_ended(self, segment: str) -> None:
        self.emit(EventKind.CHARACTER_END, segment)

    def word_ended(self, segment: str) -> None:
        self.emit(EventKind.WORD_END, segment)


__all__ = ["EventKind", "EventNotifier", "Handler"]
