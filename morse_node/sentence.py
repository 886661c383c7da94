"""Accumulated Morse sentence with delimiter bookkeeping and edit operations."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .configuration import DEFAULT_CHARACTER_DELIMITER, DEFAULT_WORD_DELIMITER
from .events import EventNotifier

LOGGER = logging.getLogger(__name__)


def last_segment(text: str, delimiter: str) -> str:
    """Return the last element of ``text.split(delimiter)`` without splitting."""
    index = text.rfind(delimiter)
    if index < 0:
        return text
    return text[index + len(delimiter):]


def drop_last_segment(text: str, delimiter: str) -> str:
    """Return ``delimiter.join(text.split(delimiter)[:-1])`` without splitting."""
    index = text.rfind(delimiter)
    if index < 0:
        return ""
    return text[:index]


class SentenceBuilder:
    """Owns the decoded symbol string.

    Every mutation happens under :attr:`lock`, a re-entrant lock the decoder
    also holds while it processes a sample, so edits coming from another
    thread never interleave with decoding.
    """

    def __init__(
        self,
        notifier: Optional[EventNotifier] = None,
        character_delimiter: str = DEFAULT_CHARACTER_DELIMITER,
        word_delimiter: str = DEFAULT_WORD_DELIMITER,
    ) -> None:
        self.notifier = notifier or EventNotifier()
        self.character_delimiter = character_delimiter
        self.word_delimiter = word_delimiter
        self.lock = threading.RLock()
        self._text = ""

    def current_text(self) -> str:
        with self.lock:
            return self._text

    def is_empty(self) -> bool:
        with self.lock:
            return not self._text

    def ends_with_word_delimiter(self) -> bool:
        with self.lock:
            return self._text.endswith(self.word_delimiter)

    def ends_with_character_delimiter(self) -> bool:
        with self.lock:
            return self._text.endswith(self.character_delimiter)

    def ends_with_delimiter(self) -> bool:
        with self.lock:
            return self.ends_with_word_delimiter() or self.ends_with_character_delimiter()

    def append(self, symbol: str, replacing: Optional[str] = None) -> None:
        """Append ``symbol``, first stripping a trailing ``replacing`` if present.

        The strip is silent, so sentence-changed reports the stripped text as
        ``previous``. Word-end or character-end fires with the segment the new
        delimiter closes; sentence-changed fires even if that handler raises.
        """
        with self.lock:
            if replacing and self._text.endswith(replacing):
                self._text = self._text[: -len(replacing)]
            previous = self._text
            self._text = previous + symbol
            LOGGER.debug("Appended %r -> %r", symbol, self._text)
            try:
                if symbol == self.word_delimiter:
                    self.notifier.word_ended(last_segment(previous, self.word_delimiter))
                if symbol == self.character_delimiter:
                    self.notifier.character_ended(last_segment(previous, self.character_delimiter))
            finally:
                self.notifier.sentence_changed(self._text, previous)

    def clear(self) -> None:
        self._replace("")

    def delete_last_character(self) -> None:
        """Remove the trailing character segment together with its delimiter."""
        with self.lock:
            self._replace(drop_last_segment(self._text, self.character_delimiter))

    def delete_last_word(self) -> None:
        """Remove the trailing word segment together with its delimiter."""
        with self.lock:
            self._replace(drop_last_segment(self._text, self.word_delimiter))

    def _replace(self, text: str) -> None:
        with self.lock:
            previous = self._text
            self._text = text
            self.notifier.sentence_changed(self._text, previous)


__all__ = ["SentenceBuilder", "drop_last_segment", "last_segment"]
