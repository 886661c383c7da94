"""Duration-based state machine turning presence samples into Morse symbols."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from .classifier import SignalClassifier
from .configuration import DecoderSettings
from .errors import OrderingError
from .events import EventKind, EventNotifier, Handler
from .sentence import SentenceBuilder
from .state import AudioState, DecoderState, ListeningState

LOGGER = logging.getLogger(__name__)

DOT = "."
DASH = "-"


class MorseDecoder:
    """Classifies tone and gap durations from a stream of presence samples.

    Samples must arrive with non-decreasing timestamps; call :meth:`on_sample`
    once per sample (or :meth:`on_level` with a raw level). Symbols are only
    appended when a tone ends, delimiters only while silence continues.
    """

    def __init__(
        self,
        settings: Optional[DecoderSettings] = None,
        notifier: Optional[EventNotifier] = None,
        smoothing: float = 0.0,
        strict: bool = False,
    ) -> None:
        self._settings = settings or DecoderSettings()
        self._strict = strict
        if strict:
            self._settings.validate()
        self.notifier = notifier or EventNotifier()
        self.sentence = SentenceBuilder(
            self.notifier,
            character_delimiter=self._settings.character_delimiter,
            word_delimiter=self._settings.word_delimiter,
        )
        self.classifier = SignalClassifier(self._settings.threshold, smoothing=smoothing)
        self._state = DecoderState()

    # Properties ---------------------------------------------------------------

    @property
    def settings(self) -> DecoderSettings:
        return self._settings

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def listening_state(self) -> ListeningState:
        return self._state.listening

    @property
    def audio_state(self) -> AudioState:
        return self._state.audio

    # Subscriptions and sentence access ----------------------------------------

    def subscribe(self, kind: EventKind | str, handler: Handler) -> None:
        self.notifier.subscribe(kind, handler)

    def current_text(self) -> str:
        return self.sentence.current_text()

    def clear(self) -> None:
        self.sentence.clear()

    def delete_last_character(self) -> None:
        self.sentence.delete_last_character()

    def delete_last_word(self) -> None:
        self.sentence.delete_last_word()

    # Lifecycle ----------------------------------------------------------------

    def start(self, at: Optional[float] = None) -> None:
        """Begin a listening session; ``at`` defaults to the first sample time."""
        with self.sentence.lock:
            self._reset_timing()
            self._state.session_start = at
            self._change_audio_state(AudioState.LISTENING_NO_SOUND)

    def stop(self) -> None:
        """Return to idle. The sentence is kept; any tone in progress is dropped."""
        with self.sentence.lock:
            self._reset_timing()
            self.classifier.reset()
            self._change_audio_state(AudioState.NOT_LISTENING)

    # Configuration setters ----------------------------------------------------

    def update_settings(self, **changes: Any) -> DecoderSettings:
        """Apply ``changes``; they take effect from the next sample."""
        with self.sentence.lock:
            settings = replace(self._settings, **changes)
            if self._strict:
                settings.validate()
            self._settings = settings
            self.classifier.threshold = settings.threshold
            self.sentence.character_delimiter = settings.character_delimiter
            self.sentence.word_delimiter = settings.word_delimiter
            LOGGER.debug("Decoder settings updated: %s", changes)
            return settings

    def set_threshold(self, threshold: float) -> None:
        self.update_settings(threshold=threshold)

    def set_sample_interval(self, sample_interval: float) -> None:
        self.update_settings(sample_interval=sample_interval)

    def set_dot_time(self, dot_time: float) -> None:
        self.update_settings(dot_time=dot_time)

    def set_dash_time(self, dash_time: float) -> None:
        self.update_settings(dash_time=dash_time)

    def set_character_gap_time(self, character_gap_time: float) -> None:
        self.update_settings(character_gap_time=character_gap_time)

    def set_word_gap_time(self, word_gap_time: float) -> None:
        self.update_settings(word_gap_time=word_gap_time)

    def set_debounce_time(self, debounce_time: float) -> None:
        self.update_settings(debounce_time=debounce_time)

    # Sample processing --------------------------------------------------------

    def on_level(self, timestamp: float, level: float) -> bool:
        """Classify a raw level against the threshold and process it."""
        with self.sentence.lock:
            self._check_order(timestamp)
            present = self.classifier.is_present(level)
            self.on_sample(timestamp, present)
            return present

    def on_sample(self, timestamp: float, signal_present: bool) -> None:
        """Process one presence sample."""
        with self.sentence.lock:
            self._check_order(timestamp)
            st = self._state
            st.last_timestamp = timestamp
            if st.session_start is None:
                st.session_start = timestamp
            if signal_present:
                self._handle_presence(timestamp)
            else:
                self._handle_silence(timestamp)

    # Internal helpers ---------------------------------------------------------

    def _check_order(self, timestamp: float) -> None:
        last = self._state.last_timestamp
        if last is not None and timestamp < last:
            raise OrderingError(timestamp, last)

    def _handle_presence(self, now: float) -> None:
        st = self._state
        cfg = self._settings
        if st.sound_stop_time is not None and now - st.sound_stop_time < cfg.debounce_time:
            return

        if st.listening is ListeningState.SOUND:
            on_duration = now - st.sound_start_time
            if on_duration > cfg.dash_time:
                self._change_audio_state(AudioState.DASH_LENGTH)
            elif on_duration > cfg.dot_time:
                self._change_audio_state(AudioState.DOT_LENGTH)
            return

        self._change_audio_state(AudioState.LISTENING_SOUND)
        st.listening = ListeningState.SOUND
        st.sound_start_time = now

    def _handle_silence(self, now: float) -> None:
        st = self._state
        cfg = self._settings
        if st.sound_start_time is not None and now - st.sound_start_time < cfg.debounce_time:
            return

        if st.listening is ListeningState.SOUND:
            st.sound_stop_time = now
            st.listening = ListeningState.NO_SOUND
            on_duration = now - st.sound_start_time
            if on_duration > cfg.dash_time:
                self.sentence.append(DASH)
            elif on_duration > cfg.dot_time:
                self.sentence.append(DOT)
            else:
                LOGGER.debug("Discarding %.3fs tone as noise", on_duration)
            return

        reference = st.sound_stop_time if st.sound_stop_time is not None else st.session_start
        off_duration = now - reference
        sentence = self.sentence

        if off_duration > cfg.word_gap_time:
            self._change_audio_state(AudioState.WORD_DELIMITER_LENGTH)
            if sentence.is_empty() or sentence.ends_with_word_delimiter():
                return
            # A word boundary supersedes a character boundary just before it.
            sentence.append(cfg.word_delimiter, replacing=cfg.character_delimiter)
            return

        if off_duration > cfg.character_gap_time:
            self._change_audio_state(AudioState.CHARACTER_DELIMITER_LENGTH)
            if sentence.is_empty() or sentence.ends_with_delimiter():
                return
            sentence.append(cfg.character_delimiter)
            return

        self._change_audio_state(AudioState.LISTENING_NO_SOUND)

    def _change_audio_state(self, state: AudioState) -> None:
        previous = self._state.audio
        if previous is state:
            return
        self._state.audio = state
        LOGGER.debug("Audio state %s -> %s", previous.value, state.value)
        self.notifier.audio_state_changed(state, previous)

    def _reset_timing(self) -> None:
        st = self._state
        st.listening = ListeningState.NO_SOUND
        st.sound_start_time = None
        st.sound_stop_time = None
        st.session_start = None
        st.last_timestamp = None


__all__ = ["DASH", "DOT", "MorseDecoder"]
