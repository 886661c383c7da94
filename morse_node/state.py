"""Enums and dataclasses modelling decoder state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ListeningState(str, Enum):
    """Whether a tone is believed to be sounding right now."""

    NO_SOUND = "no-sound"
    SOUND = "sound"


class AudioState(str, Enum):
    """Externally observable decoder status, used for feedback only."""

    NOT_LISTENING = "not-listening"
    LISTENING_NO_SOUND = "listening:no-sound"
    LISTENING_SOUND = "listening:sound"
    DOT_LENGTH = "dot:length"
    DASH_LENGTH = "dash:length"
    CHARACTER_DELIMITER_LENGTH = "character:delimiter:length"
    WORD_DELIMITER_LENGTH = "word:delimiter:length"


@dataclass
class DecoderState:
    """Mutable timing state owned by a single decoder."""

    listening: ListeningState = ListeningState.NO_SOUND
    audio: AudioState = AudioState.NOT_LISTENING
    sound_start_time: Optional[float] = None
    sound_stop_time: Optional[float] = None
    session_start: Optional[float] = None
    last_timestamp: Optional[float] = None


__all__ = ["AudioState", "DecoderState", "ListeningState"]
