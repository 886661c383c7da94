"""Software stand-in for a keyed tone source.

Turns a pattern such as ``".- -/..."`` into the presence samples a periodic
sampler would produce, with every tone and gap sitting well inside the
window the decoder classifies it into.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, Iterator, List, Optional, Tuple

from .configuration import DecoderSettings
from .decoder import DASH, DOT, MorseDecoder

LOGGER = logging.getLogger(__name__)

Sample = Tuple[float, bool]


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


def _durations(settings: DecoderSettings) -> dict:
    return {
        DOT: (settings.dot_time + settings.dash_time) / 2.0,
        DASH: settings.dash_time + (settings.dash_time - settings.dot_time) / 2.0,
        "intra": (settings.debounce_time + settings.character_gap_time) / 2.0,
        "character": (settings.character_gap_time + settings.word_gap_time) / 2.0,
        "word": settings.word_gap_time + (settings.word_gap_time - settings.character_gap_time) / 2.0,
    }


def keying_plan(pattern: str, settings: DecoderSettings) -> List[Tuple[bool, float]]:
    """Return ``(tone_on, seconds)`` segments for ``pattern``.

    Consecutive delimiters collapse into the longest gap among them. A
    pattern ending on a tone gets a short trailing gap so the tone is closed.
    """
    durations = _durations(settings)
    plan: List[Tuple[bool, float]] = []
    pending_gap: Optional[float] = None
    index = 0
    while index < len(pattern):
        if pattern[index] in (DOT, DASH):
            if plan:
                plan.append((False, pending_gap if pending_gap is not None else durations["intra"]))
            pending_gap = None
            plan.append((True, durations[pattern[index]]))
            index += 1
        elif pattern.startswith(settings.word_delimiter, index):
            pending_gap = max(pending_gap or 0.0, durations["word"])
            index += len(settings.word_delimiter)
        elif pattern.startswith(settings.character_delimiter, index):
            pending_gap = max(pending_gap or 0.0, durations["character"])
            index += len(settings.character_delimiter)
        else:
            raise ValueError(f"Unexpected character {pattern[index]!r} in keying pattern")
    if plan:
        plan.append((False, pending_gap if pending_gap is not None else durations["intra"]))
    return plan


def keying_samples(
    pattern: str,
    settings: DecoderSettings,
    start: float = 0.0,
    interval: Optional[float] = None,
) -> Iterator[Sample]:
    """Yield ``(timestamp, signal_present)`` samples for ``pattern``."""
    period = interval if interval is not None else settings.sample_interval
    if period <= 0.0:
        raise ValueError("Sample interval must be greater than zero")
    tick = 0
    for tone_on, seconds in keying_plan(pattern, settings):
        count = max(1, int(round(seconds / period)))
        for _ in range(count):
            # Multiply rather than accumulate so timestamps do not drift.
            yield start + tick * period, tone_on
            tick += 1


def feed(
    decoder: MorseDecoder,
    samples: Iterator[Sample],
    realtime: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Drive ``decoder`` with ``samples``; returns how many were delivered."""
    period = decoder.settings.sample_interval
    delivered = 0
    for timestamp, present in samples:
        decoder.on_sample(timestamp, present)
        delivered += 1
        if realtime:
            sleep(period)
    _log_event("simulation_finished", samples=delivered, text=decoder.current_text())
    return delivered


__all__ = ["Sample", "feed", "keying_plan", "keying_samples"]
