"""Tests for the synthetic keying source."""

from __future__ import annotations

import pytest

from morse_node.configuration import DecoderSettings
from morse_node.decoder import MorseDecoder
from morse_node.simulator import feed, keying_plan, keying_samples


def test_plan_inserts_gaps_between_tones() -> None:
    settings = DecoderSettings()
    plan = keying_plan(".-", settings)
    assert [tone_on for tone_on, _ in plan] == [True, False, True, False]
    dot, intra, dash, trailing = (seconds for _, seconds in plan)
    assert settings.dot_time < dot <= settings.dash_time
    assert dash > settings.dash_time
    assert settings.debounce_time <= intra < settings.character_gap_time
    assert trailing == pytest.approx(intra)


def test_plan_collapses_delimiter_runs_to_longest_gap() -> None:
    settings = DecoderSettings()
    plan = keying_plan(". / -", settings)
    assert len(plan) == 4
    assert plan[1][1] > settings.word_gap_time


def test_plan_rejects_unknown_symbols() -> None:
    with pytest.raises(ValueError):
        keying_plan(".x-", DecoderSettings())


def test_samples_are_evenly_spaced() -> None:
    settings = DecoderSettings()
    samples = list(keying_samples(".", settings, start=10.0))
    times = [t for t, _ in samples]
    assert times[0] == pytest.approx(10.0)
    assert all(b > a for a, b in zip(times, times[1:]))
    assert samples[0][1] is True
    assert samples[-1][1] is False


@pytest.mark.parametrize("pattern", [".- -/...", "-", "... --- .../", "-./.- "])
def test_decoder_recovers_keyed_pattern(pattern: str) -> None:
    settings = DecoderSettings()
    decoder = MorseDecoder(settings)
    feed(decoder, keying_samples(pattern, settings))
    assert decoder.current_text() == pattern


def test_fast_keying() -> None:
    settings = DecoderSettings.from_dot_time(0.06, sample_interval=0.005)
    decoder = MorseDecoder(settings)
    feed(decoder, keying_samples("-.-. --.-/", settings))
    assert decoder.current_text() == "-.-. --.-/"


def test_realtime_feed_sleeps_per_sample() -> None:
    settings = DecoderSettings()
    sleeps: list = []
    delivered = feed(
        MorseDecoder(settings),
        keying_samples("-", settings),
        realtime=True,
        sleep=sleeps.append,
    )
    assert len(sleeps) == delivered
    assert set(sleeps) == {settings.sample_interval}
