"""Unit tests for level smoothing and threshold classification."""

from __future__ import annotations

import pytest

from morse_node.classifier import SignalClassifier, ema


def test_threshold_is_exclusive() -> None:
    classifier = SignalClassifier(threshold=-50.0)
    assert classifier.is_present(-49.0) is True
    assert classifier.is_present(-50.0) is False
    assert classifier.is_present(-70.0) is False


def test_smoothing_delays_transitions() -> None:
    classifier = SignalClassifier(threshold=-50.0, smoothing=0.5)
    assert classifier.is_present(-80.0) is False
    # (-80 + -30) / 2 = -55 stays below the threshold.
    assert classifier.is_present(-30.0) is False
    assert classifier.level == pytest.approx(-55.0)
    assert classifier.is_present(-30.0) is True


def test_reset_forgets_level() -> None:
    classifier = SignalClassifier(threshold=-50.0, smoothing=0.9)
    classifier.is_present(-10.0)
    classifier.reset()
    assert classifier.level is None
    assert classifier.is_present(-80.0) is False


def test_invalid_smoothing_rejected() -> None:
    with pytest.raises(ValueError):
        SignalClassifier(threshold=0.0, smoothing=1.0)


def test_ema() -> None:
    assert ema(None, 3.0, 0.5) == pytest.approx(3.0)
    assert ema(1.0, 3.0, 0.5) == pytest.approx(2.0)
    with pytest.raises(ValueError):
        ema(1.0, 2.0, 1.5)
