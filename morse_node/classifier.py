"""Signal level conditioning and threshold classification."""

from __future__ import annotations

from typing import Optional


def ema(prev: Optional[float], x: float, alpha: float) -> float:
    """Compute the exponential moving average."""
    if not 0.0 <= alpha <= 1.0:
        raise ValueError("alpha must be between 0 and 1")
    if prev is None:
        return x
    return (alpha * x) + ((1.0 - alpha) * prev)


class SignalClassifier:
    """Turns a signal level (dB) into a presence flag.

    ``smoothing`` is the weight kept from the previous level, so ``0.0``
    passes levels straight through and values close to ``1.0`` react slowly.
    """

    def __init__(self, threshold: float, smoothing: float = 0.0) -> None:
        if not 0.0 <= smoothing < 1.0:
            raise ValueError("smoothing must be in [0, 1)")
        self.threshold = threshold
        self.smoothing = smoothing
        self._level: Optional[float] = None

    @property
    def level(self) -> Optional[float]:
        """Last (smoothed) level seen, or ``None`` before the first sample."""
        return self._level

    def is_present(self, level: float) -> bool:
        self._level = ema(self._level, float(level), 1.0 - self.smoothing)
        return self._level > self.threshold

    def reset(self) -> None:
        self._level = None


__all__ = ["SignalClassifier", "ema"]
