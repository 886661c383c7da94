"""Configuration loading and dataclasses for the Morse decoder node."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError

DEFAULT_THRESHOLD_DB = -50.0
DEFAULT_SAMPLE_INTERVAL_S = 0.05
DEFAULT_DOT_TIME_S = 0.5
DEFAULT_CHARACTER_DELIMITER = " "
DEFAULT_WORD_DELIMITER = "/"

_SYMBOLS = (".", "-")


@dataclass(frozen=True)
class DecoderSettings:
    """Duration thresholds (seconds) and delimiters used by the decoder."""

    threshold: float = DEFAULT_THRESHOLD_DB
    sample_interval: float = DEFAULT_SAMPLE_INTERVAL_S
    dot_time: float = DEFAULT_DOT_TIME_S
    dash_time: float = DEFAULT_DOT_TIME_S * 3
    character_gap_time: float = DEFAULT_DOT_TIME_S * 4
    word_gap_time: float = DEFAULT_DOT_TIME_S * 6
    debounce_time: float = DEFAULT_DOT_TIME_S / 2
    character_delimiter: str = DEFAULT_CHARACTER_DELIMITER
    word_delimiter: str = DEFAULT_WORD_DELIMITER

    @classmethod
    def from_dot_time(cls, dot_time: float, **overrides: Any) -> "DecoderSettings":
        """Derive every gap from ``dot_time`` unless explicitly overridden."""
        values: Dict[str, Any] = {
            "dot_time": dot_time,
            "dash_time": dot_time * 3,
            "character_gap_time": dot_time * 4,
            "word_gap_time": dot_time * 6,
            "debounce_time": dot_time / 2,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def validate(self) -> "DecoderSettings":
        """Raise :class:`ConfigurationError` unless the settings decode sanely.

        Returns ``self`` so calls can be chained.
        """
        if self.dot_time <= 0:
            raise ConfigurationError("dot_time must be greater than zero")
        if self.dash_time <= self.dot_time:
            raise ConfigurationError("dash_time must be greater than dot_time")
        if self.character_gap_time <= self.dot_time:
            raise ConfigurationError("character_gap_time must be greater than dot_time")
        if self.word_gap_time <= self.character_gap_time:
            raise ConfigurationError("word_gap_time must be greater than character_gap_time")
        if self.debounce_time < 0:
            raise ConfigurationError("debounce_time must not be negative")
        if self.sample_interval <= 0:
            raise ConfigurationError("sample_interval must be greater than zero")
        for name in ("character_delimiter", "word_delimiter"):
            delimiter = getattr(self, name)
            if not delimiter:
                raise ConfigurationError(f"{name} must not be empty")
            if any(symbol in delimiter for symbol in _SYMBOLS):
                raise ConfigurationError(f"{name} must not contain '.' or '-'")
        if self.character_delimiter == self.word_delimiter:
            raise ConfigurationError("character_delimiter and word_delimiter must differ")
        return self


@dataclass(frozen=True)
class ClassifierConfig:
    smoothing: float = 0.0


@dataclass(frozen=True)
class OscConfig:
    host: str = "127.0.0.1"
    port: int = 9000


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class SimulatorConfig:
    pattern: str = ""
    realtime: bool = False


@dataclass(frozen=True)
class AppConfig:
    decoder: DecoderSettings
    classifier: ClassifierConfig
    osc: OscConfig
    logging: LoggingConfig
    simulator: SimulatorConfig


def load_config(path: Path) -> AppConfig:
    """Load configuration from a YAML file."""
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a YAML mapping")
    return parse_config(raw)


def parse_config(raw: Dict[str, Any]) -> AppConfig:
    """Build an :class:`AppConfig` from an already-parsed mapping."""
    try:
        return AppConfig(
            decoder=_parse_decoder(_section(raw, "decoder")).validate(),
            classifier=_parse_classifier(_section(raw, "classifier")),
            osc=_parse_osc(_section(raw, "osc")),
            logging=LoggingConfig(level=str(_section(raw, "logging").get("level", "INFO"))),
            simulator=_parse_simulator(_section(raw, "simulator")),
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigurationError):
            raise
        raise ConfigurationError(f"Invalid configuration value: {exc}") from exc


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Configuration section '{key}' must be a mapping")
    return value


def _optional_float(raw: Dict[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    return None if value is None else float(value)


def _parse_decoder(raw: Dict[str, Any]) -> DecoderSettings:
    return DecoderSettings.from_dot_time(
        float(raw.get("dot_time", DEFAULT_DOT_TIME_S)),
        threshold=_optional_float(raw, "threshold"),
        sample_interval=_optional_float(raw, "sample_interval"),
        dash_time=_optional_float(raw, "dash_time"),
        character_gap_time=_optional_float(raw, "character_gap_time"),
        word_gap_time=_optional_float(raw, "word_gap_time"),
        debounce_time=_optional_float(raw, "debounce_time"),
        character_delimiter=raw.get("character_delimiter"),
        word_delimiter=raw.get("word_delimiter"),
    )


def _parse_classifier(raw: Dict[str, Any]) -> ClassifierConfig:
    smoothing = float(raw.get("smoothing", 0.0))
    if not 0.0 <= smoothing < 1.0:
        raise ConfigurationError("classifier.smoothing must be in [0, 1)")
    return ClassifierConfig(smoothing=smoothing)


def _parse_osc(raw: Dict[str, Any]) -> OscConfig:
    return OscConfig(host=str(raw.get("host", "127.0.0.1")), port=int(raw.get("port", 9000)))


def _parse_simulator(raw: Dict[str, Any]) -> SimulatorConfig:
    return SimulatorConfig(
        pattern=str(raw.get("pattern", "")),
        realtime=bool(raw.get("realtime", False)),
    )


def load_default_config() -> AppConfig:
    """Load the default config.yaml shipped with the package."""
    path = Path(__file__).resolve().parent / "config.yaml"
    return load_config(path)


__all__ = [
    "AppConfig",
    "ClassifierConfig",
    "DecoderSettings",
    "LoggingConfig",
    "OscConfig",
    "SimulatorConfig",
    "load_config",
    "load_default_config",
    "parse_config",
]
