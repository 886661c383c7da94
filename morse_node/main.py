"""Entry-point for the Morse decoder node."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from .configuration import AppConfig, load_config, load_default_config
from .decoder import MorseDecoder
from .events import EventKind
from .sample_client import SampleClient
from .simulator import feed, keying_samples

LOGGER = logging.getLogger(__name__)


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decode Morse dot/dash timing from signal presence samples."
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration YAML (defaults to morse_node/config.yaml).",
    )
    parser.add_argument(
        "--simulate",
        metavar="PATTERN",
        help="Decode a synthetic keying pattern such as '.- -/...' instead of listening on OSC.",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Pace simulated samples at the configured sample interval.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def build_decoder(config: AppConfig) -> MorseDecoder:
    """Create a decoder whose events are reported through the log."""
    decoder = MorseDecoder(
        config.decoder,
        smoothing=config.classifier.smoothing,
        strict=True,
    )
    decoder.subscribe(
        EventKind.AUDIO_STATE_CHANGED,
        lambda current, previous: LOGGER.debug("audio state %s -> %s", previous.value, current.value),
    )
    decoder.subscribe(
        EventKind.SENTENCE_CHANGED,
        lambda current, _previous: _log_event("sentence_changed", text=current),
    )
    decoder.subscribe(
        EventKind.CHARACTER_END,
        lambda segment: _log_event("character_end", symbols=segment),
    )
    decoder.subscribe(
        EventKind.WORD_END,
        lambda segment: _log_event("word_end", symbols=segment),
    )
    return decoder


def run_simulation(config: AppConfig, pattern: str, realtime: bool) -> str:
    decoder = build_decoder(config)
    decoder.start(at=0.0)
    try:
        feed(decoder, keying_samples(pattern, config.decoder), realtime=realtime)
    finally:
        decoder.stop()
    return decoder.current_text()


async def serve(config: AppConfig) -> None:
    """Listen for OSC samples until cancelled."""
    decoder = build_decoder(config)
    client = SampleClient(decoder, config.osc.host, config.osc.port)
    try:
        await client.start()
        _log_event("decoder_node_started", host=config.osc.host, port=config.osc.port)
        await asyncio.Event().wait()
    finally:
        await client.stop()
        _log_event("decoder_node_stopped", text=decoder.current_text(), dropped=client.dropped)


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = parse_args(argv)
    config = load_config(args.config) if args.config else load_default_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format="%(message)s",
    )

    pattern = args.simulate if args.simulate is not None else config.simulator.pattern
    try:
        if pattern:
            text = run_simulation(config, pattern, args.realtime or config.simulator.realtime)
            print(text)
            return
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        _log_event("keyboard_interrupt")
    except Exception as exc:  # pragma: no cover - top-level guard
        _log_event("fatal_error", error=str(exc))
        raise


if __name__ == "__main__":
    main(sys.argv[1:])
