"""OSC front-end feeding presence or level samples into a decoder."""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any, Optional, Tuple

from pythonosc import dispatcher
from pythonosc.osc_server import AsyncIOOSCUDPServer

from .decoder import MorseDecoder
from .errors import OrderingError

LOGGER = logging.getLogger(__name__)


class SampleClient:
    """Receives samples over OSC and hands them to one decoder.

    Addresses:

    * ``/presence <0|1> [timestamp]``
    * ``/level <dB> [timestamp]``
    * ``/clear``, ``/delete_character``, ``/delete_word``

    Samples without a timestamp are stamped with ``perf_counter`` on arrival.
    All handlers run on the event loop, so samples and edits are serialized.
    """

    def __init__(
        self,
        decoder: MorseDecoder,
        host: str,
        port: int,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._decoder = decoder
        self._loop = loop or asyncio.get_event_loop()
        self._address = (host, port)
        self._dispatcher = dispatcher.Dispatcher()
        self._dispatcher.map("/presence", self._on_presence)
        self._dispatcher.map("/level", self._on_level)
        self._dispatcher.map("/clear", self._on_edit, decoder.clear)
        self._dispatcher.map("/delete_character", self._on_edit, decoder.delete_last_character)
        self._dispatcher.map("/delete_word", self._on_edit, decoder.delete_last_word)
        self._server = AsyncIOOSCUDPServer(self._address, self._dispatcher, self._loop)
        self._transport: Optional[asyncio.BaseTransport] = None
        self._protocol = None
        self.dropped = 0

    async def start(self) -> None:
        """Start listening and put the decoder into its listening state."""
        if self._transport is not None:
            return
        self._transport, self._protocol = await self._server.create_serve_endpoint()
        self._decoder.start()
        LOGGER.info("SampleClient listening on %s:%s", *self.address)

    async def stop(self) -> None:
        """Stop the OSC server and idle the decoder."""
        if self._transport is None:
            return
        self._transport.close()
        self._transport = None
        self._protocol = None
        self._decoder.stop()

    @property
    def address(self) -> Tuple[str, int]:
        """Return the configured OSC address tuple."""
        return self._address

    def inject_presence(self, present: bool, timestamp: Optional[float] = None) -> bool:
        """Testing helper to inject a presence sample. Returns ``False`` if dropped."""
        return self._deliver(self._decoder.on_sample, bool(present), timestamp)

    def inject_level(self, level: float, timestamp: Optional[float] = None) -> bool:
        """Testing helper to inject a level sample. Returns ``False`` if dropped."""
        return self._deliver(self._decoder.on_level, float(level), timestamp)

    # Handlers -----------------------------------------------------------------

    def _on_presence(self, _addr: str, value: Any, *rest: Any) -> None:
        try:
            present = bool(float(value))
            timestamp = float(rest[0]) if rest else None
        except (TypeError, ValueError):
            LOGGER.debug("Ignoring malformed presence payload: %s %s", value, rest)
            return
        self._deliver(self._decoder.on_sample, present, timestamp)

    def _on_level(self, _addr: str, value: Any, *rest: Any) -> None:
        try:
            level = float(value)
            timestamp = float(rest[0]) if rest else None
        except (TypeError, ValueError):
            LOGGER.debug("Ignoring malformed level payload: %s %s", value, rest)
            return
        self._deliver(self._decoder.on_level, level, timestamp)

    def _on_edit(self, address: str, args: list, *_payload: Any) -> None:
        LOGGER.info("Edit command %s", address)
        args[0]()

    def _deliver(self, sink: Any, value: Any, timestamp: Optional[float]) -> bool:
        now = perf_counter() if timestamp is None else timestamp
        try:
            sink(now, value)
        except OrderingError as exc:
            self.dropped += 1
            LOGGER.warning("Dropping out-of-order sample: %s", exc)
            return False
        return True


__all__ = ["SampleClient"]
