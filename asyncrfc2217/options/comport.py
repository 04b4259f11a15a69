"""
The COM-PORT-OPTION handler, :rfc:`2217`.
"""
import io

from ._base import BaseOption
from ..accessories import to_bytes
from ..commands import ResponseDecoder
from ..errors import MalformedMessage, UnsupportedCommand
from ..telopt import COM_PORT_OPTION


class ComPortOption(BaseOption):
    """
    Offers COM-PORT-OPTION (client) or accepts it (access server), and
    feeds incoming sub-negotiations to a response processor.

    ``processor`` needs an async ``on_response_received(cmd)`` method,
    typically a `asyncrfc2217.sender.CommandSender`.

    A reply that can't be decoded is logged and dropped. If you want to
    know about it, pass an ``error_handler``; it's called with the
    exception.
    """
    value = COM_PORT_OPTION

    def __init__(self, stream, processor, error_handler=None, decoder=None):
        super().__init__(stream)
        self.processor = processor
        self.error_handler = error_handler
        self.decoder = decoder or ResponseDecoder()

    async def setup(self, tg):
        if self.stream.client:
            tg.start_soon(self.send_will)
        await super().setup(tg)

    async def handle_do(self):
        return self.stream.client

    async def handle_will(self):
        return self.stream.server

    async def process_sb(self, buf):
        # the transport strips the option byte; the decoder wants it back
        try:
            resp = self.decoder.decode(io.BytesIO(to_bytes([self.value, *buf])))
        except (MalformedMessage, UnsupportedCommand) as exc:
            self.stream.log.warning("Dropped COM-PORT-OPTION reply %r: %s", bytes(buf), exc)
            if self.error_handler is not None:
                try:
                    self.error_handler(exc)
                except Exception:
                    self.stream.log.exception("Error handler %r failed", self.error_handler)
            return
        self.stream.log.debug("recv %r", resp)
        await self.processor.on_response_received(resp)
