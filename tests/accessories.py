"""Test accessories for asyncrfc2217 project."""
import io
import logging
from contextlib import asynccontextmanager
from types import SimpleNamespace

import anyio
import anyio.abc

from asyncrfc2217.commands import SignatureControlCmd
from asyncrfc2217.options import BaseOption, HalfOption, stdBINARY
from asyncrfc2217.stream import TelnetStream
from asyncrfc2217.telopt import BINARY, COM_PORT_OPTION, ComCmd


class FakeStream:
    """
    Stands in for a TelnetStream in unit tests. Records what is sent.
    """
    client = True
    server = False

    def __init__(self):
        self.log = logging.getLogger("tests.fake")
        self.subneg = []
        self.iac = []
        self.negotiation_callbacks = []
        self.teardown_callbacks = []

    def add_negotiation_callback(self, cb):
        self.negotiation_callbacks.append(cb)

    def add_teardown_callback(self, cb):
        self.teardown_callbacks.append(cb)

    async def send_subneg(self, opt, *bufs):
        self.subneg.append((opt, b''.join(bytes([b]) if isinstance(b, int) else bytes(b)
            for b in bufs)))

    async def send_iac(self, *bufs):
        self.iac.append(bufs)

    async def notify(self, cmd, opt):
        for cb in self.negotiation_callbacks:
            await cb(cmd, opt)

    async def close(self):
        for cb in self.teardown_callbacks:
            await cb()


class FakeByteStream(anyio.abc.ByteStream):
    """
    A byte stream that records what's sent to it and never receives
    anything.
    """
    def __init__(self):
        self.sent = bytearray()
        self.closed = False

    async def receive(self, max_bytes=65536):
        await anyio.sleep_forever()

    async def send(self, item):
        self.sent += item

    async def send_eof(self):
        pass

    async def aclose(self):
        self.closed = True


class FakeComPort(BaseOption):
    """
    The access server's side of COM-PORT-OPTION.

    Every request is confirmed with the same value unless the server state
    says otherwise: ``replies`` maps a request code to a different reply
    payload, codes in ``mute`` are not answered at all.
    """
    value = COM_PORT_OPTION

    def __init__(self, stream, state):
        super().__init__(stream)
        self.state = state

    async def handle_will(self):
        return True

    async def process_sb(self, buf):
        code, data = buf[0], bytes(buf[1:])
        self.state.requests.append((code, data))
        if code in self.state.mute:
            return
        if code == ComCmd.SIGNATURE_REQ and not data:
            sig = io.BytesIO()
            SignatureControlCmd(self.state.signature).encode(sig)
            data = sig.getvalue()
        data = self.state.replies.get(code, data)
        await self.stream.send_subneg(COM_PORT_OPTION, code + 100, data)


class SilentOption(BaseOption):
    """
    An option handler that never answers.
    """
    value = COM_PORT_OPTION

    def _setup_half(self):
        self.loc = SilentHalfOption(self, True)
        self.rem = SilentHalfOption(self, False)


class SilentBINARY(SilentOption):
    """BINARY, never answered."""
    value = BINARY


class SilentHalfOption(HalfOption):
    async def process_yes(self) -> None:
        pass

    async def process_no(self) -> None:
        pass


@asynccontextmanager
async def access_server(host='127.0.0.1', *, com_port=FakeComPort, binary=stdBINARY,
        echo=True, signature="FakeServer", replies=None, mute=()):
    """
    Run a fake RFC 2217 access server on a free port.

    ``com_port`` is the COM-PORT-OPTION handler class, or ``None`` to
    refuse the option. ``binary`` is the BINARY handler class.
    """
    res = SimpleNamespace(host=host, port=None, streams=[], requests=[],
            received=bytearray(), signature=signature,
            replies=dict(replies or {}), mute=set(mute),
            connected=anyio.Event())

    async def handle(conn):
        async with conn:
            stream = TelnetStream(conn, server=True, log=logging.getLogger("tests.server"))
            stream.opt.add(binary)
            if com_port is FakeComPort:
                stream.opt.add(FakeComPort(stream, res))
            elif com_port is not None:
                stream.opt.add(com_port)
            async with stream:
                res.streams.append(stream)
                res.connected.set()
                try:
                    while True:
                        data = await stream.receive()
                        res.received += data
                        if echo:
                            await stream.send(data)
                except (anyio.EndOfStream, anyio.BrokenResourceError, anyio.ClosedResourceError):
                    pass

    async with await anyio.create_tcp_listener(local_host=host) as listener:
        res.port = listener.extra(anyio.abc.SocketAttribute.local_port)
        async with anyio.create_task_group() as tg:
            tg.start_soon(listener.serve, handle)
            yield res
            tg.cancel_scope.cancel()


__all__ = ('FakeStream', 'FakeByteStream', 'FakeComPort', 'SilentOption', 'SilentBINARY',
           'access_server')
