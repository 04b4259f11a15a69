"""
A serial port behind an RFC 2217 access server.
"""
import collections
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import anyio
import outcome

from .commands import (BaudrateControlCmd, ControlCommand, DataBitsControlCmd,
                       FlowControlCmd, ParityControlCmd, PurgeDataControlCmd,
                       SignatureControlCmd, StopBitsControlCmd)
from .errors import InvalidArgument, NoResponseError, SettingRejected
from .negotiation import NegotiationTracker
from .options import ComPortOption, fullBINARY
from .sender import CommandSender, NoResponse
from .settings import PurgeTarget, SerialPortSettings
from .stream import TelnetStream
from .telopt import BINARY, COM_PORT_OPTION

__all__ = ('Rfc2217SerialPort', 'SerialConnection', 'CONFIG')

CONFIG = collections.namedtuple('CONFIG', [
    'port', 'negotiation_timeout', 'response_timeout'])(
        port=2217, negotiation_timeout=5.0, response_timeout=1.0)


class Rfc2217SerialPort:
    """
    A remote serial port.

    :param str host: the access server's host name or address.
    :param int port: its TCP port.
    :param float negotiation_timeout: seconds to wait for each telnet
        option to be accepted.
    :param float response_timeout: seconds to wait for the confirmation
        of a COM-PORT-OPTION command.
    :param logging.Logger log: target logger, if None is given, one is
        created using the namespace ``'asyncrfc2217.port'``.
    :param stream_factory: builds the telnet stream on top of the TCP
        connection. It's called like `TelnetStream`.

    Usage::

        port = Rfc2217SerialPort("ts.example.com", 7001)
        async with port.open(SerialPortSettings(bauds=115200)) as conn:
            await conn.write(b"AT\\r")
            print(await conn.read())
    """
    def __init__(self, host: str, port: int = CONFIG.port, *,
            negotiation_timeout: float = CONFIG.negotiation_timeout,
            response_timeout: float = CONFIG.response_timeout,
            log=None, stream_factory=TelnetStream):
        if not host:
            raise InvalidArgument("The parameter >host< must not be empty!")
        if not isinstance(port, int) or not 0 < port < 65536:
            raise InvalidArgument("The port must be in the range [1..65535]! Got: %r" % (port,))
        if negotiation_timeout < 0:
            raise InvalidArgument("The negotiation timeout must not be negative! Got: %r" % (negotiation_timeout,))
        if response_timeout < 0:
            raise InvalidArgument("The response timeout must not be negative! Got: %r" % (response_timeout,))

        self.host = host
        self.port = port
        self.negotiation_timeout = negotiation_timeout
        self.response_timeout = response_timeout
        self.log = log or logging.getLogger(__name__)
        self.stream_factory = stream_factory

    @property
    def port_name(self) -> str:
        return "RFC2217@%s:%d" % (self.host, self.port)

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self.port_name)

    @asynccontextmanager
    async def open(self, settings: Optional[SerialPortSettings] = None):
        """
        Connect to the access server, set up the line, and yield a
        `SerialConnection`.

        The connection is closed when the context ends.
        """
        if settings is None:
            settings = SerialPortSettings()
        requests = self._setting_requests(settings)

        self.log.debug("Opening %s with %s", self.port_name, settings)
        async with await anyio.connect_tcp(self.host, self.port) as conn:
            stream = self.stream_factory(conn, client=True, log=self.log)
            tracker = NegotiationTracker(stream, log=self.log)
            sender = CommandSender(stream, timeout=self.response_timeout, log=self.log)
            stream.opt.add(fullBINARY)
            stream.opt.add(ComPortOption(stream, sender))

            async with stream:
                await self._negotiate(tracker)
                for req in requests:
                    await send_and_validate(sender, req)
                self.log.info("Opened %s", self.port_name)

                serial = SerialConnection(self, stream, sender)
                try:
                    yield serial
                finally:
                    serial._closed = True

    @staticmethod
    def _setting_requests(settings: SerialPortSettings) -> List[ControlCommand]:
        return [
            BaudrateControlCmd(settings.bauds),
            DataBitsControlCmd(settings.data_bits),
            ParityControlCmd(settings.parity),
            StopBitsControlCmd(settings.stop_bits),
            FlowControlCmd(settings.flow_control),
        ]

    async def _negotiate(self, tracker: NegotiationTracker):
        """
        Wait for the access server to accept COM-PORT-OPTION and BINARY,
        and to send BINARY.

        A failure stops the other waits at once. If several fail, the
        first one, in that order, is raised.
        """
        waits = (
            (tracker.await_will_accept, COM_PORT_OPTION),
            (tracker.await_will_accept, BINARY),
            (tracker.await_will_send, BINARY),
        )
        results = [None] * len(waits)

        async def run(i, proc, opt):
            try:
                results[i] = outcome.Value(await proc(opt, self.negotiation_timeout))
            except Exception as exc:
                results[i] = outcome.Error(exc)
                tg.cancel_scope.cancel()

        async with anyio.create_task_group() as tg:
            for i, (proc, opt) in enumerate(waits):
                tg.start_soon(run, i, proc, opt)
        for res in results:
            # None: cancelled because another wait failed
            if res is not None:
                res.unwrap()


async def send_and_validate(sender: CommandSender, req: ControlCommand) -> ControlCommand:
    """
    Send a setting and check that the access server confirms exactly that.
    """
    resp = await sender.send(req)
    if resp is NoResponse:
        raise NoResponseError(req)
    if resp != req:
        raise SettingRejected(req, resp)
    return resp


class SerialConnection:
    """
    An open serial line. Returned by `Rfc2217SerialPort.open`.
    """
    def __init__(self, port: Rfc2217SerialPort, stream: TelnetStream, sender: CommandSender):
        self.port = port
        self._stream = stream
        self._sender = sender
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check(self):
        if self._closed:
            raise anyio.ClosedResourceError

    async def read(self) -> bytes:
        """
        Return the next chunk of data from the serial line.

        Raises `anyio.EndOfStream` when the access server disconnects.
        """
        self._check()
        return await self._stream.receive()

    async def write(self, data: bytes):
        self._check()
        await self._stream.send(data)

    async def signature(self, text: str = "") -> str:
        """
        Exchange signatures with the access server.

        Returns the server's signature.
        """
        self._check()
        req = SignatureControlCmd(text)
        resp = await self._sender.send(req)
        if resp is NoResponse:
            raise NoResponseError(req)
        return resp.signature

    async def purge(self, target: PurgeTarget = PurgeTarget.BOTH):
        """Tell the access server to drop its buffered data."""
        self._check()
        await send_and_validate(self._sender, PurgeDataControlCmd(target))

    async def aclose(self):
        if self._closed:
            return
        self._closed = True
        await self._stream.aclose()

    def __repr__(self):
        return "<%s %s%s>" % (self.__class__.__name__, self.port.port_name,
                              " closed" if self._closed else "")
