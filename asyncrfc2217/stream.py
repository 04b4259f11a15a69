"""Module provides :class:`TelnetStream`, a minimal telnet transport."""
# std imports
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Awaitable, Callable, List

import anyio
import anyio.abc

# local imports
from .telopt import Cmd, BINARY, DO, DONT, IAC, SB, SE, WILL, WONT, name_command, name_option
from .accessories import CtxObj
from .options import StreamOptions

__all__ = ('TelnetStream',)

# list of IAC commands needing 3+ bytes
_iac_multibyte = {DO, DONT, WILL, WONT, SB}

bIAC = bytes([IAC])

NegotiationCallback = Callable[[Cmd, int], Awaitable[None]]
TeardownCallback = Callable[[], Awaitable[None]]


class TS(Enum):
    DATA="data"  # normal data flow
    IAC="iac"  # IAC
    OPT="opt"  # IAC+multibyte (cmd in _iac_multibyte)
    SUBNEG="subneg"  # IAC+SB+OPT
    SUBIAC="subiac"  # IAC+SB+OPT+…+IAC


class TelnetStream(CtxObj, anyio.abc.ByteStream):
    """
    Basic TELNET protocol handler, as far as a COM port client needs it.

    Option handling is delegated to the handlers in ``self.opt``; add
    yours before entering the context. Anything else is refused.

    Usage::

        async with await anyio.connect_tcp(host, port) as conn:
            stream = TelnetStream(conn, client=True)
            stream.opt.add(fullBINARY)
            async with stream:
                await stream.send(b"Hello")
                print(await stream.receive())
    """
    _buffer = b''
    _recv_cmd = None

    def __init__(self, stream: anyio.abc.ByteStream, *,
            log=None, force_binary=False, client=False, server=False):
        """
        A wrapper for the telnet protocol. Telnet IAC Interpreter.

        :param logging.Logger log: target logger, if None is given, one is
            created using the namespace ``'asyncrfc2217.stream'``.
        :param bool force_binary: When ``True``, 8-bit data may be sent
            even if BINARY, :rfc:`856`, has not been negotiated.
        :param bool client: Whether the IAC interpreter should react from
            the client point of view.
        :param bool server: Whether the IAC interpreter should react from
            the server point of view.

        One of ``client`` or ``server`` must be ``True``.
        """
        self._stream = stream
        self.log = log or logging.getLogger(__name__)
        self.force_binary = force_binary

        if client == server:
            raise TypeError("You must set either `client` or `server`.")
        self._server = server

        self.opt = StreamOptions(self)

        self._negotiation_callbacks: List[NegotiationCallback] = []
        self._teardown_callbacks: List[TeardownCallback] = []
        self._torn_down = False

        # write lock
        self._write_lock = anyio.Lock()

    @property
    def server(self):
        """Whether this stream is from the server's point of view."""
        return bool(self._server)

    @property
    def client(self):
        """Whether this stream is from the client's point of view."""
        return bool(not self._server)

    def add_negotiation_callback(self, callback: NegotiationCallback):
        """
        Call ``await callback(cmd, opt)`` whenever the peer sends
        WILL/WONT/DO/DONT. Option handlers have processed the message by
        then.
        """
        self._negotiation_callbacks.append(callback)

    def add_teardown_callback(self, callback: TeardownCallback):
        """
        Call ``await callback()`` when this connection ends, i.e. on
        context exit or when the peer closes the connection, whichever
        happens first.
        """
        if self._torn_down:
            raise anyio.ClosedResourceError
        self._teardown_callbacks.append(callback)

    def reset(self):
        #: Sub-negotiation buffer
        self._recv_sb_buffer = bytearray()

        # receiver state
        self._recv_state = TS.DATA

        for opt in self.opt.values():
            opt.reset()

    @asynccontextmanager
    async def _ctx(self):
        self.reset()
        err = None

        async with anyio.create_task_group() as tg:
            self._write_queue, self._read_queue = anyio.create_memory_object_stream(100)
            tg.start_soon(self._receive_loop)
            try:
                await self.setup(tg)
                yield self
            except Exception as exc:
                # re-raised below; the taskgroup would wrap it
                err = exc
            finally:
                tg.cancel_scope.cancel()
                with anyio.CancelScope(shield=True):
                    await self.teardown()
        if err is not None:
            raise err

    async def setup(self, tg):
        """
        Called when starting this connection.
        """
        for opt in list(self.opt.values()):
            await opt.setup(tg)

    async def teardown(self):
        """
        Called when closing down this connection, after all background
        tasks have been cancelled.

        Please try hard not to raise an exception.
        """
        for opt in list(self.opt.values()):
            opt.teardown()
        await self._run_teardown_callbacks()

    async def _run_teardown_callbacks(self):
        if self._torn_down:
            return
        self._torn_down = True
        for cb in self._teardown_callbacks:
            try:
                await cb()
            except Exception:
                self.log.exception("Teardown callback %r failed", cb)
        self._teardown_callbacks.clear()

    # receiver

    async def _receive_loop(self):
        q = self._write_queue
        while True:
            buf = bytearray()
            try:
                b = await self._stream.receive(4096)
            except (anyio.EndOfStream, anyio.ClosedResourceError, anyio.BrokenResourceError):
                self.log.debug("IN: EOF")
                # readers see EOF only after the callbacks have run.
                # The option halves stay as they are until the context ends.
                with anyio.CancelScope(shield=True):
                    await self._run_teardown_callbacks()
                await q.aclose()
                return
            for x in b:
                if await self.feed_byte(x):
                    buf.append(x)
            if buf:
                await q.send(bytes(buf))

    async def receive(self, max_bytes=4096) -> bytes:
        """
        Return the next chunk of in-band data.

        Raises `anyio.EndOfStream` when the peer has closed the connection.
        """
        buf = self._buffer
        if not buf:
            try:
                buf = await self._read_queue.receive()
            except anyio.ClosedResourceError:
                raise anyio.EndOfStream from None
        buf, self._buffer = buf[:max_bytes], buf[max_bytes:]
        return buf

    async def feed_byte(self, byte) -> bool:
        """
        Feed a single byte into Telnet option state machine.

        :param int byte: an 8-bit byte value as integer (0-255).
        :rtype bool: Whether the given ``byte`` is "in band", that is, should
            be passed to the reader.  ``False`` is returned for an ``IAC``
            command for each byte until its completion.
        """
        if self._recv_state == TS.DATA:
            if byte == IAC:
                self._recv_state = TS.IAC
                return False
            else:
                return True

        elif self._recv_state == TS.IAC:
            if byte == IAC:
                self._recv_state = TS.DATA
                return True
            elif byte in _iac_multibyte:
                self._recv_cmd = Cmd(byte)
                self._recv_state = TS.OPT
            else:
                self.log.debug("recv IAC %s: ignored", name_command(byte))
                self._recv_state = TS.DATA
            return False

        elif self._recv_state == TS.OPT:
            if self._recv_cmd == SB:
                self._recv_cmd = byte
                self._recv_state = TS.SUBNEG
                self._recv_sb_buffer = bytearray()
            else:
                self._recv_state = TS.DATA
                await self._recv_opt(self._recv_cmd, byte)
            return False

        elif self._recv_state == TS.SUBNEG:
            if byte == IAC:
                self._recv_state = TS.SUBIAC
            else:
                self._recv_sb_buffer.append(byte)
            return False

        elif self._recv_state == TS.SUBIAC:
            if byte == IAC:
                self._recv_sb_buffer.append(byte)
                self._recv_state = TS.SUBNEG
            elif byte == SE:
                self._recv_state = TS.DATA
                buf, self._recv_sb_buffer = self._recv_sb_buffer, bytearray()
                await self.handle_subneg(self._recv_cmd, buf)
            else:
                # The standard says to just ignore the IAC but it's better
                # to treat this as if the sender forgot the IAC+SE.
                self.log.warning("recv: protocol error: IAC SB %s <%d> IAC %s: no IAC+SE?",
                        name_option(self._recv_cmd), len(self._recv_sb_buffer), name_command(byte))
                self._recv_state = TS.IAC
                buf, self._recv_sb_buffer = self._recv_sb_buffer, bytearray()
                await self.handle_subneg(self._recv_cmd, buf)
                return await self.feed_byte(byte)
            return False

        else:
            raise RuntimeError("Unknown Telnet state %r" % (self._recv_state,))

    async def _recv_opt(self, cmd, opt):
        self.log.debug('recv IAC %s %s', Cmd(cmd).name, name_option(opt))
        hdl = self.opt[opt]
        if cmd == DO:
            await hdl.process_do()
        elif cmd == DONT:
            await hdl.process_dont()
        elif cmd == WILL:
            await hdl.process_will()
        elif cmd == WONT:
            await hdl.process_wont()
        else:
            raise RuntimeError("? received %r" % cmd)

        for cb in self._negotiation_callbacks:
            await cb(cmd, opt)

    async def handle_subneg(self, opt, buf):
        """
        Callback for end of sub-negotiation buffer.

        :param bytes buf: Message buffer, without the option byte.
        """
        self.log.debug("recv IAC SB %s %r", name_option(opt), bytes(buf))
        await self.opt[opt].process_sb(buf)

    # sender

    async def send(self, buf, *, escape_iac=True):
        """
        Write bytes to transport, conditionally escaping IAC.

        :param bytes buf: bytes to write to transport.
        :param bool escape_iac: whether bytes in buffer ``buf`` should be
            escape bytes ``IAC``.  This should be set ``False`` for direct
            writes of ``IAC`` commands.
        """
        if escape_iac:
            # If force_binary is unset, we enforce strict adherence of
            # BINARY protocol negotiation.
            if not self.force_binary and not self.outbinary:
                # check each byte position by index to report location
                for position, byte in enumerate(buf):
                    if byte >= 128:
                        raise TypeError(
                            f'Byte value {byte!r} at index {position} not valid, '
                            f'send IAC WILL BINARY first: buf={buf!r}')
            buf = self._escape_iac(buf)

        async with self._write_lock:
            await self._stream.send(buf)

    @staticmethod
    def _escape_iac(buf):
        r"""Replace bytes in buf ``IAC`` (``b'\xff'``) by ``IAC IAC``."""
        return bytes(buf).replace(bIAC, bIAC + bIAC)

    async def send_subneg(self, opt, *bufs):
        """
        Send a subnegotiation.

        ``bufs`` may be bytes or single integers.
        """
        buf = self._escape_iac(b''.join(bytes([b]) if isinstance(b, int) else bytes(b)
            for b in bufs))
        self.log.debug("send IAC SB %s %r", name_option(opt), buf)
        await self.send(bytes([IAC, SB, opt])+buf+bytes([IAC, SE]), escape_iac=False)

    async def send_iac(self, *bufs):
        """
        Send a command starting with IAC (byte value 0xFF).

        Try not to call this to transmit SB/SE.
        """
        buf = self._escape_iac(b''.join(bytes([b]) if isinstance(b, int) else b
            for b in bufs))
        if len(bufs) == 1:
            self.log.debug("send IAC %s", Cmd(bufs[0]).name)
        else:
            self.log.debug("send IAC %s %s", Cmd(bufs[0]).name, name_option(bufs[1]))

        assert buf, buf
        await self.send(bIAC+buf, escape_iac=False)

    async def send_eof(self):
        await self._stream.send_eof()

    async def aclose(self):
        await self._stream.aclose()

    # Our protocol methods

    @property
    def inbinary(self):
        """
        Whether binary data is expected to be received on reader, :rfc:`856`.
        """
        return self.opt[BINARY].has_remote

    @property
    def outbinary(self):
        """Whether binary data may be written to the writer, :rfc:`856`."""
        return self.opt[BINARY].has_local

    @property
    def extra_attributes(self):
        return self._stream.extra_attributes

    def __repr__(self):
        """Description of stream option state."""
        info = [repr(opt) for opt in self.opt.values()]
        return '<%s:%s %s>' % (self.__class__.__name__,
                'server' if self.server else 'client', ' '.join(info))
