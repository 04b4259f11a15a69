"""Test the telnet transport."""
import anyio
import pytest

from asyncrfc2217.options import BaseOption, fullBINARY
from asyncrfc2217.stream import TelnetStream
from asyncrfc2217.telopt import (BINARY, COM_PORT_OPTION, DO, DONT, IAC, NOP,
                                 SB, SE, WILL, WONT)
from tests.accessories import FakeByteStream


class RecordingOption(BaseOption):
    value = COM_PORT_OPTION

    def __init__(self, stream):
        super().__init__(stream)
        self.got = []

    async def process_sb(self, buf):
        self.got.append(bytes(buf))


async def feed(stream, data):
    res = bytearray()
    for b in data:
        if await stream.feed_byte(b):
            res.append(b)
    return bytes(res)


def new_stream(**kw):
    conn = FakeByteStream()
    stream = TelnetStream(conn, client=True, **kw)
    stream.reset()
    return stream, conn


def test_client_or_server():
    with pytest.raises(TypeError):
        TelnetStream(FakeByteStream())
    with pytest.raises(TypeError):
        TelnetStream(FakeByteStream(), client=True, server=True)


@pytest.mark.anyio
async def test_inband_data():
    stream, _ = new_stream()
    assert await feed(stream, b'abc') == b'abc'
    assert await feed(stream, bytes([1, IAC, IAC, 2])) == b'\x01\xff\x02'
    assert await feed(stream, bytes([IAC, NOP, 3])) == b'\x03'


@pytest.mark.anyio
async def test_negotiation_notified():
    # given
    stream, conn = new_stream()
    seen = []

    async def cb(cmd, opt):
        seen.append((cmd, opt))
    stream.add_negotiation_callback(cb)

    # exercise
    assert await feed(stream, bytes([IAC, WILL, BINARY, IAC, DO, 99])) == b''

    # verify: unknown options are refused
    assert seen == [(WILL, BINARY), (DO, 99)]
    assert bytes(conn.sent) == bytes([IAC, DONT, BINARY, IAC, WONT, 99])


@pytest.mark.anyio
async def test_subneg_dispatched():
    stream, _ = new_stream()
    opt = stream.opt.add(RecordingOption)

    data = bytes([IAC, SB, COM_PORT_OPTION, 0x41, IAC, IAC, 0x42, IAC, SE]) + b'x'
    assert await feed(stream, data) == b'x'
    assert opt.got == [b'A\xffB']


@pytest.mark.anyio
async def test_subneg_without_se():
    stream, _ = new_stream()
    opt = stream.opt.add(RecordingOption)
    seen = []

    async def cb(cmd, opt):
        seen.append((cmd, opt))
    stream.add_negotiation_callback(cb)

    await feed(stream, bytes([IAC, SB, COM_PORT_OPTION, 1, 2, IAC, WONT, BINARY]))
    assert opt.got == [b'\x01\x02']
    assert seen == [(WONT, BINARY)]


@pytest.mark.anyio
async def test_send_escapes():
    stream, conn = new_stream(force_binary=True)
    await stream.send(b'a\xffb')
    assert bytes(conn.sent) == b'a\xff\xffb'


@pytest.mark.anyio
async def test_send_needs_binary():
    stream, conn = new_stream()
    await stream.send(b'plain')
    with pytest.raises(TypeError):
        await stream.send(b'\x80')
    assert bytes(conn.sent) == b'plain'


@pytest.mark.anyio
async def test_send_subneg():
    stream, conn = new_stream()
    await stream.send_subneg(COM_PORT_OPTION, 1, bytes([0, 255]))
    assert bytes(conn.sent) == bytes([IAC, SB, COM_PORT_OPTION, 1, 0, IAC, IAC, IAC, SE])


@pytest.mark.anyio
async def test_binary_over_tcp(server):
    # given
    async with server() as srv:
        async with await anyio.connect_tcp(srv.host, srv.port) as conn:
            stream = TelnetStream(conn, client=True)
            stream.opt.add(fullBINARY)
            async with stream:
                with anyio.fail_after(2):
                    await stream.opt[BINARY].send_will()
                    await stream.opt[BINARY].send_do()
                    assert stream.outbinary and stream.inbinary

                    # exercise
                    data = bytes(range(256))
                    await stream.send(data)
                    got = b''
                    while len(got) < len(data):
                        got += await stream.receive()

    # verify
    assert got == data
    assert bytes(srv.received) == data


@pytest.mark.anyio
async def test_teardown_once(server):
    calls = []

    async def td():
        calls.append(1)

    async with server() as srv:
        async with await anyio.connect_tcp(srv.host, srv.port) as conn:
            stream = TelnetStream(conn, client=True)
            stream.add_teardown_callback(td)
            async with stream:
                await srv.connected.wait()
                # the server goes away
                await srv.streams[0].aclose()
                with anyio.fail_after(2):
                    with pytest.raises(anyio.EndOfStream):
                        await stream.receive()
                    while not calls:
                        await anyio.sleep(0.01)
    assert calls == [1]
    with pytest.raises(anyio.ClosedResourceError):
        stream.add_teardown_callback(td)


@pytest.mark.anyio
async def test_teardown_on_exit(server):
    calls = []

    async def td():
        calls.append(1)

    async with server() as srv:
        async with await anyio.connect_tcp(srv.host, srv.port) as conn:
            stream = TelnetStream(conn, client=True)
            stream.add_teardown_callback(td)
            async with stream:
                pass
    assert calls == [1]


@pytest.mark.anyio
async def test_error_not_wrapped(server):
    async with server() as srv:
        async with await anyio.connect_tcp(srv.host, srv.port) as conn:
            with pytest.raises(KeyError):
                async with TelnetStream(conn, client=True):
                    raise KeyError("foo")
