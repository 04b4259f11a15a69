"""Test the COM-PORT-OPTION command payloads."""
import io

import pytest

from asyncrfc2217.commands import (BaudrateControlCmd, ControlCommand,
                                   DataBitsControlCmd, FlowControlCmd,
                                   ParityControlCmd, PurgeDataControlCmd,
                                   SignatureControlCmd, StopBitsControlCmd)
from asyncrfc2217.errors import InvalidArgument, MalformedMessage
from asyncrfc2217.settings import (DataBits, FlowControl, Parity, PurgeTarget,
                                   StopBits)


def encode(cmd):
    buf = io.BytesIO()
    cmd.encode(buf)
    return buf.getvalue()


def decode(cls, data):
    return cls.decode(io.BytesIO(data))


# base class

def test_code_range():
    with pytest.raises(InvalidArgument) as exc:
        ControlCommand(90)
    assert "[0..12] or [100..112]" in str(exc.value)
    for code in (-1, 13, 99, 113):
        with pytest.raises(InvalidArgument):
            ControlCommand(code)

    assert ControlCommand(10).code == 10
    assert ControlCommand(112).is_response


def test_abstract():
    cmd = ControlCommand(10)
    with pytest.raises(NotImplementedError):
        cmd.encode(io.BytesIO())
    with pytest.raises(NotImplementedError):
        ControlCommand.decode(io.BytesIO())


def test_equality():
    assert BaudrateControlCmd(9600) == BaudrateControlCmd(9600)
    assert hash(BaudrateControlCmd(9600)) == hash(BaudrateControlCmd(9600))
    assert BaudrateControlCmd(9600) != BaudrateControlCmd(4800)
    assert ParityControlCmd(Parity.NONE) != DataBitsControlCmd(DataBits.EIGHT)


# signature

def test_signature_encode():
    assert encode(SignatureControlCmd("AB")) == b'\x00A\x00B'
    assert encode(SignatureControlCmd("")) == b''
    assert SignatureControlCmd().code == 0


def test_signature_escapes_iac():
    assert encode(SignatureControlCmd("\u00ff")) == b'\x00\xff\xff'
    assert encode(SignatureControlCmd("\uffff")) == b'\xff\xff\xff\xff'


@pytest.mark.parametrize("text", ["", "Portserver 1.0", "\u00ff\uffff\u00ff", "\U0001F600"])
def test_signature_roundtrip(text):
    resp = decode(SignatureControlCmd, encode(SignatureControlCmd(text)))
    assert resp.signature == text
    assert resp.code == 100
    assert resp == SignatureControlCmd(text)


@pytest.mark.parametrize("data", [
    b'\x00\xff',  # lone IAC
    b'\x00A\x00',  # odd length
    b'\xd8\x00',  # unpaired surrogate
])
def test_signature_malformed(data):
    with pytest.raises(MalformedMessage):
        decode(SignatureControlCmd, data)


def test_signature_type():
    with pytest.raises(InvalidArgument):
        SignatureControlCmd(b"bytes")


# baud rate

def test_baudrate_encode():
    assert encode(BaudrateControlCmd(9600)) == b'\x00\x00\x25\x80'
    assert encode(BaudrateControlCmd(2**31-1)) == b'\x7f\xff\xff\xff'


def test_baudrate_decode():
    resp = decode(BaudrateControlCmd, b'\x00\x01\xc2\x00')
    assert resp.baudrate == 115200
    assert resp.code == 101
    assert resp.is_response
    assert resp == BaudrateControlCmd(115200)


@pytest.mark.parametrize("data,value", [
    (b'\x00\x00\x00\x00', 0),
    (b'\xff\xff\xff\xff', -1),
])
def test_baudrate_invalid(data, value):
    with pytest.raises(MalformedMessage) as exc:
        decode(BaudrateControlCmd, data)
    assert exc.value.value == value


def test_baudrate_truncated():
    with pytest.raises(MalformedMessage):
        decode(BaudrateControlCmd, b'\x00\x25')


@pytest.mark.parametrize("bauds", [0, -1, 2**31, 9600.0])
def test_baudrate_bad_request(bauds):
    with pytest.raises(InvalidArgument):
        BaudrateControlCmd(bauds)


# data bits

def test_databits():
    for bits in DataBits:
        assert encode(DataBitsControlCmd(bits)) == bytes([int(bits)])
        resp = decode(DataBitsControlCmd, bytes([int(bits)]))
        assert resp.data_bits is bits
        assert resp.code == 102


@pytest.mark.parametrize("data", [b'\x00', b'\x04', b'\x0a', b'\xff'])
def test_databits_invalid(data):
    with pytest.raises(MalformedMessage):
        decode(DataBitsControlCmd, data)


def test_databits_bad_request():
    with pytest.raises(InvalidArgument):
        DataBitsControlCmd(8)


def test_databits_unvalidated():
    cmd = DataBitsControlCmd(DataBits.EIGHT)
    cmd._wire = 42
    with pytest.raises(RuntimeError):
        encode(cmd)


# parity

def test_parity():
    for parity, wire in ((Parity.NONE, 1), (Parity.ODD, 2), (Parity.EVEN, 3),
                         (Parity.MARK, 4), (Parity.SPACE, 5)):
        assert encode(ParityControlCmd(parity)) == bytes([wire])
        resp = decode(ParityControlCmd, bytes([wire]))
        assert resp.parity is parity
        assert resp == ParityControlCmd(parity)
        assert resp.code == 103


def test_parity_unknown():
    resp = decode(ParityControlCmd, b'\x00')
    assert resp.parity is None
    assert resp.wire_value == 0
    assert decode(ParityControlCmd, b'\x09').parity is None


def test_parity_negative():
    with pytest.raises(MalformedMessage) as exc:
        decode(ParityControlCmd, b'\x80')
    assert exc.value.value == -128


def test_parity_bad_request():
    with pytest.raises(InvalidArgument):
        ParityControlCmd("even")


# stop bits

def test_stopbits():
    for stop, wire in ((StopBits.ONE, 1), (StopBits.ONE_POINT_FIVE, 2), (StopBits.TWO, 3)):
        assert encode(StopBitsControlCmd(stop)) == bytes([wire])
        resp = decode(StopBitsControlCmd, bytes([wire]))
        assert resp.stop_bits is stop
        assert resp.code == 104


def test_stopbits_invalid():
    with pytest.raises(MalformedMessage):
        decode(StopBitsControlCmd, b'\x00')
    assert decode(StopBitsControlCmd, b'\x07').stop_bits is None


# flow control

def test_flowcontrol():
    for flow, wire in ((FlowControl.NONE, 1), (FlowControl.XONXOFF_IN_OUT, 2),
                       (FlowControl.RTSCTS_IN_OUT, 3), (FlowControl.XONXOFF_IN, 15),
                       (FlowControl.RTSCTS_IN, 16)):
        assert encode(FlowControlCmd(flow)) == bytes([wire])
        resp = decode(FlowControlCmd, bytes([wire]))
        assert resp.flow_control is flow
        assert resp.code == 105


@pytest.mark.parametrize("flow", [FlowControl.RTSCTS_OUT, FlowControl.XONXOFF_OUT])
def test_flowcontrol_out_only(flow):
    with pytest.raises(InvalidArgument):
        FlowControlCmd(flow)


def test_flowcontrol_invalid():
    with pytest.raises(MalformedMessage) as exc:
        decode(FlowControlCmd, b'\x04')
    assert exc.value.value == 4


# purge

def test_purge():
    assert encode(PurgeDataControlCmd()) == b'\x03'
    assert encode(PurgeDataControlCmd(PurgeTarget.RECEIVE)) == b'\x01'
    assert PurgeDataControlCmd(2).target is PurgeTarget.TRANSMIT

    resp = decode(PurgeDataControlCmd, b'\x01')
    assert resp.target is PurgeTarget.RECEIVE
    assert resp.code == 112


def test_purge_invalid():
    with pytest.raises(InvalidArgument):
        PurgeDataControlCmd(9)
    with pytest.raises(MalformedMessage):
        decode(PurgeDataControlCmd, b'\x07')
