"""
Framing of COM-PORT-OPTION sub-negotiation payloads.

A payload is ``[COM_PORT_OPTION, code, data…]``; the transport adds the
``IAC SB`` … ``IAC SE`` envelope and escapes IAC bytes.
"""
import io
from typing import BinaryIO, Dict, List, Type

from ._base import ControlCommand, read_exactly
from .baudrate import BaudrateControlCmd
from .control import FlowControlCmd
from .datasize import DataBitsControlCmd
from .parity import ParityControlCmd
from .purge import PurgeDataControlCmd
from .signature import SignatureControlCmd
from .stopsize import StopBitsControlCmd
from ..accessories import to_unsigned
from ..errors import InvalidArgument, MalformedMessage, UnsupportedCommand
from ..telopt import COM_PORT_OPTION

COMMANDS = (
    SignatureControlCmd,
    BaudrateControlCmd,
    DataBitsControlCmd,
    ParityControlCmd,
    StopBitsControlCmd,
    FlowControlCmd,
    PurgeDataControlCmd,
)


def encode_request(cmd: ControlCommand) -> List[int]:
    """
    Turn a request into the sub-negotiation payload, as unsigned byte
    values.
    """
    if cmd is None:
        raise InvalidArgument("The parameter >cmd< must not be None!")
    buf = io.BytesIO()
    buf.write(bytes((COM_PORT_OPTION, cmd.code)))
    cmd.encode(buf)
    return to_unsigned(buf.getvalue())


class ResponseDecoder:
    """
    Decodes server responses, dispatching on the command code.
    """
    def __init__(self, commands=COMMANDS):
        self._kinds: Dict[int, Type[ControlCommand]] = {}
        for kind in commands:
            self.register(kind)

    def register(self, kind: Type[ControlCommand]):
        self._kinds[int(kind.response_code)] = kind

    def decode(self, input: BinaryIO) -> ControlCommand:
        """
        Read one response from ``input``, which must start with the
        COM-PORT-OPTION byte.
        """
        if input is None:
            raise InvalidArgument("The parameter >input< must not be None!")
        opt, code = read_exactly(input, 2)
        if opt != COM_PORT_OPTION:
            raise MalformedMessage("Unexpected telnet option! Got: %d" % (opt,), opt)
        try:
            kind = self._kinds[code]
        except KeyError:
            raise UnsupportedCommand(code) from None
        return kind.decode(input)

    def decode_bytes(self, buf: bytes) -> ControlCommand:
        return self.decode(io.BytesIO(buf))
