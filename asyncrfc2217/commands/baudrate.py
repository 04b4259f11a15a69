import struct

from ._base import ControlCommand, read_exactly
from ..errors import InvalidArgument, MalformedMessage
from ..telopt import ComCmd

MAX_BAUDRATE = 2**31 - 1


class BaudrateControlCmd(ControlCommand):
    """
    SET-BAUDRATE, :rfc:`2217`: four bytes, network byte order.
    """
    request_code = ComCmd.SET_BAUDRATE_REQ
    response_code = ComCmd.SET_BAUDRATE_RESP

    def __init__(self, baudrate: int):
        super().__init__(self.request_code)
        if not isinstance(baudrate, int) or not 1 <= baudrate <= MAX_BAUDRATE:
            raise InvalidArgument("The baudrate must not be less than 1! Got: >%r<" % (baudrate,))
        self._baudrate = baudrate

    @property
    def baudrate(self) -> int:
        return self._baudrate

    def encode(self, output):
        output.write(struct.pack(">i", self._baudrate))

    @classmethod
    def decode(cls, input):
        self = cls._response()
        self._baudrate, = struct.unpack(">i", read_exactly(input, 4))
        if self._baudrate < 1:
            raise MalformedMessage("The received baudrate is invalid! Expected a value greater or equal to 1, got: >%d<" % (self._baudrate,), self._baudrate)
        return self

    def _payload(self):
        return (self._baudrate,)
