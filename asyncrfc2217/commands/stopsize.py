from typing import Optional

from ._base import BiMap, ControlCommand, read_byte, write_byte
from ..errors import InvalidArgument, MalformedMessage
from ..settings import StopBits
from ..telopt import ComCmd

_MAP = BiMap(
    (StopBits.ONE, 1),
    (StopBits.ONE_POINT_FIVE, 2),
    (StopBits.TWO, 3),
)


class StopBitsControlCmd(ControlCommand):
    """
    SET-STOPSIZE, :rfc:`2217`.

    Like parity, a response keeps the raw byte and `stop_bits` is
    ``None`` for bytes we don't know.
    """
    request_code = ComCmd.SET_STOPSIZE_REQ
    response_code = ComCmd.SET_STOPSIZE_RESP

    def __init__(self, stop_bits: StopBits):
        super().__init__(self.request_code)
        wire = _MAP.wire(stop_bits) if isinstance(stop_bits, StopBits) else None
        if wire is None:
            raise InvalidArgument("Unexpected stopBits value: %r" % (stop_bits,))
        self._wire = wire

    @property
    def stop_bits(self) -> Optional[StopBits]:
        return _MAP.domain(self._wire)

    @property
    def wire_value(self) -> int:
        return self._wire

    def encode(self, output):
        write_byte(output, self._wire)

    @classmethod
    def decode(cls, input):
        self = cls._response()
        self._wire = read_byte(input)
        if self._wire < 1:
            raise MalformedMessage("The received stop size is invalid! Expected a value greater or equal to 1, got: >%d<" % (self._wire,), self._wire)
        return self

    def _payload(self):
        return (self._wire,)
