from typing import Optional

from ._base import BiMap, ControlCommand, read_byte, write_byte
from ..errors import InvalidArgument, MalformedMessage
from ..settings import Parity
from ..telopt import ComCmd

_MAP = BiMap(
    (Parity.NONE, 1),
    (Parity.ODD, 2),
    (Parity.EVEN, 3),
    (Parity.MARK, 4),
    (Parity.SPACE, 5),
)


class ParityControlCmd(ControlCommand):
    """
    SET-PARITY, :rfc:`2217`.

    A response keeps the raw byte; `parity` is ``None`` if the byte has
    no meaning to us (like 0, "request current value").
    """
    request_code = ComCmd.SET_PARITY_REQ
    response_code = ComCmd.SET_PARITY_RESP

    def __init__(self, parity: Parity):
        super().__init__(self.request_code)
        wire = _MAP.wire(parity) if isinstance(parity, Parity) else None
        if wire is None:
            raise InvalidArgument("Unexpected parity value: %r" % (parity,))
        self._wire = wire

    @property
    def parity(self) -> Optional[Parity]:
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
        if self._wire < 0:
            raise MalformedMessage("Unexpected parity value: %d" % (self._wire,), self._wire)
        return self

    def _payload(self):
        return (self._wire,)
