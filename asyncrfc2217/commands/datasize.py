from ._base import BiMap, ControlCommand, read_byte, write_byte
from ..errors import InvalidArgument, MalformedMessage
from ..settings import DataBits
from ..telopt import ComCmd

_MAP = BiMap(
    (DataBits.FIVE, 5),
    (DataBits.SIX, 6),
    (DataBits.SEVEN, 7),
    (DataBits.EIGHT, 8),
    (DataBits.NINE, 9),
)


class DataBitsControlCmd(ControlCommand):
    """
    SET-DATASIZE, :rfc:`2217`.
    """
    request_code = ComCmd.SET_DATASIZE_REQ
    response_code = ComCmd.SET_DATASIZE_RESP

    def __init__(self, data_bits: DataBits):
        super().__init__(self.request_code)
        wire = _MAP.wire(data_bits) if isinstance(data_bits, DataBits) else None
        if wire is None:
            raise InvalidArgument("Unexpected dataBits value: %r" % (data_bits,))
        self._wire = wire

    @property
    def data_bits(self) -> DataBits:
        return _MAP.domain(self._wire)

    def encode(self, output):
        if not _MAP.has_wire(self._wire):
            raise RuntimeError("Data size %r was never validated" % (self._wire,))
        write_byte(output, self._wire)

    @classmethod
    def decode(cls, input):
        self = cls._response()
        self._wire = read_byte(input)
        if self._wire < 1:
            raise MalformedMessage("The received data size is invalid! Expected a value greater or equal to 1, got: >%d<" % (self._wire,), self._wire)
        if not _MAP.has_wire(self._wire):
            raise MalformedMessage("Unexpected dataBits value: %d" % (self._wire,), self._wire)
        return self

    def _payload(self):
        return (self._wire,)

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.data_bits)
