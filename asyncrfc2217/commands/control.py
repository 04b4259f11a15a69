from ._base import BiMap, ControlCommand, read_byte, write_byte
from ..errors import InvalidArgument, MalformedMessage
from ..settings import FlowControl
from ..telopt import ComCmd

# Out-only and in-out share a wire byte. The in-out variant goes last so
# that it wins the reverse lookup.
_MAP = BiMap(
    (FlowControl.NONE, 1),

    (FlowControl.XONXOFF_OUT, 2),
    (FlowControl.XONXOFF_IN_OUT, 2),
    (FlowControl.XONXOFF_IN, 15),

    (FlowControl.RTSCTS_OUT, 3),
    (FlowControl.RTSCTS_IN_OUT, 3),
    (FlowControl.RTSCTS_IN, 16),
)

_REPLACEMENT = {
    FlowControl.RTSCTS_OUT: FlowControl.RTSCTS_IN_OUT,
    FlowControl.XONXOFF_OUT: FlowControl.XONXOFF_IN_OUT,
}


class FlowControlCmd(ControlCommand):
    """
    SET-CONTROL, :rfc:`2217`, restricted to the flow control settings.
    """
    request_code = ComCmd.SET_CONTROL_REQ
    response_code = ComCmd.SET_CONTROL_RESP

    def __init__(self, flow_control: FlowControl):
        super().__init__(self.request_code)
        if not isinstance(flow_control, FlowControl):
            raise InvalidArgument("Unexpected flowControl value: %r" % (flow_control,))
        if flow_control in _REPLACEMENT:
            raise InvalidArgument("%s is not allowed, use %s instead." % (flow_control, _REPLACEMENT[flow_control]))
        self._wire = _MAP.wire(flow_control)

    @property
    def flow_control(self) -> FlowControl:
        return _MAP.domain(self._wire)

    def encode(self, output):
        if not _MAP.has_wire(self._wire):
            raise RuntimeError("Flow control %r was never validated" % (self._wire,))
        write_byte(output, self._wire)

    @classmethod
    def decode(cls, input):
        self = cls._response()
        self._wire = read_byte(input)
        if not _MAP.has_wire(self._wire):
            raise MalformedMessage("Unexpected Flow Control value: %d" % (self._wire,), self._wire)
        return self

    def _payload(self):
        return (self._wire,)

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.flow_control)
