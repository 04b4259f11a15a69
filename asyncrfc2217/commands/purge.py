from ._base import ControlCommand, read_byte, write_byte
from ..errors import InvalidArgument, MalformedMessage
from ..settings import PurgeTarget
from ..telopt import ComCmd


class PurgeDataControlCmd(ControlCommand):
    """
    PURGE-DATA, :rfc:`2217`: drop the access server's buffered data.
    """
    request_code = ComCmd.PURGE_DATA_REQ
    response_code = ComCmd.PURGE_DATA_RESP

    def __init__(self, target: PurgeTarget = PurgeTarget.BOTH):
        super().__init__(self.request_code)
        try:
            self._target = PurgeTarget(target)
        except ValueError:
            raise InvalidArgument("Unexpected purge target: %r" % (target,)) from None

    @property
    def target(self) -> PurgeTarget:
        return self._target

    def encode(self, output):
        write_byte(output, self._target)

    @classmethod
    def decode(cls, input):
        self = cls._response()
        wire = read_byte(input)
        try:
            self._target = PurgeTarget(wire)
        except ValueError:
            raise MalformedMessage("Unexpected purge target: %d" % (wire,), wire) from None
        return self

    def _payload(self):
        return (self._target,)
