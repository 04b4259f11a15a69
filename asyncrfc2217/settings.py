"""
Serial line parameters.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum

from .errors import InvalidArgument

__all__ = ('DataBits', 'Parity', 'StopBits', 'FlowControl', 'PurgeTarget',
           'SerialPortSettings')


class DataBits(IntEnum):
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9


class Parity(Enum):
    NONE = "none"
    ODD = "odd"
    EVEN = "even"
    MARK = "mark"
    SPACE = "space"


class StopBits(Enum):
    ONE = "1"
    ONE_POINT_FIVE = "1.5"
    TWO = "2"


class FlowControl(Enum):
    """
    Flow control modes.

    ``_IN`` controls data we receive, ``_OUT`` data we send. An access
    server can't do the ``_OUT`` modes on their own; request the
    ``_IN_OUT`` variant instead.
    """
    NONE = "none"
    RTSCTS_IN = "rtscts-in"
    RTSCTS_OUT = "rtscts-out"
    RTSCTS_IN_OUT = "rtscts"
    XONXOFF_IN = "xonxoff-in"
    XONXOFF_OUT = "xonxoff-out"
    XONXOFF_IN_OUT = "xonxoff"


class PurgeTarget(IntEnum):
    """Which buffer(s) of the access server to purge."""
    RECEIVE = 1
    TRANSMIT = 2
    BOTH = 3


@dataclass(frozen=True)
class SerialPortSettings:
    """
    The parameters of a serial line.

    The defaults are the traditional "9600 8N1" without flow control.
    """
    bauds: int = 9600
    data_bits: DataBits = DataBits.EIGHT
    parity: Parity = Parity.NONE
    stop_bits: StopBits = StopBits.ONE
    flow_control: FlowControl = FlowControl.NONE

    def __post_init__(self):
        if not isinstance(self.bauds, int) or self.bauds < 1:
            raise InvalidArgument("Baud rate must be greater than 0! Got: %r" % (self.bauds,))
        for name, cls in (('data_bits', DataBits), ('parity', Parity),
                          ('stop_bits', StopBits), ('flow_control', FlowControl)):
            if not isinstance(getattr(self, name), cls):
                raise InvalidArgument("%s must be a %s, not %r" % (name, cls.__name__, getattr(self, name)))

        if self.data_bits == DataBits.FIVE and self.stop_bits == StopBits.TWO:
            raise InvalidArgument("The use of 5 data bits with 2 stop bits is an invalid combination!")
        if self.data_bits in (DataBits.SIX, DataBits.SEVEN, DataBits.EIGHT) \
                and self.stop_bits == StopBits.ONE_POINT_FIVE:
            raise InvalidArgument("The use of 6, 7, or 8 data bits with 1.5 stop bits is an invalid combination!")

    def __str__(self):
        return "%d %d%s%s" % (self.bauds, self.data_bits, self.parity.name[0],
                              self.stop_bits.value)
