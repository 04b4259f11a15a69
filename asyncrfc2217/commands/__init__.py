"""
The COM-PORT-OPTION commands we know about, and their codec.
"""
from ._base import ControlCommand
from .baudrate import BaudrateControlCmd
from .codec import COMMANDS, ResponseDecoder, encode_request
from .control import FlowControlCmd
from .datasize import DataBitsControlCmd
from .parity import ParityControlCmd
from .purge import PurgeDataControlCmd
from .signature import SignatureControlCmd
from .stopsize import StopBitsControlCmd

__all__ = ('ControlCommand', 'SignatureControlCmd', 'BaudrateControlCmd',
           'DataBitsControlCmd', 'ParityControlCmd', 'StopBitsControlCmd',
           'FlowControlCmd', 'PurgeDataControlCmd', 'COMMANDS',
           'ResponseDecoder', 'encode_request')
