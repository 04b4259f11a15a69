from ._base import BaseOption, HalfOption
from ._store import StreamOptions
from .basic import StdOption, FullOption, stdBINARY, fullBINARY
from .comport import ComPortOption

__all__ = ('BaseOption', 'HalfOption', 'StreamOptions', 'StdOption',
           'FullOption', 'stdBINARY', 'fullBINARY', 'ComPortOption')
