"""asyncrfc2217: an anyio-based RFC 2217 (remote serial port) client."""
# pylint: disable=wildcard-import,undefined-variable
from .errors import *           # noqa
from .settings import *         # noqa
from .commands import *         # noqa
from .stream import *           # noqa
from .negotiation import *      # noqa
from .sender import *           # noqa
from .port import *             # noqa
from .telopt import *           # noqa
from .accessories import get_version as __get_version

__all__ = (
    errors.__all__ +
    settings.__all__ +
    commands.__all__ +

    stream.__all__ +
    negotiation.__all__ +
    sender.__all__ +
    port.__all__ +

    telopt.__all__
)  # noqa

__license__ = 'ISC'
__version__ = __get_version()
