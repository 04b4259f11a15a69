from ._base import BaseOption
from ..telopt import BINARY


class StdOption(BaseOption):
    """
    A basic option which is OK with being set
    """
    async def handle_do(self):
        return True

    async def handle_will(self):
        return True


class FullOption(StdOption):
    """
    A StdOption which asks for itself, in both directions, on startup
    """
    async def setup(self, tg):
        tg.start_soon(self.send_will)
        tg.start_soon(self.send_do)
        await super().setup(tg)


class stdBINARY(StdOption):
    """
    Binary transmission, :rfc:`856`. Accepted, but not requested.
    """
    value = BINARY


class fullBINARY(FullOption):
    """
    Binary transmission, :rfc:`856`, requested both ways.

    A serial line is eight-bit clean, so a COM port client needs this.
    """
    value = BINARY
