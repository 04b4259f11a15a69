"""
Track what the peer said about our telnet options.
"""
import logging
from typing import Optional, Set

from .accessories import Guard
from .errors import NegotiationRefused, NegotiationTimeout
from .telopt import DO, DONT, WILL, WONT, Cmd, name_option

__all__ = ('NegotiationTracker',)


class NegotiationTracker:
    """
    Records the peer's WILL/WONT/DO/DONT per option so that callers can
    wait for the outcome.

    Each direction of an option starts out unknown and is decided by the
    first message about it. Later messages don't change that; the option
    handlers deal with renegotiation.

    Pass a `asyncrfc2217.stream.TelnetStream` to register with it before
    the stream starts. Otherwise call `on_negotiation` yourself.
    """
    def __init__(self, stream=None, *, log=None):
        self.log = log or logging.getLogger(__name__)
        self._guard = Guard()

        # The peer will send the option (WILL) / won't (WONT).
        self._will_send: Set[int] = set()
        self._refuse_send: Set[int] = set()
        # The peer accepts our option (DO) / doesn't (DONT).
        self._will_accept: Set[int] = set()
        self._refuse_accept: Set[int] = set()

        if stream is not None:
            stream.add_negotiation_callback(self.on_negotiation)
            stream.add_teardown_callback(self.aclose)

    async def on_negotiation(self, cmd: Cmd, opt: int):
        if cmd in (WILL, WONT):
            yes, no = self._will_send, self._refuse_send
        elif cmd in (DO, DONT):
            yes, no = self._will_accept, self._refuse_accept
        else:
            raise RuntimeError("Not a negotiation: %r" % (cmd,))

        async with self._guard.update():
            if opt in yes or opt in no:
                self.log.debug("Ignored %s %s: already decided", Cmd(cmd).name, name_option(opt))
                return
            (yes if cmd in (WILL, DO) else no).add(opt)
            self.log.debug("Peer: %s %s", Cmd(cmd).name, name_option(opt))

    def send_state(self, opt: int) -> Optional[bool]:
        """Whether the peer will send ``opt``. ``None`` if unknown."""
        return self._state(opt, self._will_send, self._refuse_send)

    def accept_state(self, opt: int) -> Optional[bool]:
        """Whether the peer accepts ``opt`` from us. ``None`` if unknown."""
        return self._state(opt, self._will_accept, self._refuse_accept)

    @staticmethod
    def _state(opt, yes, no):
        if opt in yes:
            return True
        if opt in no:
            return False
        return None

    async def await_will_send(self, opt: int, timeout: Optional[float]):
        """
        Wait until the peer says WILL ``opt``.

        Raises `NegotiationRefused` on WONT, `NegotiationTimeout` if
        nothing arrives within ``timeout`` seconds.
        """
        await self._await(opt, timeout, self._will_send, self._refuse_send)

    async def await_will_accept(self, opt: int, timeout: Optional[float]):
        """
        Wait until the peer says DO ``opt``.

        Raises `NegotiationRefused` on DONT, `NegotiationTimeout` if
        nothing arrives within ``timeout`` seconds.
        """
        await self._await(opt, timeout, self._will_accept, self._refuse_accept)

    async def _await(self, opt, timeout, yes, no):
        if not await self._guard.wait_for(lambda: opt in yes or opt in no, timeout):
            raise NegotiationTimeout(opt)
        if opt in no:
            raise NegotiationRefused(opt)

    async def aclose(self):
        """Fail all waiters with `anyio.ClosedResourceError`."""
        await self._guard.aclose()
