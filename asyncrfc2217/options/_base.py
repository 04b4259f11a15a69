"""
Option handling.
"""
from __future__ import annotations

from weakref import ref, ReferenceType
import anyio
from typing import Optional

from ..telopt import Cmd, WILL, WONT, DO, DONT, name_option


class BaseOption:
    """
    Handle some option.

    The default implementation refuses the option in both directions.
    Subclasses set ``value`` and override the ``handle_*`` hooks to accept
    it.
    """
    value = None

    def __init__(self, stream, value=None):
        self._stream = ref(stream)

        if self.value is None:
            if value is None:
                raise RuntimeError("You need to set the option value")
            self.value = int(value)
        elif value is not None and value != self.value:
            raise RuntimeError("You cannot override the option value")
        self._setup_half()

    def _setup_half(self):
        # factored out so we can override it, esp for testing
        self.loc = HalfOption(self, True)
        self.rem = HalfOption(self, False)

    @property
    def name(self):
        return name_option(self.value)

    async def setup(self, tg):
        """
        Called when the stream starts. *Must* add to this taskgroup
        instead of blocking.
        """
        pass

    def __repr__(self):
        return "%s:%s:%r/%r" % (self.__class__.__name__, self.name, self.loc, self.rem)
    __str__ = __repr__

    @property
    def stream(self):
        return self._stream()

    def reset(self):
        self.loc.reset()
        self.rem.reset()

    # Call these when you want to change an option.

    async def send_do(self, force: bool = False) -> bool:
        """Send a DO if required.

        Set ``force`` if you want to override the current state.

        Returns the resulting state.
        """
        return await self.rem.set_state(True, force)

    async def send_dont(self, force: bool = False):
        """Send a DONT if required.
        """
        await self.rem.set_state(False, force)

    async def send_will(self, force: bool = False) -> bool:
        """Send a WILL if required.

        Set ``force`` if you want to override the current state.

        Returns the resulting state.
        """
        return await self.loc.set_state(True, force)

    async def send_wont(self, force: bool = False):
        """Send a WONT if required.
        """
        await self.loc.set_state(False, force)

    async def _send(self, cmd: Cmd, *bufs):
        """
        Send a IAC sequence for this option.
        """
        await self._stream().send_iac(cmd, self.value, *bufs)

    @property
    def has_local(self) -> Optional[bool]:
        """Whether we do this option. ``None`` if not (yet) known."""
        if self.loc.broken:
            return False
        return self.loc.state

    @property
    def has_remote(self) -> Optional[bool]:
        """Whether the peer does this option. ``None`` if not (yet) known."""
        if self.rem.broken:
            return False
        return self.rem.state


    # Callbacks from the half options when the remote side confirms
    # our request.

    async def reply_do(self):
        """The peer sent DO in response to our WILL."""
        pass

    async def reply_will(self):
        """The peer sent WILL in response to our DO."""
        pass

    async def reply_dont(self):
        """The peer sent DONT in response to our WILL."""
        pass

    async def reply_wont(self):
        """The peer sent WONT in response to our DO."""
        pass


    # Callbacks from the half options when the remote side wants an option.
    # Override these if you want to accept this option.

    async def handle_do(self) -> bool:
        """Incoming unsolicited DO.

        Return a flag whether the option should be accepted.
        The default is ``False``.
        """
        return False

    async def handle_will(self) -> bool:
        """Incoming unsolicited WILL.

        Return a flag whether the option should be accepted.
        The default is ``False``.
        """
        return False

    async def handle_dont(self):
        """Incoming unsolicited DONT."""
        pass

    async def handle_wont(self):
        """Incoming unsolicited WONT."""
        pass


    async def process_will(self) -> None:
        await self.rem.process_yes()

    async def process_wont(self) -> None:
        await self.rem.process_no()

    async def process_do(self) -> None:
        await self.loc.process_yes()

    async def process_dont(self) -> None:
        await self.loc.process_no()

    async def process_sb(self, data: bytes) -> None:
        """
        Incoming subnegotiation message.

        The default is to turn the option off, in both directions.
        """
        s = self._stream()
        s.log.warning("Subneg for %s not implemented: %r", self.name, data)
        await self.disable()

    def teardown(self):
        self.loc.teardown()
        self.rem.teardown()

    async def disable(self):
        """
        Call if the option is broken.
        """
        await self.loc.disable()
        await self.rem.disable()


class HalfOption:
    """
    This class handles sending WILL and receiving DO (if local),
    or sending DO and receiving WILL (if not).
    """
    # our Option
    _opt: ReferenceType[BaseOption] = None

    # current state
    state: Optional[bool] = None

    # We sent a request and are waiting for a reply
    waiting: Optional[anyio.Event] = None

    # waiting for an event has been aborted (canceled)
    broken: bool = False

    # set when instantiating
    _local: bool = None

    def __init__(self, opt, local: bool):
        self._opt = ref(opt)
        self._local = local

    def __repr__(self):
        s = "!" if self.broken else "?" if self.state is None else "+" if self.state else "-"
        if self.waiting:
            s += "w"
        return s

    @property
    def _yes(self):
        return WILL if self._local else DO

    @property
    def _no(self):
        return WONT if self._local else DONT

    def teardown(self):
        if self.waiting:
            self.broken = True
            self.waiting.set()
            self.waiting = None

    def reset(self):
        self.state = None
        self.broken = False
        if self.waiting:
            self.waiting.set()
            self.waiting = None

    async def handle_yes(self) -> Optional[bool]:
        opt = self._opt()
        return await (opt.handle_do if self._local else opt.handle_will)()

    async def handle_no(self) -> None:
        opt = self._opt()
        await (opt.handle_dont if self._local else opt.handle_wont)()

    async def reply_yes(self) -> None:
        opt = self._opt()
        await (opt.reply_do if self._local else opt.reply_will)()

    async def reply_no(self) -> None:
        opt = self._opt()
        await (opt.reply_dont if self._local else opt.reply_wont)()


    async def send_yes(self, force: bool = False) -> None:
        """
        Send a WILL / DO.
        """
        while self.waiting:
            await self.waiting.wait()
        if self.state is True and not force:
            return
        if self.broken and not force:
            return

        self.waiting = anyio.Event()
        await self._opt()._send(self._yes)

    async def send_no(self, force: bool = False) -> None:
        """
        Send a WONT / DONT.
        """
        while self.waiting:
            await self.waiting.wait()
        if self.state is False and not force:
            return
        if self.broken and not force:
            return

        self.waiting = anyio.Event()
        await self._opt()._send(self._no)


    async def process_yes(self) -> None:
        """
        Handle an incoming DO / WILL.
        """
        opt = self._opt()

        if self.waiting:  # message was solicited
            self.waiting.set()
            self.waiting = None

            if self.state is False:
                # we changed our mind in the meantime: reject
                await opt._send(self._no)
            else:
                self.state = True
                self.broken = False
                await self.reply_yes()
            return

        # Message was not solicited: send reply if changing state
        if self.broken:
            await opt._send(self._no)
            return
        if self.state is True:
            return
        if not await self.handle_yes():
            if self.state is None:
                self.state = False
            await opt._send(self._no)
            return
        self.state = True
        await opt._send(self._yes)


    async def process_no(self) -> None:
        """
        Handle an incoming DONT / WONT.
        """
        opt = self._opt()

        if self.waiting:  # message was solicited
            self.state = False
            self.broken = False
            self.waiting.set()
            self.waiting = None
            await self.reply_no()
            return

        # Message was not solicited: ack only if it changes our state
        if self.broken or self.state is False:
            return
        was_none = self.state is None
        self.state = False
        await self.handle_no()
        if not was_none:
            await opt._send(self._no)


    # High level interface

    async def set_state(self, state: bool, force: bool = False) -> bool:
        """
        (Tries to) set the current state to this.

        Returns the resulting state, i.e. always False if state is False.
        """
        await (self.send_yes if state else self.send_no)(force=force)
        try:
            res = await self.get_state()
        except BaseException:
            self.broken = True
            if self.waiting:
                self.waiting.set()
                self.waiting = None
            raise
        else:
            self.broken = False
            return res

    async def get_state(self) -> bool:
        """
        Returns the current state, waiting for a pending reply.

        Raises an error if the exchange has been interrupted.
        """
        opt = self._opt()
        if self.waiting:
            s = opt.stream
            s.log.debug("WAIT %r", opt)
            await self.waiting.wait()
            s.log.debug("WAIT DONE %r", opt)
        if self.broken:
            raise RuntimeError("State exchange failed: %r" % (opt,))
        if not isinstance(self.state, bool):
            raise RuntimeError("State is not set: %r" % (opt,))
        return self.state

    async def disable(self):
        """
        Disable this option.

        May not return to working state from the remote side.
        """
        self.broken = True
        if self.waiting:
            self.waiting.set()
            self.waiting = None
        await self._opt()._send(self._no)
