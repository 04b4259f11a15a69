"""
Send COM-PORT-OPTION requests and wait for the matching response.
"""
import logging
from collections import defaultdict
from typing import Dict, Type, Union

import anyio

from .accessories import Guard
from .commands import ControlCommand, encode_request
from .errors import InvalidArgument
from .telopt import COM_PORT_OPTION

__all__ = ('CommandSender', 'NoResponse')


class _NoResponse:
    """
    Returned by `CommandSender.send` when no response arrived in time.

    This is a singleton. It's falsy.
    """
    _inst = None

    def __new__(cls):
        if cls._inst is None:
            cls._inst = super().__new__(cls)
        return cls._inst

    def __bool__(self):
        return False

    def __repr__(self):
        return "NoResponse"

NoResponse = _NoResponse()


class CommandSender:
    """
    Correlates requests with responses by command kind.

    At most one response per kind is pending. A request clears any stale
    response of its kind before it is sent. Requests of the same kind are
    serialized by a lock; different kinds may overlap.

    Give this to `asyncrfc2217.options.ComPortOption` as its processor.
    """
    #: seconds to wait for a response
    timeout = 1.0

    def __init__(self, stream, *, timeout=None, log=None):
        if timeout is not None:
            if timeout < 0:
                raise InvalidArgument("The timeout must not be negative! Got: %r" % (timeout,))
            self.timeout = timeout
        self.stream = stream
        self.log = log or logging.getLogger(__name__)

        self._guard = Guard()
        self._pending: Dict[Type[ControlCommand], ControlCommand] = {}
        self._kind_lock = defaultdict(anyio.Lock)

        stream.add_teardown_callback(self.aclose)

    async def send(self, req: ControlCommand) -> Union[ControlCommand, _NoResponse]:
        """
        Send a request and return the server's response of the same kind.

        Returns `NoResponse` if there is none within ``timeout`` seconds.
        Raises `anyio.ClosedResourceError` if the connection goes away.
        """
        if req is None:
            raise InvalidArgument("The parameter >req< must not be None!")
        kind = type(req)

        async with self._kind_lock[kind]:
            async with self._guard.update():
                if self._guard.closed:
                    raise anyio.ClosedResourceError
                stale = self._pending.pop(kind, None)
                if stale is not None:
                    self.log.debug("Discarded stale %r", stale)

            payload = encode_request(req)
            self.log.debug("send %r", req)
            await self.stream.send_subneg(COM_PORT_OPTION, bytes(payload[1:]))

            resp = None

            def got_response():
                nonlocal resp
                resp = self._pending.pop(kind, None)
                return resp is not None

            if await self._guard.wait_for(got_response, self.timeout):
                return resp
            self.log.debug("No response for %r within %ss", req, self.timeout)
            return NoResponse

    async def on_response_received(self, resp: ControlCommand):
        """
        Store a decoded response, replacing an unconsumed one of the same
        kind, and wake the waiting senders.
        """
        async with self._guard.update():
            old = self._pending.get(type(resp))
            if old is not None:
                self.log.debug("Replaced unconsumed %r", old)
            self._pending[type(resp)] = resp

    async def aclose(self):
        """Fail all waiting senders with `anyio.ClosedResourceError`."""
        await self._guard.aclose()
