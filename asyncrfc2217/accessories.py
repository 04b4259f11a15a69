"""Accessory functions."""
# std imports
import importlib.metadata
from contextlib import asynccontextmanager
from typing import Callable, Iterable, List, Optional, Sequence

import anyio

from .errors import InvalidArgument

__all__ = ('to_unsigned', 'to_signed', 'to_bytes', 'CtxObj', 'Guard')


def get_version():
    try:
        return importlib.metadata.version("asyncrfc2217")
    except Exception:
        return "0.0"


# The transport hands sub-negotiation payloads around as integer lists so
# that nobody confuses a data byte 255 with the IAC marker. These helpers
# convert between that form, signed bytes, and `bytes`.

def to_unsigned(values: Iterable[int]) -> List[int]:
    """
    Map a sequence of (possibly signed) byte values to 0…255.

    Example::

        >>> to_unsigned([-1, 0, 127, -128])
        [255, 0, 127, 128]
    """
    return [v & 0xFF for v in values]


def to_signed(values: Iterable[int]) -> List[int]:
    """
    Map a sequence of byte values to -128…127.

    Example::

        >>> to_signed([255, 0, 127, 128])
        [-1, 0, 127, -128]
    """
    res = []
    for v in values:
        v &= 0xFF
        res.append(v - 256 if v > 127 else v)
    return res


def to_bytes(values: Sequence[int], length: Optional[int] = None) -> bytes:
    """
    Pack the first ``length`` values (default: all of them) into `bytes`.

    Signed and unsigned byte values are both accepted.
    """
    if length is None:
        length = len(values)
    elif length < 0 or length > len(values):
        raise InvalidArgument("length %d is out of range for %d values" % (length, len(values)))
    return bytes(v & 0xFF for v in values[:length])


class CtxObj:
    """
    Add an async context manager that calls `_ctx` to run the context.

    Usage::
        class Foo(CtxObj):
            @asynccontextmanager
            async def _ctx(self):
                yield self  # or whatever

        async with Foo() as self_or_whatever:
            pass
    """
    __ctx = None

    async def __aenter__(self):
        if self.__ctx is not None:
            raise RuntimeError("Double context")
        self.__ctx = ctx = self._ctx()
        return await ctx.__aenter__()

    async def __aexit__(self, *tb):
        ctx, self.__ctx = self.__ctx, None
        if hasattr(self, "aclose"):
            with anyio.move_on_after(2, shield=True):
                await self.aclose()
        return await ctx.__aexit__(*tb)


class Guard:
    """
    Wait until some condition on shared state holds, or time out.

    All changes to the guarded state happen inside ``async with
    guard.update():``; every waiter is woken when that block ends. Each
    waiter re-checks its own predicate, as many unrelated conditions may
    share one guard.

    Closing the guard wakes all waiters, which then raise
    `anyio.ClosedResourceError`.
    """
    def __init__(self):
        self._cond = anyio.Condition()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @asynccontextmanager
    async def update(self):
        """
        Change the guarded state, then wake everybody.
        """
        async with self._cond:
            yield self
            self._cond.notify_all()

    async def wait_for(self, predicate: Callable[[], bool], timeout: Optional[float]) -> bool:
        """
        Wait until ``predicate()`` returns a true value.

        The predicate runs with the lock held. It may consume the state it
        checks.

        Returns ``False`` if ``timeout`` seconds pass first. The deadline
        is fixed on entry; wake-ups that don't satisfy the predicate do not
        extend it. ``None`` waits forever.
        """
        async with self._cond:
            with anyio.move_on_after(timeout):
                while True:
                    if self._closed:
                        raise anyio.ClosedResourceError
                    if predicate():
                        return True
                    await self._cond.wait()
            return False

    async def aclose(self):
        async with self._cond:
            self._closed = True
            self._cond.notify_all()
