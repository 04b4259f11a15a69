"""
Base classes for COM-PORT-OPTION control commands, :rfc:`2217`.
"""
from __future__ import annotations

import struct
from typing import BinaryIO, Dict, Generic, Optional, TypeVar

from ..errors import InvalidArgument, MalformedMessage

D = TypeVar('D')
W = TypeVar('W')


class BiMap(Generic[D, W]):
    """
    A two-way mapping between domain values and their wire bytes.

    Several domain values may share one wire byte. The reverse lookup
    then returns the value added last, so add the preferred one last.
    """
    def __init__(self, *pairs):
        self._to_wire: Dict[D, W] = {}
        self._to_domain: Dict[W, D] = {}
        for domain, wire in pairs:
            self.add(domain, wire)

    def add(self, domain: D, wire: W):
        self._to_wire[domain] = wire
        self._to_domain[wire] = domain

    def wire(self, domain: D) -> Optional[W]:
        return self._to_wire.get(domain)

    def domain(self, wire: W) -> Optional[D]:
        return self._to_domain.get(wire)

    def has_wire(self, wire: W) -> bool:
        return wire in self._to_domain

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self._to_wire)


class ControlCommand:
    """
    One COM-PORT-OPTION command.

    A command is either a request, built from a domain value and used for
    encoding, or a response, built by `decode` and used for reading the
    decoded value back. Both are immutable.

    Commands of the same kind compare equal when their payloads match.
    The command code is not compared, so a server's confirmation equals
    the request that caused it.
    """
    request_code: Optional[int] = None
    response_code: Optional[int] = None

    def __init__(self, code: int):
        if not (0 <= code <= 12 or 100 <= code <= 112):
            raise InvalidArgument("The command code must be in the range [0..12] or [100..112]! Got: %r" % (code,))
        self._code = code

    @classmethod
    def _response(cls):
        """A blank response object for `decode` to fill in."""
        self = cls.__new__(cls)
        ControlCommand.__init__(self, cls.response_code)
        return self

    @property
    def code(self) -> int:
        return self._code

    @property
    def is_response(self) -> bool:
        return self._code >= 100

    def encode(self, output: BinaryIO) -> None:
        """Write this command's payload to ``output``."""
        raise NotImplementedError("You need to actually encode something!")

    @classmethod
    def decode(cls, input: BinaryIO) -> ControlCommand:
        """Read a response payload of this kind from ``input``."""
        raise NotImplementedError("You need to actually decode something!")

    def _payload(self):
        """The value(s) that define this command's identity."""
        return ()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._payload() == other._payload()

    def __hash__(self):
        return hash((type(self), self._payload()))

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, ", ".join(repr(p) for p in self._payload()))


def read_exactly(input: BinaryIO, n: int) -> bytes:
    buf = input.read(n)
    if len(buf) != n:
        raise MalformedMessage("Truncated message: wanted %d bytes, got %d" % (n, len(buf)), bytes(buf))
    return buf


def read_byte(input: BinaryIO) -> int:
    """Read one signed byte."""
    return struct.unpack(">b", read_exactly(input, 1))[0]


def write_byte(output: BinaryIO, value: int) -> None:
    output.write(struct.pack(">B", value & 0xFF))
