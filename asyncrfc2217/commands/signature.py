from ._base import ControlCommand
from ..errors import InvalidArgument, MalformedMessage
from ..telopt import ComCmd, IAC

bIAC = bytes([IAC])


class SignatureControlCmd(ControlCommand):
    """
    SIGNATURE, :rfc:`2217`.

    The text is sent as UTF-16 (big endian, two bytes per code unit).
    Every IAC byte in that is doubled. An empty signature asks the access
    server for its own.
    """
    request_code = ComCmd.SIGNATURE_REQ
    response_code = ComCmd.SIGNATURE_RESP

    def __init__(self, signature: str = ""):
        super().__init__(self.request_code)
        if not isinstance(signature, str):
            raise InvalidArgument("The parameter >signature< must be a string, not %r" % (signature,))
        self._signature = signature

    @property
    def signature(self) -> str:
        return self._signature

    def encode(self, output):
        output.write(_escape_iac(self._signature.encode("utf-16-be")))

    @classmethod
    def decode(cls, input):
        self = cls._response()
        buf = _unescape_iac(input.read())
        if len(buf) % 2:
            raise MalformedMessage("Signature has an odd number of bytes", bytes(buf))
        try:
            self._signature = buf.decode("utf-16-be")
        except UnicodeDecodeError as exc:
            raise MalformedMessage("Signature is not valid UTF-16: %s" % (exc,), bytes(buf)) from exc
        return self

    def _payload(self):
        return (self._signature,)


def _escape_iac(buf: bytes) -> bytes:
    r"""Replace ``IAC`` (``b'\xff'``) by ``IAC IAC``."""
    return buf.replace(bIAC, bIAC + bIAC)


def _unescape_iac(buf: bytes) -> bytes:
    """Collapse ``IAC IAC`` pairs. A lone IAC is an error."""
    res = bytearray()
    bi = iter(buf)
    for b in bi:
        if b == IAC:
            if next(bi, None) != IAC:
                raise MalformedMessage("Unescaped IAC in signature", bytes(buf))
        res.append(b)
    return bytes(res)
