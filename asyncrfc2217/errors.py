"""Exceptions raised by the RFC 2217 protocol layer."""

__all__ = ('Rfc2217Error', 'InvalidArgument', 'MalformedMessage',
           'UnsupportedCommand', 'NegotiationError', 'NegotiationRefused',
           'NegotiationTimeout', 'SettingRejected', 'NoResponseError')


class Rfc2217Error(Exception):
    """Base class of everything this package raises on purpose."""
    pass


class InvalidArgument(Rfc2217Error, ValueError):
    """A caller passed something that can never work. Don't retry."""
    pass


class MalformedMessage(Rfc2217Error):
    """
    A wire value failed validation or has no entry in a code table.

    ``value`` holds the offending raw value, if there is one.
    """
    def __init__(self, msg, value=None):
        super().__init__(msg)
        self.value = value


class UnsupportedCommand(Rfc2217Error):
    """The peer sent a COM-PORT-OPTION command code we cannot decode."""
    def __init__(self, code):
        super().__init__("Unknown command option! Got: %r" % (code,))
        self.code = code


class NegotiationError(Rfc2217Error):
    """The option handshake for ``option`` did not succeed."""
    def __init__(self, option, msg=None):
        if msg is None:
            msg = "Negotiation of option %r failed" % (option,)
        super().__init__(msg)
        self.option = option


class NegotiationRefused(NegotiationError):
    """The peer answered WONT or DONT."""
    def __init__(self, option):
        super().__init__(option, "The peer refused option %r" % (option,))


class NegotiationTimeout(NegotiationError, TimeoutError):
    """The peer did not answer in time."""
    def __init__(self, option):
        super().__init__(option, "No negotiation reply for option %r" % (option,))


class SettingRejected(Rfc2217Error):
    """The access server confirmed a different value than we requested."""
    def __init__(self, request, response):
        super().__init__("The setting was refused: requested %r, got %r" % (request, response))
        self.request = request
        self.response = response


class NoResponseError(Rfc2217Error, TimeoutError):
    """A command that must be confirmed got no reply in time."""
    def __init__(self, request):
        super().__init__("Response-Timeout: No response received for command: %r" % (request,))
        self.request = request
