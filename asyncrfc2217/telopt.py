# Telnet and COM-PORT-OPTION constants.
#
# No we don't import from telnetlib (it's gone anyway). Enums are way nicer.

from enum import IntEnum

__all__ = (
    'Cmd', 'Opt', 'ComCmd',
    'BINARY', 'COM_PORT_OPTION', 'DO', 'DONT', 'ECHO', 'IAC', 'NOP', 'SB',
    'SE', 'SGA', 'WILL', 'WONT',
    'name_command', 'name_option',
)

def _exp(cls):
    for k in dir(cls):
        if k[0].isupper():
            globals()[k] = getattr(cls, k)
    return cls

@_exp
class Cmd(IntEnum):
    EOF = 236  # End of File
    SUSP = 237  # Suspend
    ABORT = 238  # Abort process
    EOR = 239  # End of Record
    SE = 240  # Subnegotiation End
    NOP = 241  # No Operation
    DM = 242  # Data Mark
    BRK = 243  # Break
    IP = 244  # Interrupt Process
    AO = 245  # Abort Output
    AYT = 246  # Are You There
    EC = 247  # Erase Character
    EL = 248  # Erase Line
    GA = 249  # Go Ahead
    SB = 250  # Subnegotiation Begin
    WILL = 251  # I want to do …
    WONT = 252  # I will not do …
    DO = 253  # Please do …
    DONT = 254  # You should not do …
    IAC = 255  # Escape

# Cmd.EOR would clash with an option of the same name, but we don't have
# that option, so export all of them.


class Opt(IntEnum):
    """
    The telnet options this package knows by name.

    Anything else is handled (i.e. refused) by number.
    """
    BINARY = 0
    ECHO = 1
    SGA = 3
    STATUS = 5
    TM = 6
    TTYPE = 24
    NAWS = 31
    TSPEED = 32
    LFLOW = 33
    LINEMODE = 34
    NEW_ENVIRON = 39
    CHARSET = 42
    COM_PORT_OPTION = 44

BINARY = Opt.BINARY
ECHO = Opt.ECHO
SGA = Opt.SGA
COM_PORT_OPTION = Opt.COM_PORT_OPTION


class ComCmd(IntEnum):
    """
    COM-PORT-OPTION command codes, :rfc:`2217`.

    Server replies use the client's code plus 100.
    """
    SIGNATURE_REQ = 0
    SET_BAUDRATE_REQ = 1
    SET_DATASIZE_REQ = 2
    SET_PARITY_REQ = 3
    SET_STOPSIZE_REQ = 4
    SET_CONTROL_REQ = 5
    PURGE_DATA_REQ = 12

    SIGNATURE_RESP = 100
    SET_BAUDRATE_RESP = 101
    SET_DATASIZE_RESP = 102
    SET_PARITY_RESP = 103
    SET_STOPSIZE_RESP = 104
    SET_CONTROL_RESP = 105
    PURGE_DATA_RESP = 112


def name_command(byte):
    """Return string description for (maybe) telnet command byte."""
    try:
        return Cmd(byte).name
    except ValueError:
        return name_option(byte)

def name_option(byte):
    """Return string description for a telnet option byte."""
    try:
        return Opt(byte).name
    except ValueError:
        return "X_%d" % (byte,)

