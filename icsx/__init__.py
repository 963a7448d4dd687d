"""
icsx: read and write iCalendar (RFC 5545) documents.

Parsing runs in three stages: the lexer unfolds lines and emits tokens, the
parser assembles a Calendar tree and resolves date/time values, and the
encoder writes the raw properties back out, folded at 75 octets.

    >>> cal = read_calendar("BEGIN:VCALENDAR\\r\\nVERSION:2.0\\r\\nEND:VCALENDAR\\r\\n")
    >>> cal.version
    '2.0'
    >>> serialize(cal)
    'BEGIN:VCALENDAR\\r\\nVERSION:2.0\\r\\nEND:VCALENDAR\\r\\n'
"""

from dataclasses import replace

from .components import Alarm, Calendar, Event, Parameters, Property
from .encoder import Encoder, marshal, serialize
from .exceptions import (
    CancelledError,
    DurationError,
    ICalError,
    InvalidValueError,
    LexError,
    ParseError,
    SerializeError,
    StructureError,
)
from .helper import Options
from .lexer import Lexer, Token, TokenKind, tokenize
from .parser import Parser, parse_tokens
from .pipeline import CancelToken, TokenPipe

VERSION = "0.1.0"


def read_calendar(stream_or_string, options: Options = None, **kwds) -> Calendar:
    """
    Parse one calendar from a string, bytes, or a text or binary stream.

    Keyword arguments override the matching Options fields.
    """
    options = replace(options or Options(), **kwds)
    lexer = Lexer(stream_or_string, strict_line_breaks=options.strict_line_breaks, cancel=options.cancel)
    parser_kwds = {
        "default_zone": options.default_zone,
        "inclusive_dtend": options.inclusive_dtend,
        "cancel": options.cancel,
        "now": options.now,
    }
    if options.threaded:
        with TokenPipe(lexer) as pipe:
            return parse_tokens(pipe, **parser_kwds)
    return parse_tokens(lexer, **parser_kwds)


def read_file(path, options: Options = None, **kwds) -> Calendar:
    """
    Parse the calendar stored at path.
    """
    with open(path, "rb") as fp:
        return read_calendar(fp, options, **kwds)
