"""Tokenizer turning a folded iCalendar stream into a lazy sequence of tokens."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from . import patterns as pat
from .helper import Character as Char
from .helper import iter_chunks, logger, to_stream

EOF = ""


class TokenKind(Enum):
    CALENDAR_BEGIN = "calendar-begin"
    CALENDAR_END = "calendar-end"
    EVENT_BEGIN = "event-begin"
    EVENT_END = "event-end"
    ALARM_BEGIN = "alarm-begin"
    ALARM_END = "alarm-end"
    NAME = "property name"
    VALUE = "property value"
    PARAM_NAME = "parameter name"
    PARAM_VALUE = "parameter value"
    EOF = "end of stream"
    ERROR = "error"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str = ""

    def __str__(self):
        if self.kind is TokenKind.ERROR:
            return self.text
        return f"{self.kind} ({self.text!r})"


MARKERS = (
    (pat.BEGIN_VCALENDAR, TokenKind.CALENDAR_BEGIN),
    (pat.END_VCALENDAR, TokenKind.CALENDAR_END),
    (pat.BEGIN_VEVENT, TokenKind.EVENT_BEGIN),
    (pat.END_VEVENT, TokenKind.EVENT_END),
    (pat.BEGIN_VALARM, TokenKind.ALARM_BEGIN),
    (pat.END_VALARM, TokenKind.ALARM_END),
)


def unfold(chunks: Iterable[str]) -> Iterator[str]:
    """
    Yield the characters of chunks one at a time with line folding removed.

    A line break (CRLF or a bare LF) directly followed by a space or a tab is
    dropped together with that whitespace character; every other line break
    passes through untouched.

    >>> "".join(unfold(["DESCRIPTION:fol\\r\\n", " ded\\r\\n"]))
    'DESCRIPTION:folded\\r\\n'
    """
    pending = ""
    for chunk in chunks:
        for char in chunk:
            if pending == Char.CR:
                if char == Char.LF:
                    pending = Char.CRLF
                    continue
                yield pending
                pending = ""
            elif pending:
                if char in Char.SPACEORTAB:
                    pending = ""
                    continue
                yield from pending
                pending = ""

            if char in Char.CRLF:
                pending = char
            else:
                yield char
    yield from pending


class Lexer:
    """
    Single pass tokenizer over one iCalendar document.

    The lexer is a small state machine: every state method consumes input,
    queues the tokens it recognized and returns the next state, or None once
    an EOF or ERROR token has been queued.

    @ivar strict_line_breaks:
        If True, a physical line ending in LF without a preceding CR is an
        error.
    @ivar cancel:
        Optional object with an is_set() method; once set, the lexer emits an
        ERROR token and stops.
    """

    def __init__(self, stream, strict_line_breaks=False, cancel=None, chunk_size=4096):
        self.strict_line_breaks = strict_line_breaks
        self.cancel = cancel
        self._chars = unfold(iter_chunks(to_stream(stream), chunk_size))
        self._buffer = ""
        self._pos = 0
        self._width = 0
        self._consumed = 0
        self._items = deque()
        self._started = False

    def __iter__(self):
        return self.tokens()

    @property
    def position(self) -> int:
        """Offset, in unfolded characters, of the next character to read."""
        return self._consumed + self._pos

    def tokens(self) -> Iterator[Token]:
        if self._started:
            raise RuntimeError("a Lexer can only be iterated once")
        self._started = True

        state = self._lex_content_line
        while state is not None:
            if self.cancel is not None and self.cancel.is_set():
                logger.debug("lexer cancelled at pos %d", self.position)
                yield Token(TokenKind.ERROR, "cancelled")
                return
            try:
                state = state()
            except UnicodeDecodeError as e:
                state = self._errorf(f"invalid UTF-8 input near pos {self.position}: {e.reason}")
            while self._items:
                yield self._items.popleft()

    # ------------------------------ input handling ----------------------------
    def _next(self) -> str:
        while self._pos >= len(self._buffer):
            char = next(self._chars, EOF)
            if char == EOF:
                self._width = 0
                return EOF
            self._buffer += char
        char = self._buffer[self._pos]
        self._pos += 1
        self._width = 1
        return char

    def _backup(self):
        self._pos -= self._width

    def _has_prefix(self, prefix: str) -> bool:
        while len(self._buffer) - self._pos < len(prefix):
            char = next(self._chars, EOF)
            if char == EOF:
                break
            self._buffer += char
        return self._buffer.startswith(prefix, self._pos)

    def _ignore(self):
        self._buffer = self._buffer[self._pos :]
        self._consumed += self._pos
        self._pos = 0

    def _emit(self, kind: TokenKind):
        self._items.append(Token(kind, self._buffer[: self._pos]))
        self._ignore()

    def _emit_advanced(self, kind: TokenKind):
        if self._pos > 0:
            self._emit(kind)

    def _emit_eof(self):
        self._ignore()
        self._emit(TokenKind.EOF)

    def _errorf(self, msg: str):
        logger.debug(msg)
        self._items.append(Token(TokenKind.ERROR, msg))
        return None

    def _unexpected(self, char: str, *valid: str):
        if char == EOF:
            return self._unexpected_eof()
        return self._errorf(
            f"expected character at pos {self.position} to be one of {list(valid)}; got {char!r}"
        )

    def _unexpected_eof(self):
        return self._errorf(f"unexpected end of stream at pos {self.position}")

    def _scan_name(self) -> str:
        """Advance over name characters, return the first other character."""
        while True:
            char = self._next()
            if char == EOF or not pat.is_name_char(char):
                return char

    # --------------------------------- states ---------------------------------
    # contentline = name *(";" param ) ":" value CRLF
    def _lex_content_line(self):
        for marker, kind in MARKERS:
            if self._has_prefix(marker):
                self._pos += len(marker)
                self._emit(kind)
                return self._lex_newline
        return self._lex_name

    def _lex_newline(self):
        char = self._next()
        if char == EOF:
            self._emit_eof()
            return None

        if char == Char.CR:
            char = self._next()
        elif char == Char.LF and self.strict_line_breaks:
            return self._errorf(f"missing carriage return (CR) at pos {self.position}")

        if char != Char.LF:
            if char == EOF:
                return self._unexpected_eof()
            return self._errorf(f"expected end of line at pos {self.position}; got {char!r}")

        if self._next() == EOF:
            self._emit_eof()
            return None
        self._backup()
        self._ignore()
        return self._lex_content_line

    # name = iana-token / x-name
    def _lex_name(self):
        char = self._scan_name()
        if char == EOF:
            return self._unexpected_eof()
        self._backup()
        if self._pos == 0:
            return self._errorf(f"expected property name at pos {self.position + 1}; got {char!r}")
        self._emit(TokenKind.NAME)

        char = self._next()
        if char == ":":
            self._ignore()
            return self._lex_value
        if char == ";":
            self._ignore()
            return self._lex_param_name
        return self._unexpected(char, ":", ";")

    # value = *VALUE-CHAR
    def _lex_value(self):
        while True:
            char = self._next()
            if char == EOF:
                self._emit_advanced(TokenKind.VALUE)
                self._emit_eof()
                return None
            if pat.is_value_char(char):
                continue
            self._backup()
            self._emit_advanced(TokenKind.VALUE)
            return self._lex_newline

    # param = param-name "=" param-value *("," param-value)
    def _lex_param_name(self):
        char = self._scan_name()
        if char == EOF:
            return self._unexpected_eof()
        self._backup()
        if self._pos == 0:
            return self._errorf(f"expected parameter name at pos {self.position + 1}; got {char!r}")
        self._emit(TokenKind.PARAM_NAME)

        char = self._next()
        if char == "=":
            self._ignore()
            return self._lex_param_value
        return self._unexpected(char, "=")

    # param-value = paramtext / quoted-string
    def _lex_param_value(self):
        if self._next() == Char.DQUOTE:
            self._ignore()
            while True:
                char = self._next()
                if char == EOF:
                    return self._unexpected_eof()
                if char == Char.DQUOTE:
                    break
                if not pat.is_qsafe_char(char):
                    return self._unexpected(char, Char.DQUOTE)
            self._backup()
            self._emit(TokenKind.PARAM_VALUE)
            self._next()
            self._ignore()
        else:
            self._backup()
            while True:
                char = self._next()
                if char == EOF:
                    return self._unexpected_eof()
                if not pat.is_safe_char(char):
                    break
            self._backup()
            self._emit(TokenKind.PARAM_VALUE)

        char = self._next()
        self._ignore()
        if char == ":":
            return self._lex_value
        if char == ";":
            return self._lex_param_name
        if char == ",":
            return self._lex_param_value
        return self._unexpected(char, ":", ";", ",")


def tokenize(stream_or_string, strict_line_breaks=False, cancel=None) -> Iterator[Token]:
    """
    Return a lazy iterator of Tokens read from a string, bytes or a stream.
    """
    return Lexer(stream_or_string, strict_line_breaks=strict_line_breaks, cancel=cancel).tokens()
