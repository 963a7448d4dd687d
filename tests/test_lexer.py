"""Tests for the tokenizer."""

from io import BytesIO

import pytest

from icsx import CancelToken, Lexer, Token, TokenKind, tokenize
from icsx.lexer import unfold

from .common import crlf, get_test_file

K = TokenKind

LONG_DESCRIPTION = (
    "A description that is too long to fit into 75 octets should wrap to the next line. Lorem ipsum "
    "dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor incididunt ut labore et dolore "
    "magna aliqua. Ut enim ad minim veniam, quis nostrud exercitation."
)


def lex(text, **kwds):
    return list(tokenize(text, **kwds))


def begin_calendar():
    return Token(K.CALENDAR_BEGIN, "BEGIN:VCALENDAR")


def end_calendar():
    return Token(K.CALENDAR_END, "END:VCALENDAR")


def begin_event():
    return Token(K.EVENT_BEGIN, "BEGIN:VEVENT")


def end_event():
    return Token(K.EVENT_END, "END:VEVENT")


def dated(name, value):
    return [
        Token(K.NAME, name),
        Token(K.PARAM_NAME, "VALUE"),
        Token(K.PARAM_VALUE, "DATE"),
        Token(K.VALUE, value),
    ]


CALENDAR_TOKENS = [
    begin_calendar(),
    Token(K.NAME, "VERSION"),
    Token(K.VALUE, "2.0"),
    Token(K.NAME, "METHOD"),
    Token(K.VALUE, "REQUEST"),
    Token(K.NAME, "PRODID"),
    Token(K.VALUE, "Example//Product//ID"),
    begin_event(),
    Token(K.NAME, "UID"),
    Token(K.VALUE, "111111111111"),
    *dated("DTSTAMP", "20191010"),
    *dated("DTSTART", "20200101"),
    *dated("DTEND", "20200110"),
    end_event(),
    begin_event(),
    Token(K.NAME, "UID"),
    Token(K.VALUE, "222222222222"),
    *dated("DTSTAMP", "20191212"),
    *dated("DTSTART", "20200201"),
    *dated("DTEND", "20200210"),
    end_event(),
    end_calendar(),
    Token(K.EOF, ""),
]


def test_valid_calendar():
    assert lex(crlf(get_test_file("calendar.ics"))) == CALENDAR_TOKENS


def test_bare_lf_line_breaks():
    """LF line breaks give the same tokens as CRLF ones by default"""
    assert lex(get_test_file("calendar.ics")) == CALENDAR_TOKENS


def test_strict_line_breaks():
    tokens = lex(get_test_file("calendar.ics"), strict_line_breaks=True)
    assert tokens == [begin_calendar(), Token(K.ERROR, "missing carriage return (CR) at pos 16")]

    assert lex(crlf(get_test_file("calendar.ics")), strict_line_breaks=True) == CALENDAR_TOKENS


def test_folded_lines():
    folded = get_test_file("folded.ics")
    expected = [begin_calendar(), begin_event(), Token(K.NAME, "DESCRIPTION"), Token(K.VALUE, LONG_DESCRIPTION)]
    expected += [end_event(), end_calendar(), Token(K.EOF, "")]

    assert lex(folded) == expected
    assert lex(crlf(folded)) == expected


def test_fold_count_does_not_matter():
    line = f"DESCRIPTION:{LONG_DESCRIPTION}"
    for width in (1, 7, 40, 74, 500):
        for line_break in ("\r\n", "\n"):
            pieces = [line[i : i + width] for i in range(0, len(line), width)]
            text = f"BEGIN:VCALENDAR{line_break}{(line_break + ' ').join(pieces)}{line_break}END:VCALENDAR"
            tokens = lex(text)
            assert tokens[2] == Token(K.VALUE, LONG_DESCRIPTION)


def test_unfold():
    assert "".join(unfold(["a\r", "\n b", "\n\tc"])) == "abc"
    assert "".join(unfold(["a\r\nb\nc\r"])) == "a\r\nb\nc\r"
    assert "".join(unfold(["a\r\n  b"])) == "a b"


def test_multiple_params():
    text = crlf(
        "BEGIN:VCALENDAR\nBEGIN:VEVENT\n"
        "ATTACH;FMTTYPE=text/plain;ENCODING=BASE64;VALUE=BINARY:VGhlIHF1aWNrIGJyb3du\n"
        "X-CUSTOM;FOO=foo,bar,baz;BAR=baz,bar,foo:foobar\n"
        "END:VEVENT\nEND:VCALENDAR\n"
    )
    assert lex(text)[2:16] == [
        Token(K.NAME, "ATTACH"),
        Token(K.PARAM_NAME, "FMTTYPE"),
        Token(K.PARAM_VALUE, "text/plain"),
        Token(K.PARAM_NAME, "ENCODING"),
        Token(K.PARAM_VALUE, "BASE64"),
        Token(K.PARAM_NAME, "VALUE"),
        Token(K.PARAM_VALUE, "BINARY"),
        Token(K.VALUE, "VGhlIHF1aWNrIGJyb3du"),
        Token(K.NAME, "X-CUSTOM"),
        Token(K.PARAM_NAME, "FOO"),
        Token(K.PARAM_VALUE, "foo"),
        Token(K.PARAM_VALUE, "bar"),
        Token(K.PARAM_VALUE, "baz"),
        Token(K.PARAM_NAME, "BAR"),
    ]


def test_quoted_param_values():
    text = 'BEGIN:VCALENDAR\r\nATTENDEE;CN="Doe, John";DELEGATED-FROM="mailto:a@x.org","b;c":mailto:c@x.org\r\n'
    assert lex(text)[1:8] == [
        Token(K.NAME, "ATTENDEE"),
        Token(K.PARAM_NAME, "CN"),
        Token(K.PARAM_VALUE, "Doe, John"),
        Token(K.PARAM_NAME, "DELEGATED-FROM"),
        Token(K.PARAM_VALUE, "mailto:a@x.org"),
        Token(K.PARAM_VALUE, "b;c"),
        Token(K.VALUE, "mailto:c@x.org"),
    ]


def test_empty_values():
    text = "BEGIN:VCALENDAR\r\nUID:\r\nX-PARAM;EMPTY=:\r\nEND:VCALENDAR\r\n"
    assert lex(text) == [
        begin_calendar(),
        Token(K.NAME, "UID"),
        Token(K.NAME, "X-PARAM"),
        Token(K.PARAM_NAME, "EMPTY"),
        Token(K.PARAM_VALUE, ""),
        end_calendar(),
        Token(K.EOF, ""),
    ]


def test_value_at_end_of_stream():
    assert lex("BEGIN:VCALENDAR\nSUMMARY:last\tline") == [
        begin_calendar(),
        Token(K.NAME, "SUMMARY"),
        Token(K.VALUE, "last\tline"),
        Token(K.EOF, ""),
    ]


def test_alarm_markers():
    tokens = lex(get_test_file("with_alarm.ics"))
    kinds = [token.kind for token in tokens]
    assert kinds.count(K.ALARM_BEGIN) == 3
    assert kinds.count(K.ALARM_END) == 3
    assert tokens[5:10] == [
        Token(K.ALARM_BEGIN, "BEGIN:VALARM"),
        Token(K.NAME, "TRIGGER"),
        Token(K.VALUE, "-PT5M"),
        Token(K.NAME, "ACTION"),
        Token(K.VALUE, "DISPLAY"),
    ]


def test_unknown_components_are_properties():
    tokens = lex("BEGIN:VCALENDAR\nBEGIN:VTODO\nEND:VTODO\nEND:VCALENDAR\n")
    assert tokens[1:5] == [
        Token(K.NAME, "BEGIN"),
        Token(K.VALUE, "VTODO"),
        Token(K.NAME, "END"),
        Token(K.VALUE, "VTODO"),
    ]


def test_syntax_errors():
    """Errors end the token sequence and name the offset"""
    assert lex("BEGIN:VCALENDAR\r\nFOO BAR:x\r\nEND:VCALENDAR\r\n")[-1] == Token(
        K.ERROR, "expected character at pos 21 to be one of [':', ';']; got ' '"
    )
    assert lex("BEGIN:VCALENDAR\r\nSUMMARY")[-1] == Token(K.ERROR, "unexpected end of stream at pos 24")
    assert lex('BEGIN:VCALENDAR\r\nX;P="abc')[-1].text.startswith("unexpected end of stream")
    assert lex("BEGIN:VCALENDAR\r\nX;P=a\"b:c\r\n")[-1].kind is K.ERROR
    assert lex("BEGIN:VEVENTX\r\n")[-1] == Token(K.ERROR, "expected end of line at pos 13; got 'X'")
    assert lex("BEGIN:VCALENDAR\r\n:value\r\n")[-1].text.startswith("expected property name")
    assert lex("")[-1].kind is K.ERROR

    tokens = lex("BEGIN:VCALENDAR\r\nSUMMARY:bell\x07\r\nEND:VCALENDAR\r\n")
    assert [token.kind for token in tokens] == [K.CALENDAR_BEGIN, K.NAME, K.VALUE, K.ERROR]
    assert tokens[2].text == "bell"


def test_byte_streams():
    text = crlf(get_test_file("utf8_test.ics"))
    for chunk_size in (1, 2, 3, 4096):
        lexer = Lexer(BytesIO(text.encode("utf-8")), chunk_size=chunk_size)
        tokens = list(lexer)
        assert Token(K.VALUE, "The title こんにちはキティ") in tokens
        assert tokens[-1] == Token(K.EOF, "")


def test_invalid_utf8():
    tokens = lex(b"BEGIN:VCALENDAR\r\nSUMMARY:\xff\xfe\r\nEND:VCALENDAR\r\n")
    assert tokens[-1].kind is K.ERROR
    assert tokens[-1].text.startswith("invalid UTF-8 input")


def test_cancelled_lexer():
    cancel = CancelToken()
    cancel.cancel()
    assert lex(get_test_file("calendar.ics"), cancel=cancel) == [Token(K.ERROR, "cancelled")]


def test_single_pass():
    lexer = Lexer("BEGIN:VCALENDAR\r\nEND:VCALENDAR\r\n")
    assert len(list(lexer)) == 3
    with pytest.raises(RuntimeError):
        list(lexer)


def test_token_str():
    assert str(Token(K.NAME, "UID")) == "property name ('UID')"
    assert str(Token(K.ERROR, "boom")) == "boom"
    assert str(K.ALARM_END) == "alarm-end"
