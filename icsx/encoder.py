"""Serialization of a Calendar's raw properties back to iCalendar text."""

from __future__ import annotations

import io
from typing import TextIO

from . import patterns as pat
from .components import Alarm, Calendar, Event, Property
from .exceptions import SerializeError
from .helper import Character as Char
from .helper import get_buffer, logger, split_by_size, to_basestring


def dquote_escape(param: str) -> str:
    """
    Return param, or "param" if ',' or ';' or ':' is in param.
    """
    if Char.DQUOTE in param:
        raise SerializeError(f"Double quotes aren't allowed in parameter values: {param!r}")
    for char in ",;:":
        if char in param:
            return f'"{param}"'
    return param


def content_line(prop: Property) -> str:
    """
    Build one logical line, parameters sorted by name so output is stable.
    """
    s = get_buffer()
    s.write(prop.name)
    for key in sorted(prop.params.keys()):
        paramstr = ",".join(dquote_escape(p) for p in prop.params[key])
        s.write(f";{key}={paramstr}")
    s.write(f":{prop.value}")
    return s.getvalue()


def fold_one_line(outbuf: TextIO, input_: str, line_length=75):
    """
    Folding line procedure that ensures multi-byte utf-8 sequences are not broken across lines
    """
    chunks = split_by_size(input_, byte_size=line_length)
    for chunk in chunks:
        outbuf.write(chunk)
    outbuf.write(Char.CRLF)


class Encoder:
    """
    Writes calendars to fp, a text or a binary sink.

    Only the raw properties are written; derived fields such as Event.end are
    ignored, so parsing the output reproduces the same properties.
    """

    def __init__(self, fp, line_length=75):
        self.fp = fp
        self.line_length = line_length

    def encode(self, calendar: Calendar):
        outbuf = get_buffer()
        self._write_calendar(outbuf, calendar)
        text = outbuf.getvalue()
        if isinstance(self.fp, io.TextIOBase):
            self.fp.write(text)
        else:
            self.fp.write(to_basestring(text))

    def _line(self, outbuf, text):
        fold_one_line(outbuf, text, self.line_length)

    def _write_properties(self, outbuf, properties):
        for prop in properties:
            self._line(outbuf, content_line(prop))

    def _write_calendar(self, outbuf, calendar: Calendar):
        logger.debug(f"serializing calendar with {len(calendar.events)} events")
        self._line(outbuf, pat.BEGIN_VCALENDAR)
        self._write_properties(outbuf, calendar.properties)
        for alarm in calendar.alarms:
            self._write_alarm(outbuf, alarm)
        for event in calendar.events:
            self._write_event(outbuf, event)
        self._line(outbuf, pat.END_VCALENDAR)

    def _write_event(self, outbuf, event: Event):
        self._line(outbuf, pat.BEGIN_VEVENT)
        self._write_properties(outbuf, event.properties)
        for alarm in event.alarms:
            self._write_alarm(outbuf, alarm)
        self._line(outbuf, pat.END_VEVENT)

    def _write_alarm(self, outbuf, alarm: Alarm):
        self._line(outbuf, pat.BEGIN_VALARM)
        self._write_properties(outbuf, alarm.properties)
        self._line(outbuf, pat.END_VALARM)


def serialize(calendar: Calendar, buf=None, line_length=75):
    """
    Encode and fold calendar, write to buf or return a string.
    """
    outbuf = buf or get_buffer()
    Encoder(outbuf, line_length).encode(calendar)
    return buf or outbuf.getvalue()


def marshal(calendar: Calendar) -> bytes:
    """
    Return the UTF-8 encoded document for calendar.
    """
    outbuf = io.BytesIO()
    Encoder(outbuf).encode(calendar)
    return outbuf.getvalue()
