"""Grammar parser building a Calendar tree from a token sequence.

    calendar := CALENDAR_BEGIN (property | event | alarm)* CALENDAR_END
    event    := EVENT_BEGIN (property | alarm)* EVENT_END
    alarm    := ALARM_BEGIN property* ALARM_END
    property := NAME (PARAM_NAME PARAM_VALUE+)* (VALUE | empty)
"""

from __future__ import annotations

from typing import Iterable

from .components import Alarm, Calendar, Event, Parameters, Property
from .datetimes import add_days, start_of_next_day, string_to_date_time, value_type
from .duration import string_to_duration, timedelta_to_string
from .exceptions import CancelledError, DurationError, ICalError, LexError, ParseError, StructureError
from .helper import Layout, logger
from .lexer import Token, TokenKind

TEXT = "text"
TIME = "time"

# property name -> (field, kind); names not listed only live in the raw properties
CALENDAR_FIELDS = {
    "VERSION": ("version", TEXT),
    "METHOD": ("method", TEXT),
    "PRODID": ("product_id", TEXT),
    "CALSCALE": ("calscale", TEXT),
}
EVENT_FIELDS = {
    "UID": ("uid", TEXT),
    "SUMMARY": ("summary", TEXT),
    "DESCRIPTION": ("description", TEXT),
    "DTSTAMP": ("timestamp", TIME),
    "DTSTART": ("start", TIME),
    "DTEND": ("end", TIME),
}
ALARM_FIELDS = {
    "ACTION": ("action", TEXT),
    "TRIGGER": ("trigger", TEXT),
}


class Parser:
    """
    One token lookahead, two token pushback, recursive descent parser.

    @ivar default_zone:
        tzinfo used for every time value without a trailing "Z".
    @ivar inclusive_dtend:
        If True, DATE typed DTEND values are moved one day later, turning
        an inclusive last day into an exclusive end instant.
    @ivar cancel:
        Optional object with an is_set() method, checked before each pull.
    @ivar now:
        Reference instant for realigning malformed short time values.
    """

    def __init__(self, tokens: Iterable[Token], default_zone=None, inclusive_dtend=False, cancel=None, now=None):
        self.default_zone = default_zone
        self.inclusive_dtend = inclusive_dtend
        self.cancel = cancel
        self.now = now

        self._tokens = iter(tokens)
        self._buf = [None, None]
        self._peek_count = 0

        # assembled so far, kept for ParseError diagnostics
        self._properties = []
        self._events = []
        self._alarms = []

    # ---------------------------- token handling ------------------------------
    def _read(self) -> Token:
        token = next(self._tokens, None)
        if token is None:
            raise StructureError("unexpected end of tokens")
        if token.kind is TokenKind.ERROR:
            if self.cancel is not None and self.cancel.is_set():
                raise CancelledError()
            raise LexError(token.text)
        return token

    def next(self) -> Token:
        if self.cancel is not None and self.cancel.is_set():
            raise CancelledError()
        if self._peek_count > 0:
            self._peek_count -= 1
        else:
            self._buf[1] = self._buf[0]
            self._buf[0] = self._read()
        return self._buf[self._peek_count]

    def backup(self):
        if self._peek_count >= len(self._buf):
            raise StructureError("cannot push back more than two tokens")
        self._peek_count += 1

    def peek(self) -> Token:
        token = self.next()
        self.backup()
        return token

    def _expect(self, kind: TokenKind, element: str) -> Token:
        token = self.next()
        if token.kind is not kind:
            raise self._unexpected(element, token, kind)
        return token

    @staticmethod
    def _unexpected(element, token, *expected):
        wanted = " or ".join(str(kind) for kind in expected)
        return StructureError(f"parsing {element}: expected {wanted}, got {token.kind}")

    # ------------------------------- grammar ----------------------------------
    def parse(self) -> Calendar:
        """
        Parse the whole token sequence.

        Every failure is raised as a ParseError wrapping its cause; the
        error's calendar attribute holds what was assembled before it.
        """
        try:
            return self._parse_calendar()
        except ICalError as e:
            partial = Calendar(
                properties=tuple(self._properties), events=tuple(self._events), alarms=tuple(self._alarms)
            )
            raise ParseError(e, calendar=partial) from e

    def _parse_calendar(self) -> Calendar:
        self._expect(TokenKind.CALENDAR_BEGIN, "calendar")

        while True:
            token = self.next()
            if token.kind is TokenKind.CALENDAR_END:
                break
            self.backup()
            if token.kind is TokenKind.EVENT_BEGIN:
                self._events.append(self._parse_event())
            elif token.kind is TokenKind.ALARM_BEGIN:
                self._alarms.append(self._parse_alarm())
            elif token.kind is TokenKind.NAME:
                self._properties.append(self._parse_property("calendar"))
            else:
                raise self._unexpected(
                    "calendar",
                    token,
                    TokenKind.NAME,
                    TokenKind.EVENT_BEGIN,
                    TokenKind.ALARM_BEGIN,
                    TokenKind.CALENDAR_END,
                )

        properties = tuple(self._properties)
        fields, _ = self._derive(CALENDAR_FIELDS, properties)
        logger.debug(f"parsed calendar with {len(self._events)} events")
        return Calendar(properties=properties, events=tuple(self._events), alarms=tuple(self._alarms), **fields)

    def _parse_event(self) -> Event:
        self._expect(TokenKind.EVENT_BEGIN, "event")
        properties = []
        alarms = []

        while True:
            token = self.next()
            if token.kind is TokenKind.EVENT_END:
                break
            self.backup()
            if token.kind is TokenKind.ALARM_BEGIN:
                alarms.append(self._parse_alarm())
            elif token.kind is TokenKind.NAME:
                properties.append(self._parse_property("event"))
            else:
                raise self._unexpected("event", token, TokenKind.NAME, TokenKind.ALARM_BEGIN, TokenKind.EVENT_END)

        return self._build_event(tuple(properties), tuple(alarms))

    def _parse_alarm(self) -> Alarm:
        self._expect(TokenKind.ALARM_BEGIN, "alarm")
        properties = []

        while True:
            token = self.next()
            if token.kind is TokenKind.ALARM_END:
                break
            if token.kind is not TokenKind.NAME:
                raise self._unexpected("alarm", token, TokenKind.NAME, TokenKind.ALARM_END)
            self.backup()
            properties.append(self._parse_property("alarm"))

        properties = tuple(properties)
        fields, _ = self._derive(ALARM_FIELDS, properties)
        trigger = self._last(properties, "TRIGGER")
        if trigger is not None and value_type(trigger.params) == "DATE-TIME":
            fields["trigger_time"], _ = self._resolve_time(trigger)
        return Alarm(properties=properties, **fields)

    def _parse_property(self, element) -> Property:
        name = self._expect(TokenKind.NAME, element).text
        params = Parameters()

        token = self.next()
        while token.kind is TokenKind.PARAM_NAME:
            param_name = token.text
            values = []
            token = self.next()
            while token.kind is TokenKind.PARAM_VALUE:
                values.append(token.text)
                token = self.next()
            if not values:
                raise self._unexpected(f"parameter {param_name} of {name}", token, TokenKind.PARAM_VALUE)
            params.setdefault(param_name, []).extend(values)

        if token.kind is TokenKind.VALUE:
            return Property(name, params, token.text)
        self.backup()
        return Property(name, params, "")

    # ------------------------------ derivation --------------------------------
    def _resolve_time(self, prop):
        return string_to_date_time(prop, self.default_zone, self.now)

    def _derive(self, table, properties):
        """
        Map properties to component fields through table, last one wins.

        Returns the fields and, for time valued ones, the layout each value
        was read with.
        """
        fields = {}
        layouts = {}
        for prop in properties:
            entry = table.get(prop.name)
            if entry is None:
                continue
            attr, kind = entry
            if kind == TIME:
                fields[attr], layouts[attr] = self._resolve_time(prop)
            else:
                fields[attr] = prop.value
        return fields, layouts

    def _build_event(self, properties, alarms) -> Event:
        fields, layouts = self._derive(EVENT_FIELDS, properties)
        fields["end"] = self._resolve_end(fields, layouts, properties)
        logger.debug(f"parsed event {fields.get('uid', '')!r}: {fields.get('start')} - {fields['end']}")
        return Event(properties=properties, alarms=alarms, **fields)

    def _resolve_end(self, fields, layouts, properties):
        """
        Return the end instant of an event, first applicable rule wins:

        1. DTEND, moved one day later for DATE values if inclusive_dtend;
        2. DTSTART + DURATION;
        3. DTSTART + one day when DTSTART is a DATE or has no VALUE type;
        4. midnight after DTSTART when DTSTART is a DATE-TIME.
        """
        start = fields.get("start")
        end = fields.get("end")
        if end is not None:
            if self.inclusive_dtend and layouts["end"] == Layout.DATE:
                return add_days(end, 1, prop=self._last(properties, "DTEND"))
            return end
        if start is None:
            return None

        duration_prop = self._last(properties, "DURATION")
        if duration_prop is not None:
            try:
                duration = string_to_duration(duration_prop.value)
            except DurationError as e:
                raise DurationError(f"DURATION: {e.msg}", e.position, prop=duration_prop) from e
            logger.debug(f"event ends {timedelta_to_string(duration)} after {start}")
            try:
                return start + duration
            except OverflowError as e:
                raise DurationError(
                    f"DURATION: {duration_prop.value!r} after {start.isoformat()} is out of range", prop=duration_prop
                ) from e

        dtstart = self._last(properties, "DTSTART")
        kind = value_type(dtstart.params)
        if kind is None or kind == "DATE":
            return add_days(start, 1, prop=dtstart)
        if kind == "DATE-TIME":
            return start_of_next_day(start, prop=dtstart)
        return None

    @staticmethod
    def _last(properties, name):
        named = [prop for prop in properties if prop.name == name]
        return named[-1] if named else None


def parse_tokens(tokens: Iterable[Token], **kwds) -> Calendar:
    """
    Parse a token sequence, see Parser for the keyword arguments.
    """
    return Parser(tokens, **kwds).parse()
