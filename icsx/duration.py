"""Parsing and rendering of DURATION values (RFC 5545 section 3.3.6)."""

from __future__ import annotations

import datetime as dt
import string

from .exceptions import DurationError
from .helper.time_funcs import split_delta

# dur-value  = (["+"] / "-") "P" (dur-date / dur-time / dur-week)
# Weeks, days and time units may be combined, and the "T" designator is optional,
# because producers in the wild emit both P2W4D and P10S.
UNITS = {"W": "weeks", "D": "days", "H": "hours", "M": "minutes", "S": "seconds"}


def string_to_duration(s: str) -> dt.timedelta:
    """
    Returns a dt.timedelta, positive unless s starts with "-".

    An empty string is a zero duration.
    """
    if s == "":
        return dt.timedelta(0)

    def error(pos, msg):
        raise DurationError(f"{msg} in duration {s!r}", pos)

    # vars which control state machine
    char_iterator = enumerate(s)
    state = "start"

    sign = 1
    current = ""
    fields = dict.fromkeys(UNITS.values(), 0)
    found = False

    while True:
        pos, char = next(char_iterator, (len(s), "eof"))

        if state == "start":
            if char in "+-":
                state = "read designator"
                sign = -1 if char == "-" else 1
            elif char.upper() == "P":
                state = "read field"
            elif char == "eof":
                error(pos, "unexpected end")
            else:
                error(pos, f"expected 'P', got {char!r}")

        elif state == "read designator":
            if char.upper() == "P":
                state = "read field"
            elif char == "eof":
                error(pos, "unexpected end")
            else:
                error(pos, f"expected 'P', got {char!r}")

        elif state == "read field":
            if char in string.digits:
                current += char
            elif char.upper() == "T" and not current:
                continue
            elif char.upper() in UNITS and current:
                fields[UNITS[char.upper()]] += int(current)
                current = ""
                found = True
            elif char == "eof":
                if current or not found:
                    error(pos, "unexpected end")
                try:
                    return sign * dt.timedelta(**fields)
                except OverflowError:
                    error(pos, "value out of range")
            else:
                error(pos, f"unexpected character {char!r}")


def string_to_durations(s: str) -> list:
    """
    Returns list of timedelta objects for a comma separated list.
    """
    return [string_to_duration(x.strip()) for x in s.strip().split(",")]


def timedelta_to_string(delta: dt.timedelta) -> str:
    """
    Convert timedelta to an ical DURATION.
    """
    sign, days, hours, minutes, seconds = split_delta(delta)
    output = "-P" if sign < 0 else "P"

    if days:
        output += f"{days}D"
    if hours or minutes or seconds:
        output += "T"
    elif not days:  # Deal with zero duration
        output += "T0S"
    if hours:
        output += f"{hours}H"
    if minutes:
        output += f"{minutes}M"
    if seconds:
        output += f"{seconds}S"
    return output
