"""Resolution of DATE and DATE-TIME property values to aware datetimes."""

from __future__ import annotations

import datetime as dt

import pytz
from dateutil import tz

from .exceptions import InvalidValueError
from .helper import LAYOUT_LENGTHS, Layout, logger
from .patterns import short_time_re

LAYOUT_SIZES = {layout: size for size, layout in LAYOUT_LENGTHS.items()}

# ---------------------------- TZID registry -----------------------------------
__tzid_map = {}
__unknown_tzids = set()


def register_tzid(tzid, tzinfo):
    """
    Register a tzid -> tzinfo mapping.
    """
    __tzid_map[tzid] = tzinfo


def get_tzid(tzid, smart=True):
    """
    Return the tzinfo registered for tzid, looking it up in the zone database
    when smart is True. Returns None for unknown ids.
    """
    _tz = __tzid_map.get(tzid)
    if smart and tzid and not _tz and tzid not in __unknown_tzids:
        try:
            _tz = pytz.timezone(tzid)
            register_tzid(tzid, _tz)
        except pytz.UnknownTimeZoneError as e:
            __unknown_tzids.add(tzid)
            logger.warning(f"unknown TZID {e}")
    return _tz


utc = tz.tzutc()
register_tzid("UTC", utc)


# ----------------------- malformed time of day --------------------------------
def normalize_time_value(val: str, now: dt.datetime = None) -> str:
    """
    Realign a 4 or 5 digit time of day to hhmmss.

    Reading left to right, each of hour, minute and second takes two digits if
    they form a valid value and not enough two digit units were found yet,
    otherwise a single digit.
    """
    now = now or dt.datetime.now()
    needed = len(val) - 3
    found = offset = 0
    units = []
    for limit in (24, 60, 60):
        if found < needed and int(val[offset : offset + 2]) < limit:
            units.append(int(val[offset : offset + 2]))
            offset += 2
            found += 1
        else:
            units.append(int(val[offset : offset + 1]))
            offset += 1
    hour, minute, second = units
    return dt.datetime(now.year, now.month, now.day, hour, minute, second).strftime("%H%M%S")


def normalize_date_time_value(value: str, now: dt.datetime = None) -> str:
    """
    Pad DATE-TIME values whose time of day has 3 to 5 digits instead of 6.

    >>> normalize_date_time_value("20200101T930Z")
    '20200101T090300Z'
    """

    def realign(match):
        time_val = match.group(2)
        if len(time_val) == 3:  # Hms
            time_val = "0{}0{}0{}".format(*time_val)
        else:  # HHms | Hmms | HHmms
            time_val = normalize_time_value(time_val, now)
        return f"{match.group(1)}{time_val}{match.group(3)}"

    return short_time_re.sub(realign, value)


# ----------------------- layout and zone selection ----------------------------
def value_type(params):
    """
    Return the last VALUE parameter upper-cased, or None if there is none.
    """
    values = params.get("VALUE") or []
    return values[-1].upper() if values else None


def parse_layout(params, value: str):
    """
    Pick the strptime layout for value.

    The last VALUE parameter selects DATE-TIME or DATE; when the layout's
    length disagrees with value, the layout is inferred from value's length.
    Returns None if nothing fits.
    """
    layout = None
    kind = value_type(params)
    if kind is not None:
        layout = Layout.DATE_TIME if kind == "DATE-TIME" else Layout.DATE

    if layout is None or LAYOUT_SIZES[layout] != len(value):
        layout = LAYOUT_LENGTHS.get(len(value), layout)
    return layout


def resolve_zone(prop, default_zone=None):
    """
    Return the tzinfo for a time-valued property.

    A trailing "Z" means UTC, then default_zone wins, then the first TZID
    parameter the zone database knows, then the platform's local zone.
    """
    if prop.value.endswith("Z"):
        return utc
    if default_zone is not None:
        return default_zone
    for tzid in prop.params.get("TZID", []):
        zone = get_tzid(tzid)
        if zone is not None:
            return zone
    return tz.tzlocal()


def localize(naive: dt.datetime, tzinfo) -> dt.datetime:
    if hasattr(tzinfo, "localize"):  # PyTZ case
        return tzinfo.localize(naive)
    return naive.replace(tzinfo=tzinfo)


def string_to_date_time(prop, default_zone=None, now=None):
    """
    Resolve a DTSTART, DTEND, DTSTAMP or TRIGGER property to an aware datetime.

    Returns a (datetime, layout) tuple; layout is Layout.DATE when the value
    was read as a date.
    """
    value = normalize_date_time_value(prop.value, now)
    if value.endswith("Z"):
        layout = Layout.DATE_TIME_UTC
    else:
        layout = parse_layout(prop.params, value)
    if layout == Layout.DATE and len(value) != LAYOUT_SIZES[Layout.DATE]:
        layout = Layout.DATE_TIME

    try:
        naive = dt.datetime.strptime(value, layout)
        return localize(naive, resolve_zone(prop, default_zone)), layout
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidValueError(f"{prop.name} value {prop.value!r} is not a valid DATE or DATE-TIME", prop=prop) from e


# ------------------------------ arithmetic ------------------------------------
def _out_of_range(value, days, prop):
    name = f"{prop.name} " if prop is not None else ""
    return InvalidValueError(f"{name}value {value.isoformat()} moved by {days} days is out of range", prop=prop)


def add_days(value: dt.datetime, days: int, prop=None) -> dt.datetime:
    """
    Move value by whole calendar days, keeping its wall clock time.

    Raises InvalidValueError, naming prop, when the result is past year 9999.
    """
    try:
        return localize(value.replace(tzinfo=None) + dt.timedelta(days=days), value.tzinfo)
    except OverflowError as e:
        raise _out_of_range(value, days, prop) from e


def start_of_next_day(value: dt.datetime, prop=None) -> dt.datetime:
    """
    Local midnight after value, in value's zone.
    """
    try:
        next_day = dt.datetime.combine(value.date() + dt.timedelta(days=1), dt.time())
        return localize(next_day, value.tzinfo)
    except OverflowError as e:
        raise _out_of_range(value, 1, prop) from e
