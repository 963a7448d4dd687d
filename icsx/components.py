"""The parsed document tree: Calendar, Event, Alarm and their raw Properties."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Optional


class Parameters(dict):
    """
    Parameter name -> list of values, values in document order.
    """

    def contains(self, name, value) -> bool:
        """Determine if the values of the parameter called name include value."""
        return value in self.get(name, ())

    def first(self, name, default=None):
        values = self.get(name)
        return values[0] if values else default


@dataclass(frozen=True)
class Property:
    """
    Holds one content line, for example::
      <SUMMARY{'LANGUAGE': ['en']}Bastille Day Party>

    @ivar name:
        The name of the content line, as written.
    @ivar params:
        A Parameters dictionary, may be empty.
    @ivar value:
        The unfolded value, empty when the line had none.
    """

    name: str
    params: Parameters = field(default_factory=Parameters)
    value: str = ""

    def __repr__(self):
        return f"<{self.name}{dict(self.params)}{self.value}>"

    def pretty_print(self, level=0, tabwidth=3):
        pre = " " * level * tabwidth
        print(pre, f"{self.name}:", self.value)
        if self.params:
            print(pre, "params for ", f"{self.name}:")
            for k in self.params.keys():
                print(pre + " " * tabwidth, k, self.params[k])


class _Component:
    """
    Lookups over the raw properties shared by every component.
    """

    name = ""
    properties: tuple

    def property(self, name) -> Optional[Property]:
        """
        Return the first property called name, or None.
        """
        return next((prop for prop in self.properties if prop.name == name), None)

    def properties_named(self, name) -> list:
        return [prop for prop in self.properties if prop.name == name]

    def has_property(self, name) -> bool:
        return self.property(name) is not None

    def get_value(self, name, default=None):
        """
        Return the value of the last property called name, or default.
        """
        named = self.properties_named(name)
        return named[-1].value if named else default

    def get_children(self):
        return ()

    def pretty_print(self, level=0, tabwidth=3):
        pre = " " * level * tabwidth
        print(pre, self.name)
        for prop in self.properties:
            prop.pretty_print(level + 1, tabwidth)
        for child in self.get_children():
            child.pretty_print(level + 1, tabwidth)


@dataclass(frozen=True)
class Alarm(_Component):
    """
    A VALARM block. trigger_time is only set for TRIGGER;VALUE=DATE-TIME.
    """

    name = "VALARM"

    properties: tuple = ()
    action: str = ""
    trigger: str = ""
    trigger_time: Optional[dt.datetime] = None


@dataclass(frozen=True)
class Event(_Component):
    """
    A VEVENT block.

    @ivar timestamp:
        DTSTAMP as an aware datetime, or None.
    @ivar start:
        DTSTART as an aware datetime, or None.
    @ivar end:
        DTEND, or the end implied by DURATION or by DTSTART's value type.
    """

    name = "VEVENT"

    properties: tuple = ()
    alarms: tuple = ()
    uid: str = ""
    summary: str = ""
    description: str = ""
    timestamp: Optional[dt.datetime] = None
    start: Optional[dt.datetime] = None
    end: Optional[dt.datetime] = None

    def get_children(self):
        return self.alarms


@dataclass(frozen=True)
class Calendar(_Component):
    """
    A VCALENDAR document.

    @ivar events:
        Events in document order.
    @ivar alarms:
        Alarms placed directly in the calendar, outside of any event.
    """

    name = "VCALENDAR"

    properties: tuple = ()
    events: tuple = ()
    alarms: tuple = ()
    product_id: str = ""
    version: str = ""
    calscale: str = "GREGORIAN"
    method: str = ""

    def get_children(self):
        return self.alarms + self.events
