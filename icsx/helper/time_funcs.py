import datetime as dt
from dataclasses import dataclass


@dataclass
class SimpleDelta:
    """A timedelta broken into a sign and non-negative calendar units."""

    sign: int
    days: int
    hours: int
    minutes: int
    seconds: int

    def __iter__(self):
        yield from (self.sign, self.days, self.hours, self.minutes, self.seconds)


def split_delta(delta: dt.timedelta) -> SimpleDelta:
    sign = -1 if delta < dt.timedelta(0) else 1
    magnitude = -delta if sign < 0 else delta
    hours, seconds = divmod(magnitude.seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return SimpleDelta(sign=sign, days=magnitude.days, hours=hours, minutes=minutes, seconds=seconds)
