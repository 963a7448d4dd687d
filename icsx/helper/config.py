from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from io import StringIO

# ------------------------------------ Logging ---------------------------------
logger = logging.getLogger("icsx")
if not logging.getLogger().handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(filename)s:%(lineno)d %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)  # modify log levels here


def get_buffer(x: str | StringIO = None) -> StringIO:
    return StringIO(x) if isinstance(x, str) or x is None else x


# ------------------------------------ Options ---------------------------------
@dataclass
class Options:
    """
    Settings consumed by the lexer and the parser.

    @ivar strict_line_breaks:
        Reject physical lines ending in a bare LF.
    @ivar default_zone:
        A tzinfo used for every value without a trailing "Z", taking
        precedence over TZID parameters.
    @ivar inclusive_dtend:
        Add one day to DATE typed DTEND values.
    @ivar cancel:
        Anything with an is_set() method, checked before each token pull.
    @ivar threaded:
        Run the lexer in a producer thread.
    @ivar now:
        Reference instant for realigning malformed short time values.
    """

    strict_line_breaks: bool = False
    default_zone: dt.tzinfo | None = None
    inclusive_dtend: bool = False
    cancel: object = None
    threaded: bool = False
    now: dt.datetime | None = None
