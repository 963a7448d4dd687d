import re

# CONTROL = %x00-08 / %x0A-1F / %x7F, plus the C1 range; HTAB is allowed everywhere
# text is. Names are restricted to letters, digits and dashes.
patterns = {"name_char": r"[^\W_]|-", "control": r"\x00-\x08\x0a-\x1f\x7f-\x9f"}
# remember that {foobar} is replaced with patterns['foobar'], so safe_char is any
# character except CONTROL, DQUOTE, ";", ":" and ",".
patterns["safe_char"] = '[^{control!s}";:,]'.format(**patterns)
patterns["qsafe_char"] = '[^{control!s}"]'.format(**patterns)
patterns["value_char"] = "[^{control!s}]".format(**patterns)

name_char_re = re.compile(patterns["name_char"])
safe_char_re = re.compile(patterns["safe_char"])
qsafe_char_re = re.compile(patterns["qsafe_char"])
value_char_re = re.compile(patterns["value_char"])

# values with a time of day shorter than hhmmss, e.g. 20200101T930Z
short_time_re = re.compile(r"([0-9]+T)([0-9]{3,5})(Z?)$")

BEGIN_VCALENDAR = "BEGIN:VCALENDAR"
END_VCALENDAR = "END:VCALENDAR"
BEGIN_VEVENT = "BEGIN:VEVENT"
END_VEVENT = "END:VEVENT"
BEGIN_VALARM = "BEGIN:VALARM"
END_VALARM = "END:VALARM"


def is_name_char(char: str) -> bool:
    return name_char_re.match(char) is not None


def is_safe_char(char: str) -> bool:
    return safe_char_re.match(char) is not None


def is_qsafe_char(char: str) -> bool:
    return qsafe_char_re.match(char) is not None


def is_value_char(char: str) -> bool:
    return value_char_re.match(char) is not None
