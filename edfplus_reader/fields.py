"""
Conversion and validation of the ASCII sub-fields found in an EDF+ header.

All helpers accept either the raw ``bytes`` slice cut out of the header or an
already decoded ``str``; none of them perform any I/O.
"""
import datetime
import re
from typing import Optional, Tuple, Union

from edfplus_reader.errors import FormatError

ENCODING = "ascii"
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

DECIMAL_INTEGER_REGEX = re.compile(r"^[+-]?[0-9]+$")
DECIMAL_FLOAT_REGEX = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)$")

# Records recorded before 1985 do not exist, two-digit years below this belong to 20xx
EDF_CENTURY_PIVOT = 85

Field = Union[bytes, str]


def decode_field(data: Field) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode(ENCODING)
    except UnicodeDecodeError:
        # EDF headers are meant to be printable ASCII, but real files carry latin-1 names
        return data.decode("latin-1")


def trim_field(data: Field) -> str:
    # Fields are left-justified and padded with spaces; some writers pad with NULs
    return decode_field(data).rstrip(" \x00")


def decimal_ascii_to_int(data: Field) -> int:
    text = decode_field(data).strip(" ")
    if not text:
        raise FormatError(text, "field is empty")
    if not DECIMAL_INTEGER_REGEX.fullmatch(text):
        raise FormatError(text, "not a decimal integer")
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        raise FormatError(text, "value does not fit into 64 bits")
    return value


def decimal_ascii_to_float(data: Field) -> float:
    text = decode_field(data).strip(" ")
    if not text:
        raise FormatError(text, "field is empty")
    if not DECIMAL_FLOAT_REGEX.fullmatch(text):
        raise FormatError(text, "not a decimal number")
    return float(text)


def _digit(char: str, lowest: str = "0", highest: str = "9") -> int:
    # Explicit ASCII range test, str.isdigit() also accepts non-ASCII digits
    if not lowest <= char <= highest:
        raise ValueError(char)
    return ord(char) - ord("0")


def _two_digits(text: str, highest_tens: str = "9") -> int:
    return _digit(text[0], highest=highest_tens) * 10 + _digit(text[1])


def _split_triplet(data: Field) -> Optional[Tuple[str, str, str]]:
    text = decode_field(data)
    if len(text) != 8 or text[2] != "." or text[5] != ".":
        return None
    return text[0:2], text[3:5], text[6:8]


def is_valid_time(data: Field) -> bool:
    """
    Validate an 8 character ``hh.mm.ss`` start time.

    Every digit is checked against its allowed ASCII range before the components
    are combined: hours 00-23, minutes 00-59, seconds 00-59.
    """
    parts = _split_triplet(data)
    if parts is None:
        return False
    hours, minutes, seconds = parts
    try:
        return (
            _two_digits(hours, highest_tens="2") <= 23
            and _two_digits(minutes, highest_tens="5") <= 59
            and _two_digits(seconds, highest_tens="5") <= 59
        )
    except ValueError:
        return False


def is_valid_date(data: Field) -> bool:
    """
    Validate an 8 character ``dd.mm.yy`` start date.

    Days must lie in 00-31 and years may be any two digits. Months are only
    checked at the tens digit, which must be ``0`` or ``1``; the units digit is
    any digit, so ``15.13.99`` is accepted while ``15.23.99`` is not.
    """
    parts = _split_triplet(data)
    if parts is None:
        return False
    day, month, year = parts
    try:
        _two_digits(month, highest_tens="1")
        _two_digits(year)
        return _two_digits(day, highest_tens="3") <= 31
    except ValueError:
        return False


def parse_start_datetime(date: Field, time: Field) -> datetime.datetime:
    """
    Combine a validated ``dd.mm.yy`` date and ``hh.mm.ss`` time. Raises ``ValueError``
    when the combination is not a real calendar instant (e.g. day 00 or month 13).
    """
    if not is_valid_date(date) or not is_valid_time(time):
        raise ValueError(f"Cannot combine date {date!r} and time {time!r}")
    day, month, year = (int(part) for part in _split_triplet(date))
    hour, minute, second = (int(part) for part in _split_triplet(time))
    century = 1900 if year >= EDF_CENTURY_PIVOT else 2000
    return datetime.datetime(
        year=century + year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
    )
