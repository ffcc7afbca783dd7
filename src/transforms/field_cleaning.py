"""Per-field cleaning and validation rules for raw occurrence data.

Raw dumps carry every kind of junk in their numeric columns: degree
notation (``5°52.5'N``), ``0/0/0``, ``\\N`` markers and truncated lines.
Nothing in this module raises on bad input. Unparseable values become
empty strings and invalid records are reported through boolean checks,
so one dirty field never stops the rest of a record from being cleaned.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Union

from core.constants import LATITUDE_MAX, LATITUDE_MIN, LONGITUDE_MAX, LONGITUDE_MIN

Number = Union[int, float]

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

SEASON_QUARTERS: Mapping[int, int] = MappingProxyType(
    {11: 0, 12: 0, 1: 0, 2: 1, 3: 1, 4: 1, 5: 2, 6: 2, 7: 2, 8: 3, 9: 3, 10: 3}
)
NORTHERN_SEASONS: Mapping[int, str] = MappingProxyType(
    {0: "winter", 1: "spring", 2: "summer", 3: "fall"}
)
SOUTHERN_SEASONS: Mapping[int, str] = MappingProxyType(
    {0: "summer", 1: "fall", 2: "winter", 3: "spring"}
)
SEASON_CODES: Mapping[str, int] = MappingProxyType(
    {
        "N winter": 0,
        "N spring": 1,
        "N summer": 2,
        "N fall": 3,
        "S winter": 4,
        "S spring": 5,
        "S summer": 6,
        "S fall": 7,
    }
)


@dataclass(frozen=True)
class CleanedFields:
    """Normalized numeric fields of one record, rendered as text."""

    lat: str
    lon: str
    precision: str
    year: str
    month: str
    day: str


def parse_number(value: object) -> Number | None:
    """Strictly parse a decimal number.

    Args:
        value: Raw field value; ints and floats pass through.

    Returns:
        ``int`` for integer text, ``float`` for decimal text, else ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if _INTEGER_PATTERN.fullmatch(text):
        return int(text)
    if _DECIMAL_PATTERN.fullmatch(text):
        parsed = float(text)
        return parsed if math.isfinite(parsed) else None
    return None


def parse_number_or_empty(value: object) -> Number | str:
    """Parse a number, returning an empty string when parsing fails."""
    parsed = parse_number(value)
    return "" if parsed is None else parsed


def drop_empty_fraction(text: str) -> str:
    """Drop a trailing decimal point or an all-zero fraction.

    Usage:
        drop_empty_fraction("3.")       -> "3"
        drop_empty_fraction("3.0000")   -> "3"
        drop_empty_fraction("3.00100")  -> "3.00100"
    """
    head, _, tail = text.partition(".")
    if not tail or int(tail) == 0:
        return str(int(head))
    return text


def round_to(digits: int, n: Number | str) -> str:
    """Round a value to ``digits`` decimal places and return text.

    Trailing zeros are dropped, so ``3.0`` comes back as ``"3"``.
    An empty string is returned unchanged.
    """
    if n == "":
        return ""
    formatted = f"{float(n):.{digits}f}"
    if "." in formatted:
        formatted = formatted.rstrip("0")
    return drop_empty_fraction(formatted)


def valid_lat_lon(lat: object, lon: object) -> bool:
    """Return True if lat and lon are decimal degrees within bounds."""
    if lat == "" or lon == "":
        return False
    parsed_lat = parse_number(lat)
    parsed_lon = parse_number(lon)
    if parsed_lat is None or parsed_lon is None:
        return False
    return (
        LATITUDE_MIN <= parsed_lat <= LATITUDE_MAX
        and LONGITUDE_MIN <= parsed_lon <= LONGITUDE_MAX
    )


def valid_name(name: str | None) -> bool:
    """Return True if a taxon name is present and free of double quotes."""
    return name is not None and name != "" and '"' not in name


def season_of(lat: object, month: object) -> str:
    """Return the season code for a latitude and month.

    Usage:
        season_of(40.0, 1)  -> "0"
        season_of(-1, 1)    -> "6"
    """
    if month == "":
        return ""
    parsed_lat = parse_number(lat)
    parsed_month = parse_number(month)
    if parsed_lat is None or parsed_month is None:
        return ""
    quarter = SEASON_QUARTERS.get(int(parsed_month)) if parsed_month == int(parsed_month) else None
    if quarter is None:
        return ""
    hemisphere = "N" if parsed_lat > 0 else "S"
    seasons = NORTHERN_SEASONS if hemisphere == "N" else SOUTHERN_SEASONS
    return str(SEASON_CODES[f"{hemisphere} {seasons[quarter]}"])


def parse_date(value: str) -> tuple[str, str, str]:
    """Split a ``YYYY-MM-DD`` date into year, month and day text.

    Returns three empty strings when the date is malformed.
    """
    parts = value.strip().split("-")
    if len(parts) != 3 or not all(_INTEGER_PATTERN.fullmatch(part) for part in parts):
        return ("", "", "")
    year, month, day = parts
    return (year, month, day)


def cleanup_data(
    digits: int,
    lat: object,
    lon: object,
    precision: object,
    year: object,
    month: object,
    day: object = "",
) -> CleanedFields:
    """Parse, round and stringify the numeric fields of one record."""
    clean_lat, clean_lon, clean_precision = (
        round_to(digits, parse_number_or_empty(value)) for value in (lat, lon, precision)
    )
    clean_year, clean_month, clean_day = (
        _number_text(parse_number_or_empty(value)) for value in (year, month, day)
    )
    return CleanedFields(
        lat=clean_lat,
        lon=clean_lon,
        precision=clean_precision,
        year=clean_year,
        month=clean_month,
        day=clean_day,
    )


def quote(value: str, sql_escape: bool = False) -> str:
    """Quote a value for flat-table export, only when needed.

    Values that are empty, already wrapped in double quotes, or free of
    double quotes are kept. Otherwise the value is wrapped in double
    quotes and inner double quotes are doubled. ``sql_escape`` doubles
    single quotes as well.
    """
    already_quoted = len(value) >= 2 and value.startswith('"') and value.endswith('"')
    if not (value == "" or already_quoted or '"' not in value):
        value = '"{}"'.format(value.replace('"', '""'))
    if sql_escape:
        value = value.replace("'", "''")
    return value


def quote_all(values: Iterable[str], sql_escape: bool = False) -> tuple[str, ...]:
    """Apply ``quote`` to every value."""
    return tuple(quote(value, sql_escape) for value in values)


def _number_text(value: Number | str) -> str:
    """Render a parsed number without a redundant fraction."""
    if value == "":
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
