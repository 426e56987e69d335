"""Convenience conversions for parsed metadata values.

All functions are stateless and return None instead of raising when the
input cannot be converted.
"""

import base64
import math
import re
from typing import List, NamedTuple, Optional, Union

from jpegmeta.models import Metadata

# Preview rotation per EXIF Orientation value, in degrees clockwise
ORIENTATION_DEGREES = {1: 0, 2: 0, 3: 180, 4: 0, 5: 0, 6: 90, 7: 0, 8: -90}

# Days per month, 1-indexed; February is adjusted for leap years
MONTH_DAYS = {1: 31, 2: 28, 3: 31, 4: 30, 5: 31, 6: 30,
              7: 31, 8: 31, 9: 30, 10: 31, 11: 30, 12: 31}

_DATE_RE = re.compile(r'^(\d{4})([:/\- ])(\d{2})\2(\d{2})')

# Weights for degrees, minutes, seconds
_DMS_DIVISORS = (1, 60, 3600)


class DateComponents(NamedTuple):
    day: int
    month: int
    year: int


def days_in_month(month: int, year: int) -> int:
    if month == 2 and year % 4 == 0:
        return 29
    return MONTH_DAYS[month]


def date_time_original_to_date_components(value: str) -> Optional[DateComponents]:
    """Convert a DateTimeOriginal string such as ``2024:06:15 10:30:00``."""
    match = _DATE_RE.match(value or '')
    if not match:
        return None
    year, month, day = int(match.group(1)), int(match.group(3)), int(match.group(4))
    if not (year and month and day) or month > 12:
        return None
    if day > days_in_month(month, year):
        return None
    return DateComponents(day=day, month=month, year=year)


def degrees_to_decimal(coords: str, ref: str) -> Optional[float]:
    """Convert ``"d/1,m/1,s/100"`` plus a N/S/E/W reference to signed degrees."""
    decimal = 0.0
    try:
        for part, divisor in zip(coords.split(','), _DMS_DIVISORS):
            numerator, denominator = part.split('/')
            decimal += (float(numerator) / float(denominator)) / divisor
    except (ValueError, ZeroDivisionError):
        return None

    # Some writers pad the reference with extra characters; only the first counts
    if ref and ref[0].upper() in ('S', 'W'):
        decimal = -decimal
    return None if math.isnan(decimal) else decimal


def keywords_to_tags(keywords: Union[str, List[str]]) -> List[str]:
    """Normalize an IPTC Keywords value to a list of tags."""
    if isinstance(keywords, list):
        return keywords
    return keywords.split(',')


def orientation_degrees(orientation) -> int:
    """Rotation to apply to a preview for an EXIF Orientation value (1-8)."""
    return ORIENTATION_DEGREES.get(orientation, 0)


def data_url(data: Optional[bytes]) -> Optional[str]:
    """Encode JPEG bytes as a ``data:`` URI."""
    if not data:
        return None
    return 'data:image/jpeg;base64,' + base64.b64encode(data).decode('ascii')


def thumbnail_data_url(metadata: Metadata) -> Optional[str]:
    return data_url(metadata.thumbnail)
