# src/normalize/dates.py — v1
"""Date standardization to digits-only DDMMYYYY.

Accepted shapes, tried in this order:
  - year-first  ``1990-05-14``, ``1990/5/14``, ``1990.05.14``
  - day-first   ``14/05/1990``, ``14-5-90``, ``14.05.1990``
  - month-code  ``14MAY90``, ``14 MAY 1990``, ``02APL85``, ``14 MAY/MAI 90``

Year-first goes first so that ``1990-05-14`` is never read as the
day-first ``90-05-14``. Two-digit years pivot at 50.
"""

from __future__ import annotations

import re
from datetime import date

_YEAR_FIRST = re.compile(r"(\d{4})[./-](\d{1,2})[./-](\d{1,2})")
_DAY_FIRST = re.compile(r"(\d{1,2})[./-](\d{1,2})[./-](\d{4}|\d{2})(?!\d)")
_MONTH_CODE = re.compile(
    r"(\d{1,2})\s*([A-Z]{3})(?:\s*/\s*[A-Z]{3,4})?\s*(\d{4}|\d{2})(?!\d)",
    re.IGNORECASE,
)

# English codes, the nonstandard APL seen on some passports, and the
# Spanish abbreviations that differ from the English ones.
MONTH_CODES: dict[str, int] = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "APL": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
    "ENE": 1, "ABR": 4, "AGO": 8, "SET": 9, "DIC": 12,
}

TWO_DIGIT_YEAR_PIVOT = 50


def expand_year(year: int) -> int:
    """Resolve a two-digit year: 00-49 -> 2000s, 50-99 -> 1900s."""
    if year < 100:
        return year + (2000 if year < TWO_DIGIT_YEAR_PIVOT else 1900)
    return year


def _format(year: int, month: int, day: int) -> str | None:
    try:
        parsed = date(year, month, day)
    except ValueError:
        return None
    return f"{parsed.day:02d}{parsed.month:02d}{parsed.year:04d}"


def parse_date(date_str: str) -> str | None:
    """Return DDMMYYYY for a recognised date, or None."""
    if not date_str:
        return None

    match = _YEAR_FIRST.search(date_str)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _format(year, month, day)

    match = _DAY_FIRST.search(date_str)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _format(expand_year(year), month, day)

    match = _MONTH_CODE.search(date_str)
    if match:
        month = MONTH_CODES.get(match.group(2).upper())
        if month is None:
            return None
        return _format(expand_year(int(match.group(3))), month, int(match.group(1)))

    return None


def standardize_date(date_str: str) -> str:
    """Standardize a date string to DDMMYYYY; unparseable input comes back unchanged."""
    return parse_date(date_str) or date_str
