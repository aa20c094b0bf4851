"""
Lexical normalizers for raw statement fields.

Stateless helpers that turn captured date and amount strings into
ISO dates and positive floats. Both are forgiving: a bad date falls back
to today, a bad amount is reported as "no amount" rather than raised.
"""

import re
from datetime import date
from typing import NamedTuple, Optional

import structlog

logger = structlog.get_logger()

# Amounts at or above this are treated as extraction noise (account numbers, balances)
MAX_AMOUNT = 10_000_000
HIGH_CONFIDENCE_LIMIT = 100_000

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

DEFAULT_DATE_FORMAT = "DD/MM/YYYY"

_MONTH_NAME_DATE = re.compile(r"(\d{1,2})[-\s]*([A-Za-z]{3})[A-Za-z]*\.?[-\s]*(\d{2,4})")
_NUMERIC_SEPARATORS = re.compile(r"[-/.\s]+")

_CURRENCY_NOISE = [
    r"[₹$€£¥]",
    r"\bINR\b",
    r"\bUSD\b",
    r"\bEUR\b",
    r"\bGBP\b",
    r"Rs\.?",
]
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)")


class AmountResult(NamedTuple):
    amount: float
    confidence: str  # "high" | "medium"


def parse_amount(raw: Optional[str]) -> Optional[AmountResult]:
    """
    Parse a captured amount string into a positive float.

    Strips currency symbols/codes and thousands separators. Returns None
    for anything non-positive, unparseable, or >= MAX_AMOUNT.
    """
    if raw is None:
        return None

    cleaned = str(raw)
    for pattern in _CURRENCY_NOISE:
        cleaned = re.sub(pattern, "", cleaned, flags=re.IGNORECASE)
    cleaned = cleaned.replace(",", "").strip()

    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None

    try:
        amount = float(match.group(0))
    except ValueError:
        return None

    if not (0 < amount < MAX_AMOUNT):
        return None

    confidence = "high" if amount < HIGH_CONFIDENCE_LIMIT else "medium"
    return AmountResult(amount=amount, confidence=confidence)


def _expand_year(year: str) -> Optional[int]:
    if len(year) == 2:
        value = int(year)
        return 1900 + value if value > 50 else 2000 + value
    if len(year) == 4:
        return int(year)
    return None


def parse_date(raw: Optional[str], date_format: str = DEFAULT_DATE_FORMAT) -> Optional[date]:
    """
    Parse a statement date, returning None when it is not a real calendar date.

    Month-name dates (15-JAN-2024, 15 Jan 24) are recognised regardless of
    the hint. Numeric dates use the hint's leading field (DD, MM or YYYY)
    to decide the order of the three parts.
    """
    if not raw:
        return None

    cleaned = str(raw).strip()

    named = _MONTH_NAME_DATE.search(cleaned)
    if named:
        day, month_name, year = named.groups()
        month = MONTHS.get(month_name.lower())
        full_year = _expand_year(year)
        if month is None or full_year is None:
            return None
        try:
            return date(full_year, month, int(day))
        except ValueError:
            return None

    parts = [p for p in _NUMERIC_SEPARATORS.split(cleaned) if p]
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None

    hint = (date_format or DEFAULT_DATE_FORMAT).upper()
    if hint.startswith("MM"):
        month, day, year = parts
    elif hint.startswith("YYYY"):
        year, month, day = parts
    else:
        day, month, year = parts

    full_year = _expand_year(year)
    if full_year is None:
        return None

    try:
        return date(full_year, int(month), int(day))
    except ValueError:
        return None


def normalize_date(raw: Optional[str], date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """
    Normalize a statement date to a zero-padded YYYY-MM-DD string.

    Unparseable input is replaced with today's date.
    """
    parsed = parse_date(raw, date_format)
    if parsed is None:
        logger.warning("date_unparseable", raw=raw, date_format=date_format)
        parsed = date.today()
    return parsed.isoformat()
