"""
Bank profile registry and detection.

Each profile bundles an identifier regex with the transaction-line layouts
known for that bank. Line patterns use named groups for their capture
roles: ``date``, ``description``, ``amount`` and the optional ``type``
(Dr/Cr flag). Profiles are scanned in declaration order; the first whose
identifier appears anywhere in the text wins.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

logger = structlog.get_logger()

# Horizontal whitespace only: a transaction never spans lines
_WS = r"[ \t]+"
_NUMERIC_DATE = r"\d{2}[-/]\d{2}[-/]\d{2,4}"
_AMOUNT = r"[\d,]+\.\d{2}"
_TYPE_FLAG = r"(?:[ \t]*(?P<type>Debit|Credit|Dr|Cr)\b)?"


def _line_pattern(date: str, description: str = r".+?", prefix: str = "", suffix: str = "") -> re.Pattern:
    return re.compile(
        rf"(?P<date>{date}){_WS}(?P<description>{description}){_WS}{prefix}(?P<amount>{_AMOUNT}){suffix}",
        re.IGNORECASE,
    )


@dataclass(frozen=True)
class BankProfile:
    """Static identification and extraction rules for one bank."""

    name: str
    identifier: re.Pattern
    patterns: Tuple[re.Pattern, ...]
    date_format: str = "DD/MM/YYYY"

    def matches(self, text: str) -> bool:
        return bool(self.identifier.search(text))


# Declared order matters: earlier profiles win when several identifiers appear.
BANK_PROFILES: Tuple[BankProfile, ...] = (
    BankProfile(
        name="HDFC",
        identifier=re.compile(r"HDFC\s*Bank", re.IGNORECASE),
        patterns=(
            _line_pattern(_NUMERIC_DATE, suffix=_TYPE_FLAG),
            _line_pattern(r"\d{2}-[A-Z]{3}-\d{2,4}", suffix=_TYPE_FLAG),
            # SWIGGY*BANGALORE 450.00 Dr 12/01/2024
            re.compile(
                rf"^(?P<description>[A-Za-z][^\n]*?){_WS}(?P<amount>{_AMOUNT})[ \t]*"
                rf"(?P<type>Debit|Credit|Dr|Cr)\b{_WS}(?P<date>{_NUMERIC_DATE})",
                re.IGNORECASE | re.MULTILINE,
            ),
        ),
        date_format="DD/MM/YY",
    ),
    BankProfile(
        name="ICICI",
        identifier=re.compile(r"ICICI\s*Bank", re.IGNORECASE),
        patterns=(
            _line_pattern(_NUMERIC_DATE, prefix=r"(?:INR[ \t]*)?"),
            _line_pattern(r"\d{2}/\d{2}/\d{4}", description=r"[A-Z0-9 \t\-/*]+?"),
        ),
    ),
    BankProfile(
        name="SBI",
        identifier=re.compile(r"State\s*Bank\s*of\s*India|SBI", re.IGNORECASE),
        patterns=(
            _line_pattern(_NUMERIC_DATE),
            _line_pattern(r"\d{2}[ \t]+[A-Z]{3}[ \t]+\d{2,4}"),
        ),
    ),
    BankProfile(
        name="AXIS",
        identifier=re.compile(r"Axis\s*Bank", re.IGNORECASE),
        patterns=(
            _line_pattern(_NUMERIC_DATE, suffix=_TYPE_FLAG),
            _line_pattern(r"\d{2}-\d{2}-\d{4}", description=r"[A-Z0-9/\- \t*]+?"),
        ),
        date_format="DD-MM-YYYY",
    ),
    BankProfile(
        name="KOTAK",
        identifier=re.compile(r"Kotak\s*Mahindra", re.IGNORECASE),
        patterns=(_line_pattern(_NUMERIC_DATE),),
    ),
    BankProfile(
        name="YES",
        identifier=re.compile(r"YES\s*Bank", re.IGNORECASE),
        patterns=(_line_pattern(_NUMERIC_DATE, suffix=_TYPE_FLAG),),
    ),
    BankProfile(
        name="INDUSIND",
        identifier=re.compile(r"IndusInd\s*Bank", re.IGNORECASE),
        patterns=(_line_pattern(_NUMERIC_DATE),),
    ),
    BankProfile(
        name="BOB",
        identifier=re.compile(r"Bank\s*of\s*Baroda|BOB", re.IGNORECASE),
        patterns=(_line_pattern(_NUMERIC_DATE),),
    ),
)


class BankFormatDetector:
    """Detects the issuing bank from statement text."""

    def __init__(self, profiles: Tuple[BankProfile, ...] = BANK_PROFILES):
        self.profiles = profiles

    def detect(self, text: str) -> Optional[BankProfile]:
        """Return the first profile whose identifier appears in the text, or None."""
        if not text:
            return None

        for profile in self.profiles:
            if profile.matches(text):
                logger.info("bank_detected", bank=profile.name)
                return profile

        return None


def detect_bank(text: str) -> Optional[BankProfile]:
    """Convenience wrapper around BankFormatDetector with the default registry."""
    return BankFormatDetector().detect(text)


def get_profile(name: str) -> Optional[BankProfile]:
    """Look up a profile by its (case-insensitive) bank name."""
    wanted = (name or "").strip().upper()
    for profile in BANK_PROFILES:
        if profile.name == wanted:
            return profile
    return None
