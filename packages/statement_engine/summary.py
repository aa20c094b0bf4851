"""Best-effort account header/footer scraping (account number, period, balances)."""

import re
from typing import Any, Dict, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .bank_profiles import BankFormatDetector
from .normalizers import normalize_date

logger = structlog.get_logger()

_NUMERIC_DATE = r"\d{1,2}[-/]\d{1,2}[-/]\d{2,4}"
_NAMED_DATE = r"\d{1,2}[-\s]*[A-Z]{3}[A-Z]*[-\s]*\d{2,4}"
_CURRENCY = r"(?:INR|Rs\.?|₹)?\s*"
_MONEY = r"([\d,]+\.\d{2})"

ACCOUNT_NUMBER_PATTERNS = [
    re.compile(r"(?:Account|A/c)\s*(?:No|Number)?\.?[:\s]*(\d{10,18})\b", re.IGNORECASE),
    re.compile(r"(?:Account|A/c)\s*(?:No|Number)?\.?[:\s]*([*Xx]{2,}\d{4})\b", re.IGNORECASE),
    re.compile(r"(?:Account|A/c)\s*#\s*(\d{10,18})\b", re.IGNORECASE),
]

# Label is case-insensitive, the name itself must be capitalized words
ACCOUNT_HOLDER_PATTERN = re.compile(
    r"(?i:Account\s*Holder|Customer\s*Name|Name)[ \t]*:?[ \t]*([A-Z][a-zA-Z]+(?:[ \t]+[A-Z][a-zA-Z]+)+)"
)

PERIOD_PATTERNS = [
    re.compile(
        rf"(?:Statement\s*Period|From)[:\s]*({_NUMERIC_DATE})\s*(?:to|-)\s*({_NUMERIC_DATE})",
        re.IGNORECASE,
    ),
    re.compile(
        rf"(?:Period|From)[:\s]*({_NAMED_DATE})\s*(?:to|-)\s*({_NAMED_DATE})",
        re.IGNORECASE,
    ),
]

AMOUNT_FIELDS = {
    "opening_balance": re.compile(rf"Opening\s*Balances?[:\s]*{_CURRENCY}{_MONEY}", re.IGNORECASE),
    "closing_balance": re.compile(rf"Closing\s*Balances?[:\s]*{_CURRENCY}{_MONEY}", re.IGNORECASE),
    "total_debits": re.compile(rf"Total\s*(?:Debits?|Withdrawals?|DR)[:\s]*{_CURRENCY}{_MONEY}", re.IGNORECASE),
    "total_credits": re.compile(rf"Total\s*(?:Credits?|Deposits?|CR)[:\s]*{_CURRENCY}{_MONEY}", re.IGNORECASE),
}


class StatementPeriod(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_date: Optional[str] = Field(default=None, alias="from")
    to_date: Optional[str] = Field(default=None, alias="to")


class AccountSummary(BaseModel):
    """Header fields found in a statement. Every field is optional."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    account_number: Optional[str] = None
    account_holder: Optional[str] = None
    statement_period: Optional[StatementPeriod] = None
    opening_balance: Optional[float] = None
    closing_balance: Optional[float] = None
    total_debits: Optional[float] = None
    total_credits: Optional[float] = None
    bank: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _to_float(raw: str) -> Optional[float]:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


class AccountSummaryExtractor:
    def __init__(self, detector: Optional[BankFormatDetector] = None):
        self.detector = detector or BankFormatDetector()

    def extract(self, text: str) -> AccountSummary:
        summary = AccountSummary()
        if not text:
            return summary

        bank = self.detector.detect(text)
        if bank:
            summary.bank = bank.name

        for pattern in ACCOUNT_NUMBER_PATTERNS:
            match = pattern.search(text)
            if match:
                summary.account_number = match.group(1)
                break

        holder = ACCOUNT_HOLDER_PATTERN.search(text)
        if holder:
            summary.account_holder = holder.group(1)

        for pattern in PERIOD_PATTERNS:
            match = pattern.search(text)
            if match:
                summary.statement_period = StatementPeriod(
                    from_date=normalize_date(match.group(1), "DD/MM/YYYY"),
                    to_date=normalize_date(match.group(2), "DD/MM/YYYY"),
                )
                break

        for field_name, pattern in AMOUNT_FIELDS.items():
            match = pattern.search(text)
            if match:
                setattr(summary, field_name, _to_float(match.group(1)))

        found = [name for name, value in summary if value is not None]
        logger.info("account_summary_extracted", fields=found)
        return summary
