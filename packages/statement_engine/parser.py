"""
Statement Parser - turns flattened bank-statement text into transactions.

Two extraction passes:
  * bank-specific: the detected bank's own line layouts, run over the
    full text; credit lines are discarded.
  * generic fallback: five bank-agnostic strategies, each applied to every
    line. Runs when the bank pass under-matches and replaces its output
    when it finds strictly more transactions.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd
import structlog

from packages.categorization.rules import CategoryClassifier
from packages.core.config import Settings, get_settings
from packages.core.errors import TextExtractionError

from .bank_profiles import BankFormatDetector, BankProfile, get_profile
from .dedup import remove_duplicates
from .learning import LearnedPatternStore, get_default_store
from .merchant_extractor import MerchantExtractor
from .models import RawMatch, Transaction
from .normalizers import DEFAULT_DATE_FORMAT, parse_amount, parse_date

logger = structlog.get_logger()

UNKNOWN_BANK = "Unknown"
GENERIC_SOURCE = "PDF Statement"
FALLBACK_WARNING = "Bank-specific patterns matched few transactions, using generic parser"

DATAFRAME_COLUMNS = [
    "date",
    "description",
    "normalized_merchant",
    "amount",
    "category",
    "confidence",
    "source",
]

_DATE = r"\d{1,2}[-/]\d{1,2}[-/]\d{2,4}"
_LOOSE_AMOUNT = r"[\d,]+\.?\d{0,2}"


@dataclass(frozen=True)
class ExtractionStrategy:
    """A generic line layout: pattern with named groups plus optional fix-up."""

    name: str
    pattern: re.Pattern
    postprocess: Optional[Callable[[RawMatch], RawMatch]] = None

    def apply(self, line: str) -> Optional[RawMatch]:
        match = self.pattern.search(line)
        if not match:
            return None
        raw = raw_match_from(match)
        return self.postprocess(raw) if self.postprocess else raw


def _prefix_upi(raw: RawMatch) -> RawMatch:
    return replace(raw, description="UPI " + raw.description)


GENERIC_STRATEGIES: Tuple[ExtractionStrategy, ...] = (
    ExtractionStrategy(
        name="date_description_amount",
        pattern=re.compile(
            rf"(?P<date>{_DATE})\s+(?P<description>.{{5,60}}?)\s+(?P<amount>{_LOOSE_AMOUNT})\s*(?:Dr|CR|DB|Debit)?",
            re.IGNORECASE,
        ),
    ),
    ExtractionStrategy(
        name="amount_description_date",
        pattern=re.compile(
            rf"(?P<amount>[\d,]+\.\d{{2}})\s+(?P<description>.{{5,60}}?)\s+(?P<date>{_DATE})",
            re.IGNORECASE,
        ),
    ),
    ExtractionStrategy(
        name="month_name_date",
        pattern=re.compile(
            rf"(?P<date>\d{{1,2}}[-\s][A-Z]{{3}}[-\s]\d{{2,4}})\s+(?P<description>.{{5,60}}?)\s+(?P<amount>{_LOOSE_AMOUNT})",
            re.IGNORECASE,
        ),
    ),
    ExtractionStrategy(
        name="column_delimited",
        pattern=re.compile(
            rf"(?P<date>{_DATE})(?:\t+| {{2,}})(?P<description>.+?)(?:\t+| {{2,}})(?P<amount>{_LOOSE_AMOUNT})"
        ),
    ),
    ExtractionStrategy(
        name="upi_reference",
        pattern=re.compile(
            rf"(?P<date>{_DATE})\s+UPI[-/](?P<description>[A-Za-z0-9\s]+?)[-/]\d+\s+(?P<amount>{_LOOSE_AMOUNT})",
            re.IGNORECASE,
        ),
        postprocess=_prefix_upi,
    ),
)


def raw_match_from(match: re.Match) -> RawMatch:
    groups = match.groupdict()
    return RawMatch(
        date=groups["date"],
        description=groups["description"],
        amount=groups["amount"],
        type_flag=groups.get("type"),
    )


@dataclass
class ExtractionPass:
    """Deduplicated transactions from one pass.

    `matched` counts the transactions built before deduplication.
    """

    transactions: List[Transaction] = field(default_factory=list)
    date_substitutions: int = 0
    matched: int = 0

    @property
    def count(self) -> int:
        return len(self.transactions)


@dataclass
class StatementParseResult:
    """Successful parse outcome."""

    bank: str
    transactions: List[Transaction]
    raw_text_length: int
    warnings: List[str] = field(default_factory=list)
    success: bool = True

    @property
    def count(self) -> int:
        return len(self.transactions)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([t.to_record() for t in self.transactions], columns=DATAFRAME_COLUMNS)

    @property
    def categories(self) -> Dict[str, float]:
        """Summed amount per category, in order of first appearance."""
        df = self.to_dataframe()
        if df.empty:
            return {}
        totals = df.groupby("category", sort=False)["amount"].sum()
        return {str(category): float(amount) for category, amount in totals.items()}

    @property
    def date_range(self) -> Optional[Dict[str, str]]:
        if not self.transactions:
            return None
        dates = sorted(t.date for t in self.transactions)
        return {"from": dates[0], "to": dates[-1]}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "bank": self.bank,
            "parsed": [t.to_dict() for t in self.transactions],
            "count": self.count,
            "rawTextLength": self.raw_text_length,
            "warnings": list(self.warnings),
            "categories": self.categories,
            "dateRange": self.date_range,
        }


class StatementParser:
    """
    Main parser for flattened statement text.

    Shares one learned-pattern store between its merchant extractor and
    category classifier so user corrections apply immediately.
    """

    def __init__(
        self,
        store: Optional[LearnedPatternStore] = None,
        settings: Optional[Settings] = None,
        detector: Optional[BankFormatDetector] = None,
        strategies: Tuple[ExtractionStrategy, ...] = GENERIC_STRATEGIES,
    ):
        self.settings = settings or get_settings()
        self.store = store if store is not None else get_default_store()
        self.detector = detector or BankFormatDetector()
        self.strategies = strategies
        self.merchant_extractor = MerchantExtractor(self.store)
        self.classifier = CategoryClassifier(self.store, self.merchant_extractor)

    def resolve_bank(self, text: str, bank: Optional[str] = None) -> Optional[BankProfile]:
        """Use the bank override when it names a known profile, else detect from text."""
        if bank:
            profile = get_profile(bank)
            if profile:
                return profile
            logger.warning("unknown_bank_override", bank=bank)
        return self.detector.detect(text)

    def build_transaction(
        self, raw: RawMatch, date_format: str, source: str, current: ExtractionPass
    ) -> Optional[Transaction]:
        amount = parse_amount(raw.amount)
        if amount is None:
            return None

        txn_date = parse_date(raw.date, date_format)
        if txn_date is None:
            logger.warning("date_unparseable", raw=raw.date, date_format=date_format)
            current.date_substitutions += 1
            txn_date = date.today()

        description = raw.description.strip()
        return Transaction(
            date=txn_date.isoformat(),
            description=description,
            normalized_merchant=self.merchant_extractor.extract(description),
            amount=amount.amount,
            category=self.classifier.classify(description),
            confidence=amount.confidence,
            source=source,
        )

    def extract_bank_transactions(self, text: str, profile: BankProfile) -> ExtractionPass:
        """Run every layout of the bank over the whole text; debits only."""
        current = ExtractionPass()
        source = f"PDF ({profile.name})"

        for pattern in profile.patterns:
            for match in pattern.finditer(text):
                raw = raw_match_from(match)
                if raw.is_credit:
                    continue
                txn = self.build_transaction(raw, profile.date_format, source, current)
                if txn:
                    current.transactions.append(txn)

        current.matched = len(current.transactions)
        current.transactions = remove_duplicates(current.transactions)
        return current

    def extract_generic_transactions(self, text: str) -> ExtractionPass:
        """Apply every strategy to every line; the same spend may surface more than once."""
        current = ExtractionPass()
        lines = text.splitlines()

        for strategy in self.strategies:
            for line in lines:
                raw = strategy.apply(line)
                if raw is None:
                    continue
                txn = self.build_transaction(raw, DEFAULT_DATE_FORMAT, GENERIC_SOURCE, current)
                if txn:
                    current.transactions.append(txn)

        current.matched = len(current.transactions)
        current.transactions = remove_duplicates(current.transactions)
        return current

    def parse_text(self, text: str, bank: Optional[str] = None) -> StatementParseResult:
        """
        Parse extracted statement text.

        Args:
            text: Flattened statement text
            bank: Optional bank name override (HDFC, ICICI, ...)

        Raises:
            TextExtractionError: when the text is empty
        """
        if not text or not text.strip():
            raise TextExtractionError("No text found in document")

        raw_text_length = len(text)
        warnings: List[str] = []

        limit = self.settings.MAX_TEXT_LENGTH
        if raw_text_length > limit:
            logger.warning("statement_text_truncated", length=raw_text_length, limit=limit)
            warnings.append(f"Statement text exceeded {limit} characters and was truncated")
            text = text[:limit]

        profile = self.resolve_bank(text, bank)

        bank_pass = ExtractionPass()
        if profile:
            bank_pass = self.extract_bank_transactions(text, profile)
            logger.info(
                "bank_pass_complete",
                bank=profile.name,
                matched=bank_pass.matched,
                count=bank_pass.count,
            )

        chosen = bank_pass
        threshold = self.settings.MIN_BANK_TRANSACTIONS
        bank_succeeded = bank_pass.matched >= threshold
        if not bank_succeeded:
            warnings.append(FALLBACK_WARNING)
            generic_pass = self.extract_generic_transactions(text)
            logger.info(
                "generic_fallback",
                bank=profile.name if profile else None,
                bank_count=bank_pass.matched,
                generic_count=generic_pass.count,
            )
            if generic_pass.count > bank_pass.count:
                chosen = generic_pass

        if chosen.date_substitutions:
            warnings.append(
                f"{chosen.date_substitutions} transaction date(s) could not be read and were set to today"
            )

        self.store.record_parse(
            chosen.count,
            bank=profile.name if profile else None,
            bank_succeeded=bank_succeeded,
        )

        result = StatementParseResult(
            bank=profile.name if profile else UNKNOWN_BANK,
            transactions=chosen.transactions,
            raw_text_length=raw_text_length,
            warnings=warnings,
        )
        logger.info(
            "statement_parsed",
            bank=result.bank,
            count=result.count,
            text_length=raw_text_length,
        )
        return result
