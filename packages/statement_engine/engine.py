"""
Public facade for the statement engine.

Wires text extraction, parsing, account-summary scraping and the learning
operations around one learned-pattern store. Parsing never raises: any
failure comes back as a ``success: False`` result with suggestions.
"""

from typing import Any, Dict, Mapping, Optional, Union

import structlog

from packages.core.config import Settings, get_settings
from packages.core.errors import TextExtractionError, build_failure_result

from .learning import LearnedPatternStore, get_default_store
from .models import Transaction
from .parser import StatementParser
from .pdf_text import TextExtractor, extract_text
from .summary import AccountSummary, AccountSummaryExtractor

logger = structlog.get_logger()

TransactionLike = Union[Transaction, Mapping[str, Any]]


class StatementEngine:
    def __init__(
        self,
        store: Optional[LearnedPatternStore] = None,
        extractor: TextExtractor = extract_text,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            store: Learned-pattern store; defaults to the process-wide one
            extractor: Callable turning document bytes into text
            settings: Engine settings; loaded from the environment if omitted
        """
        self.settings = settings or get_settings()
        self.store = store if store is not None else get_default_store()
        self.extractor = extractor
        self.parser = StatementParser(store=self.store, settings=self.settings)
        self.summary_extractor = AccountSummaryExtractor()

    # --- parsing ---------------------------------------------------------

    def parse_statement(self, buffer: bytes, bank: Optional[str] = None) -> Dict[str, Any]:
        """Extract text from a document and parse it into transactions."""
        try:
            text = self.extractor(buffer)
        except TextExtractionError as e:
            logger.warning("statement_parse_failed", error=e.detail)
            return build_failure_result(e.detail)
        except Exception as e:
            logger.exception("statement_parse_failed")
            return build_failure_result(str(e))
        return self.parse_text(text, bank=bank)

    def parse_text(self, text: str, bank: Optional[str] = None) -> Dict[str, Any]:
        """Parse already-extracted statement text."""
        try:
            return self.parser.parse_text(text, bank=bank).to_dict()
        except TextExtractionError as e:
            logger.warning("statement_parse_failed", error=e.detail)
            return build_failure_result(e.detail)
        except Exception as e:
            logger.exception("statement_parse_failed")
            return build_failure_result(str(e))

    def extract_account_summary(self, buffer: bytes) -> Optional[AccountSummary]:
        """Scrape header fields; None only when the document yields no text."""
        try:
            text = self.extractor(buffer)
        except TextExtractionError as e:
            logger.warning("account_summary_failed", error=e.detail)
            return None
        return self.summary_extractor.extract(text)

    # --- learning --------------------------------------------------------

    def learn_category_correction(self, merchant: str, category: str) -> bool:
        """Remember a category for everything that normalizes to this merchant."""
        normalized = self.parser.merchant_extractor.extract(merchant)
        self.store.record_correction(normalized, category)
        return True

    def learn_merchant_mapping(self, raw_description: str, canonical_name: str) -> bool:
        self.store.record_merchant_mapping(raw_description, canonical_name)
        return True

    def add_custom_pattern(self, keyword: str, category: str) -> bool:
        self.store.record_custom_pattern(keyword, category)
        return True

    def recategorize_transaction(self, transaction: TransactionLike, category: str) -> TransactionLike:
        """
        Learn from a user's recategorization and return the updated transaction.

        Accepts a Transaction or its wire dict and returns the same kind,
        with the new category and ``recategorized`` set.
        """
        if isinstance(transaction, Transaction):
            self.learn_category_correction(
                transaction.normalized_merchant or transaction.description, category
            )
            return transaction.with_category(category)

        txn = Transaction.from_dict(transaction)
        self.learn_category_correction(txn.normalized_merchant or txn.description, category)
        return {**transaction, "category": category, "recategorized": True}

    def get_parsing_stats(self) -> Dict[str, Any]:
        return self.store.stats()


def parse_statement(
    buffer: bytes,
    bank: Optional[str] = None,
    store: Optional[LearnedPatternStore] = None,
    extractor: TextExtractor = extract_text,
) -> Dict[str, Any]:
    return StatementEngine(store=store, extractor=extractor).parse_statement(buffer, bank=bank)


def parse_text(
    text: str, bank: Optional[str] = None, store: Optional[LearnedPatternStore] = None
) -> Dict[str, Any]:
    return StatementEngine(store=store).parse_text(text, bank=bank)


def extract_account_summary(
    buffer: bytes, store: Optional[LearnedPatternStore] = None, extractor: TextExtractor = extract_text
) -> Optional[AccountSummary]:
    return StatementEngine(store=store, extractor=extractor).extract_account_summary(buffer)


def learn_category_correction(
    merchant: str, category: str, store: Optional[LearnedPatternStore] = None
) -> bool:
    return StatementEngine(store=store).learn_category_correction(merchant, category)


def learn_merchant_mapping(
    raw_description: str, canonical_name: str, store: Optional[LearnedPatternStore] = None
) -> bool:
    return StatementEngine(store=store).learn_merchant_mapping(raw_description, canonical_name)


def add_custom_pattern(keyword: str, category: str, store: Optional[LearnedPatternStore] = None) -> bool:
    return StatementEngine(store=store).add_custom_pattern(keyword, category)


def recategorize_transaction(
    transaction: TransactionLike, category: str, store: Optional[LearnedPatternStore] = None
) -> TransactionLike:
    return StatementEngine(store=store).recategorize_transaction(transaction, category)


def get_parsing_stats(store: Optional[LearnedPatternStore] = None) -> Dict[str, Any]:
    return StatementEngine(store=store).get_parsing_stats()
