"""
Statement Engine

Bank-statement text parsing, merchant normalization, categorization and
learning from user corrections.
"""

__version__ = "0.1.0"

from .engine import (
    StatementEngine,
    add_custom_pattern,
    extract_account_summary,
    get_parsing_stats,
    learn_category_correction,
    learn_merchant_mapping,
    parse_statement,
    parse_text,
    recategorize_transaction,
)
from .learning import LearnedPatternStore, JsonFileBackend, InMemoryBackend
from .models import Transaction
from .normalizers import normalize_date, parse_amount
from .parser import StatementParser, StatementParseResult
from .summary import AccountSummary

__all__ = [
    "StatementEngine",
    "StatementParser",
    "StatementParseResult",
    "Transaction",
    "AccountSummary",
    "LearnedPatternStore",
    "JsonFileBackend",
    "InMemoryBackend",
    "parse_statement",
    "parse_text",
    "extract_account_summary",
    "learn_category_correction",
    "learn_merchant_mapping",
    "add_custom_pattern",
    "recategorize_transaction",
    "get_parsing_stats",
    "normalize_date",
    "parse_amount",
]
