"""Standardized transaction structures produced by the statement parser."""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class RawMatch:
    """Fields captured from one pattern match, before normalization."""

    date: str
    description: str
    amount: str
    type_flag: Optional[str] = None

    @property
    def is_credit(self) -> bool:
        return bool(self.type_flag) and self.type_flag.strip().lower() in ("cr", "credit")


@dataclass(frozen=True)
class Transaction:
    """One outgoing spend extracted from a statement."""

    date: str  # YYYY-MM-DD
    description: str
    normalized_merchant: str
    amount: float
    category: str
    confidence: str  # "high" | "medium"
    source: str
    recategorized: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire shape used by API consumers."""
        data = {
            "date": self.date,
            "description": self.description,
            "normalizedMerchant": self.normalized_merchant,
            "amount": self.amount,
            "category": self.category,
            "confidence": self.confidence,
            "source": self.source,
        }
        if self.recategorized:
            data["recategorized"] = True
        return data

    def to_record(self) -> Dict[str, Any]:
        """Snake_case record, used for DataFrame construction."""
        return asdict(self)

    def with_category(self, category: str) -> "Transaction":
        return replace(self, category=category, recategorized=True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        """Build from either the camelCase wire shape or a snake_case record."""
        return cls(
            date=str(data.get("date", "")),
            description=str(data.get("description", "")),
            normalized_merchant=str(
                data.get("normalizedMerchant", data.get("normalized_merchant", "")) or ""
            ),
            amount=float(data.get("amount", 0.0)),
            category=str(data.get("category", "Other")),
            confidence=str(data.get("confidence", "high")),
            source=str(data.get("source", "")),
            recategorized=bool(data.get("recategorized", False)),
        )
