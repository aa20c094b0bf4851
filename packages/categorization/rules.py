from typing import Dict, List, Optional, Protocol

from .constants import DEFAULT_CATEGORY_KEYWORDS, FALLBACK_CATEGORY


class LearnedCategories(Protocol):
    """The slice of the learned-pattern store the classifier reads."""

    custom_patterns: list

    def lookup_category(self, normalized_merchant: str) -> Optional[str]: ...


class MerchantNormalizer(Protocol):
    def extract(self, raw_description: str) -> str: ...


class KeywordMatcher:
    def __init__(self, rules: Optional[Dict[str, List[str]]] = None):
        # category -> lowercase keywords, walked in declaration order
        self.rules: Dict[str, List[str]] = rules if rules is not None else DEFAULT_CATEGORY_KEYWORDS

    def predict(self, text: str) -> Optional[str]:
        """
        Check if text contains any known keywords.
        Returns Category if match found, else None.
        """
        if not text:
            return None

        text_lower = text.lower()

        # Plain substring containment; the first category with any hit wins
        for category, keywords in self.rules.items():
            if any(keyword in text_lower for keyword in keywords):
                return category

        return None


class CategoryClassifier:
    """
    Assigns a spending category to a raw transaction description.

    Resolution order:
      1. learned correction for the normalized merchant
      2. user-added custom patterns, oldest first
      3. static keyword table
      4. "Other"
    """

    def __init__(
        self,
        store: Optional[LearnedCategories] = None,
        merchant_extractor: Optional[MerchantNormalizer] = None,
        matcher: Optional[KeywordMatcher] = None,
    ):
        self.store = store
        self.merchant_extractor = merchant_extractor
        self.matcher = matcher or KeywordMatcher()

    def classify(self, description: str) -> str:
        if not description:
            return FALLBACK_CATEGORY

        text_lower = description.lower()

        if self.store is not None:
            if self.merchant_extractor is not None:
                normalized = self.merchant_extractor.extract(description)
                corrected = self.store.lookup_category(normalized)
                if corrected:
                    return corrected

            for pattern in self.store.custom_patterns:
                if pattern.keyword.lower() in text_lower:
                    return pattern.category

        return self.matcher.predict(description) or FALLBACK_CATEGORY
