import re
from typing import List, Optional, Tuple

from .learning import LearnedPatternStore


class MerchantExtractor:
    def __init__(self, store: Optional[LearnedPatternStore] = None):
        self.store = store

        # Ordered list of known merchants (order matters for substring matching).
        # Tokens are payment-processor fragments as they appear in raw statements.
        self.known_merchants: List[Tuple[str, List[str]]] = [
            # Food delivery
            ("Swiggy", ["SWIGGY*", "SWIGGY PRIVATE", "BUNDL TECH", "BUNDL*"]),
            ("Zomato", ["ZOMATO*", "ZOMATO PVT", "ZOMATO ORDER"]),
            ("Uber eats", ["UBER* EATS", "UBEREATS*"]),
            # Transport
            ("Uber", ["UBER* TRIP", "UBER*TRIP", "UBER BV"]),
            ("Ola", ["OLA*", "ANI TECH", "OLACABS"]),
            ("Rapido", ["RAPIDO*", "ROPPEN*"]),
            # Shopping
            ("Amazon", ["AMAZON*", "AMZN*", "AMZ*", "AMAZON PAY", "AMAZON SELLER"]),
            ("Flipkart", ["FLIPKART*", "FK*", "FLIPKART INTERNET"]),
            ("Myntra", ["MYNTRA*", "MYNTRA DESIGNS"]),
            # Groceries
            ("Bigbasket", ["BIGBASKET*", "SUPERMARKET GROCERY", "BB DAILY"]),
            ("Blinkit", ["BLINKIT*", "GROFERS*", "ZOMATO BLINKIT"]),
            ("Zepto", ["ZEPTO*", "KIRANAKART*"]),
            # Entertainment
            ("Netflix", ["NETFLIX*", "NETFLIX.COM"]),
            ("Spotify", ["SPOTIFY*", "SPOTIFY AB"]),
            ("Hotstar", ["HOTSTAR*", "DISNEY+HOTSTAR"]),
            # Utilities
            ("Airtel", ["AIRTEL*", "BHARTI AIRTEL", "AIRTEL PAYMENT"]),
            ("Jio", ["JIO*", "RELIANCE JIO", "JIO FIBER"]),
            # UPI apps
            ("Phonepe", ["PHONEPE*", "PHONEPE PVT"]),
            ("Paytm", ["PAYTM*", "ONE97*", "PAYTM PAYMENT"]),
            ("Gpay", ["GOOGLE*PAY", "GOOGLE PAY", "GPY*"]),
        ]

        # Applied in order during generic cleanup
        self.noise_patterns = [
            (re.compile(r"\*+"), " "),
            (re.compile(r"\d{10,}"), ""),  # phone / account numbers
            (re.compile(r"[A-Z]{2}\d{6,}"), ""),  # reference codes
            (re.compile(r"(?:UPI|IMPS|NEFT)[-/]?\d+", re.IGNORECASE), ""),
        ]

    def match_known(self, raw_description: str) -> Optional[str]:
        """Return the canonical name of the first known merchant whose token appears."""
        upper = raw_description.upper()
        for official_name, tokens in self.known_merchants:
            if any(token.replace("*", "") in upper for token in tokens):
                return official_name
        return None

    def clean(self, raw_description: str) -> str:
        cleaned = raw_description
        for pattern, replacement in self.noise_patterns:
            cleaned = pattern.sub(replacement, cleaned)
        cleaned = re.sub(r"\s+", " ", cleaned).strip()
        return " ".join(word[:1].upper() + word[1:].lower() for word in cleaned.split(" ") if word)

    def extract(self, raw_description: str) -> str:
        if not raw_description:
            return ""

        # Strategy 1: user-taught mapping overrides everything
        if self.store is not None:
            learned = self.store.lookup_merchant(raw_description)
            if learned:
                return learned

        # Strategy 2: known merchant tokens
        known = self.match_known(raw_description)
        if known:
            return known

        # Strategy 3: heuristic cleanup; short leftovers are not trusted
        cleaned = self.clean(raw_description)
        if len(cleaned) <= 3:
            return raw_description
        return cleaned
