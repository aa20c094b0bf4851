import pytest

from packages.statement_engine.bank_profiles import (
    BANK_PROFILES,
    BankFormatDetector,
    detect_bank,
    get_profile,
)


@pytest.fixture
def detector():
    return BankFormatDetector()


@pytest.mark.parametrize(
    "text,expected",
    [
        ("HDFC Bank Ltd\nStatement of account", "HDFC"),
        ("icici bank statement", "ICICI"),
        ("State Bank of India", "SBI"),
        ("AXIS BANK", "AXIS"),
        ("Kotak Mahindra Bank", "KOTAK"),
        ("Yes Bank Limited", "YES"),
        ("IndusInd Bank", "INDUSIND"),
        ("Bank of Baroda", "BOB"),
    ],
)
def test_detects_each_bank(detector, text, expected):
    profile = detector.detect(text)
    assert profile is not None
    assert profile.name == expected


def test_unknown_bank(detector):
    assert detector.detect("Monthly statement of account") is None
    assert detector.detect("") is None


def test_declared_order_wins():
    # Both identifiers present: HDFC is declared before ICICI
    assert detect_bank("ICICI Bank transfer to HDFC Bank").name == "HDFC"


def test_registry_order():
    assert [p.name for p in BANK_PROFILES] == [
        "HDFC",
        "ICICI",
        "SBI",
        "AXIS",
        "KOTAK",
        "YES",
        "INDUSIND",
        "BOB",
    ]


def test_get_profile_is_case_insensitive():
    assert get_profile("hdfc").name == "HDFC"
    assert get_profile(" Axis ").name == "AXIS"
    assert get_profile("unknown") is None
    assert get_profile("") is None


class TestHdfcPatterns:
    def setup_method(self):
        self.profile = get_profile("HDFC")

    def _matches(self, text):
        return [m.groupdict() for p in self.profile.patterns for m in p.finditer(text)]

    def test_date_first_line_with_type_flag(self):
        matches = self._matches("02/01/2024 ZOMATO ORDER 350.00 Dr")
        assert len(matches) == 1
        assert matches[0]["date"] == "02/01/2024"
        assert matches[0]["description"] == "ZOMATO ORDER"
        assert matches[0]["amount"] == "350.00"
        assert matches[0]["type"] == "Dr"

    def test_credit_flag_is_captured(self):
        matches = self._matches("05/01/2024 SALARY CREDIT 50,000.00 Cr")
        assert matches[0]["type"] == "Cr"
        assert matches[0]["amount"] == "50,000.00"

    def test_amount_first_layout(self):
        matches = self._matches("SWIGGY*BANGALORE 450.00 Dr 12/01/2024")
        assert len(matches) == 1
        assert matches[0]["description"] == "SWIGGY*BANGALORE"
        assert matches[0]["date"] == "12/01/2024"

    def test_matches_do_not_span_lines(self):
        assert self._matches("02/01/2024 ZOMATO\nORDER 350.00") == []
