import pytest

from packages.statement_engine.learning import InMemoryBackend, LearnedPatternStore
from packages.statement_engine.merchant_extractor import MerchantExtractor


@pytest.fixture
def extractor():
    return MerchantExtractor()


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("SWIGGY*BANGALORE", "Swiggy"),
        ("BUNDL TECHNOLOGIES", "Swiggy"),
        ("ZOMATO ORDER 1234", "Zomato"),
        ("UBER TRIP BLR", "Uber"),
        ("AMAZON PAY INDIA PRIVATE LIMI", "Amazon"),
        ("NETFLIX.COM", "Netflix"),
        ("GOOGLE PAY RECHARGE", "Gpay"),
        ("one97 communications", "Paytm"),
    ],
)
def test_known_merchants(extractor, raw, expected):
    assert extractor.extract(raw) == expected


def test_first_table_entry_wins(extractor):
    # Matches both Zomato and Blinkit tokens; Zomato is declared first
    assert extractor.extract("ZOMATO BLINKIT") == "Zomato"


def test_cleanup_strips_noise(extractor):
    assert extractor.extract("RANDOM STORE 9876543210 BLR") == "Random Store Blr"
    assert extractor.extract("UPI-123456 LOCAL KIRANA") == "Local Kirana"
    assert extractor.extract("AB12345678 CAFE COFFEE") == "Cafe Coffee"
    assert extractor.extract("TEA**STALL") == "Tea Stall"


def test_short_cleanup_returns_raw(extractor):
    assert extractor.extract("ATM") == "ATM"
    assert extractor.extract("AB1234567") == "AB1234567"


def test_empty_input(extractor):
    assert extractor.extract("") == ""
    assert extractor.extract(None) == ""


def test_learned_mapping_overrides_static_table():
    store = LearnedPatternStore(InMemoryBackend())
    store.record_merchant_mapping("SWIGGY*BLR123", "Swiggy Foods")

    extractor = MerchantExtractor(store)
    assert extractor.extract("SWIGGY*BLR123") == "Swiggy Foods"
    assert extractor.extract("swiggy*blr123") == "Swiggy Foods"
    # Other Swiggy descriptions still use the static table
    assert extractor.extract("SWIGGY*BLR999") == "Swiggy"
