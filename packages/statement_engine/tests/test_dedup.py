from itertools import combinations

from packages.statement_engine.dedup import is_duplicate, merge_results, remove_duplicates
from packages.statement_engine.models import Transaction


def make_txn(date="2024-01-02", merchant="Zomato", amount=350.0, source="PDF (HDFC)"):
    return Transaction(
        date=date,
        description=merchant.upper(),
        normalized_merchant=merchant,
        amount=amount,
        category="Food",
        confidence="high",
        source=source,
    )


def test_amounts_within_tolerance_are_duplicates():
    assert is_duplicate(make_txn(amount=100.0), make_txn(amount=100.005))
    assert not is_duplicate(make_txn(amount=100.0), make_txn(amount=100.02))


def test_date_and_merchant_must_match():
    assert not is_duplicate(make_txn(), make_txn(date="2024-01-03"))
    assert not is_duplicate(make_txn(), make_txn(merchant="Swiggy"))


def test_first_occurrence_wins():
    first = make_txn(source="PDF (HDFC)")
    second = make_txn(source="PDF Statement")
    other = make_txn(merchant="Uber", amount=220.0)

    result = remove_duplicates([first, second, other])
    assert result == [first, other]
    assert result[0].source == "PDF (HDFC)"


def test_merge_results_deduplicates_across_batches():
    bank = [make_txn(), make_txn(merchant="Uber", amount=220.0)]
    generic = [make_txn(source="PDF Statement"), make_txn(merchant="Netflix", amount=499.0)]

    merged = merge_results(bank, generic)
    assert [t.normalized_merchant for t in merged] == ["Zomato", "Uber", "Netflix"]


def test_output_has_no_duplicate_pairs():
    txns = [
        make_txn(amount=10.0),
        make_txn(amount=10.001),
        make_txn(amount=10.5),
        make_txn(date="2024-01-05", amount=10.0),
        make_txn(merchant="Swiggy", amount=10.0),
        make_txn(merchant="Swiggy", amount=10.009),
    ]
    unique = remove_duplicates(txns)
    assert len(unique) == 4
    for a, b in combinations(unique, 2):
        assert not is_duplicate(a, b)
