import pytest

from feddir.common import (
    FedError,
    RecordWrongLengthError,
    RoutingNumberNumericError,
    jaro_winkler,
    levenshtein,
    normalize,
    validate_routing_number_query,
)


def test_normalize_keeps_clean_name():
    assert normalize("FEDERAL RESERVE BANK") == "FEDERAL RESERVE BANK"


def test_normalize_collapses_whitespace():
    assert normalize("  LINCOLN   SAVINGS BANK ") == "LINCOLN SAVINGS BANK"


def test_normalize_is_idempotent():
    once = normalize("WELLS FARGO GNMA-P&I")
    assert normalize(once) == once


def test_jaro_winkler_identical_is_one():
    assert jaro_winkler("farmers state bank", "farmers state bank") == 1.0


def test_jaro_winkler_disjoint_is_zero():
    assert jaro_winkler("abc", "xyz") == 0.0


def test_jaro_winkler_empty():
    assert jaro_winkler("", "") == 1.0
    assert jaro_winkler("abc", "") == 0.0


def test_jaro_winkler_worked_example():
    assert jaro_winkler("MARTHA", "MARHTA") == pytest.approx(0.9611, abs=1e-4)


@pytest.mark.parametrize("a,b", [("325183657", "325"), ("first bank", "farmers"), ("chase", "jpmorgan chase")])
def test_jaro_winkler_symmetric_and_bounded(a, b):
    score = jaro_winkler(a, b)
    assert 0.0 <= score <= 1.0
    assert score == pytest.approx(jaro_winkler(b, a))


def test_levenshtein_identical_is_one():
    assert levenshtein("wells fargo", "wells fargo") == 1.0


def test_levenshtein_worked_example():
    assert levenshtein("kitten", "sitting") == pytest.approx(1 - 3 / 7)


def test_levenshtein_entirely_different():
    assert levenshtein("abc", "xyz") == 0.0


def test_levenshtein_empty():
    assert levenshtein("", "") == 1.0
    assert levenshtein("", "abcd") == 0.0


def test_validate_trims():
    assert validate_routing_number_query("  325 ") == "325"


def test_validate_too_short():
    with pytest.raises(RecordWrongLengthError) as info:
        validate_routing_number_query("0")
    assert (info.value.expected, info.value.actual) == (2, 1)


def test_validate_too_long():
    with pytest.raises(RecordWrongLengthError) as info:
        validate_routing_number_query("1234567890")
    assert (info.value.expected, info.value.actual) == (9, 10)


def test_validate_not_numeric():
    with pytest.raises(RoutingNumberNumericError):
        validate_routing_number_query("1  S5")


def test_errors_share_base():
    with pytest.raises(FedError):
        validate_routing_number_query("ab")