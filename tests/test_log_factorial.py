import math

import pytest

from kmdiff.log_factorial import LogFactorialTable, log_factorial


@pytest.mark.parametrize("k", [0, 1])
def test_log_factorial_small_is_zero(k):
    assert log_factorial(k) == 0.0


@pytest.mark.parametrize("k", [2, 5, 17, 100])
def test_log_factorial_matches_lgamma(k):
    assert log_factorial(k) == pytest.approx(math.lgamma(k + 1))


def test_table_length():
    assert len(LogFactorialTable(50)) == 50


def test_table_entries_match_function():
    table = LogFactorialTable(30)
    for k in range(30):
        assert table[k] == pytest.approx(log_factorial(k))


def test_table_consecutive_difference_is_log():
    table = LogFactorialTable(20)
    for k in range(2, 20):
        assert table[k] - table[k - 1] == pytest.approx(math.log(k))


def test_table_beyond_size_is_computed():
    table = LogFactorialTable(5)
    assert table[40] == pytest.approx(math.lgamma(41))


def test_table_negative_index_raises():
    with pytest.raises(IndexError):
        LogFactorialTable(5)[-1]