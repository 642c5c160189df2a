import math

import pytest

from lotto_analytics.game_configs import InvalidCombinationError
from lotto_analytics.probability import (
    combinations, match_probability, expected_matches, calculate_probability_table, combination_win_probability,
)


def test_superenalotto_combination_count():
    assert combinations(90, 6) == 622614630


def test_combinations_is_symmetric():
    for n in range(0, 40):
        for k in range(0, n + 1):
            assert combinations(n, k) == combinations(n, n - k)


def test_combinations_matches_math_comb():
    for n, k in [(90, 5), (90, 10), (55, 5), (100, 50)]:
        assert combinations(n, k) == math.comb(n, k)


@pytest.mark.parametrize("n, k", [(5, -1), (5, 6), (-3, 2), (-1, -1)])
def test_invalid_combinations_are_zero(n, k):
    assert combinations(n, k) == 0


def test_trivial_combinations():
    assert combinations(0, 0) == 1
    assert combinations(7, 0) == 1
    assert combinations(7, 7) == 1


@pytest.mark.parametrize("n, m, p", [(90, 6, 6), (90, 5, 5), (55, 5, 5), (90, 20, 10), (10, 3, 7), (12, 12, 1)])
def test_match_probabilities_sum_to_one(n, m, p):
    total = sum(match_probability(n, m, p, k) for k in range(0, min(m, p) + 1))
    assert total == pytest.approx(1.0, abs=1e-9)


def test_full_match_is_inverse_of_combination_count():
    assert match_probability(90, 6, 6, 6) == pytest.approx(1 / 622614630, rel=1e-12)


def test_zero_matches_superenalotto():
    assert match_probability(90, 6, 6, 0) == pytest.approx(0.653, abs=0.01)


def test_invalid_match_probability_is_zero():
    assert match_probability(90, 6, 6, 7) == 0
    assert match_probability(90, 6, 6, -1) == 0
    assert match_probability(-5, 6, 6, 1) == 0
    assert match_probability(5, 6, 6, 1) == 0


def test_expected_matches_is_hypergeometric_mean():
    assert expected_matches(90, 6, 6) == pytest.approx(6 * 6 / 90)
    assert expected_matches(55, 5, 5) == pytest.approx(5 * 5 / 55)


def test_probability_table(superenalotto):
    table = calculate_probability_table(superenalotto)
    assert table.total_combinations == 622614630
    assert [row.matches for row in table.rows] == list(range(7))
    assert sum(row.probability for row in table.rows) == pytest.approx(1.0)
    assert table.rows[6].odds == "1 in 622,614,630"
    assert table.rows[0].human_readable == "Almost every play"
    assert table.rows[6].human_readable.startswith("Practically never")
    assert table.expected_matches == pytest.approx(0.4)


def test_every_combination_has_the_same_win_probability(superenalotto):
    first = combination_win_probability([1, 2, 3, 4, 5, 6], superenalotto)
    second = combination_win_probability([7, 23, 45, 67, 78, 89], superenalotto)
    assert first == second == 1 / combinations(90, 6)


def test_win_probability_rejects_invalid_combination(superenalotto):
    with pytest.raises(InvalidCombinationError):
        combination_win_probability([1, 2, 3], superenalotto)


def test_rows_carry_indicative_prize_tiers(superenalotto, lotto):
    rows = calculate_probability_table(superenalotto).rows
    assert rows[0].prize is None
    assert rows[1].prize is None
    assert rows[6].prize.category == "6 numeri"
    assert rows[6].prize.indicative_amount == "Jackpot"

    lotto_rows = calculate_probability_table(lotto).rows
    assert [row.prize.category for row in lotto_rows[1:]] == ["Estratto", "Ambo", "Terno", "Quaterna", "Cinquina"]
