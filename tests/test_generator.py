import random

import pytest

from lotto_analytics.analysis_config import AnalysisConfig
from lotto_analytics.draw_history import UnsuccessfulCombination
from lotto_analytics.game_configs import GAME_RULES, GameProfile, ConfigurationError, get_game_profile
from lotto_analytics.generator import (
    Strategy, generate_combination, generate_combinations, soft_filter_violations, strategy_counts,
    VIOLATION_CONSECUTIVE_RUNS, VIOLATION_UNSUCCESSFUL_MATCH, VIOLATION_UNLUCKY_PAIR,
)


@pytest.mark.parametrize("game", list(GAME_RULES))
@pytest.mark.parametrize("strategy", [s.value for s in Strategy])
def test_candidates_are_valid_combinations(game, strategy, make_history):
    profile = get_game_profile(game)
    rng = random.Random(3)
    history = make_history([sorted(rng.sample(range(1, profile.max_number + 1), profile.pick_count))
                            for _ in range(30)])
    candidates = generate_combinations(profile, history, random.Random(11), 5, strategy)
    assert len(candidates) == 5
    for candidate in candidates:
        assert profile.is_valid_combination(candidate.numbers)
        assert list(candidate.numbers) == sorted(candidate.numbers)
        assert 1 <= candidate.metadata.attempts <= 50
        assert candidate.metadata.strategy == strategy


def test_same_seed_replays(superenalotto, toy_history):
    first = generate_combinations(superenalotto, toy_history, random.Random(42), 3)
    second = generate_combinations(superenalotto, toy_history, random.Random(42), 3)
    assert [c.numbers for c in first] == [c.numbers for c in second]
    assert [c.supplementary for c in first] == [c.supplementary for c in second]


def test_empty_history_still_generates(superenalotto):
    candidate = generate_combination(superenalotto, [], random.Random(1))
    assert superenalotto.is_valid_combination(candidate.numbers)


def test_unsatisfiable_filters_return_flagged_candidate():
    # Every 6-of-7 set contains consecutive numbers
    tiny = GameProfile(name="tiny", max_number=7, pick_count=6)
    config = AnalysisConfig(max_attempts=5)
    candidate = generate_combination(tiny, [], random.Random(0), config=config)
    assert tiny.is_valid_combination(candidate.numbers)
    assert candidate.metadata.attempts == 5
    assert candidate.metadata.soft_filter_violated
    assert VIOLATION_CONSECUTIVE_RUNS in candidate.metadata.violations


def test_soft_filter_violations():
    unsuccessful = {(3, 13, 23, 33, 43, 53)}
    pair_counts = {(3, 13): 3, (5, 15): 2}
    assert soft_filter_violations([1, 11, 21, 31, 41, 51], unsuccessful, pair_counts) == []
    assert soft_filter_violations([1, 2, 21, 31, 41, 51], unsuccessful, pair_counts) == [VIOLATION_CONSECUTIVE_RUNS]
    assert soft_filter_violations([53, 43, 33, 23, 13, 3], unsuccessful, pair_counts) == [
        VIOLATION_UNSUCCESSFUL_MATCH, VIOLATION_UNLUCKY_PAIR,
    ]
    assert soft_filter_violations([5, 15, 25, 35, 45, 55], unsuccessful, pair_counts) == []


def test_candidates_avoid_unsuccessful_pairs(superenalotto, toy_history):
    unsuccessful = [UnsuccessfulCombination(numbers=(1, 2, 3, 4, 5, 6))] * 3
    candidates = generate_combinations(superenalotto, toy_history, random.Random(5), 10, unsuccessful=unsuccessful)
    for candidate in candidates:
        if not candidate.metadata.soft_filter_violated:
            assert len(set(candidate.numbers) & {1, 2, 3, 4, 5, 6}) <= 1


@pytest.mark.parametrize("strategy, pick, expected", [
    (Strategy.STANDARD, 6, {"frequent": 4, "delayed": 1, "infrequent": 0, "uniform": 1}),
    (Strategy.STANDARD, 5, {"frequent": 3, "delayed": 1, "infrequent": 0, "uniform": 1}),
    (Strategy.STANDARD, 10, {"frequent": 6, "delayed": 3, "infrequent": 0, "uniform": 1}),
    (Strategy.HIGH_VARIABILITY, 6, {"frequent": 0, "delayed": 0, "infrequent": 3, "uniform": 3}),
    (Strategy.HIGH_VARIABILITY, 5, {"frequent": 0, "delayed": 0, "infrequent": 2, "uniform": 3}),
])
def test_strategy_counts(strategy, pick, expected):
    assert strategy_counts(strategy, pick) == expected


def test_frequent_pool_drives_standard_strategy(superenalotto, make_history):
    history = make_history([[1, 3, 5, 7, 9, 11]] * 5)
    config = AnalysisConfig(top_pool_size=6, standard_frequent_share=1.0, standard_delayed_share=0.0)
    candidate = generate_combination(superenalotto, history, random.Random(9), config=config)
    assert candidate.numbers == (1, 3, 5, 7, 9, 11)


def test_infrequent_pool_drives_high_variability(superenalotto, make_history):
    history = make_history([[1, 3, 5, 7, 9, 11]] * 5)
    config = AnalysisConfig(top_pool_size=6, high_variability_infrequent_share=1.0)
    candidate = generate_combination(superenalotto, history, random.Random(9), "high-variability", config=config)
    assert candidate.numbers == (2, 4, 6, 8, 10, 12)


def test_scores_are_optional(superenalotto, toy_history):
    scored = generate_combination(superenalotto, toy_history, random.Random(2))
    assert 0 <= scored.fitness_score <= 100
    assert scored.distribution is not None
    assert [s.number for s in scored.influence_scores] == list(scored.numbers)

    bare = generate_combination(superenalotto, toy_history, random.Random(2), include_scores=False)
    assert bare.fitness_score is None
    assert bare.distribution is None
    assert bare.influence_scores == ()


def test_supplementary_numbers(superenalotto, toy_history):
    for candidate in generate_combinations(superenalotto, toy_history, random.Random(8), 20):
        (jolly,) = candidate.supplementary["jolly"]
        (superstar,) = candidate.supplementary["superstar"]
        assert jolly not in candidate.numbers
        assert 1 <= jolly <= 90 and 1 <= superstar <= 90


def test_variant_generation(lotto, wheel_history):
    candidate = generate_combination(lotto, wheel_history, random.Random(4), variant="Bari")
    assert lotto.is_valid_combination(candidate.numbers)
    assert candidate.metadata.variant == "Bari"
    assert candidate.supplementary == {}


def test_invalid_requests(superenalotto, lotto):
    with pytest.raises(ConfigurationError):
        generate_combination(superenalotto, [], random.Random(), "lucky")
    with pytest.raises(ConfigurationError):
        generate_combination(lotto, [], random.Random(), variant="Atlantis")
    with pytest.raises(ConfigurationError):
        generate_combinations(superenalotto, [], random.Random(), -1)
