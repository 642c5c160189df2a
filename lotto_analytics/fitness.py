# lotto_analytics/fitness.py
"""Bounded 0-100 pattern-quality score for a candidate combination."""
from typing import Iterable, Sequence

from lotto_analytics.distribution import DistributionProfile, analyze_distribution, target_profile
from lotto_analytics.game_configs import GameProfile
from lotto_analytics.influence import InfluenceScore, influence_by_number


def calculate_fitness(
    distribution: DistributionProfile,
    target: DistributionProfile,
    influence_scores: Iterable[InfluenceScore],
    numbers: Sequence[int],
    max_number: int,
) -> float:
    """
    Scores how closely a combination matches the target shape, with a bonus for influence.

    Starting from 100: up to -20 for sum distance, -15 for spread distance, -10 per
    consecutive run (max -30), up to +30 for mean influence relative to a uniform
    share, and up to -10 for density distance. The result is clamped to [0, 100].
    It is a display and exploration score only.
    """
    lookup = influence_by_number(influence_scores)
    numbers = list(numbers)
    mean_influence = (
        sum(lookup[n].normalized_score if n in lookup else 0.0 for n in numbers) / len(numbers)
        if numbers else 0.0
    )
    uniform_share = 100 / max_number

    score = 100.0
    score -= min(20.0, abs(distribution.sum - target.sum) / target.sum * 20)
    score -= min(15.0, abs(distribution.spread - target.spread) / target.spread * 15)
    score -= min(30.0, distribution.consecutive_run_count * 10)
    score += min(30.0, (mean_influence / uniform_share) * 10)
    score -= min(10.0, abs(distribution.density - target.density) * 10)
    return max(0.0, min(100.0, score))


def score_combination(
    numbers: Sequence[int], profile: GameProfile, influence_scores: Iterable[InfluenceScore]
) -> float:
    """Fitness of a combination against the game's target profile."""
    canonical = profile.check_combination(numbers)
    return calculate_fitness(
        analyze_distribution(canonical, profile.max_number),
        target_profile(profile),
        influence_scores,
        canonical,
        profile.max_number,
    )
