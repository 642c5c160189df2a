# lotto_analytics/probability.py
"""
Exact combinatorial probabilities for pick-K-of-N games.

These are the only true probabilities in the engine. Every valid combination
has the same chance of matching a uniformly random draw, and the tables built
here exist to show exactly that.
"""
import math
from dataclasses import dataclass
from typing import List, Iterable, Optional

from lotto_analytics.game_configs import GameProfile, PrizeCategory


def combinations(n: int, k: int) -> int:
    """
    Number of ways to choose k items from n, C(n, k).

    Uses the multiplicative formula over the smaller of k and n-k, dividing at
    every step so intermediate values stay small. Each partial product is itself a
    binomial coefficient, so the integer division is exact.

    Returns 0 for k < 0 or k > n (which covers negative n) instead of raising.
    """
    if k < 0 or k > n:
        return 0
    if k == 0 or k == n:
        return 1
    k = min(k, n - k)
    result = 1
    for i in range(k):
        result = result * (n - i) // (i + 1)
    return result


def match_probability(total_numbers: int, drawn_numbers: int, picks: int, matches: int) -> float:
    """
    Hypergeometric probability of matching exactly `matches` numbers.

    Args:
        total_numbers (int): N, the size of the drawable range (e.g. 90).
        drawn_numbers (int): M, how many numbers are drawn (e.g. 6).
        picks (int): P, how many numbers are played (e.g. 6).
        matches (int): k, the exact number of matches.

    Returns:
        float: C(M, k) * C(N-M, P-k) / C(N, P), or 0.0 when any term is undefined.
    """
    denominator = combinations(total_numbers, picks)
    if denominator == 0:
        return 0.0
    numerator = combinations(drawn_numbers, matches) * combinations(total_numbers - drawn_numbers, picks - matches)
    return numerator / denominator


def expected_matches(total_numbers: int, drawn_numbers: int, picks: int) -> float:
    """Expected number of matches per play, sum of k * P(k) over k = 0..min(M, P)."""
    return sum(
        k * match_probability(total_numbers, drawn_numbers, picks, k)
        for k in range(0, min(drawn_numbers, picks) + 1)
    )


@dataclass(frozen=True)
class MatchProbability:
    matches: int
    probability: float
    odds: str
    expected_plays: float
    human_readable: str
    prize: Optional[PrizeCategory] = None


@dataclass(frozen=True)
class ProbabilityTable:
    game: str
    total_numbers: int
    drawn_numbers: int
    picks: int
    total_combinations: int
    expected_matches: float
    rows: List[MatchProbability]


def _describe_plays(expected_plays: float) -> str:
    if math.isinf(expected_plays):
        return "Never"
    if expected_plays < 2:
        return "Almost every play"
    if expected_plays < 30:
        return f"About {round(expected_plays)} plays"
    if expected_plays < 365:
        return f"About {round(expected_plays / 30)} months (3 plays/week)"
    if expected_plays < 365 * 100:
        return f"About {round(expected_plays / 365)} years (daily play)"
    if expected_plays < 365 * 10000:
        return f"About {round(expected_plays / 365):,} years"
    return f"Practically never ({round(expected_plays):,} plays)"


def calculate_probability_table(profile: GameProfile) -> ProbabilityTable:
    """
    Builds the per-match-count probability table for a game.

    The same table applies to every combination a player could choose.
    Rows carry the indicative prize tier for their match count, where the game pays one.
    """
    n, m, p = profile.max_number, profile.pick_count, profile.pick_count
    rows = []
    for k in range(0, min(m, p) + 1):
        prob = match_probability(n, m, p, k)
        expected_plays = 1 / prob if prob > 0 else math.inf
        rows.append(MatchProbability(
            matches=k,
            probability=prob,
            odds=f"1 in {round(expected_plays):,}" if prob > 0 else "Never",
            expected_plays=expected_plays,
            human_readable=_describe_plays(expected_plays),
            prize=profile.prize_for(k),
        ))
    return ProbabilityTable(
        game=profile.name,
        total_numbers=n,
        drawn_numbers=m,
        picks=p,
        total_combinations=combinations(n, p),
        expected_matches=expected_matches(n, m, p),
        rows=rows,
    )


def combination_win_probability(numbers: Iterable[int], profile: GameProfile) -> float:
    """
    True probability that a valid combination matches a draw in full.

    Depends only on the game profile: 1 / C(max_number, pick_count) for every combination.

    Raises:
        InvalidCombinationError: If `numbers` is not a valid combination for the profile.
    """
    profile.check_combination(numbers)
    return 1 / combinations(profile.max_number, profile.pick_count)
