# lotto_analytics/co_occurrence.py
"""
Pairwise co-occurrence analysis.

Scores how much more (or less) often two numbers were drawn together than
independent marginal frequencies would predict. The lift score is a bounded
descriptive measure; it says nothing about future draws.
"""
import logging
import math
from collections import Counter
from dataclasses import dataclass
from itertools import combinations as pairs_of
from typing import Dict, List, Optional, Sequence, Tuple, Iterable

from lotto_analytics.analysis_config import MIN_CO_OCCURRENCES, CO_OCCURRENCE_EPSILON, CO_OCCURRENCE_LIMIT
from lotto_analytics.draw_history import DrawRecord, variant_history
from lotto_analytics.frequency_analyzer import calculate_frequencies
from lotto_analytics.game_configs import GameProfile

# Largest float below 1.0; tanh saturates to exactly 1.0 for large arguments.
_LIFT_SCORE_BOUND = math.nextafter(1.0, 0.0)


@dataclass(frozen=True)
class CoOccurrencePair:
    number_a: int
    number_b: int
    observed_count: int
    observed_frequency_pct: float
    expected_frequency_pct: float
    lift: float
    lift_score: float

    @property
    def pair(self) -> Tuple[int, int]:
        return (self.number_a, self.number_b)


def lift_score(lift: float) -> float:
    """tanh(lift - 1): zero at independence, strictly inside (-1, 1) for any finite positive lift."""
    score = math.tanh(lift - 1)
    return max(-_LIFT_SCORE_BOUND, min(_LIFT_SCORE_BOUND, score))


def calculate_co_occurrences(
    history: Sequence[DrawRecord],
    profile: GameProfile,
    variant: Optional[str] = None,
    min_occurrences: int = MIN_CO_OCCURRENCES,
    epsilon: float = CO_OCCURRENCE_EPSILON,
) -> List[CoOccurrencePair]:
    """
    Computes lift statistics for every number pair drawn together at least `min_occurrences` times.

    Args:
        history (Sequence[DrawRecord]): Draws, newest first.
        profile (GameProfile): The game's rules.
        variant (Optional[str]): Analyse one variant's numbers.
        min_occurrences (int): Pairs seen fewer times are discarded as noise.
        epsilon (float): Floor for the expected frequency, in percent.

    Returns:
        List[CoOccurrencePair]: Sorted by lift score descending, then by pair ascending.
    """
    draws = variant_history(history, profile, variant)
    total = len(draws)
    if total == 0:
        return []

    pair_counts: Counter = Counter()
    for draw in draws:
        pair_counts.update(pairs_of(draw.numbers, 2))

    marginals = {stat.number: stat.percentage for stat in calculate_frequencies(draws, profile)}

    results = []
    for (a, b), count in pair_counts.items():
        if count < min_occurrences:
            continue
        observed = count / total * 100
        expected = max(epsilon, marginals[a] * marginals[b] / 100)
        lift = observed / expected
        results.append(CoOccurrencePair(
            number_a=a,
            number_b=b,
            observed_count=count,
            observed_frequency_pct=observed,
            expected_frequency_pct=expected,
            lift=lift,
            lift_score=lift_score(lift),
        ))

    logging.debug(
        f"Co-occurrence for '{profile.name}': {len(pair_counts)} pairs seen, "
        f"{len(results)} kept with >= {min_occurrences} occurrences."
    )
    return sorted(results, key=lambda p: (-p.lift_score, p.number_a, p.number_b))


def top_co_occurrences(pairs: Iterable[CoOccurrencePair], limit: int = CO_OCCURRENCE_LIMIT) -> List[CoOccurrencePair]:
    return list(pairs)[:limit]


def pair_lift_lookup(pairs: Iterable[CoOccurrencePair]) -> Dict[Tuple[int, int], CoOccurrencePair]:
    """Maps each (smaller, larger) pair to its statistics."""
    return {pair.pair: pair for pair in pairs}
