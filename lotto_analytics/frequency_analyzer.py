# lotto_analytics/frequency_analyzer.py
"""
This module analyzes draw history for per-number frequency and delay (how many
draws ago a number last appeared), for the main pool, a single variant, or a
supplementary pool. It also summarises the user's unsuccessful combinations,
which the rest of the engine uses only as a negative signal.

Rankings always break ties by ascending number so results are deterministic.
"""
import logging
from collections import Counter
from dataclasses import dataclass
from itertools import combinations as pairs_of
from typing import List, Optional, Sequence, Tuple, Iterable

import pandas as pd

from lotto_analytics.analysis_config import REPORT_LIMIT
from lotto_analytics.draw_history import DrawRecord, UnsuccessfulCombination, variant_history, relevant_unsuccessful
from lotto_analytics.game_configs import GameProfile


@dataclass(frozen=True)
class FrequencyStat:
    number: int
    count: int
    percentage: float


@dataclass(frozen=True)
class DelayStat:
    number: int
    delay: int


@dataclass(frozen=True)
class UnluckyPair:
    pair: Tuple[int, int]
    count: int


def _count_frequencies(number_sets: List[Sequence[int]], numbers: range) -> List[FrequencyStat]:
    """Counts each number's occurrences across the given sets, over the full number range."""
    total = len(number_sets)
    values = pd.Series([n for number_set in number_sets for n in number_set], dtype='int64')
    counts = values.value_counts().reindex(numbers, fill_value=0)
    return [
        FrequencyStat(
            number=int(number),
            count=int(count),
            percentage=(int(count) / total * 100) if total else 0.0,
        )
        for number, count in counts.items()
    ]


def calculate_frequencies(
    history: Sequence[DrawRecord], profile: GameProfile, variant: Optional[str] = None
) -> List[FrequencyStat]:
    """
    Counts how often every number 1..max_number was drawn.

    Args:
        history (Sequence[DrawRecord]): Draws, newest first.
        profile (GameProfile): The game's rules.
        variant (Optional[str]): Analyse one variant's numbers instead of the main set.

    Returns:
        List[FrequencyStat]: One entry per number, ascending by number. Percentages are
        relative to the number of draws analysed, and all zero for an empty history.
    """
    draws = variant_history(history, profile, variant)
    return _count_frequencies([draw.numbers for draw in draws], profile.number_range)


def _delays_from_sets(number_sets: Iterable[Sequence[int]]) -> List[DelayStat]:
    last_seen = {}
    for index, number_set in enumerate(number_sets):
        for number in number_set:
            last_seen.setdefault(number, index)
    return [DelayStat(number=number, delay=delay) for number, delay in sorted(last_seen.items())]


def calculate_delays(
    history: Sequence[DrawRecord], profile: GameProfile, variant: Optional[str] = None
) -> List[DelayStat]:
    """
    Finds, for every number that has been drawn, the index of its most recent draw.

    Delay 0 means the number was in the newest draw. Numbers never drawn are omitted.
    """
    draws = variant_history(history, profile, variant)
    return _delays_from_sets(draw.numbers for draw in draws)


def frequent_numbers(stats: Iterable[FrequencyStat], limit: int = REPORT_LIMIT) -> List[FrequencyStat]:
    """The most drawn numbers, ties broken by ascending number."""
    return sorted(stats, key=lambda s: (-s.count, s.number))[:limit]


def infrequent_numbers(stats: Iterable[FrequencyStat], limit: int = REPORT_LIMIT) -> List[FrequencyStat]:
    """The least drawn numbers, ties broken by ascending number."""
    return sorted(stats, key=lambda s: (s.count, s.number))[:limit]


def most_delayed(delays: Iterable[DelayStat], limit: int = REPORT_LIMIT) -> List[DelayStat]:
    """The numbers absent for the longest, ties broken by ascending number."""
    return sorted(delays, key=lambda d: (-d.delay, d.number))[:limit]


def calculate_supplementary_frequencies(
    history: Sequence[DrawRecord], profile: GameProfile, pool_name: str
) -> List[FrequencyStat]:
    """Frequencies of a supplementary number (e.g. Jolly) over the draws that carry it."""
    pool = profile.supplementary_pool(pool_name)
    values = [(draw.supplementary[pool_name],) for draw in history if pool_name in draw.supplementary]
    if not values:
        logging.warning(f"No '{pool_name}' values found in {len(history)} draws for '{profile.name}'.")
    return _count_frequencies(values, range(pool.min_number, pool.max_number + 1))


def calculate_supplementary_delays(
    history: Sequence[DrawRecord], profile: GameProfile, pool_name: str
) -> List[DelayStat]:
    """Delays of a supplementary number over the draws that carry it."""
    profile.supplementary_pool(pool_name)
    return _delays_from_sets(
        (draw.supplementary[pool_name],) for draw in history if pool_name in draw.supplementary
    )


def count_unlucky_pairs(unsuccessful: Iterable[UnsuccessfulCombination]) -> Counter:
    """Counts every unordered number pair across the given unsuccessful combinations."""
    counter: Counter = Counter()
    for combo in unsuccessful:
        counter.update(pairs_of(combo.numbers, 2))
    return counter


def calculate_unlucky_statistics(
    unsuccessful: Iterable[UnsuccessfulCombination],
    profile: GameProfile,
    variant: Optional[str] = None,
    limit: int = REPORT_LIMIT,
) -> Tuple[List[FrequencyStat], List[UnluckyPair]]:
    """
    Summarises the numbers and pairs that recur in the user's unsuccessful combinations.

    Only combinations tagged with the selected variant (or untagged ones, when no
    variant is selected) are considered.

    Returns:
        Tuple[List[FrequencyStat], List[UnluckyPair]]: The top numbers (percentage of
        relevant combinations containing them) and the top pairs, count descending.
    """
    profile.require_variant(variant)
    relevant = relevant_unsuccessful(unsuccessful, variant)
    if not relevant:
        return [], []

    stats = [s for s in _count_frequencies([combo.numbers for combo in relevant], profile.number_range) if s.count > 0]
    unlucky_numbers = frequent_numbers(stats, limit)

    pair_counts = count_unlucky_pairs(relevant)
    unlucky_pairs = [
        UnluckyPair(pair=pair, count=count)
        for pair, count in sorted(pair_counts.items(), key=lambda item: (-item[1], item[0]))[:limit]
    ]
    return unlucky_numbers, unlucky_pairs
