# lotto_analytics/distribution.py
"""
Structural shape metrics for a set of numbers, and the heuristic target shape
for a game.

The target profile is a design policy (centred sum, wide spread, balanced
parity, no consecutive runs); it is not a statistically derived optimum.
"""
import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from lotto_analytics.game_configs import GameProfile

DECADE_WIDTH = 10


@dataclass(frozen=True)
class DistributionProfile:
    sum: float
    spread: float
    even_odd_ratio: float
    decade_buckets: Tuple[float, ...]
    consecutive_run_count: int
    gaps: Tuple[int, ...]
    average_gap: float
    density: float


def decade_bucket_count(max_number: int) -> int:
    return math.ceil(max_number / DECADE_WIDTH)


def count_consecutive_runs(numbers: Iterable[int]) -> int:
    """Counts maximal runs of two or more consecutive integers, e.g. [5, 6, 7, 20, 21, 40] has 2."""
    ordered = sorted(numbers)
    runs = 0
    run_length = 1
    for previous, current in zip(ordered, ordered[1:]):
        if current == previous + 1:
            run_length += 1
        else:
            if run_length >= 2:
                runs += 1
            run_length = 1
    if run_length >= 2:
        runs += 1
    return runs


def analyze_distribution(numbers: Iterable[int], max_number: int) -> DistributionProfile:
    """
    Describes the shape of a number set.

    Args:
        numbers (Iterable[int]): Distinct integers, in any order.
        max_number (int): The game's range, which fixes the number of decade buckets.

    Returns:
        DistributionProfile: Sum, spread, even/odd ratio (the even count when there are
        no odd numbers), decade bucket counts, consecutive runs, gaps, average gap and
        density 1/(1 + variance of gaps). Sets of at most one number have no gaps and
        density 1.
    """
    ordered: Sequence[int] = sorted(numbers)
    buckets = [0] * decade_bucket_count(max_number)
    for n in ordered:
        if 1 <= n <= max_number:
            buckets[(n - 1) // DECADE_WIDTH] += 1

    even_count = sum(1 for n in ordered if n % 2 == 0)
    odd_count = len(ordered) - even_count
    even_odd_ratio = even_count / odd_count if odd_count > 0 else float(even_count)

    gaps = np.diff(np.array(ordered, dtype=float))
    if gaps.size:
        average_gap = float(gaps.mean())
        density = 1 / (1 + float(gaps.var()))
    else:
        average_gap = 0.0
        density = 1.0

    return DistributionProfile(
        sum=float(sum(ordered)),
        spread=float(ordered[-1] - ordered[0]) if ordered else 0.0,
        even_odd_ratio=even_odd_ratio,
        decade_buckets=tuple(buckets),
        consecutive_run_count=count_consecutive_runs(ordered),
        gaps=tuple(int(g) for g in gaps),
        average_gap=average_gap,
        density=density,
    )


def target_profile(profile: GameProfile) -> DistributionProfile:
    """The heuristic target shape for a game's combinations."""
    bucket_count = decade_bucket_count(profile.max_number)
    return DistributionProfile(
        sum=profile.pick_count * (profile.max_number + 1) / 2,
        spread=profile.max_number * 0.7,
        even_odd_ratio=1.0 if profile.pick_count % 2 == 0 else 0.8,
        decade_buckets=tuple([profile.pick_count / bucket_count] * bucket_count),
        consecutive_run_count=0,
        gaps=(),
        average_gap=profile.max_number / profile.pick_count,
        density=0.5,
    )
