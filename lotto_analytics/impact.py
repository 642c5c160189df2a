# lotto_analytics/impact.py
"""
Historical back-test of a fixed combination.

Describes how a combination would have matched past draws. Past matches carry
no information about future draws; this is exploratory reporting only.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from lotto_analytics.draw_history import DrawRecord, variant_history
from lotto_analytics.game_configs import GameProfile


@dataclass(frozen=True)
class ImpactScore:
    combination: Tuple[int, ...]
    match_distribution: Tuple[float, ...]
    expected_matches: float
    impact_score: float
    total_draws: int


def calculate_impact(
    combination: Sequence[int],
    history: Sequence[DrawRecord],
    profile: GameProfile,
    variant: Optional[str] = None,
) -> ImpactScore:
    """
    Back-tests a combination against every draw in the history.

    Args:
        combination (Sequence[int]): A valid combination for the profile.
        history (Sequence[DrawRecord]): Draws, newest first.
        profile (GameProfile): The game's rules.
        variant (Optional[str]): Back-test against one variant's numbers.

    Returns:
        ImpactScore: The share of draws with k matches for k = 0..pick_count (all zero
        for an empty history), the mean match count, and the quadratic impact score
        sum(k^2 * P(k)), over `total_draws` draws (only those carrying the variant, if one is given).

    Raises:
        InvalidCombinationError: If the combination does not fit the profile.
    """
    canonical = profile.check_combination(combination)
    chosen = set(canonical)
    draws = variant_history(history, profile, variant)

    match_counts = [len(chosen.intersection(draw.numbers)) for draw in draws]
    histogram = np.bincount(np.array(match_counts, dtype=int), minlength=profile.pick_count + 1).astype(float)
    if draws:
        histogram /= len(draws)

    k = np.arange(profile.pick_count + 1)
    return ImpactScore(
        combination=canonical,
        match_distribution=tuple(float(p) for p in histogram),
        expected_matches=float((k * histogram).sum()),
        impact_score=float((k ** 2 * histogram).sum()),
        total_draws=len(draws),
    )
