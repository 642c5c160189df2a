# lotto_analytics/influence.py
"""
Per-number influence scores.

An influence score blends a number's historical frequency, its frequency in a
recent window, and a penalty for appearing in the user's unsuccessful
combinations. It is a ranking weight for ordering numbers, never the chance
that a number will be drawn.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Iterable

import numpy as np

from lotto_analytics.analysis_config import RECENT_WINDOW
from lotto_analytics.draw_history import DrawRecord, UnsuccessfulCombination, variant_history, relevant_unsuccessful
from lotto_analytics.frequency_analyzer import calculate_frequencies
from lotto_analytics.game_configs import GameProfile

MAX_UNSUCCESSFUL_PENALTY = 0.5


@dataclass(frozen=True)
class InfluenceScore:
    number: int
    historical_frequency_pct: float
    recent_frequency_pct: float
    unsuccessful_penalty: float
    raw_score: float
    normalized_score: float
    confidence: float


def calculate_influence_scores(
    history: Sequence[DrawRecord],
    profile: GameProfile,
    unsuccessful: Iterable[UnsuccessfulCombination] = (),
    variant: Optional[str] = None,
    recent_window: int = RECENT_WINDOW,
) -> List[InfluenceScore]:
    """
    Scores every number 1..max_number for ranking.

    Fallbacks for degenerate data: an empty history assumes a uniform
    historical frequency of 100/max_number, an empty recent window reuses the
    historical frequency, and an empty unsuccessful set applies no penalty. The
    penalty is capped at 0.5 so no number is fully suppressed.

    Returns:
        List[InfluenceScore]: Sorted by normalized score descending, ties by ascending
        number. Normalized scores sum to 100 unless every raw score is zero.
    """
    draws = variant_history(history, profile, variant)
    recent = draws[:recent_window]
    relevant = relevant_unsuccessful(unsuccessful, variant)

    numbers = np.arange(1, profile.max_number + 1)
    if draws:
        historical = np.array([s.percentage for s in calculate_frequencies(draws, profile)])
    else:
        historical = np.full(profile.max_number, 100 / profile.max_number)
    if recent:
        recent_pct = np.array([s.percentage for s in calculate_frequencies(recent, profile)])
    else:
        recent_pct = historical.copy()

    penalties = np.zeros(profile.max_number)
    if relevant:
        occurrences = np.zeros(profile.max_number)
        for combo in relevant:
            for n in combo.numbers:
                occurrences[n - 1] += 1
        penalties = np.minimum(MAX_UNSUCCESSFUL_PENALTY, occurrences / len(relevant))

    raw = (historical / 100) * (recent_pct / 100) * (1 - penalties) * 100
    total_raw = raw.sum()
    if total_raw > 0:
        normalized = raw / total_raw * 100
    else:
        logging.warning(f"All influence raw scores are zero for '{profile.name}'; leaving normalized scores at 0.")
        normalized = np.zeros(profile.max_number)

    confidence = min(100.0, math.sqrt(len(draws) + len(recent)) * 10)

    scores = [
        InfluenceScore(
            number=int(number),
            historical_frequency_pct=float(historical[i]),
            recent_frequency_pct=float(recent_pct[i]),
            unsuccessful_penalty=float(penalties[i]),
            raw_score=float(raw[i]),
            normalized_score=float(normalized[i]),
            confidence=confidence,
        )
        for i, number in enumerate(numbers)
    ]
    return sorted(scores, key=lambda s: (-s.normalized_score, s.number))


def influence_by_number(scores: Iterable[InfluenceScore]) -> Dict[int, InfluenceScore]:
    return {score.number: score for score in scores}
