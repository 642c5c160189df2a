# lotto_analytics/game_statistics.py
"""
Aggregates every per-game statistic into one snapshot.

Variant games (the Lotto wheels) are analysed per variant: each wheel gets its
own frequencies, delays, co-occurrences and influence scores. The snapshot is
recomputed on every call; nothing is cached here.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Iterable

import pandas as pd

from lotto_analytics.analysis_config import AnalysisConfig, DEFAULT_CONFIG
from lotto_analytics.co_occurrence import CoOccurrencePair, calculate_co_occurrences, top_co_occurrences
from lotto_analytics.distribution import DistributionProfile, target_profile
from lotto_analytics.draw_history import DrawRecord, UnsuccessfulCombination, variant_history
from lotto_analytics.frequency_analyzer import (
    FrequencyStat, DelayStat, UnluckyPair,
    calculate_frequencies, calculate_delays, frequent_numbers, infrequent_numbers, most_delayed,
    calculate_unlucky_statistics,
)
from lotto_analytics.game_configs import GameProfile
from lotto_analytics.influence import InfluenceScore, calculate_influence_scores


@dataclass(frozen=True)
class GameStatistics:
    game: str
    variant: Optional[str]
    total_draws: int
    frequencies: List[FrequencyStat]
    frequent_numbers: List[FrequencyStat]
    infrequent_numbers: List[FrequencyStat]
    delays: List[DelayStat]
    unlucky_numbers: List[FrequencyStat]
    unlucky_pairs: List[UnluckyPair]
    co_occurrences: List[CoOccurrencePair]
    influence_scores: List[InfluenceScore]
    target_distribution: DistributionProfile


def calculate_game_statistics(
    profile: GameProfile,
    history: Sequence[DrawRecord],
    unsuccessful: Iterable[UnsuccessfulCombination] = (),
    variant: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
) -> GameStatistics:
    """
    Computes the full statistics snapshot for a game, or for one of its variants.

    Args:
        profile (GameProfile): The game's rules.
        history (Sequence[DrawRecord]): Draws, newest first.
        unsuccessful (Iterable[UnsuccessfulCombination]): The user's unsuccessful combinations.
        variant (Optional[str]): Restrict the analysis to one variant.
        config (Optional[AnalysisConfig]): Policy overrides; defaults apply when None.

    Returns:
        GameStatistics: Rankings truncated to the configured windows, plus the full
        frequency and influence lists.
    """
    config = config or DEFAULT_CONFIG
    unsuccessful = list(unsuccessful)
    draws = variant_history(history, profile, variant)
    label = f"{profile.name}/{variant}" if variant else profile.name
    logging.info(f"Calculating statistics for '{label}' over {len(draws)} draws.")

    frequencies = calculate_frequencies(draws, profile)
    delays = calculate_delays(draws, profile)
    unlucky_numbers, unlucky_pairs = calculate_unlucky_statistics(
        unsuccessful, profile, variant, limit=config.report_limit
    )
    co_occurrences = calculate_co_occurrences(
        draws, profile,
        min_occurrences=config.min_co_occurrences,
        epsilon=config.co_occurrence_epsilon,
    )
    influence = calculate_influence_scores(
        history, profile, unsuccessful, variant, recent_window=config.recent_window
    )

    return GameStatistics(
        game=profile.name,
        variant=variant,
        total_draws=len(draws),
        frequencies=frequencies,
        frequent_numbers=frequent_numbers(frequencies, config.report_limit),
        infrequent_numbers=infrequent_numbers(frequencies, config.report_limit),
        delays=most_delayed(delays, config.report_limit),
        unlucky_numbers=unlucky_numbers,
        unlucky_pairs=unlucky_pairs,
        co_occurrences=top_co_occurrences(co_occurrences, config.co_occurrence_limit),
        influence_scores=influence,
        target_distribution=target_profile(profile),
    )


def calculate_all_variant_statistics(
    profile: GameProfile,
    history: Sequence[DrawRecord],
    unsuccessful: Iterable[UnsuccessfulCombination] = (),
    config: Optional[AnalysisConfig] = None,
) -> Dict[str, GameStatistics]:
    """Computes an independent snapshot for every variant of a variant game."""
    unsuccessful = list(unsuccessful)
    if not profile.has_variants:
        logging.warning(f"Game '{profile.name}' has no variants; nothing to calculate per variant.")
    return {
        variant: calculate_game_statistics(profile, history, unsuccessful, variant, config)
        for variant in profile.variants
    }


def frequencies_to_frame(stats: Iterable[FrequencyStat]) -> pd.DataFrame:
    return pd.DataFrame(
        [(s.number, s.count, round(s.percentage, 2)) for s in stats],
        columns=["Number", "Count", "Percentage"],
    )


def delays_to_frame(delays: Iterable[DelayStat]) -> pd.DataFrame:
    return pd.DataFrame([(d.number, d.delay) for d in delays], columns=["Number", "Delay"])


def influence_to_frame(scores: Iterable[InfluenceScore]) -> pd.DataFrame:
    """Influence scores for display. The column names avoid any 'probability' wording."""
    return pd.DataFrame(
        [
            (s.number, round(s.normalized_score, 3), round(s.historical_frequency_pct, 2),
             round(s.recent_frequency_pct, 2), round(s.unsuccessful_penalty, 3), round(s.confidence, 1))
            for s in scores
        ],
        columns=["Number", "Influence", "Historical %", "Recent %", "Penalty", "Confidence"],
    )


def co_occurrences_to_frame(pairs: Iterable[CoOccurrencePair]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            (f"{p.number_a}-{p.number_b}", p.observed_count, round(p.observed_frequency_pct, 2),
             round(p.expected_frequency_pct, 2), round(p.lift, 3), round(p.lift_score, 3))
            for p in pairs
        ],
        columns=["Pair", "Count", "Observed %", "Expected %", "Lift", "Lift Score"],
    )
