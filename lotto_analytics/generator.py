# lotto_analytics/generator.py
"""
This module synthesizes candidate combinations from draw history.

A named strategy fixes how many numbers come from the frequent, most-delayed
and infrequent pools and how many are drawn uniformly. Soft filters (consecutive
runs, repeats of unsuccessful combinations, unlucky pairs) trigger a full
regeneration, up to a fixed number of attempts; after that the last candidate is
returned and flagged. Randomness always comes from the caller's `random.Random`,
so a fixed seed replays the whole pipeline.

Every candidate has exactly the same chance of winning as any other combination.
Attached scores are for transparency and ordering only.
"""
import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from itertools import combinations as pairs_of
from typing import Dict, List, Optional, Sequence, Tuple, Iterable, Set, Union

from lotto_analytics.analysis_config import AnalysisConfig, DEFAULT_CONFIG
from lotto_analytics.distribution import DistributionProfile, analyze_distribution, count_consecutive_runs, target_profile
from lotto_analytics.draw_history import DrawRecord, UnsuccessfulCombination, variant_history, relevant_unsuccessful
from lotto_analytics.fitness import calculate_fitness
from lotto_analytics.frequency_analyzer import (
    calculate_frequencies, calculate_delays, frequent_numbers, infrequent_numbers, most_delayed, count_unlucky_pairs,
)
from lotto_analytics.game_configs import GameProfile, ConfigurationError
from lotto_analytics.influence import InfluenceScore, calculate_influence_scores, influence_by_number

VIOLATION_CONSECUTIVE_RUNS = "consecutive_runs"
VIOLATION_UNSUCCESSFUL_MATCH = "unsuccessful_match"
VIOLATION_UNLUCKY_PAIR = "unlucky_pair"


class Strategy(str, Enum):
    STANDARD = "standard"
    HIGH_VARIABILITY = "high-variability"


@dataclass(frozen=True)
class GenerationMetadata:
    strategy: str
    variant: Optional[str]
    attempts: int
    soft_filter_violated: bool
    violations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CandidateCombination:
    numbers: Tuple[int, ...]
    supplementary: Dict[str, Tuple[int, ...]]
    metadata: GenerationMetadata
    fitness_score: Optional[float] = None
    distribution: Optional[DistributionProfile] = None
    influence_scores: Tuple[InfluenceScore, ...] = ()


@dataclass(frozen=True)
class _GenerationContext:
    """Everything a generation attempt needs, computed once per history snapshot."""
    frequent_pool: List[int]
    delayed_pool: List[int]
    infrequent_pool: List[int]
    unsuccessful_sets: Set[Tuple[int, ...]]
    pair_counts: Dict[Tuple[int, int], int]
    influence: List[InfluenceScore]


def _share(pick_count: int, share: float) -> float:
    # Rounded so that e.g. 10 * 0.3 is not nudged across an integer by float error
    return round(pick_count * share, 9)


def strategy_counts(strategy: Strategy, pick_count: int, config: AnalysisConfig = DEFAULT_CONFIG) -> Dict[str, int]:
    """
    How many numbers each pool contributes under a strategy; the rest are drawn uniformly.

    standard: ceil(60%) frequent, floor(30%) most delayed.
    high-variability: ceil(40%) infrequent.
    """
    if strategy is Strategy.STANDARD:
        frequent = min(pick_count, math.ceil(_share(pick_count, config.standard_frequent_share)))
        delayed = min(pick_count - frequent, math.floor(_share(pick_count, config.standard_delayed_share)))
        counts = {"frequent": frequent, "delayed": delayed, "infrequent": 0}
    else:
        infrequent = min(pick_count, math.ceil(_share(pick_count, config.high_variability_infrequent_share)))
        counts = {"frequent": 0, "delayed": 0, "infrequent": infrequent}
    counts["uniform"] = pick_count - sum(counts.values())
    return counts


def _build_context(
    profile: GameProfile,
    history: Sequence[DrawRecord],
    unsuccessful: Iterable[UnsuccessfulCombination],
    variant: Optional[str],
    config: AnalysisConfig,
    include_scores: bool,
) -> _GenerationContext:
    draws = variant_history(history, profile, variant)
    relevant = relevant_unsuccessful(unsuccessful, variant)
    frequencies = calculate_frequencies(draws, profile)
    delays = calculate_delays(draws, profile)
    influence = (
        calculate_influence_scores(history, profile, relevant, variant, recent_window=config.recent_window)
        if include_scores else []
    )
    return _GenerationContext(
        frequent_pool=[s.number for s in frequent_numbers(frequencies, config.top_pool_size)],
        delayed_pool=[d.number for d in most_delayed(delays, config.top_pool_size)],
        infrequent_pool=[s.number for s in infrequent_numbers(frequencies, config.top_pool_size)],
        unsuccessful_sets={combo.numbers for combo in relevant},
        pair_counts=dict(count_unlucky_pairs(relevant)),
        influence=influence,
    )


def _assemble(
    strategy: Strategy, profile: GameProfile, context: _GenerationContext, config: AnalysisConfig, rng: random.Random
) -> Tuple[int, ...]:
    """One generation attempt: sample each pool without replacement, then refill uniformly."""
    counts = strategy_counts(strategy, profile.pick_count, config)
    chosen: List[int] = []
    for pool, count in ((context.frequent_pool, counts["frequent"]),
                        (context.delayed_pool, counts["delayed"]),
                        (context.infrequent_pool, counts["infrequent"])):
        if count == 0 or not pool:
            continue
        for number in rng.sample(pool, min(count, len(pool))):
            # Cross-pool duplicates are skipped; the uniform refill makes up the shortfall.
            if number not in chosen:
                chosen.append(number)

    taken = set(chosen)
    remaining = [n for n in profile.number_range if n not in taken]
    chosen.extend(rng.sample(remaining, profile.pick_count - len(chosen)))
    return tuple(sorted(chosen))


def soft_filter_violations(
    numbers: Sequence[int],
    unsuccessful_sets: Set[Tuple[int, ...]],
    pair_counts: Dict[Tuple[int, int], int],
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> List[str]:
    """Names the soft filters a candidate fails, in evaluation order."""
    ordered = tuple(sorted(numbers))
    violations = []
    if count_consecutive_runs(ordered) > config.max_consecutive_runs:
        violations.append(VIOLATION_CONSECUTIVE_RUNS)
    if ordered in unsuccessful_sets:
        violations.append(VIOLATION_UNSUCCESSFUL_MATCH)
    if any(pair_counts.get(pair, 0) >= config.unlucky_pair_min_count for pair in pairs_of(ordered, 2)):
        violations.append(VIOLATION_UNLUCKY_PAIR)
    return violations


def generate_supplementary(
    profile: GameProfile, numbers: Sequence[int], rng: random.Random
) -> Dict[str, Tuple[int, ...]]:
    """Draws every supplementary pool uniformly, avoiding the main numbers where the pool requires it."""
    supplementary = {}
    for pool in profile.supplementary:
        excluded = set(numbers) if pool.distinct_from_main else set()
        candidates = [n for n in range(pool.min_number, pool.max_number + 1) if n not in excluded]
        supplementary[pool.name] = tuple(sorted(rng.sample(candidates, min(pool.count, len(candidates)))))
    return supplementary


def _parse_strategy(strategy: Union[Strategy, str]) -> Strategy:
    try:
        return Strategy(strategy)
    except ValueError:
        raise ConfigurationError(
            f"Unknown strategy '{strategy}'. Please choose from {[s.value for s in Strategy]}"
        ) from None


def _generate_one(
    profile: GameProfile,
    strategy: Strategy,
    context: _GenerationContext,
    rng: random.Random,
    variant: Optional[str],
    config: AnalysisConfig,
    include_scores: bool,
) -> CandidateCombination:
    numbers: Tuple[int, ...] = ()
    violations: List[str] = []
    attempts = 0
    for attempts in range(1, config.max_attempts + 1):
        numbers = _assemble(strategy, profile, context, config, rng)
        violations = soft_filter_violations(numbers, context.unsuccessful_sets, context.pair_counts, config)
        if not violations:
            break
        logging.debug(f"Attempt {attempts} rejected {list(numbers)}: {violations}")
    else:
        logging.warning(
            f"Soft filters still violated after {config.max_attempts} attempts for '{profile.name}'; "
            f"returning the last candidate {list(numbers)} ({violations})."
        )

    metadata = GenerationMetadata(
        strategy=strategy.value,
        variant=variant,
        attempts=attempts,
        soft_filter_violated=bool(violations),
        violations=tuple(violations),
    )
    supplementary = generate_supplementary(profile, numbers, rng)
    if not include_scores:
        return CandidateCombination(numbers=numbers, supplementary=supplementary, metadata=metadata)

    distribution = analyze_distribution(numbers, profile.max_number)
    lookup = influence_by_number(context.influence)
    return CandidateCombination(
        numbers=numbers,
        supplementary=supplementary,
        metadata=metadata,
        fitness_score=calculate_fitness(
            distribution, target_profile(profile), context.influence, numbers, profile.max_number
        ),
        distribution=distribution,
        influence_scores=tuple(lookup[n] for n in numbers),
    )


def generate_combinations(
    profile: GameProfile,
    history: Sequence[DrawRecord],
    rng: random.Random,
    count: int,
    strategy: Union[Strategy, str] = Strategy.STANDARD,
    unsuccessful: Iterable[UnsuccessfulCombination] = (),
    variant: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
    include_scores: bool = True,
) -> List[CandidateCombination]:
    """
    Generates `count` independent candidates from one history snapshot.

    Args:
        profile (GameProfile): The game's rules.
        history (Sequence[DrawRecord]): Draws, newest first.
        rng (random.Random): The only source of randomness.
        count (int): How many candidates to generate.
        strategy (Union[Strategy, str]): 'standard' or 'high-variability'.
        unsuccessful (Iterable[UnsuccessfulCombination]): Negative feedback for the soft filters.
        variant (Optional[str]): Generate for one variant.
        config (Optional[AnalysisConfig]): Policy overrides.
        include_scores (bool): Attach fitness, distribution and influence metadata.

    Returns:
        List[CandidateCombination]: Each with exactly pick_count distinct numbers in range.
    """
    if count < 0:
        raise ConfigurationError(f"Cannot generate a negative number of combinations: {count}")
    config = config or DEFAULT_CONFIG
    parsed = _parse_strategy(strategy)
    profile.require_variant(variant)
    context = _build_context(profile, history, unsuccessful, variant, config, include_scores)
    logging.info(f"Generating {count} '{parsed.value}' combination(s) for '{profile.name}'"
                 f"{f' ({variant})' if variant else ''}.")
    return [
        _generate_one(profile, parsed, context, rng, variant, config, include_scores)
        for _ in range(count)
    ]


def generate_combination(
    profile: GameProfile,
    history: Sequence[DrawRecord],
    rng: random.Random,
    strategy: Union[Strategy, str] = Strategy.STANDARD,
    unsuccessful: Iterable[UnsuccessfulCombination] = (),
    variant: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
    include_scores: bool = True,
) -> CandidateCombination:
    """Generates a single candidate. See `generate_combinations`."""
    return generate_combinations(
        profile, history, rng, 1, strategy, unsuccessful, variant, config, include_scores
    )[0]
