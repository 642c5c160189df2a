# lotto_analytics/recommender.py
"""
Local statistical recommendation with a readable rationale.

Numbers are sampled from the top of the influence ranking (weighted by
influence), one number may be swapped in from a pair with positive lift, and
each choice is explained. The output passes through the same validation gate as
externally produced recommendations.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence, Iterable, Tuple

from lotto_analytics.analysis_config import AnalysisConfig, DEFAULT_CONFIG
from lotto_analytics.co_occurrence import CoOccurrencePair, calculate_co_occurrences
from lotto_analytics.distribution import analyze_distribution, target_profile
from lotto_analytics.draw_history import DrawRecord, UnsuccessfulCombination
from lotto_analytics.fitness import calculate_fitness
from lotto_analytics.generator import generate_supplementary
from lotto_analytics.game_configs import GameProfile
from lotto_analytics.influence import InfluenceScore, calculate_influence_scores, influence_by_number
from lotto_analytics.probability import combinations
from lotto_analytics.recommendation_validator import Recommendation, validate_recommendation

# Positive-lift pairs considered for a swap, and how many of the best are eligible
LIFT_CANDIDATES = 10
LIFT_PICK_WINDOW = 3
SUPPLEMENTARY_CANDIDATES = 10


def _weighted_sample(candidates: List[InfluenceScore], count: int, rng: random.Random) -> List[int]:
    """Samples without replacement, weighting by normalized influence (uniform when all weights are zero)."""
    remaining = list(candidates)
    chosen = []
    while remaining and len(chosen) < count:
        weights = [score.normalized_score for score in remaining]
        if sum(weights) > 0:
            index = rng.choices(range(len(remaining)), weights=weights)[0]
        else:
            index = rng.randrange(len(remaining))
        chosen.append(remaining.pop(index).number)
    return chosen


def _swap_in_lift_pair(
    numbers: List[int], pairs: Sequence[CoOccurrencePair], rng: random.Random
) -> Optional[Tuple[int, CoOccurrencePair]]:
    positive = [pair for pair in pairs if pair.lift_score > 0][:LIFT_CANDIDATES]
    if not positive:
        return None
    pair = positive[rng.randrange(min(LIFT_PICK_WINDOW, len(positive)))]
    if pair.number_a in numbers or pair.number_b in numbers:
        return None
    candidate = pair.number_a if rng.random() < 0.5 else pair.number_b
    numbers[rng.randrange(len(numbers))] = candidate
    return candidate, pair


def _pick_supplementary(
    profile: GameProfile, numbers: Sequence[int], influence: Sequence[InfluenceScore], rng: random.Random
) -> Dict[str, Tuple[int, ...]]:
    supplementary = generate_supplementary(profile, numbers, rng)
    for pool in profile.supplementary:
        # Only pools drawn from the balls left after the main draw share the main influence ranking
        if not pool.distinct_from_main:
            continue
        candidates = [
            score.number for score in influence
            if pool.contains(score.number) and not (pool.distinct_from_main and score.number in numbers)
        ][:SUPPLEMENTARY_CANDIDATES]
        if len(candidates) >= pool.count:
            supplementary[pool.name] = tuple(sorted(rng.sample(candidates, pool.count)))
    return supplementary


def recommend_combination(
    profile: GameProfile,
    history: Sequence[DrawRecord],
    rng: random.Random,
    unsuccessful: Iterable[UnsuccessfulCombination] = (),
    variant: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
) -> Recommendation:
    """
    Builds an influence-weighted recommendation with a rationale for every number.

    Args:
        profile (GameProfile): The game's rules.
        history (Sequence[DrawRecord]): Draws, newest first.
        rng (random.Random): The only source of randomness.
        unsuccessful (Iterable[UnsuccessfulCombination]): Negative feedback for the influence penalty.
        variant (Optional[str]): Recommend for one variant.
        config (Optional[AnalysisConfig]): Policy overrides.

    Returns:
        Recommendation: Validated; `confidence` reflects how much data backs the
        influence scores, not the chance of winning.
    """
    config = config or DEFAULT_CONFIG
    influence = calculate_influence_scores(
        history, profile, unsuccessful, variant, recent_window=config.recent_window
    )
    pairs = calculate_co_occurrences(
        history, profile, variant,
        min_occurrences=config.min_co_occurrences, epsilon=config.co_occurrence_epsilon,
    )

    top = influence[:profile.pick_count * 2]
    numbers = _weighted_sample(top, profile.pick_count, rng)
    for score in influence:
        if len(numbers) >= profile.pick_count:
            break
        if score.number not in numbers:
            numbers.append(score.number)

    swapped = _swap_in_lift_pair(numbers, pairs, rng)
    numbers = sorted(numbers)

    lookup = influence_by_number(influence)
    distribution = analyze_distribution(numbers, profile.max_number)
    fitness = calculate_fitness(distribution, target_profile(profile), influence, numbers, profile.max_number)

    rationale: List[str] = []
    for n in numbers:
        score = lookup[n]
        reason = (
            f"Number {n}: influence {score.normalized_score:.1f} "
            f"(historical frequency {score.historical_frequency_pct:.1f}%, "
            f"recent frequency {score.recent_frequency_pct:.1f}%)"
        )
        if swapped and swapped[0] == n:
            pair = swapped[1]
            reason += f"; co-occurs with lift {pair.lift:.2f} in pair {pair.number_a}-{pair.number_b}"
        rationale.append(reason)
    label = f" ({variant})" if variant else ""
    rationale.append(f"Pattern score: {fitness:.1f}/100{label}")
    rationale.append(
        f"Distribution: sum={distribution.sum:.0f}, spread={distribution.spread:.0f}, "
        f"even/odd ratio={distribution.even_odd_ratio:.2f}"
    )
    rationale.append(
        f"Every combination has the same chance of winning: 1 in "
        f"{combinations(profile.max_number, profile.pick_count):,}"
    )

    supplementary = _pick_supplementary(profile, numbers, influence, rng)
    confidence = influence[0].confidence if influence else 0.0
    logging.info(f"Recommended {numbers} for '{profile.name}'{label} (pattern score {fitness:.1f}).")

    return validate_recommendation(
        Recommendation(
            numbers=tuple(numbers),
            confidence=confidence,
            rationale=tuple(rationale),
            supplementary=supplementary,
        ),
        profile,
    )
