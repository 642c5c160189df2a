# lotto.py
"""
Main Command-Line Interface (CLI) for the draw statistics engine.

This tool allows users to:
1.  Show the exact match probabilities for a game (the same for every combination).
2.  Analyse a draw history: frequencies, delays, co-occurrence lift, influence scores.
3.  Generate candidate combinations with a named strategy.
4.  Score a combination: shape, pattern score and historical back-test.
5.  Produce a local recommendation, or validate an externally produced one.
"""

import sys
import os
import argparse
import logging
import random

# Add the project root to the Python path to allow absolute imports from 'lotto_analytics'
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from lotto_analytics.analysis_config import load_config
from lotto_analytics.distribution import analyze_distribution
from lotto_analytics.draw_history import load_history_csv, load_unsuccessful_csv
from lotto_analytics.fitness import score_combination
from lotto_analytics.game_configs import GAME_RULES, ConfigurationError, get_game_profile
from lotto_analytics.game_statistics import (
    calculate_game_statistics, frequencies_to_frame, delays_to_frame, influence_to_frame, co_occurrences_to_frame,
)
from lotto_analytics.generator import Strategy, generate_combinations
from lotto_analytics.impact import calculate_impact
from lotto_analytics.influence import calculate_influence_scores
from lotto_analytics.probability import calculate_probability_table, combination_win_probability
from lotto_analytics.recommendation_validator import ValidationError, parse_recommendation_json
from lotto_analytics.recommender import recommend_combination

DISCLAIMER = (
    "Every combination has the SAME probability of winning. Scores shown here rank and "
    "describe combinations; they do not make any combination more likely to win."
)


def load_inputs(args):
    """Loads the profile, history, unsuccessful set and settings named by the arguments."""
    profile = get_game_profile(args.game)
    profile.require_variant(getattr(args, 'wheel', None))
    history = load_history_csv(args.history, profile) if getattr(args, 'history', None) else []
    unsuccessful = load_unsuccessful_csv(args.unsuccessful, profile) if getattr(args, 'unsuccessful', None) else []
    config = load_config(getattr(args, 'config', None))
    return profile, history, unsuccessful, config


def print_section(title: str, frame):
    print(f"\n--- {title} ---")
    if frame.empty:
        print("  (no data)")
    else:
        print(frame.to_string(index=False))


def handle_odds(args):
    profile = get_game_profile(args.game)
    table = calculate_probability_table(profile)
    print(f"\n--- Match probabilities for {table.game.upper()} "
          f"({table.picks} of {table.total_numbers}) ---")
    print(f"Total combinations: {table.total_combinations:,}")
    print(f"Expected matches per play: {table.expected_matches:.4f}")
    for row in table.rows:
        line = f"  {row.matches} matches: {row.probability:.10f}  {row.odds:>24}  {row.human_readable}"
        if row.prize:
            line += f"  [{row.prize.category}: {row.prize.indicative_amount}]"
        print(line)
    print("\nPrize amounts are indicative and vary with every draw.")
    print(f"\n{DISCLAIMER}")


def handle_analyze(args):
    profile, history, unsuccessful, config = load_inputs(args)
    stats = calculate_game_statistics(profile, history, unsuccessful, args.wheel, config)
    label = f"{profile.name.upper()}{f' / {args.wheel}' if args.wheel else ''}"
    print(f"\nStatistics for {label}: {stats.total_draws} draws analysed.")
    print_section("Frequent numbers", frequencies_to_frame(stats.frequent_numbers))
    print_section("Infrequent numbers", frequencies_to_frame(stats.infrequent_numbers))
    print_section("Most delayed numbers", delays_to_frame(stats.delays))
    print_section("Co-occurrence lift (top pairs)", co_occurrences_to_frame(stats.co_occurrences))
    print_section("Influence scores (ranking weights, not probabilities)",
                  influence_to_frame(stats.influence_scores[:config.report_limit]))
    if stats.unlucky_numbers:
        print_section("Numbers frequent in your unsuccessful combinations", frequencies_to_frame(stats.unlucky_numbers))
    print(f"\n{DISCLAIMER}")


def handle_generate(args):
    profile, history, unsuccessful, config = load_inputs(args)
    rng = random.Random(args.seed)
    candidates = generate_combinations(
        profile, history, rng, args.count, args.strategy, unsuccessful, args.wheel, config
    )
    print(f"\n--- {args.strategy.title()} combinations for {profile.name.upper()} ---")
    for candidate in candidates:
        line = f"  {list(candidate.numbers)}"
        for name, values in candidate.supplementary.items():
            line += f"  {name}: {list(values)}"
        line += f"  pattern score {candidate.fitness_score:.1f}/100, attempts {candidate.metadata.attempts}"
        if candidate.metadata.soft_filter_violated:
            line += f"  (soft filters not met: {', '.join(candidate.metadata.violations)})"
        print(line)
    print(f"\n{DISCLAIMER}")


def handle_score(args):
    profile, history, unsuccessful, config = load_inputs(args)
    numbers = profile.check_combination(args.numbers)
    influence = calculate_influence_scores(history, profile, unsuccessful, args.wheel, config.recent_window)
    distribution = analyze_distribution(numbers, profile.max_number)
    impact = calculate_impact(numbers, history, profile, args.wheel)

    print(f"\n--- Combination {list(numbers)} for {profile.name.upper()} ---")
    print(f"  Sum: {distribution.sum:.0f}  Spread: {distribution.spread:.0f}  "
          f"Even/odd ratio: {distribution.even_odd_ratio:.2f}")
    print(f"  Decade buckets: {list(distribution.decade_buckets)}")
    print(f"  Consecutive runs: {distribution.consecutive_run_count}  "
          f"Average gap: {distribution.average_gap:.2f}  Density: {distribution.density:.3f}")
    print(f"  Pattern score: {score_combination(numbers, profile, influence):.1f}/100")
    print(f"  Back-test over {impact.total_draws} draws: average matches {impact.expected_matches:.3f}, "
          f"impact score {impact.impact_score:.3f}")
    for k, share in enumerate(impact.match_distribution):
        print(f"    {k} matches: {share * 100:.2f}% of past draws")
    print(f"  Probability of winning: {combination_win_probability(numbers, profile):.3e} "
          f"(identical for every combination)")


def handle_recommend(args):
    profile, history, unsuccessful, config = load_inputs(args)
    recommendation = recommend_combination(
        profile, history, random.Random(args.seed), unsuccessful, args.wheel, config
    )
    print(f"\n--- Recommendation for {profile.name.upper()} ---")
    print(f"  Numbers: {list(recommendation.numbers)}")
    for name, values in recommendation.supplementary.items():
        print(f"  {name}: {list(values)}")
    print(f"  Data confidence: {recommendation.confidence:.1f}/100")
    for reason in recommendation.rationale:
        print(f"  - {reason}")


def handle_validate(args):
    profile = get_game_profile(args.game)
    with open(args.file, 'r', encoding='utf-8') as f:
        text = f.read()
    recommendation = parse_recommendation_json(text, profile)
    print(f"Recommendation accepted for {profile.name.upper()}: {list(recommendation.numbers)}")


def build_parser() -> argparse.ArgumentParser:
    supported_games = list(GAME_RULES.keys())
    parser = argparse.ArgumentParser(
        description="Draw statistics and combination scoring.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging.')

    subparsers = parser.add_subparsers(dest='command', required=True, help='Available commands')

    def add_game(sub):
        sub.add_argument(
            '--game',
            type=str,
            required=True,
            choices=supported_games,
            help=f"The game to work on. Choices: {', '.join(supported_games)}"
        )

    def add_inputs(sub, history_required=True):
        add_game(sub)
        sub.add_argument('--history', type=str, required=history_required, help='CSV export of past draws.')
        sub.add_argument('--unsuccessful', type=str, help='CSV of your unsuccessful combinations.')
        sub.add_argument('--wheel', type=str, help='Variant (e.g. Lotto wheel) to analyse.')
        sub.add_argument('--config', type=str, help='JSON file overriding analysis settings.')

    parser_odds = subparsers.add_parser('odds', help='Show exact match probabilities.')
    add_game(parser_odds)

    parser_analyze = subparsers.add_parser('analyze', help='Analyse a draw history.')
    add_inputs(parser_analyze)

    parser_generate = subparsers.add_parser('generate', help='Generate candidate combinations.')
    add_inputs(parser_generate, history_required=False)
    parser_generate.add_argument(
        '--strategy',
        type=str,
        default=Strategy.STANDARD.value,
        choices=[s.value for s in Strategy],
        help=(
            "The mixing policy to use.\n"
            "'standard': 60%% frequent, 30%% most delayed, 10%% uniform.\n"
            "'high-variability': 40%% infrequent, 60%% uniform."
        )
    )
    parser_generate.add_argument('--count', type=int, default=1, help='How many combinations to generate.')
    parser_generate.add_argument('--seed', type=int, help='Seed for a replayable run.')

    parser_score = subparsers.add_parser('score', help='Score one combination.')
    add_inputs(parser_score, history_required=False)
    parser_score.add_argument('--numbers', type=int, nargs='+', required=True, help='The combination to score.')

    parser_recommend = subparsers.add_parser('recommend', help='Build an influence-weighted recommendation.')
    add_inputs(parser_recommend, history_required=False)
    parser_recommend.add_argument('--seed', type=int, help='Seed for a replayable run.')

    parser_validate = subparsers.add_parser('validate', help='Validate a JSON recommendation.')
    add_game(parser_validate)
    parser_validate.add_argument('--file', type=str, required=True, help='JSON file holding the recommendation.')

    return parser


HANDLERS = {
    'odds': handle_odds,
    'analyze': handle_analyze,
    'generate': handle_generate,
    'score': handle_score,
    'recommend': handle_recommend,
    'validate': handle_validate,
}


def main(argv=None) -> int:
    """Main function to parse arguments and execute commands."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        force=True,
    )

    try:
        HANDLERS[args.command](args)
    except ValidationError as e:
        print(f"Recommendation rejected: {e}")
        return 1
    except (ConfigurationError, ValueError, OSError) as e:
        logging.error(f"Command '{args.command}' failed: {e}")
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    if len(sys.argv) == 1:
        print("Usage: python lotto.py [command] [options]")
        print("Commands: 'odds', 'analyze', 'generate', 'score', 'recommend', 'validate'")
        print("Example: python lotto.py generate --game superenalotto --history data/superenalotto.csv --seed 7")
        sys.exit(1)
    sys.exit(main())
