# lotto_analytics/game_configs.py

"""
Centralized configuration for all supported draw games.

This module defines the structural rules for each game: how many numbers are
picked, the drawable range, the named parallel sub-draws (Lotto wheels), the
supplementary numbers (Jolly, SuperStar) and the column names used in the
history files. `GameProfile` is the validated, immutable view of those rules and
is the single source of truth for every range/count check in the engine.
"""

from dataclasses import dataclass
from typing import Dict, Any, List, Iterable, Optional, Tuple


class ConfigurationError(ValueError):
    """Raised when a game profile or analysis setting is invalid."""


class InvalidCombinationError(ValueError):
    """Raised when a combination handed to a scorer does not fit the game profile."""


LOTTO_WHEELS: List[str] = [
    "Bari", "Cagliari", "Firenze", "Genova", "Milano",
    "Napoli", "Palermo", "Roma", "Torino", "Venezia", "Nazionale",
]

GAME_RULES: Dict[str, Dict[str, Any]] = {
    "superenalotto": {
        "main": {
            "count": 6,
            "min": 1,
            "max": 90,
            "columns": [f"Ball_{i}" for i in range(1, 7)]
        },
        "supplementary": [
            {
                "name": "jolly",
                "count": 1,
                "min": 1,
                "max": 90,
                "distinct_from_main": True,
                "columns": ["Jolly"]
            },
            {
                "name": "superstar",
                "count": 1,
                "min": 1,
                "max": 90,
                "distinct_from_main": False,
                "columns": ["SuperStar"]
            }
        ],
        "variants": [],
        "prizes": [
            {"matches": 2, "category": "2 numeri", "indicative_amount": "Refund (~5 EUR)"},
            {"matches": 3, "category": "3 numeri", "indicative_amount": "~25 EUR"},
            {"matches": 4, "category": "4 numeri", "indicative_amount": "~250 EUR"},
            {"matches": 5, "category": "5 numeri", "indicative_amount": "~25,000-50,000 EUR"},
            {"matches": 6, "category": "6 numeri", "indicative_amount": "Jackpot"}
        ]
    },
    "lotto": {
        "main": {
            "count": 5,
            "min": 1,
            "max": 90,
            "columns": [f"Ball_{i}" for i in range(1, 6)]
        },
        "supplementary": [],
        "variants": LOTTO_WHEELS,
        "prizes": [
            {"matches": 1, "category": "Estratto", "indicative_amount": "2.25 EUR"},
            {"matches": 2, "category": "Ambo", "indicative_amount": "25.00 EUR"},
            {"matches": 3, "category": "Terno", "indicative_amount": "450.00 EUR"},
            {"matches": 4, "category": "Quaterna", "indicative_amount": "24,000.00 EUR"},
            {"matches": 5, "category": "Cinquina", "indicative_amount": "Top prize (variable)"}
        ]
    },
    "10elotto": {
        "main": {
            "count": 10,
            "min": 1,
            "max": 90,
            "columns": [f"Ball_{i}" for i in range(1, 11)]
        },
        "supplementary": [],
        "variants": [],
        "prizes": [
            {"matches": 6, "category": "6 numeri", "indicative_amount": "Refund"},
            {"matches": 7, "category": "7 numeri", "indicative_amount": "~10-50 EUR"},
            {"matches": 8, "category": "8 numeri", "indicative_amount": "~100-500 EUR"},
            {"matches": 9, "category": "9 numeri", "indicative_amount": "~1,000-10,000 EUR"},
            {"matches": 10, "category": "10 numeri", "indicative_amount": "Top prize"}
        ]
    },
    "millionday": {
        "main": {
            "count": 5,
            "min": 1,
            "max": 55,
            "columns": [f"Ball_{i}" for i in range(1, 6)]
        },
        "supplementary": [],
        "variants": [],
        "prizes": [
            {"matches": 2, "category": "2 numeri", "indicative_amount": "Refund"},
            {"matches": 3, "category": "3 numeri", "indicative_amount": "~5-25 EUR"},
            {"matches": 4, "category": "4 numeri", "indicative_amount": "~50-500 EUR"},
            {"matches": 5, "category": "5 numeri", "indicative_amount": "Guaranteed top prize"}
        ]
    }
}


def variant_columns(variant: str, count: int) -> List[str]:
    """Column names holding one variant's numbers in a history file, e.g. `Bari_1..Bari_5`."""
    return [f"{variant}_{i}" for i in range(1, count + 1)]


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class SupplementaryPool:
    """A supplementary number drawn alongside the main set (tracked, not part of the core combinatorics)."""
    name: str
    count: int
    min_number: int
    max_number: int
    distinct_from_main: bool = False
    columns: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("Supplementary pool name must not be empty.")
        if not _is_integer(self.count) or self.count < 0:
            raise ConfigurationError(f"Supplementary pool '{self.name}' has an invalid count: {self.count!r}")
        if not _is_integer(self.min_number) or not _is_integer(self.max_number):
            raise ConfigurationError(f"Supplementary pool '{self.name}' bounds must be integers.")
        if self.min_number < 1 or self.max_number < self.min_number:
            raise ConfigurationError(
                f"Supplementary pool '{self.name}' has an invalid range [{self.min_number}, {self.max_number}]"
            )
        if self.count > self.max_number - self.min_number + 1:
            raise ConfigurationError(f"Supplementary pool '{self.name}' draws more numbers than its range holds.")

    def contains(self, value: Any) -> bool:
        return _is_integer(value) and self.min_number <= value <= self.max_number


@dataclass(frozen=True)
class PrizeCategory:
    """Indicative prize tier for a match count. Amounts vary from draw to draw."""
    matches: int
    category: str
    indicative_amount: str


@dataclass(frozen=True)
class GameProfile:
    """
    Static parameters of a pick-K-of-N game.

    Attributes:
        name (str): The game identifier.
        max_number (int): The highest drawable number; numbers are drawn from 1..max_number.
        pick_count (int): How many distinct numbers are drawn and played.
        variants (Tuple[str, ...]): Named parallel sub-draws sharing pick_count and max_number.
        supplementary (Tuple[SupplementaryPool, ...]): Supplementary number pools.
        prizes (Tuple[PrizeCategory, ...]): Indicative prize tiers by match count, for display only.

    Raises:
        ConfigurationError: If the parameters are inconsistent. Values are never clamped.
    """
    name: str
    max_number: int
    pick_count: int
    variants: Tuple[str, ...] = ()
    supplementary: Tuple[SupplementaryPool, ...] = ()
    prizes: Tuple[PrizeCategory, ...] = ()

    def __post_init__(self):
        if not _is_integer(self.max_number) or self.max_number < 1:
            raise ConfigurationError(f"Game '{self.name}': max_number must be a positive integer, got {self.max_number!r}")
        if not _is_integer(self.pick_count) or self.pick_count < 1:
            raise ConfigurationError(f"Game '{self.name}': pick_count must be a positive integer, got {self.pick_count!r}")
        if self.pick_count > self.max_number:
            raise ConfigurationError(
                f"Game '{self.name}': pick_count ({self.pick_count}) exceeds max_number ({self.max_number})"
            )
        # Normalise list inputs so the profile stays hashable and immutable.
        object.__setattr__(self, "variants", tuple(self.variants))
        object.__setattr__(self, "supplementary", tuple(self.supplementary))
        object.__setattr__(self, "prizes", tuple(self.prizes))
        if any(not variant for variant in self.variants):
            raise ConfigurationError(f"Game '{self.name}': variant names must not be empty.")
        if len(set(self.variants)) != len(self.variants):
            raise ConfigurationError(f"Game '{self.name}': variant names must be unique.")
        pool_names = [pool.name for pool in self.supplementary]
        if len(set(pool_names)) != len(pool_names):
            raise ConfigurationError(f"Game '{self.name}': supplementary pool names must be unique.")
        for prize in self.prizes:
            if not _is_integer(prize.matches) or not 0 <= prize.matches <= self.pick_count:
                raise ConfigurationError(f"Game '{self.name}': prize tier {prize.category!r} has an invalid match count {prize.matches!r}")
        prize_matches = [prize.matches for prize in self.prizes]
        if len(set(prize_matches)) != len(prize_matches):
            raise ConfigurationError(f"Game '{self.name}': prize tiers must have distinct match counts.")

    @property
    def number_range(self) -> range:
        return range(1, self.max_number + 1)

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def require_variant(self, variant: Optional[str]) -> Optional[str]:
        """Returns the variant unchanged, or raises if this game does not define it."""
        if variant is not None and variant not in self.variants:
            raise ConfigurationError(
                f"Game '{self.name}' has no variant '{variant}'. Available variants: {list(self.variants)}"
            )
        return variant

    def prize_for(self, matches: int) -> Optional[PrizeCategory]:
        """The prize tier paid for `matches` main-number matches, or None when that count wins nothing."""
        for prize in self.prizes:
            if prize.matches == matches:
                return prize
        return None

    def supplementary_pool(self, name: str) -> SupplementaryPool:
        for pool in self.supplementary:
            if pool.name == name:
                return pool
        raise ConfigurationError(
            f"Game '{self.name}' has no supplementary pool '{name}'. "
            f"Available pools: {[pool.name for pool in self.supplementary]}"
        )

    def combination_problem(self, numbers: Iterable[Any]) -> Optional[str]:
        """Describes why `numbers` is not a valid combination for this game, or returns None."""
        values = list(numbers)
        if len(values) != self.pick_count:
            return f"expected {self.pick_count} numbers, got {len(values)}"
        if not all(_is_integer(n) for n in values):
            return "all numbers must be integers"
        if any(n < 1 or n > self.max_number for n in values):
            return f"all numbers must be between 1 and {self.max_number}"
        if len(set(values)) != len(values):
            return "numbers must be distinct"
        return None

    def is_valid_combination(self, numbers: Iterable[Any]) -> bool:
        return self.combination_problem(numbers) is None

    def check_combination(self, numbers: Iterable[Any]) -> Tuple[int, ...]:
        """
        Validates a combination and returns it in canonical (ascending) order.

        Raises:
            InvalidCombinationError: If the combination does not fit the profile.
        """
        values = list(numbers)
        problem = self.combination_problem(values)
        if problem is not None:
            raise InvalidCombinationError(f"Invalid combination {values} for '{self.name}': {problem}")
        return tuple(sorted(values))


def get_game_rules(game_name: str) -> Dict[str, Any]:
    """
    Retrieves the rules for a specific game.

    Args:
        game_name (str): The name of the game.

    Returns:
        Dict[str, Any]: The rules for the specified game.

    Raises:
        ConfigurationError: If the game_name is not found in GAME_RULES.
    """
    if game_name not in GAME_RULES:
        raise ConfigurationError(f"Game '{game_name}' not supported. Please choose from {list(GAME_RULES.keys())}")
    return GAME_RULES[game_name]


def build_game_profile(game_name: str, rules: Dict[str, Any]) -> GameProfile:
    """Builds a validated `GameProfile` from a rules dictionary shaped like the GAME_RULES entries."""
    try:
        main = rules["main"]
        if main.get("min", 1) != 1:
            raise ConfigurationError(f"Game '{game_name}': main numbers must start at 1.")
        pools = tuple(
            SupplementaryPool(
                name=pool["name"],
                count=pool["count"],
                min_number=pool["min"],
                max_number=pool["max"],
                distinct_from_main=pool.get("distinct_from_main", False),
                columns=tuple(pool.get("columns", [])),
            )
            for pool in rules.get("supplementary", [])
        )
        prizes = tuple(
            PrizeCategory(matches=prize["matches"], category=prize["category"], indicative_amount=prize["indicative_amount"])
            for prize in rules.get("prizes", [])
        )
        return GameProfile(
            name=game_name,
            max_number=main["max"],
            pick_count=main["count"],
            variants=tuple(rules.get("variants", [])),
            supplementary=pools,
            prizes=prizes,
        )
    except KeyError as e:
        raise ConfigurationError(f"Game '{game_name}': missing rule {e}") from e


def get_game_profile(game_name: str) -> GameProfile:
    """Returns the validated `GameProfile` for a supported game."""
    return build_game_profile(game_name, get_game_rules(game_name))
