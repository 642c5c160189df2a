# lotto_analytics/analysis_config.py
"""
Policy constants for the analysis and generation engine.

The pool size, strategy mixing shares, recent-window size and co-occurrence
threshold carry no statistical derivation; they are fixed policy values and are
exposed here so callers can override them instead of editing the analyzers.
"""
import json
import logging
from dataclasses import dataclass, fields, replace
from numbers import Real
from typing import Dict, Any, Optional

from lotto_analytics.game_configs import ConfigurationError

# --- Defaults ---
TOP_POOL_SIZE = 10
RECENT_WINDOW = 20
MIN_CO_OCCURRENCES = 3
CO_OCCURRENCE_EPSILON = 0.0001
CO_OCCURRENCE_LIMIT = 20
REPORT_LIMIT = 10
MAX_GENERATION_ATTEMPTS = 50
MAX_CONSECUTIVE_RUNS = 0
UNLUCKY_PAIR_MIN_COUNT = 3

STANDARD_FREQUENT_SHARE = 0.6
STANDARD_DELAYED_SHARE = 0.3
HIGH_VARIABILITY_INFREQUENT_SHARE = 0.4


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class AnalysisConfig:
    """Every tunable policy value used by the analyzers, the generator and the recommender."""
    top_pool_size: int = TOP_POOL_SIZE
    recent_window: int = RECENT_WINDOW
    min_co_occurrences: int = MIN_CO_OCCURRENCES
    co_occurrence_epsilon: float = CO_OCCURRENCE_EPSILON
    co_occurrence_limit: int = CO_OCCURRENCE_LIMIT
    report_limit: int = REPORT_LIMIT
    max_attempts: int = MAX_GENERATION_ATTEMPTS
    max_consecutive_runs: int = MAX_CONSECUTIVE_RUNS
    unlucky_pair_min_count: int = UNLUCKY_PAIR_MIN_COUNT
    standard_frequent_share: float = STANDARD_FREQUENT_SHARE
    standard_delayed_share: float = STANDARD_DELAYED_SHARE
    high_variability_infrequent_share: float = HIGH_VARIABILITY_INFREQUENT_SHARE

    def __post_init__(self):
        for name in ("top_pool_size", "recent_window", "min_co_occurrences", "co_occurrence_limit",
                     "report_limit", "max_attempts", "unlucky_pair_min_count"):
            value = getattr(self, name)
            if not _is_integer(value) or value < 1:
                raise ConfigurationError(f"'{name}' must be a positive integer, got {value!r}")
        if not _is_integer(self.max_consecutive_runs) or self.max_consecutive_runs < 0:
            raise ConfigurationError(f"'max_consecutive_runs' must be a non-negative integer, got {self.max_consecutive_runs!r}")
        if not _is_real(self.co_occurrence_epsilon) or not self.co_occurrence_epsilon > 0:
            raise ConfigurationError(f"'co_occurrence_epsilon' must be a positive number, got {self.co_occurrence_epsilon!r}")
        for name in ("standard_frequent_share", "standard_delayed_share", "high_variability_infrequent_share"):
            value = getattr(self, name)
            if not _is_real(value) or not 0 <= value <= 1:
                raise ConfigurationError(f"'{name}' must be a number between 0 and 1, got {value!r}")
        if self.standard_frequent_share + self.standard_delayed_share > 1:
            raise ConfigurationError("The standard strategy shares must not add up to more than 1.")

    def with_overrides(self, overrides: Dict[str, Any]) -> "AnalysisConfig":
        """Returns a copy with the given fields replaced. Unknown keys are rejected."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown analysis setting(s): {unknown}. Known settings: {sorted(known)}")
        return replace(self, **overrides)


DEFAULT_CONFIG = AnalysisConfig()


def load_config(path: Optional[str]) -> AnalysisConfig:
    """
    Loads analysis settings from a JSON file of overrides.

    Args:
        path (Optional[str]): Path to a JSON object, e.g. {"recent_window": 30}. None returns the defaults.

    Returns:
        AnalysisConfig: The defaults with the file's overrides applied.

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid settings.
    """
    if path is None:
        return DEFAULT_CONFIG
    try:
        with open(path, 'r', encoding='utf-8') as f:
            overrides = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read analysis settings from {path}: {e}") from e
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Analysis settings in {path} must be a JSON object.")
    config = DEFAULT_CONFIG.with_overrides(overrides)
    logging.info(f"Loaded analysis settings from {path}: {overrides}")
    return config
