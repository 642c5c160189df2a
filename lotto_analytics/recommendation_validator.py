# lotto_analytics/recommendation_validator.py
"""
Validation gate for externally produced recommendations.

A recommendation is accepted exactly as given or rejected with the first rule
it breaks. Nothing is coerced, repaired or partially accepted, and the error
is meant to be shown to the user verbatim.
"""
import json
import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Integral, Real
from typing import Any, Dict, Mapping, Tuple, Union

from lotto_analytics.game_configs import GameProfile


class ValidationRule(str, Enum):
    MALFORMED_PAYLOAD = "malformed_payload"
    NUMBERS_LENGTH = "numbers_length"
    NUMBERS_RANGE = "numbers_range"
    NUMBERS_DISTINCT = "numbers_distinct"
    CONFIDENCE_RANGE = "confidence_range"
    RATIONALE = "rationale"
    SUPPLEMENTARY_RANGE = "supplementary_range"


class ValidationError(ValueError):
    """A recommendation broke `rule`; the message explains how."""

    def __init__(self, rule: ValidationRule, message: str):
        super().__init__(f"[{rule.value}] {message}")
        self.rule = rule


@dataclass(frozen=True)
class Recommendation:
    numbers: Tuple[int, ...]
    confidence: float
    rationale: Tuple[str, ...]
    supplementary: Dict[str, Tuple[int, ...]] = field(default_factory=dict)

    def as_payload(self) -> Dict[str, Any]:
        return {
            "numbers": list(self.numbers),
            "confidence": self.confidence,
            "rationale": list(self.rationale),
            "supplementary": {name: list(values) for name, values in self.supplementary.items()},
        }


def _is_integer(value: Any) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def _check_numbers(numbers: Any, profile: GameProfile) -> None:
    if not isinstance(numbers, (list, tuple)) or len(numbers) != profile.pick_count:
        found = len(numbers) if isinstance(numbers, (list, tuple)) else type(numbers).__name__
        raise ValidationError(
            ValidationRule.NUMBERS_LENGTH,
            f"numbers must be an array of exactly {profile.pick_count} entries (got {found})",
        )
    for n in numbers:
        if not _is_integer(n) or not 1 <= n <= profile.max_number:
            raise ValidationError(
                ValidationRule.NUMBERS_RANGE,
                f"all numbers must be integers between 1 and {profile.max_number} (got {n!r})",
            )
    if len(set(numbers)) != len(numbers):
        raise ValidationError(ValidationRule.NUMBERS_DISTINCT, f"numbers must be unique (got {list(numbers)})")


def _check_confidence(confidence: Any) -> None:
    if (isinstance(confidence, bool) or not isinstance(confidence, Real)
            or math.isnan(confidence) or not 0 <= confidence <= 100):
        raise ValidationError(
            ValidationRule.CONFIDENCE_RANGE, f"confidence must be a number between 0 and 100 (got {confidence!r})"
        )


def _check_rationale(rationale: Any) -> None:
    if (not isinstance(rationale, (list, tuple)) or not rationale
            or not all(isinstance(reason, str) for reason in rationale)):
        raise ValidationError(ValidationRule.RATIONALE, "rationale must be a non-empty list of strings")


def _check_supplementary(supplementary: Any, numbers: Tuple[int, ...], profile: GameProfile) -> Dict[str, Tuple[int, ...]]:
    if supplementary is None:
        return {}
    if not isinstance(supplementary, Mapping):
        raise ValidationError(ValidationRule.SUPPLEMENTARY_RANGE, "supplementary values must be an object keyed by pool name")
    checked = {}
    pools = {pool.name: pool for pool in profile.supplementary}
    for name, values in supplementary.items():
        pool = pools.get(name)
        if pool is None:
            raise ValidationError(
                ValidationRule.SUPPLEMENTARY_RANGE, f"'{profile.name}' has no supplementary pool '{name}'"
            )
        values = [values] if _is_integer(values) else values
        if not isinstance(values, (list, tuple)) or len(values) != pool.count:
            raise ValidationError(
                ValidationRule.SUPPLEMENTARY_RANGE, f"{name} must hold exactly {pool.count} value(s)"
            )
        for value in values:
            if not _is_integer(value) or not pool.contains(value):
                raise ValidationError(
                    ValidationRule.SUPPLEMENTARY_RANGE,
                    f"{name} values must be integers between {pool.min_number} and {pool.max_number} (got {value!r})",
                )
            if pool.distinct_from_main and value in numbers:
                raise ValidationError(
                    ValidationRule.SUPPLEMENTARY_RANGE, f"{name} value {value} must differ from the main numbers"
                )
        checked[name] = tuple(int(v) for v in values)
    return checked


def validate_recommendation(payload: Union[Mapping[str, Any], Recommendation], profile: GameProfile) -> Recommendation:
    """
    Accepts or rejects a recommendation for a game.

    Checks, in order: numbers length, numbers range, numbers distinct, confidence
    range, rationale, then any supplementary values.

    Args:
        payload (Union[Mapping[str, Any], Recommendation]): An object with `numbers`,
            `confidence`, `rationale` and optional `supplementary`.
        profile (GameProfile): The game the recommendation is for.

    Returns:
        Recommendation: The accepted recommendation, numbers in ascending order.

    Raises:
        ValidationError: On the first broken rule.
    """
    if isinstance(payload, Recommendation):
        payload = payload.as_payload()
    if not isinstance(payload, Mapping):
        raise ValidationError(ValidationRule.MALFORMED_PAYLOAD, "recommendation must be an object")

    numbers = payload.get("numbers")
    _check_numbers(numbers, profile)
    confidence = payload.get("confidence")
    _check_confidence(confidence)
    rationale = payload.get("rationale")
    _check_rationale(rationale)
    canonical = tuple(sorted(int(n) for n in numbers))
    supplementary = _check_supplementary(payload.get("supplementary"), canonical, profile)

    return Recommendation(
        numbers=canonical,
        confidence=float(confidence),
        rationale=tuple(rationale),
        supplementary=supplementary,
    )


def parse_recommendation_json(text: str, profile: GameProfile) -> Recommendation:
    """Parses a JSON recommendation and validates it. Malformed JSON is rejected, not repaired."""
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ValidationError(ValidationRule.MALFORMED_PAYLOAD, f"recommendation is not valid JSON: {e}") from e
    return validate_recommendation(payload, profile)
