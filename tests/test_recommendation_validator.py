import json

import pytest

from lotto_analytics.recommendation_validator import (
    Recommendation, ValidationError, ValidationRule, parse_recommendation_json, validate_recommendation,
)


def payload(**overrides):
    base = {"numbers": [12, 3, 45, 67, 78, 89], "confidence": 50, "rationale": ["balanced spread"]}
    base.update(overrides)
    return base


def rejected_rule(data, profile):
    with pytest.raises(ValidationError) as excinfo:
        validate_recommendation(data, profile)
    return excinfo.value.rule


def test_valid_recommendation_is_accepted(superenalotto):
    recommendation = validate_recommendation(payload(), superenalotto)
    assert recommendation.numbers == (3, 12, 45, 67, 78, 89)
    assert recommendation.confidence == 50.0
    assert recommendation.rationale == ("balanced spread",)
    assert recommendation.supplementary == {}


def test_duplicate_numbers(superenalotto):
    assert rejected_rule(payload(numbers=[1, 2, 3, 4, 5, 5]), superenalotto) is ValidationRule.NUMBERS_DISTINCT


@pytest.mark.parametrize("numbers", [[1, 2, 3, 4, 5], [1, 2, 3, 4, 5, 6, 7], "1,2,3,4,5,6", None])
def test_wrong_length(superenalotto, numbers):
    assert rejected_rule(payload(numbers=numbers), superenalotto) is ValidationRule.NUMBERS_LENGTH


@pytest.mark.parametrize("numbers", [[0, 2, 3, 4, 5, 6], [1, 2, 3, 4, 5, 91], [1, 2, 3, 4, 5, 6.5],
                                     [1, 2, 3, 4, 5, "6"], [True, 2, 3, 4, 5, 6]])
def test_out_of_range_or_not_integer(superenalotto, numbers):
    assert rejected_rule(payload(numbers=numbers), superenalotto) is ValidationRule.NUMBERS_RANGE


@pytest.mark.parametrize("confidence", [-1, 100.5, "high", None, float("nan"), True])
def test_confidence_range(superenalotto, confidence):
    assert rejected_rule(payload(confidence=confidence), superenalotto) is ValidationRule.CONFIDENCE_RANGE


@pytest.mark.parametrize("confidence", [0, 100, 72.5])
def test_confidence_bounds_are_inclusive(superenalotto, confidence):
    assert validate_recommendation(payload(confidence=confidence), superenalotto).confidence == confidence


@pytest.mark.parametrize("rationale", [[], "because", None, ["ok", 3]])
def test_rationale(superenalotto, rationale):
    assert rejected_rule(payload(rationale=rationale), superenalotto) is ValidationRule.RATIONALE


def test_first_broken_rule_wins(superenalotto):
    data = payload(numbers=[1, 1, 2, 3, 4, 5], confidence=500, rationale=[])
    assert rejected_rule(data, superenalotto) is ValidationRule.NUMBERS_DISTINCT
    data = payload(confidence=500, rationale=[])
    assert rejected_rule(data, superenalotto) is ValidationRule.CONFIDENCE_RANGE


def test_error_message_names_the_rule(superenalotto):
    with pytest.raises(ValidationError, match=r"\[numbers_distinct\]"):
        validate_recommendation(payload(numbers=[1, 2, 3, 4, 5, 5]), superenalotto)


def test_not_an_object(superenalotto):
    assert rejected_rule([1, 2, 3, 4, 5, 6], superenalotto) is ValidationRule.MALFORMED_PAYLOAD


def test_supplementary_values(superenalotto):
    accepted = validate_recommendation(payload(supplementary={"jolly": 7, "superstar": [12]}), superenalotto)
    assert accepted.supplementary == {"jolly": (7,), "superstar": (12,)}

    # The Jolly is drawn from the balls left after the main numbers
    assert rejected_rule(payload(supplementary={"jolly": 12}), superenalotto) is ValidationRule.SUPPLEMENTARY_RANGE
    assert validate_recommendation(payload(supplementary={"superstar": 12}), superenalotto).supplementary == {
        "superstar": (12,)
    }
    assert rejected_rule(payload(supplementary={"jolly": 0}), superenalotto) is ValidationRule.SUPPLEMENTARY_RANGE
    assert rejected_rule(payload(supplementary={"bonus": 1}), superenalotto) is ValidationRule.SUPPLEMENTARY_RANGE
    assert rejected_rule(payload(supplementary={"jolly": [1, 2]}), superenalotto) is ValidationRule.SUPPLEMENTARY_RANGE


def test_other_games(millionday, lotto):
    assert validate_recommendation(payload(numbers=[1, 10, 20, 30, 55]), millionday).numbers == (1, 10, 20, 30, 55)
    assert rejected_rule(payload(numbers=[1, 10, 20, 30, 56]), millionday) is ValidationRule.NUMBERS_RANGE
    assert rejected_rule(payload(), lotto) is ValidationRule.NUMBERS_LENGTH


def test_recommendation_round_trips_through_the_gate(superenalotto):
    original = Recommendation(numbers=(1, 2, 3, 4, 5, 6), confidence=10.0, rationale=("x",), supplementary={"jolly": (9,)})
    assert validate_recommendation(original, superenalotto) == original


def test_parse_json(superenalotto):
    accepted = parse_recommendation_json(json.dumps(payload()), superenalotto)
    assert accepted.numbers == (3, 12, 45, 67, 78, 89)
    with pytest.raises(ValidationError) as excinfo:
        parse_recommendation_json("{numbers: [1, 2, 3]", superenalotto)
    assert excinfo.value.rule is ValidationRule.MALFORMED_PAYLOAD
