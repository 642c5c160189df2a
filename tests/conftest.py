from datetime import date, timedelta

import pytest

from lotto_analytics.draw_history import DrawRecord
from lotto_analytics.game_configs import get_game_profile


@pytest.fixture
def superenalotto():
    return get_game_profile("superenalotto")


@pytest.fixture
def lotto():
    return get_game_profile("lotto")


@pytest.fixture
def millionday():
    return get_game_profile("millionday")


@pytest.fixture
def make_history():
    """Builds a newest-first history from lists of numbers, one day apart."""
    def _make(number_sets, start=date(2024, 6, 1), **kwargs):
        return [
            DrawRecord(date=start - timedelta(days=i), numbers=tuple(numbers), **kwargs)
            for i, numbers in enumerate(number_sets)
        ]
    return _make


@pytest.fixture
def toy_history(make_history):
    return make_history([[1, 2, 3, 4, 5, 6], [1, 2, 3, 4, 5, 6], [7, 8, 9, 10, 11, 12]])


@pytest.fixture
def wheel_history():
    return [
        DrawRecord(date=date(2024, 6, 3), variant_numbers={"Bari": (1, 2, 3, 4, 5), "Roma": (10, 20, 30, 40, 50)}),
        DrawRecord(date=date(2024, 6, 2), variant_numbers={"Bari": (1, 12, 23, 34, 45)}),
        DrawRecord(date=date(2024, 6, 1), variant_numbers={"Roma": (10, 11, 12, 13, 14)}),
    ]
