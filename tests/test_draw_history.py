from datetime import date

import pytest

from lotto_analytics.draw_history import (
    DrawRecord, UnsuccessfulCombination, history_fingerprint, load_history_csv, load_unsuccessful_csv,
    relevant_unsuccessful, variant_history,
)
from lotto_analytics.game_configs import ConfigurationError, InvalidCombinationError


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_records_are_canonical():
    record = DrawRecord(date=date(2024, 1, 1), numbers=(6, 1, 5, 2, 4, 3), variant_numbers={"Bari": [5, 4, 3, 2, 1]})
    assert record.numbers == (1, 2, 3, 4, 5, 6)
    assert record.variant_numbers == {"Bari": (1, 2, 3, 4, 5)}
    assert record.numbers_for("Bari") == (1, 2, 3, 4, 5)
    assert record.numbers_for("Roma") == ()
    assert record.numbers_for() == record.canonical_numbers()


def test_record_validation(superenalotto, lotto):
    DrawRecord(date=date(2024, 1, 1), numbers=(1, 2, 3, 4, 5, 6), supplementary={"jolly": 7}).validate(superenalotto)
    DrawRecord(date=date(2024, 1, 1), variant_numbers={"Bari": (1, 2, 3, 4, 5)}).validate(lotto)
    with pytest.raises(InvalidCombinationError):
        DrawRecord(date=date(2024, 1, 1), numbers=(1, 2, 3)).validate(superenalotto)
    with pytest.raises(ValueError):
        DrawRecord(date=date(2024, 1, 1)).validate(superenalotto)
    with pytest.raises(ValueError):
        DrawRecord(date=date(2024, 1, 1), numbers=(1, 2, 3, 4, 5, 6), supplementary={"jolly": 95}).validate(superenalotto)
    with pytest.raises(ConfigurationError):
        DrawRecord(date=date(2024, 1, 1), variant_numbers={"Atlantis": (1, 2, 3, 4, 5)}).validate(lotto)


def test_variant_history_keeps_only_draws_with_that_wheel(lotto, wheel_history):
    bari = variant_history(wheel_history, lotto, "Bari")
    assert [draw.date for draw in bari] == [date(2024, 6, 3), date(2024, 6, 2)]
    assert bari[0].numbers == (1, 2, 3, 4, 5)
    assert variant_history(wheel_history, lotto) == []


def test_relevant_unsuccessful():
    combos = [
        UnsuccessfulCombination(numbers=(1, 2, 3, 4, 5)),
        UnsuccessfulCombination(numbers=(1, 2, 3, 4, 6), variant="Bari"),
    ]
    assert relevant_unsuccessful(combos) == combos[:1]
    assert relevant_unsuccessful(combos, "Bari") == combos[1:]
    assert relevant_unsuccessful(combos, "Roma") == []


def test_fingerprint_tracks_content(toy_history):
    assert history_fingerprint(toy_history) == history_fingerprint(list(toy_history))
    assert history_fingerprint(toy_history) != history_fingerprint(toy_history[1:])
    unsuccessful = [UnsuccessfulCombination(numbers=(1, 2, 3, 4, 5, 6))]
    assert history_fingerprint(toy_history) != history_fingerprint(toy_history, unsuccessful)


def test_load_history(tmp_path, superenalotto):
    path = write(tmp_path, "superenalotto.csv", "\n".join([
        "Draw Date,Ball 1,Ball 2,Ball 3,Ball 4,Ball 5,Ball 6,Jolly,SuperStar",
        "2024-01-02,6,5,4,3,2,1,7,12",
        "2024-01-04,10,20,30,40,50,60,70,80",
        "2024-01-02,6,5,4,3,2,1,7,12",
        "2024-01-03,1,2,3,4,5,5,7,12",
        "not a date,1,2,3,4,5,6,7,12",
        "2024-01-05,1,2,3,4,5,x,7,12",
    ]))
    history = load_history_csv(path, superenalotto)
    assert [draw.date for draw in history] == [date(2024, 1, 4), date(2024, 1, 2)]
    assert history[1].numbers == (1, 2, 3, 4, 5, 6)
    assert history[0].supplementary == {"jolly": 70, "superstar": 80}


def test_load_history_with_unnamed_date_column(tmp_path, millionday):
    path = write(tmp_path, "millionday.csv", "\n".join([
        "Giorno,Ball_1,Ball_2,Ball_3,Ball_4,Ball_5",
        "2024-03-01,1,12,23,34,55",
    ]))
    history = load_history_csv(path, millionday)
    assert len(history) == 1
    assert history[0].numbers == (1, 12, 23, 34, 55)


def test_load_wheel_history(tmp_path, lotto):
    path = write(tmp_path, "lotto.csv", "\n".join([
        "Draw_Date,Bari_1,Bari_2,Bari_3,Bari_4,Bari_5,Roma_1,Roma_2,Roma_3,Roma_4,Roma_5",
        "2024-02-01,1,2,3,4,5,10,20,30,40,50",
        "2024-02-03,1,12,23,34,45,,,,,",
    ]))
    history = load_history_csv(path, lotto)
    assert [draw.date for draw in history] == [date(2024, 2, 3), date(2024, 2, 1)]
    assert history[0].variant_numbers == {"Bari": (1, 12, 23, 34, 45)}
    assert history[1].numbers_for("Roma") == (10, 20, 30, 40, 50)


def test_load_history_errors(tmp_path, superenalotto):
    with pytest.raises(ConfigurationError):
        load_history_csv(str(tmp_path / "absent.csv"), superenalotto)
    path = write(tmp_path, "wrong.csv", "Draw_Date,A,B\n2024-01-01,1,2\n")
    with pytest.raises(ConfigurationError):
        load_history_csv(path, superenalotto)


def test_load_unsuccessful(tmp_path, lotto):
    path = write(tmp_path, "unsuccessful.csv", "\n".join([
        "Ball_1,Ball_2,Ball_3,Ball_4,Ball_5,Variant,Date_Added,Strategy,Notes",
        "5,4,3,2,1,Bari,2024-01-10,standard,",
        "1,2,3,4,6,,,,first try",
        "1,2,3,4,4,,,,",
        "1,2,3,4,5,Atlantis,,,",
    ]))
    combos = load_unsuccessful_csv(path, lotto)
    assert len(combos) == 2
    assert combos[0].numbers == (1, 2, 3, 4, 5)
    assert combos[0].variant == "Bari"
    assert combos[0].date_added == date(2024, 1, 10)
    assert combos[0].strategy == "standard"
    assert combos[1].variant is None
    assert combos[1].notes == "first try"


def test_load_unsuccessful_missing_columns(tmp_path, superenalotto):
    path = write(tmp_path, "unsuccessful.csv", "Ball_1,Ball_2\n1,2\n")
    with pytest.raises(ConfigurationError):
        load_unsuccessful_csv(path, superenalotto)


def test_main_history_skips_wheel_only_draws(lotto, wheel_history):
    national = DrawRecord(date=date(2024, 6, 4), numbers=(5, 4, 3, 2, 1), variant_numbers={"Bari": (6, 7, 8, 9, 10)})
    selected = variant_history([national] + wheel_history, lotto)
    assert selected == [national]
    assert all(len(draw.numbers) == lotto.pick_count for draw in selected)
