# lotto_analytics/draw_history.py
"""
Draw history records and the local input adapter that loads them.

Acquisition from remote sources and persistence belong to external
collaborators; this module only turns an already-downloaded CSV export into
validated, newest-first `DrawRecord` sequences, and selects the slice of a
history (or of the unsuccessful-combination set) that an analysis works on.
"""
import hashlib
import json
import logging
import os
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, List, Any, Iterable, Sequence, Tuple

import pandas as pd

from lotto_analytics.game_configs import GameProfile, variant_columns, ConfigurationError

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

DATE_COLUMN = "Draw_Date"


@dataclass(frozen=True)
class DrawRecord:
    """One historical draw. Numbers are kept in canonical ascending order."""
    date: date
    numbers: Tuple[int, ...] = ()
    variant_numbers: Dict[str, Tuple[int, ...]] = field(default_factory=dict)
    supplementary: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "numbers", tuple(sorted(self.numbers)))
        object.__setattr__(
            self, "variant_numbers",
            {name: tuple(sorted(values)) for name, values in self.variant_numbers.items()}
        )
        object.__setattr__(self, "supplementary", dict(self.supplementary))

    def numbers_for(self, variant: Optional[str] = None) -> Tuple[int, ...]:
        """The main numbers, or one variant's numbers. A missing variant yields an empty tuple, never the main set."""
        if variant is None:
            return self.numbers
        return self.variant_numbers.get(variant, ())

    def canonical_numbers(self) -> Tuple[int, ...]:
        return self.numbers

    def dedupe_key(self) -> Tuple[Any, ...]:
        variants = tuple(sorted(self.variant_numbers.items()))
        return (self.date, self.numbers, variants)

    def validate(self, profile: GameProfile) -> None:
        """
        Checks the shape invariant against a game profile.

        Variant games may carry only variant numbers; every set that is present must
        hold exactly `pick_count` distinct numbers in range.

        Raises:
            ValueError: If the record does not fit the profile.
        """
        if not self.numbers and not self.variant_numbers:
            raise ValueError(f"Draw of {self.date} has no numbers.")
        if self.numbers or not profile.has_variants:
            profile.check_combination(self.numbers)
        for name, values in self.variant_numbers.items():
            profile.require_variant(name)
            profile.check_combination(values)
        for name, value in self.supplementary.items():
            pool = profile.supplementary_pool(name)
            if not pool.contains(value):
                raise ValueError(f"Draw of {self.date}: {name} value {value!r} outside [{pool.min_number}, {pool.max_number}]")


@dataclass(frozen=True)
class UnsuccessfulCombination:
    """A user-recorded combination that did not win. Used only as a negative signal."""
    numbers: Tuple[int, ...]
    variant: Optional[str] = None
    date_added: Optional[date] = None
    strategy: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "numbers", tuple(sorted(self.numbers)))


def variant_history(history: Sequence[DrawRecord], profile: GameProfile, variant: Optional[str] = None) -> List[DrawRecord]:
    """
    Selects the draws an analysis works on.

    Without a variant, only draws that carry main numbers are kept (a wheel-only
    draw of a variant game has none). With a variant, only draws that carry numbers
    for it are kept, and those numbers become the draw's main numbers, so each wheel
    is analysed independently.
    """
    profile.require_variant(variant)
    if variant is None:
        selected = [draw for draw in history if draw.numbers]
        if len(selected) < len(history):
            logging.warning(
                f"{len(history) - len(selected)} of {len(history)} draws for '{profile.name}' have no main numbers; "
                f"select a variant to analyse them."
            )
        return selected
    selected = []
    for draw in history:
        numbers = draw.numbers_for(variant)
        if numbers:
            selected.append(DrawRecord(date=draw.date, numbers=numbers, supplementary=draw.supplementary))
    return selected


def relevant_unsuccessful(
    unsuccessful: Iterable[UnsuccessfulCombination], variant: Optional[str] = None
) -> List[UnsuccessfulCombination]:
    """Keeps the combinations tagged with the given variant, or the untagged ones when no variant is selected."""
    return [combo for combo in unsuccessful if combo.variant == variant]


def history_fingerprint(
    history: Sequence[DrawRecord], unsuccessful: Iterable[UnsuccessfulCombination] = ()
) -> str:
    """
    A stable hash of a history snapshot and an unsuccessful set.

    Callers that memoize derived statistics must key their cache on this value.
    """
    payload = {
        "history": [
            [draw.date.isoformat(), list(draw.numbers),
             {name: list(values) for name, values in sorted(draw.variant_numbers.items())},
             dict(sorted(draw.supplementary.items()))]
            for draw in history
        ],
        "unsuccessful": sorted(
            [list(combo.numbers), combo.variant or ""] for combo in unsuccessful
        ),
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def standardize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """Standardizes DataFrame columns to the `GAME_RULES` naming (e.g. 'Ball 1' -> 'Ball_1')."""
    # Export headers vary between sources; map the known variations explicitly.
    standard_map = {
        'Draw Date': DATE_COLUMN,
        'Date': DATE_COLUMN,
        'Data': DATE_COLUMN,
        'Jolly': 'Jolly',
        'Superstar': 'SuperStar',
        'Super Star': 'SuperStar',
    }

    new_columns = {}
    for col in df.columns:
        clean_col = str(col).strip()
        new_columns[col] = standard_map.get(clean_col, clean_col.replace(' ', '_'))

    return df.rename(columns=new_columns)


def _row_numbers(row: Dict[str, Any], columns: List[str]) -> Optional[Tuple[int, ...]]:
    """Reads a set of integer columns from a row. Returns None when any value is missing or not whole."""
    values = []
    for col in columns:
        value = row.get(col)
        if value is None or pd.isna(value):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not number.is_integer():
            return None
        values.append(int(number))
    return tuple(values)


def _records_from_frame(df: pd.DataFrame, profile: GameProfile) -> List[DrawRecord]:
    main_columns = [f"Ball_{i}" for i in range(1, profile.pick_count + 1)]
    has_main = all(col in df.columns for col in main_columns)
    present_variants = [
        variant for variant in profile.variants
        if all(col in df.columns for col in variant_columns(variant, profile.pick_count))
    ]
    if not has_main and not present_variants:
        raise ConfigurationError(
            f"History for '{profile.name}' has neither main columns {main_columns} nor any variant columns. "
            f"Available columns: {list(df.columns)}"
        )

    records = []
    skipped = 0
    for row in df.to_dict('records'):
        numbers = _row_numbers(row, main_columns) if has_main else ()
        variants = {}
        for variant in present_variants:
            values = _row_numbers(row, variant_columns(variant, profile.pick_count))
            if values:
                variants[variant] = values
        supplementary = {}
        for pool in profile.supplementary:
            values = _row_numbers(row, list(pool.columns)) if pool.columns and all(c in df.columns for c in pool.columns) else None
            if values and pool.count == 1:
                supplementary[pool.name] = values[0]
        try:
            if numbers is None:
                raise ValueError("main numbers missing or not whole")
            record = DrawRecord(
                date=row[DATE_COLUMN].date(),
                numbers=numbers,
                variant_numbers=variants,
                supplementary=supplementary,
            )
            record.validate(profile)
        except ValueError as e:
            skipped += 1
            logging.warning(f"Skipping malformed draw row for '{profile.name}' ({row.get(DATE_COLUMN)}): {e}")
            continue
        records.append(record)

    if skipped:
        logging.warning(f"Skipped {skipped} malformed rows for '{profile.name}'.")
    return records


def load_history_csv(path: str, profile: GameProfile) -> List[DrawRecord]:
    """
    Loads, validates, deduplicates and orders a draw history export.

    Args:
        path (str): CSV file with a date column and `Ball_i` (and/or `<Wheel>_i`) columns.
        profile (GameProfile): The game the history belongs to.

    Returns:
        List[DrawRecord]: Valid draws, newest first.

    Raises:
        ConfigurationError: If the file is missing or has none of the required columns.
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"History file not found: {path}")

    df = pd.read_csv(path)
    logging.info(f"Loaded {len(df)} records from history file: {path}")
    if df.empty:
        logging.warning(f"History file for '{profile.name}' is empty.")
        return []

    df = standardize_column_names(df)
    if DATE_COLUMN not in df.columns:
        # The first column is always the date column in the raw exports
        df = df.rename(columns={df.columns[0]: DATE_COLUMN})

    df[DATE_COLUMN] = pd.to_datetime(df[DATE_COLUMN], errors='coerce')
    undated = int(df[DATE_COLUMN].isna().sum())
    if undated:
        logging.warning(f"Dropping {undated} rows without a readable date for '{profile.name}'.")
        df = df.dropna(subset=[DATE_COLUMN])

    records = _records_from_frame(df, profile)

    unique: Dict[Tuple[Any, ...], DrawRecord] = {}
    for record in records:
        unique[record.dedupe_key()] = record
    removed = len(records) - len(unique)
    if removed:
        logging.info(f"Removed {removed} duplicate records for '{profile.name}'.")

    history = sorted(unique.values(), key=lambda record: record.date, reverse=True)
    logging.info(f"VALIDATION SUCCESS for '{profile.name}': {len(history)} draws loaded.")
    return history


def load_unsuccessful_csv(path: str, profile: GameProfile) -> List[UnsuccessfulCombination]:
    """
    Loads user-recorded unsuccessful combinations.

    The file holds `Ball_1..Ball_k` columns and optional `Variant`, `Date_Added`,
    `Strategy` and `Notes` columns. Rows that do not fit the profile are skipped.
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Unsuccessful combinations file not found: {path}")

    df = standardize_column_names(pd.read_csv(path))
    columns = [f"Ball_{i}" for i in range(1, profile.pick_count + 1)]
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ConfigurationError(f"Unsuccessful combinations file {path} is missing columns: {missing}")

    combos = []
    for row in df.to_dict('records'):
        numbers = _row_numbers(row, columns)
        variant = row.get("Variant")
        variant = None if variant is None or pd.isna(variant) else str(variant).strip()
        try:
            if numbers is None:
                raise ValueError("numbers missing or not whole")
            profile.check_combination(numbers)
            profile.require_variant(variant)
        except ValueError as e:
            logging.warning(f"Skipping unsuccessful combination row {row}: {e}")
            continue
        added = row.get("Date_Added")
        added = None if added is None or pd.isna(added) else pd.to_datetime(added).date()
        strategy = row.get("Strategy")
        notes = row.get("Notes")
        combos.append(UnsuccessfulCombination(
            numbers=numbers,
            variant=variant,
            date_added=added,
            strategy=None if strategy is None or pd.isna(strategy) else str(strategy),
            notes=None if notes is None or pd.isna(notes) else str(notes),
        ))

    logging.info(f"Loaded {len(combos)} unsuccessful combinations for '{profile.name}' from {path}")
    return combos
