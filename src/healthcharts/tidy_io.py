"""
Reading and writing the tidy CSV files, plus keyed reconciliation of record sets.

The CSV files are the hand-off point between the extractors and the chart
renderers: UTF-8, header row, columns looked up by name.
"""

import logging
import operator
import pathlib
import typing
from dataclasses import asdict, dataclass, field

import pandas as pd
from pandas.errors import EmptyDataError

from .cleaning import parse_number, parse_year
from .condition import ConditionRecord
from .errors import ChartLoadFailure, MissingColumnsError
from .life_expectancy import LifeExpectancyRecord

logger = logging.getLogger(__name__)

CONDITION_COLUMNS = ("age_group", "condition_group", "proportion")
LIFE_EXPECTANCY_COLUMNS = ("year", "value")

R = typing.TypeVar("R")


def _write(records: typing.Sequence[typing.Any], columns: tuple[str, ...], path: str | pathlib.Path) -> pathlib.Path:
    out = pathlib.Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame([asdict(record) for record in records], columns=list(columns))
    df.to_csv(out, index=False, encoding="utf-8")
    logger.debug(f"Wrote {len(df)} rows to '{out}'")
    return out


def write_condition_records(records: typing.Sequence[ConditionRecord], path: str | pathlib.Path) -> pathlib.Path:
    return _write(records, CONDITION_COLUMNS, path)


def write_life_expectancy_records(
        records: typing.Sequence[LifeExpectancyRecord], path: str | pathlib.Path
) -> pathlib.Path:
    return _write(records, LIFE_EXPECTANCY_COLUMNS, path)


def _read(path: str | pathlib.Path, columns: tuple[str, ...]) -> pd.DataFrame:
    source = pathlib.Path(path)
    if not source.is_file():
        raise ChartLoadFailure(f"Tidy CSV not found: {source}")
    try:
        # Text only: numbers are parsed by Python below so written values come back unchanged
        df = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8")
    except EmptyDataError:
        return pd.DataFrame(columns=list(columns))
    except (UnicodeDecodeError, pd.errors.ParserError) as e:
        raise ChartLoadFailure(f"Could not parse {source}: {e}")

    missing = [column for column in columns if column not in df.columns]
    if missing:
        raise MissingColumnsError(f"{source} is missing columns {missing}. Headers: {list(df.columns)}")
    return df


def read_condition_records(path: str | pathlib.Path) -> list[ConditionRecord]:
    """Inverse of write_condition_records."""
    df = _read(path, CONDITION_COLUMNS)
    records: list[ConditionRecord] = []
    for index, row in df.iterrows():
        try:
            records.append(ConditionRecord(
                age_group=row["age_group"],
                condition_group=row["condition_group"],
                proportion=float(row["proportion"]),
            ))
        except ValueError as e:
            raise ChartLoadFailure(f"{path}, row {index}: {e}")
    return records


def read_life_expectancy_records(path: str | pathlib.Path) -> list[LifeExpectancyRecord]:
    """Inverse of write_life_expectancy_records."""
    df = _read(path, LIFE_EXPECTANCY_COLUMNS)
    records: list[LifeExpectancyRecord] = []
    for index, row in df.iterrows():
        # same coercion as the extractor, so "2018.0" is a valid year
        year = parse_year(row["year"])
        value = parse_number(row["value"])
        if year is None or value is None:
            raise ChartLoadFailure(f"{path}, row {index}: bad year/value {row['year']!r}, {row['value']!r}")
        records.append(LifeExpectancyRecord(year=year, value=value))
    return records


@dataclass
class KeyedDiff(typing.Generic[R]):
    """
    Result of reconciling two record sets by identity key.

    Attributes:
        entered: records whose key is only in the new set.
        updated: new versions of records whose key is in both sets but whose content changed.
        exited: records whose key is only in the old set.
    """

    entered: list[R] = field(default_factory=list)
    updated: list[R] = field(default_factory=list)
    exited: list[R] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.entered or self.updated or self.exited)

    def summary(self) -> str:
        return f"{len(self.entered)} added, {len(self.updated)} updated, {len(self.exited)} removed"


def keyed_diff(
        previous: typing.Iterable[R],
        current: typing.Iterable[R],
        key: typing.Callable[[R], typing.Hashable] = operator.attrgetter("key"),
) -> KeyedDiff[R]:
    """
    Compare two record sets by `key`. Duplicate keys resolve last-write-wins
    on both sides. Output lists follow the order of the set they came from.
    """
    before = {key(record): record for record in previous}
    after = {key(record): record for record in current}

    diff: KeyedDiff[R] = KeyedDiff()
    for k, record in after.items():
        if k not in before:
            diff.entered.append(record)
        elif before[k] != record:
            diff.updated.append(record)
    diff.exited.extend(record for k, record in before.items() if k not in after)
    return diff
