"""
Tidy extraction of an OECD SDMX-style life expectancy CSV.

Input columns: REF_AREA, TIME_PERIOD, OBS_VALUE (plus MEASURE, UNIT_MEASURE, AGE, SEX, ...).
Output: one (year, value) record per year for a single region, ascending by year.
"""

import logging
import pathlib

import pandas as pd
from pandas.errors import EmptyDataError
from stairval.notepad import Notepad

from . import config
from .cleaning import parse_number, parse_year
from .errors import EmptyParsedData, MissingColumnsError
from .extractor import TidyExtractor
from .life_expectancy import LifeExpectancyRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("REF_AREA", "TIME_PERIOD", "OBS_VALUE")


def load_raw_csv(csv_path: str | pathlib.Path) -> pd.DataFrame:
    """Every column as text; blank lines skipped; empty cells stay empty strings."""
    try:
        return pd.read_csv(csv_path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except EmptyDataError:
        raise EmptyParsedData(f"OECD CSV {csv_path} has no headers / is empty.")


def check_required_columns(df: pd.DataFrame) -> None:
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise MissingColumnsError(
            f"Expected columns {', '.join(REQUIRED_COLUMNS)} not found "
            f"(missing: {', '.join(missing)}). Headers: {', '.join(map(str, df.columns))}"
        )


def dedupe_by_year(df: pd.DataFrame) -> pd.DataFrame:
    """
    Stable sort by year, then keep the last row of each year.
    Rows sharing a year therefore resolve to the one that came last in the input.
    """
    ordered = df.sort_values("year", kind="stable")
    return ordered.drop_duplicates(subset="year", keep="last").reset_index(drop=True)


class OecdLifeExpectancyExtractor(TidyExtractor[LifeExpectancyRecord]):
    def __init__(self, region: str = config.OECD_REGION):
        self.region = region.strip()

    def extract(self, source_path: str | pathlib.Path, notepad: Notepad) -> list[LifeExpectancyRecord]:
        path = self._require_file(source_path, "OECD")
        logger.info(f"Reading OECD CSV '{path}'")
        raw = load_raw_csv(path)
        check_required_columns(raw)

        in_region = raw[raw["REF_AREA"].str.strip() == self.region]
        coerced = pd.DataFrame({
            "year": in_region["TIME_PERIOD"].map(parse_year),
            "value": in_region["OBS_VALUE"].map(parse_number),
        })
        usable = coerced.dropna(subset=["year", "value"]).astype(float)

        dropped = len(in_region) - len(usable)
        logger.debug(f"{self.region}: {len(in_region)} rows, {dropped} dropped during coercion")
        if dropped:
            notepad.add_warning(f"{self.region}: dropped {dropped} row(s) with a non-numeric year or value")

        tidy = dedupe_by_year(usable)
        if len(tidy) < len(usable):
            logger.debug(f"{self.region}: {len(usable) - len(tidy)} duplicate year(s) resolved to the last value")

        return [
            LifeExpectancyRecord(year=int(row.year), value=float(row.value))
            for row in tidy.itertuples(index=False)
        ]
