"""
Tidy extraction of the ABS long-term conditions workbook.

The workbook is a presentation table: a title block, a header row of age brackets
somewhere near the top, and one row per condition (with subtotals). We locate the
header row by content, keep the major "Total ..." rows and melt the chosen age
columns into (age_group, condition_group, proportion) records.
"""

import logging
import pathlib
import typing

import pandas as pd
from stairval.notepad import Notepad

from .cleaning import clean_label, coerce_cell, normalize, strip_total_prefix
from .condition import AGE_GROUPS, ConditionRecord
from .errors import EmptyParsedData, HeaderNotFoundError, InsufficientColumnsError, SheetNotFoundError
from .extractor import TidyExtractor

logger = logging.getLogger(__name__)

TARGET_SHEET = "table 3.3"

# A row containing at least MIN_HEADER_HITS of these is the age-group header
HEADER_LABELS = ("0–14", "15–24", "25–34", "45–54", "65 years and over")
MIN_HEADER_HITS = 3
HEADER_SCAN_LIMIT = 80
MIN_AGE_COLUMNS = 2

# Major disease chapters of the table; every other row is a sub-category or a note
ALLOWED_TOTALS = (
    "Total neoplasms",
    "Total diseases of the blood and blood forming organs",
    "Total endocrine, nutritional and metabolic diseases",
    "Total mental and behavioural conditions",
    "Total diseases of the nervous system",
    "Total diseases of the eye and adnexa",
    "Total diseases of the ear and mastoid",
    "Total diseases of the circulatory system",
    "Total diseases of the respiratory system",
    "Total diseases of the digestive system",
    "Total diseases of the skin and subcutaneous tissue",
    "Total diseases of the musculoskeletal system and connective tissue",
)
_ALLOWED_NORMALIZED = {normalize(clean_label(label)) for label in ALLOWED_TOTALS}


def load_workbook_rows(workbook_path: str | pathlib.Path) -> dict[str, list[list[typing.Any]]]:
    """
    Read every worksheet as raw rows (no header inference, cells left as-is).
    """
    excel = pd.ExcelFile(workbook_path, engine="openpyxl")
    sheets: dict[str, list[list[typing.Any]]] = {}
    for sheet_name in excel.sheet_names:
        df = pd.read_excel(excel, sheet_name=sheet_name, header=None, dtype=object, engine="openpyxl")
        sheets[sheet_name] = df.to_numpy(dtype=object).tolist()
    return sheets


def find_sheet_name(sheet_names: typing.Sequence[str], target: str = TARGET_SHEET) -> str | None:
    """Exact normalized match first, then a "contains" match."""
    wanted = normalize(target)
    for name in sheet_names:
        if normalize(name) == wanted:
            return name
    for name in sheet_names:
        if wanted in normalize(name):
            return name
    return None


def find_header_row(rows: typing.Sequence[typing.Sequence[typing.Any]]) -> int | None:
    """
    Index of the first row (within HEADER_SCAN_LIMIT) that carries at least
    MIN_HEADER_HITS of the expected age-bracket labels, else None.
    """
    wanted = [normalize(label) for label in HEADER_LABELS]
    for index, row in enumerate(rows[:HEADER_SCAN_LIMIT]):
        cells = {normalize(clean_label(cell)) for cell in row}
        hits = sum(1 for label in wanted if label in cells)
        if hits >= MIN_HEADER_HITS:
            return index
    return None


def find_column_index(headers: typing.Sequence[str], label: str) -> int | None:
    """Column of `label` among cleaned headers: exact normalized match, else substring match."""
    normalized = [normalize(h) for h in headers]
    wanted = normalize(label)
    if wanted in normalized:
        return normalized.index(wanted)
    for index, header in enumerate(normalized):
        if wanted in header:
            return index
    return None


class AbsConditionsExtractor(TidyExtractor[ConditionRecord]):
    def __init__(self, strict_sheet: bool = False):
        """
        - False: a workbook without a "Table 3.3" sheet falls back to its first sheet (WARNING)
        - True : the fallback is refused with SheetNotFoundError
        """
        self.strict_sheet = strict_sheet
        self.selected_sheet: str | None = None

    def extract(self, source_path: str | pathlib.Path, notepad: Notepad) -> list[ConditionRecord]:
        """
        Process:
        1) pick the sheet
        2) locate the header row and the age-group columns
        3) keep allowlisted "Total ..." rows
        4) emit one record per usable cell
        """
        path = self._require_file(source_path, "ABS")
        logger.info(f"Reading ABS workbook '{path}'")
        sheets = load_workbook_rows(path)
        if not sheets:
            raise EmptyParsedData(f"ABS workbook {path} contains no sheets.")

        sheet_name = self._choose_sheet(list(sheets), notepad)
        self.selected_sheet = sheet_name
        rows = sheets[sheet_name]
        if not rows:
            raise EmptyParsedData(f"ABS workbook appears empty (sheet {sheet_name!r}).")

        header_index = find_header_row(rows)
        if header_index is None:
            raise HeaderNotFoundError(f"Could not find the age-group header row in sheet {sheet_name!r}.")
        logger.debug(f"Sheet {sheet_name!r}: header row at index {header_index}")

        columns = self._resolve_age_columns(rows[header_index], sheet_name)
        records = self._map_rows(rows[header_index + 1:], columns, sheet_name, notepad)
        logger.info(f"Sheet {sheet_name!r}: {len(records)} tidy records")
        return records

    def _choose_sheet(self, sheet_names: list[str], notepad: Notepad) -> str:
        found = find_sheet_name(sheet_names)
        if found is not None:
            return found
        if self.strict_sheet:
            raise SheetNotFoundError(f"No sheet matching {TARGET_SHEET!r} among {sheet_names}")
        fallback = sheet_names[0]
        message = f"No sheet matching {TARGET_SHEET!r}; falling back to first sheet {fallback!r}"
        logger.warning(message)
        notepad.add_warning(message)
        return fallback

    @staticmethod
    def _resolve_age_columns(header_row: typing.Sequence[typing.Any], sheet_name: str) -> list[tuple[str, int]]:
        headers = [clean_label(cell) for cell in header_row]
        resolved: list[tuple[str, int]] = []
        for age_group in AGE_GROUPS:
            index = find_column_index(headers, age_group)
            if index is None:
                logger.debug(f"Sheet {sheet_name!r}: no column for age group {age_group!r}")
                continue
            resolved.append((age_group, index))

        if len(resolved) < MIN_AGE_COLUMNS:
            found = ", ".join(age_group for age_group, _ in resolved) or "none"
            raise InsufficientColumnsError(
                f"Could not locate enough age-group columns. Found: {found} in sheet {sheet_name!r}."
            )
        return resolved

    @staticmethod
    def _map_rows(
            rows: typing.Sequence[typing.Sequence[typing.Any]],
            columns: list[tuple[str, int]],
            sheet_name: str,
            notepad: Notepad,
    ) -> list[ConditionRecord]:
        records: list[ConditionRecord] = []
        matched_rows = 0
        for row in rows:
            if not row:
                continue
            label = clean_label(row[0])
            if not label or normalize(label) not in _ALLOWED_NORMALIZED:
                continue
            matched_rows += 1
            condition_group = strip_total_prefix(label)

            for age_group, index in columns:
                value = coerce_cell(row[index]) if index < len(row) else None
                if value is None:
                    continue
                try:
                    records.append(ConditionRecord(age_group, condition_group, value))
                except ValueError as e:
                    notepad.add_warning(f"Sheet {sheet_name!r}, {condition_group!r} / {age_group!r}: {e}")

        if matched_rows == 0:
            message = f"Sheet {sheet_name!r}: no rows matched the condition allowlist"
            logger.warning(message)
            notepad.add_warning(message)
        return records
