"""
String and number normalization shared by the extractors.
"""

import math
import re
import typing

import pandas as pd

_FOOTNOTE = re.compile(r"\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")
_TOTAL_PREFIX = re.compile(r"^Total\s+", re.IGNORECASE)
# Plain ASCII decimal; float() alone would also take "1_000", "inf" and non-ASCII digits
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# ABS placeholders for "nil or rounded to zero" and "not available"
_NULL_MARKERS = {"", "-", ".."}


def _as_text(value: typing.Any) -> str:
    # None, NaN and pandas NA all read as an empty cell
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value)


def normalize(value: typing.Any) -> str:
    """Lowercase, collapse whitespace runs and trim."""
    return _WHITESPACE.sub(" ", _as_text(value).lower()).strip()


def clean_label(value: typing.Any) -> str:
    """
    Drop parenthesised footnote markers and tidy whitespace:
    "Total neoplasms(a)" -> "Total neoplasms".
    """
    return _WHITESPACE.sub(" ", _FOOTNOTE.sub("", _as_text(value))).strip()


def strip_total_prefix(label: str) -> str:
    """'Total diseases of the eye' -> 'diseases of the eye'"""
    return _TOTAL_PREFIX.sub("", label).strip()


def parse_number(value: typing.Any) -> float | None:
    """
    Parse a number, ignoring thousands separators.
    Returns None for empty, unparsable or non-finite input.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    text = _as_text(value).replace(",", "").strip()
    if not _DECIMAL.fullmatch(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def parse_year(value: typing.Any) -> int | None:
    """parse_number restricted to whole numbers: "2018" and "2018.0" -> 2018, "2018.5" -> None."""
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def coerce_cell(value: typing.Any) -> float | None:
    """
    ABS cell coercion:
      - "", "-" and ".." -> None
      - a leading "#" (relative standard error flag, e.g. "#0.1") is dropped
      - thousands separators are dropped
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return parse_number(value)
    text = _as_text(value).strip()
    if text in _NULL_MARKERS:
        return None
    if text.startswith("#"):
        text = text[1:]
    return parse_number(text)
