"""
Small utility tests for the cleaning helpers:
- coerce_cell / parse_number
- clean_label / normalize / strip_total_prefix
"""

import math

import pytest

from healthcharts.cleaning import clean_label, coerce_cell, normalize, parse_number, parse_year, strip_total_prefix


@pytest.mark.parametrize("raw", ["", "   ", "-", "..", " .. ", None, float("nan")])
def test_coerce_cell_null_markers(raw):
    assert coerce_cell(raw) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("#0.1", 0.1),
        ("1,234.5", 1234.5),
        (" 12 ", 12.0),
        (3, 3.0),
        (4.25, 4.25),
        ("#1,000", 1000.0),
    ],
)
def test_coerce_cell_numbers(raw, expected):
    assert coerce_cell(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "n.p.", "1.2.3", "inf", "nan", True, "1_000", "#1_000", "١٢", "0x1A", "1e"])
def test_coerce_cell_garbage_is_none(raw):
    assert coerce_cell(raw) is None


def test_parse_number_keeps_markers_unparsed():
    # only thousands separators are dropped outside ABS cell coercion
    assert parse_number("#5") is None
    assert parse_number("2,018") == 2018.0
    assert parse_number(math.inf) is None
    assert parse_number("") is None


def test_clean_label_strips_footnotes_and_whitespace():
    assert clean_label("Total neoplasms(a)") == "Total neoplasms"
    assert clean_label("  Total   mental and behavioural conditions (b) ") == "Total mental and behavioural conditions"
    assert clean_label(None) == ""


def test_normalize():
    assert normalize("  Table   3.3 ") == "table 3.3"
    assert normalize("65 Years\nand over") == "65 years and over"
    assert normalize(float("nan")) == ""


def test_strip_total_prefix():
    assert strip_total_prefix("Total neoplasms") == "neoplasms"
    assert strip_total_prefix("TOTAL diseases of the eye") == "diseases of the eye"
    assert strip_total_prefix("Totally fine") == "Totally fine"


def test_parse_number_rejects_non_ascii_decimal_syntax():
    assert parse_number("1_000") is None
    assert parse_number("١٢") is None
    assert parse_number("+1.5e2") == 150.0
    assert parse_number(".5") == 0.5


def test_parse_year():
    assert parse_year("2018") == 2018
    assert parse_year("2018.0") == 2018
    assert parse_year("2018.5") is None
    assert parse_year("20_18") is None
    assert parse_year("") is None
