import random

import pytest
from stairval.notepad import create_notepad

from healthcharts.errors import EmptyParsedData, MissingColumnsError, MissingSourceFile
from healthcharts.life_expectancy import LifeExpectancyRecord
from healthcharts.oecd_extractor import OecdLifeExpectancyExtractor


def _write(tmp_path, text: str) -> str:
    path = tmp_path / "raw.csv"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_end_to_end_scenario(oecd_csv):
    records = OecdLifeExpectancyExtractor("AUS").extract(oecd_csv, create_notepad("oecd"))
    assert records == [LifeExpectancyRecord(2018, 82.2), LifeExpectancyRecord(2019, 82.3)]


def test_duplicate_year_keeps_later_row(tmp_path):
    path = _write(tmp_path, "REF_AREA,TIME_PERIOD,OBS_VALUE\nAUS,2020,83.0\nAUS,2020,83.4\n")
    records = OecdLifeExpectancyExtractor("AUS").extract(path, create_notepad("oecd"))
    assert records == [LifeExpectancyRecord(2020, 83.4)]


def test_output_sorted_and_unique_for_any_order(tmp_path):
    rows = [f"AUS,{year},{80 + (year % 7) / 10}" for year in range(2000, 2021)] * 2
    random.Random(7).shuffle(rows)
    path = _write(tmp_path, "REF_AREA,TIME_PERIOD,OBS_VALUE\n" + "\n".join(rows) + "\n")

    years = [r.year for r in OecdLifeExpectancyExtractor("AUS").extract(path, create_notepad("oecd"))]
    assert years == sorted(set(years))
    assert years == list(range(2000, 2021))


def test_region_match_trims_whitespace(tmp_path):
    path = _write(tmp_path, "REF_AREA,TIME_PERIOD,OBS_VALUE\n AUS ,2019,82.3\nAUSX,2019,1.0\n")
    records = OecdLifeExpectancyExtractor("AUS").extract(path, create_notepad("oecd"))
    assert records == [LifeExpectancyRecord(2019, 82.3)]


def test_unparsable_rows_are_dropped_with_warning(tmp_path):
    path = _write(
        tmp_path,
        "REF_AREA,TIME_PERIOD,OBS_VALUE\n"
        "AUS,2017,\n"
        "AUS,n/a,82.0\n"
        "AUS,2018.5,82.0\n"
        'AUS,"2,019",82.3\n',
    )
    notepad = create_notepad("oecd")
    records = OecdLifeExpectancyExtractor("AUS").extract(path, notepad)
    assert records == [LifeExpectancyRecord(2019, 82.3)]
    assert notepad.has_warnings(include_subsections=True)


def test_missing_columns(tmp_path):
    path = _write(tmp_path, "REF_AREA,TIME,OBS_VALUE\nAUS,2019,82.3\n")
    with pytest.raises(MissingColumnsError):
        OecdLifeExpectancyExtractor("AUS").extract(path, create_notepad("oecd"))


def test_empty_file(tmp_path):
    path = _write(tmp_path, "")
    with pytest.raises(EmptyParsedData):
        OecdLifeExpectancyExtractor("AUS").extract(path, create_notepad("oecd"))


def test_missing_file(tmp_path):
    with pytest.raises(MissingSourceFile):
        OecdLifeExpectancyExtractor("AUS").extract(tmp_path / "nope.csv", create_notepad("oecd"))


def test_no_rows_for_region(oecd_csv):
    assert OecdLifeExpectancyExtractor("JPN").extract(oecd_csv, create_notepad("oecd")) == []


def test_python_only_number_syntax_is_dropped(tmp_path):
    path = _write(tmp_path, "REF_AREA,TIME_PERIOD,OBS_VALUE\nAUS,20_18,8_2.1\nAUS,2019,82.3\nAUS,٢٠٢٠,83.0\n")
    notepad = create_notepad("oecd")
    records = OecdLifeExpectancyExtractor("AUS").extract(path, notepad)
    assert records == [LifeExpectancyRecord(2019, 82.3)]
    assert notepad.has_warnings(include_subsections=True)
