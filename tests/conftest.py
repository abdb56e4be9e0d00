import pathlib
import typing

import pandas as pd
import pytest

HEADER = ["", "0–14", "15–24", "25–34", "35–44", "45–54", "65 years and over"]

ABS_ROWS = [
    ["Australian Bureau of Statistics", None, None, None, None, None, None],
    ["Table 3.3 Long-term health conditions(a), by age, proportion of persons (%)", None, None, None, None, None, None],
    [None, None, None, None, None, None, None],
    HEADER,
    ["Total neoplasms(a)", 1.2, 1.5, "#0.1", 3.0, "1,234.5", 12.8],
    ["Malignant neoplasms", 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
    ["Total diseases of the eye and adnexa", 20.1, "-", 25.0, 30.0, 35.5, ".."],
    ["Total  mental and behavioural conditions (b)", 10.0, 15.0, 20.0, 18.0, 17.0, 9.5],
    [None, None, None, None, None, None, None],
    ["(a) Footnote text", None, None, None, None, None, None],
]


def write_workbook(path: pathlib.Path, sheets: dict[str, list[list[typing.Any]]]) -> str:
    """Write each sheet as raw rows (no header, no index)."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return str(path)


@pytest.fixture
def abs_workbook(tmp_path) -> str:
    return write_workbook(tmp_path / "abs.xlsx", {
        "Contents": [["Contents"], ["Table 3.3"]],
        "Table 3.3": ABS_ROWS,
    })


@pytest.fixture
def oecd_csv(tmp_path) -> str:
    path = tmp_path / "oecd.csv"
    path.write_text(
        "REF_AREA,MEASURE,TIME_PERIOD,OBS_VALUE\n"
        "AUS,LIFEEXP,2018,82.1\n"
        "AUS,LIFEEXP,2019,82.3\n"
        "NZL,LIFEEXP,2019,81.0\n"
        "AUS,LIFEEXP,2018,82.2\n",
        encoding="utf-8",
    )
    return str(path)
