import pytest

from healthcharts.condition import ConditionRecord
from healthcharts.life_expectancy import LifeExpectancyRecord


def test_valid_condition_record():
    record = ConditionRecord("0–14", "neoplasms", 1.2)
    assert record.key == "neoplasms||0–14"


@pytest.mark.parametrize(
    "age_group, condition_group, proportion",
    [
        ("5–9", "neoplasms", 1.0),
        ("0–14", "", 1.0),
        ("0–14", "   ", 1.0),
        ("0–14", "neoplasms", -0.5),
        ("0–14", "neoplasms", float("nan")),
        ("0–14", "neoplasms", float("inf")),
        ("0–14", "neoplasms", "1.0"),
    ],
)
def test_invalid_condition_record_raises(age_group, condition_group, proportion):
    with pytest.raises(ValueError):
        ConditionRecord(age_group, condition_group, proportion)


def test_life_expectancy_record():
    record = LifeExpectancyRecord(2019, 82.3)
    assert record.key == 2019


@pytest.mark.parametrize("year, value", [(2019.0, 82.3), ("2019", 82.3), (2019, float("nan")), (True, 1.0)])
def test_invalid_life_expectancy_record_raises(year, value):
    with pytest.raises(ValueError):
        LifeExpectancyRecord(year, value)
