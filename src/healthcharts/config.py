"""
Default locations for raw inputs, tidy outputs and chart pages.

Environment
-----------
HEALTHCHARTS_DATASETS_DIR : root holding datasets_raw/ and datasets_processed/ (default "datasets")
HEALTHCHARTS_PAGES_DIR    : where chart HTML pages are written (default "pages")
HEALTHCHARTS_REGION       : OECD REF_AREA code kept by the life-expectancy extractor (default "AUS")
"""

import os
import pathlib

DATASETS_DIR = pathlib.Path(os.getenv("HEALTHCHARTS_DATASETS_DIR", "datasets"))
RAW_DIR = DATASETS_DIR / "datasets_raw"
PROCESSED_DIR = DATASETS_DIR / "datasets_processed"
PAGES_DIR = pathlib.Path(os.getenv("HEALTHCHARTS_PAGES_DIR", "pages"))

OECD_REGION = os.getenv("HEALTHCHARTS_REGION", "AUS").strip()

ABS_RAW = RAW_DIR / "abs_long_term_conditions_raw.xlsx"
ABS_TIDY = PROCESSED_DIR / "abs_long_term_conditions_tidy.csv"
OECD_RAW = RAW_DIR / "oecd_life_expectancy_raw.csv"
OECD_TIDY = PROCESSED_DIR / "oecd_life_expectancy_aus.csv"

ABS_PAGE = PAGES_DIR / "abs_heatmap.html"
OECD_PAGE = PAGES_DIR / "oecd_life_expectancy.html"
