"""
Interactive chart pages for the tidy CSV files.

Two renderers, each a pure function of its (possibly filtered) records:
  - heatmap: age group x condition group, colour = proportion
  - line chart: life expectancy by year, with a year-range filter and a focus point

Load failures and empty data never raise out of the render_* functions; the page
is still written and shows a status line instead of a chart.
"""

import bisect
import logging
import pathlib
import typing

import plotly.graph_objects as go

from .condition import ConditionRecord
from .errors import ChartLoadFailure, EmptyParsedData, MissingColumnsError
from .life_expectancy import LifeExpectancyRecord
from .tidy_io import read_condition_records, read_life_expectancy_records

logger = logging.getLogger(__name__)

STATUS_COLOR = "#b00020"
GUIDE_COLOR = "#9ca3af"

NO_ROWS_MESSAGE = "CSV loaded but contains no rows."
EMPTY_RANGE_MESSAGE = "No data available for the selected year range."


def load_failure_message(csv_path: str | pathlib.Path) -> str:
    return f"CSV failed to load. Check the path: {csv_path} (and confirm the file name matches exactly)."


# ------------------------------------------------------------------------------
# Heatmap
# ------------------------------------------------------------------------------


def sort_condition_groups(records: typing.Sequence[ConditionRecord], descending: bool) -> list[str]:
    """
    Condition groups ordered by their total proportion across age groups.
    Ties keep first-seen order.
    """
    totals: dict[str, float] = {}
    for record in records:
        totals[record.condition_group] = totals.get(record.condition_group, 0.0) + record.proportion
    return sorted(totals, key=totals.__getitem__, reverse=descending)


def _sort_label(descending: bool) -> str:
    return f"Sort conditions by total ({'descending' if descending else 'ascending'})"


def build_heatmap(records: typing.Sequence[ConditionRecord], sort_descending: bool | None = None) -> go.Figure:
    """
    Heatmap of proportion by age group (x) and condition group (y).
    `sort_descending=None` keeps the order the condition groups appear in the data.
    """
    if not records:
        raise EmptyParsedData(NO_ROWS_MESSAGE)

    age_groups = list(dict.fromkeys(record.age_group for record in records))
    if sort_descending is None:
        condition_groups = list(dict.fromkeys(record.condition_group for record in records))
    else:
        condition_groups = sort_condition_groups(records, sort_descending)

    # One cell per (condition_group, age_group); cells without a record stay blank
    cells = {record.key: record.proportion for record in records}
    z = [
        [cells.get(f"{condition_group}||{age_group}") for age_group in age_groups]
        for condition_group in condition_groups
    ]
    proportions = [record.proportion for record in records]

    fig = go.Figure(
        go.Heatmap(
            x=age_groups,
            y=condition_groups,
            z=z,
            zmin=min(proportions),
            zmax=max(proportions),
            colorscale="Blues",
            xgap=2,
            ygap=2,
            colorbar={"title": {"text": "Proportion (%)"}},
            hovertemplate=(
                "<b>Condition:</b> %{y}<br>"
                "<b>Age group:</b> %{x}<br>"
                "<b>Proportion:</b> %{z}<extra></extra>"
            ),
        )
    )
    fig.update_layout(
        title="Long-term conditions by age group",
        width=1050,
        height=650,
        margin={"t": 80, "r": 30, "b": 90, "l": 260},
        xaxis={"title": {"text": "Age group"}, "tickangle": -35, "type": "category"},
        # first category at the top
        yaxis={"type": "category", "categoryorder": "array", "categoryarray": condition_groups,
               "autorange": "reversed"},
        updatemenus=[{
            "type": "buttons",
            "direction": "right",
            "x": 0,
            "y": 1.12,
            "xanchor": "left",
            "showactive": True,
            "buttons": [
                {
                    "label": _sort_label(descending),
                    "method": "relayout",
                    "args": [{"yaxis.categoryarray": sort_condition_groups(records, descending)}],
                }
                for descending in (True, False)
            ],
        }],
    )
    return fig


# ------------------------------------------------------------------------------
# Line chart
# ------------------------------------------------------------------------------


def filter_year_range(
        records: typing.Sequence[LifeExpectancyRecord],
        start: int | None = None,
        end: int | None = None,
) -> list[LifeExpectancyRecord]:
    """
    Records with start <= year <= end, ascending by year.
    Reversed bounds are swapped; a None bound is open.
    """
    if start is not None and end is not None and start > end:
        start, end = end, start
    return sorted(
        (
            record for record in records
            if (start is None or record.year >= start) and (end is None or record.year <= end)
        ),
        key=lambda record: record.year,
    )


def nearest_record(records: typing.Sequence[LifeExpectancyRecord], year: float) -> LifeExpectancyRecord | None:
    """
    Closest record to `year` by bisection over year-sorted records.
    Equidistant neighbours resolve to the later year.
    """
    if not records:
        return None
    ordered = sorted(records, key=lambda record: record.year)
    years = [record.year for record in ordered]
    i = bisect.bisect_left(years, year)
    if i <= 0:
        return ordered[0]
    if i >= len(ordered):
        return ordered[-1]
    before, after = ordered[i - 1], ordered[i]
    return before if (year - before.year) < (after.year - year) else after


def build_line_chart(
        records: typing.Sequence[LifeExpectancyRecord],
        start_year: int | None = None,
        end_year: int | None = None,
        focus_year: float | None = None,
) -> go.Figure:
    if not records:
        raise EmptyParsedData(NO_ROWS_MESSAGE)
    filtered = filter_year_range(records, start_year, end_year)
    if not filtered:
        raise EmptyParsedData(EMPTY_RANGE_MESSAGE)

    years = [record.year for record in filtered]
    values = [record.value for record in filtered]
    y_min, y_max = min(values), max(values)
    pad = (y_max - y_min) * 0.12 or 1

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=years,
        y=values,
        mode="lines+markers",
        name="Life expectancy",
        line={"width": 2},
        marker={"size": 8},
        hovertemplate="<b>Year:</b> %{x}<br><b>Value:</b> %{y}<extra></extra>",
    ))

    if focus_year is not None:
        focus = nearest_record(filtered, focus_year)
        fig.add_vline(x=focus.year, line_dash="dash", line_color=GUIDE_COLOR)
        fig.add_trace(go.Scatter(
            x=[focus.year],
            y=[focus.value],
            mode="markers",
            name=f"{focus.year}",
            marker={"size": 12},
            hovertemplate="<b>Year:</b> %{x}<br><b>Value:</b> %{y}<extra></extra>",
        ))

    fig.update_layout(
        title="Life expectancy at birth",
        width=980,
        height=520,
        margin={"t": 60, "r": 30, "b": 60, "l": 70},
        showlegend=False,
        hovermode="x unified",
        xaxis={
            "title": {"text": "Year"},
            "tickformat": "d",
            "nticks": min(10, len(filtered)),
            "rangeslider": {"visible": True},
        },
        yaxis={"title": {"text": "Life expectancy (value)"}, "range": [y_min - pad, y_max + pad], "nticks": 6},
    )
    return fig


# ------------------------------------------------------------------------------
# Pages
# ------------------------------------------------------------------------------


def build_status_figure(message: str) -> go.Figure:
    """An empty chart area carrying only a visible status line."""
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper",
        yref="paper",
        x=0,
        y=1,
        xanchor="left",
        showarrow=False,
        font={"color": STATUS_COLOR, "size": 14},
    )
    fig.update_layout(xaxis={"visible": False}, yaxis={"visible": False}, height=200)
    return fig


def _write_page(fig: go.Figure, out_path: str | pathlib.Path) -> pathlib.Path:
    out = pathlib.Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out, include_plotlyjs="cdn", full_html=True)
    return out


def render_heatmap_page(
        csv_path: str | pathlib.Path,
        out_path: str | pathlib.Path,
        sort_descending: bool | None = None,
) -> str | None:
    """
    Write the heatmap page. Returns None on success, else the status message shown on the page.
    """
    try:
        fig = build_heatmap(read_condition_records(csv_path), sort_descending)
        status = None
    except (ChartLoadFailure, MissingColumnsError) as e:
        logger.warning(f"Heatmap: {e}")
        status = load_failure_message(csv_path)
    except EmptyParsedData as e:
        status = str(e)

    if status is not None:
        fig = build_status_figure(status)
    _write_page(fig, out_path)
    return status


def render_line_chart_page(
        csv_path: str | pathlib.Path,
        out_path: str | pathlib.Path,
        start_year: int | None = None,
        end_year: int | None = None,
        focus_year: float | None = None,
) -> str | None:
    """
    Write the life expectancy page. Returns None on success, else the status message shown on the page.
    """
    try:
        fig = build_line_chart(read_life_expectancy_records(csv_path), start_year, end_year, focus_year)
        status = None
    except (ChartLoadFailure, MissingColumnsError) as e:
        logger.warning(f"Line chart: {e}")
        status = load_failure_message(csv_path)
    except EmptyParsedData as e:
        status = str(e)

    if status is not None:
        fig = build_status_figure(status)
    _write_page(fig, out_path)
    return status
