"""
Chart transform utilities for loaded time series.

Pure functions applied between the loader and a chart payload: range
filtering, overlap alignment, percent/period change and the dual-axis
heuristic. Nothing here touches I/O or raises on degenerate input.
"""

from typing import List, Optional, Sequence

from pulse.models.schemas import DateRange, LoadedMetricData, TimeSeriesPoint
from pulse.services.dates import MONTHLY_PATTERN, normalize_date_format

# Ratio between the largest and smallest per-series maximum above which a
# second y-axis is used
DUAL_AXIS_RATIO: float = 10.0


def find_overlapping_range(datasets: Sequence[LoadedMetricData]) -> Optional[DateRange]:
    """
    Intersect the date spans of several series.

    Each span runs from a dataset's first to its last point (data is sorted
    ascending). Returns [latest start, earliest end], or None when there are
    no datasets, any dataset is empty, or the spans do not intersect.

    Example:
        a spans 2024-01..2024-06, b spans 2024-03..2024-09
        -> DateRange(start='2024-03', end='2024-06')
    """
    if not datasets or any(not d.data for d in datasets):
        return None

    start = max(d.data[0].date for d in datasets)
    end = min(d.data[-1].date for d in datasets)

    if start > end:
        return None
    return DateRange(start=start, end=end)


def filter_by_date_range(
    points: Sequence[TimeSeriesPoint],
    start: str,
    end: str,
) -> List[TimeSeriesPoint]:
    """
    Keep points whose date lies in [start, end].

    With YYYY-MM bounds each point is coarsened to its month first, so a
    daily or weekly point inside the end month is kept.
    """
    if MONTHLY_PATTERN.match(start) and MONTHLY_PATTERN.match(end):
        return [p for p in points if start <= normalize_date_format(p.date) <= end]
    return [p for p in points if start <= p.date <= end]


def normalize_to_percent_change(points: Sequence[TimeSeriesPoint]) -> List[TimeSeriesPoint]:
    """
    Rebase a series to percent change from its first value.

    A zero (or missing) first value returns the input unchanged.
    """
    if not points:
        return []

    base = points[0].value
    if not base:
        return list(points)

    return [
        TimeSeriesPoint(
            date=p.date,
            value=None if p.value is None else (p.value - base) / base * 100,
        )
        for p in points
    ]


def to_period_change(points: Sequence[TimeSeriesPoint]) -> List[TimeSeriesPoint]:
    """
    Convert a cumulative series to period-over-period deltas.

    The first point is consumed as the baseline, so n points become n - 1.
    Fewer than 2 points returns the input unchanged.
    """
    if len(points) < 2:
        return list(points)

    changes: List[TimeSeriesPoint] = []
    for previous, current in zip(points, points[1:]):
        if previous.value is None or current.value is None:
            value = None
        else:
            value = current.value - previous.value
        changes.append(TimeSeriesPoint(date=current.date, value=value))
    return changes


def needs_dual_axis(datasets: Sequence[LoadedMetricData]) -> bool:
    """True when per-series maxima differ by more than DUAL_AXIS_RATIO."""
    if len(datasets) < 2:
        return False

    maxima = []
    for dataset in datasets:
        values = [p.value for p in dataset.data if p.value is not None]
        if not values:
            return False
        maxima.append(max(values))

    smallest = min(maxima)
    largest = max(maxima)
    return smallest > 0 and largest / smallest > DUAL_AXIS_RATIO


def apply_exclude_zero(dataset: LoadedMetricData) -> LoadedMetricData:
    """
    Hide sentinel zeros for metrics flagged `excludeZero`.

    Loaders return raw zeros; chart payloads pass through here so a 0 that
    means "not yet measured" is not drawn as a real value.
    """
    if not dataset.excludeZero:
        return dataset
    return dataset.model_copy(
        update={"data": [p for p in dataset.data if p.value != 0]}
    )


__all__ = [
    "DUAL_AXIS_RATIO",
    "normalize_date_format",
    "find_overlapping_range",
    "filter_by_date_range",
    "normalize_to_percent_change",
    "to_period_change",
    "needs_dual_axis",
    "apply_exclude_zero",
]
