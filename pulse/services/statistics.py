"""
Statistics primitives for playground charts.

Linear regression for trend lines and milestone forecasts, Pearson
correlation for scatter plots, descriptive statistics and histogram binning.

Every function is total: degenerate input (empty, single point, zero
variance) produces a defined fallback value instead of NaN/inf or an
exception.

Dependencies:
    - numpy: vectorised sums, mean, median and standard deviation
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np


# (x, y) pair
Point = Tuple[float, float]

# Upper bound on Sturges' bin count where a cap is requested
MAX_AUTO_BINS: int = 20


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def sturges_bin_count(n: int) -> int:
    """Sturges' rule: ceil(log2(n) + 1) bins for n values (n >= 1)."""
    return int(math.ceil(math.log2(n) + 1))


# =============================================================================
# Linear Regression
# =============================================================================


@dataclass(frozen=True)
class LinearRegressionResult:
    """
    Ordinary least squares fit y = slope * x + intercept.

    Attributes:
        slope: Fitted slope.
        intercept: Fitted intercept.
        r_squared: Coefficient of determination; 0 when all y are equal.
    """
    slope: float
    intercept: float
    r_squared: float

    def predict(self, x: float) -> float:
        """Fitted y value at x."""
        return self.slope * x + self.intercept

    def trend_line(self, min_x: float, max_x: float) -> List[Point]:
        """Two end points of the fitted line over [min_x, max_x], for chart overlays."""
        return [(min_x, self.predict(min_x)), (max_x, self.predict(max_x))]


def linear_regression(points: Sequence[Point]) -> Optional[LinearRegressionResult]:
    """
    Fit a least-squares line through (x, y) points.

    Args:
        points: Sequence of (x, y) pairs.

    Returns:
        LinearRegressionResult, or None when there are fewer than 2 points or
        every x is identical (vertical line, slope undefined).

    Example:
        >>> fit = linear_regression([(0, 1), (1, 2), (2, 3)])
        >>> fit.slope, fit.intercept, fit.r_squared
        (1.0, 1.0, 1.0)
    """
    if len(points) < 2:
        return None

    xs = np.array([p[0] for p in points], dtype=np.float64)
    ys = np.array([p[1] for p in points], dtype=np.float64)
    n = len(points)

    sum_x = float(np.sum(xs))
    sum_y = float(np.sum(ys))
    sum_xy = float(np.sum(xs * ys))
    sum_xx = float(np.sum(xs * xs))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0 or not math.isfinite(denominator):
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    predicted = slope * xs + intercept
    ss_total = float(np.sum((ys - mean_y) ** 2))
    ss_residual = float(np.sum((ys - predicted) ** 2))

    r_squared = 0.0 if ss_total == 0 else 1 - ss_residual / ss_total

    return LinearRegressionResult(
        slope=float(slope),
        intercept=float(intercept),
        r_squared=float(r_squared),
    )


# =============================================================================
# Correlation
# =============================================================================


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient between two equally long sequences.

    Returns 0.0 for mismatched lengths, fewer than 2 points, or zero
    variance on either axis.
    """
    if len(x) != len(y) or len(x) < 2:
        return 0.0

    xs = np.asarray(x, dtype=np.float64)
    ys = np.asarray(y, dtype=np.float64)
    n = len(xs)

    sum_x = float(np.sum(xs))
    sum_y = float(np.sum(ys))
    numerator = n * float(np.sum(xs * ys)) - sum_x * sum_y
    spread = (n * float(np.sum(xs * xs)) - sum_x * sum_x) * (n * float(np.sum(ys * ys)) - sum_y * sum_y)

    if spread <= 0:
        return 0.0
    return float(numerator / math.sqrt(spread))


# =============================================================================
# Descriptive Statistics
# =============================================================================


@dataclass(frozen=True)
class DescriptiveStats:
    """min/max/mean/median/population standard deviation/count."""
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    std_dev: float = 0.0
    count: int = 0


def calculate_stats(values: Sequence[float]) -> DescriptiveStats:
    """
    Basic statistics of a numeric sequence.

    The median of an even-length input is the mean of the two middle values.
    Standard deviation is the population form (ddof=0). Empty input returns
    an all-zero record.
    """
    if len(values) == 0:
        return DescriptiveStats()

    arr = np.asarray(values, dtype=np.float64)
    return DescriptiveStats(
        min=float(np.min(arr)),
        max=float(np.max(arr)),
        mean=float(np.mean(arr)),
        median=float(np.median(arr)),
        std_dev=float(np.std(arr)),
        count=int(arr.size),
    )


# =============================================================================
# Histogram Binning
# =============================================================================


@dataclass(frozen=True)
class HistogramBin:
    """One equal-width histogram bin [min, max) with its count."""
    label: str
    min: float
    max: float
    count: int


def create_histogram_bins(
    values: Sequence[float],
    bin_count: Union[int, str] = "auto",
) -> List[HistogramBin]:
    """
    Split values into equal-width bins spanning [min, max].

    Args:
        values: Numeric values to bin.
        bin_count: Number of bins, or "auto" for Sturges' rule.

    Returns:
        List of bins in ascending order; empty for empty input. When every
        value is identical the bin width collapses to 1. The maximum value is
        counted in the last bin.
    """
    if len(values) == 0:
        return []

    arr = np.asarray(values, dtype=np.float64)
    low = float(np.min(arr))
    high = float(np.max(arr))

    if bin_count == "auto":
        num_bins = sturges_bin_count(len(values))
    else:
        num_bins = max(1, int(bin_count))

    bin_width = (high - low) / num_bins or 1.0

    counts = [0] * num_bins
    for value in arr:
        index = min(int(math.floor((value - low) / bin_width)), num_bins - 1)
        if 0 <= index < num_bins:
            counts[index] += 1

    bins: List[HistogramBin] = []
    for i in range(num_bins):
        bin_min = low + i * bin_width
        bin_max = low + (i + 1) * bin_width
        bins.append(HistogramBin(
            label=f"{round_half_up(bin_min)}-{round_half_up(bin_max)}",
            min=bin_min,
            max=bin_max,
            count=counts[i],
        ))
    return bins
